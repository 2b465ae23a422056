"""Client for the onboarding profile store."""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..schemas.profile import UserProfile

logger = structlog.get_logger(__name__)


class ProfileServiceClient:
    def __init__(self, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self._settings = settings or get_settings()
        self._transport = transport

    def _url(self, user_id: str) -> str:
        base = self._settings.PROFILE_SERVICE_URL.rstrip("/")
        return f"{base}/profiles/{user_id}/onboarding"

    async def _get_json(self, url: str, headers: dict[str, str]) -> Any | None:
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.PROFILE_SERVICE_TIMEOUT_SECONDS,
                transport=self._transport,
            ) as client:
                response = await client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("profile_request_failed", url=url, error=str(exc))
            return None

        if response.status_code == 404:
            logger.info("profile_not_found", url=url)
            return None
        if response.status_code != 200:
            logger.error(
                "unexpected_status_code",
                url=url,
                status_code=response.status_code,
                body_preview=response.text[:500] if response.text else "",
            )
            return None
        try:
            return response.json()
        except ValueError:
            logger.error("json_parse_failed", url=url, body_preview=response.text[:500])
            return None

    async def fetch_intake(self, user_id: str) -> UserProfile | None:
        data = await self._get_json(self._url(user_id), headers={"X-User-Id": user_id})
        if not isinstance(data, dict):
            return None
        try:
            return UserProfile.model_validate(data)
        except ValidationError as exc:
            logger.warning("profile_payload_invalid", user_id=user_id, errors=exc.errors(include_url=False))
            return None
