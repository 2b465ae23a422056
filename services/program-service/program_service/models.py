from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class GeneratedProgram(Base):
    __tablename__ = "generated_programs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    program_data = Column(JSON, nullable=False)  # validated TrainingProgram payload (camelCase)
    scientific_metadata = Column(JSON, nullable=False, default=dict)
    periodization_model = Column(String(64), nullable=False)
    validation_tier = Column(String(16), nullable=False)
    attempts = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("ix_generated_programs_user_id", "user_id"),
        Index("ix_generated_programs_user_active", "user_id", "is_active"),
    )
