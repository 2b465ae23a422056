"""Immutable lookup tables consumed by the derivation engine.

Bump ``TABLES_VERSION`` whenever a table changes; it is recorded with every
generated program so stored programs can be traced back to the data they used.
"""

TABLES_VERSION = "2024.09.1"
