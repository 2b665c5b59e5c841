# schemas/validators.py
"""
Shared field checks for request schemas.

Optional fields in update schemas default to None and are then left out of
the update. An explicit JSON null for a NOT NULL column is rejected here so
that it surfaces as a 400 instead of a database error.
"""


def not_null(value):
     if value is None:
          raise ValueError("must not be null")
     return value


def not_blank(value):
     """Strip a required string; whitespace only counts as empty."""
     not_null(value)
     value = value.strip()
     if not value:
          raise ValueError("must not be blank")
     return value
