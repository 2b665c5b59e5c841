# models/base.py
from sqlalchemy import Enum
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Every model names its table explicitly (__tablename__).
     """


def value_enum(enum_cls, name: str) -> Enum:
     """
     String-backed Enum column type that stores the member *values*
     ("In Progress") rather than the member names ("IN_PROGRESS").
     """
     return Enum(
          enum_cls,
          name=name,
          native_enum=False,
          length=32,
          values_callable=lambda members: [m.value for m in members],
     )
