# models/unit.py
import enum

from sqlalchemy import Column, Integer, String, Numeric, DateTime, func
from .base import Base


class UnitParticulars(str, enum.Enum):
     """Occupancy status of a unit."""
     VACANT = "Vacant"
     OCCUPIED = "Occupied"
     UNDER_CONSTRUCTION = "Under Construction"


class Unit(Base):
     """
     Unit model - a physical flat / property inside the township.
     At most one active Customer (owner) and one active Tenant per unit.
     """
     __tablename__ = "units"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_no = Column(String(20), unique=True, nullable=False, index=True)
     particulars = Column(String(50), default=UnitParticulars.VACANT.value, nullable=False)
     billing_area = Column(Numeric(10, 2), nullable=True)
     area_unit = Column(String(20), nullable=True)  # sq.ft, sq.m

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<Unit(id={self.id}, unit_no='{self.unit_no}', particulars='{self.particulars}')>"
