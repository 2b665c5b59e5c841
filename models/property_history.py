# models/property_history.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from .base import Base


class PropertyHistory(Base):
     """
     Append-only per-unit timeline: ownership, tenancy, occupancy and KYC events.
     """
     __tablename__ = "property_history"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)
     event_type = Column(String(30), nullable=False)  # owner_change, tenant_change, status_change, kyc_update, ...
     description = Column(Text, nullable=True)
     changed_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     changed_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<PropertyHistory(unit_id={self.unit_id}, event_type='{self.event_type}')>"
