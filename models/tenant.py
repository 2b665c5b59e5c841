# models/tenant.py
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey, func
from .base import Base


class Tenant(Base):
     """
     Tenant model - occupant renting a unit from its owner (customer).
     Only one tenant per unit is active at a time.
     """
     __tablename__ = "tenants"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)
     customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

     # Personal info
     name = Column(String(200), nullable=False)
     email = Column(String(255), nullable=True)
     mobile1 = Column(String(30), nullable=True)
     mobile2 = Column(String(30), nullable=True)

     # Tenancy period
     tenancy_start = Column(Date, nullable=True)
     tenancy_expiry = Column(Date, nullable=True)

     is_active = Column(Boolean, default=True, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<Tenant(id={self.id}, name='{self.name}', unit_id={self.unit_id})>"
