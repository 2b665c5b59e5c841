# models/customer.py
from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, ForeignKey, func
from .base import Base


class Customer(Base):
     """
     Customer model - the owner of a unit. Customers log in with email/password.
     Rows are never removed; `is_active` is cleared instead.
     """
     __tablename__ = "customers"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)

     name = Column(String(200), nullable=False)
     email = Column(String(255), nullable=True, index=True)
     mobile1 = Column(String(30), nullable=True)
     mobile2 = Column(String(30), nullable=True)
     address = Column(Text, nullable=True)
     password_hash = Column(String(255), nullable=True)

     is_active = Column(Boolean, default=True, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<Customer(id={self.id}, name='{self.name}', unit_id={self.unit_id})>"
