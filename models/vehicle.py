# models/vehicle.py
from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, ForeignKey, func
from .base import Base


class Vehicle(Base):
     """
     Vehicle model - resident vehicles registered against a unit.
     """
     __tablename__ = "vehicles"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)
     customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)
     tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=True)

     vehicle_number = Column(String(20), nullable=False, index=True)  # stored upper-case
     vehicle_type = Column(String(30), default="Car", nullable=False)
     make = Column(String(100), nullable=True)
     model = Column(String(100), nullable=True)
     color = Column(String(50), nullable=True)

     # Registration certificate (opaque blob)
     rc_file_name = Column(String(255), nullable=True)
     rc_file_data = Column(Text, nullable=True)

     registered_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     is_active = Column(Boolean, default=True, nullable=False)

     registered_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<Vehicle(id={self.id}, vehicle_number='{self.vehicle_number}', unit_id={self.unit_id})>"
