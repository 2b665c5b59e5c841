# models/employee.py
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from .base import Base


class EmployeeRole(str, enum.Enum):
     """Staff roles. sub_admin and admin are the "manager" roles."""
     EMPLOYEE = "employee"
     SUB_ADMIN = "sub_admin"
     ADMIN = "admin"


MANAGER_ROLES = (EmployeeRole.ADMIN.value, EmployeeRole.SUB_ADMIN.value)


class Employee(Base):
     """
     Employee model - township staff (maintenance crew, sub-admins, admins).
     """
     __tablename__ = "employees"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(200), nullable=False)
     email = Column(String(255), unique=True, nullable=False, index=True)
     mobile = Column(String(30), nullable=True)
     role = Column(String(20), default=EmployeeRole.EMPLOYEE.value, nullable=False)
     department = Column(String(100), nullable=True)
     reporting_manager_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     password_hash = Column(String(255), nullable=True)

     is_active = Column(Boolean, default=True, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     @property
     def is_manager(self) -> bool:
          return self.role in MANAGER_ROLES

     def __repr__(self):
          return f"<Employee(id={self.id}, email='{self.email}', role='{self.role}')>"
