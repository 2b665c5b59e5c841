# models/leave.py
import enum

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, func
from .base import Base, value_enum


class LeaveStatus(str, enum.Enum):
     PENDING = "Pending"
     APPROVED = "Approved"
     REJECTED = "Rejected"


class LeaveType(str, enum.Enum):
     FULL_DAY = "Full Day"
     FIRST_HALF = "First Half"
     SECOND_HALF = "Second Half"


class EmployeeLeave(Base):
     """
     EmployeeLeave model - one row per leave day applied for by an employee.
     Approved leave days block visit scheduling for that employee.
     """
     __tablename__ = "employee_leaves"

     id = Column(Integer, primary_key=True, autoincrement=True)
     employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
     leave_date = Column(Date, nullable=False, index=True)
     leave_type = Column(String(20), default=LeaveType.FULL_DAY.value, nullable=False)
     reason = Column(Text, nullable=True)
     status = Column(value_enum(LeaveStatus, "leave_status"), default=LeaveStatus.PENDING, nullable=False, index=True)

     reviewed_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     reviewed_at = Column(DateTime, nullable=True)
     review_remarks = Column(Text, nullable=True)

     applied_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<EmployeeLeave(id={self.id}, employee_id={self.employee_id}, leave_date={self.leave_date}, status='{self.status.value}')>"
