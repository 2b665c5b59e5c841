# models/internal_complaint.py
import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from .base import Base, value_enum
from .complaint import ComplaintPriority


class InternalComplaintStatus(str, enum.Enum):
     PENDING = "Pending"
     IN_PROGRESS = "In-Progress"
     RESOLVED = "Resolved"


class InternalComplaint(Base):
     """
     Staff-facing complaint (office, equipment, facilities) raised by an employee.
     """
     __tablename__ = "internal_complaints"

     id = Column(Integer, primary_key=True, autoincrement=True)
     complaint_no = Column(String(30), unique=True, nullable=False, index=True)
     reported_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)

     category = Column(String(100), nullable=False)
     sub_category = Column(String(100), nullable=True)
     description = Column(Text, nullable=False)
     photo_data = Column(Text, nullable=True)
     priority = Column(value_enum(ComplaintPriority, "internal_complaint_priority"), default=ComplaintPriority.NORMAL, nullable=False)
     status = Column(
          value_enum(InternalComplaintStatus, "internal_complaint_status"),
          default=InternalComplaintStatus.PENDING,
          nullable=False,
          index=True,
     )

     assigned_to_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)
     assigned_at = Column(DateTime, nullable=True)
     resolved_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     resolved_at = Column(DateTime, nullable=True)
     resolution_notes = Column(Text, nullable=True)

     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<InternalComplaint(id={self.id}, complaint_no='{self.complaint_no}', status='{self.status.value}')>"
