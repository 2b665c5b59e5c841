# models/complaint.py
import enum

from sqlalchemy import Column, Integer, String, Boolean, Text, Date, DateTime, ForeignKey, func
from .base import Base, value_enum


class ComplaintStatus(str, enum.Enum):
     """Lifecycle of a resident complaint."""
     OPEN = "Open"
     ASSIGNED = "Assigned"
     SCHEDULED = "Scheduled"
     IN_PROGRESS = "In Progress"
     RESOLVED = "Resolved"
     CLOSED = "Closed"


class ComplaintPriority(str, enum.Enum):
     LOW = "Low"
     NORMAL = "Normal"
     HIGH = "High"
     URGENT = "Urgent"


# Statuses from which each target status may be reached
COMPLAINT_TRANSITIONS = {
     ComplaintStatus.ASSIGNED: {ComplaintStatus.OPEN, ComplaintStatus.ASSIGNED, ComplaintStatus.SCHEDULED},
     ComplaintStatus.SCHEDULED: {ComplaintStatus.ASSIGNED, ComplaintStatus.SCHEDULED},
     ComplaintStatus.IN_PROGRESS: {ComplaintStatus.ASSIGNED, ComplaintStatus.SCHEDULED},
     ComplaintStatus.RESOLVED: {ComplaintStatus.ASSIGNED, ComplaintStatus.SCHEDULED, ComplaintStatus.IN_PROGRESS},
     ComplaintStatus.CLOSED: {
          ComplaintStatus.OPEN,
          ComplaintStatus.ASSIGNED,
          ComplaintStatus.SCHEDULED,
          ComplaintStatus.IN_PROGRESS,
          ComplaintStatus.RESOLVED,
     },
}

OPEN_STATUSES = (ComplaintStatus.ASSIGNED, ComplaintStatus.SCHEDULED, ComplaintStatus.IN_PROGRESS)
FINISHED_STATUSES = (ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED)


class ComplaintCategory(Base):
     __tablename__ = "complaint_categories"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(100), nullable=False)
     icon = Column(String(50), nullable=True)  # font-awesome icon name
     sort_order = Column(Integer, default=0, nullable=False)
     is_active = Column(Boolean, default=True, nullable=False)

     def __repr__(self):
          return f"<ComplaintCategory(id={self.id}, name='{self.name}')>"


class ComplaintSubCategory(Base):
     __tablename__ = "complaint_sub_categories"

     id = Column(Integer, primary_key=True, autoincrement=True)
     category_id = Column(Integer, ForeignKey("complaint_categories.id", ondelete="CASCADE"), nullable=False, index=True)
     name = Column(String(100), nullable=False)
     sort_order = Column(Integer, default=0, nullable=False)
     is_active = Column(Boolean, default=True, nullable=False)

     def __repr__(self):
          return f"<ComplaintSubCategory(id={self.id}, name='{self.name}')>"


class Complaint(Base):
     """
     Complaint model - a maintenance grievance raised against a unit.

     Open -> Assigned -> Scheduled -> In Progress -> Resolved -> Closed.
     Allowed moves are listed in COMPLAINT_TRANSITIONS.
     """
     __tablename__ = "complaints"

     id = Column(Integer, primary_key=True, autoincrement=True)
     complaint_no = Column(String(30), unique=True, nullable=False, index=True)

     # Foreign keys
     unit_id = Column(Integer, ForeignKey("units.id"), nullable=False, index=True)
     customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)
     category_id = Column(Integer, ForeignKey("complaint_categories.id"), nullable=False)
     sub_category_id = Column(Integer, ForeignKey("complaint_sub_categories.id"), nullable=True)

     # Complaint details
     description = Column(Text, nullable=False)
     photo_data = Column(Text, nullable=True)  # opaque blob (data URL)
     priority = Column(value_enum(ComplaintPriority, "complaint_priority"), default=ComplaintPriority.NORMAL, nullable=False)
     status = Column(value_enum(ComplaintStatus, "complaint_status"), default=ComplaintStatus.OPEN, nullable=False, index=True)

     # Assignment
     assigned_to_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True, index=True)
     assigned_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     assigned_at = Column(DateTime, nullable=True)

     # Visit
     visit_date = Column(Date, nullable=True, index=True)
     visit_time = Column(String(20), nullable=True)
     started_at = Column(DateTime, nullable=True)

     # Resolution
     resolved_by_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=True)
     resolved_at = Column(DateTime, nullable=True)
     resolution_notes = Column(Text, nullable=True)
     resolution_photo_data = Column(Text, nullable=True)
     closed_at = Column(DateTime, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def can_move_to(self, target: ComplaintStatus) -> bool:
          return self.status in COMPLAINT_TRANSITIONS.get(target, set())

     def __repr__(self):
          return f"<Complaint(id={self.id}, complaint_no='{self.complaint_no}', status='{self.status.value}')>"
