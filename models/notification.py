# models/notification.py
from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, ForeignKey, func
from .base import Base


class Notification(Base):
     """
     In-app notification for a customer or an employee.
     Rows are append-only; only `is_read` changes after insert.
     """
     __tablename__ = "notifications"

     id = Column(Integer, primary_key=True, autoincrement=True)
     recipient_type = Column(String(20), nullable=False)  # customer, employee
     recipient_id = Column(Integer, nullable=False, index=True)
     title = Column(String(200), nullable=False)
     message = Column(Text, nullable=False)
     type = Column(String(20), default="info", nullable=False)  # info, success, warning, alert
     complaint_id = Column(Integer, ForeignKey("complaints.id"), nullable=True)
     is_read = Column(Boolean, default=False, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<Notification(id={self.id}, to={self.recipient_type}#{self.recipient_id}, title='{self.title}')>"
