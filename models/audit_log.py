# models/audit_log.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from .base import Base


class AuditLog(Base):
     """
     Append-only audit trail of who did what to which entity.
     """
     __tablename__ = "audit_logs"

     id = Column(Integer, primary_key=True, autoincrement=True)
     action = Column(String(50), nullable=False, index=True)
     entity_type = Column(String(50), nullable=False)
     entity_id = Column(Integer, nullable=True)
     description = Column(Text, nullable=True)
     actor_type = Column(String(20), nullable=False)  # customer, employee, system
     actor_id = Column(Integer, nullable=True)
     actor_name = Column(String(200), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)

     def __repr__(self):
          return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity_type}#{self.entity_id})>"
