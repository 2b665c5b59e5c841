# services/audit_service.py
"""
Append-only trail writers: audit_logs and property_history.
Both only add rows to the current session; the caller commits.
"""
from typing import Optional

from sqlalchemy.orm import Session

from models import AuditLog, PropertyHistory


def write_audit_log(
     db: Session,
     action: str,
     entity_type: str,
     entity_id: Optional[int],
     description: str,
     actor: dict,
) -> AuditLog:
     entry = AuditLog(
          action=action,
          entity_type=entity_type,
          entity_id=entity_id,
          description=description,
          actor_type=actor.get("type"),
          actor_id=actor.get("id"),
          actor_name=actor.get("name"),
     )
     db.add(entry)
     return entry


def record_property_history(
     db: Session,
     unit_id: int,
     event_type: str,
     description: str,
     employee_id: Optional[int] = None,
) -> PropertyHistory:
     entry = PropertyHistory(
          unit_id=unit_id,
          event_type=event_type,
          description=description,
          changed_by_employee_id=employee_id,
     )
     db.add(entry)
     return entry
