# services/complaint_service.py
"""
Complaint Service - numbering and the status state machine.

Handlers call `move_complaint` for every lifecycle change so that the
allowed transitions (models.complaint.COMPLAINT_TRANSITIONS) are enforced in
one place.
"""
import logging
import random
from datetime import date, datetime
from typing import Optional

from sqlalchemy.orm import Session

from models import Complaint, ComplaintStatus, InternalComplaint

logger = logging.getLogger("emperium.complaints")

MAX_NUMBER_ATTEMPTS = 20


class InvalidTransition(ValueError):
     """Raised when a complaint cannot move from its current status to the target."""

     def __init__(self, current: ComplaintStatus, target: ComplaintStatus):
          self.current = current
          self.target = target
          super().__init__(f"Cannot move complaint from {current.value} to {target.value}")


def generate_complaint_no(prefix: str = "EC", today: Optional[date] = None) -> str:
     """EC-YYMMDD-NNNN with a random 4-digit suffix."""
     today = today or date.today()
     return f"{prefix}-{today.strftime('%y%m%d')}-{random.randint(1000, 9999)}"


def next_complaint_no(db: Session, prefix: str = "EC", model=Complaint) -> str:
     """Generate a number not yet used in `model`'s table."""
     for _ in range(MAX_NUMBER_ATTEMPTS):
          candidate = generate_complaint_no(prefix)
          exists = db.query(model.id).filter(model.complaint_no == candidate).first()
          if not exists:
               return candidate
     raise RuntimeError(f"Could not allocate a unique {prefix} complaint number")


def next_internal_complaint_no(db: Session) -> str:
     return next_complaint_no(db, prefix="IC", model=InternalComplaint)


def move_complaint(complaint: Complaint, target: ComplaintStatus, actor: dict, **fields) -> Complaint:
     """
     Move a complaint to `target`, stamping the matching timestamp columns.
     Extra keyword arguments are written to the complaint as-is.

     Raises:
          InvalidTransition: if `target` is not reachable from the current status.
     """
     if not complaint.can_move_to(target):
          raise InvalidTransition(complaint.status, target)

     now = datetime.utcnow()
     previous = complaint.status
     complaint.status = target
     complaint.updated_at = now

     if target == ComplaintStatus.ASSIGNED:
          complaint.assigned_by_employee_id = actor.get("id")
          complaint.assigned_at = now
     elif target == ComplaintStatus.IN_PROGRESS:
          complaint.started_at = now
     elif target == ComplaintStatus.RESOLVED:
          complaint.resolved_by_employee_id = actor.get("id")
          complaint.resolved_at = now
     elif target == ComplaintStatus.CLOSED:
          complaint.closed_at = now

     for key, value in fields.items():
          setattr(complaint, key, value)

     logger.info(
          "Complaint %s: %s -> %s by %s#%s",
          complaint.complaint_no, previous.value, target.value, actor.get("type"), actor.get("id"),
     )
     return complaint
