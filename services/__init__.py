# services/__init__.py
from .complaint_service import InvalidTransition, move_complaint, next_complaint_no, next_internal_complaint_no
from .leave_service import LeaveError, apply_for_leave, review_leave, has_approved_leave

__all__ = [
     "InvalidTransition",
     "move_complaint",
     "next_complaint_no",
     "next_internal_complaint_no",
     "LeaveError",
     "apply_for_leave",
     "review_leave",
     "has_approved_leave",
]
