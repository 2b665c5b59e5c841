# routers/leaves.py
"""
Employee leave routes: multi-day applications and reviews.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_employee
from models import Employee, EmployeeLeave, LeaveStatus
from schemas.leave import LeaveApply, LeaveReview
from services.audit_service import write_audit_log
from services.leave_service import (
     LeaveError,
     apply_for_leave,
     approved_dates,
     cancel_leave,
     leave_list_query,
     pending_review_count,
     review_leave,
     scope_leaves,
)
from utils.serializers import row_to_dict

router = APIRouter(prefix="/api/leaves", tags=["leaves"])

LIST_LIMIT = 200


def _get_leave_or_404(db: Session, leave_id: int) -> EmployeeLeave:
     leave = db.query(EmployeeLeave).filter(EmployeeLeave.id == leave_id).first()
     if not leave:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Leave not found")
     return leave


@router.get("", summary="List leaves")
def list_leaves(
     employee_id: Optional[int] = Query(None),
     status_filter: Optional[LeaveStatus] = Query(None, alias="status"),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     query = scope_leaves(leave_list_query(db), user, employee_id)
     if status_filter is not None:
          query = query.filter(EmployeeLeave.status == status_filter)
     rows = query.order_by(EmployeeLeave.applied_at.desc(), EmployeeLeave.id.desc()).limit(LIST_LIMIT).all()
     return {"leaves": [row_to_dict(row) for row in rows], "pending_count": pending_review_count(db, user)}


@router.get("/blocked-dates", summary="Approved leave dates for an employee")
def blocked_dates(
     employee_id: Optional[int] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     leaves = approved_dates(db, employee_id or user["id"])
     return {
          "blocked_dates": [
               {"leave_date": leave.leave_date, "leave_type": leave.leave_type}
               for leave in leaves
          ]
     }


@router.post("", status_code=status.HTTP_201_CREATED, summary="Apply for one or more days of leave")
def apply_leave(
     body: LeaveApply,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     """
     Apply for leave on `leave_date` and/or every date in `dates`.
     Dates already holding a pending or approved leave are skipped.
     """
     employee = db.query(Employee).filter(Employee.id == user["id"]).first()
     inserted, skipped = apply_for_leave(db, employee, body.all_dates(), body.leave_type.value, body.reason)
     if not inserted:
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Leave already applied for the selected date(s)")

     inserted_dates = [leave.leave_date.isoformat() for leave in inserted]
     write_audit_log(
          db, "leave_applied", "employee", employee.id,
          f"Leave applied for: {', '.join(inserted_dates)} ({body.leave_type.value})", user,
     )
     db.commit()

     message = f"Leave applied for {len(inserted)} day(s)"
     if skipped:
          message += f". {len(skipped)} skipped (duplicate)."
     return {
          "message": message,
          "inserted": inserted_dates,
          "skipped": [d.isoformat() for d in skipped],
     }


@router.patch("/{leave_id}", summary="Approve or reject a leave")
def review(
     leave_id: int,
     body: LeaveReview,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     leave = _get_leave_or_404(db, leave_id)
     try:
          review_leave(db, leave, user, body.status, body.remarks)
     except LeaveError as e:
          raise HTTPException(status_code=e.status_code, detail=str(e))

     write_audit_log(
          db, f"leave_{body.status.value.lower()}", "employee", leave.employee_id,
          f"Leave {body.status.value.lower()} for {leave.leave_date.isoformat()}", user,
     )
     db.commit()
     return {"message": f"Leave {body.status.value.lower()} successfully"}


@router.delete("/{leave_id}", summary="Cancel one's own pending leave")
def delete_leave(
     leave_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     leave = _get_leave_or_404(db, leave_id)
     try:
          cancel_leave(db, leave, user["id"])
     except LeaveError as e:
          raise HTTPException(status_code=e.status_code, detail=str(e))
     db.commit()
     return {"message": "Leave cancelled"}
