# routers/internal_complaints.py
"""
Internal (staff-raised) complaints: Pending -> In-Progress -> Resolved.

Managers see and assign everything; other staff see complaints they
reported or that are assigned to them.
"""
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, aliased

from database import get_session
from dependencies import is_manager, require_admin, require_employee, require_manager
from models import AuditLog, Employee, InternalComplaint, InternalComplaintStatus
from schemas.internal_complaint import InternalComplaintAssign, InternalComplaintCreate, InternalComplaintStatusUpdate
from services.audit_service import write_audit_log
from services.complaint_service import next_internal_complaint_no
from services.notification_service import create_notification, notify_managers
from utils.serializers import model_to_dict, row_to_dict

router = APIRouter(prefix="/api/internal-complaints", tags=["internal-complaints"])

ENTITY = "internal_complaint"


def _query(db: Session):
     reporter = aliased(Employee)
     assignee = aliased(Employee)
     resolver = aliased(Employee)
     return (
          db.query(
               InternalComplaint,
               reporter.name.label("reported_by_name"),
               assignee.name.label("assigned_to_name"),
               resolver.name.label("resolved_by_name"),
          )
          .join(reporter, reporter.id == InternalComplaint.reported_by_employee_id)
          .outerjoin(assignee, assignee.id == InternalComplaint.assigned_to_employee_id)
          .outerjoin(resolver, resolver.id == InternalComplaint.resolved_by_employee_id)
     )


def _is_involved(user: dict, complaint: InternalComplaint) -> bool:
     return user["id"] in (complaint.reported_by_employee_id, complaint.assigned_to_employee_id)


def _get_or_404(db: Session, complaint_id: int) -> InternalComplaint:
     complaint = db.query(InternalComplaint).filter(InternalComplaint.id == complaint_id).first()
     if not complaint:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Internal complaint not found")
     return complaint


@router.get("", summary="List internal complaints")
def list_internal_complaints(
     status_filter: Optional[InternalComplaintStatus] = Query(None, alias="status"),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     query = _query(db)
     if not is_manager(user):
          query = query.filter(
               or_(
                    InternalComplaint.reported_by_employee_id == user["id"],
                    InternalComplaint.assigned_to_employee_id == user["id"],
               )
          )
     if status_filter is not None:
          query = query.filter(InternalComplaint.status == status_filter)

     rows = query.order_by(InternalComplaint.created_at.desc(), InternalComplaint.id.desc()).all()
     return {"complaints": [row_to_dict(row, exclude=("photo_data",)) for row in rows]}


@router.get("/{complaint_id}", summary="Get an internal complaint with its audit trail")
def get_internal_complaint(
     complaint_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     row = _query(db).filter(InternalComplaint.id == complaint_id).first()
     if row is None:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Internal complaint not found")
     if not is_manager(user) and not _is_involved(user, row[0]):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this complaint")

     trail = (
          db.query(AuditLog)
          .filter(AuditLog.entity_type == ENTITY, AuditLog.entity_id == complaint_id)
          .order_by(AuditLog.created_at, AuditLog.id)
          .all()
     )
     return {"complaint": row_to_dict(row), "audit_trail": [model_to_dict(entry) for entry in trail]}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Raise an internal complaint")
def create_internal_complaint(
     body: InternalComplaintCreate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     complaint = InternalComplaint(
          complaint_no=next_internal_complaint_no(db),
          reported_by_employee_id=user["id"],
          category=body.category.strip(),
          sub_category=body.sub_category,
          description=body.description.strip(),
          photo_data=body.photo_data,
          priority=body.priority,
          status=InternalComplaintStatus.PENDING,
     )
     db.add(complaint)
     db.flush()

     write_audit_log(
          db, "internal_complaint_created", ENTITY, complaint.id,
          f"Internal complaint {complaint.complaint_no} raised ({complaint.category})", user,
     )
     notify_managers(
          db, "New Internal Complaint",
          f"{user['name']} raised {complaint.complaint_no}: {complaint.category}",
     )
     db.commit()
     return {"message": "Internal complaint registered", "complaint": model_to_dict(complaint, exclude=("photo_data",))}


@router.post("/{complaint_id}/assign", summary="Assign an internal complaint")
def assign_internal_complaint(
     complaint_id: int,
     body: InternalComplaintAssign,
     db: Session = Depends(get_session),
     user: dict = Depends(require_manager),
):
     complaint = _get_or_404(db, complaint_id)
     if complaint.status == InternalComplaintStatus.RESOLVED:
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Complaint is already resolved")
     employee = db.query(Employee).filter(Employee.id == body.employee_id, Employee.is_active.is_(True)).first()
     if not employee:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")

     complaint.assigned_to_employee_id = employee.id
     complaint.assigned_at = datetime.utcnow()
     complaint.status = InternalComplaintStatus.IN_PROGRESS

     write_audit_log(
          db, "internal_complaint_assigned", ENTITY, complaint.id,
          f"{complaint.complaint_no} assigned to {employee.name}", user,
     )
     create_notification(
          db, "employee", employee.id, "Internal Complaint Assigned",
          f"Internal complaint {complaint.complaint_no} has been assigned to you",
     )
     db.commit()
     return {"message": "Internal complaint assigned", "complaint": model_to_dict(complaint, exclude=("photo_data",))}


@router.patch("/{complaint_id}/status", summary="Update an internal complaint's status")
def update_internal_complaint_status(
     complaint_id: int,
     body: InternalComplaintStatusUpdate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     complaint = _get_or_404(db, complaint_id)
     if not is_manager(user) and not _is_involved(user, complaint):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to update this complaint")

     previous = complaint.status
     complaint.status = body.status
     if body.status == InternalComplaintStatus.RESOLVED:
          complaint.resolved_by_employee_id = user["id"]
          complaint.resolved_at = datetime.utcnow()
          if body.resolution_notes is not None:
               complaint.resolution_notes = body.resolution_notes

     write_audit_log(
          db, "internal_complaint_status", ENTITY, complaint.id,
          f"{complaint.complaint_no}: {previous.value} -> {body.status.value}", user,
     )
     if body.status == InternalComplaintStatus.RESOLVED and complaint.reported_by_employee_id != user["id"]:
          create_notification(
               db, "employee", complaint.reported_by_employee_id, "Internal Complaint Resolved",
               f"Your internal complaint {complaint.complaint_no} has been resolved", "success",
          )
     db.commit()
     return {"message": "Status updated", "complaint": model_to_dict(complaint, exclude=("photo_data",))}


@router.delete("/{complaint_id}", summary="Delete an internal complaint")
def delete_internal_complaint(
     complaint_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_admin),
):
     complaint = _get_or_404(db, complaint_id)
     write_audit_log(
          db, "internal_complaint_deleted", ENTITY, complaint.id,
          f"Internal complaint {complaint.complaint_no} deleted", user,
     )
     db.delete(complaint)
     db.commit()
     return {"message": "Internal complaint deleted"}
