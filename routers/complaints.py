# routers/complaints.py
"""
Complaint API routes.

Lifecycle: Open -> Assigned -> Scheduled -> In Progress -> Resolved -> Closed
(see models.complaint.COMPLAINT_TRANSITIONS). Every transition writes an
audit row and notifies the people concerned.

Role-based access:
- Customer: raise complaints for own unit, see own complaints only
- Employee: see assigned complaints, schedule / start / resolve own assignments
- Managers: assign and close, see everything
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, aliased

from database import get_session
from dependencies import get_current_user, is_customer, is_manager, require_employee, require_manager
from models import (
     AuditLog,
     Complaint,
     ComplaintCategory,
     ComplaintPriority,
     ComplaintStatus,
     ComplaintSubCategory,
     Customer,
     Employee,
     Unit,
)
from schemas.complaint import ComplaintAssign, ComplaintCreate, ComplaintResolve, ComplaintSchedule
from services.audit_service import write_audit_log
from services.complaint_service import InvalidTransition, move_complaint, next_complaint_no
from services.leave_service import has_approved_leave
from services.notification_service import create_notification, notify_managers
from utils.pagination import paginate
from utils.serializers import model_to_dict, row_to_dict

router = APIRouter(prefix="/api/complaints", tags=["complaints"])

BLOB_FIELDS = ("photo_data", "resolution_photo_data")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _complaint_query(db: Session):
     """Complaints joined with the names the UI shows next to them."""
     assignee = aliased(Employee)
     assigner = aliased(Employee)
     resolver = aliased(Employee)
     return (
          db.query(
               Complaint,
               Unit.unit_no.label("unit_no"),
               ComplaintCategory.name.label("category_name"),
               ComplaintCategory.icon.label("category_icon"),
               ComplaintSubCategory.name.label("sub_category_name"),
               Customer.name.label("customer_name"),
               Customer.mobile1.label("customer_mobile"),
               assignee.name.label("assigned_to_name"),
               assigner.name.label("assigned_by_name"),
               resolver.name.label("resolved_by_name"),
          )
          .join(Unit, Unit.id == Complaint.unit_id)
          .outerjoin(ComplaintCategory, ComplaintCategory.id == Complaint.category_id)
          .outerjoin(ComplaintSubCategory, ComplaintSubCategory.id == Complaint.sub_category_id)
          .outerjoin(Customer, Customer.id == Complaint.customer_id)
          .outerjoin(assignee, assignee.id == Complaint.assigned_to_employee_id)
          .outerjoin(assigner, assigner.id == Complaint.assigned_by_employee_id)
          .outerjoin(resolver, resolver.id == Complaint.resolved_by_employee_id)
     )


def scope_complaints(query, user: dict):
     """Restrict a complaint query to what the caller may see."""
     if is_customer(user):
          return query.filter(Complaint.customer_id == user["id"])
     if not is_manager(user):
          return query.filter(Complaint.assigned_to_employee_id == user["id"])
     return query


def _get_complaint_or_404(db: Session, complaint_id: int) -> Complaint:
     complaint = db.query(Complaint).filter(Complaint.id == complaint_id).first()
     if not complaint:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Complaint not found")
     return complaint


def _ensure_own_assignment(user: dict, complaint: Complaint) -> None:
     """Plain employees may only act on complaints assigned to them."""
     if not is_manager(user) and complaint.assigned_to_employee_id != user["id"]:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Complaint is not assigned to you")


def _move(complaint: Complaint, target: ComplaintStatus, user: dict, **fields) -> None:
     try:
          move_complaint(complaint, target, user, **fields)
     except InvalidTransition as e:
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


def _notify_customer(db: Session, complaint: Complaint, title: str, message: str, type: str = "info") -> None:
     if complaint.customer_id:
          create_notification(db, "customer", complaint.customer_id, title, message, type, complaint.id)


def _detail(db: Session, complaint_id: int) -> dict:
     row = _complaint_query(db).filter(Complaint.id == complaint_id).first()
     return row_to_dict(row)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@router.get("/categories/list", summary="Active categories with sub-categories")
def list_categories(db: Session = Depends(get_session)):
     categories = (
          db.query(ComplaintCategory)
          .filter(ComplaintCategory.is_active.is_(True))
          .order_by(ComplaintCategory.sort_order, ComplaintCategory.name)
          .all()
     )
     subs = (
          db.query(ComplaintSubCategory)
          .filter(ComplaintSubCategory.is_active.is_(True))
          .order_by(ComplaintSubCategory.sort_order, ComplaintSubCategory.name)
          .all()
     )
     by_category = {}
     for sub in subs:
          by_category.setdefault(sub.category_id, []).append(model_to_dict(sub))

     return {
          "categories": [
               model_to_dict(category, sub_categories=by_category.get(category.id, []))
               for category in categories
          ]
     }


@router.get("", summary="List complaints")
def list_complaints(
     page: int = Query(1, ge=1),
     limit: int = Query(20, ge=1, le=200),
     status_filter: Optional[ComplaintStatus] = Query(None, alias="status"),
     category: Optional[int] = Query(None, description="Category id"),
     priority: Optional[ComplaintPriority] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     query = scope_complaints(_complaint_query(db), user)
     if status_filter is not None:
          query = query.filter(Complaint.status == status_filter)
     if category is not None:
          query = query.filter(Complaint.category_id == category)
     if priority is not None:
          query = query.filter(Complaint.priority == priority)

     query = query.order_by(Complaint.created_at.desc(), Complaint.id.desc())
     rows, pagination = paginate(query, page, limit)
     return {
          "complaints": [row_to_dict(row, exclude=BLOB_FIELDS) for row in rows],
          "pagination": pagination,
     }


@router.get("/{complaint_id}", summary="Get a complaint with its audit trail")
def get_complaint(
     complaint_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     row = _complaint_query(db).filter(Complaint.id == complaint_id).first()
     if row is None:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Complaint not found")
     complaint = row[0]
     if is_customer(user) and complaint.customer_id != user["id"]:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only view your own complaints")

     trail = (
          db.query(AuditLog)
          .filter(AuditLog.entity_type == "complaint", AuditLog.entity_id == complaint.id)
          .order_by(AuditLog.created_at, AuditLog.id)
          .all()
     )
     return {"complaint": row_to_dict(row), "audit_trail": [model_to_dict(entry) for entry in trail]}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Raise a complaint")
def create_complaint(
     body: ComplaintCreate,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     """
     Raise a complaint for a unit.

     - Customers may only raise complaints for their own unit
     - Staff-raised complaints are attached to the unit's active owner
     - All active managers are notified
     """
     if is_customer(user) and body.unit_id != user.get("unit_id"):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only raise complaints for your own unit")

     unit = db.query(Unit).filter(Unit.id == body.unit_id).first()
     if not unit:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found")

     category = (
          db.query(ComplaintCategory)
          .filter(ComplaintCategory.id == body.category_id, ComplaintCategory.is_active.is_(True))
          .first()
     )
     if not category:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid category")
     if body.sub_category_id is not None:
          sub = (
               db.query(ComplaintSubCategory.id)
               .filter(
                    ComplaintSubCategory.id == body.sub_category_id,
                    ComplaintSubCategory.category_id == category.id,
               )
               .first()
          )
          if not sub:
               raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Sub-category does not belong to the category")

     if is_customer(user):
          customer_id = user["id"]
     else:
          owner = (
               db.query(Customer.id)
               .filter(Customer.unit_id == unit.id, Customer.is_active.is_(True))
               .first()
          )
          customer_id = owner[0] if owner else None

     complaint = Complaint(
          complaint_no=next_complaint_no(db),
          unit_id=unit.id,
          customer_id=customer_id,
          category_id=category.id,
          sub_category_id=body.sub_category_id,
          description=body.description.strip(),
          photo_data=body.photo_data,
          priority=body.priority,
          status=ComplaintStatus.OPEN,
     )
     db.add(complaint)
     db.flush()

     write_audit_log(
          db, "complaint_created", "complaint", complaint.id,
          f"Complaint {complaint.complaint_no} raised for unit {unit.unit_no} ({category.name})", user,
     )
     notify_managers(
          db,
          "New Complaint",
          f"{complaint.complaint_no}: {category.name} complaint for unit {unit.unit_no}",
          "alert" if complaint.priority in (ComplaintPriority.HIGH, ComplaintPriority.URGENT) else "info",
          complaint.id,
     )
     db.commit()

     return {"message": "Complaint registered successfully", "complaint": _detail(db, complaint.id)}


@router.post("/{complaint_id}/assign", summary="Assign a complaint to an employee")
def assign_complaint(
     complaint_id: int,
     body: ComplaintAssign,
     db: Session = Depends(get_session),
     user: dict = Depends(require_manager),
):
     complaint = _get_complaint_or_404(db, complaint_id)
     employee = (
          db.query(Employee)
          .filter(Employee.id == body.employee_id, Employee.is_active.is_(True))
          .first()
     )
     if not employee:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")

     # A (re)assignment drops any visit planned for the previous assignee
     _move(
          complaint, ComplaintStatus.ASSIGNED, user,
          assigned_to_employee_id=employee.id, visit_date=None, visit_time=None,
     )

     write_audit_log(
          db, "complaint_assigned", "complaint", complaint.id,
          f"Complaint {complaint.complaint_no} assigned to {employee.name}", user,
     )
     create_notification(
          db, "employee", employee.id, "Complaint Assigned",
          f"Complaint {complaint.complaint_no} has been assigned to you", "info", complaint.id,
     )
     _notify_customer(
          db, complaint, "Complaint Assigned",
          f"Your complaint {complaint.complaint_no} has been assigned to {employee.name}",
     )
     db.commit()
     return {"message": "Complaint assigned", "complaint": _detail(db, complaint.id)}


@router.post("/{complaint_id}/schedule", summary="Schedule a visit")
def schedule_complaint(
     complaint_id: int,
     body: ComplaintSchedule,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     complaint = _get_complaint_or_404(db, complaint_id)
     _ensure_own_assignment(user, complaint)

     if complaint.assigned_to_employee_id and has_approved_leave(db, complaint.assigned_to_employee_id, body.visit_date):
          raise HTTPException(
               status_code=status.HTTP_409_CONFLICT,
               detail=f"Assigned employee is on approved leave on {body.visit_date.isoformat()}",
          )

     _move(complaint, ComplaintStatus.SCHEDULED, user, visit_date=body.visit_date, visit_time=body.visit_time)

     when = body.visit_date.isoformat() + (f" {body.visit_time}" if body.visit_time else "")
     write_audit_log(
          db, "complaint_scheduled", "complaint", complaint.id,
          f"Visit for {complaint.complaint_no} scheduled on {when}", user,
     )
     _notify_customer(db, complaint, "Visit Scheduled", f"A visit for complaint {complaint.complaint_no} is scheduled on {when}")
     db.commit()
     return {"message": "Visit scheduled", "complaint": _detail(db, complaint.id)}


@router.post("/{complaint_id}/start", summary="Start work on a complaint")
def start_complaint(
     complaint_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     complaint = _get_complaint_or_404(db, complaint_id)
     _ensure_own_assignment(user, complaint)
     _move(complaint, ComplaintStatus.IN_PROGRESS, user)

     write_audit_log(db, "complaint_started", "complaint", complaint.id, f"Work started on {complaint.complaint_no}", user)
     _notify_customer(db, complaint, "Work Started", f"Work on your complaint {complaint.complaint_no} has started")
     db.commit()
     return {"message": "Work started", "complaint": _detail(db, complaint.id)}


@router.post("/{complaint_id}/resolve", summary="Resolve a complaint")
def resolve_complaint(
     complaint_id: int,
     body: ComplaintResolve,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     complaint = _get_complaint_or_404(db, complaint_id)
     _ensure_own_assignment(user, complaint)
     _move(
          complaint, ComplaintStatus.RESOLVED, user,
          resolution_notes=body.resolution_notes,
          resolution_photo_data=body.resolution_photo_data,
     )

     write_audit_log(
          db, "complaint_resolved", "complaint", complaint.id,
          f"Complaint {complaint.complaint_no} resolved" + (f": {body.resolution_notes}" if body.resolution_notes else ""),
          user,
     )
     _notify_customer(
          db, complaint, "Complaint Resolved",
          f"Your complaint {complaint.complaint_no} has been resolved", "success",
     )
     db.commit()
     return {"message": "Complaint resolved", "complaint": _detail(db, complaint.id)}


@router.post("/{complaint_id}/close", summary="Close a complaint")
def close_complaint(
     complaint_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_manager),
):
     complaint = _get_complaint_or_404(db, complaint_id)
     _move(complaint, ComplaintStatus.CLOSED, user)

     write_audit_log(db, "complaint_closed", "complaint", complaint.id, f"Complaint {complaint.complaint_no} closed", user)
     _notify_customer(db, complaint, "Complaint Closed", f"Your complaint {complaint.complaint_no} has been closed")
     db.commit()
     return {"message": "Complaint closed", "complaint": _detail(db, complaint.id)}
