# routers/dashboard.py
"""
Dashboard aggregates for the three portals (admin, employee, customer).
"""
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_customer, require_employee, require_manager
from models import (
     Complaint,
     ComplaintCategory,
     ComplaintStatus,
     Customer,
     Employee,
     Tenant,
     Unit,
)
from models.complaint import FINISHED_STATUSES, OPEN_STATUSES
from routers.complaints import list_categories
from services.kyc_service import active_doc_types, complete_owner_count, completion, document_flags
from utils.serializers import model_to_dict, row_to_dict

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

BLOB_FIELDS = ("photo_data", "resolution_photo_data")


def _status_counts(query) -> dict:
     counts = {s.value: 0 for s in ComplaintStatus}
     for complaint_status, count in query.with_entities(Complaint.status, func.count(Complaint.id)).group_by(Complaint.status).all():
          counts[complaint_status.value] = count
     counts["total"] = sum(counts.values())
     return counts


def _recent(db: Session, query, limit: int) -> list:
     rows = (
          query.join(Unit, Unit.id == Complaint.unit_id)
          .outerjoin(ComplaintCategory, ComplaintCategory.id == Complaint.category_id)
          .add_columns(Unit.unit_no.label("unit_no"), ComplaintCategory.name.label("category_name"))
          .order_by(Complaint.created_at.desc(), Complaint.id.desc())
          .limit(limit)
          .all()
     )
     return [row_to_dict(row, exclude=BLOB_FIELDS) for row in rows]


@router.get("/admin", summary="Admin / sub-admin dashboard")
def admin_dashboard(
     db: Session = Depends(get_session),
     user: dict = Depends(require_manager),
):
     particulars = func.lower(Unit.particulars)
     unit_stats = db.query(
          func.count(Unit.id),
          func.sum(case((particulars.like("%occupied%"), 1), else_=0)),
          func.sum(case((particulars.like("%vacant%"), 1), else_=0)),
          func.sum(case((particulars.like("%construction%"), 1), else_=0)),
     ).one()

     open_by_category = (
          db.query(ComplaintCategory.name, func.count(Complaint.id))
          .join(Complaint, Complaint.category_id == ComplaintCategory.id)
          .filter(Complaint.status.not_in(FINISHED_STATUSES))
          .group_by(ComplaintCategory.name)
          .order_by(func.count(Complaint.id).desc())
          .all()
     )

     workload = (
          db.query(
               Employee.id,
               Employee.name,
               Employee.role,
               Employee.department,
               func.sum(case((Complaint.status.in_(OPEN_STATUSES), 1), else_=0)).label("open_complaints"),
               func.sum(case((Complaint.status.in_(FINISHED_STATUSES), 1), else_=0)).label("resolved_complaints"),
          )
          .outerjoin(Complaint, Complaint.assigned_to_employee_id == Employee.id)
          .filter(Employee.is_active.is_(True))
          .group_by(Employee.id, Employee.name, Employee.role, Employee.department)
          .order_by(Employee.name)
          .all()
     )

     return {
          "unit_stats": {
               "total": unit_stats[0] or 0,
               "occupied": unit_stats[1] or 0,
               "vacant": unit_stats[2] or 0,
               "under_construction": unit_stats[3] or 0,
          },
          "complaint_stats": _status_counts(db.query(Complaint)),
          "open_by_category": [{"category": name, "count": count} for name, count in open_by_category],
          "recent_complaints": _recent(db, db.query(Complaint), 10),
          "counts": {
               "customers": db.query(Customer).filter(Customer.is_active.is_(True)).count(),
               "employees": db.query(Employee).filter(Employee.is_active.is_(True)).count(),
               "tenants": db.query(Tenant).filter(Tenant.is_active.is_(True)).count(),
               "kyc_complete_owners": complete_owner_count(db),
          },
          "employee_workload": [
               {
                    "id": row.id,
                    "name": row.name,
                    "role": row.role,
                    "department": row.department,
                    "open_complaints": row.open_complaints or 0,
                    "resolved_complaints": row.resolved_complaints or 0,
               }
               for row in workload
          ],
     }


@router.get("/employee", summary="Employee dashboard")
def employee_dashboard(
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     mine = db.query(Complaint).filter(Complaint.assigned_to_employee_id == user["id"])
     today = date.today()

     open_assigned = _recent(db, mine.filter(Complaint.status.in_(OPEN_STATUSES)), 50)
     todays_visits = (
          db.query(Complaint, Unit.unit_no.label("unit_no"), Customer.name.label("customer_name"), Customer.mobile1.label("customer_mobile"))
          .join(Unit, Unit.id == Complaint.unit_id)
          .outerjoin(Customer, Customer.id == Complaint.customer_id)
          .filter(
               and_(
                    Complaint.assigned_to_employee_id == user["id"],
                    Complaint.visit_date == today,
                    Complaint.status.in_(OPEN_STATUSES),
               )
          )
          .order_by(Complaint.visit_time)
          .all()
     )

     return {
          "complaints": open_assigned,
          "stats": _status_counts(mine),
          "todays_visits": [row_to_dict(row, exclude=BLOB_FIELDS) for row in todays_visits],
     }


@router.get("/customer", summary="Customer dashboard")
def customer_dashboard(
     db: Session = Depends(get_session),
     user: dict = Depends(require_customer),
):
     customer = db.query(Customer).filter(Customer.id == user["id"]).first()
     unit = db.query(Unit).filter(Unit.id == customer.unit_id).first()
     mine = db.query(Complaint).filter(Complaint.customer_id == customer.id)
     uploaded = active_doc_types(db, "customer", customer.id)

     return {
          "profile": model_to_dict(
               customer,
               exclude=("password_hash",),
               unit_no=unit.unit_no if unit else None,
               particulars=unit.particulars if unit else None,
          ),
          "complaints": _recent(db, mine, 20),
          "stats": _status_counts(mine),
          "kyc": {"flags": document_flags("customer", uploaded), **completion("customer", uploaded)},
          "categories": list_categories(db)["categories"],
     }
