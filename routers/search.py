# routers/search.py
"""
Global search across units and complaints (the header search box).
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user, is_customer
from models import Complaint, ComplaintCategory, Customer, Tenant, Unit
from routers.complaints import scope_complaints
from utils.serializers import row_to_dict

router = APIRouter(prefix="/api/search", tags=["search"])

MIN_QUERY_LENGTH = 2
MAX_RESULTS = 10


@router.get("", summary="Search units and complaints")
def search(
     q: Optional[str] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     term = (q or "").strip()
     if len(term) < MIN_QUERY_LENGTH:
          return {
               "units": [],
               "complaints": [],
               "message": f"Enter at least {MIN_QUERY_LENGTH} characters",
          }
     like = f"%{term}%"

     units_query = (
          db.query(
               Unit,
               Customer.id.label("owner_id"),
               Customer.name.label("owner_name"),
               Tenant.name.label("tenant_name"),
          )
          .outerjoin(Customer, and_(Customer.unit_id == Unit.id, Customer.is_active.is_(True)))
          .outerjoin(Tenant, and_(Tenant.unit_id == Unit.id, Tenant.is_active.is_(True)))
          .filter(
               or_(
                    Unit.unit_no.ilike(like),
                    Customer.name.ilike(like),
                    Customer.email.ilike(like),
                    Customer.mobile1.ilike(like),
                    Tenant.name.ilike(like),
               )
          )
     )
     if is_customer(user):
          units_query = units_query.filter(Unit.id == user.get("unit_id"))
     units = units_query.order_by(Unit.unit_no).limit(MAX_RESULTS).all()

     complaints_query = (
          db.query(
               Complaint.id,
               Complaint.complaint_no,
               Complaint.status,
               Complaint.priority,
               Complaint.description,
               Complaint.created_at,
               Unit.unit_no.label("unit_no"),
               ComplaintCategory.name.label("category_name"),
          )
          .join(Unit, Unit.id == Complaint.unit_id)
          .outerjoin(ComplaintCategory, ComplaintCategory.id == Complaint.category_id)
          .filter(
               or_(
                    Complaint.complaint_no.ilike(like),
                    Complaint.description.ilike(like),
                    Unit.unit_no.ilike(like),
               )
          )
     )
     complaints = (
          scope_complaints(complaints_query, user)
          .order_by(Complaint.created_at.desc(), Complaint.id.desc())
          .limit(MAX_RESULTS)
          .all()
     )

     return {
          "units": [row_to_dict(row) for row in units],
          "complaints": [dict(row._mapping) for row in complaints],
     }
