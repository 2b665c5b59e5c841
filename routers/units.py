# routers/units.py
"""
Unit API routes.

- Staff: list units, change occupancy (particulars)
- Managers: register new units
- Customer: view own unit only
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_current_user, is_customer, require_employee, require_manager
from models import Complaint, Customer, Employee, PropertyHistory, Tenant, Unit, UnitParticulars
from schemas.unit import UnitCreate, UnitUpdate
from services.audit_service import record_property_history, write_audit_log
from services.kyc_service import active_doc_types, completion, document_flags
from utils.pagination import paginate
from utils.serializers import model_to_dict, row_to_dict

router = APIRouter(prefix="/api/units", tags=["units"])


def _with_occupants(db: Session):
     return (
          db.query(
               Unit,
               Customer.id.label("owner_id"),
               Customer.name.label("owner_name"),
               Customer.mobile1.label("owner_mobile"),
               Tenant.id.label("tenant_id"),
               Tenant.name.label("tenant_name"),
          )
          .outerjoin(Customer, and_(Customer.unit_id == Unit.id, Customer.is_active.is_(True)))
          .outerjoin(Tenant, and_(Tenant.unit_id == Unit.id, Tenant.is_active.is_(True)))
     )


@router.get("", summary="List units")
def list_units(
     page: int = Query(1, ge=1),
     limit: int = Query(50, ge=1, le=500),
     particulars: Optional[UnitParticulars] = Query(None),
     search: Optional[str] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     query = _with_occupants(db)
     if particulars is not None:
          query = query.filter(Unit.particulars == particulars.value)
     if search:
          term = f"%{search.strip()}%"
          query = query.filter(
               or_(
                    Unit.unit_no.ilike(term),
                    Customer.name.ilike(term),
                    Tenant.name.ilike(term),
               )
          )
     query = query.order_by(func.char_length(Unit.unit_no), Unit.unit_no)

     rows, pagination = paginate(query, page, limit)
     return {"units": [row_to_dict(row) for row in rows], "pagination": pagination}


@router.get("/{unit_no}", summary="Get a unit with occupants, KYC flags and history")
def get_unit(
     unit_no: str,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     unit = db.query(Unit).filter(Unit.unit_no == unit_no).first()
     if not unit:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found")
     if is_customer(user) and user.get("unit_id") != unit.id:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only view your own unit")

     owner = (
          db.query(Customer)
          .filter(Customer.unit_id == unit.id, Customer.is_active.is_(True))
          .order_by(Customer.id.desc())
          .first()
     )
     tenant = (
          db.query(Tenant)
          .filter(Tenant.unit_id == unit.id, Tenant.is_active.is_(True))
          .order_by(Tenant.id.desc())
          .first()
     )

     owner_docs = active_doc_types(db, "customer", owner.id) if owner else []
     tenant_docs = active_doc_types(db, "tenant", tenant.id) if tenant else []

     stats = dict(
          db.query(Complaint.status, func.count(Complaint.id))
          .filter(Complaint.unit_id == unit.id)
          .group_by(Complaint.status)
          .all()
     )
     history = (
          db.query(PropertyHistory, Employee.name.label("changed_by_name"))
          .outerjoin(Employee, Employee.id == PropertyHistory.changed_by_employee_id)
          .filter(PropertyHistory.unit_id == unit.id)
          .order_by(PropertyHistory.changed_at.desc(), PropertyHistory.id.desc())
          .limit(10)
          .all()
     )

     return {
          "unit": model_to_dict(unit),
          "owner": model_to_dict(owner, exclude=("password_hash",)),
          "tenant": model_to_dict(tenant),
          "owner_kyc": {
               "flags": document_flags("customer", owner_docs),
               **completion("customer", owner_docs),
          } if owner else None,
          "tenant_kyc": {
               "flags": document_flags("tenant", tenant_docs),
               **completion("tenant", tenant_docs),
          } if tenant else None,
          "complaint_stats": {
               "total": sum(stats.values()),
               **{s.value: count for s, count in stats.items()},
          },
          "history": [row_to_dict(row) for row in history],
     }


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a unit")
def create_unit(
     body: UnitCreate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_manager),
):
     unit_no = body.unit_no.strip()
     if db.query(Unit.id).filter(Unit.unit_no == unit_no).first():
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Unit {unit_no} already exists")

     unit = Unit(
          unit_no=unit_no,
          particulars=body.particulars.value,
          billing_area=body.billing_area,
          area_unit=body.area_unit,
     )
     db.add(unit)
     db.flush()

     write_audit_log(db, "unit_created", "unit", unit.id, f"Unit {unit.unit_no} created", user)
     db.commit()
     return {"message": "Unit created successfully", "unit": model_to_dict(unit)}


@router.put("/{unit_id}", summary="Change a unit's particulars")
def update_unit(
     unit_id: int,
     body: UnitUpdate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     unit = db.query(Unit).filter(Unit.id == unit_id).first()
     if not unit:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found")

     previous = unit.particulars
     unit.particulars = body.particulars.value
     if previous != unit.particulars:
          description = f"Status changed from {previous} to {unit.particulars}"
          record_property_history(db, unit.id, "status_change", description, user["id"])
          write_audit_log(db, "unit_updated", "unit", unit.id, f"Unit {unit.unit_no}: {description}", user)
     db.commit()
     return {"message": "Unit updated successfully", "unit": model_to_dict(unit)}
