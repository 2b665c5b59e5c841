# routers/customers.py
"""
Customer (unit owner) and tenant routes.

Role-based access:
- Staff: list, view and edit owners; add / remove tenants
- Managers: add owners (transfers ownership of an occupied unit)
- Admin: remove owners
- Customer: view own record and history only
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

import config
from database import get_session
from dependencies import get_current_user, is_customer, require_admin, require_employee, require_manager
from models import (
     AuditLog,
     Complaint,
     ComplaintCategory,
     Customer,
     Employee,
     KycDocument,
     PropertyHistory,
     Tenant,
     Unit,
     UnitParticulars,
)
from schemas.customer import CustomerCreate, CustomerUpdate, TenantCreate
from services.audit_service import record_property_history, write_audit_log
from services.auth_service import hash_password
from services.kyc_service import active_doc_types_by_entity, completion
from utils.pagination import paginate
from utils.serializers import model_to_dict, row_to_dict

router = APIRouter(prefix="/api/customers", tags=["customers"])

CUSTOMER_EXCLUDE = ("password_hash",)


def _get_customer_or_404(db: Session, customer_id: int) -> Customer:
     customer = db.query(Customer).filter(Customer.id == customer_id).first()
     if not customer:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
     return customer


def _ensure_self_or_staff(user: dict, customer_id: int) -> None:
     if is_customer(user) and user["id"] != customer_id:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only view your own record")


def _ensure_email_free(db: Session, email: Optional[str], exclude_id: Optional[int] = None) -> None:
     if not email:
          return
     query = db.query(Customer.id).filter(
          func.lower(Customer.email) == email.strip().lower(),
          Customer.is_active.is_(True),
     )
     if exclude_id is not None:
          query = query.filter(Customer.id != exclude_id)
     if query.first():
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email is already used by another customer")


def _active_tenant(db: Session, unit_id: int) -> Optional[Tenant]:
     return (
          db.query(Tenant)
          .filter(Tenant.unit_id == unit_id, Tenant.is_active.is_(True))
          .order_by(Tenant.id.desc())
          .first()
     )


def _kyc_summary(db: Session, entity_type: str, entity_id: int) -> dict:
     documents = (
          db.query(KycDocument)
          .filter(KycDocument.entity_type == entity_type, KycDocument.entity_id == entity_id)
          .order_by(KycDocument.doc_type)
          .all()
     )
     return {
          "documents": [model_to_dict(d, exclude=("file_data",)) for d in documents],
          **completion(entity_type, [d.doc_type for d in documents]),
     }


@router.get("", summary="List customers")
def list_customers(
     page: int = Query(1, ge=1),
     limit: int = Query(20, ge=1, le=200),
     search: Optional[str] = Query(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     query = (
          db.query(
               Customer,
               Unit.unit_no.label("unit_no"),
               Unit.particulars.label("particulars"),
          )
          .join(Unit, Unit.id == Customer.unit_id)
          .filter(Customer.is_active.is_(True))
     )
     if search:
          term = f"%{search.strip()}%"
          query = query.filter(
               or_(
                    Customer.name.ilike(term),
                    Customer.email.ilike(term),
                    Unit.unit_no.ilike(term),
                    Customer.mobile1.ilike(term),
               )
          )
     # Numeric unit order (9 before 10) without casting
     query = query.order_by(func.char_length(Unit.unit_no), Unit.unit_no)

     rows, pagination = paginate(query, page, limit)

     customer_ids = [row[0].id for row in rows]
     unit_ids = [row[0].unit_id for row in rows]
     kyc = active_doc_types_by_entity(db, "customer", customer_ids)
     tenants = {}
     if unit_ids:
          for tenant in db.query(Tenant).filter(Tenant.unit_id.in_(unit_ids), Tenant.is_active.is_(True)).all():
               tenants[tenant.unit_id] = tenant

     customers = []
     for row in rows:
          data = row_to_dict(row, exclude=CUSTOMER_EXCLUDE)
          tenant = tenants.get(data["unit_id"])
          data["tenant_name"] = tenant.name if tenant else None
          report = completion("customer", kyc.get(data["id"], ()))
          data["kyc_completion"] = report["completion_percentage"]
          data["kyc_complete"] = report["is_complete"]
          customers.append(data)

     return {"customers": customers, "pagination": pagination}


@router.get("/{customer_id}", summary="Get a customer with tenant, KYC and recent complaints")
def get_customer(
     customer_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     _ensure_self_or_staff(user, customer_id)
     customer = _get_customer_or_404(db, customer_id)
     unit = db.query(Unit).filter(Unit.id == customer.unit_id).first()

     tenant = _active_tenant(db, customer.unit_id) if customer.is_active else None
     complaints = (
          db.query(Complaint, ComplaintCategory.name.label("category_name"))
          .outerjoin(ComplaintCategory, ComplaintCategory.id == Complaint.category_id)
          .filter(Complaint.customer_id == customer.id)
          .order_by(Complaint.created_at.desc(), Complaint.id.desc())
          .limit(10)
          .all()
     )

     return {
          "customer": model_to_dict(
               customer,
               exclude=CUSTOMER_EXCLUDE,
               unit_no=unit.unit_no if unit else None,
               particulars=unit.particulars if unit else None,
               billing_area=unit.billing_area if unit else None,
               area_unit=unit.area_unit if unit else None,
          ),
          "kyc": _kyc_summary(db, "customer", customer.id),
          "tenant": model_to_dict(tenant),
          "tenant_kyc": _kyc_summary(db, "tenant", tenant.id) if tenant else None,
          "complaints": [
               row_to_dict(row, exclude=("photo_data", "resolution_photo_data")) for row in complaints
          ],
     }


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add an owner to a unit")
def create_customer(
     body: CustomerCreate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_manager),
):
     """
     Add an owner. If the unit already has an active owner, ownership is
     transferred: the previous owner is deactivated.
     """
     unit = db.query(Unit).filter(Unit.id == body.unit_id).first()
     if not unit:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found")
     _ensure_email_free(db, body.email)

     previous = (
          db.query(Customer)
          .filter(Customer.unit_id == unit.id, Customer.is_active.is_(True))
          .all()
     )
     for old in previous:
          old.is_active = False

     customer = Customer(
          unit_id=unit.id,
          name=body.name.strip(),
          email=body.email.strip().lower() if body.email else None,
          mobile1=body.mobile1,
          mobile2=body.mobile2,
          address=body.address,
          password_hash=hash_password(config.DEFAULT_CUSTOMER_PASSWORD),
          is_active=True,
     )
     db.add(customer)
     unit.particulars = UnitParticulars.OCCUPIED.value
     db.flush()

     if previous:
          names = ", ".join(old.name for old in previous)
          record_property_history(
               db, unit.id, "owner_change", f"Owner changed from {names} to {customer.name}", user["id"]
          )
     else:
          record_property_history(db, unit.id, "owner_change", f"Owner assigned: {customer.name}", user["id"])
     write_audit_log(
          db, "customer_created", "customer", customer.id,
          f"Owner {customer.name} added to unit {unit.unit_no}", user,
     )
     db.commit()

     return {
          "message": "Customer created successfully",
          "customer": model_to_dict(customer, exclude=CUSTOMER_EXCLUDE, unit_no=unit.unit_no),
          "replaced_customer_ids": [old.id for old in previous],
     }


@router.put("/{customer_id}", summary="Update customer contact details")
def update_customer(
     customer_id: int,
     body: CustomerUpdate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     customer = _get_customer_or_404(db, customer_id)
     changes = body.model_dump(exclude_unset=True)
     if not changes:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

     if changes.get("email"):
          _ensure_email_free(db, changes["email"], exclude_id=customer.id)
          changes["email"] = changes["email"].strip().lower()

     for key, value in changes.items():
          setattr(customer, key, value)

     write_audit_log(
          db, "customer_updated", "customer", customer.id,
          f"Updated {', '.join(sorted(changes))} for {customer.name}", user,
     )
     db.commit()
     return {"message": "Customer updated successfully", "customer": model_to_dict(customer, exclude=CUSTOMER_EXCLUDE)}


@router.delete("/{customer_id}", summary="Deactivate an owner")
def delete_customer(
     customer_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_admin),
):
     customer = _get_customer_or_404(db, customer_id)
     if not customer.is_active:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")

     customer.is_active = False
     tenants = (
          db.query(Tenant)
          .filter(Tenant.unit_id == customer.unit_id, Tenant.is_active.is_(True))
          .all()
     )
     for tenant in tenants:
          tenant.is_active = False

     unit = db.query(Unit).filter(Unit.id == customer.unit_id).first()
     if unit:
          unit.particulars = UnitParticulars.VACANT.value
          record_property_history(db, unit.id, "owner_removed", f"Owner {customer.name} removed", user["id"])

     write_audit_log(db, "customer_deleted", "customer", customer.id, f"Owner {customer.name} deactivated", user)
     db.commit()
     return {"message": "Customer deactivated", "deactivated_tenant_ids": [t.id for t in tenants]}


@router.post("/{customer_id}/tenant", status_code=status.HTTP_201_CREATED, summary="Set the unit's tenant")
def add_tenant(
     customer_id: int,
     body: TenantCreate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     customer = _get_customer_or_404(db, customer_id)
     if not customer.is_active:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Customer is inactive")
     if body.tenancy_start and body.tenancy_expiry and body.tenancy_expiry < body.tenancy_start:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tenancy expiry is before its start")

     previous = (
          db.query(Tenant)
          .filter(Tenant.unit_id == customer.unit_id, Tenant.is_active.is_(True))
          .all()
     )
     for old in previous:
          old.is_active = False

     tenant = Tenant(
          unit_id=customer.unit_id,
          customer_id=customer.id,
          name=body.name.strip(),
          email=body.email,
          mobile1=body.mobile1,
          mobile2=body.mobile2,
          tenancy_start=body.tenancy_start,
          tenancy_expiry=body.tenancy_expiry,
          is_active=True,
     )
     db.add(tenant)

     unit = db.query(Unit).filter(Unit.id == customer.unit_id).first()
     unit.particulars = UnitParticulars.OCCUPIED.value
     db.flush()

     if previous:
          description = f"Tenant changed from {', '.join(t.name for t in previous)} to {tenant.name}"
     else:
          description = f"Tenant added: {tenant.name}"
     record_property_history(db, unit.id, "tenant_change", description, user["id"])
     write_audit_log(db, "tenant_added", "tenant", tenant.id, f"{description} (unit {unit.unit_no})", user)
     db.commit()

     return {"message": "Tenant saved successfully", "tenant": model_to_dict(tenant)}


@router.delete("/{customer_id}/tenant/{tenant_id}", summary="Remove a tenant")
def remove_tenant(
     customer_id: int,
     tenant_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     tenant = (
          db.query(Tenant)
          .filter(Tenant.id == tenant_id, Tenant.customer_id == customer_id, Tenant.is_active.is_(True))
          .first()
     )
     if not tenant:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")

     tenant.is_active = False
     record_property_history(db, tenant.unit_id, "tenant_removed", f"Tenant {tenant.name} removed", user["id"])
     write_audit_log(db, "tenant_removed", "tenant", tenant.id, f"Tenant {tenant.name} removed", user)
     db.commit()
     return {"message": "Tenant removed"}


@router.get("/{customer_id}/history", summary="Property history and audit trail")
def customer_history(
     customer_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     _ensure_self_or_staff(user, customer_id)
     customer = _get_customer_or_404(db, customer_id)

     history = (
          db.query(PropertyHistory, Employee.name.label("changed_by_name"))
          .outerjoin(Employee, Employee.id == PropertyHistory.changed_by_employee_id)
          .filter(PropertyHistory.unit_id == customer.unit_id)
          .order_by(PropertyHistory.changed_at.desc(), PropertyHistory.id.desc())
          .all()
     )
     audit = (
          db.query(AuditLog)
          .filter(AuditLog.entity_type == "customer", AuditLog.entity_id == customer.id)
          .order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
          .all()
     )
     return {
          "property_history": [row_to_dict(row) for row in history],
          "audit_logs": [model_to_dict(entry) for entry in audit],
     }
