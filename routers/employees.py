# routers/employees.py
"""
Staff account routes.

- Staff: list / view employees
- Managers: edit employees (only an admin may grant or edit the admin role)
- Admin: create, deactivate, reset passwords
"""
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from database import get_session
from dependencies import is_admin, require_admin, require_employee, require_manager
from models import Complaint, ComplaintCategory, Employee, EmployeeRole, Unit
from models.complaint import OPEN_STATUSES
from schemas.employee import EmployeeCreate, EmployeeUpdate, PasswordResetRequest
from services.audit_service import write_audit_log
from services.auth_service import hash_password
from services.seed_service import default_password_for_role
from utils.serializers import model_to_dict, row_to_dict

router = APIRouter(prefix="/api/employees", tags=["employees"])

EMPLOYEE_EXCLUDE = ("password_hash",)


def _get_employee_or_404(db: Session, employee_id: int) -> Employee:
     employee = db.query(Employee).filter(Employee.id == employee_id).first()
     if not employee:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
     return employee


def _ensure_email_free(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
     query = db.query(Employee.id).filter(func.lower(Employee.email) == email.strip().lower())
     if exclude_id is not None:
          query = query.filter(Employee.id != exclude_id)
     if query.first():
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email is already registered")


def _ensure_manager_exists(db: Session, manager_id: Optional[int]) -> None:
     if manager_id is None:
          return
     manager = db.query(Employee.id).filter(Employee.id == manager_id, Employee.is_active.is_(True)).first()
     if not manager:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Reporting manager not found")


@router.get("", summary="List employees")
def list_employees(
     role: Optional[EmployeeRole] = Query(None),
     include_inactive: bool = Query(False),
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     manager = aliased(Employee)
     open_count = (
          db.query(func.count(Complaint.id))
          .filter(
               Complaint.assigned_to_employee_id == Employee.id,
               Complaint.status.in_(OPEN_STATUSES),
          )
          .correlate(Employee)
          .scalar_subquery()
     )
     query = (
          db.query(
               Employee,
               manager.name.label("reporting_manager_name"),
               open_count.label("open_complaints"),
          )
          .outerjoin(manager, manager.id == Employee.reporting_manager_id)
     )
     if not include_inactive:
          query = query.filter(Employee.is_active.is_(True))
     if role is not None:
          query = query.filter(Employee.role == role.value)

     rows = query.order_by(Employee.name).all()
     return {"employees": [row_to_dict(row, exclude=EMPLOYEE_EXCLUDE) for row in rows]}


@router.get("/{employee_id}", summary="Get an employee with open assigned complaints")
def get_employee(
     employee_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_employee),
):
     employee = _get_employee_or_404(db, employee_id)
     manager = (
          db.query(Employee).filter(Employee.id == employee.reporting_manager_id).first()
          if employee.reporting_manager_id
          else None
     )
     complaints = (
          db.query(
               Complaint,
               Unit.unit_no.label("unit_no"),
               ComplaintCategory.name.label("category_name"),
          )
          .join(Unit, Unit.id == Complaint.unit_id)
          .outerjoin(ComplaintCategory, ComplaintCategory.id == Complaint.category_id)
          .filter(
               Complaint.assigned_to_employee_id == employee.id,
               Complaint.status.in_(OPEN_STATUSES),
          )
          .order_by(Complaint.visit_date, Complaint.created_at)
          .all()
     )
     return {
          "employee": model_to_dict(
               employee,
               exclude=EMPLOYEE_EXCLUDE,
               reporting_manager_name=manager.name if manager else None,
          ),
          "complaints": [row_to_dict(row, exclude=("photo_data", "resolution_photo_data")) for row in complaints],
     }


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create an employee")
def create_employee(
     body: EmployeeCreate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_admin),
):
     _ensure_email_free(db, body.email)
     _ensure_manager_exists(db, body.reporting_manager_id)

     employee = Employee(
          name=body.name.strip(),
          email=body.email.strip().lower(),
          role=body.role.value,
          mobile=body.mobile,
          department=body.department,
          reporting_manager_id=body.reporting_manager_id,
          password_hash=hash_password(body.password or default_password_for_role(body.role.value)),
          is_active=True,
     )
     db.add(employee)
     db.flush()

     write_audit_log(
          db, "employee_created", "employee", employee.id,
          f"Employee {employee.name} created with role {employee.role}", user,
     )
     db.commit()
     return {"message": "Employee created successfully", "employee": model_to_dict(employee, exclude=EMPLOYEE_EXCLUDE)}


@router.put("/{employee_id}", summary="Update an employee")
def update_employee(
     employee_id: int,
     body: EmployeeUpdate,
     db: Session = Depends(get_session),
     user: dict = Depends(require_manager),
):
     employee = _get_employee_or_404(db, employee_id)
     changes = body.model_dump(exclude_unset=True)
     if not changes:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

     touches_admin = employee.role == EmployeeRole.ADMIN.value or changes.get("role") == EmployeeRole.ADMIN
     if touches_admin and not is_admin(user):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only an admin can grant or edit the admin role")

     if changes.get("email"):
          _ensure_email_free(db, changes["email"], exclude_id=employee.id)
          changes["email"] = changes["email"].strip().lower()
     if "reporting_manager_id" in changes:
          if changes["reporting_manager_id"] == employee.id:
               raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="An employee cannot report to themself")
          _ensure_manager_exists(db, changes["reporting_manager_id"])
     if changes.get("role") is not None:
          changes["role"] = changes["role"].value
     if changes.get("is_active") is False and employee.id == user["id"]:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate yourself")

     for key, value in changes.items():
          setattr(employee, key, value)

     write_audit_log(
          db, "employee_updated", "employee", employee.id,
          f"Updated {', '.join(sorted(changes))} for {employee.name}", user,
     )
     db.commit()
     return {"message": "Employee updated successfully", "employee": model_to_dict(employee, exclude=EMPLOYEE_EXCLUDE)}


@router.delete("/{employee_id}", summary="Deactivate an employee")
def delete_employee(
     employee_id: int,
     db: Session = Depends(get_session),
     user: dict = Depends(require_admin),
):
     if employee_id == user["id"]:
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot deactivate yourself")
     employee = _get_employee_or_404(db, employee_id)

     employee.is_active = False
     write_audit_log(db, "employee_deleted", "employee", employee.id, f"Employee {employee.name} deactivated", user)
     db.commit()
     return {"message": "Employee deactivated"}


@router.post("/{employee_id}/reset-password", summary="Reset an employee's password")
def reset_password(
     employee_id: int,
     body: Optional[PasswordResetRequest] = Body(None),
     db: Session = Depends(get_session),
     user: dict = Depends(require_admin),
):
     employee = _get_employee_or_404(db, employee_id)
     new_password = body.new_password if body and body.new_password else default_password_for_role(employee.role)

     employee.password_hash = hash_password(new_password)
     write_audit_log(db, "password_reset", "employee", employee.id, f"Password reset for {employee.name}", user)
     db.commit()
     return {"message": "Password reset successfully"}
