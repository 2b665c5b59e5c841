# routers/auth.py
"""
Authentication routes.

Customers and employees log in separately; both receive a bearer token
whose payload is their identity. Passwords are bcrypt hashes.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

import config
from database import get_session
from dependencies import get_current_user
from models import Customer, Employee, Unit
from schemas.auth import LoginRequest, ChangePasswordRequest
from services.audit_service import write_audit_log
from services.auth_service import (
     create_token,
     customer_identity,
     employee_identity,
     hash_password,
     verify_password,
)
from services.seed_service import set_default_passwords

logger = logging.getLogger("emperium.auth")

router = APIRouter(prefix="/api/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 6


def _invalid_credentials(kind: str, email: str) -> HTTPException:
     logger.warning("Failed %s login for %s", kind, email)
     return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")


@router.post("/customer/login", summary="Customer login")
def customer_login(body: LoginRequest, db: Session = Depends(get_session)):
     email = body.email.strip().lower()
     row = (
          db.query(Customer, Unit)
          .outerjoin(Unit, Unit.id == Customer.unit_id)
          .filter(func.lower(Customer.email) == email, Customer.is_active.is_(True))
          .first()
     )
     if row is None or not verify_password(body.password, row[0].password_hash):
          raise _invalid_credentials("customer", email)

     customer, unit = row
     identity = customer_identity(customer, unit)
     write_audit_log(db, "login", "customer", customer.id, f"Customer {customer.name} logged in", identity)
     db.commit()

     logger.info("Customer #%s logged in", customer.id)
     return {
          "token": create_token(identity),
          "user": {
               **identity,
               "mobile1": customer.mobile1,
               "particulars": unit.particulars if unit else None,
          },
     }


@router.post("/employee/login", summary="Employee login")
def employee_login(body: LoginRequest, db: Session = Depends(get_session)):
     email = body.email.strip().lower()
     employee = (
          db.query(Employee)
          .filter(func.lower(Employee.email) == email, Employee.is_active.is_(True))
          .first()
     )
     if employee is None or not verify_password(body.password, employee.password_hash):
          raise _invalid_credentials("employee", email)

     identity = employee_identity(employee)
     write_audit_log(db, "login", "employee", employee.id, f"Employee {employee.name} logged in", identity)
     db.commit()

     logger.info("Employee #%s (%s) logged in", employee.id, employee.role)
     return {
          "token": create_token(identity),
          "user": {**identity, "department": employee.department, "mobile": employee.mobile},
     }


@router.get("/me", summary="Current identity")
def me(user: dict = Depends(get_current_user)):
     return {"user": user}


@router.post("/change-password", summary="Change own password")
def change_password(
     body: ChangePasswordRequest,
     db: Session = Depends(get_session),
     user: dict = Depends(get_current_user),
):
     model = Customer if user["type"] == "customer" else Employee
     account = db.query(model).filter(model.id == user["id"]).first()

     if not verify_password(body.current_password, account.password_hash):
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")
     if len(body.new_password) < MIN_PASSWORD_LENGTH:
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail=f"New password must be at least {MIN_PASSWORD_LENGTH} characters",
          )

     account.password_hash = hash_password(body.new_password)
     write_audit_log(db, "password_changed", user["type"], user["id"], "Password changed", user)
     db.commit()
     return {"message": "Password changed successfully"}


@router.post("/setup", summary="Reset default passwords")
def setup(db: Session = Depends(get_session)):
     """
     Reset every active account to its role's default password.
     Only available when ALLOW_SETUP is enabled.
     """
     if not config.ALLOW_SETUP:
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Setup is disabled")

     counts = set_default_passwords(db)
     write_audit_log(db, "setup", "system", None, f"Default passwords set: {counts}", {"type": "system", "name": "setup"})
     db.commit()
     return {"message": "Default passwords set", "updated": counts}
