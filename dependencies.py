# dependencies.py
"""
Request identity and role guards.

verify_token decodes the bearer token; get_current_user additionally
re-loads the account so that deactivated users are rejected even while
their token is still valid. The role guards build on get_current_user.
"""
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from database import get_session
from models import Customer, Employee, Unit, MANAGER_ROLES
from services.auth_service import customer_identity, decode_token, employee_identity


def verify_token(request: Request) -> dict:
     auth = request.headers.get("Authorization")
     if not auth or not auth.startswith("Bearer "):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
     token = auth.split(" ", 1)[1].strip()
     payload = decode_token(token)
     if not payload or payload.get("type") not in ("customer", "employee") or not payload.get("id"):
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
     return payload


def get_current_user(
     payload: dict = Depends(verify_token),
     db: Session = Depends(get_session),
) -> dict:
     """
     The caller's identity, refreshed from the database.

     Returns the same shape as the token payload: {id, type, role?, email,
     name, unit_id?, unit_no?}.
     """
     if payload["type"] == "customer":
          row = (
               db.query(Customer, Unit)
               .outerjoin(Unit, Unit.id == Customer.unit_id)
               .filter(Customer.id == payload["id"])
               .first()
          )
          if row is None or not row[0].is_active:
               raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is inactive")
          return customer_identity(*row)

     employee = db.query(Employee).filter(Employee.id == payload["id"]).first()
     if employee is None or not employee.is_active:
          raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Account is inactive")
     return employee_identity(employee)


def is_customer(user: dict) -> bool:
     return user.get("type") == "customer"


def is_staff(user: dict) -> bool:
     return user.get("type") == "employee"


def is_manager(user: dict) -> bool:
     return is_staff(user) and user.get("role") in MANAGER_ROLES


def is_admin(user: dict) -> bool:
     return is_staff(user) and user.get("role") == "admin"


def require_customer(user: dict = Depends(get_current_user)) -> dict:
     if not is_customer(user):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Customer access only")
     return user


def require_employee(user: dict = Depends(get_current_user)) -> dict:
     if not is_staff(user):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Staff access only")
     return user


def require_manager(user: dict = Depends(get_current_user)) -> dict:
     if not is_manager(user):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Manager access only")
     return user


def require_admin(user: dict = Depends(get_current_user)) -> dict:
     if not is_admin(user):
          raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access only")
     return user
