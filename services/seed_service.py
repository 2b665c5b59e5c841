# services/seed_service.py
"""
Reference data and one-off maintenance tasks.
"""
import logging

from sqlalchemy.orm import Session

import config
from models import ComplaintCategory, ComplaintSubCategory, Customer, Employee, EmployeeRole
from services.auth_service import hash_password

logger = logging.getLogger("emperium.seed")

# (name, icon, [sub-categories])
DEFAULT_CATEGORIES = [
     ("Plumbing", "fa-faucet", ["Leakage", "Blockage", "Tap / Fitting", "Water Supply"]),
     ("Electrical", "fa-bolt", ["Power Failure", "Switch / Socket", "Wiring", "Light Fitting"]),
     ("Carpentry", "fa-hammer", ["Door", "Window", "Furniture", "Lock"]),
     ("Civil", "fa-building", ["Seepage", "Cracks", "Tiles", "Painting"]),
     ("Housekeeping", "fa-broom", ["Common Area Cleaning", "Garbage Collection", "Pest Control"]),
     ("Security", "fa-shield-alt", ["Gate", "CCTV", "Visitor Management"]),
     ("Lift", "fa-elevator", ["Not Working", "Noise", "Door Issue"]),
     ("Other", "fa-ellipsis-h", []),
]


def seed_complaint_categories(db: Session) -> int:
     """Insert the default categories when the table is empty. Returns rows added."""
     if db.query(ComplaintCategory.id).first() is not None:
          return 0

     for order, (name, icon, subs) in enumerate(DEFAULT_CATEGORIES, start=1):
          category = ComplaintCategory(name=name, icon=icon, sort_order=order, is_active=True)
          db.add(category)
          db.flush()
          for sub_order, sub_name in enumerate(subs, start=1):
               db.add(ComplaintSubCategory(category_id=category.id, name=sub_name, sort_order=sub_order, is_active=True))

     logger.info("Seeded %d complaint categories", len(DEFAULT_CATEGORIES))
     return len(DEFAULT_CATEGORIES)


def default_password_for_role(role: str) -> str:
     return {
          EmployeeRole.ADMIN.value: config.DEFAULT_ADMIN_PASSWORD,
          EmployeeRole.SUB_ADMIN.value: config.DEFAULT_SUB_ADMIN_PASSWORD,
     }.get(role, config.DEFAULT_EMPLOYEE_PASSWORD)


def set_default_passwords(db: Session) -> dict:
     """
     Reset every active account to its role's default password.
     Hashes are computed once per role.
     """
     hashes = {}
     counts = {"admin": 0, "sub_admin": 0, "employee": 0, "customer": 0}

     for employee in db.query(Employee).filter(Employee.is_active.is_(True)).all():
          role = employee.role if employee.role in counts else EmployeeRole.EMPLOYEE.value
          if role not in hashes:
               hashes[role] = hash_password(default_password_for_role(role))
          employee.password_hash = hashes[role]
          counts[role] += 1

     customer_hash = hash_password(config.DEFAULT_CUSTOMER_PASSWORD)
     for customer in db.query(Customer).filter(Customer.is_active.is_(True)).all():
          customer.password_hash = customer_hash
          counts["customer"] += 1

     logger.warning("Default passwords reset: %s", counts)
     return counts
