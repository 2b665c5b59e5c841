# services/auth_service.py
"""
Password hashing and bearer-token helpers.

Tokens are HS256 JWTs carrying the caller's identity (id, type, role, name,
and the unit for customers). They are decoded on every request; see
dependencies.get_current_user.
"""
from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

import config

pwd_context = CryptContext(
     schemes=["bcrypt"],
     deprecated="auto",
     bcrypt__rounds=config.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
     return pwd_context.hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
     if not password_hash:
          return False
     try:
          return pwd_context.verify(password, password_hash)
     except ValueError:
          # Malformed / legacy hash in the database
          return False


def create_token(payload: dict) -> str:
     now = datetime.utcnow()
     claims = {
          **payload,
          "iat": now,
          "exp": now + timedelta(hours=config.TOKEN_TTL_HOURS),
     }
     return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
     """Return the token payload, or None if it is malformed, forged or expired."""
     try:
          return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
     except JWTError:
          return None


def customer_identity(customer, unit) -> dict:
     return {
          "id": customer.id,
          "type": "customer",
          "email": customer.email,
          "name": customer.name,
          "unit_id": customer.unit_id,
          "unit_no": unit.unit_no if unit else None,
     }


def employee_identity(employee) -> dict:
     return {
          "id": employee.id,
          "type": "employee",
          "role": employee.role,
          "email": employee.email,
          "name": employee.name,
     }
