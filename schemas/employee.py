# schemas/employee.py
"""
Pydantic schemas for staff accounts.
"""
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from models import EmployeeRole
from .validators import not_blank, not_null


class EmployeeCreate(BaseModel):
     """Schema for creating a staff account (admin only)."""
     name: str = Field(..., min_length=1, max_length=200)
     email: str = Field(..., min_length=3, max_length=255, description="Login email (unique)")
     role: EmployeeRole = Field(..., description="employee, sub_admin or admin")
     mobile: Optional[str] = Field(None, max_length=30)
     department: Optional[str] = Field(None, max_length=100)
     reporting_manager_id: Optional[int] = Field(None, gt=0)
     password: Optional[str] = Field(None, min_length=6, description="Defaults to the role's default password")

     @field_validator("name", "email")
     @classmethod
     def strip_required(cls, value):
          return not_blank(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Suresh Patil",
                    "email": "suresh@emperiumcity.in",
                    "role": "employee",
                    "department": "Plumbing",
                    "reporting_manager_id": 2
               }
          }
     )


class EmployeeUpdate(BaseModel):
     """
     Partial update. Only admins may grant or edit the admin role.
     name, email, role and is_active may be omitted but not set to null;
     reporting_manager_id may be null to clear the manager.
     """
     name: Optional[str] = Field(None, min_length=1, max_length=200)
     email: Optional[str] = Field(None, min_length=3, max_length=255)
     role: Optional[EmployeeRole] = None
     mobile: Optional[str] = Field(None, max_length=30)
     department: Optional[str] = Field(None, max_length=100)
     reporting_manager_id: Optional[int] = Field(None, gt=0)
     is_active: Optional[bool] = None

     @field_validator("name", "email")
     @classmethod
     def strip_required(cls, value):
          return not_blank(value)

     @field_validator("role", "is_active")
     @classmethod
     def reject_null(cls, value):
          return not_null(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "department": "Electrical"
               }
          }
     )


class PasswordResetRequest(BaseModel):
     new_password: Optional[str] = Field(None, min_length=6, description="Defaults to the role's default password")
