# schemas/customer.py
"""
Pydantic schemas for owners (customers) and their tenants.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .validators import not_blank


class CustomerCreate(BaseModel):
     """Schema for adding an owner to a unit."""
     unit_id: int = Field(..., gt=0, description="Unit the owner holds")
     name: str = Field(..., min_length=1, max_length=200)
     email: Optional[str] = Field(None, max_length=255, description="Login email, unique among active owners")
     mobile1: Optional[str] = Field(None, max_length=30)
     mobile2: Optional[str] = Field(None, max_length=30)
     address: Optional[str] = None

     @field_validator("name")
     @classmethod
     def strip_name(cls, value):
          return not_blank(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "unit_id": 12,
                    "name": "Ravi Kumar",
                    "email": "ravi.kumar@example.com",
                    "mobile1": "9876543210",
                    "address": "Flat 101, Tower A"
               }
          }
     )


class CustomerUpdate(BaseModel):
     """Contact fields only; the unit cannot be changed here. `name` may not be cleared."""
     name: Optional[str] = Field(None, min_length=1, max_length=200)
     email: Optional[str] = Field(None, max_length=255)
     mobile1: Optional[str] = Field(None, max_length=30)
     mobile2: Optional[str] = Field(None, max_length=30)
     address: Optional[str] = None

     @field_validator("name")
     @classmethod
     def strip_name(cls, value):
          return not_blank(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "mobile2": "9123456780"
               }
          }
     )


class TenantCreate(BaseModel):
     name: str = Field(..., min_length=1, max_length=200)
     email: Optional[str] = Field(None, max_length=255)
     mobile1: Optional[str] = Field(None, max_length=30)
     mobile2: Optional[str] = Field(None, max_length=30)
     tenancy_start: Optional[date] = None
     tenancy_expiry: Optional[date] = None

     @field_validator("name")
     @classmethod
     def strip_name(cls, value):
          return not_blank(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Anita Shah",
                    "mobile1": "9988776655",
                    "tenancy_start": "2026-04-01",
                    "tenancy_expiry": "2027-03-31"
               }
          }
     )
