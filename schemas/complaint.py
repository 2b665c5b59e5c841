# schemas/complaint.py
"""
Pydantic schemas for complaint creation and lifecycle actions.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from models import ComplaintPriority
from .validators import not_blank


class ComplaintCreate(BaseModel):
     """Schema for raising a complaint against a unit."""
     unit_id: int = Field(..., gt=0)
     category_id: int = Field(..., gt=0)
     sub_category_id: Optional[int] = Field(None, gt=0)
     description: str = Field(..., min_length=1)
     priority: ComplaintPriority = Field(default=ComplaintPriority.NORMAL)
     photo_data: Optional[str] = Field(None, description="Opaque photo blob (e.g. a data URL)")

     @field_validator("description")
     @classmethod
     def strip_description(cls, value):
          return not_blank(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "unit_id": 12,
                    "category_id": 1,
                    "sub_category_id": 2,
                    "description": "Kitchen sink is blocked",
                    "priority": "High"
               }
          }
     )


class ComplaintAssign(BaseModel):
     employee_id: int = Field(..., gt=0, description="Active employee to assign")


class ComplaintSchedule(BaseModel):
     """Visit date (and optional time slot) for an assigned complaint."""
     visit_date: date
     visit_time: Optional[str] = Field(None, max_length=20, description="e.g. 10:00 or 10:00-12:00")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "visit_date": "2026-03-14",
                    "visit_time": "10:30"
               }
          }
     )


class ComplaintResolve(BaseModel):
     resolution_notes: Optional[str] = None
     resolution_photo_data: Optional[str] = None
