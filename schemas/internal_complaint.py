# schemas/internal_complaint.py
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from models import ComplaintPriority, InternalComplaintStatus
from .validators import not_blank


class InternalComplaintCreate(BaseModel):
     """Staff-raised complaint (office, equipment, facilities)."""
     category: str = Field(..., min_length=1, max_length=100)
     sub_category: Optional[str] = Field(None, max_length=100)
     description: str = Field(..., min_length=1)
     priority: ComplaintPriority = Field(default=ComplaintPriority.NORMAL)
     photo_data: Optional[str] = None

     @field_validator("category", "description")
     @classmethod
     def strip_required(cls, value):
          return not_blank(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "category": "IT",
                    "sub_category": "Printer",
                    "description": "Front office printer is jammed",
                    "priority": "Normal"
               }
          }
     )


class InternalComplaintAssign(BaseModel):
     employee_id: int = Field(..., gt=0)


class InternalComplaintStatusUpdate(BaseModel):
     status: InternalComplaintStatus
     resolution_notes: Optional[str] = None
