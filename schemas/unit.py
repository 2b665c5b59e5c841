# schemas/unit.py
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from models import UnitParticulars
from .validators import not_blank


class UnitCreate(BaseModel):
     """Schema for registering a new unit (manager only)."""
     unit_no: str = Field(..., min_length=1, max_length=20)
     particulars: UnitParticulars = Field(default=UnitParticulars.VACANT)
     billing_area: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
     area_unit: Optional[str] = Field(None, max_length=20)

     @field_validator("unit_no")
     @classmethod
     def strip_unit_no(cls, value):
          return not_blank(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "unit_no": "1204",
                    "particulars": "Vacant",
                    "billing_area": 1250.00,
                    "area_unit": "sq.ft"
               }
          }
     )


class UnitUpdate(BaseModel):
     particulars: UnitParticulars
