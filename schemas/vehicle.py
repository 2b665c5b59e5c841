# schemas/vehicle.py
"""
Pydantic schemas for resident vehicle registration.
"""
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from .validators import not_blank, not_null


def normalise_vehicle_number(value: Optional[str]) -> str:
     """Upper-case with all whitespace removed; nothing left is an error."""
     number = "".join(not_null(value).split()).upper()
     if not number:
          raise ValueError("must not be blank")
     return number


class VehicleCreate(BaseModel):
     """Schema for registering a vehicle against a unit."""
     unit_id: int = Field(..., gt=0)
     vehicle_number: str = Field(..., min_length=1, max_length=20, description="Stored upper-case, spaces removed")
     vehicle_type: str = Field(default="Car", max_length=30)
     customer_id: Optional[int] = Field(None, gt=0)
     tenant_id: Optional[int] = Field(None, gt=0)
     make: Optional[str] = Field(None, max_length=100)
     model: Optional[str] = Field(None, max_length=100)
     color: Optional[str] = Field(None, max_length=50)
     rc_file_name: Optional[str] = Field(None, max_length=255)
     rc_file_data: Optional[str] = None

     @field_validator("vehicle_number")
     @classmethod
     def normalise_number(cls, value):
          return normalise_vehicle_number(value)

     @field_validator("vehicle_type")
     @classmethod
     def strip_type(cls, value):
          return not_blank(value)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "unit_id": 12,
                    "vehicle_number": "MH12 AB 1234",
                    "vehicle_type": "Car",
                    "make": "Maruti",
                    "model": "Swift",
                    "color": "White"
               }
          }
     )


class VehicleUpdate(BaseModel):
     """vehicle_number and vehicle_type may be omitted but not set to null."""
     vehicle_number: Optional[str] = Field(None, min_length=1, max_length=20)
     vehicle_type: Optional[str] = Field(None, max_length=30)
     tenant_id: Optional[int] = Field(None, gt=0)
     make: Optional[str] = Field(None, max_length=100)
     model: Optional[str] = Field(None, max_length=100)
     color: Optional[str] = Field(None, max_length=50)
     rc_file_name: Optional[str] = Field(None, max_length=255)
     rc_file_data: Optional[str] = None

     @field_validator("vehicle_number")
     @classmethod
     def normalise_number(cls, value):
          return normalise_vehicle_number(value)

     @field_validator("vehicle_type")
     @classmethod
     def strip_type(cls, value):
          return not_blank(value)
