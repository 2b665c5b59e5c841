# schemas/auth.py
"""
Pydantic schemas for login and password management.
"""
from pydantic import BaseModel, Field, ConfigDict


class LoginRequest(BaseModel):
     """Request body for customer and employee login."""
     email: str = Field(..., min_length=1, description="Login email")
     password: str = Field(..., min_length=1, description="Plain-text password")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "email": "admin@emperiumcity.in",
                    "password": "Admin@123"
               }
          }
     )


class ChangePasswordRequest(BaseModel):
     current_password: str = Field(..., min_length=1)
     new_password: str = Field(..., min_length=1, description="At least 6 characters")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "current_password": "Customer@123",
                    "new_password": "N3wPassw0rd"
               }
          }
     )
