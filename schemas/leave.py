# schemas/leave.py
"""
Pydantic schemas for employee leave.
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, model_validator

from models import LeaveStatus, LeaveType


class LeaveApply(BaseModel):
     """
     One or more leave days. Either `leave_date` or `dates` must be given;
     both may be combined.
     """
     leave_date: Optional[date] = None
     dates: List[date] = Field(default_factory=list)
     leave_type: LeaveType = Field(default=LeaveType.FULL_DAY)
     reason: Optional[str] = None

     @model_validator(mode="after")
     def require_a_date(self):
          if self.leave_date is None and not self.dates:
               raise ValueError("leave_date or dates is required")
          return self

     def all_dates(self) -> List[date]:
          dates = list(self.dates)
          if self.leave_date is not None:
               dates.append(self.leave_date)
          return sorted(set(dates))

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "dates": ["2026-03-16", "2026-03-17"],
                    "leave_type": "Full Day",
                    "reason": "Family function"
               }
          }
     )


class CalendarLeaveApply(BaseModel):
     """Single-day leave applied from the calendar view."""
     leave_date: date
     leave_type: LeaveType = Field(default=LeaveType.FULL_DAY)
     reason: Optional[str] = None


class LeaveReview(BaseModel):
     status: LeaveStatus = Field(..., description="Approved or Rejected")
     remarks: Optional[str] = None


class LeaveRemarks(BaseModel):
     remarks: Optional[str] = None
