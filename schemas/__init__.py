# schemas/__init__.py
from .auth import LoginRequest, ChangePasswordRequest
from .customer import CustomerCreate, CustomerUpdate, TenantCreate
from .employee import EmployeeCreate, EmployeeUpdate, PasswordResetRequest
from .complaint import ComplaintCreate, ComplaintAssign, ComplaintSchedule, ComplaintResolve
from .unit import UnitCreate, UnitUpdate
from .kyc import KycUpload
from .vehicle import VehicleCreate, VehicleUpdate
from .leave import LeaveApply, CalendarLeaveApply, LeaveReview, LeaveRemarks
from .internal_complaint import InternalComplaintCreate, InternalComplaintAssign, InternalComplaintStatusUpdate

__all__ = [
     "LoginRequest",
     "ChangePasswordRequest",
     "CustomerCreate",
     "CustomerUpdate",
     "TenantCreate",
     "EmployeeCreate",
     "EmployeeUpdate",
     "PasswordResetRequest",
     "ComplaintCreate",
     "ComplaintAssign",
     "ComplaintSchedule",
     "ComplaintResolve",
     "UnitCreate",
     "UnitUpdate",
     "KycUpload",
     "VehicleCreate",
     "VehicleUpdate",
     "LeaveApply",
     "CalendarLeaveApply",
     "LeaveReview",
     "LeaveRemarks",
     "InternalComplaintCreate",
     "InternalComplaintAssign",
     "InternalComplaintStatusUpdate",
]
