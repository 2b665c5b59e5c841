# routers/__init__.py
from . import (
     audit,
     auth,
     calendar,
     complaints,
     customers,
     dashboard,
     employees,
     internal_complaints,
     kyc,
     leaves,
     notifications,
     search,
     units,
     vehicles,
)

all_routers = [
     auth.router,
     customers.router,
     employees.router,
     complaints.router,
     units.router,
     kyc.router,
     search.router,
     notifications.router,
     dashboard.router,
     calendar.router,
     leaves.router,
     vehicles.router,
     internal_complaints.router,
     audit.router,
]

__all__ = ["all_routers"]
