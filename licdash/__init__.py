# License Dashboard

from licdash.client import DashboardAPIError, DashboardClient, SessionExpiredError

__all__ = [
    "DashboardAPIError",
    "DashboardClient",
    "SessionExpiredError",
]
