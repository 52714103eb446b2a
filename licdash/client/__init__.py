# Dashboard API client
from licdash.client.client import DashboardClient as DashboardClient
from licdash.common.exceptions import DashboardAPIError as DashboardAPIError
from licdash.common.exceptions import SessionExpiredError as SessionExpiredError

__all__ = ["DashboardAPIError", "DashboardClient", "SessionExpiredError"]
