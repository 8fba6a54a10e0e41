from .client import ApiClient, ApiResponse, failure_message
from .endpoints import AuthApi, DepartmentsApi, ReportsApi, UsersApi

__all__ = [
    "ApiClient",
    "ApiResponse",
    "failure_message",
    "AuthApi",
    "DepartmentsApi",
    "ReportsApi",
    "UsersApi",
]
