"""Account directory use cases."""

from .account_results import (
    AccountError,
    AccountErrorCode,
    AccountListResult,
    AccountResult,
    DashboardStatsResult,
    DeleteAccountResult,
    LoginResult,
)
from .authenticate import AuthenticateInput, AuthenticateUseCase
from .create_account import CreateAccountInput, CreateAccountUseCase
from .dashboard_stats import GetDashboardStatsUseCase
from .delete_account import DeleteAccountInput, DeleteAccountUseCase
from .list_accounts import ListAccountsUseCase
from .logout import LogoutInput, LogoutUseCase
from .update_account import UpdateAccountInput, UpdateAccountUseCase

__all__ = [
    # Results
    "AccountError",
    "AccountErrorCode",
    "AccountListResult",
    "AccountResult",
    "DashboardStatsResult",
    "DeleteAccountResult",
    "LoginResult",
    # Session
    "AuthenticateInput",
    "AuthenticateUseCase",
    "LogoutInput",
    "LogoutUseCase",
    # Directory
    "CreateAccountInput",
    "CreateAccountUseCase",
    "DeleteAccountInput",
    "DeleteAccountUseCase",
    "GetDashboardStatsUseCase",
    "ListAccountsUseCase",
    "UpdateAccountInput",
    "UpdateAccountUseCase",
]
