"""Application use cases."""

from .accounts import (
    AuthenticateUseCase,
    CreateAccountUseCase,
    DeleteAccountUseCase,
    GetDashboardStatsUseCase,
    ListAccountsUseCase,
    LogoutUseCase,
    UpdateAccountUseCase,
)

__all__ = [
    "AuthenticateUseCase",
    "CreateAccountUseCase",
    "DeleteAccountUseCase",
    "GetDashboardStatsUseCase",
    "ListAccountsUseCase",
    "LogoutUseCase",
    "UpdateAccountUseCase",
]
