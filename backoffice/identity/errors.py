"""
Errores del borde de identidad (credenciales, sesiones, autorización).

- InvalidCredentialsError: uniforme para email desconocido, usuario inactivo
  o password incorrecto. El mensaje nunca dice cuál de los tres fue.
- UnauthenticatedError: no hay sesión válida. Las subclases existen para
  logging; los callers las tratan igual.
- ForbiddenError: hay sesión válida pero el rol no alcanza.
"""

from __future__ import annotations


class InvalidCredentialsError(Exception):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class UnauthenticatedError(Exception):
    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class SessionMissingError(UnauthenticatedError):
    def __init__(self, message: str = "Session not found"):
        super().__init__(message)


class SessionExpiredError(UnauthenticatedError):
    def __init__(self, message: str = "Session expired"):
        super().__init__(message)


class ForbiddenError(Exception):
    def __init__(self, message: str = "Insufficient privileges"):
        super().__init__(message)
