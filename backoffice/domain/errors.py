"""
Errores del Credential Store.

Los repositorios devuelven None cuando un recurso no existe; estas excepciones
las levanta el CredentialStore (contrato explícito) y el mapeo de violaciones
de unicidad en los repositorios.
"""

from __future__ import annotations

from uuid import UUID


class DuplicateEmailError(Exception):
    """Otro usuario ya tiene ese email (case-insensitive)."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email already registered: {email}")


class UserNotFoundError(Exception):
    """No existe usuario con ese id."""

    def __init__(self, user_id: UUID):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")
