"""
===============================================================================
TARJETA CRC — identity/passwords.py
===============================================================================

Módulo:
    Hashing de passwords (Argon2id)

Responsabilidades:
    - Hashear passwords con salt aleatorio por hash.
    - Verificar password vs hash almacenado (comparación de tiempo constante).

Colaboradores:
    - argon2.PasswordHasher
    - identity.credentials.CredentialStore

Notas:
    - Nunca loguear el password ni el hash.
    - El hasher es inyectable: los tests usan parámetros baratos.
===============================================================================
"""

from __future__ import annotations

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_password_hasher = PasswordHasher()


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def hash_password(password: str, hasher: PasswordHasher | None = None) -> str:
    """Hashea un password usando Argon2id."""
    return (hasher or _password_hasher).hash(password)


def verify_password(
    password: str, password_hash: str, hasher: PasswordHasher | None = None
) -> bool:
    """Verifica password vs hash almacenado."""
    try:
        return (hasher or _password_hasher).verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False
