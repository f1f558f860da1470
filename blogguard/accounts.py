"""
In-memory account registry used by the login and registration routes.

Passwords are stored as salted PBKDF2-SHA256 digests, never in clear.
"""

from __future__ import annotations

import hashlib
import hmac
import itertools
import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone

from blogguard.logmask import mask_email

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 120_000
_SALT_BYTES = 16


class AccountError(Exception):
    """Base class for account failures. Carries a machine-readable code."""

    error_code = "BUSINESS_ERROR"


class PasswordMismatchError(AccountError):
    error_code = "PASSWORD_MISMATCH"


class DuplicateEmailError(AccountError):
    error_code = "DUPLICATE_EMAIL"


class AuthenticationError(AccountError):
    error_code = "AUTHENTICATION_FAILED"


@dataclass(frozen=True)
class Account:
    """A registered user, as exposed to the API layer."""

    id: int
    email: str
    name: str
    role: str
    created_at: str


@dataclass(frozen=True)
class _Credential:
    account: Account
    salt: bytes
    digest: bytes


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)


class AccountStore:
    """
    Thread-safe in-memory account store.

    E-mail addresses are matched case-insensitively.
    """

    def __init__(self) -> None:
        self._by_email: dict[str, _Credential] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def register(
        self,
        email: str,
        password: str,
        confirm_password: str,
        name: str,
        role: str = "USER",
    ) -> Account:
        """
        Create a new account.

        Raises:
            PasswordMismatchError: password and confirm_password differ.
            DuplicateEmailError: the e-mail is already registered.
        """
        if password != confirm_password:
            raise PasswordMismatchError("Passwords do not match")

        key = email.strip().lower()
        salt = os.urandom(_SALT_BYTES)
        digest = _hash_password(password, salt)

        with self._lock:
            if key in self._by_email:
                logger.warning("Registration failed: email already exists: %s", mask_email(email))
                raise DuplicateEmailError("Email is already registered")

            account = Account(
                id=next(self._ids),
                email=email.strip(),
                name=name,
                role=role,
                created_at=datetime.now(timezone.utc).isoformat(),
            )
            self._by_email[key] = _Credential(account=account, salt=salt, digest=digest)

        logger.info("Registered account %d for %s", account.id, mask_email(email))
        return account

    def authenticate(self, email: str, password: str) -> Account:
        """
        Return the account if the credentials match.

        Raises:
            AuthenticationError: unknown e-mail or wrong password.
        """
        with self._lock:
            credential = self._by_email.get(email.strip().lower())

        if credential is None:
            logger.warning("Login failed: unknown email: %s", mask_email(email))
            raise AuthenticationError("Invalid email or password")

        if not hmac.compare_digest(_hash_password(password, credential.salt), credential.digest):
            logger.warning("Login failed: invalid password for email: %s", mask_email(email))
            raise AuthenticationError("Invalid email or password")

        return credential.account

    def count(self) -> int:
        with self._lock:
            return len(self._by_email)
