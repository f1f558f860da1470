"""Tests for the in-memory account store."""

from __future__ import annotations

import threading

import pytest

from blogguard.accounts import (
    AccountStore,
    AuthenticationError,
    DuplicateEmailError,
    PasswordMismatchError,
)


@pytest.fixture
def store() -> AccountStore:
    return AccountStore()


def _register(store: AccountStore, email: str = "user@example.com", password: str = "Password123"):
    return store.register(email=email, password=password, confirm_password=password, name="Test User")


class TestRegister:
    def test_returns_account(self, store: AccountStore):
        account = _register(store)
        assert account.id == 1
        assert account.email == "user@example.com"
        assert account.name == "Test User"
        assert account.role == "USER"
        assert account.created_at

    def test_ids_increase(self, store: AccountStore):
        assert _register(store, "a@example.com").id == 1
        assert _register(store, "b@example.com").id == 2
        assert store.count() == 2

    def test_password_mismatch(self, store: AccountStore):
        with pytest.raises(PasswordMismatchError) as exc_info:
            store.register("a@example.com", "Password123", "Password124", "Name")
        assert exc_info.value.error_code == "PASSWORD_MISMATCH"
        assert store.count() == 0

    def test_duplicate_email_is_case_insensitive(self, store: AccountStore):
        _register(store, "User@Example.com")
        with pytest.raises(DuplicateEmailError) as exc_info:
            _register(store, "user@example.com")
        assert exc_info.value.error_code == "DUPLICATE_EMAIL"

    def test_concurrent_duplicate_registration_creates_one_account(self, store: AccountStore):
        barrier = threading.Barrier(8)
        failures: list[Exception] = []

        def worker() -> None:
            barrier.wait()
            try:
                _register(store)
            except DuplicateEmailError as exc:
                failures.append(exc)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.count() == 1
        assert len(failures) == 7


class TestAuthenticate:
    def test_valid_credentials(self, store: AccountStore):
        registered = _register(store)
        assert store.authenticate("user@example.com", "Password123") == registered

    def test_email_lookup_ignores_case(self, store: AccountStore):
        _register(store)
        assert store.authenticate("USER@example.com", "Password123").id == 1

    def test_wrong_password(self, store: AccountStore):
        _register(store)
        with pytest.raises(AuthenticationError) as exc_info:
            store.authenticate("user@example.com", "Wrong12345")
        assert exc_info.value.error_code == "AUTHENTICATION_FAILED"

    def test_unknown_email(self, store: AccountStore):
        with pytest.raises(AuthenticationError):
            store.authenticate("nobody@example.com", "Password123")
