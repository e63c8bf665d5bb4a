"""Tests for password hashing and verification."""

from __future__ import annotations

import bcrypt
import pytest

from rauta.core.security import hash_password, verify_and_update_password, verify_password


def test_hash_then_verify_round_trip():
    """A password verifies against its own hash."""

    stored = hash_password("secret1")

    assert stored.startswith("$pbkdf2-sha256$")
    assert verify_password("secret1", stored) is True


def test_wrong_password_is_rejected():
    stored = hash_password("secret1")

    assert verify_password("wrong1", stored) is False


def test_salt_differs_between_calls():
    """Hashing the same input twice yields different strings."""

    assert hash_password("secret1") != hash_password("secret1")


@pytest.mark.parametrize("stored", [None, "", "not-a-hash", "$pbkdf2-sha256$broken"])
def test_unusable_stored_hash_returns_false(stored):
    """Missing or malformed hashes never raise."""

    assert verify_password("secret1", stored) is False


def test_legacy_bcrypt_hash_verifies_and_is_upgraded():
    """bcrypt hashes from earlier deployments still match and get rehashed."""

    legacy = bcrypt.hashpw(b"secret1", bcrypt.gensalt(rounds=4)).decode("ascii")

    valid, new_hash = verify_and_update_password("secret1", legacy)

    assert legacy.startswith("$2b$")
    assert valid is True
    assert new_hash.startswith("$pbkdf2-sha256$")
    assert verify_password("secret1", new_hash) is True


def test_legacy_bcrypt_hash_rejects_wrong_password():
    legacy = bcrypt.hashpw(b"secret1", bcrypt.gensalt(rounds=4)).decode("ascii")

    assert verify_and_update_password("wrong1", legacy) == (False, None)


def test_current_hash_needs_no_upgrade():
    assert verify_and_update_password("secret1", hash_password("secret1")) == (True, None)
