import bcrypt
import pytest

from boutique import config
from boutique.admin.service import check_credentials, hash_password

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct horse battery"


def test_hash_password_produces_verifiable_bcrypt_hash():
    hashed = hash_password("s3cret")
    assert hashed.startswith("$2")
    assert bcrypt.checkpw(b"s3cret", hashed.encode("utf-8"))


def test_check_credentials_accepts_configured_admin():
    assert check_credentials(ADMIN_USERNAME, ADMIN_PASSWORD) is True


@pytest.mark.parametrize("username,password", [
    (ADMIN_USERNAME, "wrong"),
    ("root", ADMIN_PASSWORD),
    ("", ""),
    ("adminé", ADMIN_PASSWORD),
])
def test_check_credentials_rejects_bad_pairs(username, password):
    assert check_credentials(username, password) is False


def test_no_admin_without_configured_hash(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_PASSWORD_HASH", "")
    assert check_credentials(ADMIN_USERNAME, ADMIN_PASSWORD) is False


def test_malformed_hash_is_refused(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_PASSWORD_HASH", "not-a-bcrypt-hash")
    assert check_credentials(ADMIN_USERNAME, ADMIN_PASSWORD) is False
