import boxoffice.core.security as security
import time_machine
from jose import jwt
from datetime import datetime, timezone, timedelta


def test_hash_password_returns_non_plaintext():
    password = "Pass!WorD12@3"
    h = security.hash_password(password)
    assert isinstance(h, str)
    assert h != password


def test_verify_password_true_for_correct():
    password = "Pass!WorD12@3"
    h = security.hash_password(password)
    assert security.verify_password(password, h) is True


def test_verify_password_false_for_incorrect():
    password = "Pass!WorD12@3"
    h = security.hash_password(password)
    assert security.verify_password("Password123", h) is False


@time_machine.travel(datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc), tick=False)
def test_create_access_token_contains_expected_claims(monkeypatch):
    monkeypatch.setattr(security, "SECRET_KEY", "fake-key")
    monkeypatch.setattr(security, "ACCESS_TOKEN_EXPIRE_MINUTES", 30)

    token = security.create_access_token(subject=1, sid="abc")
    payload = jwt.decode(
        token,
        "fake-key",
        algorithms=[security.ALGORITHM],
        audience=security.JWT_AUDIENCE,
        issuer=security.JWT_ISSUER
    )

    now = datetime.now(timezone.utc)
    assert payload["iat"] == int(now.timestamp())
    assert payload["exp"] == int((now + timedelta(minutes=30)).timestamp())
    assert payload["sub"] == '1'
    assert payload["sid"] == "abc"
    assert payload["typ"] == "access"


@time_machine.travel(datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc), tick=False)
def test_new_expiry_adds_hours():
    assert security.new_expiry(12) == datetime(2025, 1, 2, 0, 0, tzinfo=timezone.utc)
