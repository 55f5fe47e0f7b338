import jwt
import pytest

from kassa.core.config import settings
from kassa.core.exceptions import AuthenticationError
from kassa.core.security import create_access_token, decode_access_token, hash_password, verify_password


def test_password_hash_round_trip():
    hashed = hash_password("rahasia123")
    assert hashed != "rahasia123"
    assert verify_password("rahasia123", hashed)
    assert not verify_password("salah", hashed)


def test_verify_against_missing_or_broken_hash():
    assert not verify_password("rahasia123", None)
    assert not verify_password("rahasia123", "not-a-bcrypt-hash")


def test_token_carries_user_id():
    token = create_access_token("user-1")
    assert decode_access_token(token) == "user-1"


def test_expired_token():
    token = create_access_token("user-1", expires_minutes=-1)
    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(token)
    assert exc_info.value.message == "Sesi Anda telah berakhir. Silakan masuk kembali."


def test_token_signed_with_other_key():
    token = jwt.encode({"sub": "user-1"}, "another-secret", algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(AuthenticationError) as exc_info:
        decode_access_token(token)
    assert exc_info.value.message == "Token tidak valid."


def test_token_without_subject():
    token = jwt.encode({"role": "superadmin"}, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(AuthenticationError):
        decode_access_token(token)


def test_garbage_token():
    with pytest.raises(AuthenticationError):
        decode_access_token("abc.def.ghi")
