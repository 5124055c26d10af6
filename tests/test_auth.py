from datetime import datetime, timezone

import jwt
import pytest

from auth import create_token, decode_token, hash_password, verify_password


def test_password_round_trip():
    hashed = hash_password("hunter2")
    assert hashed != "hunter2"
    assert verify_password("hunter2", hashed)
    assert not verify_password("hunter3", hashed)


def test_verify_rejects_non_bcrypt_hash():
    assert not verify_password("hunter2", "not-a-hash")
    assert not verify_password("hunter2", None)


def test_token_carries_user_id_for_a_day():
    payload = decode_token(create_token("u-1"))
    assert payload["user_id"] == "u-1"
    lifetime = payload["exp"] - payload["iat"]
    assert lifetime == 24 * 3600
    assert payload["exp"] > datetime.now(timezone.utc).timestamp()


def test_token_signed_with_another_secret_is_rejected():
    forged = jwt.encode({"user_id": "u-1"}, "another-secret", algorithm="HS256")
    with pytest.raises(jwt.InvalidTokenError):
        decode_token(forged)
