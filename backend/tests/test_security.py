import pytest

from app.core.security import (
    TokenError,
    create_access_token,
    decode_access_token,
    subject_from_claims,
)


def test_token_round_trip_keeps_extra_claims(settings):
    token = create_access_token(subject="user-1", extra_claims={"userId": "legacy-1"})
    claims = decode_access_token(token)
    assert claims["sub"] == "user-1"
    assert claims["userId"] == "legacy-1"
    assert subject_from_claims(claims) == "user-1"


def test_subject_falls_back_to_user_id_claim():
    assert subject_from_claims({"userId": "legacy-1"}) == "legacy-1"
    assert subject_from_claims({}) is None


def test_decode_rejects_tampered_token(settings):
    token = create_access_token(subject="user-1")
    with pytest.raises(TokenError):
        decode_access_token(token + "x")
