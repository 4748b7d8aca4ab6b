"""Token issuer tests — signing, verification, expiry policy."""

import jwt
import pytest

from labhub.auth.jwt import TokenError, TokenIssuer, extract_bearer

SECRET = "unit-test-secret-that-is-long-enough-for-hs256"


def test_issue_and_verify_roundtrip():
    issuer = TokenIssuer(SECRET)
    token = issuer.issue("1b4e28ba-2fa1-11d2-883f-0016d3cca427", "Postdoc")
    claims = issuer.verify(token)
    assert claims.user_id == "1b4e28ba-2fa1-11d2-883f-0016d3cca427"
    assert claims.role == "Postdoc"


def test_no_expiry_by_default():
    token = TokenIssuer(SECRET).issue("u1", "PhD Student")
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert "exp" not in payload
    assert "iat" in payload


def test_expiry_policy_adds_exp_claim():
    token = TokenIssuer(SECRET, expire_minutes=30).issue("u1", "PhD Student")
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert payload["exp"] - payload["iat"] == 30 * 60


def test_expired_token_rejected():
    issuer = TokenIssuer(SECRET, expire_minutes=-1)
    token = issuer.issue("u1", "PhD Student")
    with pytest.raises(TokenError, match="expired"):
        issuer.verify(token)


def test_wrong_secret_rejected():
    token = TokenIssuer(SECRET).issue("u1", "PhD Student")
    with pytest.raises(TokenError):
        TokenIssuer(SECRET + "-other").verify(token)


def test_tampered_payload_rejected():
    token = TokenIssuer(SECRET).issue("u1", "PhD Student")
    header, payload, signature = token.split(".")
    flipped = ("A" if payload[0] != "A" else "B") + payload[1:]
    with pytest.raises(TokenError):
        TokenIssuer(SECRET).verify(".".join([header, flipped, signature]))


def test_missing_role_claim_rejected():
    token = jwt.encode({"sub": "u1"}, SECRET, algorithm="HS256")
    with pytest.raises(TokenError, match="role"):
        TokenIssuer(SECRET).verify(token)


def test_missing_subject_rejected():
    token = jwt.encode({"role": "PhD Student"}, SECRET, algorithm="HS256")
    with pytest.raises(TokenError):
        TokenIssuer(SECRET).verify(token)


def test_empty_token_rejected():
    with pytest.raises(TokenError):
        TokenIssuer(SECRET).verify("")


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        TokenIssuer("")


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("Token abc", "abc"),
        ("abc.def.ghi", ""),
    ],
)
def test_extract_bearer_any_scheme(header, expected):
    assert extract_bearer(header) == expected
