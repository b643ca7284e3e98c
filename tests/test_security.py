from datetime import timedelta

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from app.core.config import settings
from app.core.security import (
    Identity,
    create_identity_token,
    create_jwt_token,
    decode_jwt_token,
    get_current_identity,
    require_admin,
)
from scripts.issue_token import main as issue_token


def _bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


async def test_identity_token_round_trip():
    token = create_identity_token(12, "employee")

    identity = await get_current_identity(_bearer(token))

    assert identity == Identity(id=12, role="employee")
    assert identity.is_admin is False


async def test_missing_credentials():
    with pytest.raises(HTTPException) as exc_info:
        await get_current_identity(None)

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Access denied. No token provided."


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        jwt.encode({"sub": "12", "role": "admin"}, "some-other-key", algorithm="HS256"),
        create_jwt_token({"role": "admin"}),
        create_jwt_token({"sub": "twelve", "role": "admin"}),
    ],
)
async def test_rejected_tokens(token):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_identity(_bearer(token))

    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid token."


async def test_expired_token_is_rejected():
    token = create_identity_token(12, "employee", expires_delta=timedelta(seconds=-5))

    with pytest.raises(HTTPException) as exc_info:
        await get_current_identity(_bearer(token))

    assert exc_info.value.status_code == 401


async def test_require_admin():
    admin = Identity(id=1, role="admin")

    assert await require_admin(admin) is admin
    with pytest.raises(HTTPException) as exc_info:
        await require_admin(Identity(id=2, role="employee"))
    assert exc_info.value.status_code == 403


def test_issue_token_script(capsys):
    token = issue_token(["42", "--role", "admin", "--minutes", "5"])

    claims = decode_jwt_token(token)
    assert claims["sub"] == "42"
    assert claims["role"] == "admin"
    assert claims["exp"] - claims["iat"] == 300
    assert capsys.readouterr().out.strip() == token


def test_tokens_use_configured_algorithm():
    header = jwt.get_unverified_header(create_identity_token(1, "user"))

    assert header["alg"] == settings.ALGORITHM
