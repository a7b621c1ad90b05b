from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from jose import jwt

from app.auth_token import (
    ALGORITHM,
    SECRET_KEY,
    create_access_token,
    ensure_self_or_admin,
    get_current_user,
    require_admin,
)
from app.routes.auth import login
from app.security import hash_password, verify_password
from app.services import club_records


def test_password_hash_roundtrip():
    hashed = hash_password("correct horse")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("anything", "")


@pytest.mark.anyio("asyncio")
async def test_login_issues_token_for_current_user(session_factory):
    async with session_factory() as session:
        await club_records.add_user(session, username="alice", nickname="Alice", password="pa55word!")

        token = await login(form_data=SimpleNamespace(username="alice", password="pa55word!"), db=session)
        assert token["token_type"] == "bearer"

        user = await get_current_user(token=token["access_token"], db=session)
        assert user.username == "alice"


@pytest.mark.anyio("asyncio")
async def test_login_rejects_bad_password(session_factory):
    async with session_factory() as session:
        await club_records.add_user(session, username="alice", nickname="Alice", password="pa55word!")

        with pytest.raises(HTTPException) as excinfo:
            await login(form_data=SimpleNamespace(username="alice", password="nope"), db=session)
        assert excinfo.value.status_code == 401


@pytest.mark.anyio("asyncio")
async def test_user_without_password_cannot_log_in(session_factory):
    async with session_factory() as session:
        await club_records.add_user(session, username="bob", nickname="Bob")

        with pytest.raises(HTTPException) as excinfo:
            await login(form_data=SimpleNamespace(username="bob", password=""), db=session)
        assert excinfo.value.status_code == 401


@pytest.mark.anyio("asyncio")
async def test_expired_or_unknown_tokens_are_rejected(session_factory):
    expired = jwt.encode(
        {"sub": "alice", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        SECRET_KEY,
        algorithm=ALGORITHM,
    )
    async with session_factory() as session:
        await club_records.add_user(session, username="alice", nickname="Alice")
        for token in (expired, create_access_token("ghost"), "not-a-jwt"):
            with pytest.raises(HTTPException) as excinfo:
                await get_current_user(token=token, db=session)
            assert excinfo.value.status_code == 401


def test_require_admin():
    import asyncio

    admin = SimpleNamespace(username="root", is_admin=True)
    member = SimpleNamespace(username="alice", is_admin=False)

    assert asyncio.run(require_admin(admin)) is admin
    with pytest.raises(HTTPException) as excinfo:
        asyncio.run(require_admin(member))
    assert excinfo.value.status_code == 403


def test_self_or_admin():
    ensure_self_or_admin(SimpleNamespace(username="alice", is_admin=False), "alice")
    ensure_self_or_admin(SimpleNamespace(username="root", is_admin=True), "alice")
    with pytest.raises(HTTPException):
        ensure_self_or_admin(SimpleNamespace(username="bob", is_admin=False), "alice")
