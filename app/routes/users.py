# app/routes/users.py

import logging
from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.aggregation import (
    aggregate_roster,
    build_contest_rows,
    count_daily_submissions,
    index_submissions,
    tally_medals,
)
from app.auth_token import ensure_self_or_admin, get_current_user, require_admin
from app.database import get_db
from app.models.user import User
from app.params import DEFAULT_BEGIN_TIME, DEFAULT_END_TIME, date_range, end_of_day
from app.schemas import (
    AccountRead,
    AccountUpdate,
    ContestRowOut,
    MessageOut,
    ProblemOut,
    ProblemResultOut,
    RosterGroupOut,
    UserAdminUpdate,
    UserContestsOut,
    UserCreate,
    UserDetail,
    UserEnableUpdate,
    UserUpdate,
)
from app.services import club_records

logger = logging.getLogger("users")

router = APIRouter(tags=["Users"])


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------

async def _get_user_or_404(db: AsyncSession, username: str) -> User:
    user = await club_records.get_user(db, username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _internal_error(what: str) -> HTTPException:
    logger.exception("Failed to load %s", what)
    return HTTPException(status_code=500, detail="Internal server error")


# -------------------------------------------------------------------
# Writes
# -------------------------------------------------------------------

@router.post("/user/add", response_model=MessageOut)
async def add_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    if await db.get(User, payload.username) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    await club_records.add_user(db, **payload.model_dump())
    logger.info("Added user %s", payload.username)
    return {"msg": "User added"}


@router.post("/user/upd", response_model=MessageOut)
async def update_user(
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_self_or_admin(current_user, payload.username)
    user = await _get_user_or_404(db, payload.username)
    await club_records.update_user(db, user, **payload.model_dump(exclude={"username"}))
    return {"msg": "User info updated"}


@router.post("/user/upd_admin", response_model=MessageOut)
async def update_user_admin(
    payload: UserAdminUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    user = await _get_user_or_404(db, payload.username)
    await club_records.update_user_admin(db, user, payload.is_admin)
    return {"msg": "User permission updated"}


@router.post("/user/upd_enable", response_model=MessageOut)
async def update_user_enable(
    payload: UserEnableUpdate,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(require_admin),
):
    user = await _get_user_or_404(db, payload.username)
    await club_records.update_user_enable(db, user, payload.is_enable)
    return {"msg": "User status updated"}


@router.post("/user/{username}/accounts/upd", response_model=MessageOut)
async def update_user_account(
    username: str,
    payload: AccountUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if payload.username != username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username mismatch")
    ensure_self_or_admin(current_user, username)
    await _get_user_or_404(db, username)
    await club_records.upsert_account(db, username, payload.oj_id, payload.account)
    return {"msg": "Account updated"}


# -------------------------------------------------------------------
# Reads
# -------------------------------------------------------------------

@router.get("/user/{username}", response_model=UserDetail)
async def get_user(
    username: str,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """Basic info plus every award the user has collected."""
    user = await _get_user_or_404(db, username)
    awards = await club_records.fetch_awards(db, enabled_only=False, username=username)
    return UserDetail(
        username=user.username,
        nickname=user.nickname,
        cf_rating=user.cf_rating,
        is_enable=user.is_enable,
        is_admin=user.is_admin,
        medals=tally_medals(awards),
        awards=[asdict(a) for a in awards],
    )


@router.get("/user/{username}/accounts", response_model=List[AccountRead])
async def get_user_accounts(
    username: str,
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """One row per judge; ``account`` stays empty where the user has none."""
    rows = {oj.oj_id: AccountRead(oj_id=oj.oj_id, oj_name=oj.oj_name) for oj in await club_records.list_ojs(db)}
    for acc in await club_records.list_accounts(db, username):
        if acc.oj_id in rows:
            rows[acc.oj_id].account = acc.account
    return list(rows.values())


@router.get("/user/{username}/submissions", response_model=List[int])
async def get_user_submissions(
    username: str,
    begin_time: str = Query(..., description="YYYY-MM-DD, inclusive"),
    end_time: str = Query(..., description="YYYY-MM-DD, inclusive"),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """Number of submissions per day in the range."""
    begin, end = date_range(begin_time, end_time)
    try:
        submissions = await club_records.fetch_submissions(db, username, begin, end)
    except SQLAlchemyError:
        raise _internal_error("submissions")
    return count_daily_submissions((s.created_at for s in submissions), begin, end)


@router.get("/user/{username}/contests", response_model=UserContestsOut)
async def get_user_contests(
    username: str,
    begin_time: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    end_time: Optional[str] = Query(None, description="YYYY-MM-DD, inclusive"),
    group_id: int = Query(0, ge=0, description="Only contests of this group (0 = all)"),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """Per-problem results of the user in every contest they were eligible for.

    ``accepted_time`` is in seconds after contest start, -1 if the problem was
    not accepted during the contest.
    """
    begin, end = date_range(begin_time, end_time)
    try:
        contests = await club_records.fetch_contests_for_user(db, username, begin, end, group_id)
        # a contest window may run past end_time, so scan the whole history
        submissions = await club_records.fetch_submissions(
            db, username, DEFAULT_BEGIN_TIME, end_of_day(DEFAULT_END_TIME)
        )
    except SQLAlchemyError:
        raise _internal_error("contests")

    max_problems, rows = build_contest_rows(contests, index_submissions(submissions))
    return UserContestsOut(
        max_problems=max_problems,
        contests=[
            ContestRowOut(
                contest_id=row.contest.id,
                contest_name=row.contest.name,
                start_time=row.contest.start_time,
                duration=row.contest.duration,
                solved=row.solved,
                problems=[ProblemOut(oj_id=p.oj_id, pid=p.pid) for p in row.contest.problems],
                problem_results=[ProblemResultOut(accepted_time=r.accepted_time) for r in row.results],
            )
            for row in rows
        ],
    )


@router.get("/users", response_model=List[RosterGroupOut])
async def get_users(
    is_enable: bool = Query(False, description="Only enabled users"),
    db: AsyncSession = Depends(get_db),
    _: User = Depends(get_current_user),
):
    """Official groups with their members' medals and awards."""
    try:
        groups = await club_records.fetch_official_groups(db, enabled_only=is_enable)
        awards = await club_records.fetch_awards(db, enabled_only=is_enable)
    except SQLAlchemyError:
        raise _internal_error("roster")
    return [RosterGroupOut.model_validate(g) for g in aggregate_roster(groups, awards)]
