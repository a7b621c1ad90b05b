"""Database reads and writes behind the user and roster routes.

Read helpers return the plain types from :mod:`app.aggregation` so the route
handlers can hand them straight to the aggregation functions.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.aggregation import (
    AwardRecord,
    ContestInfo,
    GroupMember,
    GroupSnapshot,
    ProblemKey,
    SubmissionRecord,
)
from app.models.award import Award, Xcpc
from app.models.contest import Contest, ContestGroupRel, ContestProblem
from app.models.group import TeamGroup, TeamGroupRel
from app.models.oj import OJ, Account
from app.models.submission import Submission
from app.models.team import Team, TeamUser
from app.models.user import User
from app.security import hash_password

logger = logging.getLogger("club_records")


# -------------------------------------------------------------------
# Aggregation inputs
# -------------------------------------------------------------------

async def fetch_submissions(
    db: AsyncSession,
    username: str,
    begin: datetime,
    end: datetime,
) -> List[SubmissionRecord]:
    """Submissions of ``username`` created within ``[begin, end]``, oldest first."""
    rows = (
        await db.execute(
            select(Submission)
            .where(
                Submission.username == username,
                Submission.create_time >= begin,
                Submission.create_time <= end,
            )
            .order_by(Submission.create_time.asc(), Submission.id.asc())
        )
    ).scalars().all()
    return [
        SubmissionRecord(
            username=s.username,
            oj_id=s.oj_id,
            pid=s.pid,
            is_accepted=bool(s.is_accepted),
            created_at=s.create_time,
        )
        for s in rows
    ]


async def fetch_contests_for_user(
    db: AsyncSession,
    username: str,
    begin: datetime,
    end: datetime,
    group_id: int = 0,
) -> List[ContestInfo]:
    """Contests held for an official group the user is a member of.

    Only contests starting within ``[begin, end]`` are returned, newest first.
    ``group_id > 0`` restricts the result to that group's contests.
    """
    user_groups = (
        select(TeamGroupRel.group_id)
        .join(TeamUser, TeamUser.team_id == TeamGroupRel.team_id)
        .join(TeamGroup, TeamGroup.group_id == TeamGroupRel.group_id)
        .where(TeamUser.username == username, TeamGroup.is_grade == True)  # noqa: E712
    )
    stmt = (
        select(Contest)
        .join(ContestGroupRel, ContestGroupRel.contest_id == Contest.id)
        .where(
            ContestGroupRel.group_id.in_(user_groups),
            Contest.start_time >= begin,
            Contest.start_time <= end,
        )
        .distinct()
        .order_by(Contest.start_time.desc(), Contest.id.desc())
    )
    if group_id > 0:
        stmt = stmt.where(ContestGroupRel.group_id == group_id)
    contests = (await db.execute(stmt)).scalars().all()
    if not contests:
        return []

    problems: Dict[int, List[ProblemKey]] = {c.id: [] for c in contests}
    problem_rows = (
        await db.execute(
            select(ContestProblem)
            .where(ContestProblem.contest_id.in_(list(problems)))
            .order_by(ContestProblem.contest_id, ContestProblem.idx)
        )
    ).scalars().all()
    for p in problem_rows:
        problems[p.contest_id].append(ProblemKey(p.oj_id, p.pid))

    return [
        ContestInfo(
            id=c.id,
            name=c.name,
            start_time=c.start_time,
            duration=c.duration,
            problems=tuple(problems[c.id]),
        )
        for c in contests
    ]


async def fetch_official_groups(db: AsyncSession, enabled_only: bool) -> List[GroupSnapshot]:
    """Grade groups with their members, ordered by group name descending.

    Each user is expected to sit in at most one grade group at a time.
    """
    groups = (
        await db.execute(
            select(TeamGroup)
            .where(TeamGroup.is_grade == True)  # noqa: E712
            .order_by(TeamGroup.group_name.desc(), TeamGroup.group_id)
        )
    ).scalars().all()
    snapshots = {
        g.group_id: GroupSnapshot(group_id=g.group_id, group_name=g.group_name)
        for g in groups
    }
    if not snapshots:
        return []

    stmt = (
        select(User.username, User.nickname, User.cf_rating, TeamGroupRel.group_id)
        .join(TeamUser, TeamUser.username == User.username)
        .join(Team, Team.id == TeamUser.team_id)
        .join(TeamGroupRel, TeamGroupRel.team_id == Team.id)
        # only personal teams count towards grade membership
        .where(TeamGroupRel.group_id.in_(list(snapshots)), Team.is_self == True)  # noqa: E712
        .order_by(User.username)
    )
    if enabled_only:
        stmt = stmt.where(User.is_enable == True)  # noqa: E712
    for row in (await db.execute(stmt)).all():
        snapshots[row.group_id].users.append(
            GroupMember(username=row.username, nickname=row.nickname, cf_rating=row.cf_rating or 0)
        )
    return [s for s in snapshots.values() if s.users]


async def fetch_awards(
    db: AsyncSession,
    enabled_only: bool,
    username: Optional[str] = None,
) -> List[AwardRecord]:
    """Award rows ordered by the date of the event that handed them out."""
    stmt = (
        select(Award)
        .join(Xcpc, Xcpc.xcpc_id == Award.xcpc_id)
        .join(User, User.username == Award.username)
        .order_by(Xcpc.xcpc_date, Award.id)
    )
    if enabled_only:
        stmt = stmt.where(User.is_enable == True)  # noqa: E712
    if username is not None:
        stmt = stmt.where(Award.username == username)
    rows = (await db.execute(stmt)).scalars().all()
    return [
        AwardRecord(username=a.username, medal=a.medal, award=a.award or "", xcpc_id=a.xcpc_id)
        for a in rows
    ]


# -------------------------------------------------------------------
# Users
# -------------------------------------------------------------------

async def get_user(db: AsyncSession, username: str) -> Optional[User]:
    """Return None when the user does not exist."""
    user = await db.get(User, username)
    if user is None:
        logger.warning("user not found: %s", username)
    return user


async def get_self_team(db: AsyncSession, username: str) -> Optional[Team]:
    return (
        await db.execute(
            select(Team)
            .join(TeamUser, TeamUser.team_id == Team.id)
            .where(TeamUser.username == username, Team.is_self == True)  # noqa: E712
        )
    ).scalars().first()


async def add_user(
    db: AsyncSession,
    *,
    username: str,
    nickname: str,
    password: str = "",
    cf_rating: int = 0,
    is_enable: bool = True,
    is_admin: bool = False,
    id_card: str = "",
    phone: str = "",
    qq: str = "",
    t_shirt: str = "",
) -> User:
    """Create a user together with the personal team that carries their nickname."""
    user = User(
        username=username,
        password_hash=hash_password(password) if password else "",
        nickname=nickname,
        cf_rating=cf_rating,
        is_enable=is_enable,
        is_admin=is_admin,
        id_card=id_card,
        phone=phone,
        qq=qq,
        t_shirt=t_shirt,
    )
    team = Team(name=nickname, is_enable=is_enable, is_self=True)
    try:
        db.add_all([user, team])
        await db.flush()  # populate team.id
        db.add(TeamUser(team_id=team.id, username=username))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return user


async def update_user(db: AsyncSession, user: User, **fields) -> User:
    """Update profile fields; a nickname change renames the personal team too."""
    team = await get_self_team(db, user.username)
    for name, value in fields.items():
        setattr(user, name, value)
    if team is not None and "nickname" in fields:
        team.name = fields["nickname"]
    await db.commit()
    return user


async def update_user_admin(db: AsyncSession, user: User, is_admin: bool) -> User:
    user.is_admin = is_admin
    await db.commit()
    return user


async def update_user_enable(db: AsyncSession, user: User, is_enable: bool) -> User:
    team = await get_self_team(db, user.username)
    user.is_enable = is_enable
    if team is not None:
        team.is_enable = is_enable
    await db.commit()
    return user


# -------------------------------------------------------------------
# Online judge accounts
# -------------------------------------------------------------------

async def list_ojs(db: AsyncSession) -> List[OJ]:
    return list((await db.execute(select(OJ).order_by(OJ.oj_id))).scalars().all())


async def list_accounts(db: AsyncSession, username: str) -> List[Account]:
    return list(
        (await db.execute(select(Account).where(Account.username == username))).scalars().all()
    )


async def upsert_account(db: AsyncSession, username: str, oj_id: int, handle: str) -> Account:
    account = await db.get(Account, (username, oj_id))
    if account is None:
        account = Account(username=username, oj_id=oj_id, account=handle)
        db.add(account)
    else:
        account.account = handle
    await db.commit()
    return account
