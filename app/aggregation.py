"""Contest-submission aggregation: per-problem solve status and roster tallies.

Everything in here is a pure transformation of request-scoped snapshots. The
data-fetch layer (``app.services.club_records``) turns ORM rows into these
types before any aggregation happens.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

NOT_SOLVED = -1
MEDAL_SLOTS = 3  # gold, silver, bronze


class ProblemKey(NamedTuple):
    oj_id: int
    pid: str


class Attempt(NamedTuple):
    is_accepted: bool
    created_at: datetime


@dataclass(frozen=True)
class SubmissionRecord:
    username: str
    oj_id: int
    pid: str
    is_accepted: bool
    created_at: datetime

    @property
    def key(self) -> ProblemKey:
        return ProblemKey(self.oj_id, self.pid)


@dataclass(frozen=True)
class ContestInfo:
    """A contest window plus its problems in authored order.

    ``duration`` is in seconds.
    """

    id: int
    name: str
    start_time: datetime
    duration: int
    problems: Tuple[ProblemKey, ...] = ()

    def __post_init__(self) -> None:
        if self.duration < 0:
            raise ValueError(f"contest {self.id} has negative duration {self.duration}")

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(seconds=self.duration)


@dataclass(frozen=True)
class ProblemResult:
    # seconds after contest start, or NOT_SOLVED
    accepted_time: int = NOT_SOLVED

    @property
    def solved(self) -> bool:
        return self.accepted_time != NOT_SOLVED


@dataclass
class ContestRow:
    contest: ContestInfo
    solved: int = 0
    results: List[ProblemResult] = field(default_factory=list)


@dataclass(frozen=True)
class AwardRecord:
    username: str
    medal: int
    award: str = ""
    xcpc_id: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.medal <= MEDAL_SLOTS:
            raise ValueError(f"medal must be between 0 and {MEDAL_SLOTS}, got {self.medal}")


@dataclass(frozen=True)
class GroupMember:
    username: str
    nickname: str
    cf_rating: int = 0


@dataclass
class GroupSnapshot:
    group_id: int
    group_name: str
    users: List[GroupMember] = field(default_factory=list)


@dataclass
class RosterUser:
    username: str
    nickname: str
    cf_rating: int
    awards: List[str] = field(default_factory=list)
    medals: List[int] = field(default_factory=lambda: [0] * MEDAL_SLOTS)


@dataclass
class RosterGroup:
    group_id: int
    group_name: str
    users: List[RosterUser] = field(default_factory=list)


# ------------------------------------------------------------
# Contest view
# ------------------------------------------------------------

def index_submissions(submissions: Iterable[SubmissionRecord]) -> Dict[ProblemKey, List[Attempt]]:
    """Group a submission history by problem, keeping the supplied order."""
    index: Dict[ProblemKey, List[Attempt]] = {}
    for s in submissions:
        index.setdefault(s.key, []).append(Attempt(s.is_accepted, s.created_at))
    return index


def calculate_problem_result(
    attempts: Sequence[Attempt],
    start_time: datetime,
    duration: int,
) -> ProblemResult:
    """Earliest accepted attempt inside ``[start_time, start_time + duration]``.

    Accepted attempts outside the window are ignored, so a problem solved only
    in upsolving counts as unsolved for the contest.
    """
    end_time = start_time + timedelta(seconds=duration)
    best = NOT_SOLVED
    for attempt in attempts:
        if not attempt.is_accepted:
            continue
        if not start_time <= attempt.created_at <= end_time:
            continue
        elapsed = int((attempt.created_at - start_time).total_seconds())
        if best == NOT_SOLVED or elapsed < best:
            best = elapsed
    return ProblemResult(best)


def build_contest_rows(
    contests: Sequence[ContestInfo],
    index: Dict[ProblemKey, List[Attempt]],
) -> Tuple[int, List[ContestRow]]:
    """Build one row per contest and the widest problem set among them.

    Rows keep the input contest order.
    """
    max_problems = 0
    rows: List[ContestRow] = []
    for contest in contests:
        row = ContestRow(contest=contest)
        for key in contest.problems:
            result = calculate_problem_result(index.get(key, ()), contest.start_time, contest.duration)
            row.results.append(result)
            if result.solved:
                row.solved += 1
        max_problems = max(max_problems, len(contest.problems))
        rows.append(row)
    return max_problems, rows


def count_daily_submissions(
    timestamps: Iterable[datetime],
    begin: datetime,
    end: datetime,
) -> List[int]:
    """Bucket submission times into calendar days from ``begin`` to ``end``."""
    first_day = begin.date()
    days = (end.date() - first_day).days + 1
    counts = [0] * max(days, 0)
    for ts in timestamps:
        i = (ts.date() - first_day).days
        if 0 <= i < len(counts):
            counts[i] += 1
    return counts


# ------------------------------------------------------------
# Roster view
# ------------------------------------------------------------

def tally_medals(awards: Iterable[AwardRecord]) -> List[int]:
    medals = [0] * MEDAL_SLOTS
    for a in awards:
        if a.medal > 0:
            medals[a.medal - 1] += 1
    return medals


def aggregate_roster(
    groups: Sequence[GroupSnapshot],
    awards: Iterable[AwardRecord],
) -> List[RosterGroup]:
    """Attach medal counts and award labels to every official group member.

    Output order: groups by name descending, users by username ascending.
    Groups left without users are dropped.
    """
    users: Dict[str, RosterUser] = {}
    for g in groups:
        for member in g.users:
            users[member.username] = RosterUser(
                username=member.username,
                nickname=member.nickname,
                cf_rating=member.cf_rating,
            )

    for a in awards:
        user = users.get(a.username)
        if user is None:
            # not in any group included by the query filter
            continue
        if a.medal > 0:
            user.medals[a.medal - 1] += 1
        if a.award:
            user.awards.append(a.award)

    result: List[RosterGroup] = []
    for g in groups:
        members = [users[m.username] for m in g.users]
        if not members:
            continue
        members.sort(key=lambda u: u.username)
        result.append(RosterGroup(group_id=g.group_id, group_name=g.group_name, users=members))

    result.sort(key=lambda g: g.group_name, reverse=True)
    return result


__all__ = [
    "NOT_SOLVED",
    "Attempt",
    "AwardRecord",
    "ContestInfo",
    "ContestRow",
    "GroupMember",
    "GroupSnapshot",
    "ProblemKey",
    "ProblemResult",
    "RosterGroup",
    "RosterUser",
    "SubmissionRecord",
    "aggregate_roster",
    "build_contest_rows",
    "calculate_problem_result",
    "count_daily_submissions",
    "index_submissions",
    "tally_medals",
]
