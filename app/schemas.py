# app/schemas.py
# ------------------------------------------------------------
# Pydantic v2 schemas, organized by domain
# ------------------------------------------------------------
from datetime import datetime
import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def _sanitize_single_line_text(value: Optional[str], *, allow_empty: bool = False) -> Optional[str]:
    if value is None:
        return value
    if not isinstance(value, str):
        raise TypeError("Expected string input")
    cleaned = _CONTROL_CHAR_RE.sub("", value).strip()
    if not allow_empty and not cleaned:
        raise ValueError("Value cannot be empty")
    if any(ch in {"\n", "\r"} for ch in cleaned):
        raise ValueError("Value must be a single line of text")
    if "<" in cleaned or ">" in cleaned:
        raise ValueError("HTML tags are not allowed in this field")
    return cleaned


# ============================================================
# Users
# ============================================================

class UserProfileFields(BaseModel):
    nickname: str = Field(min_length=1, max_length=64)
    id_card: str = Field(default="", max_length=32)
    phone: str = Field(default="", max_length=32)
    qq: str = Field(default="", max_length=32)
    t_shirt: str = Field(default="", max_length=16)

    @field_validator("nickname", mode="before")
    @classmethod
    def _clean_nickname(cls, value: str) -> str:
        return _sanitize_single_line_text(value)

    @field_validator("id_card", "phone", "qq", "t_shirt", mode="before")
    @classmethod
    def _clean_optional(cls, value: Optional[str]) -> str:
        return _sanitize_single_line_text(value, allow_empty=True) or ""


class UserCreate(UserProfileFields):
    username: str = Field(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(default="", max_length=128)
    cf_rating: int = 0
    is_enable: bool = True
    is_admin: bool = False


class UserUpdate(UserProfileFields):
    username: str


class UserAdminUpdate(BaseModel):
    username: str
    is_admin: bool


class UserEnableUpdate(BaseModel):
    username: str
    is_enable: bool


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    nickname: str
    cf_rating: int
    is_enable: bool
    is_admin: bool


class AwardRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    medal: int
    award: str
    xcpc_id: int


class UserDetail(UserProfile):
    medals: List[int]
    awards: List[AwardRead]


class MessageOut(BaseModel):
    msg: str


# ============================================================
# Accounts
# ============================================================

class AccountUpdate(BaseModel):
    username: str
    oj_id: int
    account: str = Field(default="", max_length=128)

    @field_validator("account", mode="before")
    @classmethod
    def _clean_account(cls, value: Optional[str]) -> str:
        return _sanitize_single_line_text(value, allow_empty=True) or ""


class AccountRead(BaseModel):
    oj_id: int
    oj_name: str
    account: str = ""


# ============================================================
# Contest view
# ============================================================

class ProblemOut(BaseModel):
    oj_id: int
    pid: str


class ProblemResultOut(BaseModel):
    # seconds after contest start, -1 if not solved in time
    accepted_time: int


class ContestRowOut(BaseModel):
    contest_id: int
    contest_name: str
    start_time: datetime
    duration: int
    solved: int
    problems: List[ProblemOut]
    problem_results: List[ProblemResultOut]


class UserContestsOut(BaseModel):
    max_problems: int
    contests: List[ContestRowOut]


# ============================================================
# Roster view
# ============================================================

class RosterUserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    nickname: str
    cf_rating: int
    awards: List[str]
    medals: List[int]


class RosterGroupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group_id: int
    group_name: str
    users: List[RosterUserOut]
