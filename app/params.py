# app/params.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Tuple

from fastapi import HTTPException, status

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> datetime:
    """Parse ``YYYY-MM-DD`` into local midnight; 400 on anything else."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except (AttributeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid date {value!r}, expected YYYY-MM-DD",
        )


DEFAULT_BEGIN_TIME = parse_date("2000-01-01")
DEFAULT_END_TIME = parse_date("2100-01-01")


def end_of_day(day: datetime) -> datetime:
    return day + timedelta(days=1) - timedelta(seconds=1)


def date_range(
    begin: Optional[str],
    end: Optional[str],
    *,
    default_begin: datetime = DEFAULT_BEGIN_TIME,
    default_end: datetime = DEFAULT_END_TIME,
) -> Tuple[datetime, datetime]:
    """Resolve an inclusive ``[begin, end]`` day range from query strings.

    The end day is widened to its last second so that ``end_time=2022-03-01``
    still covers everything submitted on March 1st.
    """
    begin_at = parse_date(begin) if begin else default_begin
    end_at = end_of_day(parse_date(end) if end else default_end)
    if begin_at > end_at:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="begin_time must not be after end_time",
        )
    return begin_at, end_at
