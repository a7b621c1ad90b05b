from datetime import datetime

import pytest
from fastapi import HTTPException

from app.params import DEFAULT_BEGIN_TIME, DEFAULT_END_TIME, date_range, parse_date


def test_parse_date():
    assert parse_date("2022-03-01") == datetime(2022, 3, 1)


@pytest.mark.parametrize("raw", ["2022/03/01", "2022-13-01", "yesterday", ""])
def test_parse_date_rejects_malformed(raw):
    with pytest.raises(HTTPException) as excinfo:
        parse_date(raw)
    assert excinfo.value.status_code == 400


def test_end_date_covers_whole_day():
    begin, end = date_range("2022-03-01", "2022-03-07")
    assert begin == datetime(2022, 3, 1)
    assert end == datetime(2022, 3, 7, 23, 59, 59)


def test_single_day_range():
    begin, end = date_range("2022-03-01", "2022-03-01")
    assert (end - begin).total_seconds() == 24 * 3600 - 1


def test_defaults_when_missing():
    begin, end = date_range(None, None)
    assert begin == DEFAULT_BEGIN_TIME == datetime(2000, 1, 1)
    assert end == datetime(2100, 1, 1, 23, 59, 59)
    assert DEFAULT_END_TIME == datetime(2100, 1, 1)


def test_reversed_range_is_rejected():
    with pytest.raises(HTTPException) as excinfo:
        date_range("2022-03-02", "2022-03-01")
    assert excinfo.value.status_code == 400
