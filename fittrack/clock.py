from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    # naive UTC everywhere, matching the DateTime columns
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: dt.datetime) -> dt.datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(dt.timezone.utc).replace(tzinfo=None)
