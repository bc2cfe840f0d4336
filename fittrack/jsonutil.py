from __future__ import annotations

from typing import Any

import json


def dumps(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def loads(s: str | None) -> Any:
    if not s:
        return None
    return json.loads(s)


def loads_list(s: str | None) -> list[Any]:
    obj = loads(s)
    return obj if isinstance(obj, list) else []


def loads_dict(s: str | None) -> dict[str, Any]:
    obj = loads(s)
    return obj if isinstance(obj, dict) else {}
