"""JSON-lines protocol messages exchanged with a game front end."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_line(payload: dict) -> str:
    return json.dumps(payload, default=_default, ensure_ascii=False) + "\n"


@dataclass
class Request:
    """Incoming command from the front end."""
    id: int
    method: str
    params: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Request:
        params = data.get("params") or {}
        if not isinstance(params, dict):
            raise ValueError("Request 'params' must be an object")
        return cls(
            id=data.get("id", 0),
            method=data["method"],
            params=params,
        )

    @classmethod
    def from_json_line(cls, line: str) -> Request:
        data = json.loads(line)
        if not isinstance(data, dict) or "method" not in data:
            raise ValueError("Request must be an object with a 'method'")
        return cls.from_dict(data)


@dataclass
class Response:
    """Reply to a single request. Exactly one of result/error is sent."""
    id: int
    result: Optional[dict] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_json_line(self) -> str:
        d: dict = {"id": self.id}
        if self.error is not None:
            d["error"] = self.error
            if self.error_type:
                d["errorType"] = self.error_type
        else:
            d["result"] = self.result
        return encode_line(d)


@dataclass
class Notification:
    """Server-initiated message (timer ticks, timeouts); no reply expected."""
    method: str
    params: dict = field(default_factory=dict)

    def to_json_line(self) -> str:
        return encode_line({"method": self.method, "params": self.params})
