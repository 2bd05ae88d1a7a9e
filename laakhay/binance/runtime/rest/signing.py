"""Query-string construction and HMAC-SHA256 request signing.

Binance verifies a signed call by recomputing the HMAC over the query string
that precedes ``signature``. Keys are sorted and form-encoded so the same
parameter bag always yields the same bytes.
"""

from __future__ import annotations

import dataclasses
import hashlib
import hmac
import json
import time
from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel

from ...config import SIGNATURE_PARAM, TIMESTAMP_PARAM
from ...core.exceptions import ValidationError


def stringify(value: Any) -> str:
    """Render one parameter value the way the exchange expects it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def flatten_params(params: Any) -> dict[str, str]:
    """Flatten a parameter bag into ``{key: str(value)}``.

    Accepts None, a mapping, a pydantic model or a dataclass instance.
    None values are dropped.
    """
    if params is None:
        return {}
    if isinstance(params, BaseModel):
        raw: Mapping[str, Any] = params.model_dump(by_alias=True, exclude_none=True, mode="json")
    elif dataclasses.is_dataclass(params) and not isinstance(params, type):
        raw = dataclasses.asdict(params)
    elif isinstance(params, Mapping):
        raw = params
    else:
        raise ValidationError(f"Unsupported params type: {type(params).__name__}")

    return {str(k): stringify(v) for k, v in raw.items() if v is not None}


def encode_query(params: Mapping[str, str]) -> str:
    """Form-encode params with keys in sorted order."""
    return urlencode(sorted(params.items()))


def timestamp_ms() -> int:
    """Current time in milliseconds since the epoch."""
    return int(time.time() * 1000)


def sign(secret_key: str, payload: str) -> str:
    """Hex HMAC-SHA256 of payload keyed with secret_key."""
    return hmac.new(secret_key.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def signed_query(params: Any, secret_key: str, timestamp: int | None = None) -> str:
    """Build the final query string of a signed call.

    The timestamp joins the sorted params, the whole string is signed, and
    ``signature`` is appended last.
    """
    flat = flatten_params(params)
    flat[TIMESTAMP_PARAM] = str(timestamp if timestamp is not None else timestamp_ms())
    query = encode_query(flat)
    return f"{query}&{SIGNATURE_PARAM}={sign(secret_key, query)}"
