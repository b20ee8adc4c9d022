"""Board state codec.

A board is turned into a compact JSON document, deflated with zlib and
written out as URL-safe base64 with the padding stripped. The resulting
alphabet (``A-Za-z0-9-_``) can be embedded in a URL path segment without
escaping.

`decode` never raises: malformed, truncated or wrongly shaped input yields
``None`` so callers can fall back to the default board.
"""

from __future__ import annotations

import base64
import binascii
import json
import math
from typing import Any
import zlib

from loguru import logger

from core.models import DEFAULT_COLOR, DEFAULT_NAME, OPENING_SIDES, OUTLINES, BoardState, Door
from core.utils import format_iso_datetime, parse_iso_datetime

COMPRESSION_LEVEL = 9


class CodeFormatError(ValueError):
    """Raised internally when a decoded payload does not have the board shape."""


def encode(state: BoardState) -> str:
    """Serialize `state` into a URL-safe code."""
    payload = {
        "doors": [door_to_record(d) for d in state.doors],
        "bg": state.background,
        "name": state.name,
    }
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    packed = zlib.compress(text.encode("utf-8"), COMPRESSION_LEVEL)
    return base64.urlsafe_b64encode(packed).decode("ascii").rstrip("=")


def decode(code: str | None) -> BoardState | None:
    """Parse a code produced by `encode`; return None on any failure."""
    if not isinstance(code, str) or not code.strip():
        return None
    raw = code.strip()
    try:
        packed = base64.urlsafe_b64decode(raw + "=" * (-len(raw) % 4))
        text = zlib.decompress(packed).decode("utf-8")
    except (binascii.Error, ValueError, zlib.error) as ex:
        logger.debug("Code decompression failed: {}", ex)
        return None
    if not text:
        logger.debug("Code decompressed to nothing (len={})", len(raw))
        return None
    try:
        payload = json.loads(text)
        return state_from_payload(payload)
    except (ValueError, TypeError, OverflowError, RecursionError) as ex:
        logger.debug("Code payload rejected: {}", ex)
        return None


def door_to_record(door: Door) -> dict[str, Any]:
    """Return the wire record for `door` (camelCase keys, no session state)."""
    return {
        "id": door.id,
        "x": door.x,
        "y": door.y,
        "w": door.w,
        "h": door.h,
        "color": door.color,
        "borderRadius": door.border_radius,
        "openingSide": door.opening_side,
        "outline": door.outline,
        "background": door.background,
        "showNumber": door.show_number,
        "closedLabel": door.closed_label,
        "content": door.content,
        "openingDate": format_iso_datetime(door.opening_date),
    }


def state_from_payload(payload: Any) -> BoardState:
    """Validate a parsed JSON payload and build a `BoardState`.

    Raises:
        CodeFormatError: If the payload does not describe a board.
    """
    if not isinstance(payload, dict):
        raise CodeFormatError("payload is not an object")
    records = payload.get("doors")
    if not isinstance(records, list):
        raise CodeFormatError("doors is not a list")

    doors: list[Door] = []
    seen: set[int] = set()
    for rec in records:
        door = door_from_record(rec)
        if door.id in seen:
            raise CodeFormatError(f"duplicate door id {door.id}")
        seen.add(door.id)
        doors.append(door)

    background = payload.get("bg")
    if background is not None and not isinstance(background, str):
        raise CodeFormatError("bg is not a string")
    name = payload.get("name", DEFAULT_NAME)
    if name is None:
        name = DEFAULT_NAME
    if not isinstance(name, str):
        raise CodeFormatError("name is not a string")
    return BoardState(doors=doors, background=background, name=name)


def door_from_record(rec: Any) -> Door:
    """Build a `Door` from one wire record.

    Missing optional fields take the `Door` defaults; unknown opening sides
    fall back to ``right`` and unknown outlines to ``none``.
    """
    if not isinstance(rec, dict):
        raise CodeFormatError("door record is not an object")

    door_id = rec.get("id")
    if isinstance(door_id, float) and door_id.is_integer():
        door_id = int(door_id)
    if isinstance(door_id, bool) or not isinstance(door_id, int) or door_id <= 0:
        raise CodeFormatError(f"invalid door id {door_id!r}")

    opening_date = parse_iso_datetime(rec.get("openingDate"))
    if opening_date is None:
        raise CodeFormatError(f"door {door_id}: invalid openingDate")

    w = _number(rec, "w", 120)
    h = _number(rec, "h", 90)
    if w <= 0 or h <= 0:
        raise CodeFormatError(f"door {door_id}: non-positive size")

    side = rec.get("openingSide") or "right"
    outline = rec.get("outline") or "thin"
    return Door(
        id=door_id,
        x=max(0, _number(rec, "x", None)),
        y=max(0, _number(rec, "y", None)),
        w=w,
        h=h,
        color=_string(rec, "color", DEFAULT_COLOR),
        border_radius=max(0, _number(rec, "borderRadius", 0)),
        opening_side=side if side in OPENING_SIDES else "right",
        outline=outline if outline in OUTLINES else "none",
        background=_flag(rec, "background", True),
        show_number=_flag(rec, "showNumber", True),
        closed_label=_string(rec, "closedLabel", ""),
        content=_string(rec, "content", ""),
        opening_date=opening_date,
    )


def _number(rec: dict, key: str, default: float | None) -> float:
    value = rec.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CodeFormatError(f"{key} is not a number")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        finite = False
    if not finite:
        raise CodeFormatError(f"{key} is not finite")
    return value


def _string(rec: dict, key: str, default: str) -> str:
    value = rec.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise CodeFormatError(f"{key} is not a string")
    return value


def _flag(rec: dict, key: str, default: bool) -> bool:
    value = rec.get(key)
    if value is None:
        return default
    return bool(value)
