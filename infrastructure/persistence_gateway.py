"""Location-encoded persistence for boards.

The only durable form of a board is its code embedded in a location path:

- ``/<code>``           view mode
- ``/editmode/<code>``  edit mode
- ``/editmode``, ``/edit``  edit mode with the default board

The startup location is passed in as a plain string (path or full URL) so
the gateway has no dependency on any particular host environment.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from loguru import logger

from core.models import BoardState
from core.services import codec
from core.services.interfaces import LocationState

EDIT_PREFIX = "editmode"
EDIT_MARKER = "edit"


def _path_of(location: str) -> str:
    text = (location or "").strip()
    if "://" in text:
        text = urlsplit(text).path
    else:
        # drop query/fragment if a bare path carries them
        text = text.split("?", 1)[0].split("#", 1)[0]
    return text


def parse_location(location: str | None) -> LocationState:
    """Split a location into (decoded state, edit mode, raw code).

    Malformed or missing codes yield ``state=None``; callers use defaults.
    """
    path = _path_of(location or "")
    edit_mode = path.startswith("/" + EDIT_PREFIX) or path == "/" + EDIT_MARKER
    segment = path[1:] if path.startswith("/") else path

    code: str | None
    if segment.startswith(EDIT_PREFIX + "/"):
        code = segment.split("/")[1]
    elif segment in ("", EDIT_PREFIX, EDIT_MARKER):
        code = None
    else:
        code = segment

    state = codec.decode(code) if code else None
    if code and state is None:
        logger.warning("Location code could not be decoded, using defaults (len={})", len(code))
    return LocationState(state=state, edit_mode=edit_mode, code=code or None)


def export_path(code: str, edit: bool = False) -> str:
    """Return the shareable path for `code`."""
    if edit:
        return f"/{EDIT_PREFIX}/{code}"
    return f"/{code}"


class PersistenceGateway:
    """Reads the startup board and produces/consumes share codes."""

    def read(self, location: str | None) -> LocationState:
        """Hydrate from the startup location."""
        result = parse_location(location)
        logger.info(
            "Startup location parsed | edit_mode={} decoded={}",
            result.edit_mode,
            result.state is not None,
        )
        return result

    def export(self, state: BoardState, edit: bool = False) -> str:
        """Encode `state` and return it as a view or edit path."""
        return export_path(codec.encode(state), edit)

    def import_code(self, text: str | None) -> BoardState | None:
        """Decode a pasted raw code; None when it is not a valid board."""
        return codec.decode((text or "").strip())
