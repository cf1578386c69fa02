"""Opaque keyset-pagination cursors (newest first, ``id < cursor``)."""

import base64
import binascii
import json


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.urlsafe_b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor back to the last seen id. Malformed cursors restart from the top."""
    if not cursor:
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        last_id = int(payload["id"])
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
        return None
    # ids are positive BIGINTs
    return last_id if 0 < last_id < 2**63 else None
