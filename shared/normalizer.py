"""Normalize heterogeneous remote-agent reply bodies into one canonical string.

Recognized shapes:
    [{"output": "..."}]     first element only, ordered key search
    ["..."]                 first element used directly
    {"response": "..."}     ordered key search
    "..."                   bare JSON string
    anything that is not JSON is used verbatim
"""

import json
import logging

from shared.constants import PLACEHOLDER_REPLIES, REPLY_KEYS
from shared.models import ErrorKind, Failure, Outcome, Success

logger = logging.getLogger("chat_relay")


def _serialize(value) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _as_text(value) -> str:
    if isinstance(value, str):
        return value
    return _serialize(value)


def extract_from_object(obj: dict) -> str:
    """Return the first non-null value under REPLY_KEYS, else the serialized object."""
    for key in REPLY_KEYS:
        if obj.get(key) is not None:
            return _as_text(obj[key])
    return _serialize(obj)


def normalize(raw: str | bytes, encoding: str = "utf-8") -> Outcome:
    """Turn a non-empty raw reply body into ``Success`` or ``Failure``.

    Args:
        raw: Response body as text or undecoded bytes
        encoding: Charset used when ``raw`` is bytes

    Returns:
        Success(content) with the canonical reply, or Failure(kind, detail)
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            logger.warning("Undecodable response body: %s", exc)
            return Failure(
                kind=ErrorKind.MALFORMED_PAYLOAD,
                detail=f"response body is not valid {encoding} text",
            )

    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        # Not JSON (or nested too deep to parse): the raw text is the reply
        content = raw
    else:
        if isinstance(data, list):
            if not data:
                return Failure(kind=ErrorKind.UNRECOGNIZED_SHAPE, detail="empty array response")
            first = data[0]
            if isinstance(first, str):
                content = first
            elif isinstance(first, dict):
                content = extract_from_object(first)
            else:
                content = _serialize(data)
        elif isinstance(data, dict):
            content = extract_from_object(data)
        elif isinstance(data, str):
            content = data
        else:
            content = _serialize(data)

    if not content or content in PLACEHOLDER_REPLIES:
        logger.warning("Could not extract a reply from body: %.200s", raw)
        return Failure(
            kind=ErrorKind.UNRECOGNIZED_SHAPE,
            detail="could not extract a valid response",
        )
    return Success(content=content)
