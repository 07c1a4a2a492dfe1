"""
Short-EPG payload parser.
Turns the provider's ``get_short_epg`` response into ordered Program records.
"""
import base64
import binascii
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from xtreamclient.models.epg import Program

logger = logging.getLogger(__name__)

_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]+={0,2}$")


def decode_text(value: Any) -> str:
    """
    Decode base64 text fields.

    Providers usually base64-encode EPG titles and descriptions. A value is
    decoded only when it is strict base64 of printable UTF-8; anything else
    is returned unchanged.
    """
    if value is None or value == "":
        return ""
    if not isinstance(value, str):
        return str(value)
    text = value.strip()
    if len(text) % 4 or not _BASE64_RE.match(text):
        return value
    try:
        decoded = base64.b64decode(text, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return value
    if not decoded or not all(ch.isprintable() or ch in "\n\r\t" for ch in decoded):
        return value
    return decoded


def parse_epoch(value: Any) -> Optional[int]:
    """
    Parse a provider time field to whole Unix seconds.

    Accepts epoch numbers (or numeric strings) and ``YYYY-MM-DD HH:MM:SS``
    strings, the latter read as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip()
    if re.fullmatch(r"-?\d+(\.\d+)?", text):
        return int(float(text))
    try:
        moment = datetime.strptime(text, "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None
    return int(moment.replace(tzinfo=timezone.utc).timestamp())


def parse_program(entry: dict) -> Optional[Program]:
    """Build a Program from one listing entry, or None if its times are unreadable."""
    start = parse_epoch(entry.get("start_timestamp"))
    if start is None:
        start = parse_epoch(entry.get("start"))
    end = parse_epoch(entry.get("stop_timestamp"))
    if end is None:
        end = parse_epoch(entry.get("end"))
    if end is None:
        end = parse_epoch(entry.get("stop"))

    if start is None or end is None:
        return None

    return Program(
        start=start,
        end=end,
        title=decode_text(entry.get("title")),
        description=decode_text(entry.get("description")),
    )


def parse_short_epg(payload: Any) -> list[Program]:
    """
    Parse a ``get_short_epg`` payload.

    ``epg_listings`` is either a list or a mapping keyed by channel; for a
    mapping the first listing is used. Listing order is kept as-is.
    """
    if not isinstance(payload, dict):
        return []

    listings = payload.get("epg_listings")
    if isinstance(listings, dict):
        listings = next(iter(listings.values()), [])
    if not isinstance(listings, list):
        return []

    programs = []
    skipped = 0
    for entry in listings:
        try:
            program = parse_program(entry) if isinstance(entry, dict) else None
        except (ValueError, TypeError, OverflowError, ValidationError):
            program = None
        if program is None:
            skipped += 1
            continue
        programs.append(program)

    if skipped:
        logger.warning(f"Skipped {skipped} unreadable EPG entries")
    return programs
