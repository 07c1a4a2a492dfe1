"""
EPG window resolution.

Finds the program airing at a given instant and the one after it. Missing
guide data resolves to the unknown-program sentinel instead of an error, so
many channels can be rendered side by side without one bad listing failing
the rest.
"""
import asyncio
import logging
import time
from datetime import tzinfo
from typing import Optional, Sequence, Union

from xtreamclient.errors import ProviderError
from xtreamclient.models.epg import (
    UNKNOWN_PROGRAM,
    ChannelGuide,
    NowNext,
    Program,
    ProgramSummary,
)

logger = logging.getLogger(__name__)


def find_current_index(programs: Sequence[Program], now: Union[int, float]) -> Optional[int]:
    """
    Index of the first program with ``start <= now < end``.

    The listing is scanned in the order given and not re-sorted, so on an
    out-of-order listing the first match in listing order wins.
    """
    now = int(now)
    for index, program in enumerate(programs):
        if program.is_airing(now):
            return index
    return None


def resolve_now_next(
    programs: Sequence[Program],
    now: Union[int, float, None] = None,
    tz: Optional[tzinfo] = None,
) -> NowNext:
    """
    Resolve the current and next program for one channel.

    Args:
        programs: Channel listing in provider order
        now: Unix epoch seconds (defaults to the current time)
        tz: Display time zone for the time ranges (defaults to local)

    Returns:
        NowNext; either side is the unknown sentinel when it can't be determined.
        "next" is the entry right after "current" in listing order.
    """
    if now is None:
        now = time.time()

    index = find_current_index(programs, now)
    if index is None:
        return NowNext()

    current = ProgramSummary.from_program(programs[index], tz)
    if index + 1 < len(programs):
        following = ProgramSummary.from_program(programs[index + 1], tz)
    else:
        following = UNKNOWN_PROGRAM
    return NowNext(current=current, next=following)


async def fetch_guide(
    client,
    stream_id: int,
    now: Union[int, float, None] = None,
    limit: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> ChannelGuide:
    """Fetch and resolve one channel; any failure yields an unavailable placeholder."""
    try:
        programs = await client.get_short_epg(stream_id, limit)
        now_next = resolve_now_next(programs, now, tz)
    except ProviderError as e:
        logger.warning(f"EPG unavailable for stream {stream_id}: {e}")
        return ChannelGuide(stream_id=stream_id, available=False)
    except Exception as e:
        logger.warning(f"EPG unavailable for stream {stream_id}: {type(e).__name__}: {e}")
        return ChannelGuide(stream_id=stream_id, available=False)
    return ChannelGuide(stream_id=stream_id, now_next=now_next)


async def prefetch_guides(
    client,
    stream_ids: Sequence[int],
    now: Union[int, float, None] = None,
    limit: Optional[int] = None,
    max_channels: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> list[ChannelGuide]:
    """
    Fetch now/next for several channels concurrently.

    Results line up with ``stream_ids`` (truncated to ``max_channels``,
    which defaults to the client's ``epg_prefetch_limit`` setting). One
    channel failing never fails the others.
    """
    if max_channels is None:
        max_channels = client.settings.epg_prefetch_limit
    if now is None:
        now = time.time()

    selected = list(stream_ids)[:max_channels]
    guides = await asyncio.gather(
        *(fetch_guide(client, stream_id, now, limit, tz) for stream_id in selected)
    )
    unavailable = sum(1 for guide in guides if not guide.available)
    logger.info(f"Prefetched EPG for {len(guides)} channels ({unavailable} unavailable)")
    return list(guides)
