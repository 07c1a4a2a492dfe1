"""
EPG (Electronic Program Guide) data models.
"""
from datetime import datetime, tzinfo
from typing import Optional

from pydantic import BaseModel

UNKNOWN_TITLE = "No program information"


class Program(BaseModel):
    """One guide entry. Times are whole-second Unix epochs, end exclusive."""
    start: int
    end: int
    title: str
    description: str = ""

    def is_airing(self, now: int) -> bool:
        return self.start <= now < self.end


def format_clock(epoch: int, tz: Optional[tzinfo] = None) -> str:
    """Hour:minute in the viewer's time zone (local unless ``tz`` is given)."""
    moment = datetime.fromtimestamp(epoch, tz)
    return f"{moment.hour}:{moment.minute:02d}"


class ProgramSummary(BaseModel):
    """Human-facing view of a program, or the unknown-program sentinel."""
    title: str
    time_range: str = ""
    start: Optional[int] = None
    end: Optional[int] = None
    description: str = ""
    known: bool = True

    @classmethod
    def from_program(cls, program: Program, tz: Optional[tzinfo] = None) -> "ProgramSummary":
        return cls(
            title=program.title,
            time_range=f"{format_clock(program.start, tz)} - {format_clock(program.end, tz)}",
            start=program.start,
            end=program.end,
            description=program.description,
        )


UNKNOWN_PROGRAM = ProgramSummary(title=UNKNOWN_TITLE, known=False)


class NowNext(BaseModel):
    """Current and following program for one channel."""
    current: ProgramSummary = UNKNOWN_PROGRAM
    next: ProgramSummary = UNKNOWN_PROGRAM


class ChannelGuide(BaseModel):
    """Now/next for one channel from a bulk prefetch; ``available`` is False on fetch failure."""
    stream_id: int
    available: bool = True
    now_next: NowNext = NowNext()
