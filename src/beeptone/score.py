"""Parse and play score strings like 'C4;E4;G4;C5,1000'.

Format: '<segment>[;<segment>...]' where a segment is '<note|break|->[,<ms>]'.
Empty segments are skipped, so a trailing ';' is harmless.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Protocol, Union

from .errors import InvalidDuration, MalformedSegment
from .notes import DEFAULT_A4_PITCH, note_to_frequency

log = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 500
REST_NAMES = ("break", "-")

# winsound.Beep takes a C int of ms; time.sleep overflows long before INT64
MAX_DURATION_MS = 2**31 - 1
_DURATION_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class Tone:
    """A beep at *frequency* Hz lasting *duration_ms*."""
    frequency: float
    duration_ms: int


@dataclass(frozen=True)
class Rest:
    """Silence lasting *duration_ms*."""
    duration_ms: int


Event = Union[Tone, Rest]


class ToneSink(Protocol):
    """Anything that can play a blocking beep."""

    def emit(self, frequency: float, duration_ms: int) -> None: ...


def parse_duration(text: str) -> int:
    """Parse a millisecond count, rejecting negatives and non-integers."""
    if not _DURATION_PATTERN.fullmatch(text):
        raise InvalidDuration(f"Invalid duration: {text!r} is not an integer number of milliseconds.")
    # INT64 has at most 19 digits; longer strings are out of range before int() sees them
    digits = text.lstrip("+-").lstrip("0")
    if len(digits) > 19:
        raise InvalidDuration(f"Invalid duration: {len(digits)}-digit value is out of range.")
    return check_duration(int(text))


def check_duration(value: int) -> int:
    """Return *value* if it is a usable duration in ms."""
    if value < 0:
        raise InvalidDuration(f"Invalid duration: {value} ms is negative.")
    if value > MAX_DURATION_MS:
        raise InvalidDuration(f"Invalid duration: {value} ms is out of range. Max is {MAX_DURATION_MS} ms.")
    return value


def parse_segment(segment: str, a4_pitch: float = DEFAULT_A4_PITCH) -> Event | None:
    """Turn one 'note[,ms]' segment into an event, or None if it is empty."""
    fields = segment.split(",")
    if len(fields) > 2:
        raise MalformedSegment(f"Invalid format for notes: {segment}.")

    name = fields[0]
    if not name:
        return None

    duration = parse_duration(fields[1]) if len(fields) == 2 else DEFAULT_DURATION_MS
    if name in REST_NAMES:
        return Rest(duration)
    return Tone(note_to_frequency(name, a4_pitch), duration)


def parse_score(score: str, a4_pitch: float = DEFAULT_A4_PITCH) -> tuple[Event, ...]:
    """Parse a whole score into events, in input order.

    The first bad segment aborts the parse; nothing is returned for the
    segments before it.

    Example: parse_score("C4;-,200;E4") ->
        (Tone(261.63, 500), Rest(200), Tone(329.63, 500))
    """
    events = []
    for segment in score.split(";"):
        event = parse_segment(segment, a4_pitch)
        if event is None:
            continue
        events.append(event)
    return tuple(events)


def score_duration_ms(events: tuple[Event, ...]) -> int:
    """Total nominal playing time of *events*."""
    return sum(event.duration_ms for event in events)


def play_score(
    events: tuple[Event, ...],
    sink: ToneSink,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Play *events* one after another, blocking for each.

    Tones go to *sink*; rests just wait.
    """
    for event in events:
        if isinstance(event, Rest):
            log.debug("rest %d ms", event.duration_ms)
            sleep(event.duration_ms / 1000)
        else:
            log.debug("tone %.2f Hz for %d ms", event.frequency, event.duration_ms)
            sink.emit(event.frequency, event.duration_ms)
