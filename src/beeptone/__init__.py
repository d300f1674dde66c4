"""beeptone - Note names and score strings to timed beeps."""

from .errors import (
    BeepError,
    InvalidDuration,
    InvalidFrequency,
    InvalidNoteFormat,
    InvalidNoteName,
    InvalidTuning,
    MalformedSegment,
    NoteOutOfRange,
)
from .notes import (
    DEFAULT_A4_PITCH,
    FLAT_TO_SHARP,
    PITCH_CLASSES,
    note_to_frequency,
    parse_note,
    semitone_offset,
)
from .score import (
    DEFAULT_DURATION_MS,
    MAX_DURATION_MS,
    Rest,
    Tone,
    ToneSink,
    parse_duration,
    parse_score,
    play_score,
    score_duration_ms,
)

__version__ = "0.1.0"
__all__ = [
    "BeepError",
    "InvalidDuration",
    "InvalidFrequency",
    "InvalidNoteFormat",
    "InvalidNoteName",
    "InvalidTuning",
    "MalformedSegment",
    "NoteOutOfRange",
    "DEFAULT_A4_PITCH",
    "FLAT_TO_SHARP",
    "PITCH_CLASSES",
    "note_to_frequency",
    "parse_note",
    "semitone_offset",
    "DEFAULT_DURATION_MS",
    "MAX_DURATION_MS",
    "Rest",
    "Tone",
    "ToneSink",
    "parse_duration",
    "parse_score",
    "play_score",
    "score_duration_ms",
]
