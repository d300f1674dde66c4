"""Note name to frequency conversion in 12-tone equal temperament."""

import math
import re

from .errors import InvalidNoteFormat, InvalidNoteName, InvalidTuning, NoteOutOfRange

DEFAULT_A4_PITCH = 440.0

PITCH_CLASSES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

FLAT_TO_SHARP = {"Db": "C#", "Eb": "D#", "Gb": "F#", "Ab": "G#", "Bb": "A#"}

# Semitones from A4 to C8
MAX_OFFSET = 39

_SHARP_PATTERN = re.compile(r"([A-G]#?)([0-9]+)")
_FLAT_PATTERN = re.compile(r"([A-G]b)([0-9]+)")
_A_INDEX = PITCH_CLASSES.index("A")


def _normalize(note: str) -> str:
    """Upper-case the letter and lower-case a flat marker that follows it."""
    if not note:
        return note
    head = note[0].upper()
    rest = note[1:]
    if rest[:1] in ("b", "B"):
        rest = "b" + rest[1:]
    return head + rest


def parse_note(note: str) -> tuple[str, int]:
    """Split a note like 'Gb2' into its sharp-form pitch class and octave.

    Examples: 'C4' -> ('C', 4), 'd#3' -> ('D#', 3), 'Gb2' -> ('F#', 2)

    Raises:
        InvalidNoteFormat: the token is not <A-G>[#|b]<digits>
        InvalidNoteName: the accidental does not exist on that letter (E#, Cb)
    """
    normalized = _normalize(note)

    match = _SHARP_PATTERN.fullmatch(normalized)
    if match:
        name = match.group(1)
    else:
        match = _FLAT_PATTERN.fullmatch(normalized)
        if not match:
            raise InvalidNoteFormat(f"Invalid note format: What is {note}?")
        flat = match.group(1)
        name = FLAT_TO_SHARP.get(flat, flat)

    if name not in PITCH_CLASSES:
        raise InvalidNoteName(f"Invalid note name: There's no such a note as {name}!")

    return name, int(match.group(2))


def semitone_offset(note: str) -> int:
    """Signed number of semitones from A4 to *note*, capped at C8."""
    name, octave = parse_note(note)
    offset = (PITCH_CLASSES.index(name) - _A_INDEX) + (octave - 4) * 12
    if offset > MAX_OFFSET:
        raise NoteOutOfRange(f"Note is too high: {note}. Max is C8.")
    return offset


def note_to_frequency(note: str, a4_pitch: float = DEFAULT_A4_PITCH) -> float:
    """Convert a note like 'Eb4' to its frequency in Hz.

    Format: <A-G>[#|b]<octave>, case-insensitive.
    Examples with A4=440: C4=261.63, A4=440, Eb4=311.13, C8=4186.01
    """
    if not (math.isfinite(a4_pitch) and a4_pitch > 0):
        raise InvalidTuning(f"A4 pitch must be a positive finite number, got {a4_pitch}")
    offset = semitone_offset(note)
    return a4_pitch * (2.0 ** (offset / 12.0))
