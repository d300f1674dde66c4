"""Exceptions raised while resolving notes and parsing scores."""


class BeepError(ValueError):
    """Base class for every input error the tool reports."""


class InvalidNoteFormat(BeepError):
    """Note token matches neither the sharp nor the flat grammar."""


class InvalidNoteName(BeepError):
    """Letter and accidental do not name one of the 12 pitch classes."""


class NoteOutOfRange(BeepError):
    """Note lies above C8 (relative to the tuning reference)."""


class MalformedSegment(BeepError):
    """Score segment has more than one ',' separator."""


class InvalidDuration(BeepError):
    """Duration is not a non-negative integer count of milliseconds."""


class InvalidFrequency(BeepError):
    """Frequency is not a positive number of Hz."""


class InvalidTuning(BeepError):
    """Reference pitch for A4 is not positive."""
