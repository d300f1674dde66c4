"""pybeep - Play beeps from frequencies, note names and score strings."""

__version__ = "0.1.0"
