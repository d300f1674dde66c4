#!/usr/bin/env python3
"""pybeep - Play beep sounds from the command line."""

import argparse
import logging
import math
import sys
import time
from dataclasses import dataclass
from typing import Callable, Union

from beeptone.errors import BeepError, InvalidFrequency
from beeptone.notes import note_to_frequency
from beeptone.score import (
    DEFAULT_DURATION_MS,
    Event,
    ToneSink,
    check_duration,
    parse_score,
    play_score,
    score_duration_ms,
)

from .backends import build_sink
from .config import get_a4_pitch, get_backend, get_tone_config

log = logging.getLogger(__name__)

SCORE_HELP = """List of notes to play.
Format: '<note_name>[,duration][;note_name[,duration]...]'
note_name: Note name in the format '<A-G>[#|b]<octave>' e.g. C4, D#3, Gb2.
Can also be 'break' or '-', which pause for the specified duration.
duration: Duration in milliseconds, default: 500 (ms).
Example: C4;E4;G4;C5,1000"""


@dataclass(frozen=True)
class PlayFrequency:
    frequency: float
    duration_ms: int


@dataclass(frozen=True)
class PlayNote:
    note: str
    frequency: float
    duration_ms: int


@dataclass(frozen=True)
class PlayScore:
    events: tuple[Event, ...]


@dataclass(frozen=True)
class Wait:
    duration_ms: int


Command = Union[PlayFrequency, PlayNote, PlayScore, Wait]


def _a4_pitch(args: argparse.Namespace) -> float:
    """Tuning from -a/--A4Pitch, falling back to the configuration."""
    return args.a4_pitch if args.a4_pitch is not None else get_a4_pitch()


def build_command(args: argparse.Namespace) -> Command:
    """Validate parsed arguments and turn them into a Command.

    Notes and scores are resolved here, so nothing plays if any input is bad.
    """
    if args.command == "f":
        if not (math.isfinite(args.frequency) and args.frequency > 0):
            raise InvalidFrequency(f"Invalid frequency: {args.frequency} Hz. Must be a positive finite number.")
        return PlayFrequency(args.frequency, check_duration(args.duration))

    if args.command == "n":
        duration = check_duration(args.duration)
        return PlayNote(args.note, note_to_frequency(args.note, _a4_pitch(args)), duration)

    if args.command == "s":
        return PlayScore(parse_score(args.notes, _a4_pitch(args)))

    if args.command == "b":
        return Wait(check_duration(args.duration))

    raise ValueError(f"Unknown command: {args.command}")


def run_command(
    command: Command,
    sink: ToneSink,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Play a Command through *sink*."""
    if isinstance(command, PlayFrequency):
        sink.emit(command.frequency, command.duration_ms)
    elif isinstance(command, PlayNote):
        log.debug("%s = %.2f Hz", command.note, command.frequency)
        sink.emit(command.frequency, command.duration_ms)
    elif isinstance(command, PlayScore):
        play_score(command.events, sink, sleep)
    elif isinstance(command, Wait):
        sleep(command.duration_ms / 1000)
    else:
        raise TypeError(f"Unknown command: {command!r}")


def describe(command: Command) -> str:
    """One-line summary for verbose output."""
    if isinstance(command, PlayFrequency):
        return f"Beep {command.frequency:g} Hz for {command.duration_ms} ms"
    if isinstance(command, PlayNote):
        return f"Beep {command.note} ({command.frequency:.2f} Hz) for {command.duration_ms} ms"
    if isinstance(command, PlayScore):
        return f"Play {len(command.events)} event(s), {score_duration_ms(command.events)} ms total"
    return f"Wait {command.duration_ms} ms"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the f, n, s and b subcommands."""
    parser = argparse.ArgumentParser(
        prog="pybeep",
        description="CLI program to play Beep sound.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("-b", "--backend", help="Backend to use for beep sound (windowsapi, tone, silent)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # f command
    f_parser = subparsers.add_parser(
        "f", help="Play a beep sound with the specified frequency and duration."
    )
    f_parser.add_argument("frequency", type=float, help="Frequency of the beep sound in Hz.")
    f_parser.add_argument(
        "duration", type=int, nargs="?", default=DEFAULT_DURATION_MS,
        help="Duration of the beep sound in milliseconds. Default is 500 ms.",
    )

    # n command
    n_parser = subparsers.add_parser(
        "n", help="Play a beep sound with the specified note and duration."
    )
    n_parser.add_argument("note", help="Note to play. Example: C4")
    n_parser.add_argument(
        "duration", type=int, nargs="?", default=DEFAULT_DURATION_MS,
        help="Duration of the beep sound in milliseconds. Default is 500 ms.",
    )
    n_parser.add_argument(
        "-a", "--A4Pitch", dest="a4_pitch", type=float,
        help="Pitch of the A note in 4th octave (A4) in Hz. Default is 440.0 Hz.",
    )

    # s command
    s_parser = subparsers.add_parser(
        "s", help="Play more beep sounds using a music score.",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    s_parser.add_argument("notes", help=SCORE_HELP)
    s_parser.add_argument(
        "-a", "--A4Pitch", dest="a4_pitch", type=float,
        help="Pitch of the A note in 4th octave (A4) in Hz.\n"
             "This pitch is used as the standard pitch for calculating note pitches.\n"
             "Default is 440.0 Hz.",
    )

    # b command
    b_parser = subparsers.add_parser("b", help="Wait for a specified duration. (break)")
    b_parser.add_argument(
        "duration", type=int, nargs="?", default=DEFAULT_DURATION_MS,
        help="Duration to wait in milliseconds. Default is 500 ms.",
    )

    return parser


def protect_score(argv: list[str]) -> list[str]:
    """Move the score of an 's' command behind '--'.

    A score may open with a '-' rest ('-,200;C4'), which argparse would
    otherwise read as an option.
    """
    argv = list(argv)

    # Skip global options to find the subcommand
    i = 0
    while i < len(argv) and argv[i].startswith("-"):
        if argv[i] == "--":
            return argv
        i += 2 if argv[i] in ("-b", "--backend") else 1
    if i >= len(argv) or argv[i] != "s":
        return argv

    i += 1
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            return argv
        if arg in ("-a", "--A4Pitch"):
            i += 2
        elif arg in ("-h", "--help") or arg.startswith(("-a", "--A4Pitch=")):
            i += 1
        else:
            score = argv.pop(i)
            return argv + ["--", score]
    return argv


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(protect_score(sys.argv[1:] if argv is None else argv))

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(name)s: %(message)s")

    if args.command is None:
        parser.error("No subcommands provided. Use -h or --help for usage information.")

    try:
        command = build_command(args)
        sink = build_sink(args.backend or get_backend(), get_tone_config())
        if args.verbose:
            print(f"[INFO] {describe(command)}", file=sys.stderr)
        run_command(command, sink)
    except (BeepError, ValueError, OverflowError, OSError) as e:
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print(f"{parser.prog}: interrupted", file=sys.stderr)
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
