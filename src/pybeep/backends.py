"""Beep backends: things that turn (frequency, duration) into sound.

Every backend implements ToneSink.emit and blocks until the beep is over.
"""

import logging
import platform
import shutil
import subprocess
import time
from pathlib import Path
from typing import Callable

from beeptone.errors import BeepError
from beeptone.score import ToneSink
from beeptone.synthesis import (
    DEFAULT_AMPLITUDE,
    DEFAULT_SAMPLE_RATE,
    WAVEFORMS,
    generate_tone,
    samples_to_wav,
)

from .paths import tones_dir

log = logging.getLogger(__name__)

BACKENDS = ("windowsapi", "tone", "silent")

# Rendered tone WAVs kept in tones_dir(); oldest are removed first
MAX_CACHED_TONES = 64

__all__ = [
    "BACKENDS",
    "MAX_CACHED_TONES",
    "PlaybackError",
    "SilentSink",
    "ToneGeneratorSink",
    "ToneSink",
    "UnsupportedBackend",
    "WindowsBeepSink",
    "build_sink",
    "default_backend",
    "get_audio_player",
    "play_audio",
    "prune_tone_cache",
]


class UnsupportedBackend(BeepError):
    """Requested backend does not exist or cannot run on this platform."""


class PlaybackError(OSError):
    """The audio player failed to play a tone."""


def default_backend() -> str:
    """Backend used when none is configured."""
    return "windowsapi" if platform.system() == "Windows" else "tone"


class WindowsBeepSink:
    """Beep through the Windows API (winsound.Beep)."""

    def __init__(self):
        try:
            import winsound
        except ImportError:
            raise UnsupportedBackend("Unsupported backend: windowsapi is only available on Windows") from None
        self._beep = winsound.Beep

    def emit(self, frequency: float, duration_ms: int) -> None:
        # winsound.Beep wants whole Hz; it raises ValueError outside 37..32767
        self._beep(round(frequency), duration_ms)


class SilentSink:
    """Wait out each beep without making a sound."""

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self._sleep = sleep

    def emit(self, frequency: float, duration_ms: int) -> None:
        log.debug("silent beep %.2f Hz for %d ms", frequency, duration_ms)
        self._sleep(duration_ms / 1000)


def get_audio_player() -> list[str] | None:
    """Get the appropriate audio player command for this platform."""
    system = platform.system()

    if system == "Darwin":
        if shutil.which("afplay"):
            return ["afplay"]
    elif system == "Linux":
        if shutil.which("paplay"):
            return ["paplay"]
        if shutil.which("aplay"):
            return ["aplay", "-q"]
    elif system == "Windows":
        if shutil.which("powershell"):
            return ["powershell", "-c"]

    if shutil.which("ffplay"):
        return ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"]

    return None


def play_audio(audio_path: Path, player: list[str]) -> None:
    """Play an audio file synchronously with *player*."""
    if player[0] == "powershell":
        command = [*player, f'(New-Object Media.SoundPlayer "{audio_path}").PlaySync()']
    else:
        command = [*player, str(audio_path)]

    log.debug("play: %s", " ".join(command))
    try:
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError as e:
        raise PlaybackError(f"Audio playback failed: {e}") from e
    except FileNotFoundError:
        raise PlaybackError(f"Audio player not found: {player[0]}") from None


def prune_tone_cache(directory: Path, keep: int, current: Path | None = None) -> int:
    """Remove all but the *keep* most recently used WAVs. Returns count removed.

    *current* is never removed and counts towards *keep*.
    """
    if not directory.exists():
        return 0
    tones = [p for p in directory.glob("*.wav") if p != current]
    tones.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    if current is not None:
        keep -= 1
    removed = 0
    for stale in tones[max(keep, 0):]:
        stale.unlink(missing_ok=True)
        removed += 1
    if removed:
        log.debug("pruned %d cached tone(s) from %s", removed, directory)
    return removed


class ToneGeneratorSink:
    """Software beep: render a wave with numpy and play it as a WAV file.

    Rendered files are cached in tones_dir() keyed by waveform, frequency,
    duration and sample rate, up to *max_cached* files.
    """

    def __init__(
        self,
        sample_rate: int = DEFAULT_SAMPLE_RATE,
        amplitude: float = DEFAULT_AMPLITUDE,
        waveform: str = "square",
        player: list[str] | None = None,
        max_cached: int = MAX_CACHED_TONES,
    ):
        self.sample_rate = sample_rate
        self.amplitude = amplitude
        if waveform not in WAVEFORMS:
            raise ValueError(f"Unknown waveform '{waveform}'. Use one of: {', '.join(WAVEFORMS)}")
        self.waveform = waveform
        self.max_cached = max_cached
        self.player = player or get_audio_player()
        if self.player is None:
            raise UnsupportedBackend("Unsupported backend: tone needs an audio player (afplay, paplay, aplay or ffplay)")

    def render(self, frequency: float, duration_ms: int) -> Path:
        """Return the cached WAV for this beep, generating it if needed."""
        tone_path = tones_dir() / f"{self.waveform}_{frequency:.2f}_{duration_ms}_{self.sample_rate}.wav"
        if tone_path.exists():
            tone_path.touch()
            return tone_path

        samples = generate_tone(frequency, duration_ms, self.sample_rate, self.waveform, self.amplitude)
        samples_to_wav(samples, tone_path, self.sample_rate)
        log.debug("rendered %s", tone_path)
        prune_tone_cache(tone_path.parent, self.max_cached, current=tone_path)
        return tone_path

    def emit(self, frequency: float, duration_ms: int) -> None:
        if duration_ms == 0:
            return
        play_audio(self.render(frequency, duration_ms), self.player)


def build_sink(name: str | None, tone_config: dict | None = None) -> ToneSink:
    """Build the backend called *name* (platform default when None)."""
    name = name or default_backend()
    log.debug("backend: %s", name)

    if name == "windowsapi":
        return WindowsBeepSink()
    elif name == "tone":
        tone_config = tone_config or {}
        return ToneGeneratorSink(
            sample_rate=int(tone_config.get("sample_rate", DEFAULT_SAMPLE_RATE)),
            amplitude=float(tone_config.get("amplitude", DEFAULT_AMPLITUDE)),
            waveform=tone_config.get("waveform", "square"),
        )
    elif name == "silent":
        return SilentSink()
    else:
        raise UnsupportedBackend(f"Unsupported backend: {name}")
