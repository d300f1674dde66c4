"""Beep synthesis: plain square or sine waves rendered with numpy."""

from pathlib import Path

import numpy as np
from scipy.io import wavfile

DEFAULT_SAMPLE_RATE = 44100
DEFAULT_AMPLITUDE = 0.3
WAVEFORMS = ("square", "sine")

# Fade in/out to avoid clicks at the edges of each beep
FADE_SECONDS = 0.005


def _envelope(n_samples: int, sample_rate: int) -> np.ndarray:
    """Linear fade in and out, flat in between."""
    envelope = np.ones(n_samples)
    fade_samples = min(int(sample_rate * FADE_SECONDS), n_samples // 2)
    if fade_samples > 0:
        ramp = np.linspace(0.0, 1.0, fade_samples, endpoint=False)
        envelope[:fade_samples] = ramp
        envelope[-fade_samples:] = ramp[::-1]
    return envelope


def generate_tone(
    frequency: float,
    duration_ms: int,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
    waveform: str = "square",
    amplitude: float = DEFAULT_AMPLITUDE,
) -> np.ndarray:
    """Generate a single beep at the given frequency.

    Args:
        frequency: Tone frequency in Hz
        duration_ms: Duration in milliseconds
        sample_rate: Sample rate in Hz
        waveform: "square" or "sine"
        amplitude: Peak level in [0, 1]

    Returns:
        Float samples in [-amplitude, amplitude]
    """
    if waveform not in WAVEFORMS:
        raise ValueError(f"Unknown waveform '{waveform}'. Use one of: {', '.join(WAVEFORMS)}")

    n_samples = int(sample_rate * duration_ms / 1000)
    t = np.arange(n_samples) / sample_rate
    wave = np.sin(2 * np.pi * frequency * t)
    if waveform == "square":
        wave = np.where(wave >= 0, 1.0, -1.0)

    return amplitude * _envelope(n_samples, sample_rate) * wave


def samples_to_wav(samples: np.ndarray, path: Path, sample_rate: int = DEFAULT_SAMPLE_RATE) -> None:
    """Write float samples to a 16-bit mono WAV file."""
    audio_int16 = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    path.parent.mkdir(parents=True, exist_ok=True)
    wavfile.write(str(path), sample_rate, audio_int16)
