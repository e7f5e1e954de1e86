"""Waveform reading and writing in the 16-bit PCM sample range."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import soundfile as sf

LOGGER = logging.getLogger(__name__)

_INT16 = np.iinfo(np.int16)


def read_wave(path: str | Path) -> tuple[np.ndarray, int]:
    """Read an audio file as channel-first samples in int16 range.

    Returns
    -------
    wave : ndarray of shape (n_channels, n_samples), float64
    sample_rate : int
    """
    data, sample_rate = sf.read(Path(path), dtype="int16", always_2d=True)
    return data.T.astype(np.float64), int(sample_rate)


def write_wave(path: str | Path, wave: np.ndarray, sample_rate: int) -> Path:
    """Write channel-first samples as 16-bit PCM, clipping out-of-range values."""
    samples = np.asarray(wave, dtype=np.float64)
    if samples.ndim == 1:
        samples = samples[None, :]
    if samples.ndim != 2:
        raise ValueError(
            f"wave must be 1-D or 2-D shaped (n_channels, n_samples), got {samples.shape}"
        )
    n_clipped = int(np.count_nonzero((samples > _INT16.max) | (samples < _INT16.min)))
    if n_clipped:
        LOGGER.warning("Clipped %d sample(s) while writing %s", n_clipped, path)
    pcm = np.clip(np.rint(samples), _INT16.min, _INT16.max).astype(np.int16)

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    sf.write(out, pcm.T, int(sample_rate), subtype="PCM_16")
    return out
