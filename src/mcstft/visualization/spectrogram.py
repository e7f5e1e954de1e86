"""Plotting utilities for channel-major spectrograms."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np


def spectrogram_to_db(
    spectrogram: np.ndarray,
    *,
    power: bool = False,
    is_log: bool = False,
) -> np.ndarray:
    """Convert a power/magnitude spectrogram (optionally natural-log) to dB."""
    scale = 10.0 if power else 20.0
    if is_log:
        return scale / np.log(10.0) * spectrogram
    return scale * np.log10(np.maximum(spectrogram, 1.0e-12))


def save_channel_spectrograms(
    spectrogram: np.ndarray,
    num_channels: int,
    name: str,
    outdir: str | Path,
    *,
    power: bool = False,
    is_log: bool = False,
    vmin: float | None = None,
    vmax: float | None = None,
) -> list[Path]:
    """Save one image per channel from a ``(n_channels * n_frames, n_bins)`` spectrogram."""
    if spectrogram.ndim != 2:
        raise ValueError("spectrogram must be 2-D shaped (n_rows, n_bins)")
    if num_channels < 1 or spectrogram.shape[0] % num_channels:
        raise ValueError(
            f"{spectrogram.shape[0]} rows cannot be split into {num_channels} channel(s)"
        )

    output_dir = Path(outdir)
    output_dir.mkdir(parents=True, exist_ok=True)

    n_frames = spectrogram.shape[0] // num_channels
    db = spectrogram_to_db(spectrogram, power=power, is_log=is_log)
    saved: list[Path] = []
    for ch in range(num_channels):
        path = output_dir / f"{name}-{ch}.png"
        block = db[ch * n_frames : (ch + 1) * n_frames].T
        fig, ax = plt.subplots()
        ax.imshow(block, origin="lower", aspect="auto", vmin=vmin, vmax=vmax)
        ax.set_xlabel("frame")
        ax.set_ylabel("bin")
        fig.savefig(path)
        plt.close(fig)
        saved.append(path)

    return saved
