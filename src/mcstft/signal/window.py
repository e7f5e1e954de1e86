"""Analysis window generation."""

from __future__ import annotations

import numpy as np
from scipy.signal import get_window

from mcstft.errors import InvalidConfiguration

# option name -> scipy.signal window name
_SCIPY_WINDOWS: dict[str, str] = {
    "hamming": "hamming",
    "hanning": "hann",
    "blackman": "blackman",
    "rectangular": "boxcar",
}


def available_windows() -> list[str]:
    """Return supported window names."""
    return sorted(_SCIPY_WINDOWS)


def make_window(name: str, frame_length: int) -> np.ndarray:
    """
    Build a symmetric analysis window.

    For $i = 0, \\dots, L-1$ with $a = 2\\pi / (L - 1)$:

    $$
       w_{\\mathrm{hamming}}(i) = 0.54 - 0.46 \\cos(a i), \\quad
       w_{\\mathrm{hanning}}(i) = 0.5 - 0.5 \\cos(a i)
    $$

    $$
       w_{\\mathrm{blackman}}(i) = 0.42 - 0.5 \\cos(a i) + 0.08 \\cos(2 a i)
    $$

    Parameters
    ----------
    name : str
        One of ``"hamming"``, ``"hanning"``, ``"blackman"``, ``"rectangular"``.
    frame_length : int
        Window length $L$, must be greater than one.

    Returns
    -------
    ndarray of shape (frame_length,)
        Read-only window values in ``[0, 1]``.
    """
    frame_length = int(frame_length)
    if frame_length < 2:
        raise InvalidConfiguration(
            f"frame_length must be greater than 1, got {frame_length}"
        )
    try:
        scipy_name = _SCIPY_WINDOWS[name]
    except KeyError:
        available = ", ".join(available_windows())
        raise InvalidConfiguration(
            f"Unknown window type '{name}'. Available windows: {available}"
        ) from None

    window = get_window(scipy_name, frame_length, fftbins=False).astype(np.float64)
    # blackman edges land on -1e-17 instead of 0
    window = np.clip(window, 0.0, 1.0)
    window.setflags(write=False)
    return window
