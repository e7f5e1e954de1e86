"""In-place real FFT operating on the packed spectrum layout."""

from __future__ import annotations

import numpy as np
from scipy import fft as sp_fft

from mcstft.errors import InvalidConfiguration


def next_power_of_two(n: int) -> int:
    """Return the smallest power of two that is ``>= n``."""
    n = int(n)
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    return 1 << (n - 1).bit_length()


def pack_spectrum(spectrum: np.ndarray) -> np.ndarray:
    """
    Pack a one-sided complex spectrum into a real buffer.

    Layout for ``n = 2 * (n_bins - 1)`` real values::

        [re(X_0), re(X_{n/2}), re(X_1), im(X_1), ..., re(X_{n/2-1}), im(X_{n/2-1})]

    The imaginary parts of the DC and Nyquist bins are dropped.
    """
    n_bins = spectrum.shape[-1]
    packed = np.empty(spectrum.shape[:-1] + (2 * (n_bins - 1),), dtype=np.float64)
    packed[..., 0] = spectrum[..., 0].real
    packed[..., 1] = spectrum[..., -1].real
    packed[..., 2::2] = spectrum[..., 1:-1].real
    packed[..., 3::2] = spectrum[..., 1:-1].imag
    return packed


def unpack_spectrum(packed: np.ndarray) -> np.ndarray:
    """Inverse of :func:`pack_spectrum`; returns ``n/2 + 1`` complex bins."""
    n_bins = packed.shape[-1] // 2 + 1
    spectrum = np.zeros(packed.shape[:-1] + (n_bins,), dtype=np.complex128)
    spectrum[..., 0] = packed[..., 0]
    spectrum[..., -1] = packed[..., 1]
    spectrum[..., 1:-1] = packed[..., 2::2] + 1j * packed[..., 3::2]
    return spectrum


class PackedRealFFT:
    """Fixed-size real FFT that transforms a buffer in place.

    The forward direction writes the packed layout described in
    :func:`pack_spectrum`. The inverse direction reads that layout and writes
    the unnormalized real sequence, i.e. ``n`` times the true inverse.

    Parameters
    ----------
    size : int
        Transform length, a power of two no smaller than 2.
    """

    def __init__(self, size: int) -> None:
        size = int(size)
        if size < 2 or size & (size - 1):
            raise InvalidConfiguration(
                f"FFT size must be a power of two >= 2, got {size}"
            )
        self.size = size

    def compute(self, buffer: np.ndarray, forward: bool) -> None:
        """Transform ``buffer`` in place."""
        if buffer.shape != (self.size,):
            raise ValueError(
                f"buffer must be 1-D with length {self.size}, got {buffer.shape}"
            )
        if forward:
            buffer[:] = pack_spectrum(sp_fft.rfft(buffer))
        else:
            buffer[:] = sp_fft.irfft(unpack_spectrum(buffer), n=self.size) * self.size
