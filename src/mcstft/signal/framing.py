"""Frame indexing and overlap-add accumulation."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mcstft.errors import InvalidConfiguration


@dataclass(frozen=True)
class Framer:
    """Fixed shift/length frame arithmetic.

    Parameters
    ----------
    frame_shift:
        Offset in samples between the starts of consecutive frames.
    frame_length:
        Number of samples covered by one frame.
    """

    frame_shift: int
    frame_length: int

    def __post_init__(self) -> None:
        if self.frame_shift <= 0:
            raise InvalidConfiguration(
                f"frame_shift must be positive, got {self.frame_shift}"
            )
        if self.frame_length < 2:
            raise InvalidConfiguration(
                f"frame_length must be greater than 1, got {self.frame_length}"
            )

    def num_frames(self, num_samples: int) -> int:
        """Return the number of frames needed to cover ``num_samples``.

        The final frame may run past the last sample, in which case its tail
        is zero padded. ``num_samples(num_frames(n)) >= n`` always holds. This
        rounds up and deliberately differs from Kaldi's truncating count, which
        drops the trailing partial frame (n=10, L=4, S=4: 3 frames, not 2).
        """
        num_samples = int(num_samples)
        if num_samples <= 0:
            return 0
        if num_samples <= self.frame_length:
            return 1
        excess = num_samples - self.frame_length
        return 1 + -(-excess // self.frame_shift)

    def num_samples(self, num_frames: int) -> int:
        """Return the waveform length spanned by ``num_frames`` frames."""
        num_frames = int(num_frames)
        if num_frames <= 0:
            return 0
        return (num_frames - 1) * self.frame_shift + self.frame_length

    def frame_bounds(self, index: int, num_samples: int) -> tuple[int, int]:
        """Return the ``[begin, end)`` sample span available to frame ``index``."""
        begin = index * self.frame_shift
        end = min(begin + self.frame_length, num_samples)
        return begin, max(begin, end)

    def overlap_add(self, frames: np.ndarray) -> np.ndarray:
        """
        Sum frames at their original offsets.

        Parameters
        ----------
        frames : ndarray of shape (n_frames, frame_length)

        Returns
        -------
        ndarray of shape (num_samples(n_frames),)
        """
        if frames.ndim != 2 or frames.shape[1] != self.frame_length:
            raise ValueError(
                "frames must be 2-D shaped (n_frames, frame_length): "
                f"got {frames.shape}, frame_length={self.frame_length}"
            )
        n_frames = frames.shape[0]
        out = np.zeros(self.num_samples(n_frames), dtype=np.float64)
        # row order is kept so overlapping additions land deterministically
        for i in range(n_frames):
            begin = i * self.frame_shift
            out[begin : begin + self.frame_length] += frames[i]
        return out
