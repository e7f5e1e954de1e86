"""Multi-channel short-time Fourier transform on the packed real-FFT layout."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from mcstft.errors import ConfigurationMismatch, InvalidConfiguration, ShapeMismatch

from .fft import PackedRealFFT, next_power_of_two
from .framing import Framer
from .window import make_window

LOGGER = logging.getLogger(__name__)

INT16_MAX = float(np.iinfo(np.int16).max)
LOG_FLOOR = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class ShortTimeFTOptions:
    """STFT configuration shared by analysis and synthesis.

    Parameters
    ----------
    frame_shift:
        Frame shift in number of samples.
    frame_length:
        Frame length in number of samples.
    window:
        ``"hamming"``, ``"hanning"``, ``"blackman"`` or ``"rectangular"``.
    normalize_input:
        Scale samples by ``1/32767`` into ``[-1, 1]``, like MATLAB or librosa.
    enable_scale:
        Scale each channel so that its peak absolute sample is 32767.
    apply_pow:
        Use the power spectrum instead of the magnitude spectrum.
    apply_log:
        Apply natural log on the computed spectrum.
    """

    frame_shift: int = 256
    frame_length: int = 1024
    window: str = "hamming"
    normalize_input: bool = False
    enable_scale: bool = False
    apply_pow: bool = False
    apply_log: bool = False

    @property
    def padding_length(self) -> int:
        """FFT size, the next power of two ``>= frame_length``."""
        return next_power_of_two(self.frame_length)

    @property
    def num_bins(self) -> int:
        return self.padding_length // 2 + 1


@dataclass(frozen=True)
class STFTResult:
    """Outputs of :meth:`ShortTimeFTComputer.compute`; unrequested fields are ``None``."""

    stft: np.ndarray | None = None
    spectrogram: np.ndarray | None = None
    phase: np.ndarray | None = None


def _as_packed(stft: np.ndarray) -> np.ndarray:
    stft = np.asarray(stft, dtype=np.float64)
    if stft.ndim != 2:
        raise ValueError(f"stft must be 2-D shaped (n_rows, n_fft), got {stft.shape}")
    if stft.shape[1] < 2 or stft.shape[1] % 2:
        raise ValueError(
            f"stft must have an even number (>= 2) of columns, got {stft.shape[1]}"
        )
    return stft


class ShortTimeFTComputer:
    """
    Framed forward/inverse real FFT for ``(n_channels, n_samples)`` waveforms.

    Forward analysis produces a packed spectrum matrix of shape
    ``(n_channels * n_frames, padding_length)`` with channel-major rows
    (row ``c * n_frames + t`` holds frame ``t`` of channel ``c``). Each row
    stores::

        [r_0, r_{N/2}, r_1, i_1, ..., r_{N/2-1}, i_{N/2-1}]

    where $N$ is the padding length and $i_0 = i_{N/2} = 0$ are omitted.

    Synthesis uses the analysis window again without orthogonalization, so
    the reconstructed amplitude is controlled by an explicit rescale target
    instead.

    Examples
    --------
    ```python

       import numpy as np
       from mcstft import ShortTimeFTComputer, ShortTimeFTOptions

       opts = ShortTimeFTOptions(frame_shift=256, frame_length=512, window="hanning")
       computer = ShortTimeFTComputer(opts)
       wave = np.random.randn(2, 16000) * 1000
       result = computer.compute(wave, spectrogram=True, phase=True)
       packed = computer.polar(result.spectrogram, result.phase)
       recon = computer.inverse_transform(packed, num_channels=2)
    ```
    """

    def __init__(self, options: ShortTimeFTOptions | None = None) -> None:
        self.options = options if options is not None else ShortTimeFTOptions()
        self.framer = Framer(
            frame_shift=int(self.options.frame_shift),
            frame_length=int(self.options.frame_length),
        )
        self.window = make_window(self.options.window, self.framer.frame_length)
        self.fft = PackedRealFFT(self.options.padding_length)

    @property
    def frame_length(self) -> int:
        return self.framer.frame_length

    @property
    def frame_shift(self) -> int:
        return self.framer.frame_shift

    @property
    def padding_length(self) -> int:
        return self.fft.size

    def num_frames(self, num_samples: int) -> int:
        return self.framer.num_frames(num_samples)

    def num_samples(self, num_frames: int) -> int:
        return self.framer.num_samples(num_frames)

    def _check_window(self) -> None:
        if self.window.shape != (self.frame_length,):
            raise ConfigurationMismatch(
                f"window length {self.window.shape[0]} does not match "
                f"frame_length {self.frame_length}"
            )

    def _prepare_wave(self, wave: np.ndarray) -> np.ndarray:
        samples = np.array(wave, dtype=np.float64, copy=True)
        if samples.ndim == 1:
            samples = samples[None, :]
        if samples.ndim != 2:
            raise ValueError(
                f"wave must be 1-D or 2-D shaped (n_channels, n_samples), got {samples.shape}"
            )
        if samples.shape[0] == 0 or samples.shape[1] == 0:
            raise ValueError(
                f"wave must contain at least one channel and one sample, got {samples.shape}"
            )

        if self.options.normalize_input:
            samples *= 1.0 / INT16_MAX

        if self.options.enable_scale:
            for c in range(samples.shape[0]):
                peak = np.max(np.abs(samples[c]))
                if peak == 0.0:
                    LOGGER.warning("Channel %d is silent, skip scaling", c)
                    continue
                samples[c] *= INT16_MAX / peak
        return samples

    def transform(self, wave: np.ndarray) -> np.ndarray:
        """
        Run STFT over every channel of ``wave``.

        Parameters
        ----------
        wave : ndarray of shape (n_channels, n_samples) or (n_samples,)
            Samples in int16 range. The array is copied and never modified.

        Returns
        -------
        ndarray of shape (n_channels * n_frames, padding_length)
            Packed spectra, channel-major.
        """
        self._check_window()
        samples = self._prepare_wave(wave)
        n_channels, n_samples = samples.shape
        n_frames = self.num_frames(n_samples)

        stft = np.zeros((n_channels * n_frames, self.padding_length), dtype=np.float64)
        for c in range(n_channels):
            for t in range(n_frames):
                row = stft[c * n_frames + t]
                begin, end = self.framer.frame_bounds(t, n_samples)
                row[: end - begin] = samples[c, begin:end]
                row[: self.frame_length] *= self.window
                self.fft.compute(row, forward=True)
        LOGGER.debug(
            "STFT: %d channel(s), %d sample(s) -> %d frame(s)",
            n_channels,
            n_samples,
            n_frames,
        )
        return stft

    def spectrogram(self, stft: np.ndarray) -> np.ndarray:
        """
        Compute (log) power or magnitude spectrogram from packed spectra.

        $$
           S_{t,f} = r_{t,f}^2 + i_{t,f}^2
        $$

        followed by ``sqrt`` unless ``apply_pow`` and ``log`` if ``apply_log``.
        """
        stft = _as_packed(stft)
        n_bins = stft.shape[1] // 2 + 1

        spectra = np.empty((stft.shape[0], n_bins), dtype=np.float64)
        spectra[:, 0] = stft[:, 0] ** 2
        spectra[:, -1] = stft[:, 1] ** 2
        spectra[:, 1:-1] = stft[:, 2::2] ** 2 + stft[:, 3::2] ** 2

        if not self.options.apply_pow:
            spectra = np.sqrt(spectra)
        if self.options.apply_log:
            # avoid -inf
            spectra = np.log(np.maximum(spectra, LOG_FLOOR))
        return spectra

    def phase_angle(self, stft: np.ndarray) -> np.ndarray:
        """Compute phase angle in radians from packed spectra."""
        stft = _as_packed(stft)
        n_bins = stft.shape[1] // 2 + 1

        angle = np.empty((stft.shape[0], n_bins), dtype=np.float64)
        # DC and Nyquist are real: atan2(0, r)
        angle[:, 0] = np.where(stft[:, 0] < 0.0, np.pi, 0.0)
        angle[:, -1] = np.where(stft[:, 1] < 0.0, np.pi, 0.0)
        angle[:, 1:-1] = np.arctan2(stft[:, 3::2], stft[:, 2::2])
        return angle

    def polar(self, spectrogram: np.ndarray, phase: np.ndarray) -> np.ndarray:
        """
        Restore packed spectra from a spectrogram and phase angles.

        The spectrogram transform configured by ``apply_log``/``apply_pow`` is
        undone first. The Nyquist slot is written with a negated magnitude to
        agree with the inverse transform. Inputs are not modified.

        Parameters
        ----------
        spectrogram : ndarray of shape (n_rows, n_bins)
        phase : ndarray of shape (n_rows, n_bins)

        Returns
        -------
        ndarray of shape (n_rows, 2 * (n_bins - 1))
        """
        spectrogram = np.asarray(spectrogram, dtype=np.float64)
        phase = np.asarray(phase, dtype=np.float64)
        if spectrogram.shape != phase.shape:
            raise ShapeMismatch(
                "spectrogram and phase must share a shape: "
                f"got {spectrogram.shape} and {phase.shape}"
            )
        if spectrogram.ndim != 2 or spectrogram.shape[1] < 2:
            raise ValueError(
                "spectrogram must be 2-D shaped (n_rows, n_bins) with n_bins >= 2, "
                f"got {spectrogram.shape}"
            )

        magnitude = spectrogram
        if self.options.apply_log:
            magnitude = np.exp(magnitude)
        if self.options.apply_pow:
            magnitude = np.sqrt(magnitude)

        n_rows, n_bins = magnitude.shape
        stft = np.empty((n_rows, 2 * (n_bins - 1)), dtype=np.float64)
        stft[:, 0] = magnitude[:, 0]
        stft[:, 1] = -magnitude[:, -1]
        stft[:, 2::2] = np.cos(phase[:, 1:-1]) * magnitude[:, 1:-1]
        stft[:, 3::2] = np.sin(phase[:, 1:-1]) * magnitude[:, 1:-1]
        return stft

    def inverse_transform(
        self,
        stft: np.ndarray,
        amplitude: float = 0.0,
        *,
        num_channels: int = 1,
    ) -> np.ndarray:
        """
        Reconstruct a waveform with windowed overlap-add.

        Parameters
        ----------
        stft : ndarray of shape (num_channels * n_frames, padding_length)
            Packed spectra. The array is not modified.
        amplitude : float, default=0.0
            Target peak after reconstruction. ``0`` rescales to 32767 so the
            result can be written as 16-bit PCM without clipping; a negative
            value disables rescaling.
        num_channels : int, default=1
            Number of channel-major row blocks in ``stft``.

        Returns
        -------
        ndarray of shape (num_channels, n_samples)
        """
        stft = _as_packed(stft)
        self._check_window()
        if stft.shape[1] != self.padding_length:
            raise ConfigurationMismatch(
                f"stft has {stft.shape[1]} columns, expected {self.padding_length}"
            )
        num_channels = int(num_channels)
        if num_channels < 1 or stft.shape[0] % num_channels:
            raise ShapeMismatch(
                f"{stft.shape[0]} rows cannot be split into {num_channels} channel(s)"
            )
        n_frames = stft.shape[0] // num_channels
        if n_frames == 0:
            raise ValueError("stft must contain at least one frame")

        segments = np.empty((stft.shape[0], self.frame_length), dtype=np.float64)
        buffer = np.empty(self.padding_length, dtype=np.float64)
        for i in range(stft.shape[0]):
            buffer[:] = stft[i]
            self.fft.compute(buffer, forward=False)
            buffer *= 1.0 / self.frame_length
            # NOTE: the synthesis window should be orthogonalized with the
            # analysis window; ``amplitude`` controls the output energy instead
            segments[i] = buffer[: self.frame_length] * self.window

        wave = np.stack(
            [
                self.framer.overlap_add(segments[c * n_frames : (c + 1) * n_frames])
                for c in range(num_channels)
            ]
        )

        if amplitude == 0:
            amplitude = INT16_MAX
        if amplitude > 0:
            peak = float(np.max(np.abs(wave)))
            if peak == 0.0:
                LOGGER.warning("Reconstructed waveform is silent, skip rescaling")
            else:
                LOGGER.debug("Rescale samples(%s/%s)", amplitude, peak)
                wave *= amplitude / peak
        return wave

    def compute(
        self,
        wave: np.ndarray,
        *,
        stft: bool = True,
        spectrogram: bool = False,
        phase: bool = False,
    ) -> STFTResult:
        """Run the forward transform once and derive the requested outputs."""
        packed = self.transform(wave)
        return STFTResult(
            stft=packed if stft else None,
            spectrogram=self.spectrogram(packed) if spectrogram else None,
            phase=self.phase_angle(packed) if phase else None,
        )

    def resynthesize(self, wave: np.ndarray, amplitude: float = 0.0) -> np.ndarray:
        """Analyse ``wave`` and rebuild it through the polar representation."""
        samples = np.asarray(wave)
        num_channels = 1 if samples.ndim == 1 else samples.shape[0]
        packed = self.transform(samples)
        packed = self.polar(self.spectrogram(packed), self.phase_angle(packed))
        return self.inverse_transform(packed, amplitude, num_channels=num_channels)


def build_stft(options: ShortTimeFTOptions) -> ShortTimeFTComputer:
    """Build a :class:`ShortTimeFTComputer` from ``options``."""
    if not isinstance(options, ShortTimeFTOptions):
        raise InvalidConfiguration(
            f"Expected ShortTimeFTOptions, got {type(options)!r}"
        )
    return ShortTimeFTComputer(options)
