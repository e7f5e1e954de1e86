"""Signal processing utilities."""

from .fft import PackedRealFFT, next_power_of_two, pack_spectrum, unpack_spectrum
from .framing import Framer
from .stft import STFTResult, ShortTimeFTComputer, ShortTimeFTOptions, build_stft
from .window import available_windows, make_window

__all__ = [
    "Framer",
    "PackedRealFFT",
    "STFTResult",
    "ShortTimeFTComputer",
    "ShortTimeFTOptions",
    "available_windows",
    "build_stft",
    "make_window",
    "next_power_of_two",
    "pack_spectrum",
    "unpack_spectrum",
]
