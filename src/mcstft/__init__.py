"""mcstft public API."""

from .audio import read_wave, write_wave
from .config_schema import (
    STFTConfig,
    load_stft_options,
    options_to_dict,
    parse_stft_options,
    save_stft_options,
)
from .errors import (
    ConfigurationMismatch,
    InvalidConfiguration,
    ShapeMismatch,
    STFTError,
)
from .logging_utils import JsonlLogger, TransformRecord, configure_logging
from .signal import (
    Framer,
    PackedRealFFT,
    STFTResult,
    ShortTimeFTComputer,
    ShortTimeFTOptions,
    available_windows,
    build_stft,
    make_window,
)

__all__ = [
    "ShortTimeFTComputer",
    "ShortTimeFTOptions",
    "STFTResult",
    "Framer",
    "PackedRealFFT",
    "available_windows",
    "build_stft",
    "make_window",
    "STFTConfig",
    "load_stft_options",
    "options_to_dict",
    "parse_stft_options",
    "save_stft_options",
    "STFTError",
    "InvalidConfiguration",
    "ConfigurationMismatch",
    "ShapeMismatch",
    "read_wave",
    "write_wave",
    "JsonlLogger",
    "TransformRecord",
    "configure_logging",
]
