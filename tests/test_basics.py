from mcstft import (
    ConfigurationMismatch,
    InvalidConfiguration,
    ShapeMismatch,
    ShortTimeFTComputer,
    ShortTimeFTOptions,
    STFTError,
    build_stft,
)


def test_public_imports() -> None:
    assert ShortTimeFTComputer is not None
    assert ShortTimeFTOptions is not None
    assert build_stft is not None


def test_error_hierarchy() -> None:
    for error in (InvalidConfiguration, ConfigurationMismatch, ShapeMismatch):
        assert issubclass(error, STFTError)
        assert issubclass(error, ValueError)
