"""Typed OmegaConf schema and YAML loading for STFT options."""

from __future__ import annotations

import importlib
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from .errors import InvalidConfiguration
from .signal.stft import ShortTimeFTOptions
from .signal.window import available_windows

try:
    OmegaConf = importlib.import_module("omegaconf").OmegaConf
except ModuleNotFoundError as exc:  # pragma: no cover
    raise RuntimeError(
        "mcstft.config_schema requires 'omegaconf'. Install it with `pip install omegaconf`."
    ) from exc


@dataclass
class STFTConfig:
    """STFT configuration schema.

    Field names and defaults mirror :class:`ShortTimeFTOptions`.
    """

    frame_shift: int = 256
    frame_length: int = 1024
    window: str = "hamming"
    normalize_input: bool = False
    enable_scale: bool = False
    apply_pow: bool = False
    apply_log: bool = False


def _decode(data: Mapping[str, object], overrides: Iterable[str] | None) -> STFTConfig:
    base = OmegaConf.structured(STFTConfig)
    merged = OmegaConf.merge(base, OmegaConf.create(dict(data)))
    override_list = [item for item in (overrides or []) if item]
    if override_list:
        merged = OmegaConf.merge(merged, OmegaConf.from_dotlist(override_list))
    decoded = OmegaConf.to_object(merged)
    if not isinstance(decoded, STFTConfig):
        raise TypeError("Failed to decode config as STFTConfig")
    return decoded


def _to_options(config: STFTConfig) -> ShortTimeFTOptions:
    if config.window not in available_windows():
        raise InvalidConfiguration(
            f"Unknown window type '{config.window}'. "
            f"Available windows: {', '.join(available_windows())}"
        )
    if config.frame_length < 2:
        raise InvalidConfiguration(
            f"frame_length must be greater than 1, got {config.frame_length}"
        )
    if config.frame_shift <= 0:
        raise InvalidConfiguration(
            f"frame_shift must be positive, got {config.frame_shift}"
        )
    return ShortTimeFTOptions(**asdict(config))


def parse_stft_options(
    data: Mapping[str, object] | None = None,
    *,
    overrides: Iterable[str] | None = None,
) -> ShortTimeFTOptions:
    """Decode a mapping plus ``key=value`` overrides into :class:`ShortTimeFTOptions`.

    A mapping with a top-level ``stft`` section is accepted as well.
    """
    payload = dict(data or {})
    section = payload.get("stft")
    if isinstance(section, Mapping):
        payload = dict(section)
    return _to_options(_decode(payload, overrides))


def load_stft_options(
    path: str | Path | None = None,
    *,
    overrides: Iterable[str] | None = None,
) -> ShortTimeFTOptions:
    """Load options from a YAML file; without a path only defaults and overrides apply."""
    if path is None:
        return parse_stft_options({}, overrides=overrides)
    loaded = OmegaConf.to_container(OmegaConf.load(Path(path)), resolve=True)
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise TypeError(f"Expected mapping in {path}, got {type(loaded)!r}")
    return parse_stft_options(
        {str(key): value for key, value in loaded.items()}, overrides=overrides
    )


def options_to_dict(options: ShortTimeFTOptions) -> dict[str, Any]:
    """Convert :class:`ShortTimeFTOptions` to a plain dictionary."""
    return asdict(options)


def save_stft_options(path: str | Path, options: ShortTimeFTOptions) -> None:
    """Write options to a YAML file under an ``stft`` section."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as handle:
        yaml.safe_dump({"stft": options_to_dict(options)}, handle, sort_keys=False)
