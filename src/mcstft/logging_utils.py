"""Logging setup and JSONL run records for STFT commands."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Mapping


def configure_logging(level: str) -> None:
    """Configure logging format and level for CLI commands."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(message)s",
    )


@dataclass
class TransformRecord:
    """Summary of one processed file."""

    command: str
    source: str
    target: str
    num_channels: int
    num_samples: int
    num_frames: int
    peak: float
    extra: dict[str, Any] = field(default_factory=dict)


class JsonlLogger:
    """Append JSON-serializable records to a JSON Lines file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, record: TransformRecord | Mapping[str, Any]) -> None:
        payload = asdict(record) if isinstance(record, TransformRecord) else dict(record)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload, ensure_ascii=False) + "\n")


def read_jsonl(path: str | Path) -> list[dict[str, Any]]:
    """Read every record of a JSON Lines file."""
    with Path(path).open("r", encoding="utf-8") as handle:
        return [json.loads(line) for line in handle if line.strip()]
