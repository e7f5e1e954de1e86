from pathlib import Path

from mcstft import JsonlLogger, TransformRecord
from mcstft.logging_utils import read_jsonl


def test_jsonl_logger_appends_records(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "run.jsonl"
    logger = JsonlLogger(path)
    logger.write(
        TransformRecord(
            command="stft",
            source="in.wav",
            target="out.npz",
            num_channels=2,
            num_samples=1600,
            num_frames=5,
            peak=123.0,
        )
    )
    logger.write({"command": "plot", "targets": ["a.png"]})

    records = read_jsonl(path)
    assert len(records) == 2
    assert records[0]["num_frames"] == 5
    assert records[0]["extra"] == {}
    assert records[1]["command"] == "plot"
