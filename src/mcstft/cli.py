"""Command line entry points for forward and inverse STFT."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

import numpy as np

from .audio import read_wave, write_wave
from .config_schema import load_stft_options
from .logging_utils import JsonlLogger, TransformRecord, configure_logging
from .signal import ShortTimeFTComputer, available_windows, build_stft
from .visualization import save_channel_spectrograms

LOGGER = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 16000


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", type=Path, default=None, help="YAML file with STFT options."
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        help="STFT option override in key=value form (e.g. frame_length=512).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcstft",
        description="Multi-channel short-time Fourier transform toolkit",
    )
    parser.add_argument(
        "--list-windows",
        action="store_true",
        help="Print available window names and exit",
    )
    parser.add_argument("--log-level", type=str, default="INFO")
    parser.add_argument(
        "--log-jsonl",
        type=Path,
        default=None,
        help="Append one JSON record per processed file to this path.",
    )
    sub = parser.add_subparsers(dest="command")

    stft = sub.add_parser("stft", help="Compute STFT outputs of a WAV file.")
    stft.add_argument("input_wav", type=Path)
    stft.add_argument("output_npz", type=Path)
    _add_common_arguments(stft)
    stft.add_argument(
        "--no-stft", action="store_true", help="Do not store packed spectra."
    )
    stft.add_argument(
        "--spectrogram", action="store_true", help="Store (power) spectrogram."
    )
    stft.add_argument("--phase", action="store_true", help="Store phase angles.")

    istft = sub.add_parser("istft", help="Reconstruct a WAV file from STFT outputs.")
    istft.add_argument("input_npz", type=Path)
    istft.add_argument("output_wav", type=Path)
    _add_common_arguments(istft)
    istft.add_argument(
        "--amplitude",
        type=float,
        default=0.0,
        help="Target peak; 0 rescales to int16 range, negative keeps raw scale.",
    )
    istft.add_argument("--sample-rate", type=int, default=None)

    resynth = sub.add_parser(
        "resynth", help="Analyse a WAV file and rebuild it from magnitude and phase."
    )
    resynth.add_argument("input_wav", type=Path)
    resynth.add_argument("output_wav", type=Path)
    _add_common_arguments(resynth)
    resynth.add_argument("--amplitude", type=float, default=0.0)

    plot = sub.add_parser("plot", help="Save spectrogram images from an NPZ file.")
    plot.add_argument("input_npz", type=Path)
    plot.add_argument("output_dir", type=Path)
    _add_common_arguments(plot)
    return parser


def _computer(args: argparse.Namespace) -> ShortTimeFTComputer:
    options = load_stft_options(args.config, overrides=args.set or None)
    LOGGER.debug("STFT options: %s", options)
    return build_stft(options)


def _peak(array: np.ndarray) -> float:
    return float(np.max(np.abs(array))) if array.size else 0.0


def stft_command(args: argparse.Namespace, journal: JsonlLogger | None) -> None:
    """Write packed spectra, spectrogram and/or phase of one WAV file."""
    computer = _computer(args)
    wave, sample_rate = read_wave(args.input_wav)
    if args.no_stft and not (args.spectrogram or args.phase):
        raise ValueError("Nothing to compute: --no-stft without --spectrogram/--phase.")

    result = computer.compute(
        wave,
        stft=not args.no_stft,
        spectrogram=args.spectrogram,
        phase=args.phase,
    )
    arrays = {
        name: value
        for name, value in (
            ("stft", result.stft),
            ("spectrogram", result.spectrogram),
            ("phase", result.phase),
        )
        if value is not None
    }
    args.output_npz.parent.mkdir(parents=True, exist_ok=True)
    np.savez(
        args.output_npz,
        sample_rate=np.int64(sample_rate),
        num_channels=np.int64(wave.shape[0]),
        **arrays,
    )
    n_frames = computer.num_frames(wave.shape[1])
    LOGGER.info(
        "Saved %s (%s) for %d channel(s) x %d frame(s)",
        args.output_npz,
        ", ".join(sorted(arrays)),
        wave.shape[0],
        n_frames,
    )
    if journal is not None:
        journal.write(
            TransformRecord(
                command="stft",
                source=str(args.input_wav),
                target=str(args.output_npz),
                num_channels=int(wave.shape[0]),
                num_samples=int(wave.shape[1]),
                num_frames=n_frames,
                peak=_peak(wave),
                extra={"outputs": sorted(arrays)},
            )
        )


def istft_command(args: argparse.Namespace, journal: JsonlLogger | None) -> None:
    """Rebuild a waveform from packed spectra or from spectrogram + phase."""
    computer = _computer(args)
    with np.load(args.input_npz) as data:
        num_channels = int(data["num_channels"]) if "num_channels" in data else 1
        stored_rate = int(data["sample_rate"]) if "sample_rate" in data else None
        if "stft" in data:
            packed = data["stft"]
        elif "spectrogram" in data and "phase" in data:
            packed = computer.polar(data["spectrogram"], data["phase"])
        else:
            raise ValueError(
                f"{args.input_npz} holds neither 'stft' nor 'spectrogram' + 'phase'."
            )

    sample_rate = args.sample_rate or stored_rate or DEFAULT_SAMPLE_RATE
    wave = computer.inverse_transform(packed, args.amplitude, num_channels=num_channels)
    write_wave(args.output_wav, wave, sample_rate)
    LOGGER.info("Saved reconstructed waveform: %s", args.output_wav)
    if journal is not None:
        journal.write(
            TransformRecord(
                command="istft",
                source=str(args.input_npz),
                target=str(args.output_wav),
                num_channels=int(wave.shape[0]),
                num_samples=int(wave.shape[1]),
                num_frames=int(packed.shape[0] // num_channels),
                peak=_peak(wave),
                extra={"amplitude": args.amplitude},
            )
        )


def resynth_command(args: argparse.Namespace, journal: JsonlLogger | None) -> None:
    """Analyse and resynthesize one WAV file through the polar form."""
    computer = _computer(args)
    wave, sample_rate = read_wave(args.input_wav)
    recon = computer.resynthesize(wave, args.amplitude)
    write_wave(args.output_wav, recon, sample_rate)
    LOGGER.info("Saved resynthesized waveform: %s", args.output_wav)
    if journal is not None:
        journal.write(
            TransformRecord(
                command="resynth",
                source=str(args.input_wav),
                target=str(args.output_wav),
                num_channels=int(recon.shape[0]),
                num_samples=int(recon.shape[1]),
                num_frames=computer.num_frames(wave.shape[1]),
                peak=_peak(recon),
                extra={"amplitude": args.amplitude},
            )
        )


def plot_command(args: argparse.Namespace, journal: JsonlLogger | None) -> None:
    """Save one spectrogram image per channel."""
    computer = _computer(args)
    with np.load(args.input_npz) as data:
        num_channels = int(data["num_channels"]) if "num_channels" in data else 1
        if "spectrogram" in data:
            spectrogram = data["spectrogram"]
        elif "stft" in data:
            spectrogram = computer.spectrogram(data["stft"])
        else:
            raise ValueError(
                f"{args.input_npz} holds neither 'spectrogram' nor 'stft'."
            )

    saved = save_channel_spectrograms(
        spectrogram,
        num_channels,
        args.input_npz.stem,
        args.output_dir,
        power=computer.options.apply_pow,
        is_log=computer.options.apply_log,
    )
    LOGGER.info("Saved spectrogram plots: %s", [str(path) for path in saved])
    if journal is not None:
        journal.write(
            {
                "command": "plot",
                "source": str(args.input_npz),
                "targets": [str(path) for path in saved],
            }
        )


_COMMANDS = {
    "stft": stft_command,
    "istft": istft_command,
    "resynth": resynth_command,
    "plot": plot_command,
}


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list_windows:
        for name in available_windows():
            print(name)
        return

    if args.command is None:
        parser.print_help()
        return

    configure_logging(args.log_level)
    journal = JsonlLogger(args.log_jsonl) if args.log_jsonl is not None else None
    _COMMANDS[args.command](args, journal)


if __name__ == "__main__":
    main()
