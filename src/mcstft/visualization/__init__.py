"""Visualization helpers."""

from .spectrogram import save_channel_spectrograms, spectrogram_to_db

__all__ = ["save_channel_spectrograms", "spectrogram_to_db"]
