import numpy as np
import pytest

from mcstft import Framer, InvalidConfiguration


@pytest.mark.parametrize("frame_length", [2, 4, 7, 16])
@pytest.mark.parametrize("frame_shift", [1, 3, 4, 8])
def test_frame_count_is_invertible(frame_length: int, frame_shift: int) -> None:
    framer = Framer(frame_shift=frame_shift, frame_length=frame_length)
    for n in range(1, 120):
        n_frames = framer.num_frames(n)
        assert framer.num_samples(n_frames) >= n
        # one frame fewer would leave samples uncovered
        assert framer.num_samples(n_frames - 1) < n


def test_frame_count_matches_exact_tiling() -> None:
    framer = Framer(frame_shift=256, frame_length=1024)
    assert framer.num_frames(1024) == 1
    assert framer.num_frames(1024 + 256 * 9) == 10
    assert framer.num_samples(10) == 1024 + 256 * 9


def test_short_and_empty_inputs() -> None:
    framer = Framer(frame_shift=4, frame_length=8)
    assert framer.num_frames(3) == 1
    assert framer.num_frames(0) == 0
    assert framer.num_samples(0) == 0


def test_frame_bounds_clip_final_frame() -> None:
    framer = Framer(frame_shift=3, frame_length=4)
    assert framer.num_frames(6) == 2
    assert framer.frame_bounds(0, 6) == (0, 4)
    assert framer.frame_bounds(1, 6) == (3, 6)


def test_overlap_add_accumulates_in_place() -> None:
    framer = Framer(frame_shift=2, frame_length=4)
    frames = np.ones((3, 4))
    out = framer.overlap_add(frames)
    np.testing.assert_allclose(out, [1, 1, 2, 2, 2, 2, 1, 1])


def test_overlap_add_rejects_wrong_frame_width() -> None:
    framer = Framer(frame_shift=2, frame_length=4)
    with pytest.raises(ValueError, match="frame_length"):
        framer.overlap_add(np.ones((3, 5)))


def test_invalid_framer_arguments() -> None:
    with pytest.raises(InvalidConfiguration):
        Framer(frame_shift=0, frame_length=4)
    with pytest.raises(InvalidConfiguration):
        Framer(frame_shift=1, frame_length=1)


def test_partial_tail_adds_one_frame_over_truncating_count() -> None:
    framer = Framer(frame_shift=4, frame_length=4)
    assert framer.num_frames(10) == 3
    assert framer.num_samples(3) == 12
    assert framer.num_frames(8) == 2
