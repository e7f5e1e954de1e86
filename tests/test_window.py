import numpy as np
import pytest
from scipy.signal import get_window

from mcstft import InvalidConfiguration, available_windows, make_window


@pytest.mark.parametrize("name", ["hamming", "hanning", "blackman"])
@pytest.mark.parametrize("length", [2, 7, 400, 1024])
def test_tapered_windows_lie_in_unit_range(name: str, length: int) -> None:
    window = make_window(name, length)
    assert window.shape == (length,)
    assert np.all(window >= 0.0)
    assert np.all(window <= 1.0)
    np.testing.assert_allclose(window, window[::-1], atol=1e-12)


def test_rectangular_window_is_all_ones() -> None:
    window = make_window("rectangular", 33)
    assert np.all(window == 1.0)


def test_window_values_follow_symmetric_formulas() -> None:
    length = 9
    a = 2.0 * np.pi / (length - 1)
    i = np.arange(length)
    np.testing.assert_allclose(
        make_window("hamming", length), 0.54 - 0.46 * np.cos(a * i), atol=1e-12
    )
    np.testing.assert_allclose(
        make_window("hanning", length), 0.5 - 0.5 * np.cos(a * i), atol=1e-12
    )
    np.testing.assert_allclose(
        make_window("blackman", length),
        np.clip(0.42 - 0.5 * np.cos(a * i) + 0.08 * np.cos(2 * a * i), 0.0, 1.0),
        atol=1e-12,
    )
    assert make_window("hanning", length)[length // 2] == pytest.approx(1.0)
    assert make_window("hamming", length)[0] == pytest.approx(0.08)


def test_window_is_read_only() -> None:
    window = make_window("hamming", 16)
    with pytest.raises(ValueError):
        window[0] = 1.0


def test_unknown_window_is_rejected() -> None:
    with pytest.raises(InvalidConfiguration, match="Unknown window"):
        make_window("kaiser", 16)


def test_frame_length_must_exceed_one() -> None:
    with pytest.raises(InvalidConfiguration, match="greater than 1"):
        make_window("rectangular", 1)


def test_available_windows() -> None:
    assert available_windows() == ["blackman", "hamming", "hanning", "rectangular"]


@pytest.mark.parametrize(
    ("name", "scipy_name"),
    [
        ("hamming", "hamming"),
        ("hanning", "hann"),
        ("blackman", "blackman"),
        ("rectangular", "boxcar"),
    ],
)
@pytest.mark.parametrize("length", [2, 7, 400, 1024])
def test_window_matches_scipy_symmetric_window(
    name: str, scipy_name: str, length: int
) -> None:
    expected = np.clip(get_window(scipy_name, length, fftbins=False), 0.0, 1.0)
    np.testing.assert_allclose(make_window(name, length), expected, atol=1e-15)
