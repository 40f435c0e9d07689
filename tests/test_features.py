import numpy as np
import pytest

from eeg_focus.core.data_types import BandPowers, SpectrumResult
from eeg_focus.processing.features import BandPowerExtractor, band_powers
from eeg_focus.processing.spectral import analyze_window


def make_spectrum(freqs, power):
    return SpectrumResult(frequencies=np.asarray(freqs, dtype=float),
                          power=np.asarray(power, dtype=float),
                          sampling_rate=128, n_fft=2 * len(freqs), n_samples=2 * len(freqs))


def test_band_means_on_linear_spectrum():
    freqs = np.arange(64.0)
    powers = band_powers(make_spectrum(freqs, freqs))
    assert powers.delta == 0.0
    assert powers.theta == pytest.approx(6.5)    # 5..8
    assert powers.alpha == pytest.approx(10.5)   # 8..13
    assert powers.beta == pytest.approx(21.5)    # 13..30
    assert powers.gamma == pytest.approx(45.0)   # 30..60


def test_no_bins_in_passband_gives_zeros():
    powers = band_powers(make_spectrum([0.0, 1.0, 2.0, 3.0], [5.0, 5.0, 5.0, 5.0]))
    assert powers == BandPowers.zeros()


def test_insufficient_spectrum_gives_zeros():
    spectrum = analyze_window(np.ones(5), 250)
    assert not spectrum.ok
    assert band_powers(spectrum) == BandPowers.zeros()


def test_band_without_bins_is_zero():
    # Coarse grid: 0, 16, 32, 48 Hz -> no bin in theta or alpha
    powers = band_powers(make_spectrum([0.0, 16.0, 32.0, 48.0], [1.0, 2.0, 3.0, 4.0]))
    assert powers.theta == 0.0
    assert powers.alpha == 0.0
    assert powers.beta == pytest.approx(2.0)
    assert powers.gamma == pytest.approx(3.5)


@pytest.mark.parametrize("n", [32, 64, 200, 250, 500, 1000])
def test_delta_always_zero(n):
    rng = np.random.default_rng(n)
    values = rng.standard_normal(n) * 50 + np.sin(2 * np.pi * 2 * np.arange(n) / 250) * 100
    powers = band_powers(analyze_window(values, 250))
    assert powers.delta == 0.0
    assert all(v >= 0 for v in powers.to_dict().values())


def test_ten_hz_sine_concentrates_in_alpha(sine_10hz):
    powers = band_powers(analyze_window(sine_10hz, 250))
    assert powers.alpha > powers.theta
    assert powers.alpha > powers.beta
    assert powers.gamma < 0.01 * powers.alpha


def test_custom_passband():
    freqs = np.arange(64.0)
    extractor = BandPowerExtractor(passband=(10.0, 20.0))
    powers = extractor.extract(make_spectrum(freqs, freqs))
    assert powers.theta == 0.0
    assert powers.alpha == pytest.approx(11.5)   # 10..13
    assert powers.beta == pytest.approx(16.5)    # 13..20
    assert powers.gamma == 0.0
