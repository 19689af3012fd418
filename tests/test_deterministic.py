"""Tests for the deterministic SIR ODE model."""

import numpy as np
import pytest

from sirsim.config import SimulationConfig, get_config
from sirsim.deterministic import DeterministicSIRModel
from sirsim.replicates import mean_trajectory, run_replicates


@pytest.fixture
def model():
    return DeterministicSIRModel(get_config("default"))


class TestIntegrate:
    """Tests for DeterministicSIRModel.integrate."""

    def test_default_grid(self, model):
        result = model.integrate()
        assert len(result) == 1001
        assert np.allclose(result.t, model.config.times)

    def test_initial_conditions(self, model):
        result = model.integrate()
        first = result[0]
        assert first.S == pytest.approx(99.0)
        assert first.I == pytest.approx(1.0)
        assert first.R == pytest.approx(0.0)
        assert first.new_infections == 1
        assert first.new_recoveries == 0

    def test_population_conservation(self, model):
        result = model.integrate()
        assert np.allclose(result.S + result.I + result.R, 100)

    def test_all_values_non_negative(self, model):
        result = model.integrate()
        assert np.all(result.S >= 0)
        assert np.all(result.I >= 0)
        assert np.all(result.R >= 0)
        assert np.all(result.new_infections >= 0)
        assert np.all(result.new_recoveries >= 0)

    def test_susceptible_never_increases(self, model):
        result = model.integrate()
        assert np.all(np.diff(result.S) <= 1e-9)

    def test_real_valued(self, model):
        result = model.integrate()
        assert np.issubdtype(result.S.dtype, np.floating)

    def test_custom_grid(self, model):
        times = np.linspace(0, 10, 11)
        result = model.integrate(times)
        assert len(result) == 11
        assert np.allclose(result.t, times)

    def test_zero_duration(self):
        result = DeterministicSIRModel(get_config("default").replace(T=0.0)).integrate()
        assert len(result) == 1
        assert result[0].I == pytest.approx(1.0)

    def test_label(self, model):
        assert model.integrate().label == "Deterministic"


class TestModelProperties:
    """Tests for SIR dynamics."""

    def test_basic_reproduction_number(self, model):
        assert model.basic_reproduction_number == pytest.approx(3.0)

    def test_deriv_sums_to_zero(self, model):
        d = model.deriv(np.array([60.0, 30.0, 10.0]), 0.0)
        assert d.sum() == pytest.approx(0.0)
        assert d[0] == pytest.approx(-1.5 * 60 * 30 / 100)

    def test_no_transmission_is_exponential_decay(self):
        config = SimulationConfig(N=100, I0=10, R0_param=0.0, D_inf=2.0, dt=0.1, T=10.0)
        result = DeterministicSIRModel(config).integrate()
        assert np.allclose(result.S, 90)
        assert np.allclose(result.I, 10 * np.exp(-0.5 * result.t), rtol=1e-4)

    def test_subcritical_epidemic_declines(self):
        config = SimulationConfig(N=100, I0=10, R0_param=0.8, D_inf=2.0, dt=0.1, T=20.0)
        result = DeterministicSIRModel(config).integrate()
        assert np.all(np.diff(result.I) <= 0)

    def test_higher_r0_increases_peak(self):
        low = DeterministicSIRModel(get_config("default").replace(R0_param=1.5)).integrate()
        high = DeterministicSIRModel(get_config("default").replace(R0_param=4.0)).integrate()
        assert high.peak_infected > low.peak_infected

    def test_stochastic_mean_close_to_deterministic(self):
        """Mean of many stochastic runs with large N should track the ODE solution."""
        config = SimulationConfig(N=2000, I0=50, R0=0, R0_param=3.0, D_inf=2.0, dt=0.1, T=20.0)
        runs = run_replicates(config, 100, seed=0)
        mean = mean_trajectory(runs)
        deterministic = DeterministicSIRModel(config).integrate()

        peak_det = deterministic.I.max()
        peak_mean = mean["I"].max()
        relative_error = abs(peak_mean - peak_det) / peak_det
        assert relative_error < 0.1, (
            f"Stochastic mean peak ({peak_mean:.1f}) deviates >10% from "
            f"deterministic peak ({peak_det:.1f})"
        )
