import math
from dataclasses import dataclass, asdict, replace as dataclass_replace
from numbers import Integral, Real
from typing import Any, Dict

import numpy as np


class ConfigurationError(ValueError):
    """Raised when simulation inputs are invalid. ``field`` names the offending input."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _check_count(field: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ConfigurationError(field, f"must be an integer, got {value!r}")
    if value < 0:
        raise ConfigurationError(field, f"must be non-negative, got {value}")


def _check_real(field: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigurationError(field, f"must be a real number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(field, f"must be finite, got {value}")


@dataclass(frozen=True)
class SimulationConfig:
    """
    Inputs of a single SIR run.

    Attributes:
        N: Total population.
        I0: Initially infected individuals.
        R0: Initially recovered individuals.
        R0_param: Basic reproduction number.
        D_inf: Mean infectious duration.
        dt: Time step of the discrete grid.
        T: Time horizon. The grid is 0, dt, 2*dt, ..., T.
    """

    N: int = 100
    I0: int = 1
    R0: int = 0
    R0_param: float = 3.0
    D_inf: float = 2.0
    dt: float = 0.1
    T: float = 100.0

    def __post_init__(self):
        _check_count("N", self.N)
        if self.N == 0:
            raise ConfigurationError("N", "population must be positive")
        _check_count("I0", self.I0)
        _check_count("R0", self.R0)
        if self.I0 > self.N:
            raise ConfigurationError("I0", f"{self.I0} exceeds population N={self.N}")
        if self.I0 + self.R0 > self.N:
            raise ConfigurationError(
                "R0", f"I0 + R0 = {self.I0 + self.R0} exceeds population N={self.N}"
            )

        for name in ("R0_param", "D_inf", "dt", "T"):
            _check_real(name, getattr(self, name))
        if self.R0_param < 0:
            raise ConfigurationError("R0_param", f"must be non-negative, got {self.R0_param}")
        if self.D_inf <= 0:
            raise ConfigurationError("D_inf", f"must be positive, got {self.D_inf}")
        if self.dt <= 0:
            raise ConfigurationError("dt", f"must be positive, got {self.dt}")
        if self.T < 0:
            raise ConfigurationError("T", f"must be non-negative, got {self.T}")

        # Probabilities above 1 are rejected rather than clamped.
        if self.recovery_probability > 1:
            raise ConfigurationError(
                "dt",
                f"recovery probability dt/D_inf = {self.recovery_probability:.4g} exceeds 1; "
                f"use dt <= D_inf ({self.D_inf})",
            )
        if self.infection_probability > 1:
            raise ConfigurationError(
                "dt",
                f"infection probability R0_param*dt/(D_inf*N) = "
                f"{self.infection_probability:.4g} exceeds 1",
            )

    @property
    def S0(self) -> int:
        return self.N - self.I0 - self.R0

    @property
    def infection_probability(self) -> float:
        """Per-contact, per-step infection probability p."""
        return self.R0_param * self.dt / (self.D_inf * self.N)

    @property
    def recovery_probability(self) -> float:
        """Per-step recovery probability r."""
        return self.dt / self.D_inf

    @property
    def beta(self) -> float:
        return self.R0_param / self.D_inf

    @property
    def gamma(self) -> float:
        return 1.0 / self.D_inf

    @property
    def n_steps(self) -> int:
        """Number of steps after t=0: the last grid index k with k*dt <= T."""
        n = int(round(self.T / self.dt))
        # Rounding absorbs float error in T/dt but must not step past T
        if n * self.dt > self.T * (1 + 1e-9) + 1e-12:
            n -= 1
        return n

    @property
    def times(self) -> np.ndarray:
        return np.arange(self.n_steps + 1) * self.dt

    def replace(self, **changes) -> "SimulationConfig":
        """Return a validated copy with the given fields overridden."""
        return dataclass_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["S0"] = self.S0
        data["infection_probability"] = self.infection_probability
        data["recovery_probability"] = self.recovery_probability
        data["n_steps"] = self.n_steps
        return data


PRESETS: Dict[str, Dict[str, Any]] = {
    # N=100 teaching scenario: one index case, R0=3, 2-day infectious period.
    "default": dict(N=100, I0=1, R0=0, R0_param=3.0, D_inf=2.0, dt=0.1, T=100.0),
    "large": dict(N=1000, I0=5, R0=0, R0_param=3.0, D_inf=2.0, dt=0.1, T=100.0),
}


def get_config(name: str) -> SimulationConfig:
    if name in PRESETS:
        return SimulationConfig(**PRESETS[name])
    else:
        raise ConfigurationError("name", f"Unknown config: {name}")
