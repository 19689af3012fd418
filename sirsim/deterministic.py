"""
Deterministic SIR model integrated with SciPy.

The population is treated as continuous:

    dS/dt = -beta * S * I / N
    dI/dt =  beta * S * I / N - gamma * I
    dR/dt =  gamma * I

with beta = R0_param / D_inf and gamma = 1 / D_inf, the same rates the
stochastic chain is built from.
"""

import logging
from typing import Optional

import numpy as np
from scipy.integrate import odeint

from .config import SimulationConfig
from .sir import TimeSeries

logger = logging.getLogger(__name__)


class DeterministicSIRModel:
    """
    SIR compartmental ODE model.

    Parameters:
    -----------
    config: SimulationConfig
        Population, initial condition, rates and default time grid
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.beta = config.beta
        self.gamma = config.gamma
        self.N = float(config.N)

    @property
    def basic_reproduction_number(self) -> float:
        return self.beta / self.gamma

    def deriv(self, y: np.ndarray, t: float) -> np.ndarray:
        """
        Compute derivatives [dS/dt, dI/dt, dR/dt] at state y.

        t is unused (autonomous system) but required by odeint.
        """
        S, I, R = y

        dSdt = -self.beta * S * I / self.N
        dIdt = self.beta * S * I / self.N - self.gamma * I
        dRdt = self.gamma * I

        return np.array([dSdt, dIdt, dRdt])

    def integrate(self, times: Optional[np.ndarray] = None) -> TimeSeries:
        """
        Integrate the ODE system over a time grid.

        Parameters:
        -----------
        times: np.ndarray, optional
            Increasing time points starting at 0. Defaults to config.times.

        Returns:
        --------
        TimeSeries with real-valued compartments
        """
        t = self.config.times if times is None else np.asarray(times, dtype=float)

        y0 = [float(self.config.S0), float(self.config.I0), float(self.config.R0)]
        logger.debug(
            "Integrating SIR ODE: beta=%.4g, gamma=%.4g, %d points",
            self.beta, self.gamma, len(t),
        )
        if len(t) > 1:
            solution = odeint(self.deriv, y0, t)
        else:
            solution = np.array([y0])

        # Round-off can push an empty compartment slightly below zero
        solution = np.clip(solution, 0.0, self.N)
        S, I, R = solution.T

        new_infections = np.empty_like(S)
        new_recoveries = np.empty_like(R)
        new_infections[0] = self.config.I0
        new_recoveries[0] = self.config.R0
        new_infections[1:] = np.maximum(S[:-1] - S[1:], 0.0)
        new_recoveries[1:] = np.maximum(R[1:] - R[:-1], 0.0)

        return TimeSeries(
            N=self.config.N,
            t=t,
            S=S,
            I=I,
            R=R,
            new_infections=new_infections,
            new_recoveries=new_recoveries,
            label="Deterministic",
        )
