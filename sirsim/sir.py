import csv
import logging
from dataclasses import dataclass
from typing import IO, Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from .config import SimulationConfig

logger = logging.getLogger(__name__)

COLUMNS = ("t", "S", "I", "R", "new_infections", "new_recoveries")


@dataclass(frozen=True)
class EpidemicState:
    N: int  # Total population
    S: int  # Susceptible
    I: int  # Infected
    R: int  # Recovered


@dataclass(frozen=True)
class StateRecord:
    t: float
    S: Union[int, float]
    I: Union[int, float]
    R: Union[int, float]
    new_infections: Union[int, float]
    new_recoveries: Union[int, float]


class TimeSeries:
    """
    Immutable S/I/R trajectory on a time grid, one record per grid point.

    Stochastic runs hold integer counts, the ODE model holds reals. Arrays are
    read-only; the object also behaves as a sequence of StateRecord.
    """

    def __init__(
        self,
        N: int,
        t: Sequence[float],
        S: Sequence,
        I: Sequence,
        R: Sequence,
        new_infections: Sequence,
        new_recoveries: Sequence,
        label: str = "",
    ):
        self.N = N
        self.label = label
        self.t = self._frozen(t)
        self.S = self._frozen(S)
        self.I = self._frozen(I)
        self.R = self._frozen(R)
        self.new_infections = self._frozen(new_infections)
        self.new_recoveries = self._frozen(new_recoveries)

        lengths = {len(a) for a in (self.t, self.S, self.I, self.R,
                                    self.new_infections, self.new_recoveries)}
        if len(lengths) != 1:
            raise ValueError(f"TimeSeries columns differ in length: {sorted(lengths)}")

    @staticmethod
    def _frozen(values) -> np.ndarray:
        array = np.array(values)
        array.setflags(write=False)
        return array

    def __len__(self) -> int:
        return len(self.t)

    def __getitem__(self, idx: int) -> StateRecord:
        return StateRecord(
            t=float(self.t[idx]),
            S=self.S[idx].item(),
            I=self.I[idx].item(),
            R=self.R[idx].item(),
            new_infections=self.new_infections[idx].item(),
            new_recoveries=self.new_recoveries[idx].item(),
        )

    def __iter__(self) -> Iterator[StateRecord]:
        for idx in range(len(self)):
            yield self[idx]

    @property
    def records(self) -> List[StateRecord]:
        return list(self)

    @property
    def peak_infected(self):
        return self.I.max().item()

    @property
    def peak_time(self) -> float:
        return float(self.t[np.argmax(self.I)])

    @property
    def total_infected(self):
        return (self.R[-1] + self.I[-1]).item()

    @property
    def final_size(self):
        """Infections that happened during the run (initial infected excluded)."""
        return (self.S[0] - self.S[-1]).item()

    @property
    def epidemic_duration(self) -> float:
        above_one = np.where(self.I >= 1.0)[0]
        return float(self.t[above_one[-1]]) if len(above_one) > 0 else 0.0

    def to_rows(self) -> List[Tuple]:
        return [
            (r.t, r.S, r.I, r.R, r.new_infections, r.new_recoveries) for r in self
        ]

    def to_csv(self, stream: IO[str]) -> None:
        writer = csv.writer(stream, lineterminator="\n")
        writer.writerow(COLUMNS)
        for row in self.to_rows():
            writer.writerow([_format_value(v) for v in row])


def _format_value(value) -> str:
    if isinstance(value, float):
        return f"{value:.10g}"
    return str(value)


def force_of_infection(p: float, I: int) -> float:
    """
    Probability that one susceptible is infected during a step with I infectious.

    Saturates to 1 when (1 - p) ** I underflows.
    """
    foi = 1.0 - (1.0 - p) ** I
    return min(max(foi, 0.0), 1.0)


def sir_step(
    state: EpidemicState, p: float, r: float, rng: np.random.Generator
) -> Tuple[EpidemicState, int, int]:
    """
    Advances the state by one step using binomial transitions.

    :param state: State at the start of the step
    :param p: Per-contact infection probability
    :param r: Per-step recovery probability
    :param rng: NumPy Generator
    :return: (next state, new infections, new recoveries)
    """
    foi = force_of_infection(p, state.I)

    # Disjoint pools: S for infections, I for recoveries
    new_infections = int(rng.binomial(state.S, foi))
    new_recoveries = int(rng.binomial(state.I, r))

    next_state = EpidemicState(
        N=state.N,
        S=state.S - new_infections,
        I=state.I + new_infections - new_recoveries,
        R=state.R + new_recoveries,
    )
    return next_state, new_infections, new_recoveries


class StochasticSIRSimulator:
    """Discrete-time SIR chain with binomial infections and recoveries."""

    def run(
        self, config: SimulationConfig, rng: np.random.Generator, label: str = "Stochastic"
    ) -> TimeSeries:
        """
        Simulates one trajectory from t=0 to t=T.

        :param config: Validated simulation inputs
        :param rng: NumPy Generator; a seeded one makes the run reproducible
        :param label: Name carried by the result (used in plots and logs)
        :return: TimeSeries with config.n_steps + 1 records
        """
        p = config.infection_probability
        r = config.recovery_probability
        n_steps = config.n_steps

        state = EpidemicState(N=config.N, S=config.S0, I=config.I0, R=config.R0)

        t = [0.0]
        S, I, R = [state.S], [state.I], [state.R]
        new_I, new_R = [config.I0], [config.R0]

        logger.debug(
            "Stochastic run: N=%d, p=%.6g, r=%.6g, steps=%d", config.N, p, r, n_steps
        )

        for k in range(1, n_steps + 1):
            state, infections, recoveries = sir_step(state, p, r, rng)

            t.append(k * config.dt)
            S.append(state.S)
            I.append(state.I)
            R.append(state.R)
            new_I.append(infections)
            new_R.append(recoveries)

        return TimeSeries(
            N=config.N,
            t=np.array(t, dtype=float),
            S=np.array(S, dtype=np.int64),
            I=np.array(I, dtype=np.int64),
            R=np.array(R, dtype=np.int64),
            new_infections=np.array(new_I, dtype=np.int64),
            new_recoveries=np.array(new_R, dtype=np.int64),
            label=label,
        )


def run_stochastic_sir(
    config: SimulationConfig,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
) -> TimeSeries:
    """
    Convenience wrapper around StochasticSIRSimulator.

    Args:
        config: Simulation inputs.
        rng: Generator to draw from. Takes precedence over ``seed``.
        seed: Seed for a new Generator. None draws fresh entropy.

    Returns:
        The simulated TimeSeries.
    """
    if rng is None:
        rng = np.random.default_rng(seed)
    return StochasticSIRSimulator().run(config, rng)
