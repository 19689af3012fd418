from .config import ConfigurationError, SimulationConfig, get_config
from .deterministic import DeterministicSIRModel
from .sir import StateRecord, StochasticSIRSimulator, TimeSeries, run_stochastic_sir

__all__ = [
    "ConfigurationError",
    "DeterministicSIRModel",
    "SimulationConfig",
    "StateRecord",
    "StochasticSIRSimulator",
    "TimeSeries",
    "get_config",
    "run_stochastic_sir",
]
