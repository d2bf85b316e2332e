"""Grid random-walk epidemic ABM."""

from .config import DEFAULTS, HOURS_PER_DAY, SimulationConfig
from .infection import update_infections
from .motion import do_random_walks
from .population import HealthState, Population, initialize_population
from .sim import TimeSeries, simulate, summarize

__all__ = [
    "DEFAULTS", "HOURS_PER_DAY", "SimulationConfig",
    "HealthState", "Population", "initialize_population",
    "do_random_walks", "update_infections",
    "TimeSeries", "simulate", "summarize",
]
