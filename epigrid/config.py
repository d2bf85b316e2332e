from dataclasses import dataclass, asdict
from typing import Optional

from .infection import METHODS
from .population import validate_population_args

HOURS_PER_DAY = 24

# Reference run: everybody moving, 120 days, two week recovery
DEFAULTS = dict(
    num_people=1000,
    num_moving=1000,
    num_hours=120 * HOURS_PER_DAY,
    res=200,
    recovery_time=14 * HOURS_PER_DAY,
    seed=None,
    dist_factor=2.1,   # infection reach, in grid cells
    method="kdtree",
)


@dataclass
class SimulationConfig:
    """Run parameters for one simulation."""
    num_people: int = DEFAULTS["num_people"]
    num_moving: int = DEFAULTS["num_moving"]
    num_hours: int = DEFAULTS["num_hours"]
    res: int = DEFAULTS["res"]
    recovery_time: int = DEFAULTS["recovery_time"]
    seed: Optional[int] = None
    dist_factor: float = DEFAULTS["dist_factor"]
    method: str = DEFAULTS["method"]

    @classmethod
    def from_kwargs(cls, **kwargs):
        params = DEFAULTS.copy()
        params.update(kwargs)
        return cls(**params)

    def validate(self):
        validate_population_args(self.num_people, self.num_moving, self.res)
        if self.num_hours < 0:
            raise ValueError(f"num_hours must be >= 0, got {self.num_hours}")
        if self.recovery_time < 0:
            raise ValueError(f"recovery_time must be >= 0, got {self.recovery_time}")
        if self.dist_factor < 0:
            raise ValueError(f"dist_factor must be >= 0, got {self.dist_factor}")
        if self.method not in METHODS:
            raise ValueError(f"unknown method {self.method!r}; expected one of {METHODS}")
        return self

    def as_kwargs(self) -> dict:
        return asdict(self)
