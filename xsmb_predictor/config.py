"""
Pipeline configuration for the XSMB lô predictor.

Every tunable of the pipeline lives on one immutable record, PipelineConfig,
which is threaded through the analyzer, every strategy, the engine and the
backtester. Build alternates with ``DEFAULT_CONFIG.replace(...)``:

    cfg = DEFAULT_CONFIG.replace(backtest_window=10, min_history=120)

Strategy weights (share of each strategy in the aggregate score):
- bridge_patterns:        0.15
- frequency:              0.13
- gan_numbers:            0.11
- lo_roi_lon:             0.09
- cycle_analysis:         0.09
- paired_numbers:         0.08
- totals_chams:           0.08
- kep_numbers:            0.07
- day_of_week:            0.07
- bong_tuong_sinh:        0.06
- statistical_anomalies:  0.04
- zone_analysis:          0.03
"""
import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType


DEFAULT_STRATEGY_WEIGHTS = {
    "frequency": 0.13,
    "gan_numbers": 0.11,
    "lo_roi_lon": 0.09,
    "kep_numbers": 0.07,
    "day_of_week": 0.07,
    "bridge_patterns": 0.15,
    "paired_numbers": 0.08,
    "totals_chams": 0.08,
    "bong_tuong_sinh": 0.06,
    "cycle_analysis": 0.09,
    "statistical_anomalies": 0.04,
    "zone_analysis": 0.03,
}


@dataclass(frozen=True)
class Lookback:
    """Named lookback windows, in records (days)."""
    very_short: int = 3
    short: int = 7
    medium: int = 30
    long: int = 60
    very_long: int = 120
    extended: int = 200

    def get(self, name):
        if name not in self.__dataclass_fields__:
            raise ValueError(f"Unknown lookback window: {name!r}")
        return getattr(self, name)


@dataclass(frozen=True)
class GanRanges:
    """Inclusive [min, max] absence ranges, in records."""
    short: tuple = (1, 6)
    medium: tuple = (7, 15)
    long: tuple = (16, 30)
    super_gan: tuple = (31, 60)
    ultra_gan: tuple = (61, 90)


@dataclass(frozen=True)
class PipelineConfig:
    # Draw shape
    draws_per_day: int = 27
    num_predicted: int = 16

    # History requirements
    min_history: int = 200
    backtest_window: int = 150

    lookback: Lookback = field(default_factory=Lookback)
    gan_ranges: GanRanges = field(default_factory=GanRanges)
    strategy_weights: dict = field(default_factory=lambda: dict(DEFAULT_STRATEGY_WEIGHTS))
    max_strategy_score: float = 100.0

    # Backtest thresholds and synthetic money model (VND)
    high_accuracy_threshold: int = 10
    profit_threshold: int = 5
    cost_per_number: int = 23_000
    payout_per_hit: int = 80_000

    # Selection / diversification
    pool_multiplier: int = 2
    max_per_head: int = 3
    max_per_tail: int = 3
    max_per_total: int = 2
    diversity_exempt_fraction: float = 0.25

    # Global adjustments applied after aggregation
    last_day_factor: float = 0.5
    second_last_day_factor: float = 0.8
    ultra_gan_factor: float = 0.2
    ultra_gan_score_ceiling: float = 20.0
    medium_gan_bonus: float = 10.0
    reverse_last_day_bonus: float = 15.0
    shadow_last_day_bonus: float = 10.0

    def __post_init__(self):
        # Freeze the weights mapping so the record is immutable all the way down
        object.__setattr__(self, "strategy_weights",
                           MappingProxyType(dict(self.strategy_weights)))
        if self.num_predicted <= 0:
            raise ValueError("num_predicted must be positive")
        if self.min_history < 1:
            raise ValueError("min_history must be at least 1")

    @property
    def daily_cost(self):
        return self.num_predicted * self.cost_per_number

    @property
    def pool_size(self):
        return self.num_predicted * self.pool_multiplier

    @property
    def diversity_exempt_slots(self):
        return int(self.num_predicted * self.diversity_exempt_fraction)

    def weight_for(self, strategy_name):
        return self.strategy_weights.get(strategy_name, 1.0)

    def replace(self, **changes):
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = PipelineConfig()
