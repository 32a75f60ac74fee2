"""
XSMB Lô Scoring Strategies

Each strategy module exposes STRATEGY_NAME, DESCRIPTION and
predict(analyzer, config) -> {number: score in [0, max_strategy_score]}.

Available strategies:
- frequency: Multi-window hot / consistent / cold frequency
- gan_numbers: Absence ranges, returners and average-gan proximity
- lo_roi_lon: Repeats, reversals and sandwiched numbers
- kep_numbers: Doubles frequency, neighbours and gan
- day_of_week: Weekday-specific averages for the next draw
- bridge_patterns: Periodic bridges, chạm digits and total bridges
- paired_numbers: Co-occurrence partners and next-day successors
- totals_chams: Hot / resting totals and head-tail digits
- bong_tuong_sinh: Shadow-number relations
- cycle_analysis: Appearance cycles
- statistical_anomalies: Warming, overdue gan, streaks and rare totals
- zone_analysis: Four 25-number zones
"""

from . import frequency
from . import gan_numbers
from . import lo_roi_lon
from . import kep_numbers
from . import day_of_week
from . import bridge_patterns
from . import paired_numbers
from . import totals_chams
from . import bong_tuong_sinh
from . import cycle_analysis
from . import statistical_anomalies
from . import zone_analysis

DEFAULT_STRATEGIES = (
    frequency,
    gan_numbers,
    lo_roi_lon,
    kep_numbers,
    day_of_week,
    bridge_patterns,
    paired_numbers,
    totals_chams,
    bong_tuong_sinh,
    cycle_analysis,
    statistical_anomalies,
    zone_analysis,
)

__all__ = [
    "DEFAULT_STRATEGIES",
    "frequency",
    "gan_numbers",
    "lo_roi_lon",
    "kep_numbers",
    "day_of_week",
    "bridge_patterns",
    "paired_numbers",
    "totals_chams",
    "bong_tuong_sinh",
    "cycle_analysis",
    "statistical_anomalies",
    "zone_analysis",
]
