"""
Prediction Engine for XSMB Lô

Runs every scoring strategy over one HistoryAnalyzer, combines the score maps
with the configured weights, applies global adjustments and picks a
diversified set of numbers for the next draw.
"""
import traceback

from xsmb_predictor.analysis import HistoryAnalyzer
from xsmb_predictor.config import DEFAULT_CONFIG
from xsmb_predictor.digits import (
    ALL_NUMBERS,
    digit_total,
    reverse_number,
    shadow_number,
    sort_numbers,
)
from xsmb_predictor.strategies import DEFAULT_STRATEGIES


class InsufficientDataError(ValueError):
    """Raised when the history is shorter than the configured minimum."""

    def __init__(self, required, available):
        self.required = required
        self.available = available
        super().__init__(
            f"Not enough history to predict: need at least {required} days, got {available}."
        )


# ── Helpers ──────────────────────────────────────────────────────────────

def _rank(scores):
    """(number, score) sorted by score descending, ties by number ascending."""
    return sorted(scores.items(), key=lambda kv: (-kv[1], kv[0]))


class PredictionEngine:
    """Weighted multi-strategy scorer with diversified selection."""

    def __init__(self, config=DEFAULT_CONFIG, strategies=DEFAULT_STRATEGIES, verbose=False):
        self.config = config
        self.strategies = tuple(strategies)
        self.verbose = verbose

    @property
    def activated_strategy_count(self):
        return len(self.strategies)

    def _log(self, message):
        if self.verbose:
            print(f"  [Engine] {message}")

    def _check_history(self, history):
        if len(history) < self.config.min_history:
            raise InsufficientDataError(self.config.min_history, len(history))

    # ── Aggregation ──────────────────────────────────────────────────────

    def _run_strategies(self, analyzer):
        aggregate = dict.fromkeys(ALL_NUMBERS, 0.0)
        contributions = {}
        failed = []

        for strategy in self.strategies:
            name = strategy.STRATEGY_NAME
            weight = self.config.weight_for(name)
            try:
                result = strategy.predict(analyzer, self.config)
            except Exception as e:
                print(f"  [Engine] ERROR in strategy {name}: {e}")
                if self.verbose:
                    traceback.print_exc()
                failed.append(name)
                continue

            weighted = {}
            for num, score in result.items():
                if num in aggregate:
                    weighted[num] = score * weight
                    aggregate[num] += weighted[num]
            contributions[name] = weighted
            self._log(f"{name}: weight {weight:.2f}, "
                      f"{sum(1 for v in weighted.values() if v > 0)} numbers scored")

        return aggregate, contributions, failed

    def _apply_adjustments(self, analyzer, aggregate):
        """Recency damping, gan corrections and reverse/shadow bonuses, floored at 0."""
        cfg = self.config
        last_day = set(analyzer.last_day_numbers())
        second_last = set(analyzer.second_last_day_numbers())
        gan_status = analyzer.gan_status()
        medium_lo, medium_hi = cfg.gan_ranges.medium
        ultra_hi = cfg.gan_ranges.ultra_gan[1]

        adjusted = {}
        for num, score in aggregate.items():
            if num in last_day:
                score *= cfg.last_day_factor
            elif num in second_last:
                score *= cfg.second_last_day_factor

            days_gone = gan_status[num]["days_gone"]
            if days_gone > ultra_hi and score < cfg.ultra_gan_score_ceiling:
                score *= cfg.ultra_gan_factor
            if medium_lo < days_gone <= medium_hi and score > 0:
                score += cfg.medium_gan_bonus

            reverse = reverse_number(num)
            if reverse != num and reverse in last_day:
                score += cfg.reverse_last_day_bonus
            shadow = shadow_number(num)
            if shadow != num and shadow in last_day:
                score += cfg.shadow_last_day_bonus

            adjusted[num] = max(0.0, score)
        return adjusted

    def score_numbers(self, history):
        """
        Aggregate and adjust strategy scores for the day after `history`.

        Returns
        -------
        dict with keys:
            scores              : {number: adjusted aggregate score}
            contributions       : {strategy: {number: weighted score}}
            failed_strategies   : list of strategy names that raised
        """
        self._check_history(history)
        analyzer = HistoryAnalyzer(history, self.config)
        aggregate, contributions, failed = self._run_strategies(analyzer)
        return {
            "scores": self._apply_adjustments(analyzer, aggregate),
            "contributions": contributions,
            "failed_strategies": failed,
        }

    # ── Selection ────────────────────────────────────────────────────────

    def select_numbers(self, scores):
        """
        Pick num_predicted numbers from the ranking, spreading heads, tails and
        totals. Caps are waived for the first few (highest-ranked) picks.
        """
        cfg = self.config
        ranking = [num for num, _ in _rank(scores)]
        target = cfg.num_predicted
        selected = []
        heads, tails, totals = {}, {}, {}

        def _take(num):
            selected.append(num)
            heads[num[0]] = heads.get(num[0], 0) + 1
            tails[num[1]] = tails.get(num[1], 0) + 1
            total = digit_total(num)
            totals[total] = totals.get(total, 0) + 1

        for num in ranking[:cfg.pool_size]:
            if len(selected) >= target:
                break
            exempt = len(selected) < cfg.diversity_exempt_slots
            if exempt or (
                heads.get(num[0], 0) < cfg.max_per_head
                and tails.get(num[1], 0) < cfg.max_per_tail
                and totals.get(digit_total(num), 0) < cfg.max_per_total
            ):
                _take(num)

        # Fallback: whole ranking, head/tail caps only, so over-cap digits
        # still come from the exempt top picks whenever the ranking allows it
        if len(selected) < target:
            self._log(f"Pool gave {len(selected)} numbers; widening to full ranking.")
            for num in ranking:
                if len(selected) >= target:
                    break
                if num in selected:
                    continue
                if heads.get(num[0], 0) < cfg.max_per_head and tails.get(num[1], 0) < cfg.max_per_tail:
                    _take(num)

        # Last resort: ignore caps
        for num in ranking:
            if len(selected) >= target:
                break
            if num not in selected:
                _take(num)

        unique = list(dict.fromkeys(selected))[:target]
        return sort_numbers(unique)

    # ── Public API ───────────────────────────────────────────────────────

    def predict_detailed(self, history):
        """
        Score and select in one pass.

        Returns
        -------
        dict with keys: predicted_numbers, rankings, scores, contributions,
        failed_strategies
        """
        scored = self.score_numbers(history)
        predicted = self.select_numbers(scored["scores"])
        self._log(f"Predicted {len(predicted)} numbers from {len(history)} days.")
        return {
            "predicted_numbers": predicted,
            "rankings": _rank(scored["scores"]),
            **scored,
        }

    def predict_next_day(self, history):
        return self.predict_detailed(history)["predicted_numbers"]


def predict_next_day(history, config=None):
    """Predict with the default strategy set."""
    engine = PredictionEngine(config or DEFAULT_CONFIG)
    return engine.predict_next_day(history)
