"""
XSMB Lô Predictor

Heuristic scoring of the two-digit "lô" numbers (00-99) for the next
Northern Vietnam (XSMB) draw.

Pipeline:
- parser: raw "lô tô" text -> {date: [numbers]}
- preparer: per-day enriched DailyDrawRecord
- analysis: HistoryAnalyzer windowed statistics
- strategies: twelve scoring strategies
- predictor: weighted aggregation and diversified selection
- backtester: walk-forward replay with a synthetic money model
- worker: background thread for UI callers
"""

__version__ = "0.1.0"
