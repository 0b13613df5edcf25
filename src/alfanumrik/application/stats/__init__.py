# Application Stats Package
from .activity_metrics import accuracy_pulse, overall_mastery, subject_mastery
from .mastery_aggregator import MasteryAggregator, summarize
from .metrics_calculator import EnrichedReviewItem, MetricsCalculator

__all__ = [
    "EnrichedReviewItem",
    "MasteryAggregator",
    "MetricsCalculator",
    "accuracy_pulse",
    "overall_mastery",
    "subject_mastery",
    "summarize",
]
