# Application Scheduling Package
from .scheduler import ReviewScheduler, apply_outcome, is_correct, new_review_item

__all__ = ["ReviewScheduler", "apply_outcome", "is_correct", "new_review_item"]
