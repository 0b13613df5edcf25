# Infrastructure Content Adapters
from .question_pool import LocalQuestionPool

__all__ = ["LocalQuestionPool"]
