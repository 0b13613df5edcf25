"""Spaced-repetition scheduling and mastery analytics for exam preparation."""

from alfanumrik.consts import VERSION

__version__ = VERSION
