"""Centralized constants for the Alfanumrik tracker.

All magic numbers and tuning defaults live here so every layer
imports from a single source of truth.
"""

import math

# ---------- FSRS ----------
DEFAULT_STABILITY = 1.0
DEFAULT_DIFFICULTY = 5.0
DEFAULT_LEVEL = 1
REQUEST_RETENTION = 0.9
STABILITY_GROWTH = math.e
STABILITY_LAPSE_FACTOR = 0.5
MIN_STABILITY = 0.5
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0
DIFFICULTY_STEP_SUCCESS = 0.5
DIFFICULTY_STEP_FAILURE = 1.0
INITIAL_DUE_DAYS = 1

# ---------- Concept trace ----------
CONCEPT_DECAY_RATE = 0.1

# ---------- Mastery ----------
FULL_ACCURACY = 100
WEAK_CHAPTER_THRESHOLD = 70
FOUNDATION_THRESHOLD = 50
ADVANCED_THRESHOLD = 80
VELOCITY_WINDOW = 10
READINESS_MASTERY_WEIGHT = 0.7
READINESS_COVERAGE_PER_CHAPTER = 5
READINESS_COVERAGE_CAP = 30
PREDICTION_TREND_BONUS = 5
PREDICTION_TREND_PENALTY = -2
PULSE_LENGTH = 15

# ---------- Milestones ----------
CONCEPTUALIST_POINTS = 500
CRITICAL_THINKER_POINTS = 2000

# ---------- Storage keys ----------
REVISION_SET_KEY = "alfanumrik_revision_set"
ACTIVITY_KEY = "alfanumrik_activity"
PROFILE_KEY = "alfanumrik_profile"
