"""Centralized constants for flashdeck.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Persistence ----------
DEFAULT_BLOB_KEY = "cards.json"
REQUEST_TIMEOUT = 30.0

# ---------- Scoring ----------
INCORRECT_DIVISOR = 4
AVERAGE_SCORE_CAP = 5

# ---------- Weighting ----------
EXPONENTIAL_BASE = 1.6

# ---------- Transitions ----------
FADE_DURATION = 0.25  # seconds
FADE_FPS = 30.0

# ---------- Regions ----------
CARD_SCREEN = "card_screen"
ADD_SCREEN = "add_screen"
LIST_SCREEN = "list_screen"
WAITING_SCREEN = "waiting_screen"
EMPTY_SCREEN = "empty_screen"
SCREEN_REGIONS = [CARD_SCREEN, ADD_SCREEN, LIST_SCREEN, WAITING_SCREEN, EMPTY_SCREEN]

CARD_FRONT = "flashcard_front"
CARD_BACK = "flashcard_back"
