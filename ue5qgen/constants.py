"""Shared constants for the question review pipeline."""

CATEGORY_KEYS = [
    "Easy MC",
    "Easy T/F",
    "Medium MC",
    "Medium T/F",
    "Hard MC",
    "Hard T/F",
]
TARGET_PER_CATEGORY = 33
TARGET_TOTAL = 200

# Allow up to this MC vs T/F difference before enforcing balance
IMBALANCE_THRESHOLD = 3

BALANCED_DIFFICULTIES = {"Balanced All", "Balanced"}

DEFAULT_LANGUAGE = "English"

STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_REJECTED = "rejected"

FILTER_MODES = ("pending", "accepted", "rejected", "all")
SORT_KEYS = ("default", "newest", "oldest", "language", "discipline", "difficulty")
APP_MODES = ("landing", "create", "review", "database")

STORAGE_KEYS = {
    "CONFIG": "ue5_gen_config",
    "QUESTIONS": "ue5_gen_questions",
    "PREF_SEARCH": "ue5_pref_search",
    "PREF_FILTER": "ue5_pref_filter",
    "PREF_HISTORY": "ue5_pref_history",
}

DUPLICATE_SIMILARITY_THRESHOLD = 0.85
