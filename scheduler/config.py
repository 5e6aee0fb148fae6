MIN_EASE_FACTOR = 1.3
DEFAULT_EASE_FACTOR = 2.5
LAPSE_EASE_PENALTY = 0.2
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
HARD_FACTOR = 0.8      # dampened growth
EASY_BONUS = 1.3       # boosted growth
RELEARN_DELAY_SECONDS = 0  # 0 = due again immediately after a lapse
MAX_INTERVAL_DAYS = 100 * 365
