"""
Domain Constants

Centrally manages constants shared by the session, the scoring code and the
badge engine.
"""

# Passage lengths offered on the menu (characters)
LENGTH_OPTIONS = [200, 400, 800]

# Literal the evaluator must emit for a passing summary
SUCCESS_MARKER = "Overall: PASS"

# Negative value recognised on the "Overall:" line
FAILURE_VALUE = "FAIL"

# Sub-score criteria reported by the evaluator, each an integer 1-5
SCORE_CRITERIA = ("importance", "conciseness", "accuracy")
SCORE_MIN = 1
SCORE_MAX = 5

# Number of improvement suggestions requested from the evaluator
IMPROVEMENT_COUNT = 3

# Badges are awarded at every multiple of the interval, up to the cap
BADGE_INTERVAL = 5
STREAK_BADGE_CAP = 50        # at most 10 streak badges
CUMULATIVE_BADGE_CAP = 100   # at most 20 cumulative badges

# Default model endpoint (OpenAI-compatible)
DEFAULT_MODEL = "openai/gpt-oss-120b"
DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"

# Control loop cadence and the bound on a pending network call
EVENT_POLL_INTERVAL_MS = 100
DEFAULT_TIMEOUT_SECONDS = 60
