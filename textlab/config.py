"""
TextLab Configuration Module
Centralized configuration for the toolkit.

All selection thresholds and telemetry constants are compiled in. The only
runtime inputs are the DEBUG environment flag, the TEXTLAB_HOME directory
and an optional YAML file describing how learned preferences decay.
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "TextLab"
APPDATA_DIR = Path(os.environ.get('TEXTLAB_HOME', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APPDATA_DIR / "logs"

# Logging Configuration
LOG_FILE = LOGS_DIR / "processing.log"
DEBUG_LOG_FILE = LOGS_DIR / "debug_flow.txt"
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# ============================================================================
# Telemetry
# ============================================================================

# Quality histogram: 6 buckets over [0, 1], index = floor(accuracy * 5)
QUALITY_BUCKET_EDGES = (0.0, 0.2, 0.4, 0.6, 0.8, 1.0)
QUALITY_BUCKET_COUNT = len(QUALITY_BUCKET_EDGES)

BYTES_PER_MB = 1024 * 1024

# ============================================================================
# Strategy Selection
# ============================================================================

# Base strategy thresholds (first match wins)
FAST_MAX_LENGTH = 100              # length < 100 -> fast
COMPREHENSIVE_MIN_LENGTH = 10000   # length > 10000 -> comprehensive
COMPREHENSIVE_MIN_COMPLEXITY = 0.8 # complexity > 0.8 -> comprehensive
COMPREHENSIVE_DOMAINS = frozenset({"technical", "academic"})
FAST_DOMAINS = frozenset({"social-media", "chat"})

# Depth levels for the canonical bundles
MIN_DEPTH = 1
MAX_DEPTH = 3
MAX_EXPECTED_QUALITY = 0.95
MAX_EXPECTED_SPEED = 0.95

# Requirement adjustments
QUALITY_BOOST = 0.1
SPEED_BOOST = 0.2
TIME_BUDGET_CPU_FACTOR = 0.5
TIME_BUDGET_MAX_ALGORITHMS = 2
STREAMING_BATCH_SIZE = 100

# Canonical strategy bundles (fast -> balanced -> comprehensive)
STRATEGY_BUNDLES = {
    "fast": {
        "depth": 1,
        "algorithms": ("flesch", "gunning-fog"),
        "quality": 0.7,
        "expected_quality": 0.7,
        "expected_speed": 0.95,
        "min_memory_mb": 10,
        "max_memory_mb": 50,
        "estimated_cpu_time_ms": 50,
        "cache_recommended": True,
    },
    "balanced": {
        "depth": 2,
        "algorithms": ("flesch", "gunning-fog", "coleman-liau", "ari"),
        "quality": 0.85,
        "expected_quality": 0.85,
        "expected_speed": 0.7,
        "min_memory_mb": 50,
        "max_memory_mb": 200,
        "estimated_cpu_time_ms": 200,
        "cache_recommended": True,
    },
    "comprehensive": {
        "depth": 3,
        "algorithms": ("all",),
        "quality": 0.95,
        "expected_quality": 0.95,
        "expected_speed": 0.4,
        "min_memory_mb": 100,
        "max_memory_mb": 500,
        "estimated_cpu_time_ms": 500,
        # Too many variations for effective caching
        "cache_recommended": False,
    },
}

# Outcome history and preference learning
OUTCOME_HISTORY_LIMIT = 1000
PREFERENCE_BASELINE_SCORE = 0.7
STRATEGY_SUCCESS_GAIN = 10.0
STRATEGY_FAILURE_PENALTY = 5.0
DOMAIN_SUCCESS_GAIN = 5.0
DOMAIN_FAILURE_PENALTY = 2.0
PREFERENCE_SCALE = 100.0           # preference / 100 -> adjustment factor
PREFERENCE_SPEED_TRADEOFF = 0.5

# Similarity weights and thresholds
SIMILARITY_LENGTH_WEIGHT = 0.3
SIMILARITY_LANGUAGE_WEIGHT = 0.2
SIMILARITY_DOMAIN_WEIGHT = 0.3
SIMILARITY_COMPLEXITY_WEIGHT = 0.2
SIMILARITY_THRESHOLD = 0.7
RECOMMENDATION_FULL_CONFIDENCE_COUNT = 10

# ============================================================================
# Preference Policy (optional decay/clamp of learned preferences)
# ============================================================================

# Default policy keeps preferences unbounded (decay 1.0, no clamp).
PREFERENCE_POLICY_FILE = Path(
    os.environ.get(
        'TEXTLAB_POLICY_FILE',
        str(Path(__file__).parent.parent / "config" / "preference_policy.yaml"),
    )
)


def load_preference_policy_config(path: Path | None = None) -> dict:
    """
    Loads the preference decay/clamp settings from YAML.

    Args:
        path: Optional override of PREFERENCE_POLICY_FILE.

    Returns:
        A dictionary with optional 'decay' and 'clamp' keys. Empty when the
        file is missing or cannot be parsed.
    """
    policy_path = Path(path) if path else PREFERENCE_POLICY_FILE
    try:
        with open(policy_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        policy = data.get('preference_policy', {}) or {}
        if DEBUG_MODE:
            from textlab.logging_config import debug_log
            debug_log(f"[Config] Loaded preference policy from {policy_path}: {policy}")
        return dict(policy)
    except FileNotFoundError:
        if DEBUG_MODE:
            from textlab.logging_config import debug_log
            debug_log(f"[Config] No preference policy at {policy_path}. Preferences stay unbounded.")
        return {}
    except (yaml.YAMLError, AttributeError, TypeError) as e:
        from textlab.logging_config import debug_log
        debug_log(f"[Config] ERROR: Failed to parse preference policy file: {e}")
        return {}

# ============================================================================
# Readability collaborator
# ============================================================================

READABILITY_ALGORITHMS = ("flesch", "flesch-kincaid", "gunning-fog", "coleman-liau", "ari", "smog")
READABILITY_DEFAULT_ALGORITHMS = ("flesch", "gunning-fog")
SMOG_MIN_SENTENCES = 30
