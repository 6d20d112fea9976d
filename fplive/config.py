"""Scoring rules configuration management."""

import os
from functools import lru_cache

from .schemas import ScoringRules
from .utils import load_json

RULES_ENV_VAR = 'FPLIVE_RULES'


@lru_cache(maxsize=1)
def get_config() -> ScoringRules:
    """
    Load the scoring rules.

    Reads the JSON file named by the FPLIVE_RULES environment variable when it
    is set; otherwise returns the official default rules. The result is cached
    after first load.

    Returns:
        ScoringRules object with validated settings

    Raises:
        FileNotFoundError: If FPLIVE_RULES points to a missing file
        ValueError: If the rules file has invalid structure

    Example:
        from fplive.config import get_config
        rules = get_config()
        print(f"Goal for a defender: {rules.goal_points['DEF']}")
    """
    rules_path = os.environ.get(RULES_ENV_VAR)
    if not rules_path:
        return ScoringRules()
    return load_json(rules_path, schema=ScoringRules)


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the rules file or FPLIVE_RULES changes during runtime
    and you need to reload it.

    Example:
        from fplive.config import clear_config_cache, get_config
        clear_config_cache()
        rules = get_config()  # Reloads from file
    """
    get_config.cache_clear()
