"""Runtime configuration model for Gridcore.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_INDEX_THRESHOLD,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SEARCH_FUZZY,
    DEFAULT_SEARCH_MAX_RESULTS,
    DEFAULT_SEARCH_MIN_RELEVANCE,
)
from core.errors import GridConfigError

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class GridConfig:
    """Validated runtime configuration.

    Attributes:
        page_size: Default number of rows per page.
        index_threshold: Record count above which filters use value indexes.
        search_min_relevance: Minimum relevance for a search hit to survive.
        search_max_results: Maximum number of search hits returned.
        search_fuzzy: Whether subsequence matching scores search hits.
    """

    page_size: int = DEFAULT_PAGE_SIZE
    index_threshold: int = DEFAULT_INDEX_THRESHOLD
    search_min_relevance: float = DEFAULT_SEARCH_MIN_RELEVANCE
    search_max_results: int = DEFAULT_SEARCH_MAX_RESULTS
    search_fuzzy: bool = DEFAULT_SEARCH_FUZZY

    @classmethod
    def from_env(cls) -> "GridConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            GridConfigError: If environment values are invalid.
        """
        return cls(
            page_size=_parse_positive_int("GRID_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            index_threshold=_parse_positive_int("GRID_INDEX_THRESHOLD", DEFAULT_INDEX_THRESHOLD),
            search_min_relevance=_parse_relevance(
                "GRID_SEARCH_MIN_RELEVANCE",
                DEFAULT_SEARCH_MIN_RELEVANCE,
            ),
            search_max_results=_parse_positive_int(
                "GRID_SEARCH_MAX_RESULTS",
                DEFAULT_SEARCH_MAX_RESULTS,
            ),
            search_fuzzy=_parse_bool("GRID_SEARCH_FUZZY", DEFAULT_SEARCH_FUZZY),
        )


def _parse_positive_int(env_name: str, default: int) -> int:
    """Parse a positive integer environment value.

    Args:
        env_name: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        Parsed integer.

    Raises:
        GridConfigError: If value is not a positive integer.
    """
    raw_value = os.getenv(env_name)
    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except ValueError as error:
        raise GridConfigError(
            f"Invalid {env_name} value: expected integer, got '{raw_value}'. "
            f"Set {env_name} to a positive number."
        ) from error
    if value < 1:
        raise GridConfigError(f"Invalid {env_name} value {value}: must be at least 1.")
    return value


def _parse_relevance(env_name: str, default: float) -> float:
    raw_value = os.getenv(env_name)
    if raw_value is None:
        return default
    try:
        value = float(raw_value)
    except ValueError as error:
        raise GridConfigError(
            f"Invalid {env_name} value: expected float, got '{raw_value}'."
        ) from error
    if not 0.0 <= value <= 1.0:
        raise GridConfigError(f"Invalid {env_name} value {value}: must be within [0, 1].")
    return value


def _parse_bool(env_name: str, default: bool) -> bool:
    raw_value = os.getenv(env_name)
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise GridConfigError(
        f"Invalid {env_name} value '{raw_value}'. Use one of: true, false, 1, 0."
    )
