"""Core constants used across Gridcore modules.

This module centralizes defaults and reserved record field names.
Keeping values here avoids magic literals in engine logic.
"""

from __future__ import annotations

ID_FIELD = "id"
DISABLED_FIELD = "isDisabled"
VERSION_FIELD = "version"
DELETED_AT_FIELD = "deletedAt"
LAST_MODIFIED_FIELD = "lastModified"
RESERVED_FIELDS = (
    ID_FIELD,
    DISABLED_FIELD,
    VERSION_FIELD,
    DELETED_AT_FIELD,
    LAST_MODIFIED_FIELD,
)
INITIAL_RECORD_VERSION = 1

DEFAULT_PAGE_SIZE = 10
DEFAULT_INDEX_THRESHOLD = 1000
DEFAULT_SEARCH_MIN_RELEVANCE = 0.1
DEFAULT_SEARCH_MAX_RESULTS = 100
DEFAULT_SEARCH_FUZZY = True
DEFAULT_SEARCH_WEIGHT = 1.0

EXACT_MATCH_SCORE = 1.0
PREFIX_MATCH_SCORE = 0.8
SUBSTRING_MATCH_SCORE = 0.6
FUZZY_MATCH_SCORE = 0.3

SUPPORTED_FIELD_TYPES = (
    "string",
    "number",
    "boolean",
    "date",
    "email",
    "url",
    "phone",
    "select",
)
SUPPORTED_SORT_DIRECTIONS = ("asc", "desc")
SUPPORTED_FILTER_MODES = ("and", "or")
SUPPORTED_FILTER_OPERATORS = (
    "eq",
    "ne",
    "contains",
    "starts_with",
    "gt",
    "gte",
    "lt",
    "lte",
    "in",
)
INDEXED_FILTER_OPERATORS = ("eq", "in")
SCHEMA_FILE_VERSION = 1
