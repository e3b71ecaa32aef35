"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable,
plus the defaults that models.py validates against.

For configurable values, see models.py (SearchConfig, DiffConfig, etc.).
"""

# =============================================================================
# History Listing
# =============================================================================

COMMIT_LIST_MAX = 10_000
"""Maximum commits for a single list_commits call."""

# =============================================================================
# Search Budgets
# =============================================================================

SEARCH_MAX_RESULTS = 50
"""Default result cap per search."""

SEARCH_DEFAULT_COMMITS = 100
"""Default commits scanned per search."""

SEARCH_MIN_COMMITS = 10
SEARCH_MAX_COMMITS = 10_000
"""Caller-supplied max_commits is clamped into this range."""

SEARCH_MIN_QUERY_LEN = 2
"""Queries shorter than this return no results without scanning."""

CONTENT_SEARCH_MAX_BYTES = 512 * 1024
"""Blobs at or above this size are skipped by content search."""

CONTENT_PREVIEW_CHARS = 120
"""Maximum length of a content match preview."""

# =============================================================================
# Diff Engine
# =============================================================================

BINARY_SNIFF_BYTES = 8000
"""Leading bytes inspected when deciding whether content is binary."""

SHORT_ID_LEN = 8
"""Hex characters in an abbreviated commit id."""
