# The MIT License (MIT)
# Copyright © 2025 Entrius

# =============================================================================
# Linear API
# =============================================================================
LINEAR_API_URL = "https://api.linear.app/graphql"
REQUEST_TIMEOUT_SECONDS = 30

# =============================================================================
# Pagination
# =============================================================================
ISSUES_BATCH_SIZE = 50  # max issues fetched per request
PAGE_INFO_MAX_COUNT = 250  # max page size when only walking page info

# =============================================================================
# Rate Limits
# =============================================================================
RATE_LIMIT_MIN_REMAINING = 10  # Warn when fewer requests than this remain

# =============================================================================
# Issue States
# =============================================================================
CLOSED_STATE_TYPES = ['completed', 'canceled']
