"""
eve-swagger Constants

Shared constants used across the transport and resource layers.
"""

# =============================================================================
# ESI Configuration
# =============================================================================

ESI_BASE_URL = "https://esi.evetech.net/latest"
ESI_DATASOURCE = "tranquility"
DEFAULT_USER_AGENT = "eve-swagger-python"

# =============================================================================
# Pagination
#
# ESI returns at most this many rows per page for the paged endpoints below.
# A shorter page means the stream is exhausted.
# =============================================================================

MARKET_ORDERS_PAGE_SIZE = 10000
MARKET_TYPES_PAGE_SIZE = 1000

# post_universe_names and get_search accept at most this many ids per call
NAMES_CHUNK_SIZE = 1000

# Concurrent per-id requests issued by a mapped resource
DEFAULT_MAX_CONCURRENCY = 20

# =============================================================================
# Rate Limiting
#
# ESI error-limit headers: back off when fewer errors remain than the
# threshold, capped so a single request never stalls too long.
# =============================================================================

ERROR_LIMIT_DEFAULT = 100
ERROR_LIMIT_BACKOFF_THRESHOLD = 20
ERROR_LIMIT_MAX_WAIT = 5.0
