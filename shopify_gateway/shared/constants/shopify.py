"""
Shopify platform constants
"""

# API
DEFAULT_API_VERSION = "2022-01"
ACCESS_TOKEN_HEADER = "X-Shopify-Access-Token"
GRAPHQL_ENDPOINT_TEMPLATE = "admin/api/{version}/graphql.json"
THROTTLED_ERROR_CODE = "THROTTLED"
HTTP_TOO_MANY_REQUESTS = 429

# REST fixed window
DEFAULT_MAX_REST_QUERIES_PER_SECOND = 2
REST_WINDOW_SECONDS = 1.0
REST_COOLDOWN_SECONDS = 1.5

# GraphQL cost bucket
DEFAULT_MAX_CONCURRENT_GRAPHQL_QUERIES = 5
DEFAULT_MAX_GRAPHQL_COST_PER_REQUEST = 1000.0

# Retry / pagination
THROTTLE_RETRY_DELAY_SECONDS = 1.0
DEFAULT_PAGE_SIZE = 250
DEFAULT_EMPTY_PAGE_RETRIES = 10

# Telemetry
DEFAULT_TELEMETRY_WINDOW_SIZE = 100

# Tags are stored on products as one comma separated string
TAG_SEPARATOR = ", "
