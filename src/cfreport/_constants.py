"""Shared constants for cfreport."""

# Cloudflare GraphQL Analytics API endpoint.
GRAPHQL_ENDPOINT = "https://api.cloudflare.com/client/v4/graphql"

# Environment variable consulted for the API token when none is passed explicitly.
API_TOKEN_ENV_VAR = "CLOUDFLARE_API_TOKEN"

# Value of the <meta name="generator"> tag and the footer attribution.
GENERATOR_NAME = "cf-reporting"

# The one external runtime dependency of a rendered report.
CHART_JS_URL = "https://cdnjs.cloudflare.com/ajax/libs/Chart.js/4.4.1/chart.umd.min.js"

DEFAULT_TEMPLATE_ID = "traffic-overview"

# Rendered reports land here unless --output is given.
DEFAULT_OUTPUT_DIR = "./cfreport-output"

DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0
