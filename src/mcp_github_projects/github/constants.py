"""Constants shared by the GitHub Projects modules."""

from typing import Final

DEFAULT_GRAPHQL_URL: Final = "https://api.github.com/graphql"
DEFAULT_API_URL: Final = "https://api.github.com"
DEFAULT_TIMEOUT: Final = 30
DEFAULT_PAGE_SIZE: Final = 20
FIELDS_PAGE_SIZE: Final = 100
FIELD_VALUES_PAGE_SIZE: Final = 20

REST_API_VERSION: Final = "2022-11-28"
GRAPHQL_ACCEPT: Final = "application/vnd.github.v4+json"
REST_ACCEPT: Final = "application/vnd.github+json"
USER_AGENT: Final = "mcp-github-projects"

CLASSIC_TOKEN_PREFIX: Final = "ghp_"
FINE_GRAINED_TOKEN_PREFIX: Final = "github_pat_"

TOKEN_SETTINGS_URL: Final = "https://github.com/settings/tokens"
TOKEN_DOCS_URL: Final = (
    "https://docs.github.com/en/authentication/keeping-your-account-and-data-secure/"
    "managing-your-personal-access-tokens"
)
REQUIRED_TOKEN_SCOPES: Final = ("repo", "project", "read:org")

# Strict ISO 8601 subset accepted by ProjectV2 date fields.
DATE_PATTERN: Final = r"^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}:\d{2}(\.\d{3})?Z)?$"
DATE_FORMAT_HINT: Final = "YYYY-MM-DD or YYYY-MM-DDThh:mm:ss(.sss)Z"

SINGLE_SELECT_COLORS: Final = (
    "GRAY",
    "BLUE",
    "GREEN",
    "YELLOW",
    "ORANGE",
    "RED",
    "PINK",
    "PURPLE",
)
DEFAULT_OPTION_COLOR: Final = "GRAY"

NO_DATA_TEXT: Final = "No data available"
