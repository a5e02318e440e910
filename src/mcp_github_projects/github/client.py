"""Base client module for GitHub GraphQL and REST API interactions."""

import logging
from typing import Any, Literal

import httpx

from ..exceptions import (
    MCPGitHubProjectsAuthenticationError,
    RemoteNotFound,
    RemoteRequestFailed,
)
from .config import ProjectsConfig
from .constants import GRAPHQL_ACCEPT, REST_ACCEPT, REST_API_VERSION, USER_AGENT
from .credentials import CapabilityClass, check_capability

logger = logging.getLogger("mcp-github-projects.client")

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


class ProjectsClient:
    """Base client for GitHub API interactions.

    ``graphql`` and ``rest`` are the only two places that talk to the network.
    Both return parsed JSON or raise a ``RemoteError`` carrying the status,
    the message and the remote error list verbatim.
    """

    def __init__(self, config: ProjectsConfig | None = None) -> None:
        """Initialize the client with a given configuration.

        Args:
            config: Projects configuration. If None, loaded from environment variables.
        """
        self.config = config if config is not None else ProjectsConfig.from_env()
        self.session = self._create_session()

    def _create_session(self) -> httpx.Client:
        headers = {"User-Agent": USER_AGENT}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return httpx.Client(
            verify=self.config.ssl_verify,
            timeout=self.config.timeout,
            headers=headers,
        )

    def require_capability(
        self,
        required: CapabilityClass = CapabilityClass.FULL,
        operation: str | None = None,
    ) -> None:
        """Gate an operation on the credential class before calling the remote."""
        check_capability(self.config.credential, required, operation)

    def graphql(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """Execute a GraphQL document and return its ``data`` member.

        Raises:
            CredentialMissing / CredentialUnsuitable: Token cannot run GraphQL.
            RemoteRequestFailed: Non-2xx status or a GraphQL ``errors`` list.
        """
        self.require_capability(CapabilityClass.FULL)
        url = self.config.graphql_url
        logger.debug(f"Sending GraphQL request to {url}")

        try:
            response = self.session.post(
                url,
                json={"query": query, "variables": variables or {}},
                headers={"Accept": GRAPHQL_ACCEPT},
            )
        except httpx.RequestError as e:
            logger.error(f"Request error for {url}: {str(e)}")
            raise RemoteRequestFailed(f"Request error: {str(e)}") from e

        payload = self._parse_body(response)
        if response.is_error:
            raise self._status_error(response, payload)

        if isinstance(payload, dict) and payload.get("errors"):
            errors = payload["errors"]
            message = "; ".join(
                str(err.get("message", "Unknown error")) for err in errors
            )
            not_found = any(err.get("type") == "NOT_FOUND" for err in errors)
            error_cls = RemoteNotFound if not_found else RemoteRequestFailed
            logger.error(f"GraphQL errors from {url}: {message}")
            raise error_cls(
                message,
                status=response.status_code,
                errors=errors,
                docs_url=payload.get("documentation_url"),
            )

        if not isinstance(payload, dict) or payload.get("data") is None:
            raise RemoteRequestFailed(
                "GraphQL response missing data", status=response.status_code
            )
        return payload["data"]

    def rest(
        self,
        method: HttpMethod,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request to the REST API.

        Args:
            method: HTTP method
            path: Endpoint path, with or without a leading slash
            json: JSON request body
            params: Query parameters

        Returns:
            Parsed JSON body, or None for 204 No Content

        Raises:
            CredentialMissing: No token configured.
            RemoteNotFound: 404 from the API.
            RemoteRequestFailed: Any other non-success status.
        """
        self.require_capability(CapabilityClass.RESTRICTED)
        url = f"{self.config.api_url}/{path.lstrip('/')}"
        logger.debug(f"Sending {method} request to {url}")

        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                headers={
                    "Accept": REST_ACCEPT,
                    "X-GitHub-Api-Version": REST_API_VERSION,
                },
            )
        except httpx.RequestError as e:
            logger.error(f"Request error for {url}: {str(e)}")
            raise RemoteRequestFailed(f"Request error: {str(e)}") from e

        payload = self._parse_body(response)
        if response.is_error:
            raise self._status_error(response, payload)
        return payload

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _status_error(response: httpx.Response, payload: Any) -> RemoteRequestFailed:
        status = response.status_code
        body = payload if isinstance(payload, dict) else {}
        message = body.get("message") or f"HTTP error {status}: {response.reason_phrase}"
        errors = body.get("errors") if isinstance(body.get("errors"), list) else None
        docs_url = body.get("documentation_url")
        logger.error(f"HTTP error {status} for {response.request.url}: {message}")

        if status == 404:
            return RemoteNotFound(message, status=status, errors=errors, docs_url=docs_url)
        if status in (401, 403):
            return MCPGitHubProjectsAuthenticationError(
                message, status=status, errors=errors, docs_url=docs_url
            )
        return RemoteRequestFailed(
            message, status=status, errors=errors, docs_url=docs_url
        )

    def close(self) -> None:
        """Close HTTP session."""
        self.session.close()
