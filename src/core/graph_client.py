"""
Graph Store Client

This module provides the HTTP side of talking to a Neo4j-style transactional
endpoint: connection configuration, a shared ``requests`` session with the
JSON headers and credentials, the availability/credential check and the
inspection of the ``errors`` envelope every response carries.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from constants import StoreDefaults

logger = logging.getLogger(__name__)


class GraphStoreAPIError(Exception):
    """Exception raised for graph store transport and statement errors."""

    def __init__(self, status_code: int, error_code: str, message: str):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        super().__init__(f"{error_code}: \"{message}\"")


@dataclass
class GraphStoreConfig:
    """Configuration for graph store access."""
    server_url: str = StoreDefaults.SERVER_URL
    rest_endpoint: str = StoreDefaults.REST_ENDPOINT
    transaction_endpoint: str = StoreDefaults.TRANSACTION_ENDPOINT
    user: Optional[str] = None
    password: Optional[str] = None
    timeout: int = StoreDefaults.TIMEOUT_SECONDS

    @property
    def base_url(self) -> str:
        return self.server_url.rstrip('/') + self.rest_endpoint

    @property
    def transaction_url(self) -> str:
        return self.base_url + self.transaction_endpoint

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'GraphStoreConfig':
        """Create GraphStoreConfig from a dictionary."""
        store_config = config_dict.get('graph_store', config_dict)
        return cls(
            server_url=store_config.get('server_url', StoreDefaults.SERVER_URL),
            rest_endpoint=store_config.get('rest_endpoint', StoreDefaults.REST_ENDPOINT),
            transaction_endpoint=store_config.get('transaction_endpoint', StoreDefaults.TRANSACTION_ENDPOINT),
            user=store_config.get('user'),
            password=store_config.get('password'),
            timeout=store_config.get('timeout', StoreDefaults.TIMEOUT_SECONDS),
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'GraphStoreConfig':
        """Load configuration from a JSON file."""
        if not config_path:
            raise ValueError("config_path cannot be empty")

        if not isinstance(config_path, str):
            raise TypeError(f"config_path must be string, got {type(config_path)}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_dict = json.load(f)
        except FileNotFoundError:
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        except UnicodeDecodeError as e:
            raise ValueError(f"Encoding error reading {config_path}: {e}")

        if not isinstance(config_dict, dict):
            raise ValueError(f"Configuration file must contain a JSON object, got {type(config_dict)}")

        return cls.from_dict(config_dict)


class GraphStoreClient:
    """
    Client for a graph store's transactional HTTP endpoint.

    One client (and its HTTP session) is shared by all imports of a run.
    Use it as a context manager so the session is always closed.
    """

    def __init__(self, config: GraphStoreConfig):
        if not config:
            raise ValueError("config cannot be None")

        if not isinstance(config, GraphStoreConfig):
            raise TypeError(f"config must be GraphStoreConfig instance, got {type(config)}")

        if not config.server_url:
            raise ValueError("server_url is required in configuration")

        self.config = config
        self.session = requests.Session()
        self.session.headers.update(StoreDefaults.HEADERS)
        if config.user is not None:
            self.session.auth = (config.user, config.password or '')

    def __enter__(self) -> 'GraphStoreClient':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _make_request(
        self,
        method: str,
        url: str,
        operation_name: str,
        **kwargs
    ) -> requests.Response:
        """
        Make HTTP request with consistent error handling.

        Args:
            method: HTTP method (GET, POST)
            url: URL to request
            operation_name: Description of operation (for logging)
            **kwargs: Additional arguments to pass to requests

        Returns:
            Response object

        Raises:
            GraphStoreAPIError: On any request failure
        """
        timeout = self.config.timeout
        try:
            logger.debug(f"{operation_name}: {method} {url}")
            return self.session.request(method, url, timeout=timeout, **kwargs)

        except requests.exceptions.Timeout:
            logger.error(f"{operation_name}: Request timeout after {timeout}s")
            raise GraphStoreAPIError(
                status_code=408,
                error_code='RequestTimeout',
                message=f'{operation_name} timed out after {timeout} seconds'
            )

        except requests.exceptions.ConnectionError as e:
            logger.error(f"{operation_name}: Connection error: {e}")
            raise GraphStoreAPIError(
                status_code=503,
                error_code='ConnectionError',
                message=f'{operation_name} failed to connect to {self.config.server_url}: {e}'
            )

        except requests.exceptions.RequestException as e:
            logger.error(f"{operation_name}: Request error: {e}")
            raise GraphStoreAPIError(
                status_code=500,
                error_code='RequestError',
                message=f'{operation_name} request failed: {e}'
            )

    def check_server(self) -> None:
        """
        Check that the server is up and accepts our credentials.

        Raises:
            GraphStoreAPIError: If the server is unreachable or rejects
                the credentials
        """
        server = self.config.server_url
        response = self._make_request('GET', server, "Server check")
        logger.info(f"Server {server} is available (HTTP {response.status_code})")

        response = self._make_request('GET', self.config.base_url, "Credential check")
        if response.status_code in (401, 403):
            raise GraphStoreAPIError(
                status_code=response.status_code,
                error_code='AuthenticationFailed',
                message=f"Server {server} rejected the credentials for user '{self.config.user or ''}'"
            )
        logger.debug(f"Credentials accepted by {self.config.base_url}")

    @staticmethod
    def check_for_errors(response: requests.Response) -> Dict[str, Any]:
        """
        Inspect the response envelope.

        A non-empty ``errors`` list means failure whatever the HTTP status.

        Returns:
            The decoded response body

        Raises:
            GraphStoreAPIError: If the body is not a valid envelope or
                reports errors
        """
        try:
            body = response.json()
        except ValueError as e:
            logger.debug(f"Response text: {response.text[:500]}")
            raise GraphStoreAPIError(
                status_code=response.status_code,
                error_code='InvalidResponse',
                message=f'Server returned invalid JSON: {e}'
            )

        if not isinstance(body, dict) or not isinstance(body.get('errors'), list):
            raise GraphStoreAPIError(
                status_code=response.status_code,
                error_code='InvalidResponse',
                message='Server response has no errors list'
            )

        errors = body['errors']
        if errors:
            first = errors[0] if isinstance(errors[0], dict) else {}
            if len(errors) > 1:
                logger.debug(f"Server reported {len(errors)} errors: {errors}")
            raise GraphStoreAPIError(
                status_code=response.status_code,
                error_code=str(first.get('code', 'Unknown')),
                message=str(first.get('message', errors[0])),
            )

        return body

    def post_json(self, url: str, payload: Dict[str, Any], operation_name: str) -> requests.Response:
        """POST a JSON payload; the envelope is left for the caller to inspect."""
        return self._make_request('POST', url, operation_name, json=payload)
