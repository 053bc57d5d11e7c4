"""
Request dispatcher for the Dify API

This module turns a method/path/payload triple into exactly one HTTP request
and returns the transport's response untouched. Status codes are never
inspected and transport exceptions are never caught.

Note: RequestDispatcher is NOT thread-safe. The api key and read timeout are
plain attributes read at dispatch time; callers that mutate them from several
threads while requests are in flight must synchronize on their own.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote_plus, urlsplit

from dify_client.http_client import HttpClient, HttpMethod, FileParts, Headers, Timeout
from dify_client.http_client_factory import HttpClientFactory, HttpClientType

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.dify.ai/v1"
DEFAULT_READ_TIMEOUT = 60
DEFAULT_CONNECT_TIMEOUT = 60.0
UPLOADER_USER_AGENT = "Python-Dify-Uploader"

JsonData = Dict[str, Any]
QueryParams = Mapping[str, Any]


class DifyClientError(RuntimeError):
    """Base exception for errors raised by this library"""
    pass


class ConfigurationError(DifyClientError, ValueError):
    """Raised when client configuration is invalid or incomplete"""
    pass


class UnsupportedMethodError(DifyClientError):
    """Raised when a request uses a method other than GET or POST"""
    def __init__(self, method: Any):
        super().__init__(f"Unsupported HTTP method: {method}")
        self.method = method


@dataclass
class ClientConfig:
    """Connection settings owned by a single dispatcher."""

    api_key: str
    """Bearer token, replaceable at runtime"""

    base_url: str = DEFAULT_BASE_URL
    """API root; endpoint paths are appended verbatim"""

    read_timeout: int = DEFAULT_READ_TIMEOUT
    """Seconds to wait for response data"""

    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    """Seconds to wait for the TLS connection"""

    def __post_init__(self) -> None:
        if urlsplit(self.base_url).scheme != "https":
            raise ConfigurationError(f"base_url must use https: {self.base_url!r}")

    @classmethod
    def from_env(cls, prefix: str = "DIFY") -> 'ClientConfig':
        """
        Build a config from environment variables.

        Reads ``<prefix>_API_KEY`` (required), ``<prefix>_BASE_URL`` and
        ``<prefix>_READ_TIMEOUT`` (optional).

        Raises:
            ConfigurationError: If the key is missing or the timeout is not an integer
        """
        env_var = f"{prefix}_API_KEY"
        api_key = os.environ.get(env_var, '')
        if not api_key:
            raise ConfigurationError(f"{env_var} environment variable not set")

        base_url = os.environ.get(f"{prefix}_BASE_URL") or DEFAULT_BASE_URL
        raw_timeout = os.environ.get(f"{prefix}_READ_TIMEOUT")
        try:
            read_timeout = int(raw_timeout) if raw_timeout else DEFAULT_READ_TIMEOUT
        except ValueError:
            raise ConfigurationError(
                f"{prefix}_READ_TIMEOUT must be an integer, got {raw_timeout!r}")

        logger.debug(f"Loaded client config from environment (base_url={base_url})")
        return cls(api_key=api_key, base_url=base_url, read_timeout=read_timeout)


@dataclass
class RequestSpec:
    """A single JSON/query request, built and consumed within one call."""
    method: HttpMethod
    path: str
    json_body: Optional[JsonData] = None
    query_params: Optional[QueryParams] = None
    stream: bool = False


def _form_component(text: str) -> str:
    # "*" stays literal and "~" is escaped
    return quote_plus(text, safe="*").replace("~", "%7E")


def encode_query(params: Optional[QueryParams]) -> str:
    """
    Encode params as an application/x-www-form-urlencoded query string.

    Keys whose value is None are emitted bare (``last_id`` rather than
    ``last_id=``) and booleans as ``true``/``false``.
    """
    if not params:
        return ""

    pairs = []
    for key, value in params.items():
        name = _form_component(str(key))
        if value is None:
            pairs.append(name)
        else:
            if isinstance(value, bool):
                value = "true" if value else "false"
            pairs.append(f"{name}={_form_component(str(value))}")
    return "&".join(pairs)


def encode_json(data: Optional[JsonData]) -> bytes:
    """Serialize a request body as compact UTF-8 JSON"""
    return json.dumps(data, separators=(",", ":")).encode("utf-8")


class RequestDispatcher:
    """
    Shared request builder behind every capability profile.

    Example:
        dispatcher = RequestDispatcher(ClientConfig(api_key="app-..."))
        response = dispatcher.send_request("GET", "/parameters", params={"user": "u1"})
        print(response.status_code)
    """

    def __init__(self, config: ClientConfig, http_client: Optional[HttpClient] = None,
                 http_client_type: str = HttpClientType.AUTO):
        """
        Args:
            config: Connection settings, owned by this dispatcher from now on
            http_client: Transport to use; created from http_client_type when omitted
            http_client_type: Backend name passed to HttpClientFactory
        """
        self._config = config
        self._http_client = http_client or HttpClientFactory.create_http_client(http_client_type)

    def __enter__(self) -> 'RequestDispatcher':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def read_timeout(self) -> int:
        return self._config.read_timeout

    @read_timeout.setter
    def read_timeout(self, seconds: int) -> None:
        self._config.read_timeout = seconds

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    def update_api_key(self, new_key: str) -> None:
        """Replace the bearer token used by subsequent requests"""
        self._config.api_key = new_key
        logger.debug("API key updated")

    def close(self) -> None:
        self._http_client.close()

    def send_request(self, method: Union[str, HttpMethod], endpoint: str,
                     data: Optional[JsonData] = None,
                     params: Optional[QueryParams] = None,
                     stream: bool = False) -> Any:
        """
        Send one JSON or query-string request.

        Args:
            method: "GET" or "POST"
            endpoint: Path appended verbatim to the base URL
            data: JSON body, used for POST only
            params: Query parameters, used for GET only
            stream: Caller is in streaming response mode. Recorded for
                logging only; the response is returned the same way.

        Returns:
            The transport's raw response, whatever its status code

        Raises:
            UnsupportedMethodError: For any method other than GET or POST
        """
        spec = RequestSpec(
            method=self._coerce_method(method),
            path=endpoint,
            json_body=data,
            query_params=params,
            stream=stream,
        )
        return self.dispatch(spec)

    def dispatch(self, spec: RequestSpec) -> Any:
        """Send a prepared RequestSpec and return the raw response"""
        url = f"{self._config.base_url}{spec.path}"
        headers = self._auth_headers()
        content = None

        if spec.method is HttpMethod.GET:
            query = encode_query(spec.query_params)
            if query:
                url = f"{url}?{query}"
        else:
            headers["Content-Type"] = "application/json"
            content = encode_json(spec.json_body)

        logger.debug(f"Dispatching {spec.method.value} {url} (stream={spec.stream})")
        return self._http_client.request(
            spec.method,
            url,
            headers,
            content=content,
            timeout=self._timeouts(),
        )

    def send_multipart(self, endpoint: str, fields: Dict[str, str], files: FileParts) -> Any:
        """
        Send a multipart/form-data POST.

        Args:
            endpoint: Path appended verbatim to the base URL
            fields: Plain form fields
            files: field name -> (filename, content, content type)

        Returns:
            The transport's raw response
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = self._auth_headers()
        headers["User-Agent"] = UPLOADER_USER_AGENT

        logger.debug(f"Uploading {list(files)} to {url}")
        return self._http_client.request(
            HttpMethod.POST,
            url,
            headers,
            data=fields,
            files=files,
            timeout=self._timeouts(),
        )

    def _auth_headers(self) -> Headers:
        return {"Authorization": f"Bearer {self._config.api_key}"}

    def _timeouts(self) -> Timeout:
        return (self._config.connect_timeout, self._config.read_timeout)

    @staticmethod
    def _coerce_method(method: Union[str, HttpMethod]) -> HttpMethod:
        if isinstance(method, HttpMethod):
            return method
        try:
            return HttpMethod(str(method).upper())
        except ValueError:
            raise UnsupportedMethodError(method)
