from abc import ABC, abstractmethod
from typing import Dict, Optional, Any, Tuple, Union
from enum import Enum

# Type aliases
Headers = Dict[str, str]
Timeout = Tuple[float, float]
# field name -> (filename, file object or bytes, content type)
FileParts = Dict[str, Tuple[str, Any, str]]


def _keep_headers(prepared: Any) -> Any:
    """requests auth hook that leaves the Authorization header as built.

    An explicit auth stops requests from substituting ~/.netrc credentials.
    """
    return prepared


class HttpMethod(Enum):
    """HTTP methods"""
    GET = "GET"
    POST = "POST"


class HttpClient(ABC):
    """
    Abstract base class for HTTP transports.

    A transport sends exactly one request per call and hands back the
    library's own response object. It never retries, never inspects the
    status code and lets transport exceptions propagate.
    """

    @abstractmethod
    def request(self, method: HttpMethod, url: str, headers: Headers, *,
                content: Optional[bytes] = None,
                data: Optional[Dict[str, str]] = None,
                files: Optional[FileParts] = None,
                timeout: Timeout) -> Any:
        """Send a single request and return the raw response"""
        pass

    def close(self) -> None:
        """Release pooled connections"""
        pass


class RequestsHttpClient(HttpClient):
    """HTTP client implementation using the requests library"""

    def __init__(self):
        try:
            import requests
            self._requests = requests
            self._session = requests.Session()
        except ImportError:
            raise ImportError("requests library not installed. Install with: pip install requests")

    def __del__(self):
        if hasattr(self, '_session'):
            self._session.close()

    def request(self, method: HttpMethod, url: str, headers: Headers, *,
                content: Optional[bytes] = None,
                data: Optional[Dict[str, str]] = None,
                files: Optional[FileParts] = None,
                timeout: Timeout) -> Any:
        """Send a request through the shared session"""
        body: Union[bytes, Dict[str, str], None] = content if content is not None else data
        return self._session.request(
            method.value,
            url,
            headers=headers,
            data=body,
            files=files,
            timeout=timeout,
            auth=_keep_headers,
        )

    def close(self) -> None:
        self._session.close()


class HttpxHttpClient(HttpClient):
    """HTTP client implementation using the httpx library"""

    def __init__(self, transport: Any = None):
        try:
            import httpx
            self._httpx = httpx
            self._client = httpx.Client(transport=transport) if transport else httpx.Client()
        except ImportError:
            raise ImportError("httpx library not installed. Install with: pip install httpx")

    def __del__(self):
        if hasattr(self, '_client'):
            self._client.close()

    def request(self, method: HttpMethod, url: str, headers: Headers, *,
                content: Optional[bytes] = None,
                data: Optional[Dict[str, str]] = None,
                files: Optional[FileParts] = None,
                timeout: Timeout) -> Any:
        """Send a request through the shared client"""
        connect_timeout, read_timeout = timeout
        return self._client.request(
            method.value,
            url,
            headers=headers,
            content=content,
            data=data,
            files=files,
            timeout=self._httpx.Timeout(read_timeout, connect=connect_timeout),
        )

    def close(self) -> None:
        self._client.close()
