from typing import Dict, List, Type

from dify_client.http_client import HttpClient, RequestsHttpClient, HttpxHttpClient


class HttpClientType:
    """Available transport backends"""
    REQUESTS = "requests"
    HTTPX = "httpx"
    AUTO = "auto"


_BACKENDS: Dict[str, Type[HttpClient]] = {
    HttpClientType.REQUESTS: RequestsHttpClient,
    HttpClientType.HTTPX: HttpxHttpClient,
}

# Preference order for HttpClientType.AUTO
_AUTO_ORDER: List[str] = [HttpClientType.REQUESTS, HttpClientType.HTTPX]


class HttpClientFactory:
    """Factory for creating transport instances"""

    @staticmethod
    def create_http_client(client_type: str = HttpClientType.AUTO) -> HttpClient:
        """
        Create a transport for the dispatcher

        Args:
            client_type: Backend to create (auto, requests, httpx)

        Returns:
            A ready-to-use HttpClient

        Raises:
            ValueError: If the backend is unknown or its library is missing
        """
        if client_type == HttpClientType.AUTO:
            for name in _AUTO_ORDER:
                try:
                    return _BACKENDS[name]()
                except ImportError:
                    continue
            raise ValueError(
                "No HTTP client library available. "
                "Install either 'requests' or 'httpx': pip install requests"
            )

        backend = _BACKENDS.get(client_type)
        if backend is None:
            raise ValueError(f"Unknown HTTP client type: {client_type}")

        try:
            return backend()
        except ImportError as e:
            raise ValueError(str(e)) from e

    @staticmethod
    def available_types() -> List[str]:
        """Names accepted by create_http_client"""
        return [HttpClientType.AUTO] + list(_BACKENDS)
