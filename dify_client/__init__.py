# __init__.py
from .client import DifyClient, CompletionClient, WorkflowClient, ChatClient, ClientFactory, ClientType
from .dispatcher import (
    RequestDispatcher, ClientConfig, RequestSpec, DifyClientError, ConfigurationError,
    UnsupportedMethodError, DEFAULT_BASE_URL
)
from .http_client import HttpClient, HttpMethod, RequestsHttpClient, HttpxHttpClient
from .http_client_factory import HttpClientFactory, HttpClientType

__all__ = [
    'DifyClient',
    'CompletionClient',
    'WorkflowClient',
    'ChatClient',
    'ClientFactory',
    'ClientType',
    'RequestDispatcher',
    'ClientConfig',
    'RequestSpec',
    'DifyClientError',
    'ConfigurationError',
    'UnsupportedMethodError',
    'DEFAULT_BASE_URL',
    'HttpClient',
    'HttpMethod',
    'RequestsHttpClient',
    'HttpxHttpClient',
    'HttpClientFactory',
    'HttpClientType',
]
