"""
Capability profiles for the Dify API

Each profile is an independent class holding a RequestDispatcher and adding a
fixed set of endpoint methods. Profiles never override dispatch behavior, so
several of them can share one dispatcher (and therefore one api key):

    dispatcher = RequestDispatcher(ClientConfig(api_key="app-..."))
    chat = ChatClient(dispatcher)
    base = DifyClient(dispatcher)
"""

import logging
from typing import Any, BinaryIO, Dict, Optional

from dify_client.dispatcher import (
    ClientConfig, DEFAULT_BASE_URL, JsonData, RequestDispatcher
)
from dify_client.http_client import HttpMethod
from dify_client.http_client_factory import HttpClientType

logger = logging.getLogger(__name__)

BLOCKING = "blocking"
STREAMING = "streaming"
UPLOAD_CONTENT_TYPE = "text/plain"


class DifyClient:
    """Base profile: feedback, application parameters and file upload."""

    def __init__(self, dispatcher: RequestDispatcher):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def read_timeout(self) -> int:
        return self._dispatcher.read_timeout

    @read_timeout.setter
    def read_timeout(self, seconds: int) -> None:
        self._dispatcher.read_timeout = seconds

    def update_api_key(self, new_key: str) -> None:
        self._dispatcher.update_api_key(new_key)

    def message_feedback(self, message_id: str, rating: str, user: str) -> Any:
        data = {
            "rating": rating,
            "user": user,
        }
        return self._dispatcher.send_request(
            HttpMethod.POST, f"/messages/{message_id}/feedbacks", data)

    def get_application_parameters(self, user: str) -> Any:
        params = {"user": user}
        return self._dispatcher.send_request(HttpMethod.GET, "/parameters", None, params)

    def upload(self, io_obj: BinaryIO, user: str, filename: str = "localfile",
               mime_type: str = UPLOAD_CONTENT_TYPE) -> Any:
        """
        Upload a file as multipart/form-data to /files/upload.

        Args:
            io_obj: Readable binary stream with the file content
            user: End-user identifier
            filename: Name reported for the file part
            mime_type: Accepted for compatibility. The file part is always
                sent as text/plain.

        Returns:
            The raw upload response
        """
        if mime_type != UPLOAD_CONTENT_TYPE:
            logger.debug(f"Ignoring mime_type {mime_type!r}; file part is sent as {UPLOAD_CONTENT_TYPE}")

        files = {"file": (filename, io_obj, UPLOAD_CONTENT_TYPE)}
        return self._dispatcher.send_multipart("/files/upload", {"user": user}, files)

    def upload_file(self, file_path: str, user: str, filename: str = "localfile",
                    mime_type: str = UPLOAD_CONTENT_TYPE) -> Any:
        """
        Open file_path and upload it.

        Raises:
            FileNotFoundError: If file_path does not exist
            PermissionError: If file_path cannot be read
        """
        with open(file_path, 'rb') as f:
            return self.upload(f, user, filename, mime_type)


class CompletionClient:
    """Completion profile."""

    def __init__(self, dispatcher: RequestDispatcher):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def read_timeout(self) -> int:
        return self._dispatcher.read_timeout

    @read_timeout.setter
    def read_timeout(self, seconds: int) -> None:
        self._dispatcher.read_timeout = seconds

    def update_api_key(self, new_key: str) -> None:
        self._dispatcher.update_api_key(new_key)

    def create_completion_message(self, inputs: Dict[str, Any], query: str,
                                  response_mode: str, user: str) -> Any:
        data = {
            "inputs": inputs,
            "query": query,
            "response_mode": response_mode,
            "user": user,
        }
        return self._dispatcher.send_request(
            HttpMethod.POST, "/completion-messages", data,
            stream=response_mode == STREAMING)


class WorkflowClient:
    """Workflow profile."""

    def __init__(self, dispatcher: RequestDispatcher):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def read_timeout(self) -> int:
        return self._dispatcher.read_timeout

    @read_timeout.setter
    def read_timeout(self, seconds: int) -> None:
        self._dispatcher.read_timeout = seconds

    def update_api_key(self, new_key: str) -> None:
        self._dispatcher.update_api_key(new_key)

    def run_workflow(self, inputs: Dict[str, Any], user: str,
                     response_mode: str = BLOCKING,
                     trace_id: Optional[str] = None) -> Any:
        data: JsonData = {
            "inputs": inputs,
            "user": user,
            "response_mode": response_mode,
        }
        if trace_id is not None:
            data["trace_id"] = trace_id

        return self._dispatcher.send_request(
            HttpMethod.POST, "/workflows/run", data,
            stream=response_mode == STREAMING)

    def get_workflow(self, workflow_id: str) -> Any:
        return self._dispatcher.send_request(HttpMethod.GET, f"/workflows/run/{workflow_id}")


class ChatClient:
    """Chat profile: messages and conversation management."""

    def __init__(self, dispatcher: RequestDispatcher):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def read_timeout(self) -> int:
        return self._dispatcher.read_timeout

    @read_timeout.setter
    def read_timeout(self, seconds: int) -> None:
        self._dispatcher.read_timeout = seconds

    def update_api_key(self, new_key: str) -> None:
        self._dispatcher.update_api_key(new_key)

    def create_chat_message(self, inputs: Dict[str, Any], query: str, user: str,
                            response_mode: str = BLOCKING,
                            conversation_id: Optional[str] = None) -> Any:
        data: JsonData = {
            "inputs": inputs,
            "query": query,
            "user": user,
            "response_mode": response_mode,
        }
        if conversation_id is not None:
            data["conversation_id"] = conversation_id

        return self._dispatcher.send_request(
            HttpMethod.POST, "/chat-messages", data,
            stream=response_mode == STREAMING)

    def get_conversation_messages(self, user: str, conversation_id: Optional[str] = None,
                                  first_id: Optional[str] = None,
                                  limit: Optional[int] = None) -> Any:
        params: Dict[str, Any] = {"user": user}
        if conversation_id is not None:
            params["conversation_id"] = conversation_id
        if first_id is not None:
            params["first_id"] = first_id
        if limit is not None:
            params["limit"] = limit

        return self._dispatcher.send_request(HttpMethod.GET, "/messages", None, params)

    def get_conversations(self, user: str, last_id: Optional[str] = None,
                          limit: Optional[int] = None,
                          pinned: Optional[bool] = None) -> Any:
        # Unset values still go on the wire as bare keys
        params = {"user": user, "last_id": last_id, "limit": limit, "pinned": pinned}
        return self._dispatcher.send_request(HttpMethod.GET, "/conversations", None, params)

    def rename_conversation(self, conversation_id: str, name: str, user: str) -> Any:
        data = {"name": name, "user": user}
        return self._dispatcher.send_request(
            HttpMethod.POST, f"/conversations/{conversation_id}/name", data)


class ClientType:
    """Available capability profiles"""
    BASE = "base"
    COMPLETION = "completion"
    WORKFLOW = "workflow"
    CHAT = "chat"


_PROFILES = {
    ClientType.BASE: DifyClient,
    ClientType.COMPLETION: CompletionClient,
    ClientType.WORKFLOW: WorkflowClient,
    ClientType.CHAT: ChatClient,
}


class ClientFactory:
    """Factory for creating profile instances by name"""

    @staticmethod
    def create_client(client_type: str, api_key: str, base_url: str = DEFAULT_BASE_URL,
                      http_client_type: str = HttpClientType.AUTO):
        """
        Create a capability profile with its own dispatcher

        Args:
            client_type: Profile name (base, completion, workflow, chat)
            api_key: Bearer token
            base_url: API root
            http_client_type: Transport backend

        Raises:
            ValueError: If the profile name is unknown
        """
        profile = _PROFILES.get(client_type)
        if profile is None:
            raise ValueError(f"Unknown client type: {client_type}")
        config = ClientConfig(api_key=api_key, base_url=base_url)
        return profile(RequestDispatcher(config, http_client_type=http_client_type))
