"""Model Context Protocol message types, request parsing and JSON encoding."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar

from mcpserve.uritemplate import URITemplate

JSONRPC_VERSION = "2.0"
LATEST_PROTOCOL_VERSION = "2025-03-26"
VALID_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26")

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
RESOURCE_NOT_FOUND = -32002


class MCPMethod(str, Enum):
    """Request and notification methods understood by the server."""

    INITIALIZE = "initialize"
    PING = "ping"
    SET_LOG_LEVEL = "logging/setLevel"
    RESOURCES_LIST = "resources/list"
    RESOURCES_TEMPLATES_LIST = "resources/templates/list"
    RESOURCES_READ = "resources/read"
    PROMPTS_LIST = "prompts/list"
    PROMPTS_GET = "prompts/get"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"
    NOTIFICATION_RESOURCES_LIST_CHANGED = "notifications/resources/list_changed"
    NOTIFICATION_PROMPTS_LIST_CHANGED = "notifications/prompts/list_changed"
    NOTIFICATION_TOOLS_LIST_CHANGED = "notifications/tools/list_changed"

    def __str__(self) -> str:
        return self.value

    @property
    def capability(self) -> str | None:
        """The server capability a request needs, or None if it needs none."""
        return _CAPABILITY_GROUPS.get(self)


_CAPABILITY_GROUPS = {
    MCPMethod.SET_LOG_LEVEL: "logging",
    MCPMethod.RESOURCES_LIST: "resources",
    MCPMethod.RESOURCES_TEMPLATES_LIST: "resources",
    MCPMethod.RESOURCES_READ: "resources",
    MCPMethod.PROMPTS_LIST: "prompts",
    MCPMethod.PROMPTS_GET: "prompts",
    MCPMethod.TOOLS_LIST: "tools",
    MCPMethod.TOOLS_CALL: "tools",
}


class LoggingLevel(str, Enum):
    """Log severities a client may select, from least to most severe."""

    DEBUG = "debug"
    INFO = "info"
    NOTICE = "notice"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    ALERT = "alert"
    EMERGENCY = "emergency"

    def __str__(self) -> str:
        return self.value


def _json(
    key: str | None = None,
    *,
    omitempty: bool = False,
    default: Any = MISSING,
    default_factory: Any = MISSING,
) -> Any:
    metadata = {"omitempty": omitempty}
    if key is not None:
        metadata["json"] = key
    return field(default=default, default_factory=default_factory, metadata=metadata)


def _default_input_schema() -> dict[str, Any]:
    return {"type": "object", "properties": {}}


# Entities ------------------------------------------------------------------


@dataclass
class Implementation:
    """Name and version of a client or server."""

    name: str
    version: str


@dataclass
class Tool:
    """A callable tool offered by the server."""

    name: str
    description: str = _json(omitempty=True, default="")
    input_schema: dict[str, Any] = _json("inputSchema", default_factory=_default_input_schema)
    annotations: dict[str, Any] = _json(omitempty=True, default_factory=dict)


@dataclass
class PromptArgument:
    """An argument a prompt accepts."""

    name: str
    description: str = _json(omitempty=True, default="")
    required: bool = _json(omitempty=True, default=False)


@dataclass
class Prompt:
    """A prompt template offered by the server."""

    name: str
    description: str = _json(omitempty=True, default="")
    arguments: list[PromptArgument] = _json(omitempty=True, default_factory=list)


@dataclass
class Resource:
    """A resource reachable at a fixed URI."""

    uri: str
    name: str
    description: str = _json(omitempty=True, default="")
    mime_type: str | None = _json("mimeType", omitempty=True, default=None)


@dataclass
class ResourceTemplate:
    """A family of resources whose URIs follow a template."""

    uri_template: URITemplate = _json("uriTemplate")
    name: str = ""
    description: str = _json(omitempty=True, default="")
    mime_type: str | None = _json("mimeType", omitempty=True, default=None)

    def __post_init__(self) -> None:
        if isinstance(self.uri_template, str):
            self.uri_template = URITemplate(self.uri_template)


@dataclass
class TextContent:
    """Plain text content in a prompt message or tool result."""

    text: str
    type: str = "text"


@dataclass
class TextResourceContents:
    """The text of a resource."""

    uri: str
    text: str
    mime_type: str | None = _json("mimeType", omitempty=True, default=None)


@dataclass
class PromptMessage:
    """One message of a rendered prompt."""

    role: str
    content: Any


# Requests ------------------------------------------------------------------


@dataclass
class InitializeRequest:
    method: ClassVar[MCPMethod] = MCPMethod.INITIALIZE

    protocol_version: str = _json("protocolVersion", default="")
    client_info: Implementation = _json(
        "clientInfo", default_factory=lambda: Implementation("", "")
    )
    capabilities: dict[str, Any] = _json(default_factory=dict)


@dataclass
class PingRequest:
    method: ClassVar[MCPMethod] = MCPMethod.PING


@dataclass
class SetLevelRequest:
    method: ClassVar[MCPMethod] = MCPMethod.SET_LOG_LEVEL

    level: str = ""


@dataclass
class PaginatedRequest:
    """A list request that may continue from a cursor."""

    cursor: str | None = _json(omitempty=True, default=None)


@dataclass
class ListResourcesRequest(PaginatedRequest):
    method: ClassVar[MCPMethod] = MCPMethod.RESOURCES_LIST


@dataclass
class ListResourceTemplatesRequest(PaginatedRequest):
    method: ClassVar[MCPMethod] = MCPMethod.RESOURCES_TEMPLATES_LIST


@dataclass
class ListPromptsRequest(PaginatedRequest):
    method: ClassVar[MCPMethod] = MCPMethod.PROMPTS_LIST


@dataclass
class ListToolsRequest(PaginatedRequest):
    method: ClassVar[MCPMethod] = MCPMethod.TOOLS_LIST


@dataclass
class ReadResourceRequest:
    method: ClassVar[MCPMethod] = MCPMethod.RESOURCES_READ

    uri: str = ""
    arguments: dict[str, Any] = _json(omitempty=True, default_factory=dict)


@dataclass
class GetPromptRequest:
    method: ClassVar[MCPMethod] = MCPMethod.PROMPTS_GET

    name: str = ""
    arguments: dict[str, str] = _json(omitempty=True, default_factory=dict)


@dataclass
class CallToolRequest:
    method: ClassVar[MCPMethod] = MCPMethod.TOOLS_CALL

    name: str = ""
    arguments: dict[str, Any] = _json(omitempty=True, default_factory=dict)


# Results -------------------------------------------------------------------


@dataclass
class InitializeResult:
    protocol_version: str = _json("protocolVersion")
    server_info: Implementation = _json("serverInfo")
    capabilities: dict[str, Any] = _json(default_factory=dict)
    instructions: str = _json(omitempty=True, default="")


@dataclass
class EmptyResult:
    """A successful result that carries no data."""


@dataclass
class ListResourcesResult:
    resources: list[Resource] = field(default_factory=list)
    next_cursor: str | None = _json("nextCursor", omitempty=True, default=None)


@dataclass
class ListResourceTemplatesResult:
    resource_templates: list[ResourceTemplate] = _json(
        "resourceTemplates", default_factory=list
    )
    next_cursor: str | None = _json("nextCursor", omitempty=True, default=None)


@dataclass
class ListPromptsResult:
    prompts: list[Prompt] = field(default_factory=list)
    next_cursor: str | None = _json("nextCursor", omitempty=True, default=None)


@dataclass
class ListToolsResult:
    tools: list[Tool] = field(default_factory=list)
    next_cursor: str | None = _json("nextCursor", omitempty=True, default=None)


@dataclass
class ReadResourceResult:
    contents: list[Any] = field(default_factory=list)


@dataclass
class GetPromptResult:
    messages: list[PromptMessage] = field(default_factory=list)
    description: str = _json(omitempty=True, default="")


@dataclass
class CallToolResult:
    content: list[Any] = field(default_factory=list)
    is_error: bool = _json("isError", omitempty=True, default=False)


# JSON-RPC envelopes --------------------------------------------------------


@dataclass
class JSONRPCResponse:
    """A successful reply to a request."""

    jsonrpc: ClassVar[str] = JSONRPC_VERSION

    id: Any
    result: Any


@dataclass
class JSONRPCError:
    """An error reply to a request."""

    jsonrpc: ClassVar[str] = JSONRPC_VERSION

    id: Any
    code: int
    message: str
    data: Any = None


@dataclass
class JSONRPCNotification:
    """A one-way message that expects no reply."""

    jsonrpc: ClassVar[str] = JSONRPC_VERSION

    method: str
    params: dict[str, Any] = field(default_factory=dict)


# Parsing -------------------------------------------------------------------


def _string(params: Mapping[str, Any], key: str) -> str:
    value = params.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key!r} must be a string, got {type(value).__name__}")
    return value


def _object(params: Mapping[str, Any], key: str) -> dict[str, Any]:
    value = params.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{key!r} must be an object, got {type(value).__name__}")
    return dict(value)


def _string_map(params: Mapping[str, Any], key: str) -> dict[str, str]:
    values = _object(params, key)
    for name, value in values.items():
        if not isinstance(value, str):
            raise ValueError(f"argument {name!r} must be a string, got {type(value).__name__}")
    return values


def _initialize(params: Mapping[str, Any]) -> InitializeRequest:
    info = _object(params, "clientInfo")
    return InitializeRequest(
        protocol_version=_string(params, "protocolVersion"),
        client_info=Implementation(_string(info, "name"), _string(info, "version")),
        capabilities=_object(params, "capabilities"),
    )


def _paginated(cls: type[PaginatedRequest]) -> Callable[[Mapping[str, Any]], Any]:
    return lambda params: cls(cursor=_string(params, "cursor") or None)


_PARSERS: dict[MCPMethod, Callable[[Mapping[str, Any]], Any]] = {
    MCPMethod.INITIALIZE: _initialize,
    MCPMethod.PING: lambda params: PingRequest(),
    MCPMethod.SET_LOG_LEVEL: lambda params: SetLevelRequest(level=_string(params, "level")),
    MCPMethod.RESOURCES_LIST: _paginated(ListResourcesRequest),
    MCPMethod.RESOURCES_TEMPLATES_LIST: _paginated(ListResourceTemplatesRequest),
    MCPMethod.RESOURCES_READ: lambda params: ReadResourceRequest(
        uri=_string(params, "uri"), arguments=_object(params, "arguments")
    ),
    MCPMethod.PROMPTS_LIST: _paginated(ListPromptsRequest),
    MCPMethod.PROMPTS_GET: lambda params: GetPromptRequest(
        name=_string(params, "name"), arguments=_string_map(params, "arguments")
    ),
    MCPMethod.TOOLS_LIST: _paginated(ListToolsRequest),
    MCPMethod.TOOLS_CALL: lambda params: CallToolRequest(
        name=_string(params, "name"), arguments=_object(params, "arguments")
    ),
}


def parse_request(method: MCPMethod | str, message: Mapping[str, Any]) -> Any:
    """Build the typed request for a method from a decoded JSON-RPC message.

    Raises ValueError if the method is not a request method or the message
    does not have the shape the method requires.
    """
    method = MCPMethod(method)
    parser = _PARSERS.get(method)
    if parser is None:
        raise ValueError(f"{method} is not a request method")
    if not isinstance(message, Mapping):
        raise ValueError(f"message must be an object, got {type(message).__name__}")
    params = message.get("params")
    if params is None:
        params = {}
    elif not isinstance(params, Mapping):
        raise ValueError(f"params must be an object, got {type(params).__name__}")
    return parser(params)


# Encoding ------------------------------------------------------------------


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if dataclasses.is_dataclass(value) or isinstance(value, URITemplate):
        return False
    return not value


def _response_to_json(response: JSONRPCResponse) -> dict[str, Any]:
    return {"jsonrpc": response.jsonrpc, "id": to_json(response.id), "result": to_json(response.result)}


def _error_to_json(error: JSONRPCError) -> dict[str, Any]:
    body: dict[str, Any] = {"code": error.code, "message": error.message}
    if error.data is not None:
        body["data"] = to_json(error.data)
    return {"jsonrpc": error.jsonrpc, "id": to_json(error.id), "error": body}


def _notification_to_json(notification: JSONRPCNotification) -> dict[str, Any]:
    encoded: dict[str, Any] = {"jsonrpc": notification.jsonrpc, "method": str(notification.method)}
    if notification.params:
        encoded["params"] = to_json(notification.params)
    return encoded


_ENVELOPES: dict[type, Callable[[Any], dict[str, Any]]] = {
    JSONRPCResponse: _response_to_json,
    JSONRPCError: _error_to_json,
    JSONRPCNotification: _notification_to_json,
}


def to_json(value: Any) -> Any:
    """Convert a protocol value to plain data ready for json.dumps."""
    envelope = _ENVELOPES.get(type(value))
    if envelope is not None:
        return envelope(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, URITemplate):
        return value.raw
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        encoded: dict[str, Any] = {}
        for item in dataclasses.fields(value):
            content = getattr(value, item.name)
            if item.metadata.get("omitempty") and _is_empty(content):
                continue
            encoded[item.metadata.get("json", item.name)] = to_json(content)
        return encoded
    if isinstance(value, Mapping):
        return {str(key): to_json(content) for key, content in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(content) for content in value]
    return value