"""Callbacks run around request handling and session registration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from mcpserve.protocol import MCPMethod

BeforeAnyHook = Callable[[Any, MCPMethod, Any], None]
SuccessHook = Callable[[Any, MCPMethod, Any, Any], None]
ErrorHook = Callable[[Any, MCPMethod, Any, BaseException], None]
SessionHook = Callable[[Any], None]
RequestInitializationHook = Callable[[Any, Any], None]
BeforeHook = Callable[[Any, Any], None]
AfterHook = Callable[[Any, Any, Any], None]

REQUEST_METHODS: tuple[MCPMethod, ...] = (
    MCPMethod.INITIALIZE,
    MCPMethod.PING,
    MCPMethod.SET_LOG_LEVEL,
    MCPMethod.RESOURCES_LIST,
    MCPMethod.RESOURCES_TEMPLATES_LIST,
    MCPMethod.RESOURCES_READ,
    MCPMethod.PROMPTS_LIST,
    MCPMethod.PROMPTS_GET,
    MCPMethod.TOOLS_LIST,
    MCPMethod.TOOLS_CALL,
)


def _request_method(method: MCPMethod | str) -> MCPMethod:
    method = MCPMethod(method)
    if method not in REQUEST_METHODS:
        raise ValueError(f"{method} is not a request method")
    return method


@dataclass
class Hooks:
    """Registered callbacks, run in the order they were added.

    Request hooks receive the request id, the typed request and, where it
    applies, the result or the error. A request-initialization hook rejects
    a request by raising; the exception stops the remaining hooks.
    """

    on_register_session: list[SessionHook] = field(default_factory=list)
    on_unregister_session: list[SessionHook] = field(default_factory=list)
    on_before_any: list[BeforeAnyHook] = field(default_factory=list)
    on_success: list[SuccessHook] = field(default_factory=list)
    on_error: list[ErrorHook] = field(default_factory=list)
    on_request_initialization: list[RequestInitializationHook] = field(default_factory=list)
    before: dict[MCPMethod, list[BeforeHook]] = field(default_factory=dict)
    after: dict[MCPMethod, list[AfterHook]] = field(default_factory=dict)

    def add_before_any(self, hook: BeforeAnyHook) -> None:
        """Run hook before every request method, after parsing."""
        self.on_before_any.append(hook)

    def add_on_success(self, hook: SuccessHook) -> None:
        """Run hook after every request that produced a result."""
        self.on_success.append(hook)

    def add_on_error(self, hook: ErrorHook) -> None:
        """Run hook whenever parsing or handling a request fails."""
        self.on_error.append(hook)

    def add_on_register_session(self, hook: SessionHook) -> None:
        """Run hook when a client session is registered."""
        self.on_register_session.append(hook)

    def add_on_unregister_session(self, hook: SessionHook) -> None:
        """Run hook when a client session is unregistered."""
        self.on_unregister_session.append(hook)

    def add_on_request_initialization(self, hook: RequestInitializationHook) -> None:
        """Run hook before any request is dispatched; raising rejects it."""
        self.on_request_initialization.append(hook)

    def add_before(self, method: MCPMethod | str, hook: BeforeHook) -> None:
        """Run hook before requests of one method."""
        self.before.setdefault(_request_method(method), []).append(hook)

    def add_after(self, method: MCPMethod | str, hook: AfterHook) -> None:
        """Run hook after successful requests of one method."""
        self.after.setdefault(_request_method(method), []).append(hook)

    def call_before(self, request_id: Any, method: MCPMethod | str, message: Any) -> None:
        """Run the before-any hooks, then those for the method."""
        method = MCPMethod(method)
        for hook in self.on_before_any:
            hook(request_id, method, message)
        for hook in self.before.get(method, ()):
            hook(request_id, message)

    def call_success(
        self, request_id: Any, method: MCPMethod | str, message: Any, result: Any
    ) -> None:
        """Run the success hooks, then the after hooks for the method."""
        method = MCPMethod(method)
        for hook in self.on_success:
            hook(request_id, method, message, result)
        for hook in self.after.get(method, ()):
            hook(request_id, message, result)

    def call_error(
        self, request_id: Any, method: Any, message: Any, error: BaseException
    ) -> None:
        """Run the error hooks."""
        for hook in self.on_error:
            hook(request_id, method, message, error)

    def register_session(self, session: Any) -> None:
        """Run the session-registration hooks."""
        for hook in self.on_register_session:
            hook(session)

    def unregister_session(self, session: Any) -> None:
        """Run the session-unregistration hooks."""
        for hook in self.on_unregister_session:
            hook(session)

    def request_initialization(self, request_id: Any, message: Any) -> None:
        """Run the request-initialization hooks; the first exception propagates."""
        for hook in self.on_request_initialization:
            hook(request_id, message)