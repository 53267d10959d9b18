import pytest

from mcpserve.hooks import REQUEST_METHODS, Hooks
from mcpserve.protocol import EmptyResult, ListToolsRequest, MCPMethod, PingRequest


def test_before_any_runs_before_method_hooks():
    calls = []
    hooks = Hooks()
    hooks.add_before(MCPMethod.PING, lambda rid, msg: calls.append(("ping", rid, msg)))
    hooks.add_before_any(lambda rid, method, msg: calls.append(("any", rid, method)))
    request = PingRequest()
    hooks.call_before(2, MCPMethod.PING, request)
    assert calls == [("any", 2, MCPMethod.PING), ("ping", 2, request)]


def test_success_runs_before_after_hooks_and_passes_result():
    calls = []
    hooks = Hooks()
    hooks.add_on_success(lambda rid, m, msg, res: calls.append(("success", m, res)))
    hooks.add_after("ping", lambda rid, msg, res: calls.append(("after", msg, res)))
    request, result = PingRequest(), EmptyResult()
    hooks.call_success(1, "ping", request, result)
    assert calls == [("success", MCPMethod.PING, result), ("after", request, result)]


def test_method_hooks_only_run_for_their_method():
    calls = []
    hooks = Hooks()
    hooks.add_before(MCPMethod.TOOLS_LIST, lambda rid, msg: calls.append("before"))
    hooks.add_after(MCPMethod.TOOLS_LIST, lambda rid, msg, res: calls.append("after"))
    hooks.call_before(1, MCPMethod.PING, PingRequest())
    hooks.call_success(1, MCPMethod.PING, PingRequest(), EmptyResult())
    assert calls == []
    hooks.call_before(3, MCPMethod.TOOLS_LIST, ListToolsRequest())
    assert calls == ["before"]


def test_hooks_run_in_registration_order():
    calls = []
    hooks = Hooks()
    for index in range(3):
        hooks.add_before_any(lambda rid, m, msg, index=index: calls.append(index))
    hooks.call_before(1, MCPMethod.INITIALIZE, None)
    assert calls == [0, 1, 2]


def test_error_hooks_receive_the_error():
    seen = []
    hooks = Hooks()
    hooks.add_on_error(lambda rid, m, msg, err: seen.append((rid, m, err)))
    error = RuntimeError("boom")
    hooks.call_error(4, MCPMethod.TOOLS_CALL, None, error)
    assert seen == [(4, MCPMethod.TOOLS_CALL, error)]


def test_request_initialization_stops_at_first_exception():
    calls = []
    hooks = Hooks()

    def reject(rid, msg):
        calls.append("reject")
        raise PermissionError("denied")

    hooks.add_on_request_initialization(lambda rid, msg: calls.append("first"))
    hooks.add_on_request_initialization(reject)
    hooks.add_on_request_initialization(lambda rid, msg: calls.append("last"))
    with pytest.raises(PermissionError, match="denied"):
        hooks.request_initialization(1, {"method": "ping"})
    assert calls == ["first", "reject"]


def test_request_initialization_runs_all_when_none_raise():
    calls = []
    hooks = Hooks()
    hooks.add_on_request_initialization(lambda rid, msg: calls.append((rid, msg)))
    hooks.add_on_request_initialization(lambda rid, msg: calls.append((rid, msg)))
    hooks.request_initialization(7, "raw")
    assert calls == [(7, "raw"), (7, "raw")]


def test_session_hooks():
    registered, unregistered = [], []
    hooks = Hooks()
    hooks.add_on_register_session(registered.append)
    hooks.add_on_unregister_session(unregistered.append)
    session = object()
    hooks.register_session(session)
    assert registered == [session]
    assert unregistered == []
    hooks.unregister_session(session)
    assert unregistered == [session]


def test_empty_hooks_do_nothing():
    hooks = Hooks()
    hooks.call_before(1, MCPMethod.PING, PingRequest())
    hooks.call_success(1, MCPMethod.PING, PingRequest(), EmptyResult())
    hooks.request_initialization(1, None)
    assert hooks.before == {}
    assert hooks.after == {}


@pytest.mark.parametrize(
    "method",
    [MCPMethod.NOTIFICATION_TOOLS_LIST_CHANGED, "notifications/prompts/list_changed"],
)
def test_method_hooks_reject_notification_methods(method):
    hooks = Hooks()
    with pytest.raises(ValueError):
        hooks.add_before(method, lambda rid, msg: None)
    with pytest.raises(ValueError):
        hooks.add_after(method, lambda rid, msg, res: None)


def test_method_hooks_reject_unknown_method():
    hooks = Hooks()
    with pytest.raises(ValueError):
        hooks.add_before("nonexistent", lambda rid, msg: None)


def test_every_request_method_accepts_hooks():
    hooks = Hooks()
    for method in REQUEST_METHODS:
        hooks.add_before(method.value, lambda rid, msg: None)
    assert set(hooks.before) == set(REQUEST_METHODS)
    assert len(REQUEST_METHODS) == 10