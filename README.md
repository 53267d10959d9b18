# mcpserve

Building blocks for Model Context Protocol (MCP) servers: the protocol's
message types, parsing of incoming requests into typed objects, encoding of
replies as plain JSON data, URI templates for matching resource URIs,
cursor-based pagination and a registry of hooks. It has no dependencies
outside the standard library.

## Modules

### `mcpserve.protocol`

- `MCPMethod` names the request and notification methods (`initialize`,
  `ping`, `logging/setLevel`, `resources/list`, `resources/templates/list`,
  `resources/read`, `prompts/list`, `prompts/get`, `tools/list`,
  `tools/call` and the three `notifications/.../list_changed`). Its
  `capability` property gives the capability a request needs
  (`"tools"`, `"prompts"`, `"resources"`, `"logging"`) or `None`.
- `LoggingLevel` lists the eight log levels from `debug` to `emergency`.
- Dataclasses for entities (`Implementation`, `Tool`, `Prompt`,
  `PromptArgument`, `Resource`, `ResourceTemplate`, `TextContent`,
  `TextResourceContents`, `PromptMessage`), requests (`InitializeRequest`,
  `PingRequest`, `SetLevelRequest`, `ListResourcesRequest`,
  `ListResourceTemplatesRequest`, `ReadResourceRequest`,
  `ListPromptsRequest`, `GetPromptRequest`, `ListToolsRequest`,
  `CallToolRequest`; the list requests derive from `PaginatedRequest`),
  results (`InitializeResult`, `EmptyResult`, `ListResourcesResult`,
  `ListResourceTemplatesResult`, `ListPromptsResult`, `GetPromptResult`,
  `ListToolsResult`, `ReadResourceResult`, `CallToolResult`) and JSON-RPC
  envelopes (`JSONRPCResponse`, `JSONRPCError`, `JSONRPCNotification`).
- Constants: `JSONRPC_VERSION`, `LATEST_PROTOCOL_VERSION`,
  `VALID_PROTOCOL_VERSIONS` and the error codes `PARSE_ERROR`,
  `INVALID_REQUEST`, `METHOD_NOT_FOUND`, `INVALID_PARAMS`,
  `INTERNAL_ERROR`, `RESOURCE_NOT_FOUND`.
- `parse_request(method, message)` builds the typed request from a decoded
  message and raises `ValueError` when the method is not a request method
  or the params have the wrong shape.
- `to_json(value)` turns any of these values into plain data for
  `json.dumps`, using the protocol's camelCase keys and leaving out empty
  optional fields.

```python
import json
from mcpserve.protocol import (
    JSONRPCResponse, ListToolsResult, Tool, parse_request, to_json,
)

request = parse_request("tools/call", {
    "jsonrpc": "2.0", "id": 1, "method": "tools/call",
    "params": {"name": "echo", "arguments": {"text": "hi"}},
})
# CallToolRequest(name='echo', arguments={'text': 'hi'})

reply = JSONRPCResponse(id=1, result=ListToolsResult(tools=[Tool("echo")]))
print(json.dumps(to_json(reply)))
# {"jsonrpc": "2.0", "id": 1, "result": {"tools": [{"name": "echo",
#   "inputSchema": {"type": "object", "properties": {}}}]}}
```

### `mcpserve.uritemplate`

`URITemplate(raw)` parses a URI template with RFC 6570 expressions
(`{var}`, `{+var}`, `{#var}`, `{.var}`, `{/var*}`, `{;var}`, `{?var}`,
`{&var}`, prefixes such as `{var:3}`) and raises `ValueError` for a
malformed one. `matches(uri)` tells whether the whole URI fits;
`match(uri)` returns the percent-decoded values of each variable as lists,
or `None`. `regex` and `variables` expose the compiled pattern and the
variable names.

```python
from mcpserve.uritemplate import URITemplate

template = URITemplate("test://{a}/test-resource{/b*}")
template.match("test://something/test-resource/a/b/c")
# {'a': ['something'], 'b': ['a', 'b', 'c']}
```

### `mcpserve.pagination`

`paginate(items, cursor, limit)` takes items sorted by their `name`
attribute and returns one page plus the cursor for the next page. The page
starts after the item the cursor names; the next cursor is `None` when the
limit is `None` or the page is shorter than the limit. Cursors are
base64-encoded names (`encode_cursor`, `decode_cursor`); an invalid cursor
or a negative limit raises `ValueError`.

```python
from mcpserve.pagination import paginate
from mcpserve.protocol import Tool

tools = [Tool("a"), Tool("b"), Tool("c")]
page, cursor = paginate(tools, None, 2)    # [a, b], cursor for "b"
page, cursor = paginate(tools, cursor, 2)  # [c], None
```

### `mcpserve.hooks`

`Hooks` collects callbacks, run in the order added:
`add_before_any`, `add_on_success`, `add_on_error`,
`add_on_request_initialization` (a hook rejects a request by raising; the
exception propagates from `request_initialization`),
`add_on_register_session`, `add_on_unregister_session`, and per-method
`add_before(method, hook)` / `add_after(method, hook)`, which accept only
the request methods in `REQUEST_METHODS`. The `call_before`,
`call_success`, `call_error`, `register_session`, `unregister_session` and
`request_initialization` methods run them: the general hooks first, then
those for the method.

```python
from mcpserve.hooks import Hooks
from mcpserve.protocol import PingRequest

hooks = Hooks()
seen = []
hooks.add_before_any(lambda request_id, method, message: seen.append(method))
hooks.add_before("ping", lambda request_id, message: seen.append(message))
hooks.call_before(1, "ping", PingRequest())
```

## What it does not do

The package provides the pieces, not a running server. There is no object
that keeps a registry of tools, prompts and resources, dispatches an
incoming JSON-RPC message to a handler and builds the response, negotiates
the protocol version or sends `list_changed` notifications. There is no
tracking of client sessions and no transport (stdio, HTTP or other): the
caller reads messages, calls `parse_request`, runs its own handlers and
hooks, and writes out what `to_json` returns.