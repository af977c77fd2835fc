"""Builders for gviz payloads and a scripted httpx transport."""

import json

import httpx

GVIZ_PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("
GVIZ_SUFFIX = ");"


def gviz_document(rows: list[list[object]]) -> str:
    """A gviz JSON document; ``None`` in *rows* becomes a null cell."""
    return json.dumps(
        {
            "version": "0.6",
            "reqId": "0",
            "status": "ok",
            "table": {
                "cols": [],
                "rows": [{"c": [None if value is None else {"v": value} for value in row]} for row in rows],
            },
        },
        ensure_ascii=False,
    )


def gviz_response(rows: list[list[object]]) -> str:
    """The body Google's visualization endpoint returns for *rows*."""
    return f"{GVIZ_PREFIX}{gviz_document(rows)}{GVIZ_SUFFIX}"


class ScriptedTransport(httpx.BaseTransport):
    """Answers requests in order from a script.

    Each script item is either an ``httpx.Response`` or a string, which is
    raised as ``httpx.ConnectError`` with that message.
    """

    def __init__(self, script: list[httpx.Response | str]) -> None:
        self._script = list(script)
        self.requests: list[httpx.Request] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._script:
            raise AssertionError(f"Unexpected request to {request.url}")
        outcome = self._script.pop(0)
        if isinstance(outcome, str):
            raise httpx.ConnectError(outcome, request=request)
        return outcome

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def hosts(self) -> list[str]:
        return [request.url.host for request in self.requests]


def ok(text: str) -> httpx.Response:
    return httpx.Response(200, text=text)


def scripted_client(script: list[httpx.Response | str]) -> tuple[httpx.Client, ScriptedTransport]:
    transport = ScriptedTransport(script)
    return httpx.Client(transport=transport), transport
