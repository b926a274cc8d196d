from __future__ import annotations

import json
import re
from itertools import count
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import httpx
import pytest
import pytest_asyncio
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

# Load dotenv files early so test fixtures can read settings via os.getenv
try:  # pragma: no cover
    from dotenv import load_dotenv

    TEST_ROOT = Path(__file__).resolve().parent
    load_dotenv(TEST_ROOT / ".env", override=False)
except Exception:
    pass

from joke_api.agents.client import AgentsClient

MOCK_ENDPOINT = "http://mock-project.local/api/projects/jokes"

TERMINAL = {"completed", "failed", "cancelled", "expired", "incomplete"}


def text_message(role: str, *texts: str, message_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": message_id or f"msg_{role}",
        "object": "thread.message",
        "role": role,
        "content": [{"type": "text", "text": {"value": text, "annotations": []}} for text in texts],
    }


class FakeAgentPlatform:
    """
    In-memory stand-in for the Agents REST API, served through ``httpx.MockTransport``.

    Runs walk through ``run_statuses``: the first status is returned on creation
    and each poll returns the next one. When a run completes, ``reply_text`` (if
    set) is appended to the thread as an assistant message.
    """

    def __init__(self) -> None:
        self.agents: Dict[str, Dict[str, Any]] = {
            "agent_id": {"id": "agent_id", "object": "assistant", "name": "Comedian"},
            "feedback_agent": {"id": "feedback_agent", "object": "assistant", "name": "Critic"},
        }
        self.thread_ids: List[str] = ["t1"]
        self.threads: Dict[str, List[Dict[str, Any]]] = {}
        self.run_statuses: List[str] = ["queued", "in_progress", "completed"]
        self.run_usage: Optional[Dict[str, Any]] = {"prompt_tokens": 12, "completion_tokens": 7, "total_tokens": 19}
        self.last_error: Optional[Dict[str, Any]] = None
        self.reply_text: Optional[str] = "Why did the scarecrow win an award? He was outstanding in his field."
        self.fail_status: Optional[int] = None
        self.requests: List[httpx.Request] = []
        self._runs: Dict[str, Dict[str, Any]] = {}
        self._pending: Dict[str, List[str]] = {}
        self._ids = count(1)

    # -- helpers -----------------------------------------------------------

    def seed_thread(self, thread_id: str, messages_oldest_first: Iterable[Dict[str, Any]]) -> None:
        self.threads[thread_id] = list(messages_oldest_first)

    def requests_to(self, method: str, pattern: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and re.search(pattern, r.url.path)]

    def messages_posted(self, thread_id: str) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests_to("POST", rf"/threads/{thread_id}/messages$")]

    # -- transport ---------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"error": {"message": "platform unavailable"}})

        path = request.url.path.removeprefix(httpx.URL(MOCK_ENDPOINT).path)
        parts = [p for p in path.split("/") if p]

        if request.method == "GET" and len(parts) == 2 and parts[0] == "assistants":
            agent = self.agents.get(parts[1])
            return httpx.Response(200, json=agent) if agent else self._not_found()

        if request.method == "POST" and parts == ["threads"]:
            thread_id = self.thread_ids.pop(0) if self.thread_ids else f"thread_{next(self._ids)}"
            self.threads[thread_id] = []
            return httpx.Response(200, json={"id": thread_id, "object": "thread", "created_at": 1700000000})

        if len(parts) < 3 or parts[0] != "threads":
            return self._not_found()
        thread_id = parts[1]
        if thread_id not in self.threads:
            return self._not_found()

        if parts[2] == "messages" and len(parts) == 3:
            if request.method == "POST":
                body = json.loads(request.content)
                message = text_message(body["role"], body["content"], message_id=f"msg_{next(self._ids)}")
                self.threads[thread_id].append(message)
                return httpx.Response(200, json=message)
            limit = int(request.url.params.get("limit", "20"))
            ordered = list(self.threads[thread_id])
            if request.url.params.get("order", "desc") == "desc":
                ordered.reverse()
            page = ordered[:limit]
            return httpx.Response(
                200,
                json={"object": "list", "data": page, "has_more": len(ordered) > limit},
            )

        if parts[2] == "runs":
            if request.method == "POST" and len(parts) == 3:
                body = json.loads(request.content)
                run_id = f"run_{next(self._ids)}"
                self._pending[run_id] = list(self.run_statuses)
                self._runs[run_id] = {
                    "id": run_id,
                    "object": "thread.run",
                    "thread_id": thread_id,
                    "assistant_id": body["assistant_id"],
                    "status": "queued",
                    "usage": None,
                    "last_error": None,
                }
                return httpx.Response(200, json=self._advance(run_id))
            if request.method == "GET" and len(parts) == 4 and parts[3] in self._runs:
                return httpx.Response(200, json=self._advance(parts[3]))

        return self._not_found()

    def _advance(self, run_id: str) -> Dict[str, Any]:
        run = self._runs[run_id]
        pending = self._pending[run_id]
        if pending:
            run["status"] = pending.pop(0)
            if run["status"] in TERMINAL:
                run["usage"] = self.run_usage
                if run["status"] == "failed":
                    run["last_error"] = self.last_error
                elif run["status"] == "completed" and self.reply_text is not None:
                    self.threads[run["thread_id"]].append(
                        text_message("assistant", self.reply_text, message_id=f"msg_{next(self._ids)}")
                    )
        return dict(run)

    @staticmethod
    def _not_found() -> httpx.Response:
        return httpx.Response(404, json={"error": {"code": "not_found", "message": "No such resource"}})


@pytest.fixture
def platform() -> FakeAgentPlatform:
    return FakeAgentPlatform()


@pytest.fixture
def make_message():
    """Factory for platform message payloads: ``make_message(role, *texts)``."""
    return text_message


@pytest_asyncio.fixture
async def agents_client(platform: FakeAgentPlatform):
    http = httpx.AsyncClient(transport=httpx.MockTransport(platform.handler))
    client = AgentsClient(MOCK_ENDPOINT, api_key="test-token", poll_interval=0, client=http)
    yield client
    await client.aclose()


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def tracer(span_exporter: InMemorySpanExporter):
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    yield provider.get_tracer("joke-api-test")
    provider.shutdown()


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://mock",
        "https://mock",
        "http://localhost",
        "http://127.0.0.1",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)
