from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .errors import InvalidThread, RemoteUnavailable
from .models import AgentDescriptor, AgentRunRecord, MessagePage, ThreadHandle, ThreadMessage

ModelT = TypeVar("ModelT", bound=BaseModel)


class AgentsClient:
    """
    Thin async HTTP client for the Azure AI Foundry Agents REST API.

    Responsibilities:
    - get_agent
    - create_thread / create_message / list_messages
    - create_run / get_run / poll_run_until_done

    One instance is shared by all requests; the underlying ``httpx.AsyncClient``
    owns connection pooling and is safe for concurrent use.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        api_key: Optional[str] = None,
        api_version: str = "v1",
        timeout: float = 30.0,
        poll_interval: float = 1.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.api_key = api_key
        self.api_version = api_version
        self.poll_interval = poll_interval
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        thread_id: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        query = {"api-version": self.api_version, **(params or {})}
        url = f"{self.endpoint}{path}"
        self._logger.debug("AgentsClient.%s: %s %s params=%s", operation, method, url, query)
        try:
            r = await self._client.request(method, url, headers=self._headers(), params=query, json=json)
            if r.status_code == 404 and thread_id is not None:
                raise InvalidThread(thread_id, details=r.text)
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteUnavailable(
                f"Agent platform {operation} failed: {e.response.status_code}",
                status_code=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise RemoteUnavailable(f"Agent platform {operation} failed: {e}") from e
        try:
            return r.json()
        except ValueError as e:
            raise RemoteUnavailable(
                f"Agent platform {operation} returned a non-JSON body",
                status_code=r.status_code,
                details=r.text,
            ) from e

    def _parse(self, model: Type[ModelT], data: Any, *, operation: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise RemoteUnavailable(
                f"Agent platform {operation} returned an unexpected payload",
                details=e.errors(include_url=False),
            ) from e

    async def get_agent(self, agent_id: str) -> AgentDescriptor:
        data = await self._request("GET", f"/assistants/{agent_id}", operation="get_agent")
        agent = self._parse(AgentDescriptor, data, operation="get_agent")
        self._logger.debug("AgentsClient.get_agent: resolved id=%s name=%s", agent.id, agent.name)
        return agent

    async def create_thread(self) -> ThreadHandle:
        data = await self._request("POST", "/threads", operation="create_thread", json={})
        thread = self._parse(ThreadHandle, data, operation="create_thread")
        self._logger.debug("AgentsClient.create_thread: created id=%s", thread.id)
        return thread

    async def create_message(self, thread_id: str, role: str, content: str) -> ThreadMessage:
        data = await self._request(
            "POST",
            f"/threads/{thread_id}/messages",
            operation="create_message",
            thread_id=thread_id,
            json={"role": role, "content": content},
        )
        return self._parse(ThreadMessage, data, operation="create_message")

    async def list_messages(self, thread_id: str, *, order: str = "desc", limit: int = 20) -> MessagePage:
        data = await self._request(
            "GET",
            f"/threads/{thread_id}/messages",
            operation="list_messages",
            thread_id=thread_id,
            params={"order": order, "limit": limit},
        )
        page = self._parse(MessagePage, data, operation="list_messages")
        self._logger.debug("AgentsClient.list_messages: got %d messages for thread=%s", len(page.data), thread_id)
        return page

    async def create_run(self, thread_id: str, agent_id: str) -> AgentRunRecord:
        data = await self._request(
            "POST",
            f"/threads/{thread_id}/runs",
            operation="create_run",
            thread_id=thread_id,
            json={"assistant_id": agent_id},
        )
        run = self._parse(AgentRunRecord, data, operation="create_run")
        self._logger.debug("AgentsClient.create_run: run=%s status=%s", run.id, run.status)
        return run

    async def get_run(self, thread_id: str, run_id: str) -> AgentRunRecord:
        data = await self._request(
            "GET",
            f"/threads/{thread_id}/runs/{run_id}",
            operation="get_run",
            thread_id=thread_id,
        )
        return self._parse(AgentRunRecord, data, operation="get_run")

    async def poll_run_until_done(self, thread_id: str, run: AgentRunRecord) -> AgentRunRecord:
        """Poll a run every ``poll_interval`` seconds until its status is terminal."""
        while not run.is_terminal:
            await asyncio.sleep(self.poll_interval)
            run = await self.get_run(thread_id, run.id)
            self._logger.debug("AgentsClient.poll_run_until_done: run=%s status=%s", run.id, run.status)
        return run
