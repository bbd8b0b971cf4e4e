from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Sequence

import httpx
import openai
from openai import OpenAI

from react_loop.errors import ModelCallFailure
from react_loop.schemas.messages import ROLE_ASSISTANT, Message

logger = logging.getLogger(__name__)


class LLMClient(ABC):
    """Lightweight interface so the loop can swap between real and stub models."""

    @abstractmethod
    def complete(
        self,
        messages: Sequence[Message],
        model: str,
        tools: List[Dict[str, Any]] | None = None,
    ) -> Message:
        """Return the model's reply to the ordered messages.

        Raises ModelCallFailure when no reply could be obtained.
        """


class OpenAIChatClient(LLMClient):
    """Chat completions against any OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        timeout_s: float = 60.0,
        temperature: float | None = None,
        max_retries: int = 2,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.temperature = temperature
        self._client = OpenAI(
            api_key=api_key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=max_retries,
            http_client=http_client,
        )

    def complete(
        self,
        messages: Sequence[Message],
        model: str,
        tools: List[Dict[str, Any]] | None = None,
    ) -> Message:
        request: Dict[str, Any] = {
            "model": model,
            "messages": [m.to_openai() for m in messages],
        }
        if self.temperature is not None:
            request["temperature"] = self.temperature
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"

        try:
            response = self._client.chat.completions.create(**request)
        except openai.OpenAIError as exc:
            raise ModelCallFailure(f"{type(exc).__name__}: {exc}") from exc

        if not response.choices:
            raise ModelCallFailure("completion returned no choices")
        reply = response.choices[0].message

        metadata: Dict[str, Any] = {}
        if getattr(reply, "function_call", None) is not None:
            metadata["function_call"] = reply.function_call.model_dump()
        if reply.tool_calls:
            metadata["tool_calls"] = [call.model_dump() for call in reply.tool_calls]
        return Message(role=ROLE_ASSISTANT, content=reply.content or "", metadata=metadata)


class ScriptedLLMClient(LLMClient):
    """Replays canned replies in order; used for tests and offline runs.

    Once the script runs out the last reply repeats. Entries that are
    exceptions are raised instead of returned.
    """

    def __init__(self, replies: Iterable[str | Exception]) -> None:
        self.replies = list(replies)
        if not self.replies:
            raise ValueError("ScriptedLLMClient needs at least one reply")
        self.calls: List[List[Message]] = []
        self.tool_catalogues: List[List[Dict[str, Any]] | None] = []

    def complete(
        self,
        messages: Sequence[Message],
        model: str,
        tools: List[Dict[str, Any]] | None = None,
    ) -> Message:
        idx = min(len(self.calls), len(self.replies) - 1)
        self.calls.append(list(messages))
        self.tool_catalogues.append(tools)
        reply = self.replies[idx]
        if isinstance(reply, Exception):
            raise reply
        logger.debug("Scripted reply %d for model %s", idx, model)
        return Message(role=ROLE_ASSISTANT, content=reply)
