from __future__ import annotations

import copy
from typing import Any, Dict, List, Mapping

from react_loop.schemas.messages import (
    ROLE_ASSISTANT,
    ROLE_SYSTEM,
    ROLE_TOOL,
    ROLE_USER,
    Message,
)

EMPTY_HISTORY = "No messages in the chat history"


class Conversation:
    """Append-only chat history seeded with a system prompt.

    Messages are never edited or removed; the only way to shrink the
    history is ``reset()``, which reseeds the system prompt.
    """

    def __init__(self, system_prompt: str) -> None:
        self.system_prompt = system_prompt
        self._messages: List[Message] = []
        self.reset()

    def reset(self) -> None:
        self._messages = []
        self.append_system(self.system_prompt)

    def append_system(self, content: str, metadata: Mapping[str, Any] | None = None) -> Message:
        return self._append(ROLE_SYSTEM, content, metadata)

    def append_user(self, content: str, metadata: Mapping[str, Any] | None = None) -> Message:
        return self._append(ROLE_USER, content, metadata)

    def append_assistant(self, content: str, metadata: Mapping[str, Any] | None = None) -> Message:
        return self._append(ROLE_ASSISTANT, content, metadata)

    def append_tool(
        self,
        content: str,
        metadata: Mapping[str, Any] | None = None,
        name: str | None = None,
        tool_call_id: str | None = None,
    ) -> Message:
        merged: Dict[str, Any] = dict(metadata or {})
        if name is not None:
            merged["name"] = name
        if tool_call_id is not None:
            merged["tool_call_id"] = tool_call_id
        return self._append(ROLE_TOOL, content, merged)

    def snapshot(self) -> List[Message]:
        return [copy.deepcopy(m) for m in self._messages]

    def last_content(self) -> str:
        if not self._messages:
            return EMPTY_HISTORY
        return self._messages[-1].content

    def __len__(self) -> int:
        return len(self._messages)

    def _append(self, role: str, content: str, metadata: Mapping[str, Any] | None) -> Message:
        message = Message(role=role, content=content, metadata=copy.deepcopy(dict(metadata or {})))
        self._messages.append(message)
        return message
