from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_TOOL = "tool"

ROLES = (ROLE_SYSTEM, ROLE_USER, ROLE_ASSISTANT, ROLE_TOOL)


@dataclass(frozen=True)
class Message:
    """Single chat turn as sent to the completion endpoint."""

    role: str
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"unknown message role: {self.role!r}")
        object.__setattr__(self, "metadata", dict(self.metadata))

    def to_openai(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"role": self.role, "content": self.content}
        for key in ("name", "tool_call_id", "function_call", "tool_calls"):
            if self.metadata.get(key) is not None:
                payload[key] = self.metadata[key]
        return payload


class DirectiveKind(str, Enum):
    FINAL_ANSWER = "final_answer"
    TOOL_CALL = "tool_call"
    NONE = "none"


@dataclass(frozen=True)
class Directive:
    """Intent parsed out of one assistant reply. Never stored."""

    kind: DirectiveKind
    text: Optional[str] = None
    action: Optional[str] = None
    action_input: Optional[str] = None

    @classmethod
    def final_answer(cls, text: str) -> "Directive":
        return cls(kind=DirectiveKind.FINAL_ANSWER, text=text)

    @classmethod
    def tool_call(cls, action: str, action_input: str) -> "Directive":
        return cls(kind=DirectiveKind.TOOL_CALL, action=action, action_input=action_input)

    @classmethod
    def none(cls) -> "Directive":
        return cls(kind=DirectiveKind.NONE)


class LoopOutcome(str, Enum):
    FINAL_ANSWER = "final_answer"
    EXHAUSTED = "exhausted"
    ABORTED = "aborted"
    CANCELLED = "cancelled"


@dataclass
class LoopResult:
    outcome: LoopOutcome
    iterations: int
    answer: Optional[str] = None
    detail: str = ""

    @property
    def reached_final_answer(self) -> bool:
        return self.outcome is LoopOutcome.FINAL_ANSWER
