from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel, ValidationError

from react_loop.errors import (
    DuplicateTool,
    InvalidToolInput,
    InvalidToolName,
    LoopCancelled,
    ToolError,
    ToolExecutionFailure,
    UnknownTool,
)
from react_loop.tools.base import Tool, ToolResult
from react_loop.workflows.cancellation import CancellationToken

logger = logging.getLogger(__name__)

# Same alphabet as OpenAI function names; keeps the "one of [a, b]" prompt list parseable.
TOOL_NAME_RE = re.compile(r"[A-Za-z0-9_-]+")


class ToolRegistry:
    """Name-keyed set of tools the agent may call, in registration order."""

    def __init__(self, tools: Iterable[Tool] | None = None) -> None:
        self._tools: Dict[str, Tool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        if not TOOL_NAME_RE.fullmatch(tool.name or ""):
            raise InvalidToolName(tool.name)
        if tool.name in self._tools:
            raise DuplicateTool(tool.name)
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def get(self, name: str) -> Tool:
        if name not in self._tools:
            raise UnknownTool(name, self.names())
        return self._tools[name]

    def all(self) -> List[Tool]:
        return list(self._tools.values())

    def names(self) -> List[str]:
        return list(self._tools.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def parse_input(self, name: str, raw_input: str) -> BaseModel:
        """Validate raw ``Action Input`` text (a JSON object) against the tool schema."""
        tool = self.get(name)
        try:
            payload = json.loads(raw_input)
        except json.JSONDecodeError as exc:
            raise InvalidToolInput(name, f"input is not valid JSON ({exc})") from exc
        if not isinstance(payload, dict):
            raise InvalidToolInput(name, "input must be a JSON object")
        try:
            return tool.parameters.model_validate(payload)
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            )
            raise InvalidToolInput(name, errors) from exc

    def invoke(
        self,
        name: str,
        raw_input: str,
        cancel_token: CancellationToken | None = None,
    ) -> ToolResult:
        """Look up, validate and run a tool. Failures come back as data, not exceptions."""
        try:
            tool = self.get(name)
            params = self.parse_input(name, raw_input)
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            try:
                output = tool.run(params)
            except (ToolError, LoopCancelled):
                raise
            except Exception as exc:  # tool bodies may raise anything; the model sees it
                logger.warning("Tool %s raised %s", name, exc, exc_info=True)
                raise ToolExecutionFailure(name, str(exc) or type(exc).__name__) from exc
        except ToolError as exc:
            logger.info("Tool call %s rejected: %s", name, exc)
            return ToolResult(output=str(exc), error=exc)
        return ToolResult(output=output)

    def catalogue(self) -> List[Dict[str, Any]]:
        """OpenAI-style function descriptions for every registered tool."""
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.parameter_schema(),
                },
            }
            for tool in self._tools.values()
        ]
