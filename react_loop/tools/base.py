from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from react_loop.errors import ToolError


@dataclass
class ToolResult:
    """Outcome of one tool invocation.

    ``output`` is always safe to show the model: on failure it holds the
    error description and ``error`` keeps the exception.
    """

    output: str
    error: Optional[ToolError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Tool(ABC):
    """Protocol describing a callable capability."""

    name: str
    description: str
    parameters: Type[BaseModel]

    def __init__(self, name: str, description: str, parameters: Type[BaseModel]) -> None:
        self.name = name
        self.description = description
        self.parameters = parameters

    def parameter_schema(self) -> Dict[str, Any]:
        return self.parameters.model_json_schema()

    def parameter_schema_text(self) -> str:
        return json.dumps(self.parameter_schema(), indent=2, ensure_ascii=False)

    @abstractmethod
    def run(self, params: BaseModel) -> str:
        """Execute tool logic on validated parameters and return text for the model."""
