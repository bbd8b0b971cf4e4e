from __future__ import annotations


class ReactLoopError(Exception):
    """Base class for every error raised inside the agent loop."""


class ConfigError(ReactLoopError):
    """Configuration files are missing or invalid."""


class ToolError(ReactLoopError):
    """Recoverable tool failure; its message is fed back as an observation."""


class DuplicateTool(ToolError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' is already registered")
        self.name = name


class InvalidToolName(ToolError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Tool name {name!r} must contain only letters, digits, '_' or '-'"
        )
        self.name = name


class UnknownTool(ToolError):
    def __init__(self, name: str, available: list[str] | None = None) -> None:
        names = ", ".join(available or [])
        super().__init__(f"Unknown tool '{name}'. Available tools: [{names}]")
        self.name = name


class InvalidToolInput(ToolError):
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Error parsing {name} parameters: {reason}")
        self.name = name


class ToolExecutionFailure(ToolError):
    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Tool '{name}' failed: {reason}")
        self.name = name


class ModelCallFailure(ReactLoopError):
    """The completion client could not produce a reply."""


class LoopCancelled(ReactLoopError):
    """Raised at a model or tool boundary once cancellation was requested."""
