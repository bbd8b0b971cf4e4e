from __future__ import annotations

import re
from typing import List

from react_loop.tools.registry import ToolRegistry

SYSTEM_PROMPT = (
    "You are a helpful AI assistant. When asked about weather or location-based "
    "information, always use the available tools to gather accurate data before "
    "answering. Never make up weather information."
)

REACT_TEMPLATE = """TOOLS:
------

You have access to the following tools:

{tools}

IMPORTANT: If the "Action" is a tool, then don't give the final answer.

To use a tool, please use the following format:

Thought: Do I need to use a tool? Yes
Action: the action to take, should be one of [{tool_names}]
Action Input: the input to the action, as a JSON object

Then wait for Human response to you the result of action using Observation.
... (this Thought/Action/Action Input/Observation can repeat N times)
When you have a response to say to the Human, or if you do not need to use a tool, you MUST use the format:

Thought: Do I need to use a tool? No
Final Answer: [your response here]

Begin!

New input: {task}
"""

_ACTION_NAMES_RE = re.compile(r"Action: the action to take, should be one of \[(.*?)\]")


def render_tool_catalogue(registry: ToolRegistry) -> str:
    entries = [
        f"{tool.name}: {tool.description}\nparameters:\n{tool.parameter_schema_text()}"
        for tool in registry.all()
    ]
    return "\n\n".join(entries) if entries else "(no tools available)"


def render_task_prompt(registry: ToolRegistry, task: str) -> str:
    return REACT_TEMPLATE.format(
        tools=render_tool_catalogue(registry),
        tool_names=", ".join(registry.names()),
        task=task,
    )


def parse_action_names(prompt: str) -> List[str]:
    """Recover the permitted action names from a rendered task prompt."""
    match = _ACTION_NAMES_RE.search(prompt)
    if not match or not match.group(1).strip():
        return []
    return [name.strip() for name in match.group(1).split(",")]
