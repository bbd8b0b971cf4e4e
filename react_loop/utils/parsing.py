from __future__ import annotations

import re

from react_loop.schemas.messages import Directive

# Markers are literal and case-sensitive; captures stop at the end of the line.
FINAL_ANSWER_RE = re.compile(r"Final Answer:[ \t]*(.*)")
ACTION_RE = re.compile(r"Action:[ \t]*(.*)")
ACTION_INPUT_RE = re.compile(r"Action Input:[ \t]*(.*)")


def parse_directive(text: str | None) -> Directive:
    """Classify one assistant reply as a final answer, a tool call, or neither.

    A ``Final Answer:`` marker wins over any action markers in the same reply.
    When the marker ends its line, everything after it is the answer.
    Only the first occurrence of each marker is considered.
    """
    if not text:
        return Directive.none()

    final = FINAL_ANSWER_RE.search(text)
    if final:
        answer = final.group(1).strip()
        if not answer:
            answer = text[final.end():].strip()
        return Directive.final_answer(answer)

    action = ACTION_RE.search(text)
    action_input = ACTION_INPUT_RE.search(text)
    if action and action_input:
        name = action.group(1).strip()
        raw_input = action_input.group(1).strip()
        if name and raw_input:
            return Directive.tool_call(name, raw_input)

    return Directive.none()
