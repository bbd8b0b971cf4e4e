from __future__ import annotations

import logging
from typing import Literal

from react_loop.errors import LoopCancelled, ModelCallFailure
from react_loop.memory.transcript import Conversation
from react_loop.schemas.messages import (
    ROLE_ASSISTANT,
    DirectiveKind,
    LoopOutcome,
    LoopResult,
    Message,
)
from react_loop.tools.registry import ToolRegistry
from react_loop.utils.llm_clients import LLMClient
from react_loop.utils.parsing import parse_directive
from react_loop.workflows.cancellation import CancellationToken
from react_loop.workflows.prompt import SYSTEM_PROMPT, render_task_prompt

logger = logging.getLogger(__name__)

EXHAUSTED_DETAIL = "Exceeded maximum number of reasoning loops. Stopping execution."
OBSERVATION_PREFIX = "Observation: "


class AgentLoop:
    """Sequential ReAct controller: query the model, run the named tool, repeat.

    Every iteration finishes its model call, parse, tool call and history
    update before the next one starts. The loop always returns a
    ``LoopResult``; model and tool failures never escape it.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        tools: ToolRegistry,
        model: str,
        max_iterations: int = 5,
        conversation: Conversation | None = None,
        append_unparsed_replies: bool = False,
        on_model_error: Literal["degrade", "abort"] = "degrade",
        pass_tool_catalogue: bool = False,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if on_model_error not in ("degrade", "abort"):
            raise ValueError(f"unknown model error policy: {on_model_error!r}")
        self.llm_client = llm_client
        self.tools = tools
        self.model = model
        self.max_iterations = max_iterations
        self.conversation = conversation or Conversation(SYSTEM_PROMPT)
        self.append_unparsed_replies = append_unparsed_replies
        self.on_model_error = on_model_error
        self.pass_tool_catalogue = pass_tool_catalogue

    def run(self, task: str, cancel_token: CancellationToken | None = None) -> LoopResult:
        self.conversation.reset()
        prompt = render_task_prompt(self.tools, task)
        logger.debug("Task prompt:\n%s", prompt)
        self.conversation.append_user(prompt)

        iteration = 1
        try:
            while True:
                logger.info("---- Iteration %d/%d ----", iteration, self.max_iterations)
                self._log_history()

                try:
                    reply = self._query_model(cancel_token)
                except ModelCallFailure as exc:
                    return LoopResult(
                        outcome=LoopOutcome.ABORTED,
                        iterations=iteration,
                        detail=str(exc),
                    )
                logger.info("Model reply:\n%s", reply.content)

                directive = parse_directive(reply.content)
                if directive.kind is DirectiveKind.FINAL_ANSWER:
                    logger.info("Final answer: %s", directive.text)
                    return LoopResult(
                        outcome=LoopOutcome.FINAL_ANSWER,
                        iterations=iteration,
                        answer=directive.text,
                    )

                if iteration >= self.max_iterations:
                    logger.warning(EXHAUSTED_DETAIL)
                    return LoopResult(
                        outcome=LoopOutcome.EXHAUSTED,
                        iterations=iteration,
                        detail=EXHAUSTED_DETAIL,
                    )

                if directive.kind is DirectiveKind.TOOL_CALL:
                    self.conversation.append_assistant(reply.content, reply.metadata)
                    result = self.tools.invoke(
                        directive.action, directive.action_input, cancel_token=cancel_token
                    )
                    logger.info(
                        "Action: %s | Action Input: %s | Result: %s",
                        directive.action,
                        directive.action_input,
                        result.output,
                    )
                    self.conversation.append_user(self._observation_turn(reply.content, result.output))
                elif self.append_unparsed_replies:
                    self.conversation.append_assistant(reply.content, reply.metadata)
                else:
                    logger.info("No directive in reply; history unchanged")

                iteration += 1
        except LoopCancelled as exc:
            logger.warning("Loop cancelled at iteration %d: %s", iteration, exc)
            return LoopResult(
                outcome=LoopOutcome.CANCELLED,
                iterations=iteration,
                detail=str(exc),
            )

    def _query_model(self, cancel_token: CancellationToken | None) -> Message:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        catalogue = self.tools.catalogue() if self.pass_tool_catalogue and len(self.tools) else None
        try:
            return self.llm_client.complete(self.conversation.snapshot(), self.model, tools=catalogue)
        except ModelCallFailure as exc:
            if self.on_model_error == "abort":
                logger.error("Model call failed, aborting: %s", exc)
                raise
            logger.error("Model call failed, continuing with an empty reply: %s", exc)
            return Message(role=ROLE_ASSISTANT, content="")

    @staticmethod
    def _observation_turn(reply_text: str, result: str) -> str:
        # Observations re-enter as a user turn that repeats the model's own text.
        separator = "" if not reply_text or reply_text.endswith("\n") else "\n"
        return f"{reply_text}{separator}{OBSERVATION_PREFIX}{result}"

    def _log_history(self) -> None:
        messages = self.conversation.snapshot()
        logger.debug("Number of messages: %d", len(messages))
        for idx, message in enumerate(messages):
            logger.debug("Message %d: role=%s, content length=%d", idx, message.role, len(message.content))
