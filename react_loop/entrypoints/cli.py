from __future__ import annotations

import argparse
import sys

from react_loop.schemas.messages import LoopOutcome
from react_loop.telemetry.logging import setup_logging
from react_loop.tools.registry import ToolRegistry
from react_loop.tools.weather import WeatherTool
from react_loop.utils.llm_clients import LLMClient, OpenAIChatClient
from react_loop.utils.settings import AppConfig, load_config
from react_loop.utils.setup import setup
from react_loop.workflows.agent_loop import AgentLoop

DEFAULT_TASK = (
    "What is the weather like in Shenzhen right now? Tell me the current "
    "temperature and conditions, and whether it is a good time to go out."
)


def build_tools(config: AppConfig) -> ToolRegistry:
    return ToolRegistry([WeatherTool(timeout_s=config.tools.weather.timeout_s)])


def build_llm_client(config: AppConfig) -> LLMClient:
    if config.llm.provider != "openai":
        raise SystemExit(f"Unsupported LLM provider: {config.llm.provider}")
    api_key = config.llm.api_key()
    if not api_key:
        raise SystemExit(f"Set {config.llm.api_key_env} (or dash_scope_api_key in config.yml)")
    return OpenAIChatClient(
        api_key=api_key,
        base_url=config.llm.base_url,
        timeout_s=config.llm.timeout_s,
        temperature=config.llm.temperature,
        max_retries=config.llm.max_retries,
    )


def build_loop(config: AppConfig, llm_client: LLMClient | None = None) -> AgentLoop:
    return AgentLoop(
        llm_client=llm_client or build_llm_client(config),
        tools=build_tools(config),
        model=config.llm.model,
        max_iterations=config.workflow.max_iterations,
        append_unparsed_replies=config.workflow.append_unparsed_replies,
        on_model_error=config.workflow.on_model_error,
        pass_tool_catalogue=config.workflow.pass_tool_catalogue,
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Answer a question with a ReAct tool-using loop.")
    parser.add_argument("task", nargs="?", default=DEFAULT_TASK, help="Question for the agent.")
    parser.add_argument("--env", default="base", help="Config environment (base, dev, ...).")
    parser.add_argument("--config-dir", default="configs", help="Directory holding <env>.yaml files.")
    parser.add_argument("--max-iterations", type=int, default=None, help="Override workflow.max_iterations.")
    args = parser.parse_args(argv)
    if args.max_iterations is not None and args.max_iterations < 1:
        parser.error("--max-iterations must be at least 1")

    setup()
    config = load_config(args.env, config_dir=args.config_dir)
    if args.max_iterations is not None:
        config.workflow.max_iterations = args.max_iterations
    setup_logging(config.logging.level)

    result = build_loop(config).run(args.task)
    if result.outcome is LoopOutcome.FINAL_ANSWER:
        print(f"\n[final answer after {result.iterations} iteration(s)]\n{result.answer}")
        return 0
    print(f"\n[{result.outcome.value} after {result.iterations} iteration(s)]\n{result.detail}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
