"""Command-line entry point for the interactive coding agent."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable, Sequence

import anthropic
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from agentcode.agent import AgentConfig, CodingAgent, default_model
from agentcode.display import Display
from agentcode.errors import ToolError
from agentcode.logging_utils import configure_logging
from agentcode.tools import build_toolset

logger = logging.getLogger(__name__)

API_KEY_ENV = "ANTHROPIC_API_KEY"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentcode",
        description="Chat with Claude about a workspace; it can read, edit, search and run commands.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose logging (show tool calls/results)",
    )
    parser.add_argument("--root", default=os.getcwd(), help="Workspace root (default: cwd)")
    parser.add_argument("--model", default=None, help="Model name (overrides AGENTCODE_MODEL)")
    parser.add_argument("--max-tokens", type=int, default=1024, help="Max tokens per response")
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Read input with input() instead of prompt_toolkit.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (overrides AGENTCODE_LOG_LEVEL).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Log file path (defaults to stderr).",
    )
    return parser


def _input_reader(prompt: str, plain: bool) -> Callable[[], str]:
    if plain:
        return lambda: input(prompt)
    session = PromptSession(prompt, history=InMemoryHistory())
    return session.prompt


def main(argv: Sequence[str] | None = None) -> None:
    """Run the interactive agent."""
    args = build_parser().parse_args(argv)

    try:
        configure_logging(args.log_level, args.log_file)
    except ValueError as e:
        raise SystemExit(f"agentcode: {e}") from None

    api_key = os.getenv(API_KEY_ENV)
    if not api_key:
        print(f"agentcode: {API_KEY_ENV} is not set", file=sys.stderr)
        raise SystemExit(1)

    try:
        registry = build_toolset(args.root)
    except ToolError as e:
        print(f"agentcode: {e}", file=sys.stderr)
        raise SystemExit(1) from None

    config = AgentConfig(
        model=args.model or default_model(),
        max_tokens=args.max_tokens,
        verbose=args.verbose,
    )
    display = Display(verbose=config.verbose)
    agent = CodingAgent(
        registry,
        config=config,
        client=anthropic.Anthropic(api_key=api_key),
        display=display,
    )
    logger.info("starting root=%s model=%s tools=%s", args.root, config.model, registry.names())

    display.banner(args.root)
    try:
        agent.run(_input_reader(display.prompt_text(), args.plain))
    except KeyboardInterrupt:
        display.goodbye()
        return
    except anthropic.APIError as e:
        logger.error("backend error: %s", e)
        display.error(f"agentcode: backend error: {e}")
        raise SystemExit(1) from None
    display.goodbye()


if __name__ == "__main__":
    main()
