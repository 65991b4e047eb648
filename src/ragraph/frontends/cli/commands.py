"""Command definitions for the ragraph CLI."""

from __future__ import annotations

import asyncio
from typing import Any

import rich_click as click

from ragraph.core.context import Context
from ragraph.core.errors import StreamError
from ragraph.core.graph import Graph, Message, StateItem
from ragraph.core.logging_config import configure_logging
from ragraph.frontends.cli.graphs import build_agent_graph, build_demo_graph
from ragraph.frontends.cli.output import error_exit, output_json, print_trace, trace_to_dict

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
click.rich_click.MAX_WIDTH = 100


def _report(
    trace: list[StateItem[Any]], error: StreamError | None, json_output: bool, full: bool
) -> None:
    """Print a trace and exit non-zero when the stream failed."""
    if json_output:
        output_json(trace_to_dict(trace, str(error) if error else None))
    else:
        print_trace(trace, full=full)
    if error is not None:
        error_exit(str(error))


async def _stream(
    graph: Graph[Any], initial: Any, ctx: Context
) -> tuple[list[StateItem[Any]], StreamError | None]:
    try:
        return await graph.stream(initial, ctx), None
    except StreamError as e:
        return e.trace, e


@click.group()
@click.version_option(package_name="ragraph")
@click.option(
    "--log-level",
    default=None,
    help="Log level (DEBUG, INFO, WARNING, ERROR). Defaults to RAGRAPH_LOG_LEVEL.",
)
def cli(log_level: str | None) -> None:
    """ragraph - state graph executor for LLM workflows.

    **Commands:**

        ragraph ask      Ask a question through a chat agent graph

        ragraph demo     Run the offline conditional routing demo
    """
    configure_logging(level=log_level)


@cli.command()
@click.argument("question")
@click.option("--model", "-m", default=None, help="Model name (default: RAGRAPH_MODEL)")
@click.option("--system", "-s", "system_prompt", default=None, help="System prompt")
@click.option("--timeout", "-t", type=float, default=None, help="Overall timeout in seconds")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
@click.option("--full", "-F", is_flag=True, help="Show full states without truncation")
def ask(
    question: str,
    model: str | None,
    system_prompt: str | None,
    timeout: float | None,
    json_output: bool,
    full: bool,
) -> None:
    """Ask a question through the agent -> END message graph.

    Reads OPENAI_API_KEY, OPENAI_BASE_URL and RAGRAPH_MODEL from the
    environment or a .env file.

    **Examples:**

        ragraph ask "What is 1 + 1?"

        ragraph ask "Summarise RAG" --model gpt-4o-mini --json
    """
    from dotenv import load_dotenv

    from ragraph.core.llm import ChatClient, ChatClientConfig

    load_dotenv()
    try:
        config = ChatClientConfig.from_env(model=model)
    except ValueError as e:
        error_exit(str(e))

    messages = [Message.user(question)]
    if system_prompt:
        messages.insert(0, Message.system(system_prompt))

    ctx = Context()
    if timeout is not None:
        ctx = ctx.with_timeout(timeout)

    async def run() -> tuple[list[StateItem[Any]], StreamError | None]:
        async with ChatClient(config) as client:
            return await _stream(build_agent_graph(client), messages, ctx)

    trace, error = asyncio.run(run())
    _report(trace, error, json_output, full)


@cli.command()
@click.argument("text", default="y")
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
def demo(text: str, json_output: bool) -> None:
    """Run the classify -> yes|no -> END demo graph on TEXT.

    Text starting with "y" is routed to the yes node, anything else to no.

    **Examples:**

        ragraph demo yes

        ragraph demo nope --json
    """
    trace, error = asyncio.run(_stream(build_demo_graph(), text, Context()))
    _report(trace, error, json_output, full=True)
