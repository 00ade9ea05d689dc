"""Click CLI entry point.

Usage:
    hr-copilot ask "How many vacation days do I get?" --department Engineering
    hr-copilot ingest hr-policies handbook.md leave_policy.md
    hr-copilot serve --port 8000
"""

from __future__ import annotations

import click

from hr_copilot.app import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: $LOG_LEVEL or INFO)")
def cli(log_level: str | None) -> None:
    """HR Copilot CLI."""
    configure_logging(log_level)


@cli.command()
@click.argument("query")
@click.option("--department", default=None, help="Employee department")
@click.option("--role", default=None, help="Employee role")
@click.option("--tenure", default=None, help="Employee tenure, e.g. '3 years'")
def ask(query: str, department: str | None, role: str | None, tenure: str | None) -> None:
    """Ask the copilot a single question."""
    from hr_copilot.graph import HRCopilot

    context = {k: v for k, v in {"department": department, "role": role, "tenure": tenure}.items() if v}
    state = HRCopilot.from_env().ask(query, employee_context=context or None)

    click.echo(f"Category: {state['category']}")
    for snippet in state["retrieved"]:
        click.echo(f"  [{snippet['source_id']}] {snippet['text'][:80]}")
    click.echo("")
    click.echo(state["final_response"])


@cli.command()
@click.argument("index_name")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
def ingest(index_name: str, files: tuple[str, ...]) -> None:
    """Split text files and upsert them into a Pinecone index."""
    from hr_copilot.db import index_documents

    count = index_documents(index_name, files)
    click.echo(f"Indexed {count} chunks into '{index_name}'.")


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, help="Bind port")
def serve(host: str, port: int) -> None:
    """Run the HTTP trigger with uvicorn."""
    import uvicorn

    uvicorn.run("hr_copilot.app:app", host=host, port=port)


if __name__ == "__main__":
    cli()
