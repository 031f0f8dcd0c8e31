"""Main entry point for the aggbench command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from aggbench.core.logging import configure_logging

from .formatters import create_formatter
from .stats import register as register_stats_commands
from .trades import register as register_trades_commands

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def create_app() -> typer.Typer:
    """Create a Typer application instance for aggbench."""

    app = typer.Typer(add_completion=False, help="DEX aggregator quote benchmark tooling")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        log_level: str = typer.Option(
            "WARNING",
            "--log-level",
            help="Minimum level of the JSON log lines written to stderr.",
            show_default=True,
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        level = log_level.strip().upper()
        if level not in LOG_LEVELS:
            raise typer.BadParameter(f"Unsupported log level '{log_level}'.", param_hint="--log-level")

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "log_level": level,
                "no_color": no_color,
            }
        )
        configure_logging(level)

    register_trades_commands(app)
    register_stats_commands(app)
    return app


app = create_app()
