"""Command-line entry point: validate the options, then fetch and print the article."""

from __future__ import annotations

import logging
from typing import Optional

import click
import typer
from typer.core import TyperCommand

from infoq_clean_pdf import __version__
from infoq_clean_pdf.config import ENV_OUTPUT_DIR, ENV_USER_AGENT
from infoq_clean_pdf.fetcher import ChromiumBrowser, UsageError, process, validate

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="infoq-clean-pdf",
    help="infoq_xie_clean_pdf: generate clean pdf from xie.infoq.cn",
    add_completion=False,
)


class FetchCommand(TyperCommand):
    """Bad or unknown options exit 1 like every other usage error, not click's 2."""

    def parse_args(self, ctx: click.Context, args: list) -> list:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.command(cls=FetchCommand)
def fetch(
    source: Optional[str] = typer.Option(
        None, "--source", "-s", help="Download target, url."
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output_dir",
        "-o",
        envvar=ENV_OUTPUT_DIR,
        help='Output directory, default is "~/Downloads/" on macOS.',
    ),
    user_agent: Optional[str] = typer.Option(
        None,
        "--user_agent",
        "-u",
        envvar=ENV_USER_AGENT,
        help="Custom user agent, to avoid anti-crawler. There is a default one already.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each removed selector."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """Fetch one article, strip header/footer/comments and save it as "<title>.pdf"."""
    if verbose:
        logging.getLogger(__package__).setLevel(logging.DEBUG)

    logger.info("Process starting ...")
    try:
        config = validate(source, output_dir, user_agent)
    except UsageError as exc:
        typer.echo(str(exc))
        raise typer.Exit(code=1)

    try:
        process(config, launch=ChromiumBrowser)
    except Exception:
        logger.exception(f"Process failed for {config.source}")
        raise typer.Exit(code=1)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    app()
