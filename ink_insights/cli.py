"""
Command-line runner for the weekly insight pipeline.

USAGE:
    ink-insights weekly entries.json
    ink-insights weekly entries.json --now 2026-10-19T09:00:00+00:00
    ink-insights weekly entries.json --dry-run      # print the prompt, no API call
"""

from __future__ import annotations

import datetime
import json
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from ink_insights.core.config import get_insight_config
from ink_insights.insights.ai_providers.openai import OpenAIInsightClient
from ink_insights.insights.errors import ConfigError, NetworkError, ParseError, RateLimitError
from ink_insights.insights.prompt_builder import build_messages
from ink_insights.insights.service import generate_weekly_insight, prepare_insight_input
from ink_insights.journals.schemas import JournalEntryBase

logger = logging.getLogger(__name__)


def load_entries(path: Path) -> list[JournalEntryBase]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise click.ClickException(f"{path} is not UTF-8 text: {e}")
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}")
    if not isinstance(raw, list):
        raise click.ClickException(f"{path} must contain a JSON array of entries")
    try:
        return [JournalEntryBase.model_validate(item) for item in raw]
    except ValidationError as e:
        raise click.ClickException(f"Invalid journal entry in {path}: {e}")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def main(verbose: bool):
    """Ink weekly journaling insights."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("entries_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--now",
    "now_value",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S%z"]),
    default=None,
    help="End of the week (default: current UTC time)",
)
@click.option("--dry-run", is_flag=True, help="Print the prompt instead of calling OpenAI")
def weekly(entries_file: Path, now_value: datetime.datetime | None, dry_run: bool):
    """Generate the weekly insight for the entries in ENTRIES_FILE."""
    entries = load_entries(entries_file)
    now = now_value or datetime.datetime.now(datetime.timezone.utc)

    try:
        config = get_insight_config()
    except ConfigError as e:
        raise click.ClickException(str(e))

    if dry_run:
        _, insight_input = prepare_insight_input(entries, now)
        for message in build_messages(insight_input, config):
            click.echo(f"[{message['role']}]\n{message['content']}\n")
        return

    client = OpenAIInsightClient(config)
    try:
        report = generate_weekly_insight(entries, client, config.api_key, now=now)
    except ConfigError:
        raise click.ClickException("OPENAI_API_KEY is not set.")
    except RateLimitError:
        raise click.ClickException("Insights are busy right now, try again shortly.")
    except NetworkError:
        raise click.ClickException("Could not reach the insights service. Check your connection.")
    except ParseError as e:
        logger.debug(f"Unparseable model output ({e.parse_error}): {e.raw_text!r}")
        raise click.ClickException("Could not generate insights this time.")
    except Exception as e:
        logger.error(f"Weekly insight generation failed: {e}")
        raise click.ClickException("Could not generate insights this time.")

    click.echo(report.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
