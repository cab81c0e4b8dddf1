"""
Command-line interface for the content fragment broken-links audit.

Provides a CLI for analyzing exported broken content fragment paths.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .collector import CollectorError, FileCollector, load_content_listing
from .config import AuditConfig, AuditContext, ConfigError
from .handler import AuditError, run_audit

console = Console()

TYPE_STYLES = {
    "PUBLISH": "green",
    "LOCALE": "cyan",
    "SIMILAR": "yellow",
    "NOT_FOUND": "red",
}


@click.command()
@click.option(
    "--broken-paths",
    "-b",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to the broken paths export (CSV, Excel or JSON).",
)
@click.option(
    "--content-listing",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Optional content listing (path, status) used to seed the path index.",
)
@click.option(
    "--site-id",
    type=str,
    default="local",
    help="Site identifier recorded in the audit result.",
)
@click.option(
    "--base-url",
    type=str,
    default="",
    help="Site base URL recorded in the audit result.",
)
@click.option(
    "--author-url",
    type=str,
    envvar="AEM_AUTHOR_URL",
    help="AEM Author base URL. Can also be set via AEM_AUTHOR_URL env var.",
)
@click.option(
    "--author-token",
    type=str,
    envvar="AEM_AUTHOR_TOKEN",
    help="AEM Author bearer token. Can also be set via AEM_AUTHOR_TOKEN env var.",
)
@click.option(
    "--max-distance",
    type=int,
    default=None,
    help="Maximum edit distance for similar path matches (default: 1).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    help="Write the suggestions as JSON to this file.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output.",
)
def main(
    broken_paths: Path,
    content_listing: Optional[Path],
    site_id: str,
    base_url: str,
    author_url: Optional[str],
    author_token: Optional[str],
    max_distance: Optional[int],
    output: Optional[Path],
    verbose: bool,
) -> None:
    """
    Content Fragment Broken Links - Suggest fixes for broken DAM references.

    Reads broken content fragment paths from an export, runs them through
    the repair rules and prints one suggestion per path. Without AEM Author
    credentials the analysis uses the content listing only.

    Examples:

        cf-broken-links -b broken.csv -c listing.csv

        cf-broken-links -b broken.xlsx --author-url https://author.example.com -o out.json
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    console.print(Panel.fit(
        "[bold blue]Content Fragment Broken Links[/bold blue]\n"
        "Suggesting fixes for broken content fragment paths",
        border_style="blue",
    ))

    try:
        config = AuditConfig.from_env(
            aem_author_url=author_url,
            aem_author_token=author_token,
            max_levenshtein_distance=max_distance,
            broken_paths_file=broken_paths,
        )
        context = AuditContext(site_id=site_id, base_url=base_url, config=config)

        listing = None
        if content_listing:
            with console.status("[bold green]Loading content listing..."):
                listing = load_content_listing(content_listing)
            if verbose:
                console.print(f"  Loaded {len(listing)} content paths from: {content_listing}")

        console.print("\n[bold]Analyzing broken paths...[/bold]")
        try:
            result = asyncio.run(
                run_audit(context, FileCollector.create_from(context), listing)
            )
        except AuditError as e:
            error = (context.audit_result or {}).get("error")
            console.print(f"[red]Audit error:[/red] {e}" + (f" ({error})" if error else ""))
            sys.exit(1)

        suggestions = result["audit_result"]["suggestions"]
        _display_suggestions(suggestions)

        if output:
            output.write_text(json.dumps(result, indent=2), encoding="utf-8")
            console.print(f"\n[bold green]Success![/bold green] Suggestions saved to: {output}")

    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)
    except CollectorError as e:
        console.print(f"[red]Loading error:[/red] {e}")
        sys.exit(1)


def _display_suggestions(suggestions: list[dict]) -> None:
    """Display the suggestions table."""
    table = Table(title="Suggestions", show_header=True)
    table.add_column("Broken Path", style="white")
    table.add_column("Type")
    table.add_column("Suggested Path", style="green")
    table.add_column("Reason", style="dim")

    for suggestion in suggestions:
        style = TYPE_STYLES.get(suggestion["type"], "white")
        table.add_row(
            suggestion["requested_path"],
            f"[{style}]{suggestion['type']}[/{style}]",
            suggestion["suggested_path"] or "-",
            suggestion["reason"],
        )

    console.print(table)

    fixable = sum(1 for suggestion in suggestions if suggestion["type"] != "NOT_FOUND")
    console.print(f"\n[cyan]Fixable paths:[/cyan] {fixable} of {len(suggestions)}")


def run_cli() -> None:
    """Entry point for the CLI."""
    main()


if __name__ == "__main__":
    run_cli()
