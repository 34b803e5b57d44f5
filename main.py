#!/usr/bin/env python3
"""
Nail Vibe Matcher - Main Entry Point

Matches free-text aesthetic prompts ("Harry Potter cutesy, Barbie glam
metallic") to pre-made nail designs, and refines or generates designs
through Replicate.

Usage:
    python main.py "barbie glam metallic"           # Match a prompt
    python main.py "matte finish, simple" --debug   # Show tag extraction
    python main.py --stats                          # Catalog statistics
"""
import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from config.settings import AppConfig, config
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from src.vibes.matcher import SELECTION_STRATEGIES
from src.vibes.service import VibeService
from src.vibes.tag_dictionary import all_known_tags, CONCEPT_MAP
from src.vibes.tag_extractor import debug_tag_extraction

console = Console()


class CustomHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter that preserves formatting and adds width."""

    def __init__(self, prog):
        super().__init__(prog, max_help_position=40, width=100)


def parse_args(argv: Optional[list[str]] = None):
    """Parse command line arguments."""

    concept_list = ", ".join(list(CONCEPT_MAP)[:12])

    epilog = f"""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
EXAMPLES
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  Matching:
    python main.py "harry potter cutesy"          Match against Supabase
    python main.py "mob wife" -f vibes.json       Match against a local export
    python main.py "barbie" --selection top_score Prefer the best-scoring design
    python main.py "clean girl" --augment-tags    Also use literal catalog tags

  Debugging:
    python main.py "dark academia matte" --debug  Show extracted tags only
    python main.py --stats                        Catalog tag statistics

  Image Generation (requires REPLICATE_API_TOKEN):
    python main.py --refine URL "add gold foil"   Refine an existing design
    python main.py --generate "pastel french"     Generate a new design

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
KNOWN CONCEPTS (first {min(12, len(CONCEPT_MAP))} of {len(CONCEPT_MAP)})
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
  {concept_list}

NOTES
  • Requires .env file with SUPABASE_URL and SUPABASE_KEY unless -f is given
  • The web API (python viewer.py) serves the same matcher over HTTP
"""

    parser = argparse.ArgumentParser(
        prog="python main.py",
        description="""
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
                            NAIL VIBE MATCHER
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
Turns an aesthetic description into catalog tags and picks the best
matching pre-made nail design.
""",
        epilog=epilog,
        formatter_class=CustomHelpFormatter,
    )

    parser.add_argument("prompt", nargs="?", default=None, help="Aesthetic prompt to match")

    # Matching options group
    match_group = parser.add_argument_group("Matching Options", "Control how designs are picked")

    match_group.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="Only show tag extraction (no catalog access)",
    )

    match_group.add_argument(
        "--selection",
        type=str,
        default=config.matching.selection,
        choices=SELECTION_STRATEGIES,
        help=f"How to pick among candidates (default: {config.matching.selection})",
    )

    match_group.add_argument(
        "--augment-tags",
        action="store_true",
        help="Add prompt words that are literal catalog tags",
    )

    match_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print each search tier as it runs",
    )

    # Catalog options group
    catalog_group = parser.add_argument_group("Catalog Options", "Where designs come from")

    catalog_group.add_argument(
        "--catalog-file",
        "-f",
        type=str,
        default=None,
        metavar="JSON",
        help="Use a local JSON export instead of Supabase",
    )

    catalog_group.add_argument(
        "--stats",
        action="store_true",
        help="Show catalog statistics and exit",
    )

    # Image generation group
    image_group = parser.add_argument_group(
        "Image Generation", "Replicate-backed refinement (requires REPLICATE_API_TOKEN)"
    )

    image_group.add_argument(
        "--refine",
        nargs=2,
        metavar=("IMAGE_URL", "PROMPT"),
        help="Refine an existing design image",
    )

    image_group.add_argument(
        "--generate",
        type=str,
        metavar="PROMPT",
        help="Generate a new design from a prompt",
    )

    return parser.parse_args(argv)


def create_catalog(catalog_file: Optional[str] = None, app_config: Optional[AppConfig] = None):
    """Open the local JSON catalog if given, otherwise Supabase."""
    app_config = app_config or config
    if catalog_file:
        from src.loaders.memory_catalog import InMemoryCatalog

        return InMemoryCatalog.from_json_file(catalog_file)

    from src.loaders.supabase_catalog import SupabaseCatalog

    return SupabaseCatalog.from_config(app_config.catalog)


def build_service(
    catalog_file: Optional[str] = None,
    selection: Optional[str] = None,
    augment_tags: Optional[bool] = None,
    background_analytics: Optional[bool] = None,
    verbose: bool = False,
    app_config: Optional[AppConfig] = None,
) -> VibeService:
    """Create a VibeService from settings plus command-line overrides."""
    app_config = app_config or config
    match_config = app_config.matching
    if selection is not None:
        match_config = replace(match_config, selection=selection)
    if augment_tags is not None:
        match_config = replace(match_config, augment_with_catalog_tags=augment_tags)

    return VibeService(
        create_catalog(catalog_file, app_config),
        match_config=match_config,
        background_analytics=(
            app_config.catalog.background_analytics
            if background_analytics is None
            else background_analytics
        ),
        verbose=verbose,
    )


def print_match(response: dict) -> int:
    """Render a find_best_match response."""
    tags = Table(show_header=False, box=None)
    tags.add_column(style="dim")
    tags.add_column()
    tags.add_row("Concept", response["matched_concept"] or "-")
    tags.add_row("Primary tags", ", ".join(response["primary_tags"]) or "-")
    tags.add_row("Modifier tags", ", ".join(response["modifier_tags"]) or "-")
    tags.add_row("Strategy", response["search_strategy"])
    console.print(tags)

    if not response["success"]:
        console.print(f"\n[bold red]✗ {response['error']}[/bold red]")
        return 1

    data = response["data"]
    entry = data["entry"]
    body = (
        f"[bold]{data['title']}[/bold]\n\n"
        f"[dim]Design:[/dim]  {entry['id']}"
        + (f" ({entry['title']})" if entry.get("title") else "")
        + f"\n[dim]Image:[/dim]   {entry['image_url']}\n"
        f"[dim]Tags:[/dim]    {', '.join(entry['tags'])}\n"
        f"[dim]Match:[/dim]   {data['match_type']} · score {data['match_score']} · "
        f"{data['primary_matches']} primary / {data['modifier_matches']} modifier"
    )
    console.print(Panel(body, title="💅 Best match", border_style="green"))
    return 0


def show_stats(catalog) -> int:
    """Print catalog statistics and dictionary coverage."""
    stats = catalog.get_stats()
    console.print("\n[bold cyan]Catalog Statistics[/bold cyan]\n")
    console.print(f"[dim]Entries:[/dim]       {stats['total_entries']}")
    console.print(f"[dim]Distinct tags:[/dim] {stats['distinct_tags']}")

    known = all_known_tags()
    table = Table(title="Most used tags")
    table.add_column("Tag", style="cyan")
    table.add_column("Designs", justify="right")
    table.add_column("In dictionary", justify="center")
    for tag, count in stats["top_tags"]:
        table.add_row(tag, str(count), "[green]✓[/green]" if tag in known else "[dim]-[/dim]")
    console.print(table)
    return 0


async def run_refine(image_url: str, prompt: str) -> int:
    """Refine a design image through Replicate."""
    from src.ai.replicate_client import ReplicateClient, ReplicateError

    try:
        async with ReplicateClient(config.replicate) as client:
            refined_url = await client.refine(image_url, prompt)
    except ReplicateError as e:
        console.print(f"[red]✗ Refinement failed ({e.status_code}): {e.message}[/red]")
        return 1

    console.print(f"\n[green]✓ Refined image:[/green] {refined_url}")
    return 0


async def run_generate(prompt: str) -> int:
    """Generate a new design through Replicate."""
    from src.ai.replicate_client import ReplicateClient, ReplicateError

    try:
        async with ReplicateClient(config.replicate) as client:
            image_url = await client.generate(prompt)
    except ReplicateError as e:
        console.print(f"[red]✗ Generation failed ({e.status_code}): {e.message}[/red]")
        return 1

    console.print(f"\n[green]✓ Generated image:[/green] {image_url}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Image commands exit after running
    if args.refine:
        return asyncio.run(run_refine(*args.refine))

    if args.generate:
        return asyncio.run(run_generate(args.generate))

    if args.debug:
        if not args.prompt:
            console.print("[red]--debug needs a prompt[/red]")
            return 2
        debug_tag_extraction(args.prompt)
        return 0

    if not args.stats and not args.prompt:
        console.print("[red]Nothing to do: pass a prompt, --stats, --refine or --generate[/red]")
        return 2

    try:
        if args.stats:
            return show_stats(create_catalog(args.catalog_file))

        service = build_service(
            catalog_file=args.catalog_file,
            selection=args.selection,
            augment_tags=args.augment_tags or None,
            # The process exits right after printing; write analytics inline
            background_analytics=False,
            verbose=args.verbose,
        )
    except (ValueError, OSError) as e:
        console.print(f"[bold red]Could not open catalog: {e}[/bold red]")
        return 1

    console.print(Panel(f'"{args.prompt}"', title="Prompt", border_style="cyan"))

    try:
        return print_match(service.find_best_match(args.prompt))
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
