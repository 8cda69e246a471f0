#!/usr/bin/env python3
"""main.py — CLI entry point for logokit.

Usage:
    python main.py <command> [options]

Commands:
    add         - Add logo components to the current project
    available   - List components in the registry
    categories  - List registry categories with counts
    list        - List components already added to this project
    index       - Regenerate the bundled component index
    help        - Show this help message

Examples:
    python main.py add vercel --tsx
    python main.py add vercel nextjs --jsx --force
    python main.py add --svgl discord --tsx
    python main.py add --category framework --tsx
    python main.py add --search react --jsx
    python main.py available --source svgl --search git
    python main.py categories
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

from logokit.config import RegistrySettings
from logokit.constants import SourceKey
from logokit.exceptions import LogoError
from logokit.registry import LogoRegistry, build_registry

if TYPE_CHECKING:
    from logokit.project import ProjectFiles

logger = logging.getLogger("logokit.cli")

_PREVIEW_LIMIT = 20


# ── Shared helpers ────────────────────────────────────────────────────────────


def _settings(args: argparse.Namespace) -> RegistrySettings:
    settings = RegistrySettings.from_env()
    source = getattr(args, "source", None)
    if getattr(args, "svgl", False):
        source = SourceKey.SVGL
    if source:
        settings = settings.with_source(source)
    if getattr(args, "no_fallback", False):
        settings = replace(settings, fallback=False)
    return settings


def _run(args: argparse.Namespace, handler: Callable[[argparse.Namespace, LogoRegistry], Awaitable[int]]) -> int:
    """Build a registry from *args*, run *handler*, and close the registry."""

    async def _go() -> int:
        async with build_registry(_settings(args)) as registry:
            return await handler(args, registry)

    try:
        return asyncio.run(_go())
    except LogoError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}")
        return 1


def _print_names(names: list[str]) -> None:
    for name in names:
        print(f"  • {name}")


def show_components_not_found(missing: list[str], available: list[str]) -> None:
    print(f"Error: component(s) not found: {', '.join(missing)}")
    if available:
        preview = available[:_PREVIEW_LIMIT]
        print(f"Available components ({len(available)}):")
        _print_names(preview)
        if len(available) > len(preview):
            print(f"  ... and {len(available) - len(preview)} more (run 'available' to see all)")


# ── add ───────────────────────────────────────────────────────────────────────


async def resolve_components(registry: LogoRegistry, args: argparse.Namespace) -> list[str]:
    """Component names from --category, --search, --all, or the positional list (in that order)."""
    if args.category:
        names = await registry.get_components_by_category(args.category)
        print(f"Adding {len(names)} components from '{args.category}' category...")
        return names
    if args.search:
        names = await registry.search_components(args.search)
        if not names:
            print(f"No components found matching '{args.search}'")
            return []
        print(f"Found {len(names)} components matching '{args.search}'...")
        return names
    if args.all:
        names = await registry.get_available_components()
        print(f"Adding all {len(names)} available components...")
        return names
    return list(args.components)


async def find_missing(registry: LogoRegistry, names: list[str]) -> list[str]:
    return [name for name in names if not await registry.has_component(name)]


def resolve_language(args: argparse.Namespace, prompt: Callable[[str], str] = input) -> bool | None:
    """True for TSX, False for JSX, None when the prompt answer is invalid."""
    if args.tsx:
        return True
    if args.jsx:
        return False
    answer = prompt("Choose language (jsx/tsx): ").strip().lower()
    if answer not in ("jsx", "tsx"):
        print("Error: Please choose either 'jsx' or 'tsx'.")
        return None
    return answer == "tsx"


async def add_components(
    registry: LogoRegistry,
    project: ProjectFiles,
    names: list[str],
    framework: str,
    typescript: bool,
    force: bool,
) -> int:
    """Generate and write each component; return how many were written."""
    from logokit.generator import file_extension, generate

    extension = file_extension(framework, typescript)
    print(f"Creating {len(names)} {extension} component(s)...")

    # Warm the cache concurrently; failures surface below as missing components.
    await registry.preload(names)

    created = 0
    for name in names:
        component = await registry.get_component(name)
        if component is None or component.content is None:
            print(f"  ✗ {name}: not found in registry")
            continue
        existed = project.component_exists(component.name, extension)
        if existed and not force:
            print(f"  - {component.name}.{extension} already exists (use --force to overwrite)")
            continue
        try:
            source = generate(component.name, component.content, framework, typescript)
            project.write_component(component.name, source, extension)
            project.add_to_tracking(component.name, extension)
        except LogoError as exc:
            print(f"  ✗ {name}: {exc}")
            continue
        verb = "Overwrote" if existed else "Created"
        print(f"  ✓ {verb} {project.relative_component_file(component.name, extension)}")
        created += 1
    return created


async def run_add(
    args: argparse.Namespace,
    registry: LogoRegistry,
    project: ProjectFiles | None = None,
) -> int:
    from logokit.project import ProjectFiles

    project = project or ProjectFiles(Path.cwd())
    names = await resolve_components(registry, args)
    if not names:
        if not (args.category or args.search or args.all):
            print("Error: Please provide component name(s) or use --all/--category/--search.")
        return 1

    missing = await find_missing(registry, names)
    if missing:
        show_components_not_found(missing, await registry.get_available_components())
        return 1

    framework = args.framework or project.detect_framework() or "react"
    typescript = False
    if framework != "vue":
        language = resolve_language(args)
        if language is None:
            return 1
        typescript = language

    created = await add_components(registry, project, names, framework, typescript, args.force)
    total_tracked = len(project.tracked_logos())
    print(f"\nDone: {created}/{len(names)} component(s) created, {total_tracked} tracked in logos.json")
    return 0 if created == len(names) else 1


def cmd_add(args: argparse.Namespace) -> int:
    """Add components to the current project."""
    if args.tsx and args.jsx:
        print("Error: Cannot use both --tsx and --jsx flags")
        return 1
    return _run(args, run_add)


# ── available / categories ────────────────────────────────────────────────────


async def run_available(args: argparse.Namespace, registry: LogoRegistry) -> int:
    if args.category:
        names = await registry.get_components_by_category(args.category)
        heading = f"Components in '{args.category}'"
    elif args.search:
        names = await registry.search_components(args.search, regex=args.regex)
        heading = f"Components matching '{args.search}'"
    else:
        names = await registry.get_available_components()
        heading = "Available components in registry"

    stats = await registry.get_stats()
    print(f"{heading}:")
    print(f"Total: {stats.total_components} components ({stats.source})")
    if stats.unavailable:
        print(f"Unavailable sources: {', '.join(stats.unavailable)}")
    if not names:
        print("No components found.")
        return 0
    _print_names(names)
    return 0


def cmd_available(args: argparse.Namespace) -> int:
    """List registry components."""
    return _run(args, run_available)


async def run_categories(args: argparse.Namespace, registry: LogoRegistry) -> int:
    categories = await registry.get_categories()
    if not categories:
        print(f"No categories available from {registry.source}.")
        return 0
    print(f"Categories ({len(categories)}):")
    for category in categories:
        print(f"  • {category.name} ({category.count})")
    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    """List categories with counts."""
    return _run(args, run_categories)


# ── list / index ──────────────────────────────────────────────────────────────


def cmd_list(args: argparse.Namespace) -> int:
    """List components recorded in logos.json."""
    from logokit.project import ProjectFiles

    logos = ProjectFiles(Path.cwd()).tracked_logos()
    if not logos:
        print("No logos added yet. Use 'add <name>' to add one.")
        return 0
    print(f"Logos in this project ({len(logos)}):")
    for logo in logos:
        if isinstance(logo, dict):
            print(f"  • {logo.get('name')} → {logo.get('file')}")
    return 0


def cmd_index(args: argparse.Namespace) -> int:
    """Regenerate the bundled component index from the GitHub listing."""
    from logokit.component_index import regenerate
    from logokit.paths import Paths

    output = Path(args.output).resolve() if args.output else Paths.bundled_index()
    print("Generating component index...")
    try:
        settings = RegistrySettings.from_env()
        index = asyncio.run(
            regenerate(
                settings.github_repo,
                settings.github_branch,
                settings.github_path,
                output,
                settings.timeout,
            )
        )
    except (LogoError, OSError) as exc:
        print(f"Error: failed to generate component index: {exc}")
        return 1
    print(f"Generated index with {len(index.components)} components")
    print(f"Saved to: {output}")
    for entry in index.components:
        print(f"  • {entry.name} ({entry.size} bytes)")
    return 0


# ── Parser ────────────────────────────────────────────────────────────────────


def _add_source_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--source",
        choices=[key.value for key in SourceKey],
        default=None,
        help="Registry source (default: $LOGOKIT_SOURCE or github)",
    )
    subparser.add_argument("--svgl", action="store_true", help="Shorthand for --source svgl")
    subparser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Do not fall back to other sources when the chosen one is unavailable",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="logokit — add SVG logo components to your project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py add vercel --tsx
  python main.py add --svgl discord --tsx
  python main.py add --category framework --jsx
  python main.py available --search react
  python main.py categories --source svgl
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # add subcommand
    add_parser = subparsers.add_parser("add", help="Add logo components to this project")
    add_parser.add_argument("components", nargs="*", metavar="NAME", help="Component names")
    add_parser.add_argument("--tsx", action="store_true", help="Generate TypeScript (TSX)")
    add_parser.add_argument("--jsx", action="store_true", help="Generate JavaScript (JSX)")
    add_parser.add_argument(
        "--framework",
        choices=["react", "vue"],
        default=None,
        help="Target framework (default: detected from package.json, else react)",
    )
    add_parser.add_argument("-f", "--force", action="store_true", help="Overwrite existing files")
    add_parser.add_argument("-a", "--all", action="store_true", help="Add every available component")
    add_parser.add_argument("-c", "--category", default=None, metavar="TAG", help="Add a whole category")
    add_parser.add_argument("-s", "--search", default=None, metavar="QUERY", help="Add search matches")
    _add_source_arguments(add_parser)

    # available subcommand
    available_parser = subparsers.add_parser("available", help="List registry components")
    available_parser.add_argument("-c", "--category", default=None, metavar="TAG", help="Filter by category")
    available_parser.add_argument("-s", "--search", default=None, metavar="QUERY", help="Filter by search")
    available_parser.add_argument("--regex", action="store_true", help="Treat --search as a regular expression")
    _add_source_arguments(available_parser)

    # categories subcommand
    categories_parser = subparsers.add_parser("categories", help="List categories with counts")
    _add_source_arguments(categories_parser)

    # list subcommand
    subparsers.add_parser("list", help="List components added to this project")

    # index subcommand
    index_parser = subparsers.add_parser("index", help="Regenerate the bundled component index")
    index_parser.add_argument("--output", default=None, metavar="PATH", help="Index file to write")

    # help subcommand
    subparsers.add_parser("help", help="Show this help message")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Working directory: {Path.cwd()}")

    if args.command == "add":
        return cmd_add(args)
    if args.command == "available":
        return cmd_available(args)
    if args.command == "categories":
        return cmd_categories(args)
    if args.command == "list":
        return cmd_list(args)
    if args.command == "index":
        return cmd_index(args)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
