"""Main CLI interface for the compromised package scanner."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .. import __version__
from ..compromised import CompromisedListClient, load_compromised_file
from ..compromised.offline import DEFAULT_COMPROMISED_FILE
from ..core.matcher import FindingMatcher
from ..core.parsers import registry as parser_registry
from ..core.report import ExitCode, SCANNER_NAME
from ..core.scanner import Scanner, ScannerConfig, DEFAULT_JSON_OUT
from ..errors import ScannerError
from ..output.formatters import ConsoleFormatter, JSONFormatter
from ..utils.logging import setup_logging, get_logger
from ..utils.path_utils import IGNORED_DIRS
from ..utils.performance import PerformanceMonitor

app = typer.Typer(
    name="hof-scanner",
    help="Scan a project tree for known-compromised npm package versions",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")


@app.command()
def scan(
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        help="Directory to scan (defaults to the current directory)"
    ),
    json_out: Path = typer.Option(
        DEFAULT_JSON_OUT,
        "--json-out",
        help="Where to write the JSON report"
    ),
    compromised_file: Optional[Path] = typer.Option(
        None,
        "--compromised-file",
        envvar="HOF_SCANNER_COMPROMISED_FILE",
        help="Compromised package list (name: version per line)"
    ),
    compromised_url: Optional[str] = typer.Option(
        None,
        "--compromised-url",
        envvar="HOF_SCANNER_COMPROMISED_URL",
        help="Download the compromised package list from this URL instead"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
    performance: bool = typer.Option(
        False,
        "--performance",
        help="Show performance summary"
    ),
) -> None:
    """Scan package.json and yarn.lock files for compromised versions."""
    setup_logging(level=logging.WARNING, verbose=verbose)
    formatter = ConsoleFormatter(console)
    monitor = PerformanceMonitor(enabled=performance, console=console)

    try:
        config = ScannerConfig(
            root=root or Path.cwd(),
            compromised_file=compromised_file,
            compromised_url=compromised_url,
            json_out=json_out,
        )
        report = asyncio.run(Scanner(config, performance_monitor=monitor).scan())
    except (ScannerError, FileNotFoundError, NotADirectoryError, ValueError) as e:
        logger.error(f"Scanner failed: {e}")
        formatter.format_error(str(e))
        raise typer.Exit(int(ExitCode.INTERNAL_ERROR))
    except Exception as e:
        logger.error(f"Scanner failed unexpectedly: {e!r}")
        formatter.format_error("Unexpected internal failure", details=repr(e))
        raise typer.Exit(int(ExitCode.INTERNAL_ERROR))

    formatter.format_scan_results(report)

    try:
        written = JSONFormatter(config.json_out).save_results(report.to_dict())
        console.print(f"JSON results written to: {escape(str(written))}")
    except OSError as e:
        logger.warning(f"Failed to write JSON results: {e}")

    if performance:
        console.print("\n[bold cyan]Performance Summary:[/bold cyan]")
        monitor.print_summary()

    raise typer.Exit(int(report.exit_code))


@app.command()
def check(
    package: str = typer.Argument(..., help="Package name"),
    version: str = typer.Argument(..., help="Exact package version"),
    compromised_file: Optional[Path] = typer.Option(
        None,
        "--compromised-file",
        envvar="HOF_SCANNER_COMPROMISED_FILE",
        help="Compromised package list (name: version per line)"
    ),
) -> None:
    """Check a single package version against the compromised list."""
    try:
        registry = load_compromised_file(compromised_file)
    except ScannerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(int(ExitCode.INTERNAL_ERROR))

    matcher = FindingMatcher(registry)
    spec = escape(f"{package}@{version}")
    if matcher.is_compromised(package, version):
        console.print(f"[red]{spec} is compromised[/red]")
        raise typer.Exit(int(ExitCode.FINDINGS))

    known = sorted(registry.by_name.get(package, ()))
    console.print(f"[green]{spec} is not on the compromised list[/green]")
    if known:
        console.print(f"  Compromised versions of {escape(package)}: {escape(', '.join(known))}")


@app.command()
def info(
    compromised_file: Optional[Path] = typer.Option(
        None,
        "--compromised-file",
        envvar="HOF_SCANNER_COMPROMISED_FILE",
        help="Compromised package list (name: version per line)"
    ),
    compromised_url: Optional[str] = typer.Option(
        None,
        "--compromised-url",
        envvar="HOF_SCANNER_COMPROMISED_URL",
        help="Download the compromised package list from this URL instead"
    ),
) -> None:
    """Show scanner information and compromised list statistics."""
    console.print(Panel.fit(
        f"[bold blue]{SCANNER_NAME}[/bold blue] {__version__}\n"
        "Detects known-compromised npm package versions in\n"
        "package.json and yarn.lock files",
        title="Information"
    ))

    files = parser_registry.get_supported_file_names()
    console.print(f"\n[bold]Scanned files:[/bold] {', '.join(files)}")
    console.print(f"[bold]Ignored directories:[/bold] {', '.join(sorted(IGNORED_DIRS))}")

    try:
        if compromised_url:
            async def fetch():
                async with CompromisedListClient() as client:
                    return await client.fetch_registry(compromised_url)
            registry = asyncio.run(fetch())
            source = compromised_url
        else:
            registry = load_compromised_file(compromised_file)
            source = str(compromised_file or DEFAULT_COMPROMISED_FILE)
    except ScannerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(int(ExitCode.INTERNAL_ERROR))

    console.print(f"[bold]Compromised list:[/bold] {escape(source)}")
    console.print(
        f"   {registry.package_count} packages, {registry.version_count} versions"
    )


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
