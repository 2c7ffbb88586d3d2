import json
import sys
import threading
from typing import List, Optional

import typer
from rich.console import Console

from aicov_cli.analyzer import summarize_folders
from aicov_cli.config import load_settings
from aicov_cli.errors import AicovError
from aicov_cli.logging_config import setup_logging
from aicov_cli.ui import (
    build_files_table,
    build_folders_table,
    build_human_files_table,
    build_patterns_table,
    render_distribution_chart,
    render_file,
    render_skipped,
    render_verdict,
)
from aicov_cli.workspace import WorkspaceAnalyzer

console = Console()
app = typer.Typer(help="Estimate how much of a codebase looks machine-generated", add_completion=False)


def _fail(err: AicovError, export_json: bool):
    if export_json:
        print(json.dumps({"error": str(err)}))
    else:
        console.print(f"[bold red]Error[/bold red]: {err}")
    raise typer.Exit(code=err.exit_code)


@app.command(name="file")
def file_cmd(
    path: str = typer.Argument(..., help="Source file to analyze"),
    export_json: bool = typer.Option(False, "--json", help="Export the analysis as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """Estimate the generated share of a single file."""
    setup_logging(verbose=verbose)
    settings = load_settings()
    try:
        analysis = WorkspaceAnalyzer(settings).analyze_file(path)
    except AicovError as e:
        _fail(e, export_json)

    if export_json:
        print(json.dumps(analysis.to_dict(), indent=2))
        return
    render_file(analysis, settings)


@app.command(name="patterns")
def patterns_cmd(
    path: str = typer.Argument(..., help="Source file to analyze"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """List every detected pattern in a file with the lines it covers."""
    setup_logging(verbose=verbose)
    try:
        analysis = WorkspaceAnalyzer(load_settings()).analyze_file(path)
    except AicovError as e:
        _fail(e, False)

    if not analysis.detected_patterns:
        console.print("[dim]No generation patterns detected[/dim]")
        return
    console.print(build_patterns_table(analysis))


@app.command(name="scan")
def scan_cmd(
    path: str = typer.Argument(".", help="Project root to analyze"),
    export_json: bool = typer.Option(False, "--json", help="Export results as JSON"),
    workers: Optional[int] = typer.Option(None, min=1, help="Files analyzed in parallel"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-x", help="Extra glob to skip (repeatable)"),
    top: int = typer.Option(15, min=1, help="Number of files listed in the table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
):
    """Scan a project and compute its line-weighted generated share."""
    setup_logging(verbose=verbose)
    settings = load_settings()
    if workers is not None:
        settings.workers = workers
    if exclude:
        settings.exclude_patterns = list(settings.exclude_patterns) + list(exclude)

    cancel = threading.Event()
    try:
        if export_json:
            analysis = WorkspaceAnalyzer(settings).analyze_workspace(path, cancel_event=cancel)
        else:
            with console.status("[cyan]Analyzing files...", spinner="dots"):
                analysis = WorkspaceAnalyzer(settings).analyze_workspace(path, cancel_event=cancel)
    except KeyboardInterrupt:
        cancel.set()
        console.print("\n[dim]Analysis cancelled.[/dim]")
        raise typer.Exit(code=130)
    except AicovError as e:
        _fail(e, export_json)

    if analysis is None:
        console.print("[dim]Analysis cancelled.[/dim]")
        raise typer.Exit(code=130)

    if export_json:
        print(json.dumps(analysis.to_dict(), indent=2))
        return

    if not analysis.file_analyses:
        console.print(f"[yellow]No analyzable source files found under '{path}'.[/yellow]")
        render_skipped(analysis)
        return

    console.print(build_files_table(analysis, settings, top))
    console.print(build_human_files_table(analysis, settings, top))
    console.print(build_folders_table(summarize_folders(analysis), settings))
    render_distribution_chart(analysis, settings)
    render_verdict(analysis, settings)
    render_skipped(analysis)


def main():
    if len(sys.argv) == 1:
        sys.argv.append("--help")
    app()


if __name__ == "__main__":
    main()
