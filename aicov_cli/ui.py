from pathlib import Path
from typing import List, Optional

import plotille
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from aicov_cli.config import AnalyzerSettings
from aicov_cli.models import DetectedPattern, FileAnalysis, FolderSummary, ProjectAnalysis

console = Console()


def _band_color(pct: int, settings: AnalyzerSettings) -> str:
    if pct >= settings.high_band:
        return "bold red"
    if pct >= settings.medium_band:
        return "yellow"
    return "green"


def _confidence_label(confidence: int) -> str:
    if confidence >= 70:
        return "high"
    if confidence >= 40:
        return "medium"
    return "low"


def format_percentage(pct: int, settings: AnalyzerSettings) -> str:
    color = _band_color(pct, settings)
    return f"[{color}]{pct}%[/{color}]"


def format_patterns(patterns: List[DetectedPattern], limit: int = 3) -> str:
    if not patterns:
        return "[dim]No generation patterns detected[/dim]"
    ranked = sorted(patterns, key=lambda p: -p.confidence)[:limit]
    lines = [f"[yellow]•[/yellow] {p.description} [dim]({p.confidence}%)[/dim]" for p in ranked]
    if len(patterns) > limit:
        lines.append(f"[dim]… {len(patterns) - limit} more[/dim]")
    return "\n".join(lines)


def _relative(path: str, root: str) -> str:
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return path


def render_file(analysis: FileAnalysis, settings: AnalyzerSettings):
    color = _band_color(analysis.generated_percentage, settings)
    summary = (
        f"[{color}]Generated: {analysis.generated_percentage}% ({analysis.generated_lines} lines)[/{color}]\n"
        f"Human:     {analysis.human_percentage}% ({analysis.human_lines} lines)\n"
        f"Code lines: {analysis.code_lines}   Comments: {analysis.comment_lines}   Blank: {analysis.empty_lines}\n"
        f"Confidence: {analysis.confidence}% ({_confidence_label(analysis.confidence)})\n\n"
        f"{format_patterns(list(analysis.detected_patterns))}"
    )
    console.print(Panel(summary, title=f"[bold]{analysis.file_path}[/bold]", border_style="cyan", expand=False, padding=(1, 2)))


def build_patterns_table(analysis: FileAnalysis) -> Table:
    table = Table(title=f"Detected patterns: {analysis.file_path}", show_header=True, header_style="bold magenta")
    table.add_column("Type", width=11)
    table.add_column("Confidence", justify="center", width=10)
    table.add_column("Lines", width=24)
    table.add_column("Description")
    for p in analysis.detected_patterns:
        shown = ", ".join(str(n) for n in p.line_numbers[:8])
        if len(p.line_numbers) > 8:
            shown += f" (+{len(p.line_numbers) - 8})"
        table.add_row(p.kind.value, f"{p.confidence}%", shown, f"{p.description}\n[dim]{p.signature}[/dim]")
    return table


def _files_table(title: str, ranked: List[FileAnalysis], analysis: ProjectAnalysis, settings: AnalyzerSettings) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("File")
    table.add_column("Generated", justify="center", width=10)
    table.add_column("Code Lines", justify="right", width=10)
    table.add_column("Confidence", justify="center", width=10)
    for f in ranked:
        table.add_row(
            _relative(f.file_path, analysis.project_path),
            format_percentage(f.generated_percentage, settings),
            str(f.code_lines),
            f"{f.confidence}%",
        )
    return table


def build_files_table(analysis: ProjectAnalysis, settings: AnalyzerSettings, top: int) -> Table:
    ranked = sorted(analysis.file_analyses, key=lambda f: (-f.generated_percentage, f.file_path))[:top]
    return _files_table(f"Top {len(ranked)} files by generated share", ranked, analysis, settings)


def build_human_files_table(analysis: ProjectAnalysis, settings: AnalyzerSettings, top: int) -> Table:
    ranked = sorted(analysis.file_analyses, key=lambda f: (-f.human_percentage, f.file_path))[:top]
    return _files_table(f"Top {len(ranked)} most human-written files", ranked, analysis, settings)


def build_folders_table(folders: List[FolderSummary], settings: AnalyzerSettings) -> Table:
    table = Table(title="Generated share by folder", show_header=True, header_style="bold cyan")
    table.add_column("Folder")
    table.add_column("Files", justify="right", width=6)
    table.add_column("Generated", justify="center", width=10)
    table.add_column("Generated / Human Lines", justify="right")
    for folder in folders:
        table.add_row(
            folder.path,
            str(folder.files),
            format_percentage(folder.generated_percentage, settings),
            f"{folder.generated_lines} / {folder.human_lines}",
        )
    return table


def render_verdict(analysis: ProjectAnalysis, settings: AnalyzerSettings):
    """Bold final summary panel after a project pass."""
    pct = analysis.overall_percentage
    if pct >= settings.high_band:
        icon, label = "🔴", "MOSTLY GENERATED"
        note = "Most substantive lines match generation patterns."
    elif pct >= settings.medium_band:
        icon, label = "🟡", "MIXED"
        note = "A sizeable share of lines match generation patterns."
    else:
        icon, label = "🟢", "MOSTLY HUMAN-WRITTEN"
        note = "Few lines match generation patterns."
    color = _band_color(pct, settings)

    summary = (
        f"[{color}]{icon}  VERDICT: {label}[/{color}]\n\n"
        f"  Generated share of code  : [{color}]{pct}%[/{color}]\n"
        f"  Generated / human lines  : {analysis.generated_lines} / {analysis.human_lines}\n"
        f"  Files analyzed           : {analysis.analyzed_files} of {analysis.total_files}\n"
        f"  Total lines              : {analysis.total_lines}\n\n"
        f"  [dim]{note} Heuristic estimate, not proof of authorship.[/dim]"
    )
    console.print()
    console.print(Panel(
        summary,
        title="[bold]Analysis Complete[/bold]",
        border_style=color.replace("bold ", ""),
        expand=False,
        padding=(1, 4),
    ))
    console.print()


def render_skipped(analysis: ProjectAnalysis, limit: int = 10):
    if not analysis.skipped:
        return
    console.print(f"[yellow]Skipped {len(analysis.skipped)} file(s):[/yellow]")
    for s in analysis.skipped[:limit]:
        console.print(f"  [dim]{_relative(s.path, analysis.project_path)}[/dim] {s.reason}")


def render_distribution_chart(analysis: ProjectAnalysis, settings: AnalyzerSettings) -> Optional[str]:
    """Per-file generated share, sorted ascending."""
    if len(analysis.file_analyses) < 3:
        console.print("[dim]Not enough files to draw a distribution chart (need at least 3).[/dim]")
        return None

    console.print("\n[bold cyan]Generated share per file (sorted)[/bold cyan]")
    shares = sorted(f.generated_percentage for f in analysis.file_analyses)
    fig = plotille.Figure()
    fig.width = 60
    fig.height = 15
    fig.set_x_limits(min_=1, max_=len(shares))
    fig.set_y_limits(min_=0, max_=100)
    fig.y_label = "Generated %"
    fig.x_label = "Files"
    pct = analysis.overall_percentage
    fig.plot(list(range(1, len(shares) + 1)), shares, lc='red' if pct >= settings.high_band else 'yellow' if pct >= settings.medium_band else 'green')
    chart = fig.show()
    print(chart)
    return chart
