"""Build command - render every page of a site"""

from __future__ import annotations

from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from ssgen.core import BuildOptions
from ssgen.core.site import BuildReport, PageResult, SiteBuilder

from .utils import console


def build_command(options: BuildOptions, show_progress: bool = True) -> BuildReport:
    """Build the site described by ``options``.

    Log lines print above the progress bar since both share one console.
    """
    progress = Progress(
        TextColumn("[bold blue]Building"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        disable=not show_progress,
        transient=True,
    )
    task = progress.add_task("pages", total=None)

    def on_page_done(result: PageResult) -> None:
        progress.advance(task)

    builder = SiteBuilder(options, on_page_done=on_page_done)
    with progress:
        pages = builder.discover_pages()
        progress.update(task, total=len(pages))
        report = builder.build(pages)

    if show_progress:
        status = "green" if not report.failed else "red"
        console.print(
            f"[{status}]Built {len(report.succeeded)} page(s) in {report.elapsed:.3f} s[/{status}]"
        )
        for result in report.failed:
            console.print(f"[red]  ✗ {result.source}[/red]")
    return report
