"""Site builder - turns every page of the input directory into an HTML file.

Build order:
  1. discover ``*.page`` files (case-insensitive) below the input root
  2. parse META.yaml once; its root variables become every page's globals
  3. parse and write each page on its own worker thread
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from ssgen.core.config import BuildOptions
from ssgen.exceptions import PageParseError, SsgenError
from ssgen.page import is_within
from ssgen.parser import Parser

log = logging.getLogger(__name__)

DOCTYPE = "<!DOCTYPE html>\n"


@dataclass
class PageResult:
    """Outcome of building one page."""

    source: Path
    output: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BuildReport:
    """Outcome of a whole build."""

    pages: list[PageResult] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def succeeded(self) -> list[PageResult]:
        return [page for page in self.pages if page.ok]

    @property
    def failed(self) -> list[PageResult]:
        return [page for page in self.pages if not page.ok]


class SiteBuilder:
    """Builds all pages of a site.

    Args:
        options: Build options.
        on_page_done: Called once per finished page, successful or not.
    """

    def __init__(
        self,
        options: BuildOptions,
        on_page_done: Callable[[PageResult], None] | None = None,
    ):
        self.options = options
        self.on_page_done = on_page_done

    def discover_pages(self) -> list[Path]:
        """Find page files below the input root, skipping the output root."""
        log.info("Walking input directory")
        pages = []
        for path in self.options.input.rglob("*"):
            if path.suffix.lower() != self.options.page_suffix or not path.is_file():
                continue
            if is_within(path, self.options.output):
                continue
            log.debug(f"Found file {path}")
            pages.append(path)
        return sorted(pages)

    def load_meta_vars(self) -> dict[str, str]:
        """Parse the META file (if any) and return the variables it defines.

        Directives in the META file (e.g. !COPY_DIR) run here, exactly once.

        Raises:
            SsgenError: the META file exists but cannot be read.
            PageParseError: the META file is not valid YAML.
        """
        meta_file = self.options.input / self.options.meta_file
        if not meta_file.is_file():
            log.info(f"{self.options.meta_file} not found! Starting with no global variables")
            return {}

        log.info(f"{self.options.meta_file} found! Parsing...")
        parser = Parser(self.options)
        try:
            parser.parse_file(meta_file)
        except (OSError, UnicodeDecodeError) as exc:
            raise SsgenError(
                f"Unable to read {meta_file} despite file existing, "
                f"please ensure permissions are correct: {exc}"
            ) from exc
        return parser.root_vars()

    def output_path(self, page: Path) -> Path:
        """Mirror ``page``'s place in the input root under the output root as .html"""
        relative = page.relative_to(self.options.input)
        return (self.options.output / relative).with_suffix(".html")

    def build_page(self, page: Path, meta_vars: dict[str, str]) -> PageResult:
        """Parse one page and write its HTML. Never raises for page-level failures."""
        parser = Parser(self.options, meta_vars)

        log.info(f"Reading file {page}")
        try:
            parser.parse_file(page)
        except (OSError, UnicodeDecodeError) as exc:
            return self._failed(page, f"Error reading file {page} | {exc}")
        except PageParseError as exc:
            return self._failed(page, exc.message)

        output = self.output_path(page)
        log.info(f"Writing file {output}")
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(DOCTYPE + parser.render(), encoding="utf-8")
        except OSError as exc:
            return self._failed(page, f"Error writing file {output} | {exc}")

        return PageResult(source=page, output=output)

    def build(self, pages: list[Path] | None = None) -> BuildReport:
        """Build every page (or the already discovered ``pages``).

        Raises:
            SsgenError: fail_fast is set and a page failed, or META.yaml is broken.
        """
        start = time.perf_counter()
        if pages is None:
            pages = self.discover_pages()
        meta_vars = self.load_meta_vars()
        report = BuildReport()

        if pages:
            log.debug("Creating Page threads!")
            workers = self.options.jobs or len(pages)
            executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ssgen-page")
            with executor:
                # each worker gets its own snapshot of the globals
                futures = {
                    executor.submit(self.build_page, page, dict(meta_vars)): page
                    for page in pages
                }
                for future in as_completed(futures):
                    try:
                        result = future.result()
                    except Exception as exc:
                        page = futures[future]
                        log.exception(f"Unexpected error while building {page}")
                        result = PageResult(source=page, error=f"{type(exc).__name__}: {exc}")
                    report.pages.append(result)
                    if self.on_page_done is not None:
                        self.on_page_done(result)
                    if not result.ok and self.options.fail_fast:
                        executor.shutdown(wait=True, cancel_futures=True)
                        raise SsgenError(f"Build aborted: {result.error}")

        report.pages.sort(key=lambda result: result.source)
        report.elapsed = time.perf_counter() - start
        log.info(f"Completed in {report.elapsed:.3f} Seconds!")
        return report

    @staticmethod
    def _failed(page: Path, error: str) -> PageResult:
        log.error(error)
        return PageResult(source=page, error=error)
