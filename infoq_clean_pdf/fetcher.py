"""
Fetch one article with headless Chromium, strip the page chrome listed in
REMOVE_SELECTORS and print what is left to "<title>.pdf".

The browser is reached only through the small Browser / Page protocols below,
so the orchestration can be driven by a fake in tests.
"""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, Optional, Protocol

from playwright.sync_api import sync_playwright
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from infoq_clean_pdf.config import (
    DEFAULT_USER_AGENT,
    DESKTOP_PLATFORM,
    PDF_FORMAT,
    REMOVE_SELECTORS,
    VIEWPORT,
    Config,
    default_output_dir,
)

logger = logging.getLogger(__name__)

_PROTOCOL_AND_DOMAIN_RE = re.compile(r"(?:\w+:)?//(\S+)")
_LOCALHOST_DOMAIN_RE = re.compile(r"localhost[:?\d]*(?:[^:?\d]\S*)?")
_NON_LOCALHOST_DOMAIN_RE = re.compile(r"[^\s.]+\.\S{2,}")

# Windows rejects all of these in file names, POSIX only / and NUL
_WINDOWS_ILLEGAL_FILENAME_CHARS_RE = re.compile(r'[\\/:*?"<>|\x00]')
_POSIX_ILLEGAL_FILENAME_CHARS_RE = re.compile(r"[/\x00]")

REMOVE_SCRIPT = """
(selector) => {
    const elements = document.querySelectorAll(selector);
    elements.forEach(el => el.parentNode.removeChild(el));
    return elements.length;
}
"""


class UsageError(Exception):
    """Bad command-line input. The message is meant for the user as-is."""


class Page(Protocol):
    def goto(self, url: str, wait_until: str) -> Any: ...

    def title(self) -> str: ...

    def evaluate(self, expression: str, arg: Any = None) -> Any: ...

    def pdf(self, path: str, format: str) -> Any: ...


class Browser(Protocol):
    def new_page(self) -> Page: ...

    def close(self) -> None: ...


Launcher = Callable[[Config], Browser]


# ---------------------------
# Validation
# ---------------------------

def is_url(value: str) -> bool:
    """Loose "looks like a URL" check: optional scheme, //, then a dotted host or localhost."""
    if not isinstance(value, str):
        return False
    match = _PROTOCOL_AND_DOMAIN_RE.fullmatch(value)
    if not match:
        return False
    everything_after_protocol = match.group(1)
    return bool(
        _LOCALHOST_DOMAIN_RE.fullmatch(everything_after_protocol)
        or _NON_LOCALHOST_DOMAIN_RE.fullmatch(everything_after_protocol)
    )


def validate(
    source: Optional[str],
    output_dir: Optional[str],
    user_agent: Optional[str] = None,
    platform: Optional[str] = None,
) -> Config:
    """
    Check the raw CLI values and build the run Config.

    On success the process working directory is switched to the output
    directory, so the PDF lands there. Raises UsageError otherwise.
    """
    logger.info("Process validating ...")
    platform = platform or sys.platform

    if not source or not is_url(source):
        raise UsageError(
            'Option "source" required & has to be url, please provide correct -s option!'
        )

    if output_dir is None and platform == DESKTOP_PLATFORM:
        resolved = default_output_dir()
    elif output_dir is None:
        raise UsageError('Option "output dir" required, please provide -o option!')
    elif not output_dir:
        raise UsageError("Output has to be a directory!")
    else:
        resolved = Path(output_dir).expanduser()

    if not resolved.is_dir():
        raise UsageError("Output has to be a directory!")

    logger.info(f"Output dir: {resolved}")
    os.chdir(resolved)

    return Config(
        source=source,
        output_dir=resolved,
        user_agent=user_agent if user_agent is not None else DEFAULT_USER_AGENT,
    )


# ---------------------------
# Browser
# ---------------------------

class ChromiumBrowser:
    """Headless Chromium through Playwright, one browser per run."""

    def __init__(self, config: Config):
        self._config = config
        self._playwright = sync_playwright().start()
        try:
            self._browser = self._playwright.chromium.launch(headless=True)
        except Exception:
            self._playwright.stop()
            raise

    def new_page(self) -> Page:
        # user agent, JS and viewport are context options, so all three are
        # in place before the page exists
        context = self._browser.new_context(
            user_agent=self._config.user_agent,
            java_script_enabled=True,
            viewport=VIEWPORT,
        )
        return context.new_page()

    def close(self) -> None:
        try:
            self._browser.close()
        finally:
            self._playwright.stop()


# ---------------------------
# Processing
# ---------------------------

def remove_elements(page: Page, selectors: Iterable[str] = REMOVE_SELECTORS) -> None:
    """Remove every element matching each selector, one selector at a time."""
    for sel in selectors:
        removed = page.evaluate(REMOVE_SCRIPT, sel)
        logger.debug(f"Removed {removed} element(s) for {sel}")


def pdf_filename(title: str, platform: Optional[str] = None) -> str:
    platform = platform or sys.platform
    if platform.startswith("win"):
        illegal = _WINDOWS_ILLEGAL_FILENAME_CHARS_RE
    else:
        illegal = _POSIX_ILLEGAL_FILENAME_CHARS_RE
    name = illegal.sub("", title or "").strip()
    return f"{name or 'untitled'}.pdf"


def count_pages(path: Path) -> Optional[int]:
    """Page count of the written PDF, or None if PyPDF2 cannot parse it."""
    try:
        return len(PdfReader(str(path)).pages)
    except PdfReadError as e:
        logger.warning(f"Could not read page count of {path}: {e}")
        return None


def process(config: Config, launch: Launcher = ChromiumBrowser) -> Path:
    """
    Load config.source, clean it and export it to "<title>.pdf" in the
    working directory. The browser is closed whether or not export succeeds.
    Returns the path of the written PDF.
    """
    browser = launch(config)
    try:
        page = browser.new_page()
        logger.info(f"Visiting => {config.source}")
        page.goto(config.source, wait_until="networkidle")
        title = page.title()

        remove_elements(page)

        logger.info(title)
        filename = pdf_filename(title)
        page.pdf(path=filename, format=PDF_FORMAT)
    finally:
        browser.close()

    out_path = Path.cwd() / filename
    pages = count_pages(out_path)
    if pages is None:
        logger.info(f"PDF saved => {out_path}")
    else:
        logger.info(f"PDF saved => {out_path} ({pages} pages)")
    return out_path

