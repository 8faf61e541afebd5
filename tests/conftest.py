"""Fake browser shared by the fetcher and CLI tests."""

from pathlib import Path

import pytest
from PyPDF2 import PdfWriter


class FakePage:
    def __init__(self, title="Example Article", fail_pdf=False, pdf_bytes=None):
        self._title = title
        self.fail_pdf = fail_pdf
        self.pdf_bytes = pdf_bytes
        self.calls = []
        self.removed = []

    def goto(self, url, wait_until):
        self.calls.append(("goto", url, wait_until))

    def title(self):
        self.calls.append(("title",))
        return self._title

    def evaluate(self, expression, arg=None):
        self.calls.append(("evaluate", arg))
        self.removed.append(arg)
        return 0

    def pdf(self, path, format):
        self.calls.append(("pdf", path, format))
        if self.fail_pdf:
            raise OSError("disk full")
        if self.pdf_bytes is not None:
            with open(path, "wb") as f:
                f.write(self.pdf_bytes)
            return
        writer = PdfWriter()
        writer.add_blank_page(width=595, height=842)
        with open(path, "wb") as f:
            writer.write(f)


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.closed = False
        self.config = None

    def new_page(self):
        return self.page

    def close(self):
        self.closed = True


class FakeLauncher:
    """Callable standing in for ChromiumBrowser; remembers every browser it made."""

    def __init__(self, **page_kwargs):
        self.page_kwargs = page_kwargs
        self.browsers = []

    def __call__(self, config):
        browser = FakeBrowser(FakePage(**self.page_kwargs))
        browser.config = config
        self.browsers.append(browser)
        return browser


@pytest.fixture
def out_dir(tmp_path, monkeypatch):
    """An output directory; cwd is restored after the test since validate() chdirs."""
    monkeypatch.chdir(tmp_path)
    d = tmp_path / "out"
    d.mkdir()
    return d


@pytest.fixture
def launcher():
    return FakeLauncher()
