"""
Fixed settings for the article fetcher, plus the immutable run configuration.
"""

from dataclasses import dataclass
from pathlib import Path

# ---------------------------
# Configuration
# ---------------------------

# Sent with every request; override with -u if the site starts blocking it
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Ubuntu Chromium/63.0.3239.84 "
    "Chrome/63.0.3239.84 Safari/537.36"
)

# Page chrome stripped from the DOM before printing
REMOVE_SELECTORS = (
    ".layout-header-wrap",       # top site header
    ".article-fixed-wrap",       # floating side bar
    ".layout-footer-wrap",       # site footer
    ".widget-operation-bottom",  # like / share buttons
    ".article-comment-block",    # comments
)

VIEWPORT = {"width": 1920, "height": 1080}

PDF_FORMAT = "A4"

# Only macOS gets ~/Downloads as the implicit output directory
DESKTOP_PLATFORM = "darwin"

# Environment fallbacks for the optional flags
ENV_OUTPUT_DIR = "INFOQ_PDF_OUTPUT_DIR"
ENV_USER_AGENT = "INFOQ_PDF_USER_AGENT"


def default_output_dir() -> Path:
    return Path.home() / "Downloads"


@dataclass(frozen=True)
class Config:
    source: str
    output_dir: Path
    user_agent: str = DEFAULT_USER_AGENT
