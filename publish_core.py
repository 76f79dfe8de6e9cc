# -*- coding: utf-8 -*-
"""
Report publisher core
- ReportSubmission: validated metadata for one report
- Scanner: pending report files in the staging directory
- Relocator: move a report to reports/<category>/<YYYY-MM>/<filename>
- Indexer: load research.html, prepend a card to the grid, write it back

The prompt layer lives in prompter.py and the git step in vcs.py; this module
has no interactive or version-control dependencies.
"""

from __future__ import annotations

import datetime as dt
import errno
import logging
from dataclasses import dataclass
from enum import Enum
from html import escape
from pathlib import Path
from typing import Dict, Iterable, List

from bs4 import BeautifulSoup, NavigableString
from bs4.builder import ParserRejectedMarkup
from pydantic import BaseModel, ConfigDict, Field, field_validator

from common_utils import display_date, display_label, year_month

scan_logger = logging.getLogger("publisher.scan")
move_logger = logging.getLogger("publisher.move")
index_logger = logging.getLogger("publisher.index")


# ---------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------
class PublishError(Exception):
    """Base class for publisher errors. Missing files surface as OSError."""


class IndexParseError(PublishError, ValueError):
    """The index document could not be decoded or parsed."""


class StructuralError(PublishError, LookupError):
    """The index document lacks the card container."""


class VCSError(PublishError, RuntimeError):
    """A git command failed."""

    def __init__(self, command: List[str], detail: str = ""):
        self.command = list(command)
        self.detail = (detail or "").strip()
        msg = f"git {' '.join(self.command)} failed"
        if self.detail:
            msg += f": {self.detail}"
        super().__init__(msg)


class PromptAborted(PublishError):
    """The operator closed or interrupted the input before all answers were given."""


# ---------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------
class Category(str, Enum):
    MACRO = "macro"
    EQUITY = "equity"
    CRYPTO = "crypto"
    STRATEGY = "strategy"

    @property
    def label(self) -> str:
        return display_label(self.value)


@dataclass(frozen=True)
class CategoryStyle:
    css_class: str
    accent: str


CATEGORY_STYLES: Dict[Category, CategoryStyle] = {
    Category.MACRO: CategoryStyle("macro", "var(--accent)"),
    Category.EQUITY: CategoryStyle("equity", "var(--accent-purple)"),
    Category.CRYPTO: CategoryStyle("crypto", "var(--accent-blue)"),
    Category.STRATEGY: CategoryStyle("strategy", "var(--accent-amber)"),
}

_unstyled = set(Category) - set(CATEGORY_STYLES)
if _unstyled:
    raise RuntimeError(f"categories without a card style: {sorted(c.value for c in _unstyled)}")


def category_style(category: Category | str) -> CategoryStyle:
    """Return the card style for ``category``. Unknown values raise ValueError."""
    return CATEGORY_STYLES[Category(category)]


# ---------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------
class ReportSubmission(BaseModel):
    """Metadata for one report, validated before any file is touched."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    category: Category
    date: dt.date
    excerpt: str = Field(..., min_length=1)
    read_time: str = "5 min read"

    @field_validator("title", "excerpt", "read_time", mode="before")
    @classmethod
    def _strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    # filename is kept verbatim, it must match the staged file exactly
    @field_validator("filename")
    @classmethod
    def _bare_filename(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("filename is required")
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("filename must be a plain file name inside the staging directory")
        return v

    @property
    def year_month(self) -> str:
        return year_month(self.date)

    @property
    def display_date(self) -> str:
        return display_date(self.date)


# ---------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------
def scan_reports(
    staging_dir: Path,
    extensions: Iterable[str] = (".html",),
    exclude: Iterable[str] = ("README.md",),
) -> List[str]:
    """
    List pending report files directly inside ``staging_dir``.

    Only regular files whose name ends with one of ``extensions`` and is not
    in ``exclude`` are returned, in directory listing order.  Sub-directories
    (the already published category trees) are skipped.

    Raises:
        OSError: If the staging directory is missing or unreadable.
    """
    exts = tuple(extensions)
    skip = set(exclude)
    found: List[str] = []
    for entry in Path(staging_dir).iterdir():
        if not entry.is_file():
            continue
        if entry.name in skip or not entry.name.endswith(exts):
            continue
        found.append(entry.name)
    scan_logger.info("scan %s: %d pending report(s)", staging_dir, len(found))
    return found


# ---------------------------------------------------------------------
# Relocator
# ---------------------------------------------------------------------
def destination_for(submission: ReportSubmission, staging_dir: Path) -> Path:
    return Path(staging_dir) / submission.category.value / submission.year_month / submission.filename


def relocate_report(submission: ReportSubmission, staging_dir: Path) -> Path:
    """
    Move the submitted file into its ``<category>/<YYYY-MM>`` directory.

    The destination directory is created if needed and an existing file at
    the destination is overwritten.  A failed move is not rolled back.

    Returns:
        Path of the relocated report.

    Raises:
        OSError: Source missing or destination not writable.
    """
    source = Path(staging_dir) / submission.filename
    target = destination_for(submission, staging_dir)
    if not source.is_file():
        raise FileNotFoundError(errno.ENOENT, "report file not found", str(source))
    target.parent.mkdir(parents=True, exist_ok=True)
    move_logger.info("move %s -> %s", source, target)
    source.replace(target)
    return target


# ---------------------------------------------------------------------
# Indexer
# ---------------------------------------------------------------------
CARD_TEMPLATE = """<a href="{href}" class="research-card" data-category="{category}">
    <div class="card-image">
        <svg class="card-image-pattern" viewBox="0 0 100 100" preserveAspectRatio="none">
            <rect width="100%" height="100%" fill="url(#grid1)" />
        </svg>
        <span class="card-image-icon">📄</span>
    </div>
    <div class="card-content">
        <div class="card-meta">
            <span class="card-category {style_class}" style="color: {accent}">{label}</span>
            <span class="card-date">{date}</span>
        </div>
        <h3 class="card-title">{title}</h3>
        <p class="card-excerpt">{excerpt}</p>
        <div class="card-footer">
            <span class="card-read-time">{read_time}</span>
            <span class="card-arrow">→</span>
        </div>
    </div>
</a>"""


def render_card(submission: ReportSubmission, href: str) -> str:
    """Return the card markup for ``submission`` linking to ``href``."""
    style = category_style(submission.category)
    return CARD_TEMPLATE.format(
        href=escape(href, quote=True),
        category=escape(submission.category.value, quote=True),
        style_class=escape(style.css_class, quote=True),
        accent=escape(style.accent, quote=True),
        label=escape(submission.category.label),
        date=escape(submission.display_date),
        title=escape(submission.title),
        excerpt=escape(submission.excerpt),
        read_time=escape(submission.read_time),
    )


def load_index(index_path: Path) -> BeautifulSoup:
    """
    Read and parse the index document.

    Raises:
        OSError: The file is missing or unreadable.
        IndexParseError: The file is not UTF-8 text or the parser rejects it.
    """
    path = Path(index_path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise IndexParseError(f"{path}: not valid UTF-8 ({e})") from e
    try:
        return BeautifulSoup(text, "html.parser")
    except ParserRejectedMarkup as e:
        raise IndexParseError(f"{path}: {e}") from e


def add_card(
    soup: BeautifulSoup,
    submission: ReportSubmission,
    href: str,
    container_id: str = "researchGrid",
) -> BeautifulSoup:
    """
    Prepend a card for ``submission`` to the container and return the document.

    Raises:
        StructuralError: No element with ``container_id`` exists.
    """
    container = soup.find(id=container_id)
    if container is None:
        raise StructuralError(f"index document has no element with id '{container_id}'")
    card = BeautifulSoup(render_card(submission, href), "html.parser").find("a")
    container.insert(0, card.extract())
    container.insert(1, NavigableString("\n"))
    index_logger.info("card added to #%s: %s", container_id, href)
    return soup


def save_index(soup: BeautifulSoup, index_path: Path) -> None:
    Path(index_path).write_text(str(soup), encoding="utf-8")


def update_index(
    index_path: Path,
    submission: ReportSubmission,
    href: str,
    container_id: str = "researchGrid",
) -> None:
    """Load, add the card and save; the document is only written after a successful insert."""
    soup = load_index(index_path)
    soup = add_card(soup, submission, href, container_id)
    save_index(soup, index_path)


def list_cards(soup: BeautifulSoup, container_id: str = "researchGrid") -> List:
    """Return the card anchors directly inside the container, newest first."""
    container = soup.find(id=container_id)
    if container is None:
        raise StructuralError(f"index document has no element with id '{container_id}'")
    return container.find_all("a", class_="research-card", recursive=False)
