"""Common utility functions for the report publisher.

Small, dependency-free helpers shared by the prompt layer, the core publish
steps and the operator tools:

* :func:`parse_report_date` parses the ``YYYY-MM-DD`` answer given at the
  date prompt.
* :func:`year_month` derives the ``YYYY-MM`` directory name for a date.
* :func:`display_date` renders a date the way the listing page shows it
  (``Nov 29, 2025``).
* :func:`display_label` turns a category slug into its display label.
* :func:`relative_href` computes a forward-slash link from one directory to
  a file, as used in card ``href`` attributes.
"""

from __future__ import annotations

import datetime as dt
import os
from pathlib import Path

DATE_FORMAT = "%Y-%m-%d"

# Fixed English abbreviations so the listing does not depend on the locale.
_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def today_iso() -> str:
    return dt.date.today().strftime(DATE_FORMAT)


def parse_report_date(value: str) -> dt.date:
    """Parse a ``YYYY-MM-DD`` string into a calendar date.

    Args:
        value: Raw answer text.  Surrounding whitespace is ignored.

    Returns:
        The parsed :class:`datetime.date`.

    Raises:
        ValueError: If the text is not a valid calendar date in that form.
    """
    return dt.datetime.strptime((value or "").strip(), DATE_FORMAT).date()


def year_month(day: dt.date) -> str:
    """Return ``YYYY-MM`` with the month zero-padded to two digits."""
    return f"{day.year:04d}-{day.month:02d}"


def display_date(day: dt.date) -> str:
    """Return the human readable ``Mon D, YYYY`` form of ``day``."""
    return f"{_MONTH_ABBR[day.month - 1]} {day.day}, {day.year}"


def display_label(slug: str) -> str:
    """Capitalize the first character of ``slug`` and keep the rest as is."""
    return slug[:1].upper() + slug[1:]


def relative_href(target: Path, base_dir: Path) -> str:
    """Return the path of ``target`` relative to ``base_dir`` with ``/`` separators.

    Args:
        target: File the link points to.
        base_dir: Directory of the page containing the link.

    Returns:
        Relative link text, e.g. ``reports/macro/2025-11/q3-outlook.html``.
    """
    rel = os.path.relpath(Path(target).resolve(), Path(base_dir).resolve())
    return Path(rel).as_posix()
