#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
publish_report.py - publish one pending research report to the static site.

Steps:

1. Scan the staging directory (``site/reports/``) for pending ``.html`` reports.
2. Ask the operator for the report's metadata.
3. Move the report to ``site/reports/<category>/<YYYY-MM>/<filename>``.
4. Prepend a card for it to the grid in ``site/research.html``.
5. Commit the change and push it when a remote is configured.

Usage:
    python publish_report.py [--config publisher.json]

Exit status is 0 on completion, when there is nothing to publish, and for
every outcome of the git step (git failures are reported but not fatal).
Errors while scanning, prompting, moving or indexing exit with 1.  Nothing
is rolled back: if indexing fails, the report stays where step 3 moved it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from common_utils import relative_href
from config_schema import ConfigSchema, load_config
from logging_setup import setup_logger
from prompter import Reader, Writer, collect_submission
from publish_core import (
    PromptAborted,
    PublishError,
    ReportSubmission,
    relocate_report,
    scan_reports,
    update_index,
)
from vcs import GitClient, PublishOutcome, VcsResult, publish_changes

logger = logging.getLogger("publisher")


@dataclass(frozen=True)
class PublishResult:
    submission: ReportSubmission
    source: Path
    destination: Path
    href: str
    vcs: VcsResult

    @property
    def outcome(self) -> PublishOutcome:
        return self.vcs.outcome


def _resolve(path: str, base_dir: Optional[Path]) -> Path:
    p = Path(path)
    if p.is_absolute() or base_dir is None:
        return p
    return Path(base_dir) / p


def run(
    cfg: ConfigSchema,
    read: Optional[Reader] = None,
    write: Writer = print,
    base_dir: Optional[Path] = None,
    git: Optional[GitClient] = None,
) -> Optional[PublishResult]:
    """
    Run one publish.

    Args:
        cfg: Loaded configuration.
        read: Answer source for the prompts, ``input`` when omitted.
        write: Output sink for banners and prompts.
        base_dir: Directory the configured relative paths resolve against,
            the working directory when omitted.
        git: Git client for the commit step, built from ``cfg.vcs.repo_dir``
            when omitted.

    Returns:
        PublishResult, or None when no report is pending.
    """
    staging = cfg.paths.staging_path(base_dir)
    index_path = cfg.paths.index_path(base_dir)

    write("==[1/5] Scanning for new reports==")
    pending = scan_reports(staging, cfg.scan.extensions, cfg.scan.exclude)
    if not pending:
        write(f"No new reports found in {staging}")
        logger.info("nothing to publish in %s", staging)
        return None

    write("==[2/5] Report details==")
    submission = collect_submission(
        pending, read or input, write, default_read_time=cfg.prompt.default_read_time
    )

    source = staging / submission.filename
    write(f"==[3/5] Moving {submission.filename} to {submission.category.value}/{submission.year_month}==")
    destination = relocate_report(submission, staging)
    href = relative_href(destination, index_path.parent)

    write(f"==[4/5] Updating {index_path.name}==")
    update_index(index_path, submission, href, cfg.index.container_id)

    write("==[5/5] Committing changes==")
    if cfg.vcs.enabled:
        vcs_result = publish_changes(
            submission.title,
            repo_dir=_resolve(cfg.vcs.repo_dir, base_dir),
            push=cfg.vcs.push,
            message_template=cfg.vcs.commit_message,
            client=git,
        )
    else:
        vcs_result = VcsResult(PublishOutcome.LOCAL_ONLY, "Version control disabled. Changes were not committed.")
        logger.warning(vcs_result.message)

    logger.info("published %s -> %s (%s)", submission.filename, href, vcs_result.outcome.value)
    write("Done.")
    return PublishResult(submission, source, destination, href, vcs_result)


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Publish a pending research report to the site")
    ap.add_argument("--config", default=None, help="Config JSON (default: $REPORT_PUBLISHER_CONFIG or publisher.json)")
    args = ap.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except ValidationError as exc:
        print(f"[CONFIG ERROR] {exc}", file=sys.stderr)
        return 1

    setup_logger("publisher", cfg.paths.log)

    try:
        run(cfg)
    except PromptAborted as exc:
        logger.error("Aborted, nothing was changed: %s", exc)
        return 1
    except (OSError, PublishError) as exc:
        logger.error("Publish failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
