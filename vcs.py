# -*- coding: utf-8 -*-
"""
Version-control step of a publish run.

After the report has been moved and the index rewritten, the working tree is
committed and, when a remote exists, pushed.  This step is best effort: git
failures are logged and reported through :class:`VcsResult`, never raised, so
the already published files stay in place and the run still completes.

Git is driven through ``subprocess`` like the other pipeline helpers; the
runner is injectable so tests can script git's answers.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from publish_core import VCSError

logger = logging.getLogger("publisher.vcs")

NO_REMOTE_HINT = 'Run "git remote add origin <url>" and "git push -u origin main" to push.'


class PublishOutcome(str, Enum):
    PUSHED = "published-and-pushed"
    LOCAL_ONLY = "published-local-only"
    VCS_WARNING = "published-with-vcs-warning"


@dataclass(frozen=True)
class VcsResult:
    outcome: PublishOutcome
    message: str
    error: Optional[VCSError] = None

    @property
    def pushed(self) -> bool:
        return self.outcome is PublishOutcome.PUSHED


class GitClient:
    """Thin wrapper running ``git`` in one working tree."""

    def __init__(self, repo_dir: Path | str = ".", runner: Callable = subprocess.run):
        self.repo_dir = Path(repo_dir)
        self.runner = runner

    def _git(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        env = os.environ.copy()
        env.setdefault("PYTHONIOENCODING", "utf-8")
        try:
            cp = self.runner(
                ["git", *args],
                cwd=str(self.repo_dir),
                encoding="utf-8",
                errors="replace",
                check=False,
                capture_output=True,
                text=True,
                env=env,
            )
        except OSError as exc:
            # git not installed or repo_dir missing
            raise VCSError(list(args), str(exc)) from exc
        if check and cp.returncode != 0:
            raise VCSError(list(args), cp.stderr or cp.stdout)
        return cp

    def is_repo(self) -> bool:
        cp = self._git("rev-parse", "--is-inside-work-tree", check=False)
        return cp.returncode == 0 and (cp.stdout or "").strip() == "true"

    def init(self) -> None:
        self._git("init")

    def add_all(self) -> None:
        self._git("add", ".")

    def commit(self, message: str) -> None:
        self._git("commit", "-m", message)

    def remotes(self) -> List[str]:
        cp = self._git("remote")
        return [line.strip() for line in (cp.stdout or "").splitlines() if line.strip()]

    def push(self) -> None:
        self._git("push")


def commit_message(title: str, template: str = "Add report: {title}") -> str:
    return template.replace("{title}", title)


def publish_changes(
    title: str,
    repo_dir: Path | str = ".",
    push: bool = True,
    message_template: str = "Add report: {title}",
    client: Optional[GitClient] = None,
) -> VcsResult:
    """
    Stage, commit and (when a remote exists) push the working tree.

    Args:
        title: Report title embedded in the commit message.
        repo_dir: Working tree to commit.
        push: Push after committing when a remote is configured.
        message_template: Commit message with a ``{title}`` placeholder.
        client: Git client to use, built from ``repo_dir`` when omitted.

    Returns:
        VcsResult: pushed, committed locally only, or failed with a warning.
    """
    client = client or GitClient(repo_dir)
    try:
        if not client.is_repo():
            client.init()
            logger.info("Initialized git repository in %s", client.repo_dir)

        client.add_all()
        client.commit(commit_message(title, message_template))

        remotes = client.remotes()
        if not remotes:
            msg = f"No remote repository configured. Changes committed locally. {NO_REMOTE_HINT}"
            logger.warning(msg)
            return VcsResult(PublishOutcome.LOCAL_ONLY, msg)
        if not push:
            msg = "Push disabled. Changes committed locally."
            logger.warning(msg)
            return VcsResult(PublishOutcome.LOCAL_ONLY, msg)

        client.push()
        msg = f"Changes pushed ({', '.join(remotes)})."
        logger.info(msg)
        return VcsResult(PublishOutcome.PUSHED, msg)
    except VCSError as exc:
        logger.error("Git error: %s", exc)
        return VcsResult(PublishOutcome.VCS_WARNING, str(exc), exc)
