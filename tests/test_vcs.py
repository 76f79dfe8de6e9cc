"""
Tests for the git step, driven through a scripted stand-in for subprocess.run.
"""

import logging

from vcs import GitClient, PublishOutcome, commit_message, publish_changes


def _publish(runner, tmp_path, **kw):
    return publish_changes("Q3 Outlook", client=GitClient(tmp_path, runner=runner), **kw)


def test_commit_and_push(fake_git, tmp_path):
    git = fake_git(remotes="origin\n")
    res = _publish(git, tmp_path)
    assert res.outcome is PublishOutcome.PUSHED
    assert res.pushed
    assert git.commands() == ["rev-parse", "add", "commit", "remote", "push"]
    assert ["commit", "-m", "Add report: Q3 Outlook"] in git.calls
    assert ["add", "."] in git.calls


def test_no_remote_is_local_only(fake_git, tmp_path, caplog):
    git = fake_git(remotes="")
    with caplog.at_level(logging.WARNING, logger="publisher.vcs"):
        res = _publish(git, tmp_path)
    assert res.outcome is PublishOutcome.LOCAL_ONLY
    assert "push" not in git.commands()
    assert "No remote repository configured" in res.message
    assert "git remote add origin" in res.message
    assert any("No remote repository configured" in r.getMessage() for r in caplog.records)


def test_initializes_missing_repository(fake_git, tmp_path):
    git = fake_git(repo=False, remotes="origin\n")
    res = _publish(git, tmp_path)
    assert git.commands() == ["rev-parse", "init", "add", "commit", "remote", "push"]
    assert res.outcome is PublishOutcome.PUSHED


def test_push_disabled(fake_git, tmp_path):
    git = fake_git(remotes="origin\n")
    res = _publish(git, tmp_path, push=False)
    assert res.outcome is PublishOutcome.LOCAL_ONLY
    assert "push" not in git.commands()


def test_commit_failure_is_a_warning(fake_git, tmp_path, caplog):
    git = fake_git(remotes="origin\n", fail="commit")
    with caplog.at_level(logging.ERROR, logger="publisher.vcs"):
        res = _publish(git, tmp_path)
    assert res.outcome is PublishOutcome.VCS_WARNING
    assert res.error.command[0] == "commit"
    assert "commit failed" in res.message
    assert git.commands() == ["rev-parse", "add", "commit"]
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_push_failure_is_a_warning(fake_git, tmp_path):
    res = _publish(fake_git(remotes="origin\n", fail="push"), tmp_path)
    assert res.outcome is PublishOutcome.VCS_WARNING
    assert res.error.command == ["push"]


def test_init_failure_is_a_warning(fake_git, tmp_path):
    res = _publish(fake_git(repo=False, fail="init"), tmp_path)
    assert res.outcome is PublishOutcome.VCS_WARNING


def test_git_not_installed(fake_git, tmp_path):
    res = _publish(fake_git(missing=True), tmp_path)
    assert res.outcome is PublishOutcome.VCS_WARNING
    assert "No such file" in res.message


def test_remotes_parsing(fake_git, tmp_path):
    client = GitClient(tmp_path, runner=fake_git(remotes="origin\nbackup\n\n"))
    assert client.remotes() == ["origin", "backup"]


def test_commit_message_template():
    assert commit_message("Q3 {draft}", "Report: {title}") == "Report: Q3 {draft}"
    assert commit_message("Q3") == "Add report: Q3"
