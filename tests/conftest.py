"""Shared fixtures: a throwaway site tree, scripted answers and a fake git."""

import subprocess

import pytest

from config_schema import ConfigSchema

INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>Research</title></head>
<body>
<main>
<div class="research-grid" id="researchGrid">
</div>
</main>
</body>
</html>
"""

EXISTING_CARD = """<a href="reports/{cat}/{ym}/{name}" class="research-card" data-category="{cat}">
<div class="card-content"><h3 class="card-title">{name}</h3></div>
</a>
"""


@pytest.fixture
def site(tmp_path):
    """tmp_path/site with an empty staging dir and an index page with an empty grid."""
    root = tmp_path / "site"
    (root / "reports").mkdir(parents=True)
    (root / "research.html").write_text(INDEX_HTML, encoding="utf-8")
    return root


@pytest.fixture
def staging(site):
    return site / "reports"


@pytest.fixture
def index_path(site):
    return site / "research.html"


@pytest.fixture
def cfg(tmp_path):
    return ConfigSchema(paths={"log": str(tmp_path / "logs" / "publish.log")})


def make_index(cards):
    grid = "".join(EXISTING_CARD.format(cat=c, ym=ym, name=n) for c, ym, n in cards)
    return INDEX_HTML.replace('<div class="research-grid" id="researchGrid">\n',
                              '<div class="research-grid" id="researchGrid">\n' + grid)


@pytest.fixture
def index_with_cards(index_path):
    def _write(cards):
        index_path.write_text(make_index(cards), encoding="utf-8")
        return index_path
    return _write


@pytest.fixture
def scripted():
    """Build an ``input`` replacement that replays answers, then behaves like a closed stdin."""
    def _make(*answers):
        it = iter(answers)
        prompts = []

        def _read(prompt=""):
            prompts.append(prompt)
            try:
                return next(it)
            except StopIteration:
                raise EOFError from None

        _read.prompts = prompts
        return _read
    return _make


class FakeGit:
    """Stands in for subprocess.run when the git client runs commands."""

    def __init__(self, remotes="", repo=True, fail=None, missing=False):
        self.remotes = remotes
        self.repo = repo
        self.fail = fail
        self.missing = missing
        self.calls = []

    def __call__(self, cmd, **kwargs):
        if self.missing:
            raise FileNotFoundError(2, "No such file or directory", "git")
        sub = cmd[1:]
        self.calls.append(sub)
        name = sub[0]
        if name == self.fail:
            return subprocess.CompletedProcess(cmd, 1, "", f"error: {name} failed\n")
        if name == "rev-parse":
            if self.repo:
                return subprocess.CompletedProcess(cmd, 0, "true\n", "")
            return subprocess.CompletedProcess(cmd, 128, "", "fatal: not a git repository\n")
        if name == "init":
            self.repo = True
        if name == "remote":
            return subprocess.CompletedProcess(cmd, 0, self.remotes, "")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    def commands(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def fake_git():
    return FakeGit
