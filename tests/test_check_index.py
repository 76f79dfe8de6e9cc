"""Tests for tools/check_index.py."""

import pytest

from publish_core import StructuralError
from tools.check_index import check_index, main


def _publish(staging, cat, ym, name):
    d = staging / cat / ym
    d.mkdir(parents=True, exist_ok=True)
    (d / name).write_text("report")


def test_consistent_site(cfg, tmp_path, staging, index_with_cards):
    index_with_cards([("macro", "2025-11", "a.html")])
    _publish(staging, "macro", "2025-11", "a.html")
    res = check_index(cfg, tmp_path)
    assert res["cards"] == ["reports/macro/2025-11/a.html"]
    assert res["missing"] == []
    assert res["unlisted"] == []


def test_card_without_file(cfg, tmp_path, index_with_cards):
    index_with_cards([("equity", "2025-10", "gone.html")])
    res = check_index(cfg, tmp_path)
    assert res["missing"] == ["reports/equity/2025-10/gone.html"]


def test_report_without_card(cfg, tmp_path, staging, index_with_cards):
    index_with_cards([])
    _publish(staging, "crypto", "2025-09", "orphan.html")
    (staging / "pending.html").write_text("not yet published")
    res = check_index(cfg, tmp_path)
    assert res["unlisted"] == ["reports/crypto/2025-09/orphan.html"]


def test_missing_container(cfg, tmp_path, index_path):
    index_path.write_text("<html><body></body></html>", encoding="utf-8")
    with pytest.raises(StructuralError):
        check_index(cfg, tmp_path)


def test_main_exit_codes(tmp_path, site, staging, index_with_cards, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    index_with_cards([("macro", "2025-11", "a.html")])
    cfg_arg = ["--config", str(tmp_path / "none.json")]
    assert main(cfg_arg) == 1
    assert "missing file" in capsys.readouterr().out
    _publish(staging, "macro", "2025-11", "a.html")
    assert main(cfg_arg) == 0
    assert "[OK]" in capsys.readouterr().out
