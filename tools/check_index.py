# -*- coding: utf-8 -*-
"""
check_index.py - consistency check between research.html and the report tree.

Reports two kinds of drift:
  - cards whose href points to a file that does not exist
  - published reports (reports/<category>/<YYYY-MM>/*) that no card links to

Usage:
    python tools/check_index.py [--config publisher.json]
Exit 0 when consistent, 1 otherwise.
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from common_utils import relative_href
from config_schema import ConfigSchema, load_config
from publish_core import Category, PublishError, list_cards, load_index


def published_reports(staging: Path, extensions: List[str]) -> List[Path]:
    out: List[Path] = []
    for cat in Category:
        cat_dir = staging / cat.value
        if not cat_dir.is_dir():
            continue
        for month_dir in sorted(p for p in cat_dir.iterdir() if p.is_dir()):
            out += sorted(p for p in month_dir.iterdir() if p.is_file() and p.name.endswith(tuple(extensions)))
    return out


def check_index(cfg: ConfigSchema, base_dir: Optional[Path] = None) -> Dict[str, List[str]]:
    index_path = cfg.paths.index_path(base_dir)
    soup = load_index(index_path)
    cards = list_cards(soup, cfg.index.container_id)
    hrefs = [a.get("href", "") for a in cards]

    missing = [h for h in hrefs if not (index_path.parent / h).is_file()]
    linked = set(hrefs)
    unlisted = []
    for report in published_reports(cfg.paths.staging_path(base_dir), cfg.scan.extensions):
        rel = relative_href(report, index_path.parent)
        if rel not in linked:
            unlisted.append(rel)
    return {"cards": hrefs, "missing": missing, "unlisted": unlisted}


def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None)
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    try:
        res = check_index(cfg)
    except (OSError, PublishError) as e:
        print(f"[ERROR] {e}")
        return 1

    ok = True
    for h in res["missing"]:
        print(f"[WARN] card links to a missing file: {h}")
        ok = False
    for rel in res["unlisted"]:
        print(f"[WARN] report has no card: {rel}")
        ok = False

    if ok:
        print(f"[OK] {len(res['cards'])} card(s), index and reports agree")
        return 0
    return 1


if __name__ == "__main__":
    sys.exit(main())
