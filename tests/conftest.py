from __future__ import annotations

import json

import pytest


@pytest.fixture
def snapshot_data():
    return {
        "relations": [
            {"uid": "r-up", "name": "up", "implied": [{"target": "r-down", "direction": "reverse"}]},
            {"uid": "r-down", "name": "down"},
            {"uid": "r-next", "name": "next", "implied": [{"target": "r-prev", "direction": "reverse"}]},
            {"uid": "r-prev", "name": "prev"},
        ],
        "documents": {
            "book/Book.md": [],
            "book/Ch1.md": [{"relation": "up", "to": "book/Book.md"}, {"relation": "next", "to": "book/Ch2.md"}],
            "book/Ch2.md": [{"relation": "up", "to": "book/Book.md"}, {"relation": "next", "to": "book/Ch3.md"}],
            "book/Ch3.md": [{"relation": "up", "to": "book/Book.md"}],
            "book/Appendix.md": [
                {"relation": "up", "to": "book/Book.md"},
                {"relation": "up", "to": "missing.md"},
            ],
        },
    }


@pytest.fixture
def snapshot_file(tmp_path, snapshot_data):
    p = tmp_path / "corpus.json"
    p.write_text(json.dumps(snapshot_data), encoding="utf-8")
    return p
