import json
import os
from datetime import datetime, timezone

import pytest
from presse.models import CleanedArticle
from presse.storage import (
    dumps_minified,
    log_size_reduction,
    shard_by_month,
    shard_filename,
    write_combined,
    write_json,
    write_month_shards,
)


def _article(month, day, text="Texte.", urls=()):
    return CleanedArticle(
        date=f"2025-{month:02d}-{day:02d}",
        published_at=datetime(2025, month, day, 9, tzinfo=timezone.utc),
        screen_name="lemonde.fr",
        text=text,
        likes=1,
        urls=urls,
    )


@pytest.fixture
def articles():
    return [
        _article(3, 30),
        _article(3, 31, urls=("https://a.com/x",)),
        _article(4, 2),
        _article(1, 15),
    ]


# ── sharding ──────────────────────────────────────────────────

class TestShardByMonth:
    def test_months_ascending(self, articles):
        shards = shard_by_month(articles)
        assert list(shards) == ["2025-01", "2025-03", "2025-04"]

    def test_article_order_kept(self, articles):
        shards = shard_by_month(articles)
        assert [a.date for a in shards["2025-03"]] == ["2025-03-30", "2025-03-31"]

    def test_filename(self):
        assert shard_filename("2025-03") == "data-2025-03.json"


# ── writing ───────────────────────────────────────────────────

class TestWrite:
    def test_write_json_minified(self, tmp_path):
        path = str(tmp_path / "out.json")
        size = write_json(path, [{"a": 1, "b": "é"}])
        with open(path, encoding="utf-8") as f:
            content = f.read()
        assert content == '[{"a":1,"b":"é"}]'
        assert size == os.path.getsize(path)

    def test_write_json_pretty(self, tmp_path):
        path = str(tmp_path / "out.json")
        write_json(path, [1], minify=False)
        with open(path, encoding="utf-8") as f:
            assert f.read() == "[\n  1\n]"

    def test_no_tmp_file_left(self, tmp_path):
        write_json(str(tmp_path / "out.json"), {"k": "v"})
        assert os.listdir(tmp_path) == ["out.json"]

    def test_overwrites_existing(self, tmp_path):
        path = str(tmp_path / "out.json")
        write_json(path, [1, 2, 3])
        write_json(path, [4])
        with open(path) as f:
            assert json.load(f) == [4]

    def test_month_shards(self, tmp_path, articles):
        written = write_month_shards(str(tmp_path), shard_by_month(articles))
        assert [s.filename for s in written] == [
            "data-2025-01.json", "data-2025-03.json", "data-2025-04.json",
        ]
        assert [s.count for s in written] == [1, 2, 1]
        with open(tmp_path / "data-2025-03.json", encoding="utf-8") as f:
            data = json.load(f)
        assert "urls" not in data[0]
        assert data[1]["urls"] == ["https://a.com/x"]

    def test_combined(self, tmp_path, articles):
        write_combined(str(tmp_path), articles)
        with open(tmp_path / "data.json", encoding="utf-8") as f:
            assert len(json.load(f)) == 4


# ── size report ───────────────────────────────────────────────

class TestSizeReduction:
    def test_reduction_positive_when_smaller(self, articles):
        raw = [dict(a.to_dict(), padding="x" * 500) for a in articles]
        assert log_size_reduction(raw, articles) > 0

    def test_empty_input(self):
        assert log_size_reduction([], []) == 0.0

    def test_dumps_minified_keeps_unicode(self):
        assert dumps_minified({"t": "été"}) == '{"t":"été"}'
