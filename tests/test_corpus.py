import json
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest
from presse.corpus import (
    CorpusError,
    build_corpus,
    clean_article,
    load_corpus,
    parse_article,
    parse_date,
    sort_raw_records,
)
from presse.monitoring import BAD_DATE, INVALID_RECORD, SKIPPED_FILE, BuildMonitor
from presse.text import ELLIPSIS

PARIS = ZoneInfo("Europe/Paris")


def _record(**overrides):
    record = {
        "date": "2025-03-10T08:00:00Z",
        "screen_name": "lemonde.fr",
        "text": "Article du jour.",
        "likes": 3,
        "reposts": 1,
        "avatar_url": "https://cdn.bsky.app/a.jpg",
        "publication_id": "at://did:plc:abc/app.bsky.feed.post/3kxyz",
    }
    record.update(overrides)
    return record


def _write(path, data):
    with open(path, "w", encoding="utf-8") as f:
        if isinstance(data, str):
            f.write(data)
        else:
            json.dump(data, f)


@pytest.fixture
def monitor():
    return BuildMonitor()


# ── parse_date ────────────────────────────────────────────────

class TestParseDate:
    def test_plain_date_is_local_midnight(self):
        dt = parse_date("2025-03-10", PARIS)
        assert dt.date() == date(2025, 3, 10)
        assert dt.tzinfo is PARIS

    def test_utc_instant_converted(self):
        dt = parse_date("2025-03-10T23:30:00Z", PARIS)
        assert dt.date() == date(2025, 3, 11)
        assert dt.hour == 0

    def test_fractional_seconds(self):
        dt = parse_date("2025-03-10T12:00:00.000Z", timezone.utc)
        assert dt == datetime(2025, 3, 10, 12, tzinfo=timezone.utc)

    def test_offset_kept_as_instant(self):
        dt = parse_date("2025-07-01T10:00:00+02:00", PARIS)
        assert dt.hour == 10

    @pytest.mark.parametrize("value", [None, "", "pas une date", "2025-13-45", 12])
    def test_invalid(self, value):
        assert parse_date(value, PARIS) is None


# ── load_corpus ───────────────────────────────────────────────

class TestLoadCorpus:
    def test_concatenates_in_name_order(self, tmp_path, monitor):
        _write(tmp_path / "2025-03-11.json", [_record(text="b")])
        _write(tmp_path / "2025-03-10.json", [_record(text="a"), _record(text="a2")])
        records, report = load_corpus(str(tmp_path), monitor)
        assert [r["text"] for r in records] == ["a", "a2", "b"]
        assert report.files == 2
        assert report.records == 3

    def test_skips_bad_files(self, tmp_path, monitor):
        _write(tmp_path / "a.json", [_record()])
        _write(tmp_path / "b.json", "{invalid json")
        _write(tmp_path / "c.json", {"not": "a list"})
        _write(tmp_path / "notes.txt", "ignored")
        records, report = load_corpus(str(tmp_path), monitor)
        assert len(records) == 1
        assert report.files == 3
        assert report.skipped_files == 2
        assert report.processed_files == 1
        assert monitor.get_count(SKIPPED_FILE) == 2

    def test_empty_directory(self, tmp_path):
        records, report = load_corpus(str(tmp_path))
        assert records == []
        assert report.files == 0

    def test_missing_directory_raises(self, tmp_path):
        with pytest.raises(CorpusError):
            load_corpus(str(tmp_path / "absent"))


# ── parse_article ─────────────────────────────────────────────

class TestParseArticle:
    def test_valid_record(self, monitor):
        article = parse_article(_record(), PARIS, monitor)
        assert article.screen_name == "lemonde.fr"
        assert article.date == "2025-03-10T08:00:00Z"
        assert article.published_at.tzinfo is PARIS
        assert article.engagement == 5

    def test_missing_counts_default_to_zero(self, monitor):
        article = parse_article({"date": "2025-03-10", "text": "x"}, PARIS, monitor)
        assert article.likes == 0
        assert article.reposts == 0
        assert article.screen_name == ""

    def test_counts_coerced(self, monitor):
        article = parse_article(_record(likes="12", reposts=-4), PARIS, monitor)
        assert article.likes == 12
        assert article.reposts == 0

    def test_bad_date_skipped_and_counted(self, monitor):
        assert parse_article(_record(date="hier"), PARIS, monitor) is None
        assert monitor.get_count(BAD_DATE) == 1

    def test_non_dict_record(self, monitor):
        assert parse_article(["pas", "un", "dict"], PARIS, monitor) is None
        assert monitor.get_count(INVALID_RECORD) == 1


# ── clean_article ─────────────────────────────────────────────

class TestCleanArticle:
    def test_urls_extracted_before_truncation(self):
        raw = "a" * 250 + " https://example.com/long?utm_source=bsky"
        article = parse_article(_record(text=raw), PARIS)
        cleaned = clean_article(article)
        assert cleaned.text == "a" * 197 + ELLIPSIS
        assert cleaned.urls == ("https://example.com/long",)

    def test_metadata_preserved(self):
        article = parse_article(_record(text="Ã©tÃ©."), PARIS)
        cleaned = clean_article(article)
        assert cleaned.text == "été."
        assert cleaned.publication_id == article.publication_id
        assert cleaned.likes == 3

    def test_url_cache_used(self):
        cache = {"https://bit.ly/x": {"resolved": "https://lefigaro.fr/y", "status": 200}}
        article = parse_article(_record(text="Lire https://bit.ly/x"), PARIS)
        assert clean_article(article, cache).urls == ("https://lefigaro.fr/y",)

    def test_to_dict_omits_empty_urls(self):
        cleaned = clean_article(parse_article(_record(), PARIS))
        assert "urls" not in cleaned.to_dict()
        assert cleaned.to_dict()["date"] == "2025-03-10T08:00:00Z"


# ── build_corpus / sort_raw_records ───────────────────────────

class TestBuildCorpus:
    def test_sorted_and_bad_dates_dropped(self, monitor):
        records = [
            _record(date="2025-03-12", text="c"),
            _record(date="nope", text="x"),
            _record(date="2025-03-10", text="a"),
            _record(date="2025-03-12", text="d"),
        ]
        articles = build_corpus(records, PARIS, monitor=monitor)
        assert [a.text for a in articles] == ["a…", "c…", "d…"]
        assert monitor.get_count(BAD_DATE) == 1

    def test_sort_raw_records(self, monitor):
        records = [_record(date="2025-03-12"), "junk", _record(date="2025-03-01"), _record(date="")]
        ordered = sort_raw_records(records, PARIS, monitor)
        assert [r["date"] for r in ordered] == ["2025-03-01", "2025-03-12"]
        assert monitor.get_count(INVALID_RECORD) == 1
        assert monitor.get_count(BAD_DATE) == 1
