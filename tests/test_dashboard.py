# tests/test_dashboard.py
from smartprep.dashboard import format_date, format_size_kb, get_dashboard_stats, get_type_color
from smartprep.generations import add_generation
from smartprep.ingest import RawUpload, upload_file
from smartprep.models import ContentType, Difficulty, FlashcardItem, GeneratedContent, MCQItem


def test_stats_empty_store(store):
    stats = get_dashboard_stats(store)
    assert stats["total_uploads"] == 0
    assert stats["generated_sets"] == 0
    assert stats["total_items"] == 0
    assert all(v == 0 for v in stats["sets_by_type"].values())


def test_stats_counts_files_sets_and_items(store):
    upload_file(store, RawUpload("a.txt", "text/plain", b"a"), delay=0)
    add_generation(store, GeneratedContent(
        id="g1", file_id="x", type=ContentType.FLASHCARD, difficulty=Difficulty.EASY,
        created_at="2024-01-01T00:00:00",
        items=(FlashcardItem(front="a", back="b"), FlashcardItem(front="c", back="d")),
    ))
    add_generation(store, GeneratedContent(
        id="g2", file_id="x", type=ContentType.MCQ, difficulty=Difficulty.EASY,
        created_at="2024-01-02T00:00:00",
        items=(MCQItem(question="q", options=["a", "b", "c", "d"], correct_answer="a"),),
    ))
    stats = get_dashboard_stats(store)
    assert stats["total_uploads"] == 1
    assert stats["generated_sets"] == 2
    assert stats["total_items"] == 3
    assert stats["sets_by_type"][ContentType.FLASHCARD] == 1
    assert stats["sets_by_type"][ContentType.MCQ] == 1


def test_format_size_kb():
    assert format_size_kb(2048) == "2.0 KB"
    assert format_size_kb(100) == "0.1 KB"


def test_format_date():
    assert format_date("2024-05-01T10:20:30.123456") == "2024-05-01"
    assert format_date("not a date") == "not a date"


def test_type_colors_distinct():
    colors = {get_type_color(t) for t in ContentType}
    assert len(colors) == len(ContentType)
