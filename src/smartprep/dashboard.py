"""Dashboard statistics and display helpers."""
from datetime import datetime

from smartprep.generations import count_items, list_generations
from smartprep.ingest import list_files
from smartprep.models import ContentType
from smartprep.storage import Storage


def get_type_color(content_type: ContentType) -> str:
    return {
        ContentType.MCQ: "cyan",
        ContentType.SHORT_QA: "green",
        ContentType.LONG_QA: "dark_orange",
        ContentType.FLASHCARD: "magenta",
    }.get(content_type, "white")


def format_size_kb(size: int) -> str:
    return f"{size / 1024:.1f} KB"


def format_date(iso_timestamp: str) -> str:
    try:
        return datetime.fromisoformat(iso_timestamp).strftime("%Y-%m-%d")
    except ValueError:
        return iso_timestamp


def get_dashboard_stats(store: Storage) -> dict:
    files = list_files(store)
    generations = list_generations(store)
    by_type = {t: 0 for t in ContentType}
    for g in generations:
        by_type[g.type] += 1
    return {
        "total_uploads": len(files),
        "generated_sets": len(generations),
        "total_items": count_items(generations),
        "sets_by_type": by_type,
    }
