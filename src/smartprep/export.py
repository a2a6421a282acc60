"""Export generated sets as printable Markdown study sheets."""
import re
from pathlib import Path
from typing import Optional

from smartprep.models import DocumentFile, FlashcardItem, GeneratedContent, MCQItem, QAItem


def safe_filename(name: str, max_len: int = 180) -> str:
    """Make a string safe for use as a filename."""
    if not name:
        return "Study_Set"
    s = str(name).strip()
    s = re.sub(r"\s+", "_", s)
    s = re.sub(r'[\\/:"*?<>|]+', "_", s)
    return s[:max_len] or "Study_Set"


def option_letter(index: int) -> str:
    return chr(ord("A") + index)


def _render_item(number: int, item) -> list:
    if isinstance(item, MCQItem):
        lines = [f"### Q{number}. {item.question}", ""]
        for i, opt in enumerate(item.options):
            mark = " (correct)" if opt == item.correct_answer else ""
            lines.append(f"- **{option_letter(i)}.** {opt}{mark}")
        if item.explanation:
            lines += ["", f"*Explanation:* {item.explanation}"]
        return lines
    if isinstance(item, QAItem):
        lines = [f"### Q{number}. {item.question}", "", f"**Model Answer:** {item.answer}"]
        if item.points:
            lines.append("")
            lines += [f"- {p}" for p in item.points]
        return lines
    if isinstance(item, FlashcardItem):
        return [f"### Card {number}", "", f"**Front:** {item.front}", "", f"**Back:** {item.back}"]
    raise TypeError(f"Unsupported item: {type(item).__name__}")


def render_markdown(generation: GeneratedContent, document: Optional[DocumentFile] = None) -> str:
    source = document.name if document else generation.file_id
    lines = [
        f"# {generation.type.label} Set",
        "",
        f"Source: {source}  ",
        f"Difficulty: {generation.difficulty.value}  ",
        f"Created: {generation.created_at[:10]}",
        "",
    ]
    for number, item in enumerate(generation.items, 1):
        lines += _render_item(number, item)
        lines.append("")
    return "\n".join(lines)


def export_generation(generation: GeneratedContent, out_dir: str,
                      document: Optional[DocumentFile] = None) -> Path:
    """Write the set to <out_dir>/<name>.md and return the path."""
    base = Path(document.name).stem if document else generation.id
    stem = safe_filename(f"{base}_{generation.type.value}_{generation.created_at[:10]}")
    path = Path(out_dir) / f"{stem}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_markdown(generation, document), encoding="utf-8")
    return path
