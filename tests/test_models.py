"""Tests for data model classes."""
import pytest

from smartprep.models import (
    ContentType, Difficulty, DocumentFile, FileStatus, FlashcardItem, GeneratedContent,
    GenerationConfig, MCQItem, QAItem, User, UserRole, expected_item_tag, item_from_dict,
)


def test_user_defaults():
    u = User(id="u_1", name="sam", email="sam@example.com")
    assert u.role == UserRole.STUDENT
    assert u.avatar is None


def test_user_dict_round_trip():
    u = User(id="u_1", name="ada", email="ada@x.com", role=UserRole.ADMIN, avatar="http://a")
    data = u.to_dict()
    assert data["role"] == "ADMIN"
    assert User.from_dict(data) == u


def test_document_uses_camel_case_fields():
    d = DocumentFile(id="doc_1", name="n.txt", size=10, type="text/plain",
                     upload_date="2024-05-01T10:00:00", status=FileStatus.EXTRACTED, content="hi")
    data = d.to_dict()
    assert data["uploadDate"] == "2024-05-01T10:00:00"
    assert data["status"] == "EXTRACTED"
    assert DocumentFile.from_dict(data) == d


def test_document_without_content_omits_field():
    d = DocumentFile(id="doc_1", name="n.txt", size=10, type="text/plain", upload_date="2024")
    assert "content" not in d.to_dict()
    assert d.status == FileStatus.UPLOADED


def test_item_tags_are_fixed():
    assert MCQItem(question="q", options=["a"], correct_answer="a").type == "MCQ"
    assert QAItem(question="q", answer="a").type == "QA"
    assert FlashcardItem(front="f", back="b").type == "FLASHCARD"


def test_item_from_dict_mcq():
    item = item_from_dict({
        "type": "MCQ", "question": "2+2?", "options": ["3", "4", "5", "6"],
        "correctAnswer": "4", "explanation": "Arithmetic",
    })
    assert isinstance(item, MCQItem)
    assert item.correct_answer == "4"
    assert len(item.options) == 4


def test_item_from_dict_mcq_correct_answer_not_validated():
    item = item_from_dict({
        "type": "MCQ", "question": "q", "options": ["a", "b"], "correctAnswer": "z",
    })
    assert item.correct_answer == "z"
    assert item.explanation == ""


def test_item_from_dict_rejects_non_string_explanation():
    with pytest.raises(ValueError):
        item_from_dict({
            "type": "MCQ", "question": "q", "options": ["a", "b"], "correctAnswer": "a",
            "explanation": ["not", "text"],
        })


def test_item_from_dict_qa_with_points():
    item = item_from_dict({"type": "QA", "question": "Why?", "answer": "Because", "points": ["one", "two"]})
    assert isinstance(item, QAItem)
    assert item.points == ["one", "two"]


def test_item_from_dict_flashcard():
    item = item_from_dict({"type": "FLASHCARD", "front": "Mitosis", "back": "Cell division"})
    assert item == FlashcardItem(front="Mitosis", back="Cell division")


def test_item_from_dict_unknown_tag():
    with pytest.raises(ValueError):
        item_from_dict({"type": "ESSAY", "question": "q"})


def test_item_from_dict_missing_field():
    with pytest.raises(ValueError):
        item_from_dict({"type": "FLASHCARD", "front": "only front"})


def test_item_from_dict_bad_options():
    with pytest.raises(ValueError):
        item_from_dict({"type": "MCQ", "question": "q", "options": "abcd", "correctAnswer": "a"})


def test_expected_item_tag():
    assert expected_item_tag(ContentType.MCQ) == "MCQ"
    assert expected_item_tag(ContentType.SHORT_QA) == "QA"
    assert expected_item_tag(ContentType.LONG_QA) == "QA"
    assert expected_item_tag(ContentType.FLASHCARD) == "FLASHCARD"


def test_generated_content_round_trip():
    g = GeneratedContent(
        id="gen_1", file_id="doc_1", type=ContentType.FLASHCARD, difficulty=Difficulty.MEDIUM,
        created_at="2024-05-01T10:00:00",
        items=(FlashcardItem(front="a", back="b"), FlashcardItem(front="c", back="d")),
    )
    data = g.to_dict()
    assert data["fileId"] == "doc_1"
    assert data["items"][0] == {"type": "FLASHCARD", "front": "a", "back": "b"}
    assert GeneratedContent.from_dict(data) == g


def test_content_type_label():
    assert ContentType.SHORT_QA.label == "SHORT QA"


def test_generation_config_defaults():
    c = GenerationConfig()
    assert c.content_type == ContentType.MCQ
    assert c.count == 5
    assert c.difficulty == Difficulty.MEDIUM
    assert c.language == "English"
