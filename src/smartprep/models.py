"""Data classes for the study material domain model."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class UserRole(str, Enum):
    STUDENT = "STUDENT"
    ADMIN = "ADMIN"


class ContentType(str, Enum):
    MCQ = "MCQ"
    SHORT_QA = "SHORT_QA"
    LONG_QA = "LONG_QA"
    FLASHCARD = "FLASHCARD"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class Difficulty(str, Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class FileStatus(str, Enum):
    UPLOADED = "UPLOADED"
    EXTRACTED = "EXTRACTED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: UserRole = UserRole.STUDENT
    avatar: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "name": self.name, "email": self.email, "role": self.role.value}
        if self.avatar is not None:
            data["avatar"] = self.avatar
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            role=UserRole(data.get("role", UserRole.STUDENT.value)),
            avatar=data.get("avatar"),
        )


@dataclass(frozen=True)
class DocumentFile:
    id: str
    name: str
    size: int
    type: str
    upload_date: str
    status: FileStatus = FileStatus.UPLOADED
    content: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "type": self.type,
            "uploadDate": self.upload_date,
            "status": self.status.value,
        }
        if self.content is not None:
            data["content"] = self.content
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentFile":
        return cls(
            id=data["id"],
            name=data["name"],
            size=int(data["size"]),
            type=data["type"],
            upload_date=data["uploadDate"],
            status=FileStatus(data.get("status", FileStatus.UPLOADED.value)),
            content=data.get("content"),
        )


# --- Generated items: one variant per item kind ---

@dataclass(frozen=True)
class MCQItem:
    question: str
    options: list
    correct_answer: str
    explanation: str = ""
    type: str = field(default="MCQ", init=False)

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class QAItem:
    question: str
    answer: str
    points: Optional[list] = None
    type: str = field(default="QA", init=False)

    def to_dict(self) -> dict:
        data = {"type": self.type, "question": self.question, "answer": self.answer}
        if self.points is not None:
            data["points"] = list(self.points)
        return data


@dataclass(frozen=True)
class FlashcardItem:
    front: str
    back: str
    type: str = field(default="FLASHCARD", init=False)

    def to_dict(self) -> dict:
        return {"type": self.type, "front": self.front, "back": self.back}


GeneratedItem = Union[MCQItem, QAItem, FlashcardItem]

ITEM_TAGS = {
    ContentType.MCQ: "MCQ",
    ContentType.SHORT_QA: "QA",
    ContentType.LONG_QA: "QA",
    ContentType.FLASHCARD: "FLASHCARD",
}


def expected_item_tag(content_type: ContentType) -> str:
    """Item tag that every item of a set with this content type must carry."""
    return ITEM_TAGS[ContentType(content_type)]


def _require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"Item field '{key}' must be a string")
    return value


def _str_list(value, key: str) -> list:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"Item field '{key}' must be a list of strings")
    return list(value)


def item_from_dict(data: dict) -> GeneratedItem:
    """Build the item variant named by the 'type' tag. Raises ValueError on bad input."""
    if not isinstance(data, dict):
        raise ValueError("Item must be an object")
    tag = data.get("type")
    if tag == "MCQ":
        return MCQItem(
            question=_require_str(data, "question"),
            options=_str_list(data.get("options"), "options"),
            correct_answer=_require_str(data, "correctAnswer"),
            explanation=_require_str(data, "explanation") if data.get("explanation") is not None else "",
        )
    if tag == "QA":
        points = data.get("points")
        return QAItem(
            question=_require_str(data, "question"),
            answer=_require_str(data, "answer"),
            points=_str_list(points, "points") if points is not None else None,
        )
    if tag == "FLASHCARD":
        return FlashcardItem(front=_require_str(data, "front"), back=_require_str(data, "back"))
    raise ValueError(f"Unknown item type: {tag!r}")


@dataclass(frozen=True)
class GeneratedContent:
    id: str
    file_id: str
    type: ContentType
    difficulty: Difficulty
    created_at: str
    items: tuple = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "fileId": self.file_id,
            "type": self.type.value,
            "difficulty": self.difficulty.value,
            "createdAt": self.created_at,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GeneratedContent":
        return cls(
            id=data["id"],
            file_id=data["fileId"],
            type=ContentType(data["type"]),
            difficulty=Difficulty(data["difficulty"]),
            created_at=data["createdAt"],
            items=tuple(item_from_dict(i) for i in data.get("items", [])),
        )


@dataclass(frozen=True)
class GenerationConfig:
    content_type: ContentType = ContentType.MCQ
    count: int = 5
    difficulty: Difficulty = Difficulty.MEDIUM
    language: str = "English"
