"""Document upload, text extraction and the persisted document list."""
import io
import json
import logging
import mimetypes
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from smartprep.exceptions import FileProcessingError
from smartprep.models import DocumentFile, FileStatus
from smartprep.storage import FILES_KEY, Storage, load_records, prepend_record

logger = logging.getLogger(__name__)

UPLOAD_DELAY = 1.5
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

# Stand-in for real extraction of non-text uploads.
PLACEHOLDER_TEXT = (
    "This is simulated extracted text for demonstration. In a real environment, "
    "this would be parsed content from the PDF or DOCX file using backend libraries. "
    "SmartPrep allows you to study efficiently by generating questions from this content."
)


@dataclass(frozen=True)
class RawUpload:
    name: str
    mime_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_text(self) -> bool:
        return self.mime_type.startswith("text/")

    @classmethod
    def from_path(cls, file_path: str) -> "RawUpload":
        path = Path(file_path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, mime_type=mime_type or "application/octet-stream",
                   data=path.read_bytes())


def decode_text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class TextExtractor:
    def extract(self, upload: RawUpload) -> str:
        raise NotImplementedError


class PlaceholderExtractor(TextExtractor):
    """Decodes text uploads; everything else gets PLACEHOLDER_TEXT."""

    def extract(self, upload: RawUpload) -> str:
        if upload.is_text:
            return decode_text(upload.data)
        return PLACEHOLDER_TEXT


class LibraryExtractor(TextExtractor):
    """Real extraction for common document formats."""

    def extract(self, upload: RawUpload) -> str:
        suffix = Path(upload.name).suffix.lower()
        try:
            if suffix == ".pdf":
                from PyPDF2 import PdfReader
                reader = PdfReader(io.BytesIO(upload.data))
                return "\n".join(page.extract_text() or "" for page in reader.pages)
            elif suffix == ".docx":
                from docx import Document
                doc = Document(io.BytesIO(upload.data))
                return "\n".join(p.text for p in doc.paragraphs)
            elif suffix in (".html", ".htm"):
                from bs4 import BeautifulSoup
                return BeautifulSoup(decode_text(upload.data), "html.parser").get_text()
            elif suffix == ".json":
                data = json.loads(decode_text(upload.data))
                return json.dumps(data, indent=2)
            elif suffix in (".yaml", ".yml"):
                import yaml
                data = yaml.safe_load(decode_text(upload.data))
                return yaml.safe_dump(data, sort_keys=False)
        except Exception as e:
            logger.error("Text extraction failed for %s: %s", upload.name, e, exc_info=True)
            raise FileProcessingError(f"Failed to extract text from {upload.name}.") from e
        if upload.is_text:
            return decode_text(upload.data)
        return PLACEHOLDER_TEXT


EXTRACTORS = {
    "placeholder": PlaceholderExtractor,
    "library": LibraryExtractor,
}


def get_extractor(name: str = "placeholder") -> TextExtractor:
    try:
        return EXTRACTORS[name]()
    except KeyError:
        raise ValueError(f"Unknown extractor: {name}") from None


def list_files(store: Storage) -> list:
    """All uploaded documents, newest first."""
    return load_records(store, FILES_KEY, DocumentFile.from_dict)


def get_file(store: Storage, file_id: str) -> Optional[DocumentFile]:
    return next((f for f in list_files(store) if f.id == file_id), None)


def add_file(store: Storage, document: DocumentFile) -> None:
    prepend_record(store, FILES_KEY, document, DocumentFile.from_dict)


def delete_file(store: Storage, file_id: str) -> None:
    """Remove a document by id. Unknown ids leave the list untouched."""
    files = list_files(store)
    remaining = [f for f in files if f.id != file_id]
    if len(remaining) == len(files):
        return
    store.save(FILES_KEY, [f.to_dict() for f in remaining])


def upload_file(store: Storage, upload: RawUpload, extractor: Optional[TextExtractor] = None,
                delay: float = UPLOAD_DELAY) -> DocumentFile:
    """Extract text from an upload, record it and prepend it to the document list."""
    if upload.size > MAX_FILE_SIZE:
        raise FileProcessingError("File too large (max 10MB).")
    if delay:
        time.sleep(delay)
    content = (extractor or PlaceholderExtractor()).extract(upload)
    document = DocumentFile(
        id=f"doc_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}",
        name=upload.name,
        size=upload.size,
        type=upload.mime_type,
        upload_date=datetime.now().isoformat(),
        status=FileStatus.EXTRACTED,
        content=content,
    )
    add_file(store, document)
    logger.info("Uploaded %s (%d bytes, %d chars)", document.name, document.size, len(content))
    return document
