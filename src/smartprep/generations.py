"""Generated study sets: creation and the persisted generation list."""
import logging
import time
import uuid
from datetime import datetime
from typing import Optional

from smartprep.exceptions import GenerationError
from smartprep.models import DocumentFile, GeneratedContent, GenerationConfig
from smartprep.storage import GEN_KEY, Storage, load_records, prepend_record

logger = logging.getLogger(__name__)


def list_generations(store: Storage) -> list:
    """All generated sets, newest first."""
    return load_records(store, GEN_KEY, GeneratedContent.from_dict)


def get_generation(store: Storage, generation_id: str) -> Optional[GeneratedContent]:
    return next((g for g in list_generations(store) if g.id == generation_id), None)


def add_generation(store: Storage, generation: GeneratedContent) -> None:
    prepend_record(store, GEN_KEY, generation, GeneratedContent.from_dict)


def clear_generations(store: Storage) -> None:
    store.remove(GEN_KEY)


def create_generation(store: Storage, client, document: DocumentFile,
                      config: GenerationConfig) -> GeneratedContent:
    """Generate items from a document's text and save them as the newest set."""
    if not document.content:
        raise GenerationError("No content available to generate from.")
    items = client.generate(
        document.content,
        config.content_type,
        config.count,
        config.difficulty,
        config.language,
    )
    generation = GeneratedContent(
        id=f"gen_{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}",
        file_id=document.id,
        type=config.content_type,
        difficulty=config.difficulty,
        created_at=datetime.now().isoformat(),
        items=tuple(items),
    )
    add_generation(store, generation)
    logger.info("Saved generation %s with %d items", generation.id, len(generation.items))
    return generation


def count_items(generations: list) -> int:
    return sum(len(g.items) for g in generations)
