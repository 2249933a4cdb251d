from functools import lru_cache
from typing import Optional

from ..config import Settings, get_settings
from ..embedding import HuggingFaceEmbedder
from ..llm import QrogClient
from ..logger import get_logger
from ..tools.catalog import PropertyCatalog
from ..tools.search import VectorStore
from .pipeline import RagPipeline

logger = get_logger(__name__)


def build_pipeline(settings: Optional[Settings] = None) -> RagPipeline:
    settings = settings or get_settings()
    missing = settings.missing_credentials()
    if missing:
        logger.error("Missing one or more required environment variables: %s", ", ".join(missing))
    return RagPipeline(
        embedder=HuggingFaceEmbedder(settings),
        store=VectorStore(settings=settings),
        catalog=PropertyCatalog(),
        generator=QrogClient(settings),
        settings=settings,
    )


@lru_cache(maxsize=1)
def get_qrog_client() -> QrogClient:
    return QrogClient(get_settings())
