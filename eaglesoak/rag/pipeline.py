from typing import Any, List, Optional, Protocol

from ..config import Settings, get_settings
from ..errors import EmbeddingError, GenerationError, QueryValidationError
from ..llm import normalize_generation
from ..logger import get_logger
from ..models import ContextDocument, PropertyRecord
from .context import assemble_context, build_prompt
from .state import RagSearchRequest, RagSearchResponse, StageResult

logger = get_logger(__name__)


class Embedder(Protocol):
    def embed(self, text: str) -> List[float]: ...


class SimilaritySearch(Protocol):
    def search(self, vector: List[float], k: int) -> List[ContextDocument]: ...


class Catalog(Protocol):
    def fetch_property(self, property_id: str) -> Optional[PropertyRecord]: ...


class Generator(Protocol):
    def generate(self, prompt: str) -> Any: ...


class RagPipeline:
    """
    Answer one property question.

    Embedding and generation failures abort the request; retrieval and
    property lookup failures degrade to empty context and the request goes on.
    """

    def __init__(
        self,
        embedder: Embedder,
        store: SimilaritySearch,
        catalog: Catalog,
        generator: Generator,
        settings: Optional[Settings] = None,
    ):
        self.embedder = embedder
        self.store = store
        self.catalog = catalog
        self.generator = generator
        self.settings = settings or get_settings()

    def validate(self, request: RagSearchRequest) -> str:
        query = (request.query or "").strip()
        if not query:
            raise QueryValidationError("Query is required")
        return query

    def embed_query(self, query: str) -> List[float]:
        try:
            return self.embedder.embed(query)
        except EmbeddingError:
            logger.exception("Embedding failed")
            raise
        except Exception as exc:
            logger.exception("Embedding failed")
            raise EmbeddingError(str(exc)) from exc

    def retrieve(self, vector: List[float], k: int) -> StageResult[List[ContextDocument]]:
        try:
            docs = self.store.search(vector, k)
        except Exception as exc:
            logger.warning("Vector retrieval failed, continuing without documents: %s", exc)
            return StageResult(value=[], degraded=True, reason=str(exc))
        if not docs:
            logger.info("Vector retrieval returned no documents")
        return StageResult(value=list(docs or []))

    def lookup_property(self, property_id: Optional[str]) -> StageResult[Optional[PropertyRecord]]:
        if not property_id:
            return StageResult(value=None)
        try:
            record = self.catalog.fetch_property(property_id)
        except Exception as exc:
            logger.warning("Property lookup failed for %s: %s", property_id, exc)
            return StageResult(value=None, degraded=True, reason=str(exc))
        if record is None:
            logger.warning("Property not found: %s", property_id)
            return StageResult(value=None, degraded=True, reason="not_found")
        return StageResult(value=record)

    def generate(self, prompt: str) -> Any:
        try:
            return self.generator.generate(prompt)
        except GenerationError:
            logger.exception("Qrog call failed")
            raise
        except Exception as exc:
            logger.exception("Qrog call failed")
            raise GenerationError(str(exc)) from exc

    def prepare(self, request: RagSearchRequest):
        """Run every stage up to the prompt. Returns ``(prompt, context_parts, retrieved)``."""
        query = self.validate(request)
        match_k = request.match_k or self.settings.rag_match_k

        vector = self.embed_query(query)
        retrieved = self.retrieve(vector, match_k)
        prop = self.lookup_property(request.property_id)

        context_parts = assemble_context(
            prop.value,
            retrieved.value,
            request.conversation,
            match_k,
            history_turns=self.settings.history_turns,
            default_currency=self.settings.default_currency,
        )
        prompt = build_prompt(query, context_parts, word_limit=self.settings.answer_word_limit)
        logger.debug(
            "Prompt assembled: %d context lines, %d docs retrieved (degraded=%s), property context=%s",
            len(context_parts), len(retrieved.value), retrieved.degraded, prop.value is not None,
        )
        return prompt, context_parts, retrieved.value

    def run(self, request: RagSearchRequest) -> RagSearchResponse:
        prompt, context_parts, retrieved = self.prepare(request)
        raw = self.generate(prompt)
        return RagSearchResponse(
            answer=normalize_generation(raw),
            context_summary=context_parts[: self.settings.summary_lines],
            retrieved_count=len(retrieved),
        )
