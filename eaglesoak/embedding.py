"""
Query embedding through the Hugging Face Inference API.

The provider's response envelope has changed between versions, so the payload
is matched against an ordered table of shapes (``EMBEDDING_SHAPES``) and the
first rule that recognises it wins.
"""

from numbers import Real
from typing import Any, Callable, List, Optional, Sequence, Tuple

import requests

from .config import Settings, get_settings
from .errors import EmbeddingError
from .logger import get_logger

logger = get_logger(__name__)


def _is_vector(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(x, Real) and not isinstance(x, bool) for x in value)
    )


def _bare_vector(payload: Any) -> Optional[List[float]]:
    return payload if _is_vector(payload) else None


def _embedding_field(payload: Any) -> Optional[List[float]]:
    if isinstance(payload, dict) and _is_vector(payload.get("embedding")):
        return payload["embedding"]
    return None


def _batch_data(payload: Any) -> Optional[List[float]]:
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, list) and data and _is_vector(data[0]):
        return data[0]
    return None


def _nested_batch(payload: Any) -> Optional[List[float]]:
    if isinstance(payload, list) and payload and _is_vector(payload[0]):
        return payload[0]
    return None


EMBEDDING_SHAPES: Sequence[Tuple[str, Callable[[Any], Optional[List[float]]]]] = (
    ("vector", _bare_vector),
    ("embedding", _embedding_field),
    ("data", _batch_data),
    ("batch", _nested_batch),
)


def parse_embedding_response(payload: Any) -> List[float]:
    for shape, rule in EMBEDDING_SHAPES:
        vector = rule(payload)
        if vector is not None:
            logger.debug("Embedding response matched shape %r (%d dims)", shape, len(vector))
            return [float(x) for x in vector]
    raise EmbeddingError("Unexpected embeddings response shape")


class HuggingFaceEmbedder:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        settings = settings or get_settings()
        self.model_name = settings.embedding_model
        self.url = settings.hf_inference_url.format(model=self.model_name)
        self.token = settings.hf_token
        self.timeout = settings.embedding_timeout
        self.session = session or requests.Session()

    def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise EmbeddingError("Empty text cannot be embedded")
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = self.session.post(
                self.url,
                headers=headers,
                json={"model": self.model_name, "inputs": text},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise EmbeddingError(f"Embedding provider unreachable: {exc}") from exc
        if not resp.ok:
            raise EmbeddingError(f"Embedding provider error: {resp.status_code} {resp.text}")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise EmbeddingError("Embedding provider returned a non-JSON body") from exc
        return parse_embedding_response(payload)
