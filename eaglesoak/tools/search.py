from typing import Any, Dict, List, Optional

from elasticsearch import Elasticsearch

from ..config import Settings, get_settings
from ..errors import RetrievalError
from ..es_client import get_es
from ..models import ContextDocument


class VectorStore:
    """kNN similarity search over the property embedding index."""

    def __init__(self, es: Optional[Elasticsearch] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.es = es or get_es(settings)
        self.index = settings.elasticsearch_index
        self.dims = settings.embedding_dims

    def search(self, vector: List[float], k: int) -> List[ContextDocument]:
        if len(vector) != self.dims:
            raise RetrievalError(f"Query vector has {len(vector)} dims, index expects {self.dims}")
        body: Dict[str, Any] = {
            "size": k,
            "knn": {
                "field": "embedding",
                "query_vector": vector,
                "k": k,
                "num_candidates": max(20, k * 5),
            },
            "_source": ["property_id", "metadata"],
        }
        try:
            res = self.es.search(index=self.index, body=body)
        except Exception as exc:
            raise RetrievalError(f"Similarity search failed: {exc}") from exc

        out: List[ContextDocument] = []
        for hit in res.get("hits", {}).get("hits", []):
            source = hit.get("_source") or {}
            out.append(ContextDocument(
                property_id=source.get("property_id") or hit.get("_id"),
                metadata=source.get("metadata") or {},
                score=hit.get("_score"),
            ))
        return out
