from typing import Optional

from elasticsearch import Elasticsearch

from .config import Settings, get_settings


def get_es(settings: Optional[Settings] = None) -> Elasticsearch:
    settings = settings or get_settings()
    return Elasticsearch(settings.elasticsearch_url, request_timeout=settings.search_timeout)


def ensure_index(es: Optional[Elasticsearch] = None):
    settings = get_settings()
    es = es or get_es()
    index = settings.elasticsearch_index
    if es.indices.exists(index=index):
        return index
    mapping = {
        "settings": {
            "number_of_shards": 1,
            "number_of_replicas": 0
        },
        "mappings": {
            "properties": {
                "property_id": {"type": "keyword"},
                # free-form bag written by the indexer; stored, not searched
                "metadata": {"type": "object", "enabled": False},
                "embedding": {
                    "type": "dense_vector",
                    "dims": settings.embedding_dims,
                    "index": True,
                    "similarity": "cosine"
                },
                "created_at": {"type": "date"}
            }
        }
    }
    es.indices.create(index=index, body=mapping)
    return index
