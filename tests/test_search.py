import pytest

from eaglesoak.config import Settings
from eaglesoak.errors import RetrievalError
from eaglesoak.es_client import ensure_index
from eaglesoak.tools.search import VectorStore


class FakeIndices:
    def __init__(self, exists=False):
        self.created = None
        self._exists = exists

    def exists(self, index):
        return self._exists

    def create(self, index, body):
        self.created = {"index": index, "body": body}
        self._exists = True
        return {"acknowledged": True}


class FakeES:
    def __init__(self, hits=None, error=None, exists=False):
        self.indices = FakeIndices(exists)
        self.hits = hits or []
        self.error = error
        self.searches = []

    def search(self, index, body):
        self.searches.append({"index": index, "body": body})
        if self.error:
            raise self.error
        return {"hits": {"hits": self.hits}}


def test_ensure_index_creates_mapping(monkeypatch):
    import eaglesoak.es_client as es_client
    monkeypatch.setattr(es_client, "get_settings", lambda: Settings(EMBEDDING_DIMS=384))
    fake = FakeES()
    assert ensure_index(fake) == "property_embeddings"
    props = fake.indices.created["body"]["mappings"]["properties"]
    assert props["embedding"]["type"] == "dense_vector"
    assert props["embedding"]["dims"] == 384
    assert props["property_id"]["type"] == "keyword"


def test_ensure_index_is_noop_when_present():
    fake = FakeES(exists=True)
    ensure_index(fake)
    assert fake.indices.created is None


def test_search_builds_knn_query_and_keeps_store_order(settings):
    hits = [
        {"_id": "e1", "_score": 0.9, "_source": {"property_id": "p1", "metadata": {"text": "A"}}},
        {"_id": "e2", "_score": 0.8, "_source": {"metadata": {"title": "B"}}},
    ]
    fake = FakeES(hits=hits)
    docs = VectorStore(fake, settings).search([0.1, 0.2, 0.3], 2)

    knn = fake.searches[0]["body"]["knn"]
    assert fake.searches[0]["index"] == settings.elasticsearch_index
    assert knn["field"] == "embedding" and knn["k"] == 2 and knn["num_candidates"] == 20
    assert [d.property_id for d in docs] == ["p1", "e2"]
    assert docs[0].metadata == {"text": "A"} and docs[0].score == 0.9


def test_search_empty_result(settings):
    assert VectorStore(FakeES(), settings).search([0.0, 0.0, 1.0], 4) == []


def test_dimension_mismatch_is_a_retrieval_error(settings):
    fake = FakeES()
    with pytest.raises(RetrievalError, match="dims"):
        VectorStore(fake, settings).search([0.1, 0.2], 4)
    assert fake.searches == []


def test_store_failure_is_wrapped(settings):
    with pytest.raises(RetrievalError):
        VectorStore(FakeES(error=ConnectionError("refused")), settings).search([1.0, 2.0, 3.0], 4)


def test_store_builds_client_from_injected_settings(monkeypatch):
    import eaglesoak.tools.search as search
    seen = {}

    def fake_get_es(settings=None):
        seen["settings"] = settings
        return FakeES()

    monkeypatch.setattr(search, "get_es", fake_get_es)
    custom = Settings(ELASTICSEARCH_URL="http://es.internal:9200", SEARCH_TIMEOUT=1.5, EMBEDDING_DIMS=3)
    VectorStore(settings=custom)
    assert seen["settings"] is custom


def test_get_es_uses_given_settings(monkeypatch):
    import eaglesoak.es_client as es_client
    captured = {}

    class RecordingES:
        def __init__(self, url, **kwargs):
            captured.update(url=url, **kwargs)

    monkeypatch.setattr(es_client, "Elasticsearch", RecordingES)
    es_client.get_es(Settings(ELASTICSEARCH_URL="http://es.internal:9200", SEARCH_TIMEOUT=1.5))
    assert captured == {"url": "http://es.internal:9200", "request_timeout": 1.5}
