import pytest
import requests

from eaglesoak.embedding import HuggingFaceEmbedder, parse_embedding_response
from eaglesoak.errors import EmbeddingError


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response


def test_parse_bare_vector():
    assert parse_embedding_response([0.1, 0.2, 3]) == [0.1, 0.2, 3.0]


def test_parse_embedding_field():
    assert parse_embedding_response({"embedding": [1, 2]}) == [1.0, 2.0]


def test_parse_batch_data_takes_first_vector():
    assert parse_embedding_response({"data": [[0.5, 0.25], [9, 9]]}) == [0.5, 0.25]


def test_parse_prefers_embedding_over_data():
    payload = {"embedding": [1.0], "data": [[2.0]]}
    assert parse_embedding_response(payload) == [1.0]


def test_parse_nested_batch_takes_first_vector():
    assert parse_embedding_response([[0.1, 0.2], [0.3, 0.4]]) == [0.1, 0.2]


@pytest.mark.parametrize("payload", [
    None,
    [],
    ["a", "b"],
    [True, False],
    [[], [0.1]],
    {"embedding": "nope"},
    {"data": []},
    {"data": [0.1, 0.2]},
    {"vectors": [0.1]},
])
def test_parse_rejects_unknown_shapes(payload):
    with pytest.raises(EmbeddingError):
        parse_embedding_response(payload)


def test_embed_posts_model_and_text(settings):
    session = FakeSession(FakeResponse([0.1, 0.2, 0.3]))
    embedder = HuggingFaceEmbedder(settings, session=session)
    assert embedder.embed("3 bed duplex in Lekki") == [0.1, 0.2, 0.3]
    call = session.calls[0]
    assert settings.embedding_model in call["url"]
    assert call["json"] == {"model": settings.embedding_model, "inputs": "3 bed duplex in Lekki"}
    assert call["headers"]["Authorization"] == "Bearer hf-test"
    assert call["timeout"] == settings.embedding_timeout


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_embed_rejects_blank_text_without_calling_provider(settings, text):
    session = FakeSession(FakeResponse([0.1]))
    with pytest.raises(EmbeddingError):
        HuggingFaceEmbedder(settings, session=session).embed(text)
    assert session.calls == []


def test_embed_wraps_transport_errors(settings):
    session = FakeSession(error=requests.ConnectionError("down"))
    with pytest.raises(EmbeddingError) as exc:
        HuggingFaceEmbedder(settings, session=session).embed("hello")
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


def test_embed_timeout_is_an_embedding_failure(settings):
    session = FakeSession(error=requests.Timeout("slow"))
    with pytest.raises(EmbeddingError):
        HuggingFaceEmbedder(settings, session=session).embed("hello")


def test_embed_non_success_status(settings):
    session = FakeSession(FakeResponse({"error": "loading"}, status_code=503, text="loading"))
    with pytest.raises(EmbeddingError, match="503"):
        HuggingFaceEmbedder(settings, session=session).embed("hello")


def test_embed_non_json_body(settings):
    session = FakeSession(FakeResponse(ValueError("bad json")))
    with pytest.raises(EmbeddingError):
        HuggingFaceEmbedder(settings, session=session).embed("hello")
