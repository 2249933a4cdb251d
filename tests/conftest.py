import pytest

from eaglesoak.config import Settings


@pytest.fixture
def settings():
    return Settings(
        HF_TOKEN="hf-test",
        QROG_API_KEY="qrog-test",
        EMBEDDING_DIMS=3,
        RAG_MATCH_K=4,
        LLM_MAX_RETRIES=0,
    )
