from typing import Optional

import requests
import uvicorn
from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from eaglesoak.config import get_settings
from eaglesoak.db import init_db
from eaglesoak.errors import EmbeddingError, GenerationError, QueryValidationError
from eaglesoak.es_client import ensure_index
from eaglesoak.llm import QrogClient
from eaglesoak.logger import get_logger
from eaglesoak.rag.pipeline import RagPipeline
from eaglesoak.rag.services import build_pipeline, get_qrog_client
from eaglesoak.rag.state import QrogProxyRequest, RagSearchRequest


logger = get_logger("eaglesoak.api")

app = FastAPI(title="EaglesOak Realty Assistant API", version="0.1.0")

# The marketing site calls these endpoints from the browser
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@app.on_event("startup")
def on_startup():
    try:
        init_db()
    except Exception as e:
        logger.warning("[startup] DB init failed: %s", e)
    try:
        ensure_index()
    except Exception as e:
        logger.warning("[startup] ES index ensure failed: %s", e)
    try:
        app.state.pipeline = build_pipeline()
    except Exception as e:
        logger.error("[startup] Pipeline build failed: %s", e)


def get_pipeline(request: Request) -> Optional[RagPipeline]:
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        try:
            pipeline = build_pipeline()
        except Exception as e:
            logger.error("Pipeline build failed: %s", e)
            return None
        request.app.state.pipeline = pipeline
    return pipeline


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
    return _error("Invalid request body", 400)


@app.get("/health")
def health():
    settings = get_settings()
    return {
        "status": "ok",
        "elasticsearch_url": settings.elasticsearch_url,
        "elasticsearch_index": settings.elasticsearch_index,
        "embedding_model": settings.embedding_model,
        "qrog_model": settings.qrog_model,
    }


@app.post("/rag/search")
def rag_search(
    payload: Optional[RagSearchRequest] = Body(None),
    pipeline: Optional[RagPipeline] = Depends(get_pipeline),
):
    if payload is None:
        return _error("Missing request body", 400)
    if pipeline is None:
        return _error("Assistant unavailable", 500)
    try:
        result = pipeline.run(payload)
    except QueryValidationError as e:
        return _error(str(e), 400)
    except EmbeddingError:
        return _error("Embedding generation failed", 500)
    except GenerationError:
        return _error("LLM generation failed", 502)
    except Exception as e:
        logger.exception("aiRagSearch error")
        return _error(str(e) or "internal_error", 500)
    return result.model_dump(by_alias=True)


@app.post("/qrog")
def qrog_proxy(
    payload: Optional[QrogProxyRequest] = Body(None),
    client: QrogClient = Depends(get_qrog_client),
):
    if payload is None:
        return _error("Missing request body", 400)
    if not payload.prompt and not payload.messages:
        return _error("Provide prompt or messages", 400)
    body = client.build_payload(
        prompt=payload.prompt,
        messages=payload.messages,
        model=payload.model,
        max_tokens=payload.max_tokens,
        temperature=payload.temperature,
    )
    try:
        resp = client.forward(body)
    except requests.RequestException as e:
        logger.error("qrog proxy error: %s", e)
        return _error(str(e) or "qrog_error", 500)
    # Forward provider response verbatim
    return Response(content=resp.text, status_code=resp.status_code, media_type="application/json")


def run():
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
