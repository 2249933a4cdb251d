import json
from typing import Any, Dict, List, Optional

import requests

from .config import Settings, get_settings
from .errors import GenerationError
from .logger import get_logger

logger = get_logger(__name__)

NO_ANSWER = "No answer from LLM."


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False, default=str)


def normalize_generation(payload: Any) -> str:
    """
    Pull the answer text out of a Qrog response.

    Accepted shapes, in order: a bare string, ``{"output": ...}``,
    ``{"choices": [{"text": ...}]}``. Anything else is returned serialized.
    """
    if payload is None or payload == "":
        return NO_ANSWER
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        output = payload.get("output")
        if output:
            return _as_text(output)
        choices = payload.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict) and choices[0].get("text"):
            return _as_text(choices[0]["text"])
    return _as_text(payload)


class QrogClient:
    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        settings = settings or get_settings()
        self.endpoint = settings.qrog_endpoint
        self.api_key = settings.qrog_api_key
        self.model = settings.qrog_model
        self.max_tokens = settings.qrog_max_tokens
        self.temperature = settings.qrog_temperature
        self.timeout = settings.generation_timeout
        self.max_retries = settings.llm_max_retries
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(
        self,
        prompt: Optional[str] = None,
        messages: Optional[List[Dict[str, Any]]] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": model or self.model,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
        }
        # chat form wins when both are given
        if messages:
            payload["messages"] = messages
        else:
            payload["prompt"] = prompt
        return payload

    def forward(self, payload: Dict[str, Any]) -> requests.Response:
        """Send a prebuilt payload once and hand back the raw response."""
        return self.session.post(self.endpoint, headers=self._headers(), json=payload, timeout=self.timeout)

    def generate(self, prompt: str) -> Any:
        payload = self.build_payload(prompt=prompt)
        attempts = 1 + self.max_retries
        last_error: Optional[GenerationError] = None
        for attempt in range(1, attempts + 1):
            try:
                resp = self.forward(payload)
            except requests.RequestException as exc:
                last_error = GenerationError(f"Qrog request failed: {exc}")
                last_error.__cause__ = exc
            else:
                if resp.ok:
                    try:
                        return resp.json()
                    except ValueError:
                        return resp.text
                last_error = GenerationError(f"Qrog API error: {resp.status_code} {resp.text}")
                # client errors will not improve on retry
                if resp.status_code < 500:
                    break
            if attempt < attempts:
                logger.warning("Qrog attempt %d/%d failed: %s", attempt, attempts, last_error)
        raise last_error
