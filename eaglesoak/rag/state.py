from typing import Any, Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field


T = TypeVar("T")


class ConversationTurn(BaseModel):
    role: str
    content: str


class RagSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = None
    property_id: Optional[str] = Field(default=None, alias="propertyId")
    conversation: List[ConversationTurn] = Field(default_factory=list)
    match_k: Optional[int] = Field(default=None, ge=1, alias="matchK")


class RagSearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    answer: str
    context_summary: List[str] = Field(default_factory=list, alias="contextSummary")
    retrieved_count: int = Field(default=0, alias="retrievedCount")


class StageResult(BaseModel, Generic[T]):
    """Outcome of a non-fatal stage: a value, possibly empty because the stage degraded."""

    value: T
    degraded: bool = False
    reason: Optional[str] = None


class QrogProxyRequest(BaseModel):
    prompt: Optional[str] = None
    messages: Optional[List[Dict[str, Any]]] = None
    model: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
