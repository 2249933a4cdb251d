"""
Prompt assembly for the property assistant.

Everything here is pure: the same property record, documents and conversation
always produce the same lines and the same prompt.
"""

import json
from typing import Any, List, Optional, Sequence

from ..models import ContextDocument, PropertyRecord
from .prompts import ASSISTANT_NAME, OUTPUT_INSTRUCTIONS, SECTION_RULE, SYSTEM_PROMPT
from .state import ConversationTurn

HISTORY_TURNS = 6


def _fmt(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def property_fact_lines(prop: PropertyRecord, default_currency: str = "NGN") -> List[str]:
    lines: List[str] = []
    if prop.title:
        lines.append(f"Property Title: {prop.title}")
    if prop.description:
        lines.append(f"Description: {prop.description}")
    if prop.price is not None:
        lines.append(f"Price: {prop.currency or default_currency} {_fmt(prop.price)}")
    if prop.city or prop.district:
        lines.append("Location: " + ", ".join(p for p in (prop.city, prop.district) if p))
    if prop.bedrooms is not None:
        lines.append(f"Bedrooms: {prop.bedrooms}")
    if prop.bathrooms is not None:
        lines.append(f"Bathrooms: {prop.bathrooms}")
    if prop.sqft is not None:
        lines.append(f"Size (sqft): {_fmt(prop.sqft)}")
    if prop.amenities:
        lines.append(f"Amenities: {', '.join(prop.amenities)}")
    if prop.investment_index is not None:
        lines.append(f"Investment index: {_fmt(prop.investment_index)}")
    if prop.market_sentiment is not None:
        lines.append(f"Market sentiment: {_fmt(prop.market_sentiment)}")
    return lines


def document_snippet(doc: ContextDocument) -> str:
    meta = doc.metadata
    text = meta.get("text") or meta.get("content")
    if text:
        return str(text)
    raw = meta or doc.model_dump(exclude_none=True)
    return json.dumps(raw, ensure_ascii=False, default=str)


def history_lines(conversation: Sequence[ConversationTurn], turns: int = HISTORY_TURNS) -> List[str]:
    recent = list(conversation)[-turns:] if turns > 0 else []
    if not recent:
        return []
    lines = ["Conversation history:"]
    for turn in recent:
        speaker = "User" if turn.role == "user" else "Assistant"
        lines.append(f"{speaker}: {turn.content}")
    return lines


def assemble_context(
    prop: Optional[PropertyRecord],
    documents: Sequence[ContextDocument],
    conversation: Sequence[ConversationTurn],
    match_k: int,
    history_turns: int = HISTORY_TURNS,
    default_currency: str = "NGN",
) -> List[str]:
    """
    Build the context block in authority order: direct property facts, then
    retrieved documents (capped at ``match_k``), then recent conversation.
    """
    parts: List[str] = []
    if prop is not None:
        parts.extend(property_fact_lines(prop, default_currency))
    for idx, doc in enumerate(list(documents)[:match_k], 1):
        parts.append(f"Context doc {idx}: {document_snippet(doc)}")
    parts.extend(history_lines(conversation, history_turns))
    return parts


def build_prompt(query: str, context_parts: Sequence[str], word_limit: int = 220, assistant: str = ASSISTANT_NAME) -> str:
    lines = [
        SYSTEM_PROMPT.format(assistant=assistant, word_limit=word_limit),
        SECTION_RULE,
        "Context:",
        *context_parts,
        SECTION_RULE,
        f"User query: {query}",
        SECTION_RULE,
        "Instructions:",
        *(line.format(word_limit=word_limit) for line in OUTPUT_INSTRUCTIONS),
    ]
    return "\n".join(lines)
