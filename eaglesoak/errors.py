class RagError(Exception):
    """Base class for failures raised by the property assistant pipeline."""


class QueryValidationError(RagError):
    """The request cannot be answered as sent (e.g. empty query)."""


class EmbeddingError(RagError):
    """The query could not be embedded. Fatal for the request."""


class RetrievalError(RagError):
    """The similarity search failed. The pipeline degrades to zero documents."""


class PropertyLookupError(RagError):
    """The property catalog read failed. The pipeline degrades to no direct context."""


class GenerationError(RagError):
    """The language model did not produce a result. Fatal for the request."""
