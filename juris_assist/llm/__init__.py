from .base import CompletionClient, ConfigurationError
from .extraction import extract_json_span, parse_completion
from .openai_compatible import OPENROUTER_BASE_URL, StructuredCompletionClient

__all__ = [
    "CompletionClient",
    "ConfigurationError",
    "OPENROUTER_BASE_URL",
    "StructuredCompletionClient",
    "extract_json_span",
    "parse_completion",
]
