"""
Juris Assist: AI features for a legal practice app.

The core is `StructuredCompletionClient`, which asks an OpenAI-compatible
chat-completion service for a JSON answer under a deadline and returns a
validated `Success` or a typed `Failure`. `LegalAssistant` builds
case-law search, result analysis and document analysis on top of it.
"""

from .env import ConfigurationError
from .llm import StructuredCompletionClient, extract_json_span, parse_completion
from .manager import LegalAssistant
from .models import (
    CompletionRequest,
    CompletionResult,
    ExpectedShape,
    Failure,
    FailureKind,
    Success,
)

__all__ = [
    "CompletionRequest",
    "CompletionResult",
    "ConfigurationError",
    "ExpectedShape",
    "Failure",
    "FailureKind",
    "LegalAssistant",
    "StructuredCompletionClient",
    "Success",
    "extract_json_span",
    "parse_completion",
]
