from __future__ import annotations

import json

from ..models import (
    STRUCTURE_MISMATCH,
    CompletionResult,
    ExpectedShape,
    Failure,
    FailureKind,
    Success,
)


def extract_json_span(text: str) -> str | None:
    """
    Trim a completion down to the span between its first '{' and last '}'.

    Models routinely wrap the payload in prose or ```json fences even when told
    not to; everything outside the outermost braces is dropped. Returns None if
    the text has no such span. Applying it to its own output is a no-op.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return None
    return text[start : end + 1]


def parse_completion(text: str | None, expected: ExpectedShape) -> CompletionResult:
    """Turn raw completion text into a validated Success, or a Failure describing why not."""
    if text is None or not text.strip():
        return Failure(kind=FailureKind.EMPTY_OUTPUT, reason="completion has no text")

    span = extract_json_span(text)
    if span is None:
        return Failure(kind=FailureKind.MALFORMED_OUTPUT, reason="no JSON object found in completion")

    try:
        parsed = json.loads(span)
    except (json.JSONDecodeError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow
        return Failure(kind=FailureKind.MALFORMED_OUTPUT, reason=str(e))

    problem = expected.mismatch(parsed)
    if problem is not None:
        return Failure(kind=FailureKind.MALFORMED_OUTPUT, reason=STRUCTURE_MISMATCH, body=problem)

    return Success(structured=parsed, raw_text=text)
