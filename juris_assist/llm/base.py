from __future__ import annotations

from typing import Protocol

from ..env import ConfigurationError
from ..models import CompletionRequest, CompletionResult, ExpectedShape


class CompletionClient(Protocol):
    async def complete(
        self,
        request: CompletionRequest,
        expected: ExpectedShape,
    ) -> CompletionResult: ...
