from __future__ import annotations

from typing import Literal

from .base import BaseAgent
from ..models import CompletionResult, ExpectedShape


SearchMode = Literal["quick", "deep"]

SEARCH_DEADLINES: dict[str, float] = {"quick": 10.0, "deep": 30.0}

RESULTS_SHAPE = ExpectedShape.of(results="array")


def enhance_query(query: str) -> str:
    return f"jurisprudência brasileira recente sobre {query} decisões 2023 2024 tribunais superiores"


class JurisprudenceSearchAgent(BaseAgent):
    """Asks the model for recent Brazilian case law matching a free-text query."""

    async def search(
        self,
        query: str,
        *,
        mode: SearchMode = "quick",
        deadline: float | None = None,
        result_count: int = 5,
    ) -> CompletionResult:
        query = (query or "").strip()
        if not query:
            raise ValueError("query must be non-empty")
        if deadline is None:
            if mode not in SEARCH_DEADLINES:
                raise ValueError(f"Unknown search mode: {mode!r}")
            deadline = SEARCH_DEADLINES[mode]

        prompts = self.prompts()
        user_prompt = prompts.render(
            enhanced_query=enhance_query(query),
            result_count=result_count,
        )
        self.logger.info("Searching case law (mode=%s, deadline=%.0fs): %s", mode, deadline, query)
        return await self.run(
            system_prompt=prompts.system,
            user_prompt=user_prompt,
            expected=RESULTS_SHAPE,
            deadline=deadline,
        )
