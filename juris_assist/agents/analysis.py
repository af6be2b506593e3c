from __future__ import annotations

from typing import Any

from .base import BaseAgent
from ..models import CompletionResult, ExpectedShape


ANALYSIS_SHAPE = ExpectedShape.of(
    synthesis="string",
    summary="string",
    keyPoints="array",
    topDecisions="array",
    winningArguments="array",
    readyToCopy="string",
    suggestedThesis="string",
)

ANALYSIS_DEADLINE = 30.0
ANALYSIS_PROVIDER_ORDER = ("deepinfra/fp8",)


def format_brl(value: float) -> str:
    """Format a number the way pt-BR writes money: 1.234.567,89."""
    text = f"{value:,.2f}"
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")


class LegalAnalysisAgent(BaseAgent):
    """Turns a list of search results into a strategic analysis for the lawyer."""

    def _format_results(self, results: list[dict[str, Any]]) -> str:
        blocks: list[str] = []
        for r in results:
            lines = [
                f"{r.get('tribunal', '')} - {r.get('numero', '')}",
                str(r.get("ementa", "")),
                f"Decisão: {r.get('decisao') or 'não especificada'}",
            ]
            valor = r.get("valor")
            if isinstance(valor, (int, float)) and not isinstance(valor, bool) and valor:
                lines.append(f"Valor: {format_brl(valor)}")
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks)

    async def analyze(self, results: list[dict[str, Any]], query: str) -> CompletionResult:
        if not results:
            raise ValueError("results must not be empty")

        prompts = self.prompts()
        user_prompt = prompts.render(
            query=query,
            results_summary=self._format_results(results),
        )
        self.logger.info("Analyzing %d results for query: %s", len(results), query)
        return await self.run(
            system_prompt=prompts.system,
            user_prompt=user_prompt,
            expected=ANALYSIS_SHAPE,
            deadline=ANALYSIS_DEADLINE,
            provider_order=ANALYSIS_PROVIDER_ORDER,
        )
