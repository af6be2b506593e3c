from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .agents import DocumentAnalysisAgent, JurisprudenceSearchAgent, LegalAnalysisAgent
from .llm.base import CompletionClient
from .models import CompletionResult, Failure, FailureKind
from .prompting import DEFAULT_PROMPTS_DIR, PromptLoader


DEFAULT_MODEL = "qwen/qwen-2.5-72b-instruct"
ANALYSIS_MODEL = "qwen/qwen3-235b-a22b"

# What the end user sees. Vendor bodies and parser messages stay in the logs.
USER_MESSAGES: dict[FailureKind, str] = {
    FailureKind.TIMEOUT: "A consulta demorou muito tempo. Por favor, tente novamente.",
    FailureKind.UNAUTHORIZED: "Serviço de IA não autorizado. Verifique a chave de API configurada.",
    FailureKind.TRANSPORT_ERROR: "Não foi possível contatar o serviço de IA. Tente novamente.",
    FailureKind.UPSTREAM_ERROR: "O serviço de IA está indisponível no momento. Tente novamente.",
    FailureKind.EMPTY_OUTPUT: "A IA não retornou resposta. Tente novamente.",
    FailureKind.MALFORMED_OUTPUT: "Não foi possível interpretar a resposta da IA. Tente novamente.",
}


class LegalAssistant:
    """
    Orchestrates the AI features of the legal practice app.

    Holds one completion client and hands it to each agent; the returned
    dicts are what the HTTP layer sends back.
    """

    def __init__(
        self,
        *,
        llm: CompletionClient,
        prompts_dir: Path = DEFAULT_PROMPTS_DIR,
        language: str = "pt",
        model: str = DEFAULT_MODEL,
        analysis_model: str = ANALYSIS_MODEL,
        logger: logging.Logger | None = None,
    ):
        self.logger = logger or logging.getLogger("juris_assist.LegalAssistant")
        self.llm = llm
        self.language = language
        self.prompt_loader = PromptLoader(prompts_dir)

        agent_kwargs = {
            "llm": llm,
            "prompt_loader": self.prompt_loader,
            "language": language,
        }

        self.search_agent = JurisprudenceSearchAgent(
            agent_name="legal_search", model=model, temperature=0.1, max_tokens=5000, **agent_kwargs
        )
        self.analysis_agent = LegalAnalysisAgent(
            agent_name="legal_analysis", model=analysis_model, temperature=0.3, max_tokens=2000, **agent_kwargs
        )
        self.document_agent = DocumentAnalysisAgent(
            agent_name="document_analysis", model=model, temperature=0.2, max_tokens=12000, **agent_kwargs
        )

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------

    def _payload(self, operation: str, result: CompletionResult) -> dict[str, Any]:
        if isinstance(result, Failure):
            self.logger.error(
                "%s failed: kind=%s reason=%s status=%s body=%s",
                operation,
                result.kind.value,
                result.reason,
                result.status_code,
                result.body[:500],
            )
            return {
                "success": False,
                "error": USER_MESSAGES[result.kind],
                "failure": result.kind.value,
            }
        return {**result.structured, "success": True}

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------

    async def search(
        self,
        *,
        query: str,
        mode: str = "quick",
        deadline: float | None = None,
    ) -> dict[str, Any]:
        if not (query or "").strip():
            return {"success": False, "error": "Informe o termo de pesquisa."}
        if deadline is None and mode not in ("quick", "deep"):
            return {"success": False, "error": f"Modo de pesquisa inválido: {mode}"}

        result = await self.search_agent.search(query, mode=mode, deadline=deadline)  # type: ignore[arg-type]
        payload = self._payload("legal_search", result)
        if payload["success"]:
            self.logger.info("Parsed %d results for query: %s", len(payload["results"]), query)
        return payload

    async def analyze_results(self, *, results: list[dict[str, Any]], query: str) -> dict[str, Any]:
        if not results:
            return {"success": False, "error": "Nenhum resultado para analisar."}
        result = await self.analysis_agent.analyze(results, query)
        return self._payload("legal_analysis", result)

    async def analyze_document(self, *, content: str, document_type: str | None = None) -> dict[str, Any]:
        if not (content or "").strip():
            return {
                "success": False,
                "error": "Conteúdo do documento indisponível. Aguarde o processamento.",
            }
        result = await self.document_agent.analyze(content, document_type=document_type)
        return self._payload("document_analysis", result)
