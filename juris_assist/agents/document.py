from __future__ import annotations

from .base import BaseAgent
from ..models import CompletionResult, ExpectedShape, Failure, FailureKind


DOCUMENT_TYPES = {
    "contract": "contrato",
    "petition": "petição",
    "sentence": "sentença",
    "appeal": "recurso",
    "agreement": "acordo",
    "power_of_attorney": "procuração",
    "notification": "notificação",
    "certificate": "certidão",
    "other": "outro",
}

DOCUMENT_SHAPE = ExpectedShape.of(
    tipo_documento="string",
    resumo_executivo="string",
    riscos_identificados="array",
)

MAX_CONTENT_CHARS = 6000

PRIMARY_DEADLINE = 30.0
FALLBACK_MODEL = "anthropic/claude-3-haiku"
FALLBACK_DEADLINE = 20.0
FALLBACK_MAX_TOKENS = 3000


class DocumentAnalysisAgent(BaseAgent):
    """
    Legal analysis of an uploaded document's extracted text.

    If the primary model answers with an upstream error, one more attempt is
    made against a smaller fallback model. No other failure is retried.
    """

    fallback_agent_name = "document_analysis_fallback"

    def _user_prompt(self, content: str, document_type: str | None) -> str:
        hint = ""
        if document_type:
            label = DOCUMENT_TYPES.get(document_type, document_type)
            hint = f"Tipo informado pelo usuário: {label}\n"
        return self.prompts().render(
            content=content[:MAX_CONTENT_CHARS],
            document_type_hint=hint,
        )

    async def analyze(self, content: str, *, document_type: str | None = None) -> CompletionResult:
        if not content or not content.strip():
            raise ValueError("document content is not available")

        user_prompt = self._user_prompt(content, document_type)
        result = await self.run(
            system_prompt=self.prompts().system,
            user_prompt=user_prompt,
            expected=DOCUMENT_SHAPE,
            deadline=PRIMARY_DEADLINE,
        )
        if not (isinstance(result, Failure) and result.kind is FailureKind.UPSTREAM_ERROR):
            return result

        self.logger.info("Primary model failed with %s; trying %s", result.status_code, FALLBACK_MODEL)
        fallback = self.prompt_loader.load(self.fallback_agent_name, self.language)
        return await self.run(
            system_prompt=fallback.system,
            user_prompt=user_prompt,
            expected=DOCUMENT_SHAPE,
            deadline=FALLBACK_DEADLINE,
            model=FALLBACK_MODEL,
            max_tokens=FALLBACK_MAX_TOKENS,
            json_mode=False,
        )
