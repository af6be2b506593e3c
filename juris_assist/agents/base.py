from __future__ import annotations

import logging

from ..llm.base import CompletionClient
from ..models import CompletionRequest, CompletionResult, ExpectedShape, Failure
from ..prompting import PromptBundle, PromptLoader


class BaseAgent:
    """
    Minimal base agent:
    - loads prompts (system + user_template)
    - builds one CompletionRequest per call and sends it through an injected client
    """

    def __init__(
        self,
        *,
        agent_name: str,
        llm: CompletionClient,
        prompt_loader: PromptLoader,
        language: str,
        model: str,
        temperature: float,
        max_tokens: int,
        logger: logging.Logger | None = None,
    ):
        self.agent_name = agent_name
        self.llm = llm
        self.prompt_loader = prompt_loader
        self.language = language
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.logger = logger or logging.getLogger(f"juris_assist.{agent_name}")

    def prompts(self) -> PromptBundle:
        return self.prompt_loader.load(self.agent_name, self.language)

    async def run(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        expected: ExpectedShape,
        deadline: float,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = True,
        provider_order: tuple[str, ...] = (),
    ) -> CompletionResult:
        request = CompletionRequest(
            prompt=user_prompt,
            system_instruction=system_prompt,
            model=model or self.model,
            temperature=self.temperature if temperature is None else temperature,
            max_output_tokens=max_tokens or self.max_tokens,
            deadline=deadline,
            json_mode=json_mode,
            provider_order=provider_order,
        )
        result = await self.llm.complete(request, expected)
        if isinstance(result, Failure):
            self.logger.warning(
                "%s failed: kind=%s reason=%s status=%s",
                self.agent_name,
                result.kind.value,
                result.reason,
                result.status_code,
            )
        return result
