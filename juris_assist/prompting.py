from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


DEFAULT_PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"

DEFAULT_LANGUAGE = "pt"


@dataclass(frozen=True)
class PromptBundle:
    """
    System prompt plus an optional `str.format` template for the user turn.

    Bundles that only swap the system prompt (e.g. a fallback model) leave
    `user_template` empty.
    """

    system: str
    user_template: str = ""

    def render(self, **fields: Any) -> str:
        if not self.user_template:
            raise ValueError("Prompt bundle has no user_template to render")
        try:
            return self.user_template.format(**fields)
        except KeyError as e:
            raise ValueError(f"Prompt template expects field {e.args[0]!r}") from e


class PromptLoader:
    """
    Loads `prompts/{lang}/{agent_name}.yaml` bundles, falling back to Portuguese.

    Prompt file structure:
      system: |-
        ...
      user_template: |-    (optional)
        ...
    """

    LANGUAGE_FALLBACKS: dict[str, tuple[str, ...]] = {
        "pt-br": ("pt",),
        "pt_br": ("pt",),
    }

    def __init__(self, prompts_dir: Path = DEFAULT_PROMPTS_DIR):
        self.prompts_dir = Path(prompts_dir)
        self._cache: dict[tuple[str, str], PromptBundle] = {}

    def candidate_languages(self, language: str | None) -> tuple[str, ...]:
        lang = (language or DEFAULT_LANGUAGE).lower()
        chain = self.LANGUAGE_FALLBACKS.get(lang, (lang,))
        if DEFAULT_LANGUAGE not in chain:
            chain = (*chain, DEFAULT_LANGUAGE)
        return chain

    def load(self, agent_name: str, language: str | None = DEFAULT_LANGUAGE) -> PromptBundle:
        chain = self.candidate_languages(language)
        cache_key = (agent_name, chain[0])
        if cache_key not in self._cache:
            self._cache[cache_key] = self._read(agent_name, chain)
        return self._cache[cache_key]

    def _read(self, agent_name: str, chain: tuple[str, ...]) -> PromptBundle:
        for lang in chain:
            path = self.prompts_dir / lang / f"{agent_name}.yaml"
            if path.exists():
                with open(path, encoding="utf-8") as f:
                    return self._coerce_bundle(yaml.safe_load(f) or {}, path)

        tried = ", ".join(chain)
        raise FileNotFoundError(
            f"Prompt file not found for agent={agent_name} (languages tried: {tried}; dir={self.prompts_dir})"
        )

    def _coerce_bundle(self, data: dict[str, Any], path: Path) -> PromptBundle:
        system = data.get("system", "")
        user_template = data.get("user_template", "")
        if not isinstance(system, str) or not system.strip():
            raise ValueError(f"{path}: 'system' must be a non-empty string")
        if not isinstance(user_template, str):
            raise ValueError(f"{path}: 'user_template' must be a string")
        return PromptBundle(system=system, user_template=user_template)
