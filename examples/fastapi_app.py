from __future__ import annotations

import logging
import os

import uvicorn

from juris_assist import LegalAssistant, StructuredCompletionClient
from juris_assist.env import load_env
from juris_assist.llm.fake import FakeCompletionClient
from juris_assist.manager import DEFAULT_MODEL
from juris_assist.web import create_app


def build_assistant() -> LegalAssistant:
    # Best-effort .env loading for JURIS_* and LLM_* vars.
    load_env()

    language = os.getenv("JURIS_LANGUAGE", "pt")
    model = os.getenv("LLM_MODEL", DEFAULT_MODEL)

    # Default to the fake client so the example runs out-of-the-box without API keys.
    if os.getenv("JURIS_FAKE_LLM", "1") == "1":
        llm = FakeCompletionClient()
    else:
        # Raises ConfigurationError here, at startup, if the key is missing.
        llm = StructuredCompletionClient.from_env()

    return LegalAssistant(llm=llm, language=language, model=model)


logging.basicConfig(level=os.getenv("JURIS_LOG_LEVEL", "INFO"))
app = create_app(build_assistant())


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=int(os.getenv("PORT", "8000")))
