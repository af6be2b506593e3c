from __future__ import annotations

import asyncio
import json

from juris_assist import LegalAssistant
from juris_assist.env import load_env
from juris_assist.llm.fake import FakeCompletionClient


async def main() -> None:
    # Best-effort .env loading (handy when switching the fake client for a real one).
    load_env()

    assistant = LegalAssistant(llm=FakeCompletionClient(), model="fake")

    found = await assistant.search(query="dano moral", mode="quick")
    assert found["success"], found
    print("Results:", [r["titulo"] for r in found["results"]])

    analysis = await assistant.analyze_results(results=found["results"], query="dano moral")
    assert analysis["success"], analysis
    print("Synthesis:", analysis["synthesis"])

    document = await assistant.analyze_document(
        content="CONTRATO DE PRESTAÇÃO DE SERVIÇOS ...", document_type="contract"
    )
    print(json.dumps(document, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    asyncio.run(main())
