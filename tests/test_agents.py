"""Tests for the legal agents, driven through FakeCompletionClient."""

import asyncio
import json

import httpx
import pytest

from juris_assist import Failure, FailureKind, Success
from juris_assist.agents import DocumentAnalysisAgent, JurisprudenceSearchAgent, LegalAnalysisAgent
from juris_assist.agents.analysis import format_brl
from juris_assist.agents.document import FALLBACK_MODEL, MAX_CONTENT_CHARS
from juris_assist.agents.search import enhance_query
from juris_assist.llm.fake import FakeCompletionClient, demo_responder
from juris_assist.prompting import PromptLoader

from conftest import make_client, responder_returning


def _agent(cls, llm, name, **overrides):
    kwargs = {
        "agent_name": name,
        "llm": llm,
        "prompt_loader": PromptLoader(),
        "language": "pt",
        "model": "qwen/qwen-2.5-72b-instruct",
        "temperature": 0.1,
        "max_tokens": 5000,
    }
    kwargs.update(overrides)
    return cls(**kwargs)


# ── Search ───────────────────────────────────────────────────────────


def test_enhance_query():
    assert enhance_query("dano moral") == (
        "jurisprudência brasileira recente sobre dano moral decisões 2023 2024 tribunais superiores"
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("mode, deadline", [("quick", 10.0), ("deep", 30.0)])
async def test_search_mode_sets_deadline(mode, deadline):
    llm = FakeCompletionClient()
    agent = _agent(JurisprudenceSearchAgent, llm, "legal_search")

    result = await agent.search("dano moral", mode=mode)

    assert isinstance(result, Success)
    request = llm.requests[0]
    assert request.deadline == deadline
    assert request.temperature == 0.1
    assert request.max_output_tokens == 5000
    assert "dano moral decisões 2023 2024" in request.prompt


@pytest.mark.asyncio
async def test_search_explicit_deadline_wins():
    llm = FakeCompletionClient()
    agent = _agent(JurisprudenceSearchAgent, llm, "legal_search")

    await agent.search("horas extras", mode="deep", deadline=2.5)

    assert llm.requests[0].deadline == 2.5


@pytest.mark.asyncio
async def test_search_rejects_bad_input():
    agent = _agent(JurisprudenceSearchAgent, FakeCompletionClient(), "legal_search")

    with pytest.raises(ValueError):
        await agent.search("   ")
    with pytest.raises(ValueError):
        await agent.search("dano moral", mode="slow")


@pytest.mark.asyncio
async def test_search_builds_fresh_request_per_call():
    llm = FakeCompletionClient()
    agent = _agent(JurisprudenceSearchAgent, llm, "legal_search")

    await agent.search("dano moral")
    await agent.search("dano moral")

    assert len(llm.requests) == 2
    assert llm.requests[0] is not llm.requests[1]


@pytest.mark.asyncio
async def test_search_empty_results_distinct_from_failure():
    found = await _agent(
        JurisprudenceSearchAgent, FakeCompletionClient(responder_returning('{"results": []}')), "legal_search"
    ).search("tema raro")
    garbled = await _agent(
        JurisprudenceSearchAgent, FakeCompletionClient(responder_returning("Não encontrei nada.")), "legal_search"
    ).search("tema raro")

    assert isinstance(found, Success) and found.structured["results"] == []
    assert isinstance(garbled, Failure) and garbled.kind is FailureKind.MALFORMED_OUTPUT


# ── Analysis ─────────────────────────────────────────────────────────


def test_format_brl():
    assert format_brl(1234567.891) == "R$ 1.234.567,89"
    assert format_brl(50000) == "R$ 50.000,00"


@pytest.mark.asyncio
async def test_analysis_prompt_and_shape():
    llm = FakeCompletionClient()
    agent = _agent(LegalAnalysisAgent, llm, "legal_analysis", temperature=0.3, max_tokens=2000)
    results = [
        {"tribunal": "STJ", "numero": "REsp 1", "ementa": "Dano in re ipsa.", "decisao": "favoravel", "valor": 15000},
        {"tribunal": "TST", "numero": "RR-2", "ementa": "Mero aborrecimento."},
    ]

    result = await agent.analyze(results, "dano moral")

    assert isinstance(result, Success)
    assert result.structured["keyPoints"]
    request = llm.requests[0]
    assert "STJ - REsp 1" in request.prompt
    assert "Valor: R$ 15.000,00" in request.prompt
    assert "Decisão: não especificada" in request.prompt
    assert request.provider_order == ("deepinfra/fp8",)
    assert request.deadline == 30.0


@pytest.mark.asyncio
async def test_analysis_missing_keys_is_malformed():
    llm = FakeCompletionClient(responder_returning('{"synthesis": "x", "summary": "y"}'))
    agent = _agent(LegalAnalysisAgent, llm, "legal_analysis")

    result = await agent.analyze([{"tribunal": "STJ"}], "dano moral")

    assert result.kind is FailureKind.MALFORMED_OUTPUT
    assert result.reason == "structure mismatch"


@pytest.mark.asyncio
async def test_analysis_requires_results():
    agent = _agent(LegalAnalysisAgent, FakeCompletionClient(), "legal_analysis")
    with pytest.raises(ValueError):
        await agent.analyze([], "dano moral")


# ── Document ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_document_truncates_content_and_labels_type():
    llm = FakeCompletionClient()
    agent = _agent(DocumentAnalysisAgent, llm, "document_analysis", temperature=0.2, max_tokens=12000)
    content = "A" * (MAX_CONTENT_CHARS + 500)

    result = await agent.analyze(content, document_type="contract")

    assert isinstance(result, Success)
    prompt = llm.requests[0].prompt
    assert "A" * MAX_CONTENT_CHARS in prompt
    assert "A" * (MAX_CONTENT_CHARS + 1) not in prompt
    assert "Tipo informado pelo usuário: contrato" in prompt


@pytest.mark.asyncio
async def test_document_falls_back_on_upstream_error():
    models = []
    payload = json.dumps({"tipo_documento": "contrato", "resumo_executivo": "x", "riscos_identificados": []})

    def handler(request: httpx.Request):
        body = json.loads(request.content)
        models.append(body["model"])
        if len(models) == 1:
            return httpx.Response(503, text="overloaded")
        assert "response_format" not in body
        assert body["max_tokens"] == 3000
        return httpx.Response(200, json={"choices": [{"message": {"content": payload}}]})

    agent = _agent(DocumentAnalysisAgent, make_client(handler), "document_analysis")

    result = await agent.analyze("CONTRATO ...")

    assert isinstance(result, Success)
    assert models == ["qwen/qwen-2.5-72b-instruct", FALLBACK_MODEL]


@pytest.mark.asyncio
async def test_document_does_not_fall_back_on_timeout():
    def timing_out(messages, model):
        raise asyncio.TimeoutError()

    llm = FakeCompletionClient(timing_out)
    agent = _agent(DocumentAnalysisAgent, llm, "document_analysis")

    result = await agent.analyze("CONTRATO ...")

    assert result.kind is FailureKind.TIMEOUT
    assert len(llm.requests) == 1


# ── Fake client ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_fake_transport_error():
    def broken(messages, model):
        raise httpx.ConnectError("no route to host")

    agent = _agent(JurisprudenceSearchAgent, FakeCompletionClient(broken), "legal_search")

    result = await agent.search("dano moral")

    assert result.kind is FailureKind.TRANSPORT_ERROR


def test_demo_responder_unknown_agent():
    assert demo_responder([{"role": "system", "content": "?"}], "fake") == "Desculpe, não entendi a solicitação."
