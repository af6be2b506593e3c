from __future__ import annotations

import asyncio
import json
from typing import Callable, Sequence

import httpx

from .base import CompletionClient
from .extraction import parse_completion
from ..models import CompletionRequest, CompletionResult, ExpectedShape, Failure, FailureKind, Message


Responder = Callable[[Sequence[Message], str], str]


def demo_responder(messages: Sequence[Message], model: str) -> str:
    """
    Deterministic responder for local demos (no network).

    It inspects the system prompt to guess which agent is calling, and answers
    the way real models tend to: JSON wrapped in a sentence and a code fence.
    """
    system = (messages[0]["content"] if messages else "").lower()

    if "pesquisa de jurisprudência" in system:
        payload = {
            "results": [
                {
                    "titulo": "Dano moral por inscrição indevida em cadastro de inadimplentes",
                    "tribunal": "STJ",
                    "numero": "REsp 1.234.567/SP",
                    "data": "2024-03-12",
                    "relator": "Min. Nancy Andrighi",
                    "ementa": (
                        "A inscrição indevida do nome do consumidor em cadastro de inadimplentes "
                        "gera dano moral presumido (in re ipsa)."
                    ),
                    "decisao": "favoravel",
                    "valor": 10000,
                    "fonte": "https://www.stj.jus.br",
                    "tags": ["dano moral", "consumidor"],
                },
                {
                    "titulo": "Mero aborrecimento não configura dano moral",
                    "tribunal": "TST",
                    "numero": "RR-1000123-45.2023.5.02.0011",
                    "data": "2023-11-08",
                    "relator": "Min. Alberto Balazeiro",
                    "ementa": "Atraso pontual no pagamento de verbas não enseja, por si só, reparação moral.",
                    "decisao": "desfavoravel",
                    "valor": 0,
                    "fonte": "https://www.tst.jus.br",
                    "tags": ["dano moral", "trabalhista"],
                },
            ]
        }
        return "Aqui está o resultado:\n```json\n" + json.dumps(payload, ensure_ascii=False) + "\n```"

    if "análise estratégica" in system:
        return json.dumps(
            {
                "synthesis": "Os tribunais reconhecem dano moral presumido em negativação indevida.",
                "summary": (
                    "A jurisprudência recente do STJ consolida o dano in re ipsa, enquanto a "
                    "Justiça do Trabalho exige prova de lesão efetiva."
                ),
                "keyPoints": ["Dano in re ipsa", "Prova do abalo na esfera trabalhista"],
                "topDecisions": [
                    {"tribunal": "STJ", "numero": "REsp 1.234.567/SP", "decisao": "procedente", "valor": 10000}
                ],
                "winningArguments": ["STJ: negativação indevida dispensa prova do prejuízo"],
                "readyToCopy": "Conforme entendimento do STJ (REsp 1.234.567/SP), ...",
                "suggestedThesis": "Responsabilidade objetiva do fornecedor pela negativação indevida.",
            },
            ensure_ascii=False,
        )

    if "advogado especialista" in system or "analise o documento" in system:
        return json.dumps(
            {
                "tipo_documento": "contrato",
                "titulo": "Contrato de prestação de serviços",
                "resumo_executivo": "Prestação de serviços de consultoria por 12 meses.",
                "riscos_identificados": [
                    {
                        "tipo": "financeiro",
                        "descricao": "Multa rescisória desproporcional",
                        "probabilidade": "média",
                        "impacto": "alto",
                        "mitigacao": "Negociar redução da multa",
                    }
                ],
                "recomendacoes_finais": "Revisar a cláusula penal antes da assinatura.",
            },
            ensure_ascii=False,
        )

    return "Desculpe, não entendi a solicitação."


class FakeCompletionClient(CompletionClient):
    """
    CompletionClient-compatible fake for tests/demos.

    The responder's text goes through the same recovery and validation as the
    real client. A responder may raise asyncio.TimeoutError or
    httpx.TransportError to simulate those failures.
    """

    def __init__(self, responder: Responder = demo_responder):
        self._responder = responder
        self.requests: list[CompletionRequest] = []

    async def complete(
        self,
        request: CompletionRequest,
        expected: ExpectedShape,
    ) -> CompletionResult:
        self.requests.append(request)
        try:
            text = self._responder(request.messages(), request.model)
        except asyncio.TimeoutError:
            return Failure(kind=FailureKind.TIMEOUT, reason=f"no response within {request.deadline}s")
        except httpx.TransportError as e:
            return Failure(kind=FailureKind.TRANSPORT_ERROR, reason=str(e))
        return parse_completion(text, expected)
