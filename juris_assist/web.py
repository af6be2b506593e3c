from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .manager import LegalAssistant
from .models import FailureKind


FAILURE_STATUS: dict[str, int] = {
    FailureKind.UNAUTHORIZED.value: 401,
    FailureKind.TIMEOUT.value: 504,
    FailureKind.TRANSPORT_ERROR.value: 502,
    FailureKind.UPSTREAM_ERROR.value: 502,
    FailureKind.EMPTY_OUTPUT.value: 502,
    FailureKind.MALFORMED_OUTPUT.value: 502,
}


class LegalSearchRequest(BaseModel):
    query: str
    searchMode: str = "quick"


class LegalAnalysisRequest(BaseModel):
    query: str
    results: list[dict[str, Any]] = Field(default_factory=list)


class DocumentAnalysisRequest(BaseModel):
    content: str
    documentType: str | None = None


def _respond(payload: dict[str, Any]) -> JSONResponse:
    if payload.get("success"):
        return JSONResponse(payload)
    failure = payload.get("failure")
    status = FAILURE_STATUS.get(failure, 500) if failure else 400
    return JSONResponse(payload, status_code=status)


def create_app(assistant: LegalAssistant) -> FastAPI:
    app = FastAPI(title="Juris Assist")

    @app.post("/api/legal-search")
    async def legal_search(req: LegalSearchRequest):
        return _respond(await assistant.search(query=req.query, mode=req.searchMode))

    @app.post("/api/legal-analysis")
    async def legal_analysis(req: LegalAnalysisRequest):
        return _respond(await assistant.analyze_results(results=req.results, query=req.query))

    @app.post("/api/documents/analyze")
    async def analyze_document(req: DocumentAnalysisRequest):
        return _respond(
            await assistant.analyze_document(content=req.content, document_type=req.documentType)
        )

    return app
