from .analysis import LegalAnalysisAgent
from .document import DocumentAnalysisAgent
from .search import JurisprudenceSearchAgent

__all__ = ["DocumentAnalysisAgent", "JurisprudenceSearchAgent", "LegalAnalysisAgent"]
