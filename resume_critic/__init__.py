"""Resume Critic - AI critique of resumes against a target role."""

from .client import AnalysisClient
from .controller import AppState, Lifecycle, View, ViewController
from .errors import (
    ConfigurationError,
    CritiqueError,
    DocumentReadError,
    ResponseFormatError,
    ServiceError,
)
from .models import AnalysisResult, parse_analysis_result
from .preparer import DocumentFile, DocumentPreparer, PreparedDocument

__version__ = "0.1.0"

__all__ = [
    "AnalysisClient",
    "AnalysisResult",
    "AppState",
    "ConfigurationError",
    "CritiqueError",
    "DocumentFile",
    "DocumentPreparer",
    "DocumentReadError",
    "Lifecycle",
    "PreparedDocument",
    "ResponseFormatError",
    "ServiceError",
    "View",
    "ViewController",
    "parse_analysis_result",
]
