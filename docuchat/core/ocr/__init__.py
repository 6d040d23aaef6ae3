"""OCR backends: vision model, Mistral OCR and DataLab."""

from .base import (
    DocumentImage,
    OCRBackend,
    OCRResult,
    combine_results,
    document_from_part,
    documents_from_parts,
    grade_confidence,
    grade_line_confidence,
)
from .datalab import DataLabOCRBackend
from .factory import OCRBackendFactory
from .mistral import MistralOCRBackend
from .vision import VisionOCRBackend

__all__ = [
    "DocumentImage",
    "OCRBackend",
    "OCRResult",
    "combine_results",
    "document_from_part",
    "documents_from_parts",
    "grade_confidence",
    "grade_line_confidence",
    "DataLabOCRBackend",
    "OCRBackendFactory",
    "MistralOCRBackend",
    "VisionOCRBackend",
]
