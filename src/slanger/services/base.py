"""BaseService: shared foundation for the CLI-facing services.

Every service receives its collaborators at construction time and
reads documents through :func:`load_document`. Load failures become a
failed ServiceResult, never an exception at the CLI boundary.
"""

from __future__ import annotations

from pathlib import Path

from slanger.domain.document import Document
from slanger.domain.errors import StructuralError
from slanger.infrastructure.documents import DocumentFileError, read_document_data
from slanger.services.result import ServiceResult


class DocumentLoadError(Exception):
    """Wraps a file or structure failure with the ServiceResult it maps to."""

    def __init__(self, op: str, code: str, message: str, path: Path) -> None:
        super().__init__(message)
        self.result = ServiceResult.failure(op, code, message, path=str(path))


def load_document(path: Path) -> Document:
    """Read and coerce a document file.

    Raises:
        DocumentFileError: The file is missing, unparsable, or not a mapping.
        StructuralError: A required section is absent or mis-shaped.
    """
    return Document.from_raw(read_document_data(path))


class BaseService:
    """Base for services that operate on a document file."""

    def _load(self, op: str, path: Path) -> Document:
        """Load *path*, translating failures for the ServiceResult contract.

        Raises:
            DocumentLoadError: Carries a failed ServiceResult for *op*.
        """
        try:
            return load_document(path)
        except DocumentFileError as exc:
            raise DocumentLoadError(op, "DOCUMENT_UNREADABLE", str(exc), path) from exc
        except StructuralError as exc:
            raise DocumentLoadError(op, "STRUCTURAL_ERROR", str(exc), path) from exc
