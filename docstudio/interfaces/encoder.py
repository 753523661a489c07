"""Abstract base class for local document encoders.

Encoders turn processed markdown text into the bytes of a finished file
without any network access. They back the export pipeline whenever the
remote format service is unavailable.
"""

from abc import ABC, abstractmethod


class BaseDocumentEncoder(ABC):
    """Abstract base class for output format encoders.

    Example:
        ```python
        class PdfEncoder(BaseDocumentEncoder):
            def encode(self, content: str) -> bytes:
                # Build the PDF object graph
                pass
        ```
    """

    @abstractmethod
    def encode(self, content: str) -> bytes:
        """Encode markdown-flavoured text into a document.

        Must produce a structurally valid file for any input, including
        empty text.

        Args:
            content: Template-processed markdown text.

        Returns:
            The encoded file contents.
        """
        ...

    @property
    @abstractmethod
    def content_type(self) -> str:
        """Return the MIME type of the encoded output."""
        ...

    @property
    @abstractmethod
    def extension(self) -> str:
        """Return the file extension (without the dot)."""
        ...
