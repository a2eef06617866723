import io
import logging
import re
from fastapi import UploadFile
import PyPDF2
from docx import Document

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("pdf", "doc", "docx", "txt")


class FileProcessingError(Exception):
    """Raised when an uploaded resume cannot be turned into text"""


class FileProcessor:
    """Service for extracting text from uploaded resume files"""

    async def extract_text(self, file: UploadFile) -> str:
        """
        Extract text from uploaded file (PDF, DOC, DOCX, TXT)
        """
        filename = (file.filename or "").lower()
        file_extension = filename.rsplit(".", 1)[-1] if "." in filename else ""
        if file_extension not in SUPPORTED_EXTENSIONS:
            raise FileProcessingError(f"Unsupported file type: {file_extension or 'unknown'}")

        content = await file.read()
        return self.extract_from_bytes(content, file_extension)

    def extract_from_bytes(self, content: bytes, file_extension: str) -> str:
        if file_extension == "pdf":
            return self._extract_from_pdf(content)
        if file_extension in ("doc", "docx"):
            return self._extract_from_word(content)
        return self._clean_text(content.decode("utf-8", errors="ignore"))

    def _extract_from_pdf(self, content: bytes) -> str:
        try:
            pdf_reader = PyPDF2.PdfReader(io.BytesIO(content))
            pages = [page.extract_text() or "" for page in pdf_reader.pages]
        except Exception as e:
            logger.warning("PDF extraction failed: %s", e)
            raise FileProcessingError(f"Failed to extract PDF text: {e}") from e
        return self._clean_text("\n".join(pages))

    def _extract_from_word(self, content: bytes) -> str:
        """Paragraphs first, then table cells row by row"""
        try:
            doc = Document(io.BytesIO(content))
        except Exception as e:
            logger.warning("Word extraction failed: %s", e)
            raise FileProcessingError(f"Failed to extract Word document text: {e}") from e

        lines = [paragraph.text for paragraph in doc.paragraphs]
        for table in doc.tables:
            for row in table.rows:
                lines.append(" ".join(cell.text for cell in row.cells))
        return self._clean_text("\n".join(lines))

    def _clean_text(self, text: str) -> str:
        if not text:
            return ""

        text = re.sub(r"\s+", " ", text)
        # Keep characters that appear in skill names such as C++, C#, Node.js, CI/CD
        text = re.sub(r"[^\w\s\-.,;:()\[\]/@#%&+]", "", text)

        return text.strip()
