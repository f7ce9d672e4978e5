"""
PDF Parser - Extracts syllabus text lines from a PDF file.

This module handles the extraction of text content from the syllabus PDF.
It uses pymupdf (fitz), which keeps the reading order of the syllabus
tables well enough for line-by-line classification.

Key Concepts:
- PDFs store text in a structured way (pages, blocks, lines)
- The classifier works on single lines, so we hand it trimmed,
  non-blank lines in reading order
- Bare page numbers are dropped during cleaning; spacing inside a line is
  left alone and only matters to the normalizer when names are compared
"""

from dataclasses import dataclass
from pathlib import Path

import fitz  # pymupdf - the library is called 'fitz' historically


@dataclass
class PageContent:
    """
    Represents the content of a single PDF page.

    Attributes:
        page_number: 1-indexed page number
        text: Extracted text content
    """
    page_number: int
    text: str


@dataclass
class DocumentContent:
    """
    Represents the full content of a PDF document.

    Attributes:
        filename: Name of the PDF file
        total_pages: Total number of pages
        pages: List of PageContent objects
        full_text: All text concatenated
    """
    filename: str
    total_pages: int
    pages: list[PageContent]
    full_text: str

    @property
    def lines(self) -> list[str]:
        """Trimmed, non-blank lines of the whole document in reading order."""
        return split_lines(self.full_text)


class PDFParser:
    """
    Parses a syllabus PDF and extracts its text.

    Example:
        parser = PDFParser()
        content = parser.parse_pdf("content/syllabus/2025.pdf")
        for line in content.lines:
            print(line)
    """

    def __init__(self, clean_text: bool = True):
        """
        Initialize the PDF parser.

        Args:
            clean_text: If True, drop page numbers. Spacing inside a line is
                kept, since line length drives classification
        """
        self.clean_text = clean_text

    def _clean_extracted_text(self, text: str) -> str:
        """
        Clean extracted text by removing common artifacts.

        Args:
            text: Raw extracted text

        Returns:
            Cleaned text
        """
        if not self.clean_text:
            return text

        # Remove lines that are just numbers (likely page numbers)
        lines = text.split('\n')
        cleaned_lines = [
            line for line in lines
            if not (line.strip().isdigit() and len(line.strip()) < 4)
        ]
        return '\n'.join(cleaned_lines).strip()

    def parse_pdf(self, pdf_path: str | Path) -> DocumentContent:
        """
        Parse a single PDF file and extract all text.

        Args:
            pdf_path: Path to the PDF file

        Returns:
            DocumentContent with all extracted text

        Raises:
            FileNotFoundError: If the PDF file doesn't exist
            RuntimeError: If the PDF cannot be opened
        """
        pdf_path = Path(pdf_path)

        if not pdf_path.exists():
            raise FileNotFoundError(f"PDF file not found: {pdf_path}")

        try:
            doc = fitz.open(pdf_path)
        except Exception as e:
            raise RuntimeError(f"Failed to open PDF {pdf_path}: {e}") from e

        pages = []
        total_pages = len(doc)  # Save before closing!

        try:
            for page_num in range(total_pages):
                cleaned = self._clean_extracted_text(doc[page_num].get_text())
                if cleaned:
                    pages.append(PageContent(page_number=page_num + 1, text=cleaned))
        finally:
            doc.close()

        return DocumentContent(
            filename=pdf_path.name,
            total_pages=total_pages,
            pages=pages,
            full_text='\n'.join(page.text for page in pages),
        )


def split_lines(text: str) -> list[str]:
    """Split text into trimmed lines, dropping blank ones."""
    return [line.strip() for line in text.split('\n') if line.strip()]


def extract_lines_from_pdf(pdf_path: str | Path, clean: bool = True) -> list[str]:
    """
    Simple function to get the classifiable lines of a PDF.

    Example:
        lines = extract_lines_from_pdf("2025.pdf")
        print(lines[:10])
    """
    return PDFParser(clean_text=clean).parse_pdf(pdf_path).lines
