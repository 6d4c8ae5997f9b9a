"""
Comprehensive tests for all extractors (plain text, Markdown, HTML, PDF, DOCX, XLSX, PPTX).
Tests extraction output formats, cancellation checkpoints, and error handling.
"""

import pytest
from pathlib import Path

import doctext.extractors.pdf as pdf_module
from doctext.cancellation import CancellationToken
from doctext.errors import DecodeError, ExtractionCancelled
from doctext.extractors.docx import DocxExtractor
from doctext.extractors.html import HtmlExtractor, clean_whitespace
from doctext.extractors.markdown import MarkdownExtractor
from doctext.extractors.pdf import PdfExtractor
from doctext.extractors.plain_text import FallbackPlainTextExtractor, PlainTextExtractor
from doctext.extractors.pptx import PptxExtractor
from doctext.extractors.xlsx import XlsxExtractor


@pytest.fixture
def token() -> CancellationToken:
    return CancellationToken()


class TestPlainTextExtractor:
    """Test plain text extraction and charset handling."""

    def test_extract_utf8(self, tmp_path: Path, token):
        f = tmp_path / "notes.txt"
        f.write_text("héllo\nworld", encoding="utf-8")

        assert PlainTextExtractor().extract(f, token) == "héllo\nworld"

    def test_extract_utf16_with_bom(self, tmp_path: Path, token):
        """Test that a UTF-16 file is decoded from its byte order mark."""
        f = tmp_path / "export.csv"
        f.write_bytes("a,b\n1,2".encode("utf-16"))

        assert PlainTextExtractor().extract(f, token) == "a,b\n1,2"

    def test_claims_source_and_config_suffixes(self):
        extractor = PlainTextExtractor()

        for name in ["a.py", "b.JSON", "c.yaml", "d.sql", ".gitignore", "e.properties"]:
            assert extractor.can_handle(Path(name)), name
        assert not extractor.can_handle(Path("report.pdf"))

    def test_extract_missing_file(self, tmp_path: Path, token):
        with pytest.raises(FileNotFoundError):
            PlainTextExtractor().extract(tmp_path / "missing.txt", token)

    def test_extract_empty_file(self, tmp_path: Path, token):
        f = tmp_path / "empty.txt"
        f.write_bytes(b"")

        assert PlainTextExtractor().extract(f, token) == ""

    def test_cancelled_before_read(self, tmp_path: Path, token):
        f = tmp_path / "notes.txt"
        f.write_text("x")
        token.cancel()

        with pytest.raises(ExtractionCancelled):
            PlainTextExtractor().extract(f, token)


class TestFallbackPlainTextExtractor:
    """Test the size-bounded catch-all."""

    def test_reads_unknown_suffix(self, tmp_path: Path, token):
        f = tmp_path / "Dockerfile"
        f.write_text("FROM python:3.12")
        extractor = FallbackPlainTextExtractor()

        assert extractor.can_handle(f)
        assert extractor.extract(f, token) == "FROM python:3.12"

    def test_size_limit_is_exclusive(self, tmp_path: Path):
        f = tmp_path / "blob.bin"
        f.write_bytes(b"x" * 10)

        assert not FallbackPlainTextExtractor(max_bytes=10).can_handle(f)
        assert FallbackPlainTextExtractor(max_bytes=11).can_handle(f)

    def test_directories_not_claimed(self, tmp_path: Path):
        assert not FallbackPlainTextExtractor().can_handle(tmp_path)


class TestMarkdownExtractor:
    """Test Markdown extraction with and without front matter."""

    def test_extract_simple_markdown(self, tmp_path: Path, token):
        md_file = tmp_path / "simple.md"
        md_file.write_text("# Heading\n\nSome content here.")

        text = MarkdownExtractor().extract(md_file, token)

        assert text == "# Heading\n\nSome content here."

    def test_extract_markdown_with_frontmatter(self, tmp_path: Path, token):
        """Test that YAML front matter is stripped from the body."""
        md_file = tmp_path / "with_frontmatter.md"
        md_file.write_text(
            """---
title: Test Note
tags: [test, important]
---

# Content

This is the actual content."""
        )

        text = MarkdownExtractor().extract(md_file, token)

        assert "title: Test Note" not in text
        assert "# Content" in text
        assert "This is the actual content." in text

    def test_broken_frontmatter_keeps_raw_text(self, tmp_path: Path, token):
        md_file = tmp_path / "broken.md"
        raw = "---\ntitle: [unclosed\n---\nBody"
        md_file.write_text(raw)

        assert MarkdownExtractor().extract(md_file, token) == raw

    def test_claims_markdown_suffixes(self):
        extractor = MarkdownExtractor()

        assert extractor.can_handle(Path("README.md"))
        assert extractor.can_handle(Path("guide.markdown"))
        assert not extractor.can_handle(Path("notes.txt"))


class TestHtmlExtractor:
    """Test HTML visible-text extraction."""

    def test_scripts_and_styles_removed(self, tmp_path: Path, token):
        html = tmp_path / "page.html"
        html.write_text(
            "<html><head><style>p { color: red; }</style>"
            "<script>var secret = 1;</script></head>"
            "<body><h1>Menu</h1>\n<p>Fish &amp; Chips</p>\n\n<p>  two   words </p></body></html>"
        )

        text = HtmlExtractor().extract(html, token)

        assert "Fish & Chips" in text
        assert "two words" in text
        assert "secret" not in text
        assert "color" not in text

    def test_htm_suffix(self):
        assert HtmlExtractor().can_handle(Path("INDEX.HTM"))

    def test_clean_whitespace(self):
        assert clean_whitespace("  a \t b \n\n\n c  ") == "a b\nc"


class TestPdfExtractor:
    """Test PDF extraction."""

    def test_extract_pdf_with_text(self, tmp_path: Path, token):
        """Test PDF extraction with a generated three-page document whose middle page is blank."""
        pytest.importorskip("reportlab")
        from reportlab.lib.pagesizes import letter
        from reportlab.pdfgen import canvas

        pdf_file = tmp_path / "test.pdf"
        c = canvas.Canvas(str(pdf_file), pagesize=letter)
        c.drawString(100, 750, "First page text")
        c.showPage()
        c.showPage()  # blank
        c.drawString(100, 750, "Third page text")
        c.showPage()
        c.save()

        text = PdfExtractor().extract(pdf_file, token)

        assert "First page text" in text
        assert "Third page text" in text
        assert "\n\n\n\n" not in text
        assert text.index("First") < text.index("Third")

    def test_corrupt_pdf_raises_decode_error(self, tmp_path: Path, token):
        bad = tmp_path / "bad.pdf"
        bad.write_bytes(b"this is not a pdf")

        with pytest.raises(DecodeError) as excinfo:
            PdfExtractor().extract(bad, token)

        assert excinfo.value.cause is not None

    def test_cancellation_checked_per_page(self, tmp_path: Path, token, monkeypatch):
        """Test that cancellation during page one stops before page two."""
        visited: list[int] = []

        class FakePage:
            def __init__(self, n):
                self.n = n

            def extract_text(self):
                visited.append(self.n)
                token.cancel()
                return f"page {self.n}"

        class FakePdf:
            pages = [FakePage(1), FakePage(2), FakePage(3)]

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        monkeypatch.setattr(pdf_module.pdfplumber, "open", lambda path: FakePdf())
        f = tmp_path / "long.pdf"
        f.write_bytes(b"%PDF-1.4")

        with pytest.raises(ExtractionCancelled):
            PdfExtractor().extract(f, token)

        assert visited == [1]

    def test_page_separator(self, tmp_path: Path, token, monkeypatch):
        class FakePage:
            def __init__(self, text):
                self.text = text

            def extract_text(self):
                return self.text

        class FakePdf:
            pages = [FakePage("one"), FakePage("   "), FakePage(None), FakePage("two")]

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

        monkeypatch.setattr(pdf_module.pdfplumber, "open", lambda path: FakePdf())
        f = tmp_path / "doc.pdf"
        f.write_bytes(b"%PDF-1.4")

        assert PdfExtractor().extract(f, token) == "one\n\ntwo"


class TestDocxExtractor:
    """Test Word document extraction."""

    def test_paragraphs_then_tables(self, tmp_path: Path, token):
        from docx import Document

        docx_file = tmp_path / "report.docx"
        doc = Document()
        doc.add_paragraph("Executive summary")
        doc.add_paragraph("")
        doc.add_paragraph("Second paragraph")
        table = doc.add_table(rows=2, cols=2)
        table.cell(0, 0).text = "Region"
        table.cell(0, 1).text = "Total"
        table.cell(1, 0).text = "North"
        table.cell(1, 1).text = "42"
        doc.save(str(docx_file))

        text = DocxExtractor().extract(docx_file, token)

        assert text == "Executive summary\nSecond paragraph\nRegion | Total\nNorth | 42"

    def test_tables_keep_reading_order(self, tmp_path: Path, token):
        """Test that a table between paragraphs stays between them."""
        from docx import Document

        docx_file = tmp_path / "ordered.docx"
        doc = Document()
        doc.add_paragraph("Before the table")
        table = doc.add_table(rows=1, cols=2)
        table.cell(0, 0).text = "A1"
        table.cell(0, 1).text = "B1"
        doc.add_paragraph("After the table")
        doc.save(str(docx_file))

        text = DocxExtractor().extract(docx_file, token)

        assert text == "Before the table\nA1 | B1\nAfter the table"

    def test_doc_not_claimed(self):
        assert not DocxExtractor().can_handle(Path("legacy.doc"))

    def test_corrupt_docx_raises_decode_error(self, tmp_path: Path, token):
        bad = tmp_path / "bad.docx"
        bad.write_bytes(b"not a zip archive")

        with pytest.raises(DecodeError):
            DocxExtractor().extract(bad, token)


class TestXlsxExtractor:
    """Test workbook extraction."""

    def test_extract_xlsx_with_data(self, tmp_path: Path, token):
        from openpyxl import Workbook

        xlsx_file = tmp_path / "sales.xlsx"
        wb = Workbook()
        ws = wb.active
        ws.title = "Sales"
        ws.append(["Region", "Total"])
        ws.append([None, None])
        ws.append(["North", 10])
        other = wb.create_sheet("Notes")
        other.append(["checked"])
        wb.save(str(xlsx_file))

        text = XlsxExtractor().extract(xlsx_file, token)

        assert text.startswith("=== Worksheet: Sales ===")
        assert "Region\tTotal" in text
        assert "North\t10" in text
        assert "=== Worksheet: Notes ===\nchecked" in text
        assert "\t\n" not in text
        assert text.index("Sales") < text.index("Notes")

    def test_cancelled_token_stops_extraction(self, tmp_path: Path, token):
        from openpyxl import Workbook

        xlsx_file = tmp_path / "book.xlsx"
        wb = Workbook()
        wb.active.append(["x"])
        wb.save(str(xlsx_file))
        token.cancel()

        with pytest.raises(ExtractionCancelled):
            XlsxExtractor().extract(xlsx_file, token)

    def test_corrupt_xlsx_raises_decode_error(self, tmp_path: Path, token):
        bad = tmp_path / "bad.xlsx"
        bad.write_bytes(b"not a workbook")

        with pytest.raises(DecodeError):
            XlsxExtractor().extract(bad, token)

    def test_xls_not_claimed(self):
        extractor = XlsxExtractor()

        assert extractor.can_handle(Path("macro.xlsm"))
        assert not extractor.can_handle(Path("legacy.xls"))


class TestPptxExtractor:
    """Test PowerPoint extraction."""

    def test_extract_pptx_with_text(self, tmp_path: Path, token):
        from pptx import Presentation

        pptx_file = tmp_path / "deck.pptx"
        prs = Presentation()
        layout = prs.slide_layouts[1]  # Title and Content
        s1 = prs.slides.add_slide(layout)
        s1.shapes.title.text = "Quarterly Review"
        s1.placeholders[1].text = "Revenue up"
        s2 = prs.slides.add_slide(layout)
        s2.shapes.title.text = "Next Steps"
        prs.save(str(pptx_file))

        text = PptxExtractor().extract(pptx_file, token)

        assert text.startswith("=== Slide 1 ===")
        assert "Quarterly Review" in text
        assert "Revenue up" in text
        assert "\n\n=== Slide 2 ===" in text
        assert text.index("Revenue up") < text.index("Next Steps")

    def test_corrupt_pptx_raises_decode_error(self, tmp_path: Path, token):
        bad = tmp_path / "bad.pptx"
        bad.write_bytes(b"garbage")

        with pytest.raises(DecodeError):
            PptxExtractor().extract(bad, token)
