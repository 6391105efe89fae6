"""Tests for the PDF engine, its processors and the file-level extractors."""

import pytest

from pdfstudio.engine import EngineConfig, PageRange, PDFEngine, TextProcessor, TextProcessorOptions
from pdfstudio.extractors.page_renderer import render_page
from pdfstudio.extractors.text_extractor import extract_document
from pdfstudio.utils.validation import PdfValidationError


def test_engine_reports_document_info(pdf_file):
    with PDFEngine(str(pdf_file)) as engine:
        assert engine.is_open
        assert engine.get_page_count() == 2
        assert engine.get_page_size(0) == (612.0, 792.0)
        assert engine.get_status()['processors'] == ['text', 'render']
    assert not engine.is_open


def test_processors_are_released_on_close(pdf_file):
    engine = PDFEngine(str(pdf_file))
    with engine:
        processor = engine.text_processor
        assert processor.is_ready
    assert not processor.is_ready
    with pytest.raises(RuntimeError):
        processor.extract_page(0)

    with engine:
        assert engine.get_status()["processors"] == ["text", "render"]
        assert engine.text_processor.extract_page(0).pageNumber == 0


def test_extracted_pages_are_cached(pdf_file):
    with PDFEngine(str(pdf_file)) as engine:
        first = engine.text_processor.extract_page(1)
        assert engine.text_processor.extract_page(1) is first
        engine.clear_cache()
        assert engine.text_processor.extract_page(1) is not first


def test_extracted_span_order_and_page_numbers(pdf_file):
    with PDFEngine(str(pdf_file)) as engine:
        page = engine.text_processor.extract_page(1)
    assert page.pageNumber == 1
    assert [span.text for span in page.spans] == ["Appendix"]
    assert [span.index for span in page.spans] == [0]


def test_word_height_as_font_size(pdf_file):
    with PDFEngine(str(pdf_file), EngineConfig(enable_caching=False)) as engine:
        processor = TextProcessor(engine, TextProcessorOptions(use_font_size=False))
        processor.initialize()
        page = processor.extract_page(0)
    assert page.spans
    assert all(span.fontSize == pytest.approx(span.height) for span in page.spans)


def test_engine_requires_context(pdf_file):
    engine = PDFEngine(str(pdf_file))
    with pytest.raises(RuntimeError):
        engine.get_page_count()


def test_page_index_out_of_range(pdf_file):
    with PDFEngine(str(pdf_file)) as engine:
        with pytest.raises(IndexError):
            engine.get_page_size(2)


def test_missing_and_invalid_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        PDFEngine(str(tmp_path / "absent.pdf"))

    not_pdf = tmp_path / "notes.pdf"
    not_pdf.write_bytes(b"plain text, not a PDF")
    with pytest.raises(PdfValidationError):
        with PDFEngine(str(not_pdf)):
            pass


def test_invalid_engine_config(pdf_file):
    with pytest.raises(PdfValidationError):
        PDFEngine(str(pdf_file), config=EngineConfig(max_file_size_mb=0))


def test_extract_document_page_range(pdf_file):
    document = extract_document(str(pdf_file), PageRange.single_page(2))
    assert document.page_count == 1
    assert document.pages[0].pageNumber == 1


def test_extract_document_wraps_failures(tmp_path):
    broken = tmp_path / "broken.pdf"
    broken.write_bytes(b"%PDF-1.7\nthis is not really a PDF")
    with pytest.raises(PdfValidationError):
        extract_document(str(broken))


def test_render_page_size_follows_dpi(pdf_file):
    png_bytes, (width, height) = render_page(str(pdf_file), 0, dpi=72)
    assert png_bytes.startswith(b"\x89PNG")
    assert abs(width - 612) <= 1
    assert abs(height - 792) <= 1


def test_render_page_out_of_range(pdf_file):
    with pytest.raises(IndexError):
        render_page(str(pdf_file), 5)


def test_render_rejects_unreasonable_dpi(pdf_file):
    with pytest.raises(ValueError):
        render_page(str(pdf_file), 0, dpi=5000)
