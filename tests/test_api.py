"""Tests for the HTTP endpoints."""

import io

import pikepdf
import pytest
from fastapi.testclient import TestClient

from pdfstudio.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def page_json(letter_page):
    return letter_page.model_dump(mode="json")


def test_root_and_health(client):
    assert client.get("/").json()["message"] == "PDF Studio API"

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] in ("healthy", "degraded")
    assert "pikepdf" in health.json()["dependencies"]


def test_parse_pdf(client, pdf_file):
    response = client.post(
        "/parse-pdf",
        files={"file": ("sample.pdf", pdf_file.read_bytes(), "application/pdf")},
    )
    assert response.status_code == 200
    pages = response.json()["pages"]
    assert len(pages) == 2
    assert pages[1]["spans"][0]["text"] == "Appendix"


def test_parse_pdf_page_range(client, pdf_file):
    response = client.post(
        "/parse-pdf",
        params={"start_page": 2},
        files={"file": ("sample.pdf", pdf_file.read_bytes(), "application/pdf")},
    )
    assert [page["pageNumber"] for page in response.json()["pages"]] == [1]


def test_parse_pdf_rejects_non_pdf(client):
    response = client.post(
        "/parse-pdf",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 400


def test_render_page(client, pdf_file):
    response = client.post(
        "/render-page",
        params={"page_number": 1, "dpi": 72},
        files={"file": ("sample.pdf", pdf_file.read_bytes(), "application/pdf")},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert abs(int(response.headers["x-raster-width"]) - 612) <= 1


def test_render_missing_page(client, pdf_file):
    response = client.post(
        "/render-page",
        params={"page_number": 9},
        files={"file": ("sample.pdf", pdf_file.read_bytes(), "application/pdf")},
    )
    assert response.status_code == 404


def test_edit_regions(client, page_json):
    response = client.post(
        "/edit-regions",
        json={"page": page_json, "rasterWidth": 1224, "rasterHeight": 1584},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["scale"] == 2.0
    assert [region["text"] for region in body["regions"]] == [
        "Quarterly Report\nDraft",
        "Revenue grew\nsteadily.",
    ]


def test_edit_regions_derives_raster_from_dpi(client, page_json):
    response = client.post("/edit-regions", json={"page": page_json, "dpi": 72})
    assert response.json()["scale"] == 1.0


@pytest.mark.parametrize("raster", [{"rasterWidth": 1224}, {"rasterHeight": 1584}])
def test_edit_regions_requires_both_raster_dimensions(client, page_json, raster):
    response = client.post("/edit-regions", json={"page": page_json, **raster})
    assert response.status_code == 400
    assert "together" in response.json()["detail"]


def test_edit_regions_rejects_degenerate_page(client, page_json):
    page_json["widthPt"] = 0
    response = client.post(
        "/edit-regions",
        json={"page": page_json, "rasterWidth": 100, "rasterHeight": 100},
    )
    assert response.status_code == 400


def test_apply_edits(client, page_json):
    response = client.post(
        "/apply-edits",
        json={"page": page_json, "edits": [{"index": 0, "text": "Annual Report"}]},
    )
    assert response.status_code == 200
    assert [span["text"] for span in response.json()["spans"]] == [
        "Annual Report",
        "Revenue grew\nsteadily.",
    ]


def test_apply_edits_unknown_region(client, page_json):
    response = client.post(
        "/apply-edits",
        json={"page": page_json, "edits": [{"index": 4, "text": "?"}]},
    )
    assert response.status_code == 400


def test_export_pdf(client, two_page_document):
    response = client.post(
        "/export-pdf",
        json={"document": two_page_document.model_dump(mode="json"), "filename": "report"},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "report.pdf" in response.headers["content-disposition"]
    with pikepdf.open(io.BytesIO(response.content)) as pdf:
        assert len(pdf.pages) == 2


def test_sample_pdf_can_be_parsed(client):
    response = client.get("/sample-pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"

    parsed = client.post(
        "/parse-pdf",
        files={"file": ("new.pdf", response.content, "application/pdf")},
    )
    assert parsed.status_code == 200
    words = [span["text"] for span in parsed.json()["pages"][0]["spans"]]
    assert words[0] == "Hello"


def test_parse_pdf_rejects_corrupt_pdf(client):
    response = client.post(
        "/parse-pdf",
        files={"file": ("broken.pdf", b"%PDF-1.7\nnot really a pdf", "application/pdf")},
    )
    assert response.status_code == 400
