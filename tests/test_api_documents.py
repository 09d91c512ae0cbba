import io
import os

import docx
import pytest
from fastapi import UploadFile
from pypdf import PdfWriter

from conftest import API, FakeChatModel
from jurisai.api import prompt_utilities
from jurisai.api.llm_pipeline import LLM_Pipeline, get_pipeline
from jurisai.api.prompt_utilities import DOC_MIME, DOCX_MIME, MAX_CONTEXT_CHARS, PDF_MIME, build_document_prompt
from jurisai.database.config.config import settings

URL = f"{API}/document-analysis/analyze"


@pytest.fixture()
def model(app):
    chat = FakeChatModel(replies=["The lease lasts three years."])
    instance = LLM_Pipeline(chat_model=chat, title_model=FakeChatModel())
    app.dependency_overrides[get_pipeline] = lambda: instance
    return chat


def _uploads():
    directory = os.path.join(settings.UPLOAD_DIR, "documents")
    return os.listdir(directory) if os.path.isdir(directory) else []


def _docx_bytes(*paragraphs):
    doc = docx.Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def _pdf_bytes(text):
    """A one page PDF drawing `text` in Helvetica."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode()
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref)
    return out


def test_analyze_text_document(user_client, model):
    r = user_client.post(
        URL,
        files={"documentFile": ("lease.txt", b"The lease is signed for three years.", "text/plain")},
        data={"question": "How long is the lease?"},
    )
    assert r.status_code == 200
    assert r.json() == {"answer": "The lease lasts three years.", "originalFilename": "lease.txt"}

    prompt = model.calls[0][0].content
    assert "The lease is signed for three years." in prompt
    assert "How long is the lease?" in prompt
    assert _uploads() == []


def test_analyze_docx_document(user_client, model):
    payload = _docx_bytes("Residential lease.", "The lease is signed for three years.")
    r = user_client.post(
        URL,
        files={"documentFile": ("lease.docx", payload, DOCX_MIME)},
        data={"question": "How long is the lease?"},
    )
    assert r.status_code == 200
    assert r.json()["originalFilename"] == "lease.docx"
    prompt = model.calls[0][0].content
    assert "Residential lease.\nThe lease is signed for three years." in prompt
    assert _uploads() == []


def test_analyze_pdf_document(user_client, model):
    payload = _pdf_bytes("The lease is signed for three years.")
    r = user_client.post(URL, files={"documentFile": ("lease.pdf", payload, PDF_MIME)})
    assert r.status_code == 200
    assert "signed for three years" in model.calls[0][0].content
    assert _uploads() == []


def test_pdf_without_text_is_rejected(user_client, model):
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    r = user_client.post(URL, files={"documentFile": ("scan.pdf", buf.getvalue(), PDF_MIME)})
    assert r.status_code == 400
    assert "Could not extract any text" in r.json()["detail"]
    assert model.calls == []
    assert _uploads() == []


def test_legacy_doc_suggests_conversion(user_client, model):
    r = user_client.post(URL, files={"documentFile": ("old.doc", b"not a word file", DOC_MIME)})
    assert r.status_code == 400
    assert ".docx or .pdf" in r.json()["detail"]
    assert model.calls == []
    assert _uploads() == []


def test_docx_sent_as_legacy_doc_is_read(user_client, model):
    payload = _docx_bytes("Clause 4: rent is due monthly.")
    r = user_client.post(URL, files={"documentFile": ("renamed.doc", payload, DOC_MIME)})
    assert r.status_code == 200
    assert "rent is due monthly" in model.calls[0][0].content
    assert _uploads() == []


def test_default_question(user_client, model):
    r = user_client.post(URL, files={"documentFile": ("a.txt", b"Some text.", "text/plain")})
    assert r.status_code == 200
    assert "Summarize this document." in model.calls[0][0].content


def test_unsupported_type_names_the_type(user_client, model):
    r = user_client.post(URL, files={"documentFile": ("photo.png", b"\x89PNG\r\n", "image/png")})
    assert r.status_code == 400
    assert "image/png" in r.json()["detail"]
    assert model.calls == []
    assert _uploads() == []


def test_missing_file(user_client, model):
    r = user_client.post(URL, data={"question": "anything"})
    assert r.status_code == 400


def test_empty_document(user_client, model):
    r = user_client.post(URL, files={"documentFile": ("empty.txt", b"   ", "text/plain")})
    assert r.status_code == 400


def test_provider_error_is_a_server_error(user_client, app):
    instance = LLM_Pipeline(chat_model=FakeChatModel(error=RuntimeError("quota")), title_model=FakeChatModel())
    app.dependency_overrides[get_pipeline] = lambda: instance
    r = user_client.post(URL, files={"documentFile": ("a.txt", b"Some text.", "text/plain")})
    assert r.status_code == 500
    assert r.json()["detail"]["cause"] == "quota"
    assert _uploads() == []


def test_requires_session(client, model):
    r = client.post(URL, files={"documentFile": ("a.txt", b"Some text.", "text/plain")})
    assert r.status_code == 401


def test_failed_copy_leaves_no_partial_upload(monkeypatch):
    def broken_copy(src, dst):
        dst.write(b"half")
        raise OSError("disk full")

    monkeypatch.setattr(prompt_utilities.shutil, "copyfileobj", broken_copy)
    upload = UploadFile(file=io.BytesIO(b"whole file"), filename="a.txt")
    with pytest.raises(OSError):
        prompt_utilities.persist_upload(upload, subdir="documents")
    assert _uploads() == []


def test_document_context_is_truncated():
    text = "a" * (MAX_CONTEXT_CHARS + 500)
    prompt = build_document_prompt(text, "Q?")
    assert "a" * MAX_CONTEXT_CHARS in prompt
    assert "a" * (MAX_CONTEXT_CHARS + 1) not in prompt
