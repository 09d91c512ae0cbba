"""
Uploads, Text Extraction & Prompt Assembly
==========================================

Purpose
-------
Utilities for persisting user uploads, extracting text from documents
(plain text, PDF, DOCX), and building the message lists sent to the LLM.

Key Functions
-------------
- guess_ext             : Infer file extension from a filename.
- persist_upload        : Save UploadFile to disk, return FileRec metadata.
- remove_upload         : Delete a temporary upload if it still exists.
- extract_text_from_pdf : Extract plain text from all PDF pages.
- extract_text_from_docx: Extract paragraph text from a Word document.
- extract_document_text : Dispatch on MIME type; reject unsupported types.
- build_document_prompt : Ground a question strictly on extracted text.
- build_chat_messages   : System prompt + history + new user message.

Dependencies
------------
FastAPI (UploadFile), pypdf, python-docx, and the FileRec model.
"""

import logging
import os
import shutil
import uuid
from docx import Document
from fastapi import UploadFile
from pypdf import PdfReader
from jurisai.api.models import FileRec
from jurisai.database.config.config import settings

logger = logging.getLogger(__name__)

MAX_CONTEXT_CHARS = 15000
"""Extracted document text is cut to this many characters before prompting."""

TEXT_MIME = "text/plain"
PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"


class UnsupportedDocumentError(Exception):
    """Raised when a document cannot be turned into text; maps to a 400."""


def guess_ext(filename: str) -> str:
    """
    Extract the file extension from a filename.

    Args:
        filename (str): Input filename.

    Returns:
        str: Lowercased file extension (e.g., ".pdf").
    """
    _, ext = os.path.splitext(filename or "")
    return ext.lower()


def persist_upload(f: UploadFile, subdir: str = "") -> FileRec:
    """
    Save an uploaded file to the server.

    - Generates a unique filename using UUID.
    - Preserves original extension.
    - Stores file under `settings.UPLOAD_DIR` (and `subdir` if given).
    - Returns metadata as FileRec.

    Args:
        f (UploadFile): The file uploaded by the client.
        subdir (str): Optional sub-directory of the upload directory.

    Returns:
        FileRec: Metadata containing original name, storage path, and MIME type.
    """
    ext = guess_ext(f.filename)
    new_name = f"{uuid.uuid4().hex}{ext}"
    directory = os.path.join(settings.UPLOAD_DIR, subdir) if subdir else settings.UPLOAD_DIR
    os.makedirs(directory, exist_ok=True)
    dest = os.path.join(directory, new_name)
    try:
        with open(dest, "wb") as out:
            shutil.copyfileobj(f.file, out)
    except Exception:
        remove_upload(dest)
        raise
    mime = (f.content_type or "").split(";")[0].strip().lower()
    return FileRec(original=f.filename or new_name, path=dest, mime=mime)


def remove_upload(path: str | None) -> None:
    """Delete a temporary upload; a missing file is not an error."""
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove temporary upload %s: %s", path, e)


def extract_text_from_pdf(path: str) -> str:
    """
    Extract plain text from all pages of a PDF.

    Args:
        path (str): Path to PDF file.

    Returns:
        str: Concatenated text from all pages.
    """
    reader = PdfReader(path)
    parts = []
    for p in reader.pages:
        txt = p.extract_text() or ""
        parts.append(txt)
    return "\n".join(parts)


def extract_text_from_docx(path: str) -> str:
    """
    Extract paragraph text from a Word document.

    Args:
        path (str): Path to the .docx file.

    Returns:
        str: Paragraphs joined by newlines.
    """
    doc = Document(path)
    return "\n".join(p.text for p in doc.paragraphs)


def safe_read_text(path: str) -> str:
    """
    Read text from a file safely (UTF-8, undecodable bytes ignored).
    """
    with open(path, "r", encoding="utf-8", errors="ignore") as f:
        return f.read()


def extract_document_text(path: str, mime: str) -> str:
    """
    Extract the text of an uploaded document according to its MIME type.

    Supports:
        - text/plain
        - application/pdf (pypdf)
        - DOCX (python-docx)
        - application/msword, best effort through python-docx

    Args:
        path (str): Path of the stored upload.
        mime (str): MIME type reported by the client.

    Returns:
        str: The extracted text (may be empty).

    Raises:
        UnsupportedDocumentError: Unsupported type, or a legacy .doc that
        could not be read.
    """
    if mime == TEXT_MIME:
        return safe_read_text(path)
    if mime == PDF_MIME:
        return extract_text_from_pdf(path)
    if mime == DOCX_MIME:
        return extract_text_from_docx(path)
    if mime == DOC_MIME:
        try:
            text = extract_text_from_docx(path)
        except Exception as e:
            logger.info("Legacy .doc extraction failed: %s", e)
            text = ""
        if not text.strip():
            raise UnsupportedDocumentError(
                "The .doc format is hard to process. Try converting it to .docx or .pdf."
            )
        return text
    raise UnsupportedDocumentError(f"Unsupported file format: {mime or 'unknown'}. Try TXT, PDF, or DOCX.")


def build_document_prompt(document_text: str, question: str) -> str:
    """
    Build a prompt that answers `question` strictly from `document_text`.

    The text is truncated to `MAX_CONTEXT_CHARS` characters.
    """
    context = document_text[:MAX_CONTEXT_CHARS]
    return (
        "Context provided (extracted from a user document):\n"
        f'"""\n{context}\n"""\n\n'
        "Based STRICTLY on the context above, answer the following question from the user:\n"
        f'Question: "{question}"\n\n'
        "If the answer is not in the provided context, say that the information is not present "
        "in the document. Do not make assumptions and do not look for information outside the context."
    )


def build_chat_messages(system_prompt: str | None, history: list[dict], new_message: str) -> list[dict]:
    """
    Build the ordered message list for a chat completion.

    Args:
        system_prompt (str | None): Content of the published system prompt, if any.
        history (list[dict]): Stored messages as `{"role", "content"}`, in storage order.
        new_message (str): The user's new message.

    Returns:
        list[dict]: `[system?] + history + [user]`, each as `{"role", "content"}`.
    """
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    for item in history:
        if item.get("role") and item.get("content"):
            messages.append({"role": item["role"], "content": item["content"]})
    messages.append({"role": "user", "content": new_message})
    return messages
