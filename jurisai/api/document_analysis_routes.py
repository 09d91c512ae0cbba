"""
FastAPI Router — Document Analysis
==================================

`POST /document-analysis/analyze` (multipart): `documentFile` plus an optional
`question`. The text of the document is extracted (TXT, PDF, DOCX, best effort
for DOC), cut to `MAX_CONTEXT_CHARS`, and the model answers strictly from it.
The temporary upload is removed on every exit path.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from jurisai.api.dependencies import AuthContext, get_auth_context
from jurisai.api.llm_pipeline import LLM_Pipeline, get_pipeline
from jurisai.api.prompt_utilities import (
    persist_upload,
    remove_upload,
    extract_document_text,
    UnsupportedDocumentError,
)
from jurisai.api.utils import internal_error

router = APIRouter(prefix="/document-analysis", tags=["document-analysis"])

logger = logging.getLogger(__name__)

DEFAULT_QUESTION = "Summarize this document."


@router.post("/analyze")
def analyze_document(
    documentFile: Optional[UploadFile] = File(None),
    question: Optional[str] = Form(None),
    auth: AuthContext = Depends(get_auth_context),
    pipeline: LLM_Pipeline = Depends(get_pipeline),
):
    """Answer a question about an uploaded document.

    Response:
        200: {answer, originalFilename}
        400: no file, unsupported type (named in the message), or no text found
        500: extraction or provider failure
    """
    if documentFile is None or not documentFile.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    question = (question or "").strip() or DEFAULT_QUESTION
    rec = None
    try:
        rec = persist_upload(documentFile, subdir="documents")
        logger.info("User %s analyzing %s (%s)", auth.id, rec.original, rec.mime)
        try:
            text = extract_document_text(rec.path, rec.mime)
        except UnsupportedDocumentError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not text.strip():
            raise HTTPException(status_code=400, detail="Could not extract any text from the document")
        answer = pipeline.answer_from_document(text, question)
        return {"answer": answer, "originalFilename": rec.original}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Server error while analyzing the document", e)
    finally:
        if rec is not None:
            remove_upload(rec.path)
