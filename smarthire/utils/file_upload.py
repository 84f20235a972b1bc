"""
File Upload Utility - Extract text from resumes/JDs and store intro videos.

Supported document formats:
- PDF (.pdf) using PyPDF2
- Word (.docx) using python-docx
- Plain Text / Markdown (.txt, .md)

Supported video formats: .webm, .mp4, .mov
"""

import io
import os
import uuid
from typing import Tuple
from fastapi import UploadFile, HTTPException

from smarthire.core.config import get_settings

# PDF support
try:
    from PyPDF2 import PdfReader
    PDF_SUPPORTED = True
except ImportError:
    PDF_SUPPORTED = False

# DOCX support
try:
    from docx import Document
    DOCX_SUPPORTED = True
except ImportError:
    DOCX_SUPPORTED = False


settings = get_settings()

DOCUMENT_EXTENSIONS = {'.pdf', '.docx', '.txt', '.md'}
VIDEO_EXTENSIONS = {'.webm', '.mp4', '.mov'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def extract_text_from_file(file: UploadFile) -> Tuple[str, str]:
    """
    Extract text from an uploaded document.

    Returns:
        Tuple of (extracted_text, filename)

    Raises:
        HTTPException on validation/extraction errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in DOCUMENT_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOCX, TXT, MD"
        )

    content = await file.read()

    max_bytes = settings.max_upload_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_upload_mb}MB"
        )

    if ext == '.pdf':
        text = extract_from_pdf(content)
    elif ext == '.docx':
        text = extract_from_docx(content)
    else:
        text = extract_from_txt(content)

    if not text.strip():
        raise HTTPException(
            status_code=400,
            detail="Could not extract text from file. File may be empty or corrupted."
        )

    return text, file.filename


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes."""
    if not PDF_SUPPORTED:
        raise HTTPException(status_code=500, detail="PDF support not available. Install PyPDF2.")

    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        return '\n'.join(text_parts)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Error reading PDF: {str(e)}")


def extract_from_docx(content: bytes) -> str:
    """Extract text from DOCX bytes."""
    if not DOCX_SUPPORTED:
        raise HTTPException(status_code=500, detail="DOCX support not available. Install python-docx.")

    try:
        doc = Document(io.BytesIO(content))
        text_parts = []

        for para in doc.paragraphs:
            if para.text.strip():
                text_parts.append(para.text)

        for table in doc.tables:
            for row in table.rows:
                row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if row_text:
                    text_parts.append(' | '.join(row_text))

        return '\n'.join(text_parts)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Error reading DOCX: {str(e)}")


def extract_from_txt(content: bytes) -> str:
    """Extract text from TXT bytes."""
    for encoding in ['utf-8', 'latin-1']:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise HTTPException(status_code=400, detail="Could not decode text file")


async def save_video_file(file: UploadFile, application_id: int) -> str:
    """
    Store an intro video under UPLOAD_DIR/videos.

    Returns:
        Public URL path of the stored file (served from /uploads)
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in VIDEO_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported video type '{ext}'. Allowed: WEBM, MP4, MOV"
        )

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Video file is empty")

    max_bytes = settings.max_video_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Video too large. Maximum size: {settings.max_video_mb}MB"
        )

    video_dir = os.path.join(settings.upload_dir, "videos")
    os.makedirs(video_dir, exist_ok=True)
    stored_name = f"app-{application_id}-{uuid.uuid4().hex}{ext}"
    with open(os.path.join(video_dir, stored_name), "wb") as f:
        f.write(content)

    return f"/uploads/videos/{stored_name}"


def get_supported_formats() -> dict:
    """Get info about supported file formats."""
    return {
        "document_formats": [
            {"extension": ".pdf", "available": PDF_SUPPORTED, "name": "PDF"},
            {"extension": ".docx", "available": DOCX_SUPPORTED, "name": "Word Document"},
            {"extension": ".txt", "available": True, "name": "Plain Text"},
            {"extension": ".md", "available": True, "name": "Markdown"}
        ],
        "video_formats": sorted(VIDEO_EXTENSIONS),
        "max_size_mb": settings.max_upload_mb,
        "max_video_size_mb": settings.max_video_mb
    }
