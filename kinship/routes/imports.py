"""
Contact Import Routes
Turns pasted text, vCards, screenshots, Instagram handles and group photos
into contact drafts the client can review before saving
"""

from fastapi import APIRouter, Depends, HTTPException, File, UploadFile, Form
from starlette.concurrency import run_in_threadpool
from typing import List
from ..schemas.imports import (
    TextImportIn,
    InstagramImportIn,
    ContactDraftOut,
    ScreenshotImportOut,
    FaceRegionOut,
    FaceCropOut,
)
from ..extraction import (
    OCRError,
    crop_region,
    detect_face_regions,
    extract_from_screenshot,
    parse_contact_text,
    parse_instagram_username,
    parse_vcards,
)
from ..auth import get_current_user
from ..cache import check_rate_limit
from ..core import CONTACT_IMPORTS
from ..file_storage import file_storage
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

IMPORT_RATE_LIMIT = 60  # per hour


async def import_rate_limited_user(current_user: dict = Depends(get_current_user)) -> dict:
    if not await check_rate_limit(current_user['id'], "contact_import", limit=IMPORT_RATE_LIMIT, window=3600):
        raise HTTPException(429, "Rate limit exceeded. Too many imports.")
    return current_user


@router.post('/text', response_model=ContactDraftOut)
async def import_text(payload: TextImportIn, current_user: dict = Depends(import_rate_limited_user)):
    draft = parse_contact_text(payload.text)
    if draft.is_empty():
        raise HTTPException(400, 'Could not extract contact information')
    CONTACT_IMPORTS.labels(source='text').inc()
    return draft.to_dict()


@router.post('/vcard', response_model=List[ContactDraftOut])
async def import_vcard(file: UploadFile = File(...), current_user: dict = Depends(import_rate_limited_user)):
    content = await file_storage.read_upload(file)
    drafts = parse_vcards(content.decode('utf-8', errors='replace'))
    if not drafts:
        raise HTTPException(400, 'No contacts found in file')
    CONTACT_IMPORTS.labels(source='vcard').inc(len(drafts))
    logger.info(f"User {current_user['id']} imported {len(drafts)} contacts from {file.filename}")
    return [draft.to_dict() for draft in drafts]


@router.post('/screenshot', response_model=ScreenshotImportOut)
async def import_screenshot(file: UploadFile = File(...), current_user: dict = Depends(import_rate_limited_user)):
    content = await file_storage.read_upload(file)
    try:
        draft, raw_text = await run_in_threadpool(extract_from_screenshot, content)
    except OCRError as e:
        logger.warning(f"Screenshot OCR failed for user {current_user['id']}: {e}")
        raise HTTPException(422, f"Could not read screenshot: {e}")
    CONTACT_IMPORTS.labels(source='screenshot').inc()
    return {'contact': draft.to_dict(), 'raw_text': raw_text}


@router.post('/instagram', response_model=ContactDraftOut)
async def import_instagram(payload: InstagramImportIn, current_user: dict = Depends(import_rate_limited_user)):
    try:
        draft = parse_instagram_username(payload.username)
    except ValueError as e:
        raise HTTPException(400, str(e))
    CONTACT_IMPORTS.labels(source='instagram').inc()
    return draft.to_dict()


@router.post('/faces', response_model=List[FaceRegionOut])
async def import_faces(file: UploadFile = File(...), current_user: dict = Depends(import_rate_limited_user)):
    content = await file_storage.read_upload(file)
    try:
        regions = await run_in_threadpool(detect_face_regions, content)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return regions


@router.post('/faces/crop', response_model=FaceCropOut)
async def import_face_crop(
    file: UploadFile = File(...),
    x: float = Form(...),
    y: float = Form(...),
    width: float = Form(...),
    height: float = Form(...),
    current_user: dict = Depends(import_rate_limited_user)
):
    content = await file_storage.read_upload(file)
    try:
        data_url, crop_width, crop_height = await run_in_threadpool(crop_region, content, x, y, width, height)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {'data_url': data_url, 'width': crop_width, 'height': crop_height}
