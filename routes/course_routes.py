"""
FastAPI routes for Learnware Grove.
Generation, course/note CRUD, progress and API key settings.

The authenticated user id arrives in the X-User-Id header, set by the
upstream auth layer. Every course/note operation is scoped to it.
"""

from fastapi import APIRouter, Body, Depends, Header, Request
from typing import Optional
import logging

from services.content_generator import ContentGenerator
from services.course_service import CourseService
from utils.credentials import save_api_key, SettingsStore
from utils.storage import COURSES_TABLE, NOTES_TABLE
from utils.exceptions import AuthError
from models.course_models import (
    GenerationKind,
    GenerateRequest,
    CourseGenerateRequest,
    CourseCreateRequest,
    CourseUpdateRequest,
    ProgressUpdateRequest,
    NoteCreateRequest,
    NoteUpdateRequest,
    ApiKeyRequest,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["courses"])


# Dependencies

def get_owner_id(x_user_id: Optional[str] = Header(None)) -> str:
    if not x_user_id:
        raise AuthError("Missing authenticated user", error_code="OWNER_MISSING")
    return x_user_id


def get_generator(request: Request) -> ContentGenerator:
    return request.app.state.generator


def get_settings_store(request: Request) -> SettingsStore:
    return request.app.state.settings_store


def get_course_service(
    request: Request,
    owner_id: str = Depends(get_owner_id),
    generator: ContentGenerator = Depends(get_generator),
) -> CourseService:
    store_factory = request.app.state.store_factory
    return CourseService(
        courses=store_factory(COURSES_TABLE, owner_id, "COURSE_NOT_FOUND"),
        notes=store_factory(NOTES_TABLE, owner_id, "NOTE_NOT_FOUND"),
        generator=generator,
    )


# Generation Endpoints
@router.post("/generate/{kind}")
async def generate_content(
    kind: GenerationKind,
    body: GenerateRequest = Body(...),
    owner_id: str = Depends(get_owner_id),
    generator: ContentGenerator = Depends(get_generator),
):
    """
    Generate content without storing it.

    Kinds: course_content, course_description, study_material, quiz,
    research_assistance.

    A failed generation still answers 200; the body then carries
    `error`, `message` and `raw_text` instead of the payload.
    """
    logger.info(f"User {owner_id} requested {kind.value}")
    return await generator.generate(kind, body.subject_name, body.topic, body.extra_context)


# Course Endpoints
@router.get("/courses")
async def list_courses(service: CourseService = Depends(get_course_service)):
    return {"courses": service.list_courses()}


@router.post("/courses", status_code=201)
async def create_course(
    body: CourseCreateRequest,
    service: CourseService = Depends(get_course_service),
):
    return service.create_course(body.model_dump(exclude_none=True))


@router.get("/courses/{course_id}")
async def get_course(course_id: str, service: CourseService = Depends(get_course_service)):
    return service.get_course(course_id)


@router.patch("/courses/{course_id}")
async def update_course(
    course_id: str,
    body: CourseUpdateRequest,
    service: CourseService = Depends(get_course_service),
):
    return service.update_course(course_id, body.model_dump(exclude_unset=True))


@router.delete("/courses/{course_id}")
async def delete_course(course_id: str, service: CourseService = Depends(get_course_service)):
    return {"success": service.delete_course(course_id)}


@router.put("/courses/{course_id}/progress")
async def update_progress(
    course_id: str,
    body: ProgressUpdateRequest,
    service: CourseService = Depends(get_course_service),
):
    return service.update_progress(course_id, body.progress)


@router.post("/courses/{course_id}/generate/{kind}")
async def generate_for_course(
    course_id: str,
    kind: GenerationKind,
    body: Optional[CourseGenerateRequest] = Body(None),
    service: CourseService = Depends(get_course_service),
):
    """
    Generate content for a course and store it on the course.
    Research assistance is stored as a note linked to the course.
    """
    body = body or CourseGenerateRequest()
    return await service.generate_and_merge(course_id, kind, body.topic, body.extra_context)


# Note Endpoints
@router.get("/notes")
async def list_notes(
    course_id: Optional[str] = None,
    service: CourseService = Depends(get_course_service),
):
    return {"notes": service.list_notes(course_id)}


@router.post("/notes", status_code=201)
async def create_note(
    body: NoteCreateRequest,
    service: CourseService = Depends(get_course_service),
):
    return service.create_note(body.model_dump(exclude_none=True))


@router.get("/notes/{note_id}")
async def get_note(note_id: str, service: CourseService = Depends(get_course_service)):
    return service.get_note(note_id)


@router.patch("/notes/{note_id}")
async def update_note(
    note_id: str,
    body: NoteUpdateRequest,
    service: CourseService = Depends(get_course_service),
):
    return service.update_note(note_id, body.model_dump(exclude_unset=True))


@router.delete("/notes/{note_id}")
async def delete_note(note_id: str, service: CourseService = Depends(get_course_service)):
    return {"success": service.delete_note(note_id)}


# API Key Settings
@router.get("/settings/api-key")
async def get_api_key_status(generator: ContentGenerator = Depends(get_generator)):
    """Whether a Gemini key is configured, and where it came from. Never returns the key."""
    return {
        "configured": generator.is_configured,
        "source": generator.credential_source,
    }


@router.put("/settings/api-key")
async def set_api_key(
    body: ApiKeyRequest,
    owner_id: str = Depends(get_owner_id),
    generator: ContentGenerator = Depends(get_generator),
    store: SettingsStore = Depends(get_settings_store),
):
    """
    Save a Gemini API key and switch the generator to it.

    The key is app-wide: it lives in the shared `settings` table and every
    user's generations run on it. Any authenticated caller can replace it,
    so deployments should restrict this route at the upstream auth layer.
    """
    key = save_api_key(store, body.api_key)
    generator.configure(key, source="settings")
    logger.info(f"Gemini API key updated by user {owner_id}")
    return {"success": True, "configured": True, "message": "API key saved successfully"}


@router.post("/settings/api-key/check")
async def check_api_key(generator: ContentGenerator = Depends(get_generator)):
    """Send a live probe request to Gemini with the configured key"""
    return {"valid": await generator.check_api_key()}
