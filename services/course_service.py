"""
Course service.
Merges generated content into course and note records, tracks progress,
and wraps owner-scoped course/note CRUD.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from models.course_models import GenerationKind
from services.content_generator import ContentGenerator, is_error_result
from utils.storage import RecordStore
from utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CourseService:
    """Course/note operations for one authenticated owner"""

    def __init__(
        self,
        courses: RecordStore,
        notes: RecordStore,
        generator: Optional[ContentGenerator] = None,
    ):
        self.courses = courses
        self.notes = notes
        self.generator = generator

    # ── Courses ─────────────────────────────────────────────────────────

    def create_course(self, data: Dict[str, Any]) -> Dict[str, Any]:
        record = {"study_materials": [], "quizzes": [], "progress": 0, **data}
        course = self.courses.create_record(record)
        logger.info(f"Created course {course['id']} for user {self.courses.owner_id}")
        return course

    def get_course(self, course_id: str) -> Dict[str, Any]:
        course = self.courses.get_record(course_id)
        if not course:
            raise NotFoundError(f"Course {course_id} not found", context={"course_id": course_id})
        return course

    def list_courses(self) -> List[Dict[str, Any]]:
        return self.courses.list_records(self.courses.owner_id)

    def update_course(self, course_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        return self.courses.update_record(course_id, patch)

    def delete_course(self, course_id: str) -> bool:
        deleted = self.courses.delete_record(course_id)
        if not deleted:
            raise NotFoundError(f"Course {course_id} not found", context={"course_id": course_id})
        return True

    def update_progress(self, course_id: str, progress: int) -> Dict[str, Any]:
        """Set course completion percentage (0-100)"""
        if isinstance(progress, bool) or not isinstance(progress, int) or not 0 <= progress <= 100:
            raise ValidationError(
                "Progress must be an integer between 0 and 100",
                error_code="INVALID_PROGRESS",
                context={"progress": progress},
            )
        self.get_course(course_id)
        return self.courses.update_record(course_id, {"progress": progress})

    # ── Notes ───────────────────────────────────────────────────────────

    def create_note(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if data.get("course_id"):
            self.get_course(data["course_id"])
        now = datetime.utcnow()
        record = {"content": "", "tags": [], **data, "created_at": now, "updated_at": now}
        return self.notes.create_record(record)

    def get_note(self, note_id: str) -> Dict[str, Any]:
        note = self.notes.get_record(note_id)
        if not note:
            raise NotFoundError(
                f"Note {note_id} not found", error_code="NOTE_NOT_FOUND", context={"note_id": note_id}
            )
        return note

    def list_notes(self, course_id: Optional[str] = None) -> List[Dict[str, Any]]:
        if course_id:
            return self.notes.list_records(self.notes.owner_id, course_id=course_id)
        return self.notes.list_records(self.notes.owner_id)

    def update_note(self, note_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        return self.notes.update_record(note_id, {**patch, "updated_at": datetime.utcnow()})

    def delete_note(self, note_id: str) -> bool:
        if not self.notes.delete_record(note_id):
            raise NotFoundError(
                f"Note {note_id} not found", error_code="NOTE_NOT_FOUND", context={"note_id": note_id}
            )
        return True

    # ── Generated content ───────────────────────────────────────────────

    def merge_generated_content(
        self,
        course_id: str,
        kind: Union[GenerationKind, str],
        result: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Store a generation result on its course.

        course_content replaces `content`, course_description sets
        `description`, study_material and quiz are appended to their lists,
        research_assistance becomes a note linked to the course.
        Returns the updated course, or the created note for research.
        """
        kind = GenerationKind(kind)
        if is_error_result(result):
            raise ValidationError(
                "Cannot store a failed generation result",
                error_code="GENERATION_RESULT_INVALID",
                context={"error": result.get("error")},
            )

        course = self.get_course(course_id)

        if kind == GenerationKind.RESEARCH_ASSISTANCE:
            query = result.get("query") or course.get("topic") or course.get("name", "")
            return self.create_note({
                "course_id": course_id,
                "title": f"Research: {query}",
                "content": result.get("overview", ""),
                "tags": ["research"],
            })

        if kind == GenerationKind.COURSE_CONTENT:
            patch = {"content": result}
        elif kind == GenerationKind.COURSE_DESCRIPTION:
            patch = {"description": result.get("description", "")}
        elif kind == GenerationKind.STUDY_MATERIAL:
            patch = {"study_materials": [*(course.get("study_materials") or []), result]}
        else:
            patch = {"quizzes": [*(course.get("quizzes") or []), result]}

        logger.info(f"Merging {kind.value} into course {course_id}")
        return self.courses.update_record(course_id, patch)

    async def generate_and_merge(
        self,
        course_id: str,
        kind: Union[GenerationKind, str],
        topic: Optional[str] = None,
        extra_context: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Generate for an existing course (its name as subject, its topic by
        default) and store the result. Failed generations are returned
        as-is and nothing is written.
        """
        if self.generator is None:
            raise ValidationError("No content generator configured", error_code="GENERATOR_MISSING")

        kind = GenerationKind(kind)
        course = self.get_course(course_id)
        result = await self.generator.generate(
            kind,
            course.get("name", ""),
            topic or course.get("topic"),
            extra_context,
        )
        if is_error_result(result):
            return result

        stored = self.merge_generated_content(course_id, kind, result)
        key = "note" if kind == GenerationKind.RESEARCH_ASSISTANCE else "course"
        return {"result": result, key: stored}
