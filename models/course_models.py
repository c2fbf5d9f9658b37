"""
Pydantic models for Learnware Grove.
Following KISS principle - simple, clear models with validation.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any
from datetime import date
from enum import Enum


class GenerationKind(str, Enum):
    COURSE_CONTENT = "course_content"
    COURSE_DESCRIPTION = "course_description"
    STUDY_MATERIAL = "study_material"
    QUIZ = "quiz"
    RESEARCH_ASSISTANCE = "research_assistance"


class GenerationRequest(BaseModel):
    """One generation call. Immutable, never persisted."""
    model_config = ConfigDict(frozen=True)

    kind: GenerationKind
    subject_name: str
    topic: Optional[str] = None
    extra_context: Optional[str] = None

    def cache_params(self) -> List[Optional[str]]:
        return [self.subject_name, self.topic, self.extra_context]


class ErrorResult(BaseModel):
    """Returned in place of a payload when generation fails"""
    error: str
    message: str
    raw_text: Optional[str] = None


# Request Models
class GenerateRequest(BaseModel):
    """Free-standing generation request"""
    subject_name: str
    topic: Optional[str] = None
    extra_context: Optional[str] = None


class CourseGenerateRequest(BaseModel):
    """Generate for an existing course and merge the result into it"""
    topic: Optional[str] = None
    extra_context: Optional[str] = None


class CourseCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    code: Optional[str] = None
    description: Optional[str] = None
    topic: Optional[str] = None
    difficulty: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class CourseUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    code: Optional[str] = None
    description: Optional[str] = None
    topic: Optional[str] = None
    difficulty: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    study_materials: Optional[List[Dict[str, Any]]] = None
    quizzes: Optional[List[Dict[str, Any]]] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ProgressUpdateRequest(BaseModel):
    progress: int = Field(..., ge=0, le=100)


class NoteCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    content: str = ""
    course_id: Optional[str] = None
    tags: List[str] = []


class NoteUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=300)
    content: Optional[str] = None
    course_id: Optional[str] = None
    tags: Optional[List[str]] = None


class ApiKeyRequest(BaseModel):
    api_key: str
