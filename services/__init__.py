from services.content_generator import ContentGenerator, is_error_result
from services.course_service import CourseService

__all__ = [
    'ContentGenerator',
    'is_error_result',
    'CourseService'
]
