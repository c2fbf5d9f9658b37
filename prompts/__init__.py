# Prompts module initialization

# Content Generation Prompts
from .course_prompts import (
    build_course_content_prompt,
    build_course_description_prompt,
    build_study_material_prompt,
    build_quiz_prompt,
    build_research_assistance_prompt,
    build_prompt,
    PROMPT_BUILDERS,
    RAW_JSON_INSTRUCTION
)

__all__ = [
    'build_course_content_prompt',
    'build_course_description_prompt',
    'build_study_material_prompt',
    'build_quiz_prompt',
    'build_research_assistance_prompt',
    'build_prompt',
    'PROMPT_BUILDERS',
    'RAW_JSON_INSTRUCTION'
]
