"""
Prompt templates for content generation.
One builder per GenerationKind; each is a pure template fill.
"""

from typing import Callable, Dict, Optional

from models.course_models import GenerationKind

RAW_JSON_INSTRUCTION = (
    "Return only the raw JSON object, without any markdown formatting, code blocks, or extra text."
)


def _context_section(extra_context: Optional[str]) -> str:
    return f"""
ADDITIONAL CONTEXT FROM THE STUDENT:
{extra_context}
""" if extra_context else ""


def build_course_content_prompt(
    subject_name: str,
    topic: Optional[str] = None,
    extra_context: Optional[str] = None
) -> str:
    """Build prompt for full course content (overview, objectives, topics, prerequisites)"""
    topic_line = f' on the topic of "{topic}"' if topic else ""

    return f"""Generate a detailed, well-structured JSON object for a course titled "{subject_name}"{topic_line}.
{_context_section(extra_context)}
The JSON response must include the following fields:
- "overview": A comprehensive summary of what the course covers, its goals, and who it's for.
- "learning_objectives": An array of 5-7 key skills or knowledge points students will gain.
- "key_topics": An array of 4-6 modules or sections, each with a "title" and a "description" that outlines what will be taught in that module.
- "prerequisites": An array of 2-4 recommended skills or courses to take before starting this one.
- "study_materials" (optional): An array of recommended readings, each with a "title" and a "url".
- "quizzes" (optional): An array of quizzes, each with a "topic" and "questions" (each question has "question_text", "options" and "answer").

Example structure:
{{
  "overview": "This course provides a complete introduction to...",
  "learning_objectives": [
    "Understand the core principles of...",
    "Develop practical skills in..."
  ],
  "key_topics": [
    {{ "title": "Introduction to X", "description": "Learn the basics of..." }},
    {{ "title": "Advanced Techniques in Y", "description": "Explore complex concepts like..." }}
  ],
  "prerequisites": [
    "Basic understanding of...",
    "Familiarity with..."
  ]
}}

{RAW_JSON_INSTRUCTION}"""


def build_course_description_prompt(
    subject_name: str,
    topic: Optional[str] = None,
    extra_context: Optional[str] = None
) -> str:
    """Build prompt for a short plain-text course description"""
    topic_line = f"\n- Topic: {topic}" if topic else ""

    return f"""You are an expert curriculum designer writing a catalogue entry.

COURSE:
- Name: {subject_name}{topic_line}
{_context_section(extra_context)}
Write a description of this course in 2-5 sentences: what it covers, who it is for,
and what students will be able to do afterwards.

Return only the description as plain text. Do not use JSON, markdown, headings or bullet points."""


def build_study_material_prompt(
    subject_name: str,
    topic: Optional[str] = None,
    extra_context: Optional[str] = None
) -> str:
    """Build prompt for a study guide on one topic of a course"""
    focus = topic or subject_name

    return f"""You are an expert educator preparing study material.

COURSE: {subject_name}
TOPIC: {focus}
{_context_section(extra_context)}
REQUIREMENTS:
1. Explain the topic clearly for a student revising on their own
2. Summarize the essentials in a few sentences
3. List the key points a student must remember
4. Give concrete worked examples
5. Add practice questions with model answers

OUTPUT FORMAT (JSON):
{{
  "title": "Study material title",
  "content": "Full explanation of the topic",
  "summary": "Short summary of the topic",
  "keyPoints": ["Key point 1", "Key point 2"],
  "examples": ["Example 1", "Example 2"],
  "practiceQuestions": [
    {{ "question": "Practice question?", "answer": "Model answer" }}
  ]
}}

{RAW_JSON_INSTRUCTION}"""


def build_quiz_prompt(
    subject_name: str,
    topic: Optional[str] = None,
    extra_context: Optional[str] = None
) -> str:
    """Build prompt for a multiple-choice quiz"""
    focus = topic or subject_name

    return f"""You are an expert educator writing a quiz that tests understanding, not memorization.

COURSE: {subject_name}
QUIZ TOPIC: {focus}
{_context_section(extra_context)}
REQUIREMENTS:
1. Generate 5-10 multiple choice questions
2. Each question has exactly 4 options
3. "correctAnswer" must be the exact text of one of the options
4. Explain why the correct answer is right
5. Make wrong options plausible

OUTPUT FORMAT (JSON):
{{
  "topic": "{focus}",
  "questions": [
    {{
      "question": "Clear question text?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": "Option B",
      "explanation": "Why Option B is correct"
    }}
  ]
}}

{RAW_JSON_INSTRUCTION}"""


def build_research_assistance_prompt(
    subject_name: str,
    topic: Optional[str] = None,
    extra_context: Optional[str] = None
) -> str:
    """Build prompt for a research overview of a query"""
    query = f"{subject_name}: {topic}" if topic else subject_name

    return f"""Please provide a detailed research overview on the following topic: {query}.
{_context_section(extra_context)}
Include key findings, relevant concepts, potential research directions, and relevant academic areas to explore.

OUTPUT FORMAT (JSON):
{{
  "query": "{query}",
  "overview": "Overview of the current understanding of the topic",
  "keyFindings": ["Finding 1", "Finding 2"],
  "relevantConcepts": ["Concept 1", "Concept 2"],
  "suggestedResources": [
    {{ "title": "Resource title", "url": "https://...", "description": "What the resource covers" }}
  ],
  "furtherExploration": ["Research direction 1", "Research direction 2"]
}}

{RAW_JSON_INSTRUCTION}"""


PROMPT_BUILDERS: Dict[GenerationKind, Callable[..., str]] = {
    GenerationKind.COURSE_CONTENT: build_course_content_prompt,
    GenerationKind.COURSE_DESCRIPTION: build_course_description_prompt,
    GenerationKind.STUDY_MATERIAL: build_study_material_prompt,
    GenerationKind.QUIZ: build_quiz_prompt,
    GenerationKind.RESEARCH_ASSISTANCE: build_research_assistance_prompt,
}


def build_prompt(
    kind: GenerationKind,
    subject_name: str,
    topic: Optional[str] = None,
    extra_context: Optional[str] = None
) -> str:
    """Fill the template for kind"""
    return PROMPT_BUILDERS[kind](subject_name, topic=topic, extra_context=extra_context)
