"""
Content generation service.
Builds the prompt for a GenerationKind, calls Gemini once, tolerantly parses
the answer and caches successful results.

Per call: prompt -> cache check -> model call -> parse -> cache write.
Model and parse failures come back as ErrorResult dicts (an "error" key)
rather than exceptions; only a missing API key raises.
"""

import logging
from typing import Any, Callable, Dict, Optional, Protocol, Union

from clients.gemini_client import GeminiClient
from models.course_models import GenerationKind, GenerationRequest, ErrorResult
from prompts.course_prompts import build_prompt
from utils.cache import TTLCache, generate_cache_key
from utils.credentials import ResolvedCredential
from utils.error_handler import normalize_error, log_error
from utils.exceptions import AuthError, InvalidResponseFormatError
from utils.json_extraction import extract_json_object

logger = logging.getLogger(__name__)

PROBE_QUERY = "test connection"


class ModelClient(Protocol):
    async def generate_text(self, prompt: str) -> str: ...


ModelClientFactory = Callable[[str], ModelClient]


def is_error_result(result: Dict[str, Any]) -> bool:
    return "error" in result


def cache_key_for(request: GenerationRequest) -> str:
    """Cache key covering the kind and every argument, None included"""
    return generate_cache_key(request.kind.value, request.cache_params())


class ContentGenerator:
    """Generates course content, descriptions, study material, quizzes and research overviews"""

    def __init__(
        self,
        cache: TTLCache,
        client_factory: ModelClientFactory = GeminiClient,
        api_key: Optional[str] = None,
        credential_source: Optional[str] = None,
        cache_ttl: Optional[float] = None,
    ):
        self.cache = cache
        self.cache_ttl = cache_ttl
        self._client_factory = client_factory
        self._client: Optional[ModelClient] = None
        self.credential_source: Optional[str] = None
        if api_key:
            self.configure(api_key, source=credential_source)

    @classmethod
    def from_credential(
        cls,
        credential: ResolvedCredential,
        cache: TTLCache,
        client_factory: ModelClientFactory = GeminiClient,
        cache_ttl: Optional[float] = None,
    ) -> "ContentGenerator":
        return cls(
            cache,
            client_factory=client_factory,
            api_key=credential.api_key,
            credential_source=credential.source,
            cache_ttl=cache_ttl,
        )

    def configure(self, api_key: str, source: Optional[str] = "settings"):
        """(Re)build the model client for a new key"""
        self._client = self._client_factory(api_key)
        self.credential_source = source
        logger.info(f"Content generator configured (key from {source})")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def _ensure_configured(self) -> ModelClient:
        if self._client is None:
            raise AuthError()
        return self._client

    async def generate(
        self,
        kind: Union[GenerationKind, str],
        subject_name: str,
        topic: Optional[str] = None,
        extra_context: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Generate content of the given kind.

        Returns the parsed payload dict, or an ErrorResult dict with "error",
        "message" and "raw_text" keys. Identical requests within the cache TTL
        return the cached payload without calling the model.

        Raises:
            AuthError: no API key is configured. Raised before any network call.
        """
        client = self._ensure_configured()
        request = GenerationRequest(
            kind=kind, subject_name=subject_name, topic=topic, extra_context=extra_context
        )

        prompt = build_prompt(request.kind, request.subject_name, request.topic, request.extra_context)
        cache_key = cache_key_for(request)

        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            text = await client.generate_text(prompt)
            result = self._parse_response(request.kind, text)
        except Exception as e:
            return self._error_result(e)

        self.cache.set(cache_key, result, ttl=self.cache_ttl)
        logger.info(f"Generated {request.kind.value} for '{request.subject_name}'")
        return result

    def _parse_response(self, kind: GenerationKind, text: str) -> Dict[str, Any]:
        if kind == GenerationKind.COURSE_DESCRIPTION:
            # Descriptions are plain text, not JSON
            description = (text or "").strip()
            if not description:
                raise InvalidResponseFormatError(raw_text=text)
            return {"description": description}
        return extract_json_object(text)

    def _error_result(self, caught: Exception) -> Dict[str, Any]:
        app_error = normalize_error(caught)
        log_error(app_error)
        return ErrorResult(
            **app_error.to_dict(),
            raw_text=getattr(caught, "raw_text", None),
        ).model_dump()

    async def generate_course_content(self, course_name: str, course_topic: Optional[str] = None) -> Dict[str, Any]:
        return await self.generate(GenerationKind.COURSE_CONTENT, course_name, course_topic)

    async def generate_course_description(self, course_name: str, course_topic: Optional[str] = None) -> Dict[str, Any]:
        return await self.generate(GenerationKind.COURSE_DESCRIPTION, course_name, course_topic)

    async def generate_study_material(self, course_name: str, topic: Optional[str] = None) -> Dict[str, Any]:
        return await self.generate(GenerationKind.STUDY_MATERIAL, course_name, topic)

    async def generate_quiz(self, course_name: str, topic: Optional[str] = None) -> Dict[str, Any]:
        return await self.generate(GenerationKind.QUIZ, course_name, topic)

    async def get_research_assistance(self, query: str, extra_context: Optional[str] = None) -> Dict[str, Any]:
        return await self.generate(GenerationKind.RESEARCH_ASSISTANCE, query, extra_context=extra_context)

    async def check_api_key(self) -> bool:
        """Send one uncached probe request to verify the configured key works"""
        if self._client is None:
            return False
        try:
            await self._client.generate_text(build_prompt(GenerationKind.RESEARCH_ASSISTANCE, PROBE_QUERY))
        except Exception as e:
            log_error(normalize_error(e))
            return False
        return True
