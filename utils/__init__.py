# Shared utilities
from .cache import TTLCache, generate_cache_key, DEFAULT_TTL_SECONDS

from .model_config import (
    ModelConfig,
    ModelProvider,
    MODEL_CONFIGS,
    DEFAULT_MODEL
)

__all__ = [
    'TTLCache',
    'generate_cache_key',
    'DEFAULT_TTL_SECONDS',
    'ModelConfig',
    'ModelProvider',
    'MODEL_CONFIGS',
    'DEFAULT_MODEL'
]
