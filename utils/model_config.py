"""
Gemini model selection for content generation.
GEMINI_MODEL picks one of MODEL_CONFIGS; unset means DEFAULT_MODEL.
"""

import os
from typing import Dict, Any, Optional
from enum import Enum


class ModelProvider(str, Enum):
    GEMINI = "gemini"


# Model configurations
MODEL_CONFIGS: Dict[str, Dict[str, Any]] = {
    "gemini-1.5-flash": {
        "provider": ModelProvider.GEMINI,
        "model": "gemini-1.5-flash",
        "max_tokens": 8192,
        "temperature": 0.7
    },
    "gemini-2.0-flash": {
        "provider": ModelProvider.GEMINI,
        "model": "gemini-2.0-flash",
        "max_tokens": 8192,
        "temperature": 0.7
    },
    "gemini-2.5-flash": {
        "provider": ModelProvider.GEMINI,
        "model": "gemini-2.5-flash",
        "max_tokens": 8192,
        "temperature": 0.7
    }
}

DEFAULT_MODEL = "gemini-1.5-flash"


class ModelConfig:
    """Model configuration manager"""

    @staticmethod
    def get_config(model_key: Optional[str] = None) -> Dict[str, Any]:
        """Get configuration for specified model, GEMINI_MODEL, or default"""
        key = model_key or os.getenv("GEMINI_MODEL") or DEFAULT_MODEL

        if key not in MODEL_CONFIGS:
            raise ValueError(f"Unknown model: {key}. Available: {list(MODEL_CONFIGS.keys())}")

        return MODEL_CONFIGS[key]

    @staticmethod
    def get_available_models() -> list:
        """List all available models"""
        return list(MODEL_CONFIGS.keys())

    @staticmethod
    def generation_config(model_key: Optional[str] = None) -> Dict[str, Any]:
        """Generation parameters in the shape the Gemini SDK expects"""
        config = ModelConfig.get_config(model_key)
        return {
            "max_output_tokens": config["max_tokens"],
            "temperature": config["temperature"],
        }
