"""
Gemini API key resolution.

Sources are tried in order (settings store, then environment) once when the
app starts. The result is either a key with the name of the source it came
from, or an explicit unconfigured state.
"""

import os
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from utils.exceptions import ValidationError
from utils.error_handler import normalize_error, log_error

logger = logging.getLogger(__name__)

API_KEY_SETTING = "gemini_api_key"
API_KEY_ENV_VAR = "GEMINI_API_KEY"


class SettingsStore(Protocol):
    def get_setting(self, key: str) -> Optional[str]: ...

    def set_setting(self, key: str, value: str) -> None: ...


class CredentialSource(Protocol):
    name: str

    def load(self) -> Optional[str]: ...


class StoredCredentialSource:
    """Key saved through the settings API"""

    name = "settings"

    def __init__(self, store: SettingsStore, setting_key: str = API_KEY_SETTING):
        self.store = store
        self.setting_key = setting_key

    def load(self) -> Optional[str]:
        value = self.store.get_setting(self.setting_key)
        return value.strip() if isinstance(value, str) and value.strip() else None


class EnvCredentialSource:
    """Deployment default from the environment"""

    name = "environment"

    def __init__(self, env_var: str = API_KEY_ENV_VAR):
        self.env_var = env_var

    def load(self) -> Optional[str]:
        value = os.getenv(self.env_var, "").strip()
        return value or None


@dataclass(frozen=True)
class ResolvedCredential:
    api_key: Optional[str] = None
    source: Optional[str] = None

    @property
    def configured(self) -> bool:
        return self.api_key is not None


def default_sources(store: Optional[SettingsStore] = None) -> List[CredentialSource]:
    sources: List[CredentialSource] = []
    if store is not None:
        sources.append(StoredCredentialSource(store))
    sources.append(EnvCredentialSource())
    return sources


def resolve_api_key(sources: Sequence[CredentialSource]) -> ResolvedCredential:
    """Return the first key any source yields; a failing source is logged and skipped."""
    for source in sources:
        try:
            key = source.load()
        except Exception as e:
            log_error(normalize_error(e))
            logger.warning(f"Credential source '{source.name}' failed, trying next")
            continue
        if key:
            logger.info(f"Gemini API key loaded from {source.name}")
            return ResolvedCredential(api_key=key, source=source.name)

    logger.warning("Gemini API key not found in settings store or environment variables")
    return ResolvedCredential()


def save_api_key(store: SettingsStore, api_key: str) -> str:
    """Persist a trimmed key and return it"""
    key = (api_key or "").strip()
    if not key:
        raise ValidationError("Please enter a valid API key", error_code="INVALID_API_KEY")
    store.set_setting(API_KEY_SETTING, key)
    logger.info("Gemini API key saved to settings store")
    return key
