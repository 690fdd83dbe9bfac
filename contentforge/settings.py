"""AI provider settings: active provider, model per provider and API keys."""

import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .exceptions import ValidationError
from .providers.anthropic.models import ANTHROPIC_MODELS, DEFAULT_MODEL as ANTHROPIC_DEFAULT_MODEL
from .providers.google.models import DEFAULT_MODEL as GOOGLE_DEFAULT_MODEL, GOOGLE_MODELS
from .providers.openai.models import DEFAULT_MODEL as OPENAI_DEFAULT_MODEL, OPENAI_MODELS
from .utils import KeyValueStore, get_logger


load_dotenv()

logger = get_logger(__name__)


PROVIDER_OPENAI = "openai"
PROVIDER_ANTHROPIC = "anthropic"
PROVIDER_GOOGLE = "google"

DEFAULT_PROVIDER = PROVIDER_OPENAI

PROVIDERS = {
    PROVIDER_OPENAI: "OpenAI",
    PROVIDER_ANTHROPIC: "Anthropic",
    PROVIDER_GOOGLE: "Google",
}

DEFAULT_MODELS = {
    PROVIDER_OPENAI: OPENAI_DEFAULT_MODEL,
    PROVIDER_ANTHROPIC: ANTHROPIC_DEFAULT_MODEL,
    PROVIDER_GOOGLE: GOOGLE_DEFAULT_MODEL,
}

MODEL_CATALOGS = {
    PROVIDER_OPENAI: OPENAI_MODELS,
    PROVIDER_ANTHROPIC: ANTHROPIC_MODELS,
    PROVIDER_GOOGLE: GOOGLE_MODELS,
}

API_KEY_ENV_VARS = {
    PROVIDER_OPENAI: "OPENAI_API_KEY",
    PROVIDER_ANTHROPIC: "ANTHROPIC_API_KEY",
    PROVIDER_GOOGLE: "GOOGLE_API_KEY",
}

PROVIDER_ENV_VAR = "CFORGE_AI_PROVIDER"
MODEL_ENV_VAR = "CFORGE_AI_MODEL"

# Common misspellings of Gemini model ids saved by older settings screens
_GEMINI_TYPO_FIXES = (
    ("gemini-20-", "gemini-2.0-"),
    ("gemini-25-", "gemini-2.5-"),
)


class AISettingsManager:
    """Reads and writes AI settings in a key-value store.

    Option keys follow ``cforge_ai_provider``, ``cforge_ai_<provider>_model``
    and ``cforge_ai_<provider>_key``. When nothing is stored the environment
    (optionally a ``.env`` file) is consulted.

    Example:
        >>> settings = AISettingsManager(MemoryStore())
        >>> settings.save_settings({"provider": "google", "model": "gemini-2.0-flash", "api_key": "AIza..."})
        >>> settings.get_active_model()
        'gemini-2.0-flash'
    """

    OPTION_PROVIDER = "cforge_ai_provider"
    OPTION_PREFIX = "cforge_ai_"

    def __init__(self, store: KeyValueStore, use_env: bool = True):
        """Initialize settings manager.

        Args:
            store: Store holding the settings options
            use_env: Fall back to environment variables when nothing is stored
        """
        self.store = store
        self.use_env = use_env

    def _model_option(self, provider: str) -> str:
        return f"{self.OPTION_PREFIX}{provider}_model"

    def _key_option(self, provider: str) -> str:
        return f"{self.OPTION_PREFIX}{provider}_key"

    def _env(self, name: str) -> str:
        if not self.use_env:
            return ""
        return os.getenv(name, "").strip()

    def get_providers(self) -> Dict[str, str]:
        """Provider tags mapped to display labels."""
        return dict(PROVIDERS)

    def get_models(self, provider: str) -> Dict[str, str]:
        """Model ids mapped to labels for a provider (empty if unknown)."""
        return {name: config.label for name, config in MODEL_CATALOGS.get(provider, {}).items()}

    def get_active_provider(self) -> str:
        provider = self.store.get(self.OPTION_PROVIDER) or self._env(PROVIDER_ENV_VAR) or DEFAULT_PROVIDER
        if provider not in PROVIDERS:
            return DEFAULT_PROVIDER
        return provider

    def get_stored_model(self, provider: str) -> str:
        """Model configured for a provider.

        Falls back to the provider default when nothing is stored. A stored
        model missing from the catalog is repaired when it is a known Gemini
        typo, otherwise the first catalog model is returned.
        """
        model = self.store.get(self._model_option(provider))
        if not model and provider == self.get_active_provider():
            model = self._env(MODEL_ENV_VAR)
        if not model:
            return DEFAULT_MODELS.get(provider, "")

        models = self.get_models(provider)
        if model in models:
            return model

        if provider == PROVIDER_GOOGLE:
            fixed = model
            for typo, correct in _GEMINI_TYPO_FIXES:
                if model.startswith(typo):
                    fixed = correct + model[len(typo):]
                    break
            if fixed in models:
                logger.info(f"Corrected stored Google model {model} -> {fixed}")
                self.store.set(self._model_option(provider), fixed)
                return fixed

        return next(iter(models), "")

    def get_active_model(self) -> str:
        return self.get_stored_model(self.get_active_provider())

    def get_api_key(self, provider: str) -> Optional[str]:
        """API key for a provider, or None when none is configured."""
        key = self.store.get(self._key_option(provider))
        if not key and provider in API_KEY_ENV_VARS:
            key = self._env(API_KEY_ENV_VARS[provider])
        return key or None

    def save_api_key(self, provider: str, api_key: str) -> None:
        self.store.set(self._key_option(provider), api_key)

    def _is_valid_model(self, provider: str, model: str) -> bool:
        if model in self.get_models(provider):
            return True
        # Google releases models faster than the catalog is updated
        return provider == PROVIDER_GOOGLE and model.startswith("gemini-")

    def save_provider_model(self, provider: str, model: str) -> bool:
        """Store the model for a provider.

        Returns:
            False if the provider or model is not accepted
        """
        if provider not in PROVIDERS or not self._is_valid_model(provider, model):
            return False
        self.store.set(self._model_option(provider), model)
        return True

    def save_settings(self, settings: Dict[str, Any]) -> None:
        """Save provider, model and (optionally) API key.

        Args:
            settings: Mapping with "provider", "model" and "api_key"

        Raises:
            ValidationError: If the provider is unknown or the Google model
                is not a Gemini model
        """
        provider = str(settings.get("provider") or "").strip().lower()
        model = str(settings.get("model") or "").strip()
        api_key = str(settings.get("api_key") or "").strip()

        if provider not in PROVIDERS:
            raise ValidationError(f"Unknown AI provider: {provider or '(empty)'}")

        if provider == PROVIDER_GOOGLE and model and not self._is_valid_model(provider, model):
            raise ValidationError(f"Invalid Google model: {model}")

        self.store.set(self.OPTION_PROVIDER, provider)

        if model and not self.save_provider_model(provider, model):
            logger.warning(f"Ignoring unknown {provider} model {model}")

        if api_key:
            self.save_api_key(provider, api_key)

        logger.info(f"Saved AI settings for provider {provider}")

    def get_settings(self) -> Dict[str, Any]:
        """Active provider, model and API key."""
        provider = self.get_active_provider()
        return {
            "provider": provider,
            "model": self.get_active_model(),
            "api_key": self.get_api_key(provider),
            "is_configured": self.is_configured(),
        }

    def is_configured(self) -> bool:
        return bool(self.get_api_key(self.get_active_provider()))

    def get_masked_api_key(self, provider: str) -> Optional[str]:
        """API key with all but the first and last two characters hidden.

        The masked value is at most 20 characters long. Keys of four
        characters or fewer are masked entirely.
        """
        key = self.get_api_key(provider)
        if not key:
            return None

        if len(key) <= 4:
            return "*" * len(key)

        display_length = min(20, len(key))
        return key[:2] + "*" * (display_length - 4) + key[-2:]

    def list_configured(self) -> List[str]:
        """Providers that have an API key."""
        return [p for p in PROVIDERS if self.get_api_key(p)]
