"""Google Gemini model configurations."""

from ..model_config import ModelConfig, catalog


DEFAULT_MODEL = "gemini-2.5-flash"

GOOGLE_MODELS = catalog(
    # Gemini 3
    ModelConfig(name="gemini-3-pro-preview", label="Gemini 3 Pro Preview"),
    ModelConfig(name="gemini-3-flash-preview", label="Gemini 3 Flash Preview"),
    # Gemini 2.5
    ModelConfig(name="gemini-2.5-pro", label="Gemini 2.5 Pro"),
    ModelConfig(name="gemini-2.5-flash", label="Gemini 2.5 Flash"),
    ModelConfig(name="gemini-2.5-flash-lite", label="Gemini 2.5 Flash-Lite"),
    # Gemini 2.0
    ModelConfig(name="gemini-2.0-flash", label="Gemini 2.0 Flash"),
    ModelConfig(name="gemini-2.0-flash-001", label="Gemini 2.0 Flash 001"),
    ModelConfig(name="gemini-2.0-flash-lite", label="Gemini 2.0 Flash-Lite"),
    ModelConfig(name="gemini-2.0-flash-lite-001", label="Gemini 2.0 Flash-Lite 001"),
    # Rolling aliases
    ModelConfig(name="gemini-flash-latest", label="Gemini Flash Latest"),
    ModelConfig(name="gemini-flash-lite-latest", label="Gemini Flash-Lite Latest"),
    ModelConfig(name="gemini-pro-latest", label="Gemini Pro Latest"),
    # Legacy
    ModelConfig(name="gemini-1.5-pro", label="Gemini 1.5 Pro", legacy=True),
    ModelConfig(name="gemini-1.5-flash", label="Gemini 1.5 Flash", legacy=True),
    ModelConfig(name="gemini-1.5-flash-8b", label="Gemini 1.5 Flash (8B)", legacy=True),
)
