"""Anthropic model configurations."""

from ..model_config import ModelConfig, catalog


DEFAULT_MODEL = "claude-3-opus-20240229"

ANTHROPIC_MODELS = catalog(
    # Latest models
    ModelConfig(name="claude-opus-4-5-20251101", label="Claude Opus 4.5"),
    ModelConfig(name="claude-sonnet-4-5-20250929", label="Claude Sonnet 4.5"),
    ModelConfig(name="claude-haiku-4-5-20251001", label="Claude Haiku 4.5"),
    # Legacy models
    ModelConfig(name="claude-opus-4-1-20250805", label="Claude Opus 4.1", legacy=True),
    ModelConfig(name="claude-sonnet-4-20250514", label="Claude Sonnet 4", legacy=True),
    ModelConfig(name="claude-opus-4-20250514", label="Claude Opus 4", legacy=True),
    ModelConfig(name="claude-3-7-sonnet-20250219", label="Claude Sonnet 3.7", legacy=True),
    ModelConfig(name="claude-3-5-haiku-20241022", label="Claude Haiku 3.5", legacy=True),
    ModelConfig(name="claude-3-opus-20240229", label="Claude 3 Opus", legacy=True),
    ModelConfig(name="claude-3-sonnet-20240229", label="Claude 3 Sonnet", legacy=True),
    ModelConfig(name="claude-3-haiku-20240307", label="Claude 3 Haiku", legacy=True),
)
