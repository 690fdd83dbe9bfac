"""OpenAI model configurations."""

from ..model_config import ModelConfig, catalog


DEFAULT_MODEL = "gpt-4"

OPENAI_MODELS = catalog(
    ModelConfig(name="gpt-4o", label="GPT-4o"),
    ModelConfig(name="gpt-4o-mini", label="GPT-4o Mini"),
    ModelConfig(name="gpt-4-turbo", label="GPT-4 Turbo"),
    ModelConfig(name="gpt-4", label="GPT-4"),
    ModelConfig(name="gpt-3.5-turbo", label="GPT-3.5 Turbo", legacy=True),
)
