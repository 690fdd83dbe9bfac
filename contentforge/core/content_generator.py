"""Content generator: prompt construction, provider call and formatting."""

from typing import Any, Callable, List, Optional

from ..exceptions import ConfigurationError, ProviderError
from ..providers import AIProvider, ProviderRegistry
from ..types import ConnectionResult, GeneratedContent
from ..utils import get_logger
from . import content_types
from .formatting import EditorType, format_content


logger = get_logger(__name__)


BeforeGenerationHook = Callable[[str, str, str, str], Any]
AfterGenerationHook = Callable[[GeneratedContent, str, str], Any]
ErrorHook = Callable[[ProviderError, str, str], Any]
PromptFilter = Callable[[str, str, str, str], str]


BLOCK_FORMAT_INSTRUCTION = (
    "WordPress Block Editor (FSE/Block Editor format).\n\n"
    "IMPORTANT: Format the content using WordPress block grammar syntax with HTML comments.\n"
    "Use the following block format:\n"
    "- Paragraphs: <!-- wp:paragraph -->\n<p>Your text here</p>\n<!-- /wp:paragraph -->\n"
    "- Headings: <!-- wp:heading {\"level\":2} -->\n<h2>Heading text</h2>\n<!-- /wp:heading -->\n"
    "- Lists: <!-- wp:list -->\n<ul><li>Item</li></ul>\n<!-- /wp:list -->\n"
    "- Blockquotes: <!-- wp:quote -->\n<blockquote><p>Quote text</p></blockquote>\n<!-- /wp:quote -->\n\n"
    "Every content element must be wrapped in block comment markers. "
    "Separate blocks with blank lines. Use proper block grammar format throughout."
)

CLASSIC_FORMAT_INSTRUCTION = (
    "Classic HTML Editor format.\n\n"
    "IMPORTANT: Format the content using standard HTML tags without block comment markers.\n"
    "Use standard HTML elements:\n"
    "- Paragraphs: <p>Your text here</p>\n"
    "- Headings: <h1>, <h2>, <h3>, etc.\n"
    "- Lists: <ul><li>Item</li></ul> or <ol><li>Item</li></ol>\n"
    "- Blockquotes: <blockquote><p>Quote text</p></blockquote>\n\n"
    "Do NOT use WordPress block comment markers (<!-- wp: -->). "
    "Use clean, standard HTML formatting throughout."
)


class ContentGenerator:
    """Generates one formatted article through an AI provider.

    Observers can be attached for the start, success and failure of a
    generation. An observer that raises is logged and otherwise ignored.

    Example:
        >>> generator = ContentGenerator(provider, editor_type="classic")
        >>> generator.on_error(lambda err, ctype, slug: print(err.status_code))
        >>> result = generator.generate("technology", "Focus on home automation")
        >>> result.title
        'Smart Homes in 2025'
    """

    def __init__(
        self,
        provider: AIProvider,
        editor_type: str = EditorType.BLOCK.value,
        prompt_filter: Optional[PromptFilter] = None,
    ):
        """Initialize generator.

        Args:
            provider: Provider adapter used for every generation
            editor_type: "block" or "classic"
            prompt_filter: Optional callable (prompt, content_type,
                custom_prompt, editor_type) returning the prompt to send
        """
        self.provider = provider
        self.editor_type = editor_type
        self.prompt_filter = prompt_filter
        self._before_hooks: List[BeforeGenerationHook] = []
        self._after_hooks: List[AfterGenerationHook] = []
        self._error_hooks: List[ErrorHook] = []

    @classmethod
    def from_settings(cls, settings, editor_type: str = EditorType.BLOCK.value, **kwargs) -> 'ContentGenerator':
        """Build a generator for the active provider in settings.

        Raises:
            ConfigurationError: If the active provider has no API key
            ProviderNotFoundError: If the active provider is not registered
        """
        config = settings.get_settings()
        if not config.get("api_key"):
            raise ConfigurationError("AI API key not configured")

        provider = ProviderRegistry.create(config["provider"], config["api_key"], config["model"])
        return cls(provider, editor_type=editor_type, **kwargs)

    @property
    def provider_slug(self) -> str:
        return getattr(self.provider, "slug", "")

    @property
    def model(self) -> str:
        return getattr(self.provider, "model", "")

    def on_before_generation(self, callback: BeforeGenerationHook) -> 'ContentGenerator':
        """Observe (content_type, custom_prompt, provider_slug, model) before each call."""
        self._before_hooks.append(callback)
        return self

    def on_after_generation(self, callback: AfterGenerationHook) -> 'ContentGenerator':
        """Observe (result, content_type, provider_slug) after a successful call."""
        self._after_hooks.append(callback)
        return self

    def on_error(self, callback: ErrorHook) -> 'ContentGenerator':
        """Observe (error, content_type, provider_slug) when the provider fails."""
        self._error_hooks.append(callback)
        return self

    def _notify(self, hooks: List[Callable], *args) -> None:
        for hook in hooks:
            try:
                hook(*args)
            except Exception as e:
                logger.warning(f"Generation observer {getattr(hook, '__name__', hook)} failed: {e}")

    def build_prompt(self, content_type: str, custom_prompt: str = "") -> str:
        """Build the prompt sent to the provider."""
        prompt = (
            "Generate a WordPress blog post with the following requirements:\n\n"
            "1. Create an engaging, SEO-friendly title (maximum 60 characters)\n"
            "2. Write comprehensive content (minimum 500 words)\n\n"
            f"Content Type: {content_types.get_type_label(content_type)}\n"
            f"Context: {content_types.get_type_context(content_type)}\n"
            f"Keywords to consider: {', '.join(content_types.get_type_keywords(content_type))}\n"
        )

        if custom_prompt:
            prompt += f"\nAdditional Instructions: {custom_prompt}\n"

        if self.editor_type == EditorType.BLOCK:
            editor_instruction = BLOCK_FORMAT_INSTRUCTION
        else:
            editor_instruction = CLASSIC_FORMAT_INSTRUCTION

        prompt += (
            "\n\nFormat the response as JSON with 'title' and 'content' keys.\n"
            f"Content Format: {editor_instruction}"
        )

        if self.prompt_filter is not None:
            prompt = self.prompt_filter(prompt, content_type, custom_prompt, self.editor_type)

        return prompt

    def generate(self, content_type: str, custom_prompt: str = "") -> GeneratedContent:
        """Generate a title and formatted content.

        Args:
            content_type: Content type slug
            custom_prompt: Extra instructions appended to the prompt

        Returns:
            GeneratedContent with content formatted for the editor type

        Raises:
            ProviderError: If the provider request fails
        """
        self._notify(self._before_hooks, content_type, custom_prompt, self.provider_slug, self.model)

        prompt = self.build_prompt(content_type, custom_prompt)

        try:
            response = self.provider.generate(prompt, content_type=content_type)
        except ProviderError as e:
            logger.warning(f"✗ {self.provider_slug} generation failed: {e.message}")
            self._notify(self._error_hooks, e, content_type, self.provider_slug)
            raise

        logger.debug(f"Raw response title: {response.title[:100] or '(no title)'}")

        result = GeneratedContent(
            title=response.title,
            content=format_content(response.content, self.editor_type) if response.content else "",
        )

        self._notify(self._after_hooks, result, content_type, self.provider_slug)
        return result

    def test_connection(self) -> ConnectionResult:
        return self.provider.test_connection()
