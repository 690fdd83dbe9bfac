"""Content type registry used to build generation prompts."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ContentType:
    """Prompt data for one kind of site content.

    Attributes:
        slug: Identifier passed in generation requests
        label: Human readable name
        context: One sentence describing what the content is about
        keywords: Keywords the model should consider
        examples: Example article kinds
    """

    slug: str
    label: str
    context: str
    keywords: List[str] = field(default_factory=list)
    examples: List[str] = field(default_factory=list)


GENERAL = "general"

_TYPES: Dict[str, ContentType] = {
    t.slug: t
    for t in [
        ContentType(
            GENERAL, "General/Blog",
            "General blog posts, articles, and news content",
            ["article", "blog", "news", "post", "writing", "content"],
            ["Blog post", "News article", "Opinion piece"],
        ),
        ContentType(
            "e-commerce", "E-commerce",
            "Product descriptions, reviews, shopping guides, and e-commerce content",
            ["product", "review", "shopping", "buy", "purchase", "customer", "store"],
            ["Product review", "Shopping guide", "Buyer's guide"],
        ),
        ContentType(
            "portfolio", "Portfolio",
            "Project showcases, case studies, and creative work presentations",
            ["project", "case study", "portfolio", "showcase", "work", "creative"],
            ["Project showcase", "Case study", "Work portfolio"],
        ),
        ContentType(
            "business", "Business/Corporate",
            "Business articles, corporate content, and professional insights",
            ["business", "corporate", "professional", "company", "industry", "market"],
            ["Business article", "Corporate update", "Industry analysis"],
        ),
        ContentType(
            "education", "Education",
            "Educational content, tutorials, courses, and learning materials",
            ["education", "tutorial", "course", "learning", "teaching", "study"],
            ["Tutorial", "Course content", "Learning guide"],
        ),
        ContentType(
            "health", "Health/Medical",
            "Health articles, medical information, and wellness content",
            ["health", "medical", "wellness", "fitness", "treatment", "care"],
            ["Health article", "Wellness guide", "Medical information"],
        ),
        ContentType(
            "technology", "Technology",
            "Tech articles, reviews, tutorials, and technology insights",
            ["technology", "tech", "software", "hardware", "digital", "innovation"],
            ["Tech review", "Software tutorial", "Technology news"],
        ),
        ContentType(
            "food", "Food/Recipe",
            "Recipe content, food articles, cooking guides, and culinary content",
            ["food", "recipe", "cooking", "culinary", "dish", "meal"],
            ["Recipe", "Cooking guide", "Food review"],
        ),
        ContentType(
            "travel", "Travel",
            "Travel guides, destination content, trip planning, and travel experiences",
            ["travel", "destination", "trip", "vacation", "tour", "journey"],
            ["Travel guide", "Destination review", "Trip planning"],
        ),
        ContentType(
            "fashion", "Fashion",
            "Fashion articles, style guides, trends, and fashion industry content",
            ["fashion", "style", "trend", "clothing", "apparel", "design"],
            ["Fashion article", "Style guide", "Trend report"],
        ),
    ]
}


def get_types() -> Dict[str, ContentType]:
    """All registered content types keyed by slug."""
    return dict(_TYPES)


def register_content_type(
    slug: str,
    label: str,
    context: str,
    keywords: Optional[List[str]] = None,
    examples: Optional[List[str]] = None,
) -> ContentType:
    """Add or replace a content type."""
    content_type = ContentType(slug, label, context, list(keywords or []), list(examples or []))
    _TYPES[slug] = content_type
    return content_type


def type_exists(slug: str) -> bool:
    return slug in _TYPES


def get_type_label(slug: str) -> str:
    """Label for slug; unknown slugs are capitalised."""
    content_type = _TYPES.get(slug)
    return content_type.label if content_type else slug[:1].upper() + slug[1:]


def get_type_context(slug: str) -> str:
    content_type = _TYPES.get(slug)
    return content_type.context if content_type else ""


def get_type_keywords(slug: str) -> List[str]:
    content_type = _TYPES.get(slug)
    return list(content_type.keywords) if content_type else []


def get_type_examples(slug: str) -> List[str]:
    content_type = _TYPES.get(slug)
    return list(content_type.examples) if content_type else []
