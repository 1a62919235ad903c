"""Catalog search, hierarchical tag parsing and filtering."""
from collections import Counter
from dataclasses import dataclass

from synergo.config import MEDIA_TYPES
from synergo.errors import ValidationError
from synergo.models import MediaItem

DEFAULT_FIELDS = ("title", "description", "tags")
SEARCHABLE_FIELDS = ("title", "description", "tags", "src", "source")
SORT_KEYS = ("date", "title", "type", "tags")


@dataclass(frozen=True)
class TagParts:
    raw: str
    category: str
    subcategory: str
    type: str
    level: str
    variant: str
    is_hierarchical: bool


def _check_fields(fields) -> None:
    unknown = [f for f in fields if f not in SEARCHABLE_FIELDS]
    if unknown:
        raise ValidationError(f"Cannot search on field(s): {', '.join(unknown)}")


def score_item(item: MediaItem, query: str, fields=DEFAULT_FIELDS) -> float:
    """Relevance of ``item`` for ``query``; 0 means no match.

    Each matching tag is worth 2. A string field containing the query is
    worth 1 (3 for the title), doubled when the field starts with the query,
    and scaled by 1 + len(query)/len(field).
    """
    _check_fields(fields)
    needle = query.strip().lower()
    if not needle:
        return 0.0
    score = 0.0
    for name in fields:
        if name == "tags":
            score += 2 * sum(1 for tag in item.tags if needle in tag.lower())
            continue
        value = (getattr(item, name) or "").lower()
        if needle in value:
            weight = 3 if name == "title" else 1
            bonus = 2 if value.startswith(needle) else 1
            score += weight * bonus * (1 + len(needle) / len(value))
    return score


def fuzzy_search(items: list[MediaItem], query: str,
                 fields=DEFAULT_FIELDS) -> list[MediaItem]:
    """Items matching ``query``, most relevant first.

    A blank query returns ``items`` itself.
    """
    _check_fields(fields)
    if not query or not query.strip():
        return items
    scored = [(score_item(item, query, fields), item) for item in items]
    scored = [pair for pair in scored if pair[0] > 0]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored]


def parse_hierarchical_tag(tag: str) -> TagParts:
    """Split a ``CATEGORY_SUB_TYPE_LEVEL_VARIANT`` tag into its components."""
    if not tag or not tag.strip():
        raise ValidationError("Tag must not be empty")
    parts = tag.split("_")
    padded = parts + [""] * (5 - len(parts))
    return TagParts(
        raw=tag,
        category=padded[0],
        subcategory=padded[1],
        type=padded[2],
        level=padded[3],
        variant=padded[4],
        is_hierarchical=len(parts) >= 3,
    )


def extract_category_tree(media: list[MediaItem]) -> dict[str, dict[str, set[str]]]:
    """Build ``{category: {subcategory: {types}}}`` from hierarchical tags."""
    tree: dict[str, dict[str, set[str]]] = {}
    for item in media:
        for tag in item.tags:
            parsed = parse_hierarchical_tag(tag)
            if not parsed.is_hierarchical:
                continue
            subcategories = tree.setdefault(parsed.category, {})
            if not parsed.subcategory:
                continue
            types = subcategories.setdefault(parsed.subcategory, set())
            if parsed.type:
                types.add(parsed.type)
    return tree


def filter_by_category_prefix(media: list[MediaItem], prefix: str | None) -> list[MediaItem]:
    if not prefix:
        return media
    return [item for item in media if any(tag.startswith(prefix) for tag in item.tags)]


def find_similar_by_tag(tag: str, media: list[MediaItem], max_results: int = 5) -> list[MediaItem]:
    """Media whose tags sit closest to ``tag`` in the hierarchy."""
    reference = parse_hierarchical_tag(tag)
    scored = []
    for item in media:
        score = 0
        for item_tag in item.tags:
            parsed = parse_hierarchical_tag(item_tag)
            if parsed.category == reference.category:
                score += 1
            if parsed.subcategory == reference.subcategory:
                score += 2
            if parsed.type == reference.type:
                score += 3
            if item_tag == tag:
                score += 10
        if score > 0:
            scored.append((score, item))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored[:max_results]]


def filter_media(media: list[MediaItem], media_type: str = "all", tags=(),
                 sort_by: str = "date", descending: bool = True) -> list[MediaItem]:
    if media_type != "all" and media_type not in MEDIA_TYPES:
        raise ValidationError(f"Unknown media type: {media_type}")
    if sort_by not in SORT_KEYS:
        raise ValidationError(f"Cannot sort by {sort_by!r}")

    result = [m for m in media if media_type == "all" or m.type == media_type]
    wanted = {t.lower() for t in tags}
    if wanted:
        result = [m for m in result if wanted <= {t.lower() for t in m.tags}]

    keys = {
        "date": lambda m: m.updated_at,
        "title": lambda m: m.title.lower(),
        "type": lambda m: m.type,
        "tags": lambda m: len(m.tags),
    }
    return sorted(result, key=keys[sort_by], reverse=descending)


def available_tags(media: list[MediaItem]) -> list[tuple[str, int]]:
    """Distinct tag and annotation labels with usage counts, most used first."""
    counts = Counter()
    for item in media:
        counts.update(item.labels)
    return counts.most_common()
