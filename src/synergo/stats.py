"""Collection statistics and quiz grading."""
from collections import Counter

from synergo.models import MediaItem, Nomenclature
from synergo.search import parse_hierarchical_tag


def get_grade(percentage: float) -> str:
    if percentage >= 80:
        return "excellent"
    elif percentage >= 60:
        return "good"
    elif percentage >= 40:
        return "average"
    return "poor"


def get_grade_color(grade: str) -> str:
    return {
        "excellent": "green",
        "good": "yellow",
        "average": "dark_orange",
    }.get(grade, "red")


def collection_stats(media: list[MediaItem], nomenclatures: list[Nomenclature]) -> dict:
    tag_frequency = Counter()
    categories = Counter()
    types = {"video": 0, "photo": 0}
    total_annotations = 0
    for item in media:
        types[item.type] = types.get(item.type, 0) + 1
        total_annotations += len(item.annotations)
        for tag in item.tags:
            tag_frequency[tag] += 1
            categories[parse_hierarchical_tag(tag).category] += 1

    used = {label.lower() for item in media for label in item.labels}
    unused = [n for n in nomenclatures if n.label.lower() not in used]
    in_use = len(nomenclatures) - len(unused)
    total_tags = sum(tag_frequency.values())
    videos = types.get("video", 0)

    return {
        "total_media": len(media),
        "total_nomenclatures": len(nomenclatures),
        "total_tags": total_tags,
        "total_annotations": total_annotations,
        "type_distribution": types,
        "most_used_tags": tag_frequency.most_common(10),
        "category_distribution": categories.most_common(),
        "unused_nomenclatures": unused,
        "avg_tags_per_media": round(total_tags / len(media), 1) if media else 0.0,
        "avg_annotations_per_video": round(total_annotations / videos, 1) if videos else 0.0,
        "usage_rate": round(in_use / len(nomenclatures) * 100, 1) if nomenclatures else 0.0,
    }
