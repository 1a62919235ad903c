"""Media catalog storage: resources with their tags and annotations."""
import json
import logging
import re
import time
from pathlib import PurePosixPath
from uuid import uuid4

from synergo.config import (
    DEFAULT_FPS,
    IMAGE_EXTENSIONS,
    MAX_ANNOTATIONS,
    MAX_DESCRIPTION_LENGTH,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
    MEDIA_TYPES,
    VIDEO_EXTENSIONS,
)
from synergo.db import get_connection
from synergo.errors import NotFoundError, ValidationError
from synergo.models import Annotation, MediaItem
from synergo.nomenclatures import sync_from_media

logger = logging.getLogger(__name__)

_COLUMNS = """id, title, description, src, type, tags, annotations, fps,
    added_at, updated_at, source, publication_date"""


def _now_ms() -> int:
    return int(time.time() * 1000)


def row_to_media(row) -> MediaItem:
    return MediaItem(
        id=row["id"],
        type=row["type"],
        title=row["title"],
        src=row["src"],
        description=row["description"] or "",
        tags=json.loads(row["tags"] or "[]"),
        annotations=[Annotation(**a) for a in json.loads(row["annotations"] or "[]")],
        fps=row["fps"] or DEFAULT_FPS,
        added_at=row["added_at"],
        updated_at=row["updated_at"],
        source=row["source"] or "",
        publication_date=row["publication_date"] or "",
    )


def filename_from_path(path: str) -> str:
    """Strip directories from local paths; URLs and data URIs are kept whole."""
    path = (path or "").strip()
    if path.startswith(("http://", "https://", "data:")):
        return path
    return PurePosixPath(path.replace("\\", "/")).name


def detect_media_type(src: str) -> str:
    normalized = (src or "").lower()
    if normalized.startswith("data:image"):
        return "photo"
    if normalized.startswith("data:video"):
        return "video"
    if normalized.endswith(VIDEO_EXTENSIONS):
        return "video"
    if normalized.endswith(IMAGE_EXTENSIONS):
        return "photo"
    return "video"


def dedupe_tags(tags: list[str]) -> list[str]:
    result = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in result:
            result.append(tag)
    return result


def validate_media(item: MediaItem) -> None:
    if not item.title or not item.title.strip():
        raise ValidationError("Title is required")
    if len(item.title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title is longer than {MAX_TITLE_LENGTH} characters")
    if len(item.description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationError(f"Description is longer than {MAX_DESCRIPTION_LENGTH} characters")
    if not item.src:
        raise ValidationError("Source (src) is required")
    if item.type not in MEDIA_TYPES:
        raise ValidationError(f"Type must be one of: {', '.join(MEDIA_TYPES)}")
    if not isinstance(item.fps, int) or item.fps <= 0:
        raise ValidationError("FPS must be a positive integer")
    if len(item.tags) > MAX_TAGS:
        raise ValidationError(f"At most {MAX_TAGS} tags are allowed")
    if len(item.annotations) > MAX_ANNOTATIONS:
        raise ValidationError(f"At most {MAX_ANNOTATIONS} annotations are allowed")
    for ann in item.annotations:
        if not ann.label or not ann.label.strip():
            raise ValidationError("Annotation label must not be empty")
        if ann.time < 0:
            raise ValidationError("Annotation time must be >= 0")


def _write(conn, item: MediaItem, insert: bool) -> None:
    values = (
        item.title, item.description, item.src, item.type,
        json.dumps(item.tags), json.dumps([a.to_dict() for a in item.annotations]),
        item.fps, item.updated_at, item.source, item.publication_date,
    )
    if insert:
        conn.execute(
            f"INSERT INTO media ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (item.id, *values[:7], item.added_at, *values[7:]),
        )
    else:
        conn.execute(
            """UPDATE media SET title=?, description=?, src=?, type=?, tags=?,
            annotations=?, fps=?, updated_at=?, source=?, publication_date=?
            WHERE id=?""",
            (*values, item.id),
        )


def create_media(db_path: str, title: str, src: str, media_type: str | None = None,
                 description: str = "", tags: list[str] | None = None,
                 annotations: list[Annotation] | None = None, fps: int = DEFAULT_FPS,
                 source: str = "", publication_date: str = "",
                 media_id: str | None = None) -> MediaItem:
    timestamp = _now_ms()
    item = MediaItem(
        id=media_id or f"user-media-{timestamp}-{uuid4().hex[:6]}",
        type=media_type or detect_media_type(src),
        title=(title or "").strip(),
        src=filename_from_path(src),
        description=description or "",
        tags=dedupe_tags(tags or []),
        annotations=list(annotations or []),
        fps=fps,
        added_at=timestamp,
        updated_at=timestamp,
        source=source or "",
        publication_date=publication_date or "",
    )
    validate_media(item)
    conn = get_connection(db_path)
    try:
        _write(conn, item, insert=True)
        conn.commit()
    finally:
        conn.close()
    logger.info("Added %s %s (%s)", item.type, item.id, item.src)
    sync_from_media(db_path, [item])
    return item


def get_media(db_path: str, media_id: str) -> MediaItem | None:
    conn = get_connection(db_path)
    row = conn.execute(f"SELECT {_COLUMNS} FROM media WHERE id = ?", (media_id,)).fetchone()
    conn.close()
    return row_to_media(row) if row else None


def get_all_media(db_path: str) -> list[MediaItem]:
    conn = get_connection(db_path)
    rows = conn.execute(
        f"SELECT {_COLUMNS} FROM media ORDER BY updated_at DESC, rowid DESC"
    ).fetchall()
    conn.close()
    return [row_to_media(r) for r in rows]


def update_media(db_path: str, media_id: str, **changes) -> MediaItem:
    """Apply a partial update. ``updated_at`` always moves forward."""
    current = get_media(db_path, media_id)
    if current is None:
        raise NotFoundError(f"Media {media_id} not found")
    allowed = {"title", "description", "src", "type", "tags", "annotations",
               "fps", "source", "publication_date"}
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    for name, value in changes.items():
        if name == "src":
            value = filename_from_path(value)
        elif name == "tags":
            value = dedupe_tags(value)
        elif name == "annotations":
            value = list(value)
        setattr(current, name, value)
    current.updated_at = max(_now_ms(), current.updated_at)
    validate_media(current)

    conn = get_connection(db_path)
    try:
        _write(conn, current, insert=False)
        conn.commit()
    finally:
        conn.close()
    logger.info("Updated media %s", media_id)
    sync_from_media(db_path, [current])
    return current


def delete_media(db_path: str, media_id: str) -> bool:
    """Delete a resource; its review/quiz list memberships go with it."""
    conn = get_connection(db_path)
    deleted = conn.execute("DELETE FROM media WHERE id = ?", (media_id,)).rowcount > 0
    conn.commit()
    conn.close()
    if deleted:
        logger.info("Deleted media %s", media_id)
    return deleted


def add_tag(db_path: str, media_id: str, tag: str) -> MediaItem:
    if not tag or not tag.strip():
        raise ValidationError("Tag must not be empty")
    item = _require(db_path, media_id)
    return update_media(db_path, media_id, tags=item.tags + [tag.strip()])


def remove_tag(db_path: str, media_id: str, tag: str) -> MediaItem:
    item = _require(db_path, media_id)
    return update_media(db_path, media_id, tags=[t for t in item.tags if t != tag])


def add_annotation(db_path: str, media_id: str, time_seconds: float, label: str) -> MediaItem:
    item = _require(db_path, media_id)
    if item.type != "video":
        raise ValidationError("Annotations are only supported on videos")
    if not label or not label.strip():
        raise ValidationError("Annotation label must not be empty")
    annotation = Annotation(time=float(time_seconds), label=label.strip())
    return update_media(db_path, media_id, annotations=item.annotations + [annotation])


def remove_annotation(db_path: str, media_id: str, index: int) -> MediaItem:
    """Remove the annotation at ``index`` in storage order."""
    item = _require(db_path, media_id)
    if not 0 <= index < len(item.annotations):
        raise ValidationError(f"No annotation at position {index}")
    remaining = item.annotations[:index] + item.annotations[index + 1:]
    return update_media(db_path, media_id, annotations=remaining)


def sorted_annotations(item: MediaItem) -> list[Annotation]:
    return sorted(item.annotations, key=lambda a: a.time)


def _require(db_path: str, media_id: str) -> MediaItem:
    item = get_media(db_path, media_id)
    if item is None:
        raise NotFoundError(f"Media {media_id} not found")
    return item


def find_existing_resource(db_path: str, title: str = "", src: str = "") -> MediaItem | None:
    """Return media sharing the title (case-insensitive) or the file name."""
    title = (title or "").strip().lower()
    src = filename_from_path(src) if src else ""
    for item in get_all_media(db_path):
        if title and item.title.strip().lower() == title:
            return item
        if src and filename_from_path(item.src) == src:
            return item
    return None


def next_resource_number(db_path: str, date_prefix: str, source_prefix: str,
                         subject_prefix: str) -> str:
    """Next 3-digit counter for ``YYYYMMDD_source_subject_NNN.ext`` names."""
    pattern = f"{date_prefix}_{source_prefix}_{subject_prefix}_%"
    conn = get_connection(db_path)
    rows = conn.execute("SELECT src FROM media WHERE src LIKE ?", (pattern,)).fetchall()
    conn.close()
    highest = 0
    for row in rows:
        match = re.search(r"_(\d{3})\.[^.]+$", row["src"])
        if match:
            highest = max(highest, int(match.group(1)))
    return f"{highest + 1:03d}"
