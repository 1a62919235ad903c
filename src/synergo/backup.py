"""Backup export/import (JSON or YAML) and CSV export of the vocabulary."""
import csv
import json
import logging
from datetime import date
from pathlib import Path

from synergo.db import get_connection
from synergo.errors import ValidationError
from synergo.lists import QUIZ, REVIEW, get_list
from synergo.media import dedupe_tags, get_all_media, validate_media
from synergo.models import MediaItem, Nomenclature
from synergo.nomenclatures import available_id, get_all_nomenclatures
from synergo.sync import SEED_PREFIX, derive_nomenclatures_from_media, reconcile_nomenclatures

logger = logging.getLogger(__name__)


def default_backup_name() -> str:
    return f"synergo-backup-{date.today().isoformat()}.json"


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in (".yaml", ".yml")


def export_database(db_path: str, file_path: str) -> dict:
    """Write every table to ``file_path`` and return the exported payload."""
    data = {
        "media": [m.to_dict() for m in get_all_media(db_path)],
        "nomenclatures": [n.to_dict() for n in get_all_nomenclatures(db_path)],
        "reviewList": [m.id for m in get_list(db_path, REVIEW)],
        "quizList": [m.id for m in get_list(db_path, QUIZ)],
    }
    path = Path(file_path)
    if _is_yaml(path):
        import yaml
        path.write_text(yaml.safe_dump(data, allow_unicode=True, sort_keys=False))
    else:
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False))
    logger.info("Exported %d media to %s", len(data["media"]), path)
    return data


def read_backup(file_path: str) -> dict:
    path = Path(file_path)
    text = path.read_text()
    if _is_yaml(path):
        import yaml
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid backup file: {e}") from e
    else:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ValidationError(f"Invalid backup file: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Invalid backup file: expected a mapping")
    if not isinstance(data.get("media"), list):
        raise ValidationError("Invalid backup file: media missing")
    if not isinstance(data.get("nomenclatures"), list):
        raise ValidationError("Invalid backup file: nomenclatures missing")
    for entry in data["media"]:
        if not isinstance(entry, dict) or not all(entry.get(k) for k in ("id", "type", "title")):
            raise ValidationError("Invalid backup file: media entries need id, type and title")
        if not all(isinstance(entry.get(k) or [], list) for k in ("tags", "annotations")):
            raise ValidationError(f"Invalid backup file: tags and annotations of {entry['id']!r} must be lists")
    for entry in data["nomenclatures"]:
        if not isinstance(entry, dict) or not str(entry.get("label") or "").strip():
            raise ValidationError("Invalid backup file: nomenclature entries need a label")
    return data


def _load_media(entries: list[dict]) -> list[MediaItem]:
    """Build media from backup entries, normalised and validated like new media."""
    media = []
    seen = set()
    for raw in entries:
        try:
            item = MediaItem.from_dict(raw)
            item.tags = dedupe_tags(item.tags)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid media entry {raw['id']!r}: {e}") from e
        validate_media(item)
        if item.id in seen:
            raise ValidationError(f"Duplicate media id {item.id!r}")
        seen.add(item.id)
        media.append(item)
    return media


def _load_nomenclatures(entries: list[dict]) -> list[Nomenclature]:
    """Backup vocabulary with repeated labels dropped (first one wins)."""
    kept = []
    seen = set()
    for raw in entries:
        label = str(raw["label"]).strip()
        if label.lower() in seen:
            continue
        seen.add(label.lower())
        kept.append(Nomenclature(
            id=str(raw.get("id") or f"{SEED_PREFIX}{label}"),
            label=label,
            description=raw.get("description") or "",
            interpretation=raw.get("interpretation") or "",
        ))
    return kept


def _member_ids(entries) -> list[str]:
    # Lists may hold bare ids or whole media objects.
    ids = [e.get("id") if isinstance(e, dict) else e for e in entries or []]
    return list(dict.fromkeys(i for i in ids if i))


def import_database(db_path: str, file_path: str) -> dict:
    """Replace the stored content with a backup. Returns per-table counts.

    The backup is fully checked before anything is written; the replacement
    happens in a single transaction.
    """
    data = read_backup(file_path)
    media = _load_media(data["media"])
    nomenclatures = _load_nomenclatures(data["nomenclatures"])
    seeds = reconcile_nomenclatures(
        derive_nomenclatures_from_media(media), nomenclatures
    )[len(nomenclatures):]
    known_ids = {m.id for m in media}

    conn = get_connection(db_path)
    try:
        for table in ("review_list", "quiz_list", "media", "nomenclatures"):
            conn.execute(f"DELETE FROM {table}")
        # Reverse so rowids keep the exported order on timestamp ties.
        for m in reversed(media):
            conn.execute(
                """INSERT INTO media (id, title, description, src, type, tags, annotations,
                fps, added_at, updated_at, source, publication_date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (m.id, m.title, m.description, m.src, m.type, json.dumps(m.tags),
                 json.dumps([a.to_dict() for a in m.annotations]), m.fps,
                 m.added_at, max(m.updated_at, m.added_at), m.source, m.publication_date),
            )
        for entry in nomenclatures + seeds:
            conn.execute(
                "INSERT INTO nomenclatures (id, label, description, interpretation) VALUES (?, ?, ?, ?)",
                (available_id(conn, entry.id), entry.label, entry.description,
                 entry.interpretation),
            )
        list_counts = {}
        for key, table in (("reviewList", "review_list"), ("quizList", "quiz_list")):
            ids = [i for i in _member_ids(data.get(key)) if i in known_ids]
            # Oldest first so the first entry keeps the newest timestamp.
            for offset, media_id in enumerate(reversed(ids)):
                conn.execute(
                    f"INSERT INTO {table} (media_id, added_at) VALUES (?, ?)",
                    (media_id, offset),
                )
            list_counts[key] = len(ids)
        conn.commit()
    finally:
        conn.close()

    logger.info("Imported %d media from %s", len(media), file_path)
    return {
        "media": len(media),
        "nomenclatures": len(nomenclatures) + len(seeds),
        **list_counts,
    }


def export_nomenclatures_csv(db_path: str, file_path: str) -> int:
    nomenclatures = get_all_nomenclatures(db_path)
    with open(file_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL)
        writer.writerow(["Label", "Description", "Interpretation"])
        for n in nomenclatures:
            writer.writerow([n.label, n.description, n.interpretation])
    return len(nomenclatures)
