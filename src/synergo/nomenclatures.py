"""Nomenclature storage: CRUD with case-insensitive label uniqueness."""
import logging
import time
from dataclasses import replace
from uuid import uuid4

from synergo.db import get_connection
from synergo.errors import (
    DuplicateLabelError,
    NomenclatureInUseError,
    NotFoundError,
    ValidationError,
)
from synergo.models import MediaItem, Nomenclature
from synergo.sync import (
    derive_nomenclatures_from_media,
    is_nomenclature_used,
    reconcile_nomenclatures,
    upsert_by_label,
)

logger = logging.getLogger(__name__)


def _row_to_nomenclature(row) -> Nomenclature:
    return Nomenclature(
        id=row["id"],
        label=row["label"],
        description=row["description"] or "",
        interpretation=row["interpretation"] or "",
    )


def _clean_label(label: str | None) -> str:
    if not label or not label.strip():
        raise ValidationError("Label is required")
    return label.strip()


def _find_by_label(conn, label: str):
    return conn.execute(
        "SELECT * FROM nomenclatures WHERE LOWER(label) = LOWER(?)", (label,)
    ).fetchone()


def available_id(conn, nomenclature_id: str) -> str:
    """Return ``nomenclature_id``, suffixed when a stored row already uses it."""
    taken = conn.execute(
        "SELECT 1 FROM nomenclatures WHERE id = ?", (nomenclature_id,)
    ).fetchone()
    return f"{nomenclature_id}-{uuid4().hex[:6]}" if taken else nomenclature_id


def _insert(conn, nomenclature: Nomenclature) -> None:
    conn.execute(
        "INSERT INTO nomenclatures (id, label, description, interpretation) VALUES (?, ?, ?, ?)",
        (nomenclature.id, nomenclature.label,
         nomenclature.description or "", nomenclature.interpretation or ""),
    )


def get_all_nomenclatures(db_path: str) -> list[Nomenclature]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM nomenclatures ORDER BY label COLLATE NOCASE").fetchall()
    conn.close()
    return [_row_to_nomenclature(r) for r in rows]


def get_nomenclature(db_path: str, nomenclature_id: str) -> Nomenclature | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM nomenclatures WHERE id = ?", (nomenclature_id,)).fetchone()
    conn.close()
    return _row_to_nomenclature(row) if row else None


def create_nomenclature(db_path: str, label: str, description: str = "",
                        interpretation: str = "") -> Nomenclature:
    """Create a user-defined entry. Rejects a label that already exists."""
    label = _clean_label(label)
    nomenclature = Nomenclature(
        id=f"user-{int(time.time() * 1000)}-{uuid4().hex[:6]}-{label}",
        label=label,
        description=description or "",
        interpretation=interpretation or "",
    )
    conn = get_connection(db_path)
    try:
        if _find_by_label(conn, label):
            raise DuplicateLabelError(label)
        _insert(conn, nomenclature)
        conn.commit()
    finally:
        conn.close()
    logger.info("Created nomenclature %s", label)
    return nomenclature


def update_nomenclature(db_path: str, nomenclature_id: str, label: str | None = None,
                        description: str | None = None,
                        interpretation: str | None = None) -> Nomenclature:
    current = get_nomenclature(db_path, nomenclature_id)
    if current is None:
        raise NotFoundError(f"Nomenclature {nomenclature_id} not found")
    if label is not None:
        label = _clean_label(label)
    updated = Nomenclature(
        id=current.id,
        label=label if label is not None else current.label,
        description=description if description is not None else current.description,
        interpretation=interpretation if interpretation is not None else current.interpretation,
    )
    conn = get_connection(db_path)
    try:
        clash = _find_by_label(conn, updated.label)
        if clash and clash["id"] != current.id:
            raise DuplicateLabelError(updated.label)
        conn.execute(
            "UPDATE nomenclatures SET label=?, description=?, interpretation=? WHERE id=?",
            (updated.label, updated.description, updated.interpretation, current.id),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Updated nomenclature %s", updated.label)
    return updated


def delete_nomenclature(db_path: str, nomenclature_id: str) -> bool:
    """Delete an entry unless some media still uses its label."""
    from synergo.media import get_all_media

    current = get_nomenclature(db_path, nomenclature_id)
    if current is None:
        return False
    if is_nomenclature_used(current.label, get_all_media(db_path)):
        raise NomenclatureInUseError(current.label)
    conn = get_connection(db_path)
    conn.execute("DELETE FROM nomenclatures WHERE id = ?", (nomenclature_id,))
    conn.commit()
    conn.close()
    logger.info("Deleted nomenclature %s", current.label)
    return True


def sync_nomenclature(db_path: str, nomenclature: Nomenclature) -> Nomenclature:
    """Upsert by label: an existing entry always wins over ``nomenclature``."""
    conn = get_connection(db_path)
    try:
        row = _find_by_label(conn, nomenclature.label)
        existing = [_row_to_nomenclature(row)] if row else []
        entry, created = upsert_by_label(nomenclature, existing)
        if created:
            # A renamed row may still hold the seed id.
            entry = replace(entry, id=available_id(conn, entry.id))
            _insert(conn, entry)
            conn.commit()
            logger.info("Seeded nomenclature %s", entry.label)
        else:
            logger.debug("Nomenclature %s already present", entry.label)
    finally:
        conn.close()
    return entry


def sync_from_media(db_path: str, media: list[MediaItem]) -> int:
    """Seed every label used on ``media`` that the vocabulary lacks.

    Returns the number of entries inserted.
    """
    existing = get_all_nomenclatures(db_path)
    merged = reconcile_nomenclatures(derive_nomenclatures_from_media(media), existing)
    if merged is existing:
        return 0
    additions = merged[len(existing):]
    conn = get_connection(db_path)
    try:
        for entry in additions:
            entry.id = available_id(conn, entry.id)
            _insert(conn, entry)
        conn.commit()
    finally:
        conn.close()
    logger.info("Seeded %d nomenclature(s) from media", len(additions))
    return len(additions)
