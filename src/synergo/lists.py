"""Review and quiz working sets: ordered, duplicate-free media memberships."""
import logging
import sqlite3
import time

from synergo.config import MAX_BULK_ITEMS
from synergo.db import get_connection
from synergo.errors import ValidationError
from synergo.media import row_to_media
from synergo.models import MediaItem

logger = logging.getLogger(__name__)

REVIEW = "review"
QUIZ = "quiz"
_TABLES = {REVIEW: "review_list", QUIZ: "quiz_list"}


def _table(list_name: str) -> str:
    try:
        return _TABLES[list_name]
    except KeyError:
        raise ValidationError(f"Unknown list: {list_name!r}") from None


def add_to_list(db_path: str, list_name: str, media_id: str) -> bool:
    """Add a media item. Returns False if it was already in the list."""
    table = _table(list_name)
    conn = get_connection(db_path)
    try:
        cursor = conn.execute(
            f"INSERT OR IGNORE INTO {table} (media_id, added_at) VALUES (?, ?)",
            (media_id, int(time.time() * 1000)),
        )
        conn.commit()
    except sqlite3.IntegrityError:
        raise ValidationError(f"Media {media_id} does not exist") from None
    finally:
        conn.close()
    added = cursor.rowcount > 0
    if added:
        logger.info("Added %s to %s list", media_id, list_name)
    else:
        logger.debug("%s already in %s list", media_id, list_name)
    return added


def add_many_to_list(db_path: str, list_name: str, media_ids: list[str]) -> int:
    """Add several items at once; returns how many were not already present."""
    if len(media_ids) > MAX_BULK_ITEMS:
        raise ValidationError(f"At most {MAX_BULK_ITEMS} items can be added at once")
    return sum(1 for media_id in media_ids if add_to_list(db_path, list_name, media_id))


def remove_from_list(db_path: str, list_name: str, media_id: str) -> bool:
    table = _table(list_name)
    conn = get_connection(db_path)
    removed = conn.execute(f"DELETE FROM {table} WHERE media_id = ?", (media_id,)).rowcount > 0
    conn.commit()
    conn.close()
    return removed


def clear_list(db_path: str, list_name: str) -> int:
    table = _table(list_name)
    conn = get_connection(db_path)
    count = conn.execute(f"DELETE FROM {table}").rowcount
    conn.commit()
    conn.close()
    logger.info("Cleared %s list (%d items)", list_name, count)
    return count


def is_in_list(db_path: str, list_name: str, media_id: str) -> bool:
    table = _table(list_name)
    conn = get_connection(db_path)
    row = conn.execute(f"SELECT 1 FROM {table} WHERE media_id = ?", (media_id,)).fetchone()
    conn.close()
    return row is not None


def get_list(db_path: str, list_name: str) -> list[MediaItem]:
    """Members of the list, most recently added first."""
    table = _table(list_name)
    conn = get_connection(db_path)
    rows = conn.execute(
        f"""SELECT m.* FROM {table} l
        JOIN media m ON l.media_id = m.id
        ORDER BY l.added_at DESC, l.rowid DESC"""
    ).fetchall()
    conn.close()
    return [row_to_media(r) for r in rows]
