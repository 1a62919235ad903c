import random

import pytest

from synergo.db import init_db
from synergo.models import Annotation, MediaItem, Nomenclature


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_synergo.db")
    return db_path


@pytest.fixture
def db(tmp_db):
    """An initialized, empty database."""
    init_db(tmp_db)
    return tmp_db


@pytest.fixture
def rng():
    return random.Random(1234)


def _make_media(media_id, tags=(), media_type="photo", title=None, description="",
               annotations=(), updated_at=0):
    return MediaItem(
        id=media_id,
        type=media_type,
        title=title or f"Media {media_id}",
        src=f"{media_id}.jpg",
        description=description,
        tags=list(tags),
        annotations=[Annotation(time=t, label=label) for t, label in annotations],
        updated_at=updated_at,
    )


@pytest.fixture
def make_media():
    """Factory for in-memory MediaItem objects."""
    return _make_media


@pytest.fixture
def vocabulary():
    return [
        Nomenclature(id="n1", label="R_C_E_3_1", description="Crossed arms",
                     interpretation="Closed posture"),
        Nomenclature(id="n2", label="R_C_E_3_2", description="Hands on hips",
                     interpretation="Dominance display"),
        Nomenclature(id="n3", label="R_M_S_1_1", description="Smile",
                     interpretation="Friendliness"),
        Nomenclature(id="n4", label="nod", description="Head nod",
                     interpretation="Agreement"),
        Nomenclature(id="n5", label="shrug", description="Shoulder shrug",
                     interpretation="Uncertainty"),
    ]
