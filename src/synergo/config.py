"""Application-wide settings."""
import os
from pathlib import Path

DEFAULT_DB_PATH = os.environ.get(
    "SYNERGO_DB", str(Path.home() / ".synergo" / "synergo.db")
)

MEDIA_TYPES = ("video", "photo")
VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".avi", ".mkv")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp")

DEFAULT_FPS = 30
DEFAULT_QUIZ_SIZE = 10

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
MAX_TAGS = 50
MAX_ANNOTATIONS = 100
MAX_BULK_ITEMS = 100
