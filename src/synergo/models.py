"""Data classes for the media/vocabulary domain model."""
from dataclasses import dataclass, field

IDENTIFICATION = "identification"
DESCRIPTION = "description"
INTERPRETATION = "interpretation"
QUESTION_TYPES = (IDENTIFICATION, DESCRIPTION, INTERPRETATION)


@dataclass
class Annotation:
    time: float
    label: str

    def to_dict(self) -> dict:
        return {"time": self.time, "label": self.label}


@dataclass
class MediaItem:
    id: str
    type: str
    title: str
    src: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    annotations: list[Annotation] = field(default_factory=list)
    fps: int = 30
    added_at: int = 0
    updated_at: int = 0
    source: str = ""
    publication_date: str = ""

    @property
    def labels(self) -> list[str]:
        """Tags followed by annotation labels, in order of appearance."""
        return list(self.tags) + [a.label for a in self.annotations]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "src": self.src,
            "tags": list(self.tags),
            "annotations": [a.to_dict() for a in self.annotations],
            "fps": self.fps,
            "addedAt": self.added_at,
            "updatedAt": self.updated_at,
            "source": self.source,
            "publicationDate": self.publication_date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MediaItem":
        return cls(
            id=data["id"],
            type=data["type"],
            title=data["title"],
            src=data.get("src", ""),
            description=data.get("description") or "",
            tags=list(data.get("tags") or []),
            annotations=[
                Annotation(time=float(a.get("time", 0)), label=a["label"])
                for a in data.get("annotations") or []
            ],
            fps=data.get("fps") or 30,
            added_at=data.get("addedAt", 0),
            updated_at=data.get("updatedAt", data.get("addedAt", 0)),
            source=data.get("source") or "",
            publication_date=data.get("publicationDate") or "",
        )


@dataclass
class Nomenclature:
    id: str
    label: str
    description: str = ""
    interpretation: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "interpretation": self.interpretation,
        }


@dataclass(frozen=True)
class IdentificationQuestion:
    media: MediaItem
    correct_answers: tuple[str, ...]
    options: tuple[str, ...]
    type: str = field(default=IDENTIFICATION, init=False)


@dataclass(frozen=True)
class DescriptionQuestion:
    nomenclature: Nomenclature
    correct_answer: str
    options: tuple[str, ...]
    type: str = field(default=DESCRIPTION, init=False)


@dataclass(frozen=True)
class InterpretationQuestion:
    nomenclature: Nomenclature
    correct_answer: str
    options: tuple[str, ...]
    type: str = field(default=INTERPRETATION, init=False)


@dataclass
class TypeScore:
    correct: int = 0
    total: int = 0


@dataclass(frozen=True)
class AnswerRecord:
    question: object
    selected_answers: tuple[str, ...]
    is_correct: bool
    skipped: bool = False


@dataclass(frozen=True)
class QuizResult:
    scores: dict
    total_score: int
    total: int
    answers: tuple[AnswerRecord, ...]
    percentage: int
