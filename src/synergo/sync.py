"""Keep the vocabulary consistent with the labels used on media.

Labels seen on media are turned into "seed" nomenclatures. Seeds are only
ever added: an entry already present in the vocabulary (matched on the
case-folded label) is left exactly as the user edited it.
"""
from synergo.errors import ValidationError
from synergo.models import MediaItem, Nomenclature

SEED_PREFIX = "seed-"


def make_seed(label: str) -> Nomenclature:
    if not label or not label.strip():
        raise ValidationError("Nomenclature label must not be empty")
    return Nomenclature(id=f"{SEED_PREFIX}{label}", label=label)


def derive_nomenclatures_from_media(media: list[MediaItem]) -> list[Nomenclature]:
    """One seed per distinct tag/annotation label, in first-seen order.

    Label identity here is case-sensitive; case folding happens when seeds
    are reconciled against the stored vocabulary.
    """
    collected: dict[str, Nomenclature] = {}
    for item in media:
        for label in item.labels:
            if label not in collected:
                collected[label] = make_seed(label)
    return list(collected.values())


def reconcile_nomenclatures(derived: list[Nomenclature],
                            existing: list[Nomenclature]) -> list[Nomenclature]:
    """Append derived entries whose label is missing from ``existing``.

    Returns ``existing`` itself when nothing was added so callers can skip
    the write.
    """
    known = {n.label.lower() for n in existing}
    additions = []
    for entry in derived:
        key = entry.label.lower()
        if key not in known:
            known.add(key)
            additions.append(entry)
    if not additions:
        return existing
    return list(existing) + additions


def upsert_by_label(candidate: Nomenclature,
                    existing: list[Nomenclature]) -> tuple[Nomenclature, bool]:
    """Return ``(entry, created)``: the stored match if any, else ``candidate``."""
    if not candidate.label or not candidate.label.strip():
        raise ValidationError("Nomenclature label must not be empty")
    key = candidate.label.lower()
    for entry in existing:
        if entry.label.lower() == key:
            return entry, False
    return candidate, True


def is_nomenclature_used(label: str, media: list[MediaItem]) -> bool:
    normalized = label.strip().lower()
    return any(
        normalized == used.lower()
        for item in media
        for used in item.labels
    )
