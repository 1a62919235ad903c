"""String similarity heuristics used to rank vocabulary labels.

All comparisons are case-insensitive. ``combined_score`` is the ranking
function used for distractor selection: raw edit-distance similarity plus a
prefix bonus (weight 0.3) and a shared-token bonus (0.2 per token).
"""
import re

PREFIX_WEIGHT = 0.3
TOKEN_WEIGHT = 0.2

_TOKEN_SPLIT = re.compile(r"[\s_\-]+")


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit substitution/insertion/deletion costs."""
    a = a.lower()
    b = b.lower()
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(min(
                    previous[j - 1] + 1,  # substitution
                    current[j - 1] + 1,   # insertion
                    previous[j] + 1,      # deletion
                ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1]; 1 means identical (ignoring case)."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1 - edit_distance(a, b) / max_len


def common_prefix_length(a: str, b: str) -> int:
    a = a.lower()
    b = b.lower()
    i = 0
    while i < len(a) and i < len(b) and a[i] == b[i]:
        i += 1
    return i


def _tokens(text: str) -> set[str]:
    return {t for t in _TOKEN_SPLIT.split(text.lower()) if t}


def common_token_count(a: str, b: str) -> int:
    """Number of distinct whitespace/underscore/hyphen tokens shared by a and b."""
    return len(_tokens(a) & _tokens(b))


def combined_score(a: str, b: str) -> float:
    prefix_bonus = common_prefix_length(a, b) / max(len(a), len(b), 1)
    return (
        similarity(a, b)
        + PREFIX_WEIGHT * prefix_bonus
        + TOKEN_WEIGHT * common_token_count(a, b)
    )


def most_similar(target: str, candidates: list[str], count: int = 3,
                 exclude: list[str] | None = None) -> list[str]:
    """Return the ``count`` candidates closest to ``target``.

    Candidates equal to ``target`` or to any entry of ``exclude`` (both
    case-insensitive) are skipped. Equal scores keep their input order.
    """
    excluded = {e.lower() for e in (exclude or [])}
    excluded.add(target.lower())
    scored = [
        (combined_score(target, c), c)
        for c in candidates
        if c.lower() not in excluded
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [c for _, c in scored[:count]]


def most_similar_to_set(targets: list[str], candidates: list[str],
                        count: int = 3) -> list[str]:
    """Rank candidates by their average ``combined_score`` against all targets.

    Returns an empty list when ``targets`` is empty.
    """
    if not targets:
        return []
    excluded = {t.lower() for t in targets}
    scored = []
    for candidate in candidates:
        if candidate.lower() in excluded:
            continue
        total = sum(combined_score(t, candidate) for t in targets)
        scored.append((total / len(targets), candidate))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [c for _, c in scored[:count]]
