"""Turn a user-supplied routine or class name into document names to look up.

Users ask for ``Pkg.Class.cls``, ``Pkg.Class`` or a routine like
``Pkg.Class.1.int``. The Atelier doc endpoint only serves the exact document
name, and the generated routine of a class is usually ``<Class>.1.int`` but
sometimes ``<Class>.int``. Candidates are listed in the order they should be
tried.
"""

CLASS_EXT = ".cls"
ROUTINE_EXT = ".int"
ROUTINE_REV1_EXT = ".1.int"

# Documents that are already routine-like and are fetched verbatim.
KNOWN_EXTS = (".int", ".mac", ".inc")


def _append_unique(candidates: list[str], name: str) -> None:
    if name not in candidates:
        candidates.append(name)


def resolve_candidates(raw_name: str) -> list[str]:
    """
    Return the ordered, de-duplicated document names for ``raw_name``.

    - ``X.cls`` -> ``X.1.int``, ``X.int``
    - ``X.int`` / ``X.mac`` / ``X.inc`` -> the name unchanged
    - anything else -> ``X.1.int``, ``X.int``, ``X``

    Blank input yields an empty list.
    """
    name = raw_name.strip()
    if not name:
        return []

    candidates: list[str] = []
    lowered = name.lower()

    if lowered.endswith(CLASS_EXT):
        stem = name[: -len(CLASS_EXT)]
        _append_unique(candidates, stem + ROUTINE_REV1_EXT)
        _append_unique(candidates, stem + ROUTINE_EXT)
        return candidates

    if lowered.endswith(KNOWN_EXTS):
        _append_unique(candidates, name)
        return candidates

    _append_unique(candidates, name + ROUTINE_REV1_EXT)
    _append_unique(candidates, name + ROUTINE_EXT)
    _append_unique(candidates, name)
    return candidates
