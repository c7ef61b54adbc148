# tutoring_calendar/services/catalog.py
"""
Static subject/level catalog.

Kept in-core; an external catalog service can replace these lists without
changing the slot generator, which only needs the ids.
"""

from typing import Optional

from ..schemas.catalog import Level, Subject

SUBJECTS: tuple[Subject, ...] = (
    Subject(id="math", name="Matematyka", icon="📐"),
    Subject(id="chemistry", name="Chemia", icon="🧪"),
    Subject(id="biology", name="Biologia", icon="🧬"),
    Subject(id="physics", name="Fizyka", icon="⚛️"),
    Subject(id="polish", name="Język Polski", icon="📚"),
    Subject(id="english", name="Język Angielski", icon="🇬🇧"),
    Subject(id="german", name="Język Niemiecki", icon="🇩🇪"),
    Subject(id="spanish", name="Język Hiszpański", icon="🇪🇸"),
    Subject(id="russian", name="Język Rosyjski", icon="🇷🇺"),
)

LEVELS: tuple[Level, ...] = (
    Level(id="basic", name="Podstawowy", description="Klasy 1-6"),
    Level(id="intermediate", name="Średni", description="Klasy 7-9"),
    Level(id="advanced", name="Zaawansowany", description="Liceum+"),
)

_SUBJECTS_BY_ID = {s.id: s for s in SUBJECTS}
_LEVELS_BY_ID = {lvl.id: lvl for lvl in LEVELS}


def get_subject(subject_id: str) -> Optional[Subject]:
    return _SUBJECTS_BY_ID.get(subject_id)


def get_level(level_id: str) -> Optional[Level]:
    return _LEVELS_BY_ID.get(level_id)


def subject_or_unknown(subject_id: str) -> Subject:
    """Catalog subject, or a "Nieznany" stand-in for unknown ids."""
    return get_subject(subject_id) or Subject(id=subject_id, name="Nieznany", icon="❓")


def level_or_unknown(level_id: str) -> Level:
    return get_level(level_id) or Level(id=level_id, name="Nieznany", description="")
