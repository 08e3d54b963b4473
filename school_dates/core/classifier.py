"""
Label classification into calendar item types.

Rules are ordered and the first match wins, so "Staff day - end of term"
is a staff day, not a term end.
"""

from .models import ItemType


# (all substrings that must be present, resulting type)
TYPE_RULES: list[tuple[tuple[str, ...], ItemType]] = [
    (("staff day",), ItemType.STAFF_DAY),
    (("half term",), ItemType.HOLIDAY),
    (("reading week",), ItemType.READING_WEEK),
    (("bank holiday",), ItemType.BANK_HOLIDAY),
    (("entrance", "exam"), ItemType.EXAM),
    (("term ends",), ItemType.TERM_END),
    (("end of term",), ItemType.TERM_END),
    (("term commences",), ItemType.TERM_START),
    (("term starts",), ItemType.TERM_START),
    (("school reopens",), ItemType.REOPEN),
    (("reopens",), ItemType.REOPEN),
]

STAFF_AUDIENCE = ["staff"]
STUDENT_AUDIENCE = ["students"]


def classify_label(label: str) -> ItemType:
    """
    Map a free-text label to an ItemType.

    Unknown labels fall through to ItemType.INFO.
    """
    lowered = label.lower()
    for needles, item_type in TYPE_RULES:
        if all(needle in lowered for needle in needles):
            return item_type
    return ItemType.INFO


def audience_for(item_type: ItemType) -> list[str]:
    if item_type == ItemType.STAFF_DAY:
        return list(STAFF_AUDIENCE)
    return list(STUDENT_AUDIENCE)
