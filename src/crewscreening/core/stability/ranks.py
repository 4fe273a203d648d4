"""Rank ladders, aliases and promotion requirements for seafarer ranks."""

from __future__ import annotations

from dataclasses import dataclass

RANK_LADDER: dict[str, dict[str, int]] = {
    "deck": {"DC": 1, "OS": 2, "AB": 3, "BSN": 4, "3/O": 5, "2/O": 6, "C/O": 7, "MASTER": 8},
    "engine": {"EC": 1, "WP": 2, "OL": 3, "MO": 4, "4/E": 5, "3/E": 6, "2/E": 7, "C/E": 8},
    "electrical": {"ETO": 1, "ELECTRO": 2},
    "catering": {"MESS": 1, "COOK": 2, "CH.COOK": 3, "STEWARD": 4, "CH.STEWARD": 5},
}

RANK_ALIASES: dict[str, str] = {
    # deck
    "master": "MASTER",
    "captain": "MASTER",
    "capt": "MASTER",
    "capt.": "MASTER",
    "chief officer": "C/O",
    "chief mate": "C/O",
    "c/m": "C/O",
    "second officer": "2/O",
    "2nd officer": "2/O",
    "2nd mate": "2/O",
    "third officer": "3/O",
    "3rd officer": "3/O",
    "3rd mate": "3/O",
    "bosun": "BSN",
    "bo'sun": "BSN",
    "boatswain": "BSN",
    "able seaman": "AB",
    "a/b": "AB",
    "able bodied seaman": "AB",
    "ordinary seaman": "OS",
    "o/s": "OS",
    "deck cadet": "DC",
    "d/c": "DC",
    # engine
    "chief engineer": "C/E",
    "second engineer": "2/E",
    "2nd engineer": "2/E",
    "third engineer": "3/E",
    "3rd engineer": "3/E",
    "fourth engineer": "4/E",
    "4th engineer": "4/E",
    "engine cadet": "EC",
    "e/c": "EC",
    "wiper": "WP",
    "oiler": "OL",
    "motorman": "MO",
    # electrical
    "eto": "ETO",
    "electro-technical officer": "ETO",
    "electrical officer": "ETO",
    "electrician": "ELECTRO",
    # catering
    "messman": "MESS",
    "cook": "COOK",
    "chief cook": "CH.COOK",
    "steward": "STEWARD",
    "chief steward": "CH.STEWARD",
}


@dataclass(frozen=True)
class RankRequirement:
    """Sea-time needed in a rank before moving to ``next_rank``."""

    department: str
    level: int
    min_sea_months_in_rank: int
    min_total_sea_months: int
    next_rank: str | None

    @property
    def is_top_rank(self) -> bool:
        return self.next_rank is None


RANK_HIERARCHY: dict[str, RankRequirement] = {
    "DC": RankRequirement("deck", 1, 12, 0, "OS"),
    "OS": RankRequirement("deck", 2, 12, 6, "AB"),
    "AB": RankRequirement("deck", 3, 18, 18, "BSN"),
    "BSN": RankRequirement("deck", 4, 24, 36, "3/O"),
    "3/O": RankRequirement("deck", 5, 12, 36, "2/O"),
    "2/O": RankRequirement("deck", 6, 18, 48, "C/O"),
    "C/O": RankRequirement("deck", 7, 36, 66, "MASTER"),
    "MASTER": RankRequirement("deck", 8, 0, 102, None),
    "EC": RankRequirement("engine", 1, 12, 0, "WP"),
    "WP": RankRequirement("engine", 2, 12, 6, "OL"),
    "OL": RankRequirement("engine", 3, 12, 18, "MO"),
    "MO": RankRequirement("engine", 4, 18, 30, "4/E"),
    "4/E": RankRequirement("engine", 5, 12, 36, "3/E"),
    "3/E": RankRequirement("engine", 6, 12, 48, "2/E"),
    "2/E": RankRequirement("engine", 7, 24, 60, "C/E"),
    "C/E": RankRequirement("engine", 8, 0, 84, None),
    "ETO": RankRequirement("electrical", 1, 36, 12, "ELECTRO"),
    "ELECTRO": RankRequirement("electrical", 2, 0, 36, None),
    "MESS": RankRequirement("catering", 1, 12, 0, "COOK"),
    "COOK": RankRequirement("catering", 2, 12, 12, "CH.COOK"),
    "CH.COOK": RankRequirement("catering", 3, 24, 24, "STEWARD"),
    "STEWARD": RankRequirement("catering", 4, 12, 12, "CH.STEWARD"),
    "CH.STEWARD": RankRequirement("catering", 5, 0, 24, None),
}


def normalize_rank(rank: str | None) -> str | None:
    """Return the canonical rank code for ``rank`` or ``None`` when unknown."""
    if not rank:
        return None
    lower = rank.strip().lower()
    if lower in RANK_ALIASES:
        return RANK_ALIASES[lower]

    upper = rank.strip().upper()
    if department_of(upper) is not None:
        return upper

    cleaned = lower.replace(".", "").replace("-", "").replace("_", "")
    return RANK_ALIASES.get(cleaned)


def department_of(canonical: str) -> str | None:
    for department, ranks in RANK_LADDER.items():
        if canonical in ranks:
            return department
    return None


def rank_level(canonical: str) -> int | None:
    department = department_of(canonical)
    if department is None:
        return None
    return RANK_LADDER[department][canonical]


__all__ = [
    "RANK_ALIASES",
    "RANK_HIERARCHY",
    "RANK_LADDER",
    "RankRequirement",
    "department_of",
    "normalize_rank",
    "rank_level",
]
