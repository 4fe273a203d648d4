"""Map free-form rank strings to the role scopes used for question filtering."""

from __future__ import annotations

ROLE_SCOPES = frozenset(
    {"MASTER", "CHIEF_MATE", "OOW", "AB", "CHIEF_ENG", "2ND_ENG", "OILER", "ETO", "COOK", "ALL"}
)

CANONICAL_TO_SCOPE: dict[str, str] = {
    "MASTER": "MASTER",
    "C/O": "CHIEF_MATE",
    "2/O": "OOW",
    "3/O": "OOW",
    "BSN": "AB",
    "AB": "AB",
    "OS": "AB",
    "DC": "AB",
    "C/E": "CHIEF_ENG",
    "2/E": "2ND_ENG",
    "3/E": "2ND_ENG",
    "4/E": "2ND_ENG",
    "MO": "OILER",
    "OL": "OILER",
    "WP": "OILER",
    "EC": "OILER",
    "ETO": "ETO",
    "ELECTRO": "ETO",
    "CH.COOK": "COOK",
    "COOK": "COOK",
    "CH.STEWARD": "COOK",
    "STEWARD": "COOK",
    "MESS": "COOK",
}

ALIAS_TO_SCOPE: dict[str, str] = {
    "master": "MASTER",
    "captain": "MASTER",
    "capt": "MASTER",
    "capt.": "MASTER",
    "chief officer": "CHIEF_MATE",
    "chief mate": "CHIEF_MATE",
    "c/m": "CHIEF_MATE",
    "second officer": "OOW",
    "2nd officer": "OOW",
    "second mate": "OOW",
    "2nd mate": "OOW",
    "third officer": "OOW",
    "3rd officer": "OOW",
    "third mate": "OOW",
    "3rd mate": "OOW",
    "officer of the watch": "OOW",
    "bosun": "AB",
    "boatswain": "AB",
    "able seaman": "AB",
    "able bodied seaman": "AB",
    "a/b": "AB",
    "ordinary seaman": "AB",
    "o/s": "AB",
    "deck cadet": "AB",
    "chief engineer": "CHIEF_ENG",
    "chief eng": "CHIEF_ENG",
    "second engineer": "2ND_ENG",
    "2nd engineer": "2ND_ENG",
    "third engineer": "2ND_ENG",
    "3rd engineer": "2ND_ENG",
    "fourth engineer": "2ND_ENG",
    "4th engineer": "2ND_ENG",
    "motorman": "OILER",
    "oiler": "OILER",
    "wiper": "OILER",
    "engine cadet": "OILER",
    "electro-technical officer": "ETO",
    "electrical officer": "ETO",
    "electrician": "ETO",
    "chief cook": "COOK",
    "cook": "COOK",
    "chief steward": "COOK",
    "steward": "COOK",
    "messman": "COOK",
}


class RankToRoleScopeMapper:
    """Resolve a rank or position code to a role scope.

    Every input maps to a scope. Anything unrecognized maps to ``ALL`` so it
    only ever receives generic questions.
    """

    fallback = "ALL"

    def map(self, rank: str | None) -> str:
        if not rank:
            return self.fallback
        stripped = rank.strip()
        upper = stripped.upper()
        if upper in CANONICAL_TO_SCOPE:
            return CANONICAL_TO_SCOPE[upper]

        lower = stripped.lower()
        if lower in ALIAS_TO_SCOPE:
            return ALIAS_TO_SCOPE[lower]

        spaced = " ".join(lower.replace("_", " ").replace("-", " ").split())
        if spaced in ALIAS_TO_SCOPE:
            return ALIAS_TO_SCOPE[spaced]

        if upper in ROLE_SCOPES:
            return upper
        return self.fallback


__all__ = ["ALIAS_TO_SCOPE", "CANONICAL_TO_SCOPE", "ROLE_SCOPES", "RankToRoleScopeMapper"]
