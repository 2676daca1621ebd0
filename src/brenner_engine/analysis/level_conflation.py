"""
Level conflation detection.

Flags phrasing that confuses the program with the interpreter, such as
"the gene tells the cell to..." (anthropomorphizing) or "the organism
decides to..." (agency confusion).
"""

import re

LEVEL_CONFLATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"the gene (?:tells?|instructs?|commands?|makes?)", re.IGNORECASE),
    re.compile(r"the (?:organism|cell|protein) (?:decides?|chooses?|wants?)", re.IGNORECASE),
    re.compile(r"(?:dna|rna|gene) (?:knows?|remembers?|learns?)", re.IGNORECASE),
    re.compile(r"(?:it|this) (?:wants to|tries to|needs to)", re.IGNORECASE),
)


def detect_level_conflation(text: str) -> list[str]:
    """
    Find level-conflation red flags in ``text``.

    Returns the first match of each pattern, in pattern order (not in the
    order the phrases appear in the text).
    """
    matches: list[str] = []
    for pattern in LEVEL_CONFLATION_PATTERNS:
        match = pattern.search(text)
        if match:
            matches.append(match.group(0))
    return matches
