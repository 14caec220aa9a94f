"""
Heuristic classification of feedback text.

Every cue lives in a keyword/phrase table below. Patterns are compiled from
the tables, so the tables are the single source of truth:

- GENERIC_*: praise too vague to act on ("Good job", "Nice.")
- NEGATIVE_CUES: criticism, missing content, contrastive turns
- POSITIVE_CUES: praise and evidence-of-skill verbs

Negative and positive are independent axes; a text can be both.
"""

import re
from typing import Mapping


_FLAGS = re.IGNORECASE | re.ASCII

SHORT_TEXT_LIMIT = 40
TITLE_LINE_MAX = 100
HEADING_TEXT_MAX = 150

POINTS_FORMAT_RE = re.compile(r"\(\d+\s*pts?\)", re.IGNORECASE)
ALL_CAPS_RE = re.compile(r"[A-Z\s&]+")
OVERALL_SCORE_RE = re.compile(r"^OVERALL SCORE\b", re.IGNORECASE)
SECTION_START_RE = re.compile(r"^CONCEPTS\s*&", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

GENERIC_PHRASES = ("good job", "nice job", "well done", "excellent work", "great work")
GENERIC_WORDS = ("good", "nice", "well", "great", "excellent", "fine", "okay", "ok")

NEGATIVE_CUES: dict[str, tuple[str, ...]] = {
    "deficit": (
        "not", "bad", "poor", "lacks", "missing", "fails",
        "didn't", "doesn't", "inadequate", "insufficient",
    ),
    "absence": ("no clear", "no evidence", "no examples", "no support"),
    "fault": ("weak", "weakness", "problem", "issue", "error", "mistake", "incorrect", "wrong"),
    "directive": ("needs improvement", "could be better", "should be", "must be"),
    "contrast": (
        "but", "however", "although", "though", "even though",
        "despite", "nevertheless", "yet", "whereas",
    ),
}

POSITIVE_CUES: dict[str, tuple[str, ...]] = {
    "praise": (
        "good", "great", "excellent", "outstanding", "well",
        "nice", "strong", "clear", "effective", "solid",
    ),
    "evidence": ("demonstrates", "shows", "illustrates", "exemplifies", "highlights"),
    "craft": ("good use of", "well-developed", "well-written", "well-structured", "well-organized"),
    "depth": ("impressive", "thorough", "comprehensive", "detailed", "insightful", "thoughtful"),
    "achievement": ("successful", "successfully", "achieved", "accomplished", "strongly", "clearly"),
    "precision": ("appropriate", "relevant", "accurate", "precise", "convincing", "persuasive"),
    "support": ("enhances", "strengthens", "improves", "supports", "reinforces", "validates"),
}


def _alternation(terms: tuple[str, ...]) -> str:
    """Regex alternation for terms; spaces inside a phrase match any whitespace run."""
    return "|".join(r"\s+".join(re.escape(w) for w in term.split()) for term in terms)


def _word_pattern(terms: tuple[str, ...]) -> re.Pattern:
    return re.compile(rf"\b({_alternation(terms)})\b", _FLAGS)


GENERIC_PATTERNS = (
    _word_pattern(GENERIC_PHRASES),
    re.compile(rf"\b({_alternation(GENERIC_WORDS)})\s*[.!]?\s*\Z", _FLAGS),
    re.compile(rf"\A({_alternation(GENERIC_WORDS)})\s*[.!]?\s*\Z", _FLAGS),
)

_NEGATIVE_PATTERNS = {name: _word_pattern(terms) for name, terms in NEGATIVE_CUES.items()}
_POSITIVE_PATTERNS = {name: _word_pattern(terms) for name, terms in POSITIVE_CUES.items()}


# ---------------------------------------------------------------------------
# Structural predicates
# ---------------------------------------------------------------------------

def has_points_format(text: str) -> bool:
    """True if text carries a rubric score like "(10 pts)"."""
    return bool(POINTS_FORMAT_RE.search(text))


def is_all_caps(text: str, limit: int = TITLE_LINE_MAX) -> bool:
    """True if text is only capitals, whitespace and '&', and shorter than limit."""
    return bool(ALL_CAPS_RE.fullmatch(text)) and len(text) < limit


def looks_like_title(line: str) -> bool:
    """Heading test for the first line of a block."""
    return ":" in line or is_all_caps(line) or has_points_format(line)


def looks_like_heading_text(text: str) -> bool:
    """Heading test for a whole cleaned body; catches headings with no real body."""
    return (
        (":" in text and len(text) < HEADING_TEXT_MAX)
        or is_all_caps(text)
        or has_points_format(text)
    )


# ---------------------------------------------------------------------------
# Classification predicates
# ---------------------------------------------------------------------------

def matching_cues(text: str, patterns: Mapping[str, re.Pattern]) -> list[str]:
    """Names of the cue categories that match text, in table order."""
    return [name for name, pattern in patterns.items() if pattern.search(text)]


def negative_cues(text: str) -> list[str]:
    return matching_cues(text, _NEGATIVE_PATTERNS)


def positive_cues(text: str) -> list[str]:
    return matching_cues(text, _POSITIVE_PATTERNS)


def is_generic(text: str) -> bool:
    """Vague praise: a stock phrase, or a text ending in a bare praise word."""
    return any(pattern.search(text) for pattern in GENERIC_PATTERNS)


def is_short(text: str) -> bool:
    return len(text) < SHORT_TEXT_LIMIT


def is_low_info(text: str, has_body: bool = True) -> bool:
    """Low-information feedback: no body, too short, or generic."""
    return not has_body or is_short(text) or is_generic(text)


def is_negative(text: str) -> bool:
    return bool(negative_cues(text))


def is_positive(text: str) -> bool:
    return bool(positive_cues(text))
