import math
import re
from typing import List, Sequence

# ============================================================================
# TOKENIZATION LAYER
# ============================================================================

_WHITESPACE = re.compile(r"\s+")

def tokenize(text: str) -> List[str]:
    """
    Whitespace tokenization shared by every chunker.

    Returns the ordered list of non-empty whitespace-delimited tokens.
    """
    if not text:
        return []
    return [t for t in _WHITESPACE.split(text) if t]

def count_tokens(text: str) -> int:
    return len(tokenize(text))

def variance(values: Sequence[float]) -> float:
    """Population variance; 0 for an empty sequence."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)

def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for positives, matching the analysis summaries."""
    return int(math.floor(value + 0.5))

# ============================================================================
# SENTENCE SPLITTING - placeholder protection then regex split
# ============================================================================

ABBREVIATIONS = (
    "Mr", "Mrs", "Ms", "Dr", "Prof", "Rev", "Col", "Gen", "Lt", "Cmdr", "Sgt",
    "Capt", "Maj", "Sen", "Rep", "Hon", "etc", "vs", "i.e", "e.g",
)

# Private-use codepoint standing in for a protected period
_PERIOD_PLACEHOLDER = "\ue000"

_ABBREVIATION_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(a) for a in sorted(ABBREVIATIONS, key=len, reverse=True)) + r")\."
)
_INITIALISM_PATTERN = re.compile(r"\b(\w)\.(\w)\.")
_DECIMAL_PATTERN = re.compile(r"(\d)\.(\d)")
_TERMINAL_PUNCTUATION = re.compile(r"[.!?。？！]")
_SENTENCE_BOUNDARY = re.compile(
    r"(?<=[.?!。？！])\s+(?=[A-Z\"'(\[{<]|\s*$)"
)
# Also matches the end of text right after terminal punctuation
_SENTENCE_END = re.compile(
    r"(?<=[.?!。？！])(?:\s+|\Z)(?=[A-Z\"'(\[{<]|\s*$)"
)

def _protect(text: str) -> str:
    text = _ABBREVIATION_PATTERN.sub(lambda m: m.group(1) + _PERIOD_PLACEHOLDER, text)
    text = _INITIALISM_PATTERN.sub(
        lambda m: m.group(1) + _PERIOD_PLACEHOLDER + m.group(2) + _PERIOD_PLACEHOLDER, text
    )
    return _DECIMAL_PATTERN.sub(lambda m: m.group(1) + _PERIOD_PLACEHOLDER + m.group(2), text)

def _restore(text: str) -> str:
    return text.replace(_PERIOD_PLACEHOLDER, ".")

def split_sentences(paragraph: str) -> List[str]:
    """
    Abbreviation-aware sentence splitting for a single paragraph.

    Splits after `.`, `?`, `!` and their full-width forms when followed by
    whitespace. Titles (Mr., Dr., ...), initialisms (U.S.) and decimals never
    end a sentence. A paragraph without terminal punctuation is one sentence.
    """
    if not paragraph or not paragraph.strip():
        return []
    protected = _protect(paragraph)
    if not _TERMINAL_PUNCTUATION.search(protected):
        return [_restore(protected).strip()]
    sentences = [_restore(s.strip()) for s in _SENTENCE_BOUNDARY.split(protected)]
    sentences = [s for s in sentences if s]
    return sentences or [paragraph]

def count_sentence_boundaries(text: str) -> int:
    """
    Number of sentence ends in `text`: every split site plus a final
    terminal punctuation mark at the very end.
    """
    if not text:
        return 0
    return len(_SENTENCE_END.findall(_protect(text)))

# ============================================================================
# PARAGRAPH SPLITTING
# ============================================================================

_BLANK_LINE = re.compile(r"\n\s*\n")

PARAGRAPH_SEPARATORS = (
    r"\n\s*\n",            # blank line
    r"\r\n\s*\r\n",        # blank line, Windows endings
    r"\n\s*[-_*]{3,}\s*\n",  # horizontal rule
    r"\n\s*#{1,6}\s+",     # markdown header
)
_PARAGRAPH_BOUNDARY = re.compile("|".join(PARAGRAPH_SEPARATORS))

def split_paragraphs(text: str) -> List[str]:
    """
    Multi-pattern paragraph splitting (blank lines, rules, headers).
    Whitespace-only segments are dropped; no paragraphs means one paragraph.
    """
    paragraphs = [p.strip() for p in _PARAGRAPH_BOUNDARY.split(text)]
    paragraphs = [p for p in paragraphs if p]
    return paragraphs or [text]

def split_blank_line_paragraphs(text: str) -> List[str]:
    """Plain blank-line paragraph split, segments kept verbatim."""
    return [p for p in _BLANK_LINE.split(text) if p.strip()]

# ============================================================================
# CHARACTER BREAK-POINT FINDER
# ============================================================================

BREAK_PATTERNS = (
    re.compile(r"[.!?]\s+"),  # sentence end
    re.compile(r"\n\s*\n"),   # paragraph
    re.compile(r"\n"),        # line
    re.compile(r"\s+"),       # word
)

def find_break_point(text: str, target: int, chunk_size: int) -> int:
    """
    Snap a cut position back to the nearest natural boundary.

    Searches the window of `ceil(0.2 * chunk_size)` characters before
    `target`, preferring sentence > paragraph > line > word breaks, and
    returns the position just after the last match of the best kind found.
    """
    search_range = min(target, math.ceil(chunk_size * 0.2))
    min_pos = target - search_range
    window = text[min_pos:target]
    for pattern in BREAK_PATTERNS:
        last = None
        for last in pattern.finditer(window):
            pass
        if last is not None:
            return min_pos + last.end()
    return target

# ============================================================================
# CONTENT DETECTION
# ============================================================================

CODE_PATTERN = re.compile(
    r"```[\s\S]*?```|`[\s\S]*?`|\b(function|class|def|var|const|let|import|from|public|private)\b"
)
LIST_PATTERN = re.compile(r"^\s*[-*+]\s+|\b\d+\.\s+", re.MULTILINE)
HEADER_PATTERN = re.compile(r"^#+\s+", re.MULTILINE)

def has_code(text: str) -> bool:
    return CODE_PATTERN.search(text) is not None

def has_lists(text: str) -> bool:
    return LIST_PATTERN.search(text) is not None

def has_headers(text: str) -> bool:
    return HEADER_PATTERN.search(text) is not None
