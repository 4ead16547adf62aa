"""
Batch Code Normalizer & Voting

Canonicalizes noisy batch tokens into the "LETTERS DIGITS" shape and picks
the best batch code by weighted votes across all sources.
"""

import re
from collections import Counter
from typing import Iterable, List, Optional


BATCH_SHAPE = re.compile(r"^[A-Z]{2,5} \d{4,6}$")

BATCH_KEYWORD = re.compile(r"\b(?:(?:Batch(?:\s*No\.?)?|Lot|LOT|BNo|BN|BATCH)\b|B\.?\s*No\b)", re.IGNORECASE)

# Any LETTERS DIGITS run worth normalizing
CANDIDATE_PATTERN = re.compile(r"([A-Z]{2,6}\s*[- ]?\s*\d{4,7})")

_NON_CODE_CHARS = re.compile(r"[^A-Z0-9 ]+")
_SPACES = re.compile(r"\s+")
_LETTER_CONFUSIONS = [
    (re.compile(r"(?<=[A-Z])0(?=[A-Z])"), "O"),
    (re.compile(r"(?<=[A-Z])1(?=[A-Z])"), "I"),
    (re.compile(r"(?<=[A-Z])5(?=[A-Z])"), "S"),
]
# Stray L between B and SL: FBLSL -> FBSL
_BSL_LIGATURE = re.compile(r"\b([A-Z]*B)L(?=SL\b)")
_CODE = re.compile(r"\b([A-Z]{2,5})\s*[- ]?\s*(\d{4,6})\b")

# Vote weights
KEYWORD_VOTE = 2
SWEEP_VOTE = 1
GUESS_VOTE = 1


def normalize_batch_token(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a raw batch token.

    Args:
        raw: Token as read by OCR or a model

    Returns:
        "LETTERS DIGITS" (2-5 letters, 4-6 digits), or None if the repaired
        token does not have that shape
    """
    if not raw:
        return None
    s = _NON_CODE_CHARS.sub(" ", str(raw).upper())
    s = _SPACES.sub(" ", s).strip()
    for pattern, letter in _LETTER_CONFUSIONS:
        s = pattern.sub(letter, s)
    s = _BSL_LIGATURE.sub(r"\1", s, count=1)

    m = _CODE.search(s)
    if not m:
        return None
    return f"{m.group(1)} {m.group(2)}"


def finalize_batch(raw: Optional[str]) -> Optional[str]:
    """Normalize and enforce the final batch shape."""
    token = normalize_batch_token(raw)
    if token and BATCH_SHAPE.match(token):
        return token
    return None


def find_candidates(text: str) -> List[str]:
    """All LETTERS DIGITS runs in a text, in order of appearance."""
    return [m.group(1).strip() for m in CANDIDATE_PATTERN.finditer(str(text or "").upper())]


def extract_batch_candidates(lines: List[str]) -> List[str]:
    """
    Collect candidate codes from batch keyword lines and the line after each.

    Returns:
        Distinct raw candidates, in order of appearance
    """
    around: List[str] = []
    for i, line in enumerate(lines):
        if BATCH_KEYWORD.search(line):
            around.append(line)
            if i + 1 < len(lines):
                around.append(lines[i + 1])

    seen = {}
    for line in around:
        for candidate in find_candidates(line):
            seen.setdefault(candidate, None)
    return list(seen)


def tally_batch_votes(
    ocr_texts: Iterable[str] = (),
    hint_lines: Iterable[str] = (),
    guesses: Iterable[Optional[str]] = ()
) -> Counter:
    """
    Tally normalized batch candidates from the three vote pools.

    Candidates that fail normalization do not vote.
    """
    votes: Counter = Counter()

    for candidate in extract_batch_candidates(list(hint_lines)):
        token = normalize_batch_token(candidate)
        if token:
            votes[token] += KEYWORD_VOTE

    for blob in ocr_texts:
        for candidate in find_candidates(blob):
            token = normalize_batch_token(candidate)
            if token:
                votes[token] += SWEEP_VOTE

    for guess in guesses:
        token = normalize_batch_token(guess)
        if token:
            votes[token] += GUESS_VOTE

    return votes


def pick_winner(votes: Counter) -> Optional[str]:
    """Highest score wins; ties go to the shortest, then lexically first token."""
    if not votes:
        return None
    return min(votes.items(), key=lambda item: (-item[1], len(item[0]), item[0]))[0]


def pick_best_batch(
    ocr_texts: Iterable[str] = (),
    hint_lines: Iterable[str] = (),
    model_batch: Optional[str] = None,
    regex_batch: Optional[str] = None
) -> Optional[str]:
    """
    Pick the batch code by weighted voting.

    Args:
        ocr_texts: Raw OCR text of each image (weight 1 per occurrence)
        hint_lines: All OCR lines; batch keyword neighborhoods weigh 2
        model_batch: Batch code guessed by the model (weight 1)
        regex_batch: Batch code found by the regex fallback (weight 1)

    Returns:
        Winning normalized batch code, or None
    """
    votes = tally_batch_votes(ocr_texts, hint_lines, [model_batch, regex_batch])
    return pick_winner(votes)
