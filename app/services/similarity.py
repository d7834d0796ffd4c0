"""Edit-distance scoring of a transcript against a target word"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from app.core.models import SimilarityResult


def round_half_up(value: float, places: int = 2) -> float:
    """
    Round to a fixed number of decimal places, halves away from zero.

    Goes through the decimal repr of the float so that 0.125 becomes 0.13
    rather than following binary round-half-even.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def levenshtein_distance(a: str, b: str) -> int:
    """
    Minimum number of single-character insertions, deletions and substitutions
    turning `a` into `b`.

    Cell [i][j] holds the distance between the first i characters of `a` and
    the first j characters of `b`.
    """
    rows = len(a) + 1
    cols = len(b) + 1
    table = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            if a[i - 1] == b[j - 1]:
                table[i][j] = table[i - 1][j - 1]
            else:
                table[i][j] = 1 + min(
                    table[i - 1][j - 1],  # substitution
                    table[i][j - 1],      # insertion
                    table[i - 1][j],      # deletion
                )

    return table[len(a)][len(b)]


def calculate_proximity_score(transcript: Optional[str], target_word: Optional[str]) -> SimilarityResult:
    """
    Score how close a transcript is to the target word.

    Comparison is whole string to whole string after trimming and lower-casing.
    Empty input on either side scores zero.

    Returns:
        SimilarityResult with percentages rounded half-up to 2 decimals
    """
    if not transcript or not target_word:
        return SimilarityResult(final_score=0.0, exact_match=False, levenshtein_similarity=0.0)

    transcript_norm = transcript.strip().lower()
    target_norm = target_word.strip().lower()

    exact_match = transcript_norm == target_norm

    distance = levenshtein_distance(transcript_norm, target_norm)
    max_len = max(len(transcript_norm), len(target_norm))
    lev_score = (1 - distance / max_len) * 100 if max_len > 0 else 0.0

    # Only signal for now; the separate field keeps room for a weighted blend.
    final_score = lev_score

    return SimilarityResult(
        final_score=round_half_up(final_score),
        exact_match=exact_match,
        levenshtein_similarity=round_half_up(lev_score),
    )
