"""
Lexical relatedness detection and summary merging for video summaries.

Decides whether independently generated summaries discuss a shared topic
using a Jaccard coefficient over distinct keywords, and merges related
summaries into a single Markdown document with deduplicated key points.

All functions are pure: no I/O, no shared state, no randomness.
"""

import re
import logging
from collections import Counter
from typing import List, Dict, Any, Optional, Iterable, Sequence

logger = logging.getLogger(__name__)

DEFAULT_RELATEDNESS_THRESHOLD = 0.15
DEFAULT_LANGUAGE = "en"

ENGLISH_STOP_WORDS = frozenset([
    "a", "an", "the", "and", "or", "but", "is", "are", "was", "were",
    "be", "been", "being", "in", "on", "at", "to", "for", "with", "by",
    "about", "against", "between", "into", "through", "during", "before",
    "after", "above", "below", "from", "up", "down", "of", "off", "over",
    "under", "again", "further", "then", "once", "here", "there", "when",
    "where", "why", "how", "all", "any", "both", "each", "few", "more",
    "most", "other", "some", "such", "no", "nor", "not", "only", "own",
    "same", "so", "than", "too", "very", "s", "t", "can", "will", "just",
    "don", "should", "now", "this", "that",
])

MERGED_TITLE = "Combined Summary of Related Videos"
DEFAULT_OVERVIEW = "These videos discuss related topics."
DEFAULT_CONCLUSION = (
    "These videos cover related content and should be considered together "
    "for a comprehensive understanding of the topic."
)

_NON_WORD_RE = re.compile(r"[^\w\s]")
_OVERVIEW_RE = re.compile(r"(?:^|\n\n)(.*?)(?:\n\n|\Z)")
_BULLET_RE = re.compile(r"^[ \t]*(\* .*)$", re.MULTILINE)
_PREFIX_WORDS = 5


def extract_keywords(text: str, stop_words: Optional[Iterable[str]] = None) -> List[str]:
    """
    Normalize text into a list of keywords.

    Lowercases, drops everything that is not a word character or whitespace,
    splits on whitespace and filters out short tokens and stop words.

    :param text: Free text to tokenize
    :param stop_words: Stop words to drop; English defaults when None
    :return: Keywords in document order (duplicates kept)
    """
    if not text:
        return []
    stop_words = ENGLISH_STOP_WORDS if stop_words is None else stop_words
    clean = _NON_WORD_RE.sub("", text.lower())
    return [word for word in clean.split() if len(word) > 2 and word not in stop_words]


def calculate_term_frequency(keywords: Iterable[str]) -> Dict[str, int]:
    """Count occurrences of each keyword."""
    return dict(Counter(keywords))


def calculate_similarity(text1: str, text2: str,
                         stop_words: Optional[Iterable[str]] = None) -> float:
    """
    Jaccard coefficient over the distinct keywords of two texts.

    Term frequencies are built but only key presence counts towards the
    score. Returns 0.0 when neither text yields a keyword.
    """
    tf1 = calculate_term_frequency(extract_keywords(text1, stop_words))
    tf2 = calculate_term_frequency(extract_keywords(text2, stop_words))

    all_terms = tf1.keys() | tf2.keys()
    if not all_terms:
        return 0.0

    common_terms = len(tf1.keys() & tf2.keys())
    return common_terms / len(all_terms)


def are_related(summaries: Sequence[str], threshold: float = DEFAULT_RELATEDNESS_THRESHOLD,
                stop_words: Optional[Iterable[str]] = None) -> bool:
    """
    Check whether any pair of summaries reaches the similarity threshold.

    :param summaries: Per-video summaries of one batch
    :param threshold: Minimum pairwise similarity counted as related
    :param stop_words: Stop words used for keyword extraction
    :return: True on the first pair scoring at or above threshold
    """
    if len(summaries) <= 1:
        return False

    for i in range(len(summaries) - 1):
        for j in range(i + 1, len(summaries)):
            similarity = calculate_similarity(summaries[i], summaries[j], stop_words)
            if similarity >= threshold:
                logger.debug(f"Summaries {i} and {j} related (similarity={similarity:.3f})")
                return True

    return False


def _first_words(point: str) -> str:
    return " ".join(point.split(" ")[:_PREFIX_WORDS]).lower()


def _longest(fragments: List[str]) -> str:
    # sorted() is stable, so equal lengths keep collection order
    return sorted(fragments, key=len, reverse=True)[0]


def extract_overview(summary: str) -> Optional[str]:
    """Return the first paragraph of a summary, or None if it is empty."""
    match = _OVERVIEW_RE.search(summary)
    if match and match.group(1):
        return match.group(1)
    return None


def extract_bullet_points(summary: str) -> List[str]:
    """Return every `* ` bullet line of a summary, marker included."""
    return [point.strip() for point in _BULLET_RE.findall(summary)]


def extract_conclusion(summary: str) -> Optional[str]:
    """Return the first non-bullet paragraph longer than 10 chars among the last two."""
    paragraphs = summary.split("\n\n")
    for para in paragraphs[-2:]:
        if not para.strip().startswith("*") and len(para) > 10:
            return para
    return None


def deduplicate_points(points: Iterable[str]) -> List[str]:
    """
    Drop bullet points whose five-word prefix overlaps an accepted one.

    Two prefixes overlap when either contains the other as a substring.
    Accepted points keep their original order.
    """
    unique_points: List[str] = []
    for point in points:
        first_words = _first_words(point)
        is_duplicate = False
        for existing_point in unique_points:
            existing_first_words = _first_words(existing_point)
            if existing_first_words in first_words or first_words in existing_first_words:
                is_duplicate = True
                break
        if not is_duplicate:
            unique_points.append(point)
    return unique_points


def merge_summaries(summaries: Sequence[str], titles: Sequence[str]) -> str:
    """
    Merge related summaries into one Markdown document.

    :param summaries: Markdown summaries, one per video
    :param titles: Video titles, index-aligned with summaries
    :return: Combined Markdown document
    :raises ValueError: If summaries and titles differ in length
    """
    if len(summaries) != len(titles):
        raise ValueError(
            f"summaries and titles must have the same length "
            f"(got {len(summaries)} summaries and {len(titles)} titles)"
        )

    all_points: List[str] = []
    all_overviews: List[str] = []
    all_conclusions: List[str] = []

    for summary in summaries:
        overview = extract_overview(summary)
        if overview:
            all_overviews.append(overview)

        all_points.extend(extract_bullet_points(summary))

        conclusion = extract_conclusion(summary)
        if conclusion:
            all_conclusions.append(conclusion)

    parts = [f"# {MERGED_TITLE}\n\n"]

    parts.append("## Videos Analyzed\n\n")
    for index, title in enumerate(titles, 1):
        parts.append(f"{index}. {title}\n")

    parts.append("\n## Overview\n\n")
    overview = _longest(all_overviews) if all_overviews else DEFAULT_OVERVIEW
    parts.append(f"{overview}\n\n")

    parts.append("## Key Points From All Videos\n\n")
    for point in deduplicate_points(all_points):
        parts.append(f"{point}\n")

    parts.append("\n## Overall Conclusion\n\n")
    conclusion = _longest(all_conclusions) if all_conclusions else DEFAULT_CONCLUSION
    parts.append(f"{conclusion}\n")

    logger.debug(
        f"Merged {len(summaries)} summaries: {len(all_overviews)} overviews, "
        f"{len(all_points)} points, {len(all_conclusions)} conclusions"
    )
    return "".join(parts)


class ContentAnalyzer:
    """
    Configured front for the relatedness and merge functions.

    Holds the relatedness threshold and per-language stop-word lists so
    callers can override them per deployment or per call.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize analyzer with configuration.

        :param config: Configuration dictionary; expected keys:
            - relatedness_threshold (float)
            - stop_words (dict of language code -> list of words)
        """
        self.config = config or {}
        self.threshold = float(self.config.get("relatedness_threshold", DEFAULT_RELATEDNESS_THRESHOLD))

        self.stop_words: Dict[str, frozenset] = {DEFAULT_LANGUAGE: ENGLISH_STOP_WORDS}
        for language, words in (self.config.get("stop_words") or {}).items():
            self.stop_words[language] = frozenset(w.lower() for w in words)

        logger.info(f"ContentAnalyzer initialized with threshold: {self.threshold}")
        logger.info(f"Stop-word languages: {sorted(self.stop_words)}")

    def get_stop_words(self, language: str = DEFAULT_LANGUAGE) -> frozenset:
        """Stop words for a language, English when no list is configured."""
        if language in self.stop_words:
            return self.stop_words[language]
        logger.debug(f"No stop words configured for '{language}', using English defaults")
        return self.stop_words[DEFAULT_LANGUAGE]

    def similarity(self, text1: str, text2: str, language: str = DEFAULT_LANGUAGE) -> float:
        return calculate_similarity(text1, text2, self.get_stop_words(language))

    def relatedness(self, summaries: Sequence[str], threshold: Optional[float] = None,
                    language: str = DEFAULT_LANGUAGE) -> bool:
        threshold = self.threshold if threshold is None else threshold
        return are_related(summaries, threshold, self.get_stop_words(language))

    def pairwise_similarities(self, summaries: Sequence[str],
                              language: str = DEFAULT_LANGUAGE) -> List[List[float]]:
        """Full symmetric similarity matrix, 1.0 on the diagonal."""
        stop_words = self.get_stop_words(language)
        n = len(summaries)
        matrix = [[1.0 if i == j else 0.0 for j in range(n)] for i in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                score = calculate_similarity(summaries[i], summaries[j], stop_words)
                matrix[i][j] = matrix[j][i] = score
        return matrix

    def merge(self, summaries: Sequence[str], titles: Sequence[str]) -> str:
        return merge_summaries(summaries, titles)
