"""Readability metrics over operation summaries and descriptions.

Each operation's description and summary are joined into one text. The
per-operation figures are averaged over all operations:

- sentences and characters per hundred words
- words per sentence, characters per word
- Coleman-Liau index:
  0.0588 * chars_per_100_words - 0.296 * sentences_per_100_words - 15.8
- Automated readability index:
  4.71 * chars_per_word + 0.5 * words_per_sentence - 21.43
"""

import re

from pydantic import BaseModel

from api_schema_metrics.parser.openapi import iter_operations

SENTENCE_SPLIT = re.compile(r"[.!?]+")


class DocumentationMetrics(BaseModel):
    """Readability figures for one document.

    ``described_endpoints`` lists operations as ``"GET /path"`` labels, not
    the method followed by the description text itself.
    """

    endpoints_desc_coverage: float = 0.0
    described_endpoints: list[str] = []
    descriptions_sizes: list[int] = []
    average_mean_sentence_count_per_hundred_words: float = 0.0
    average_mean_character_count_per_hundred_words: float = 0.0
    coleman_liau_index: float = 0.0
    average_word_per_sentence: float = 0.0
    average_character_per_word: float = 0.0
    automated_readability_index: float = 0.0


def calculate_documentation_metrics(doc: dict) -> DocumentationMetrics:
    """Score how well the document's operations are described."""
    operations = list(iter_operations(doc))
    if not operations:
        return DocumentationMetrics()

    described: list[str] = []
    sizes: list[int] = []
    sentences_per_100: list[float] = []
    chars_per_100: list[float] = []
    words_per_sentence: list[float] = []
    chars_per_word: list[float] = []

    for op in operations:
        parts = [text for text in (op.description, op.summary) if text]
        text = " ".join(parts)
        if text:
            described.append(f"{op.method.upper()} {op.path}")
        sizes.append(sum(len(part.split(" ")) for part in parts))

        # split() always yields at least one piece, so neither count is zero
        sentence_count = len(SENTENCE_SPLIT.split(text))
        word_count = len(text.split(" "))
        char_count = len(text)

        sentences_per_100.append(sentence_count / word_count * 100)
        chars_per_100.append(char_count / word_count * 100)
        words_per_sentence.append(word_count / sentence_count)
        chars_per_word.append(char_count / word_count)

    total = len(operations)
    avg_sentences = sum(sentences_per_100) / total
    avg_chars = sum(chars_per_100) / total
    avg_wps = sum(words_per_sentence) / total
    avg_cpw = sum(chars_per_word) / total

    return DocumentationMetrics(
        endpoints_desc_coverage=len(described) / total,
        described_endpoints=described,
        descriptions_sizes=sizes,
        average_mean_sentence_count_per_hundred_words=avg_sentences,
        average_mean_character_count_per_hundred_words=avg_chars,
        coleman_liau_index=0.0588 * avg_chars - 0.296 * avg_sentences - 15.8,
        average_word_per_sentence=avg_wps,
        average_character_per_word=avg_cpw,
        automated_readability_index=4.71 * avg_cpw + 0.5 * avg_wps - 21.43,
    )
