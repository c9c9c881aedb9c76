"""
Spell-check post-processing for generated articles
"""
import re
from typing import List

from ..models import SpellCheckResult, SpellCorrection
from .dictionary import SpellDictionary

# Whitespace runs and punctuation become standalone tokens
TOKEN_SEPARATOR = re.compile(r'(\s+|[.,;:!?()"“”\'’])')
# A letter or digit, then letters, digits, apostrophes or hyphens
WORD_TOKEN = re.compile(r"[^\W_](?:[^\W_]|['-])*\Z")


def tokenize(text: str) -> List[str]:
    """Split text so that ''.join(tokenize(text)) == text"""
    return TOKEN_SEPARATOR.split(text)


def is_word(token: str) -> bool:
    return bool(WORD_TOKEN.match(token))


def match_case(original: str, suggestion: str) -> str:
    if original[:1].isupper() and suggestion:
        return suggestion[0].upper() + suggestion[1:]
    return suggestion


def apply_spellcheck(dictionary: SpellDictionary, text: str) -> SpellCheckResult:
    """
    Replace misspelled words with the dictionary's first suggestion
    Args:
        dictionary: Loaded spelling dictionary
        text: Article text
    Returns:
        Corrected text and the corrections in the order they were made
    """
    corrections: List[SpellCorrection] = []
    corrected_tokens = []

    for token in tokenize(text):
        if not is_word(token):
            corrected_tokens.append(token)
            continue

        lower = token.lower()
        if dictionary.correct(lower):
            corrected_tokens.append(token)
            continue

        suggestions = dictionary.suggest(lower)
        if not suggestions:
            corrected_tokens.append(token)
            continue

        corrected_word = match_case(token, suggestions[0])
        corrections.append(SpellCorrection(original=token, suggestion=corrected_word))
        corrected_tokens.append(corrected_word)

    return SpellCheckResult(corrected="".join(corrected_tokens), corrections=corrections)
