"""
Spelling dictionary resource
Loaded once per process and shared by every request
"""
import asyncio
import logging
from functools import lru_cache
from typing import Callable, Generic, List, Optional, Protocol, Tuple, TypeVar

from spellchecker import SpellChecker

from ..config import DICTIONARY_LANGUAGE, WORD_CACHE_SIZE

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SpellDictionary(Protocol):
    def correct(self, word: str) -> bool: ...

    def suggest(self, word: str) -> List[str]: ...


class WordFrequencyDictionary:
    """
    SpellDictionary backed by a pyspellchecker word-frequency list.
    Suggestions are ordered by corpus frequency, most common first,
    ties broken alphabetically.
    """

    def __init__(self, checker: SpellChecker, cache_size: int = WORD_CACHE_SIZE):
        self._checker = checker
        # Edit-distance search is slow; articles repeat words
        self._known = lru_cache(maxsize=cache_size)(self._lookup_known)
        self._suggestions = lru_cache(maxsize=cache_size)(self._lookup_suggestions)

    def correct(self, word: str) -> bool:
        return self._known(word)

    def suggest(self, word: str) -> List[str]:
        return list(self._suggestions(word))

    def _lookup_known(self, word: str) -> bool:
        return bool(self._checker.known([word]))

    def _lookup_suggestions(self, word: str) -> Tuple[str, ...]:
        candidates = set(self._checker.candidates(word) or ())
        # pyspellchecker echoes words it refuses to check (numbers, very long tokens)
        candidates.discard(word)
        return tuple(sorted(candidates, key=lambda candidate: (-self._checker[candidate], candidate)))


def load_dictionary(language: str = DICTIONARY_LANGUAGE) -> WordFrequencyDictionary:
    """Blocking load of the bundled word list"""
    logger.info(f"Loading spelling dictionary: {language}")
    return WordFrequencyDictionary(SpellChecker(language=language))


class SharedResource(Generic[T]):
    """
    Lazily built, process-wide value.

    The first caller starts a single construction task; callers arriving while
    it is in flight await that same task. The built value is cached for the
    lifetime of the process. A failed construction is not cached.
    """

    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._value: Optional[T] = None
        self._pending: Optional[asyncio.Future] = None

    @property
    def loaded(self) -> bool:
        return self._value is not None

    async def get(self) -> T:
        if self._value is not None:
            return self._value
        if self._pending is None:
            self._pending = asyncio.ensure_future(asyncio.to_thread(self._factory))
        pending = self._pending
        try:
            value = await asyncio.shield(pending)
        except Exception:
            if self._pending is pending:
                self._pending = None
            raise
        self._value = value
        self._pending = None
        return value


shared_dictionary: SharedResource[SpellDictionary] = SharedResource(load_dictionary)
