"""Profanity checks for user-supplied word lists."""

from typing import Iterable, List

from better_profanity import profanity

# Words the stock list flags that are fine in a spelling game for children
ALLOWED_WORDS = ['hell', 'hells', 'ass', 'tit', 'sadist', 'god']

_loaded = False


def _filter():
    global _loaded
    if not _loaded:
        profanity.load_censor_words(whitelist_words=ALLOWED_WORDS)
        _loaded = True
    return profanity


def contains_inappropriate_content(text: str) -> bool:
    if not text:
        return False
    return _filter().contains_profanity(text)


def find_inappropriate_words(words: Iterable[str]) -> List[str]:
    return [w for w in words if contains_inappropriate_content(w.lower())]


def clean_text(text: str) -> str:
    return _filter().censor(text)
