"""Text tokenization for route matchers.

Message text is reduced to a lowercase, ASCII, dash-separated token
string so matchers don't trip over case, accents, or punctuation::

    tokenize("Can you help me?")  -> "can-you-help-me"
    tokenize("  Příliš žluťoučký ") -> "prilis-zlutoucky"
"""

import re
import unicodedata

_NON_WORD = re.compile(r"[^a-z0-9]+")


def tokenize(text: str) -> str:
    """Normalize *text* into a dash-separated token string."""
    decomposed = unicodedata.normalize("NFKD", text)
    ascii_text = decomposed.encode("ascii", "ignore").decode("ascii")
    return _NON_WORD.sub("-", ascii_text.lower()).strip("-")
