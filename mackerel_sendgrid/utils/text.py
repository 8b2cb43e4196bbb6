import re

# Words are runs of word characters; an inner apostrophe, dot or colon does not start a new word
_WORD_RE = re.compile(r"\w+(?:['’.:]\w+)*")


def title_case(text: str) -> str:
    """
    English title casing: upper-case the first letter of each word and
    lower-case the rest. Separators are kept as-is.

    >>> title_case("my sendgrid")
    'My Sendgrid'
    >>> title_case("o'reilly-MAIL")
    "O'reilly-Mail"
    """
    return _WORD_RE.sub(lambda m: m.group(0).capitalize(), text or "")
