from urllib.parse import quote, quote_plus

from leader1.errors import NoLinkFound

URBAN_DICTIONARY_BASE = "http://www.urbandictionary.com/define.php?term="
LMGTFY_BASE = "http://lmgtfy.com/?q="


def extract_url(text: str) -> str:
    """
    Return the first http:// (or, failing that, https://) token in text.

    The token runs up to the next space. It has to be longer than 9 chars
    and must not be a bare scheme, otherwise NoLinkFound is raised.
    Trailing punctuation is kept as-is.
    """
    text = text or ""
    start = text.find("http://")
    if start == -1:
        start = text.find("https://")
    if start == -1:
        raise NoLinkFound("No URL found")

    url = text[start:].split(" ", 1)[0]
    if len(url) > 9 and not url.endswith("://"):
        return url
    raise NoLinkFound("No URL found")


def urban_dictionary_url(query: str) -> str:
    # form-style escaping: spaces become '+'
    return URBAN_DICTIONARY_BASE + quote_plus(query, safe="")


def lmgtfy_url(query: str) -> str:
    # encodeURIComponent keeps !~*'() unescaped and spaces become %20
    return LMGTFY_BASE + quote(query, safe="!~*'()")
