import logging
import re
from dataclasses import dataclass, fields

from lxml import etree

from leader1.config import StreamConfig
from leader1.errors import DecodeError, FetchError
from leader1.fetch import get_page, get_page_with_auth

logger = logging.getLogger("leader1.stats")

ROOT_TAG = "SHOUTCASTSERVER"


@dataclass(frozen=True)
class StatsRecord:
    current_listeners: int = 0
    peak_listeners: int = 0
    max_listeners: int = 0
    unique_listeners: int = 0
    average_time: int = 0
    server_genre: str = ""
    server_url: str = ""
    server_title: str = ""
    song_title: str = ""
    stream_hits: int = 0
    stream_status: int = 0
    backup_status: int = 0
    stream_path: str = ""
    stream_uptime: int = 0
    bitrate: int = 0
    content: str = ""
    version: str = ""


# XML tag -> field name, exact and case-sensitive
TAGS: dict[str, str] = {
    "CURRENTLISTENERS": "current_listeners",
    "PEAKLISTENERS": "peak_listeners",
    "MAXLISTENERS": "max_listeners",
    "UNIQUELISTENERS": "unique_listeners",
    "AVERAGETIME": "average_time",
    "SERVERGENRE": "server_genre",
    "SERVERURL": "server_url",
    "SERVERTITLE": "server_title",
    "SONGTITLE": "song_title",
    "STREAMHITS": "stream_hits",
    "STREAMSTATUS": "stream_status",
    "BACKUPSTATUS": "backup_status",
    "STREAMPATH": "stream_path",
    "STREAMUPTIME": "stream_uptime",
    "BITRATE": "bitrate",
    "CONTENT": "content",
    "VERSION": "version",
}

_FIELD_TYPES = {f.name: f.type for f in fields(StatsRecord)}

# ASCII digits only, no underscores
_INT_RE = re.compile(r"[+-]?[0-9]+")


def _parser() -> etree.XMLParser:
    # the text is already decoded; ignore whatever encoding the declaration claims
    return etree.XMLParser(resolve_entities=False, no_network=True, encoding="utf-8")


def _char_data(el) -> str:
    # Only the element's own text, child elements are skipped
    parts = [el.text or ""]
    parts.extend(child.tail or "" for child in el)
    return "".join(parts)


def decode_stats(text: str) -> StatsRecord:
    """
    Decode a SHOUTcast server status document.

    Direct children of the root are matched against TAGS; anything else is
    ignored and missing tags keep their zero value. A repeated tag keeps
    the last value seen.
    """
    try:
        root = etree.fromstring((text or "").strip().encode("utf-8"), parser=_parser())
    except (etree.XMLSyntaxError, ValueError) as e:
        raise DecodeError(f"malformed stats XML: {e}") from e

    values = {}
    for el in root:
        if not isinstance(el.tag, str):
            # comments and processing instructions
            continue
        name = TAGS.get(el.tag)
        if name is None:
            continue
        raw = _char_data(el)
        if _FIELD_TYPES[name] is int:
            raw = raw.strip()
            if not raw:
                values[name] = 0
                continue
            if not _INT_RE.fullmatch(raw):
                raise DecodeError(f"bad integer in <{el.tag}>: {raw!r}")
            values[name] = int(raw)
        else:
            values[name] = raw

    return StatsRecord(**values)


def encode_stats(stats: StatsRecord) -> str:
    root = etree.Element(ROOT_TAG)
    for tag, name in TAGS.items():
        etree.SubElement(root, tag).text = str(getattr(stats, name))
    return etree.tostring(root, encoding="unicode")


def get_stream_stats(config: StreamConfig, *, log: logging.Logger | None = None):
    """
    Fetch the configured stats page and decode it.
    Returns (StatsRecord, None) on success or (StatsRecord(), error) on failure.
    """
    log = log or logger

    try:
        if config.has_auth:
            res = get_page_with_auth(
                config.stats_url, config.stats_user, config.stats_pass,
                timeout=config.http_timeout, log=log,
            )
        else:
            res = get_page(config.stats_url, timeout=config.http_timeout, log=log)
    except FetchError as e:
        log.error("Couldn't load page - %s", e)
        return StatsRecord(), e

    try:
        stats = decode_stats(res)
    except DecodeError as e:
        log.error("Couldn't parse stats - %s", e)
        return StatsRecord(), e

    return stats, None
