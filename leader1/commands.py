import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from leader1.config import StreamConfig
from leader1.core import lmgtfy_url, urban_dictionary_url
from leader1.stats import get_stream_stats

logger = logging.getLogger("leader1.commands")


@dataclass
class Command:
    name: str
    func: Callable[[str, str, StreamConfig], Optional[str]]
    description: str


COMMANDS: Dict[str, Command] = {}


def register_command(name: str, func: Callable, description: str):
    COMMANDS[name] = Command(name=name, func=func, description=description)


COMMAND_RE = re.compile(r"^!(\w+)(?:\s+(.*))?$", re.S)


def parse_command(text: str) -> Optional[tuple[str, str]]:
    """
    Parses a chat line of the form !name [args]
    Returns (name, args) or None.

    Supports:
      - !urban some term
      - !lmgtfy   how do i irc   (args are stripped)
      - !stats
    """
    m = COMMAND_RE.match((text or "").strip())
    if not m:
        return None
    return m.group(1).lower(), (m.group(2) or "").strip()


def dispatch(text: str, nick: str, config: StreamConfig) -> Optional[str]:
    parsed = parse_command(text)
    if parsed is None:
        return None
    name, args = parsed

    cmd = COMMANDS.get(name)
    if cmd is None:
        logger.debug("unknown command %r from %s", name, nick)
        return None

    logger.info("command %s from %s", name, nick)
    return cmd.func(nick, args, config)


# =========================
# Handlers
# =========================
def urban(nick: str, query: str, config: StreamConfig) -> str:
    return f"{nick}: Urban Dictionary says - {urban_dictionary_url(query)}"


def lmgtfy(nick: str, query: str, config: StreamConfig) -> str:
    # an empty query still gets a link, the bare search page
    return f"{nick}: Let me google that for you - {lmgtfy_url(query)}"


def stats(nick: str, args: str, config: StreamConfig) -> Optional[str]:
    if not config.stats_url:
        logger.warning("stats requested by %s but no stats URL is configured", nick)
        return None

    record, err = get_stream_stats(config)
    if err is not None:
        # already logged, a failed stats lookup is dropped silently in channel
        return None

    song = record.song_title or "nothing"
    return (
        f"{nick}: Now playing: {song} "
        f"({record.current_listeners}/{record.max_listeners} listeners)"
    )


register_command("urban", urban, "returns an Urban Dictionary link for the given term")
register_command("lmgtfy", lmgtfy, "returns a 'let me google that for you' search url for the given query")
register_command("stats", stats, "shows the current song and listener count of the stream")
