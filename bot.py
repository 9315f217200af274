import argparse
import logging
import sys
from dataclasses import replace

from dotenv import load_dotenv

from leader1.commands import COMMANDS, dispatch
from leader1.config import StreamConfig
from leader1.core import extract_url
from leader1.errors import NoLinkFound
from leader1.logging_utils import setup_logging

logger = logging.getLogger("leader1.bot")


def handle_line(line: str, nick: str, config: StreamConfig) -> str | None:
    reply = dispatch(line, nick, config)
    if reply is not None:
        return reply

    try:
        url = extract_url(line)
    except NoLinkFound:
        return None
    logger.info("link from %s: %s", nick, url)
    return None


def run(nick: str, config: StreamConfig):
    """
    Console stand-in for a channel: every stdin line is a message from nick,
    replies are printed as the bot would say them.
    """
    logger.info("commands: %s", ", ".join(sorted(COMMANDS)))
    for line in sys.stdin:
        line = line.rstrip("\n")
        if not line.strip():
            continue
        reply = handle_line(line, nick, config)
        if reply:
            print(reply, flush=True)


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Leader-1 command console")
    parser.add_argument("--nick", default="console", help="Nick the lines are sent as")
    parser.add_argument("--log-level", help="DEBUG|INFO|WARNING|ERROR")
    parser.add_argument("--stats-url", help="Override LEADER1_STATS_URL")
    args = parser.parse_args()
    setup_logging(args.log_level)

    config = StreamConfig.from_env()
    if args.stats_url:
        config = replace(config, stats_url=args.stats_url)

    try:
        run(args.nick, config)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)


if __name__ == "__main__":
    main()
