import os
from dataclasses import dataclass

DEFAULT_HTTP_TIMEOUT = 2.0


def _timeout_from_env(raw: str | None) -> float:
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT


@dataclass(frozen=True)
class StreamConfig:
    stats_url: str = ""
    stats_user: str = ""
    stats_pass: str = ""
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @property
    def has_auth(self) -> bool:
        return bool(self.stats_user) and bool(self.stats_pass)

    @classmethod
    def from_env(cls) -> "StreamConfig":
        """
        Build from the LEADER1_* environment variables:
          LEADER1_STATS_URL, LEADER1_STATS_USER, LEADER1_STATS_PASS,
          LEADER1_HTTP_TIMEOUT (seconds, used for connect and read alike)
        Call load_dotenv() first if a .env file should be honoured.
        """
        return cls(
            stats_url=os.getenv("LEADER1_STATS_URL", ""),
            stats_user=os.getenv("LEADER1_STATS_USER", ""),
            stats_pass=os.getenv("LEADER1_STATS_PASS", ""),
            http_timeout=_timeout_from_env(os.getenv("LEADER1_HTTP_TIMEOUT")),
        )
