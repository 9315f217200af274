import logging
import time
from dataclasses import dataclass
from typing import Optional

import requests

from leader1.errors import BodyReadError, RequestBuildError, TransportError

logger = logging.getLogger("leader1.fetch")

USER_AGENT = "Mozilla/5.0 Leader-1/Mighty, Mighty GoBot"
CONNECT_TIMEOUT = 2.0
RW_TIMEOUT = 2.0

# Small reads keep the deadline check close to the wire when a server trickles.
# The underlying socket is still buffered, so this is not one recv per byte.
READ_CHUNK = 1


@dataclass(frozen=True)
class FetchRequest:
    url: str
    auth: Optional[tuple[str, str]] = None
    user_agent: str = USER_AGENT
    connect_timeout: float = CONNECT_TIMEOUT
    rw_timeout: float = RW_TIMEOUT


def declared_charset(content_type: str | None) -> str | None:
    """charset parameter of a Content-Type header, only if the server sent one"""
    for param in (content_type or "").split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            return value.strip().strip("'\"") or None
    return None


def decode_body(body: bytes, content_type: str | None) -> str:
    charset = declared_charset(content_type) or "utf-8"
    try:
        return body.decode(charset, errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")


def fetch(req: FetchRequest, *, log: logging.Logger | None = None) -> str:
    """
    Perform exactly one GET and return the whole body as text.

    rw_timeout bounds each socket wait and also the whole exchange once the
    request is on its way, so a trickling server cannot hold the caller.
    The status code is not checked: an error page is still a body.
    Without a declared charset the body is read as UTF-8.

    Raises RequestBuildError, TransportError or BodyReadError, each logged
    at WARNING first. Nothing is retried.
    """
    log = log or logger

    with requests.Session() as session:
        # only the user agent (and auth) go out, not the session defaults
        session.headers.clear()
        # no netrc credentials, no proxies from the environment
        session.trust_env = False
        try:
            prepared = session.prepare_request(
                requests.Request(
                    "GET",
                    req.url,
                    headers={"User-Agent": req.user_agent},
                    auth=req.auth,
                )
            )
            # Unsupported schemes only surface when an adapter is picked
            session.get_adapter(prepared.url)
        except (requests.exceptions.RequestException, ValueError) as e:
            log.warning("Couldn't build http request: %s", e)
            raise RequestBuildError(f"Couldn't build http request: {e}") from e

        deadline = time.monotonic() + req.rw_timeout
        try:
            resp = session.send(
                prepared,
                timeout=(req.connect_timeout, req.rw_timeout),
                stream=True,
                allow_redirects=True,
            )
        except requests.exceptions.RequestException as e:
            log.warning("Couldn't perform http request: %s", e)
            raise TransportError(f"Couldn't perform http request: {e}") from e

        with resp:
            body = bytearray()
            try:
                for chunk in resp.iter_content(chunk_size=READ_CHUNK):
                    if time.monotonic() > deadline:
                        log.warning("Couldn't perform http request: deadline of %.1fs exceeded", req.rw_timeout)
                        raise TransportError(
                            f"Couldn't perform http request: deadline exceeded for {req.url}"
                        )
                    body.extend(chunk)
            except requests.exceptions.RequestException as e:
                log.warning("Couldn't read http response body: %s", e)
                raise BodyReadError(f"Couldn't read http response body: {e}") from e

    return decode_body(bytes(body), resp.headers.get("Content-Type"))


def get_page(url: str, *, timeout: float = RW_TIMEOUT, log: logging.Logger | None = None) -> str:
    return fetch(
        FetchRequest(url=url, connect_timeout=timeout, rw_timeout=timeout),
        log=log,
    )


def get_page_with_auth(url: str, user: str, password: str, *,
                       timeout: float = RW_TIMEOUT,
                       log: logging.Logger | None = None) -> str:
    auth = (user, password) if user and password else None
    return fetch(
        FetchRequest(url=url, auth=auth, connect_timeout=timeout, rw_timeout=timeout),
        log=log,
    )
