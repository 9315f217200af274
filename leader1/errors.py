class Leader1Error(Exception):
    """Base class for every error raised by the bot helpers."""


class FetchError(Leader1Error):
    """A single outbound GET could not produce a body."""


class RequestBuildError(FetchError):
    pass


class TransportError(FetchError):
    pass


class BodyReadError(FetchError):
    pass


class DecodeError(Leader1Error):
    """Stats payload is not the XML we expect."""


class NoLinkFound(Leader1Error):
    pass
