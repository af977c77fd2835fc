import logging
import sys

# Chatty request loggers from the HTTP client and the Flask dev server.
_THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "urllib3", "werkzeug")


def _root_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Send log records to stderr so stdout stays free for leaderboard output.

    ``quiet`` keeps only relay failures and fallbacks; ``verbose`` wins over
    it and also lets the HTTP libraries through.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(_root_level(verbose, quiet))

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%H:%M:%S"))
    root.addHandler(handler)

    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if verbose else logging.WARNING)
