"""URL validation for the short URL service.

A URLValidator runs an ordered chain of checks over a submitted URL. Each
check returns normally to accept or raises InvalidURLError to reject; the
first rejection wins. The chain is built once from ``settings.URL_VALIDATORS``.
"""

import asyncio
import logging
import re
from typing import Awaitable, Callable, Dict, Iterable, Optional, Sequence, Type
from urllib.parse import urlsplit

from shorturl.core.config import settings
from shorturl.services.exceptions import InvalidURLError

logger = logging.getLogger(__name__)

# http(s) scheme, optional www., a dotted host and an optional path/query
URL_PATTERN = re.compile(
    r"https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b"
    r"([-a-zA-Z0-9()@:%_+.~#?&/=]*)"
)

Resolver = Callable[[str], Awaitable[object]]


def extract_host(candidate: str) -> str:
    """Return the lower-cased host name of ``candidate``.

    Raises:
        InvalidURLError: If the candidate cannot be split as a URL or has no host
    """
    try:
        host = urlsplit(candidate).hostname
    except ValueError as e:
        raise InvalidURLError(f"Malformed URL: {candidate!r}") from e
    if not host:
        raise InvalidURLError(f"URL has no host: {candidate!r}")
    return host


async def resolve_host(host: str):
    """Resolve ``host`` with the event loop's non-blocking resolver."""
    loop = asyncio.get_running_loop()
    return await loop.getaddrinfo(host, None)


class URLCheck:
    """A single step of the validation chain."""

    name: str = ""

    async def check(self, candidate: str, host: str) -> None:
        raise NotImplementedError


class PatternCheck(URLCheck):
    """Accept only candidates shaped like an http(s) URL."""

    name = "pattern"

    def __init__(self, pattern: "re.Pattern" = URL_PATTERN):
        self.pattern = pattern

    async def check(self, candidate: str, host: str) -> None:
        if not self.pattern.match(candidate):
            raise InvalidURLError(f"Not an http(s) URL: {candidate!r}")


class ResolvableHostCheck(URLCheck):
    """Accept only candidates whose host name resolves to an address."""

    name = "dns"

    def __init__(self, resolver: Optional[Resolver] = None, timeout: Optional[float] = None):
        self.resolver = resolver or resolve_host
        self.timeout = settings.DNS_TIMEOUT if timeout is None else timeout

    async def check(self, candidate: str, host: str) -> None:
        try:
            await asyncio.wait_for(self.resolver(host), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning(f"Timed out resolving {host} after {self.timeout}s")
            raise InvalidURLError(f"Timed out resolving host {host!r}") from e
        except (OSError, UnicodeError) as e:
            # socket.gaierror is an OSError; bad IDNA labels raise UnicodeError
            raise InvalidURLError(f"Host {host!r} does not resolve: {e}") from e


CHECKS: Dict[str, Type[URLCheck]] = {
    PatternCheck.name: PatternCheck,
    ResolvableHostCheck.name: ResolvableHostCheck,
}


class URLValidator:
    """
    Ordered chain of URL checks.

    Before any check runs the candidate must be a non-empty string no longer
    than ``max_length`` with an extractable host.
    """

    def __init__(self, checks: Iterable[URLCheck], max_length: Optional[int] = None):
        self.checks = list(checks)
        self.max_length = settings.URL_MAX_LENGTH if max_length is None else max_length

    @property
    def names(self) -> Sequence[str]:
        return [check.name for check in self.checks]

    async def validate(self, candidate) -> str:
        """
        Validate a submitted URL.

        Args:
            candidate: The submitted value; anything but a string is invalid

        Returns:
            str: The normalized (lower-cased) host of the URL

        Raises:
            InvalidURLError: If any step of the chain rejects the candidate
        """
        if not isinstance(candidate, str) or not candidate:
            raise InvalidURLError("No URL submitted")
        if len(candidate) > self.max_length:
            raise InvalidURLError(f"URL longer than {self.max_length} characters")

        host = extract_host(candidate)
        for check in self.checks:
            await check.check(candidate, host)
        return host

    @classmethod
    def from_names(cls, names: Iterable[str], **kwargs) -> "URLValidator":
        """
        Build a validator from check names such as ``["pattern", "dns"]``.

        Raises:
            ValueError: If a name does not match a known check
        """
        names = list(names)
        unknown = [name for name in names if name not in CHECKS]
        if unknown:
            raise ValueError(
                f"Unknown URL check(s): {', '.join(unknown)}. "
                f"Expected any of: {', '.join(CHECKS)}"
            )
        return cls([CHECKS[name]() for name in names], **kwargs)

    @classmethod
    def from_settings(cls) -> "URLValidator":
        return cls.from_names(settings.URL_VALIDATORS)
