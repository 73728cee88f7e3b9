"""Exception types raised by the UniProt proxy."""

from typing import List, Optional


class UniProtProxyError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(UniProtProxyError, ValueError):
    """Accession does not match a UniProt accession pattern."""

    def __init__(self, accession: str):
        self.accession = accession
        super().__init__(
            f"Accession provided {accession!r} doesn't comply with the UniProt accession pattern"
        )


class FetchError(UniProtProxyError):
    """Remote record could not be retrieved.

    Raised when every attempt failed (``status_codes`` holds what each attempt
    observed, in order) or when a redirect pointed back at the current URL.
    """

    def __init__(self, url: str, status_codes: Optional[List[str]] = None,
                 cyclic: bool = False, message: Optional[str] = None):
        self.url = url
        self.status_codes = list(status_codes or [])
        self.cyclic = cyclic
        if message is None:
            if cyclic:
                message = f"Cyclic redirect detected at {url}"
            else:
                message = (
                    f"Couldn't fetch accession from the url {url}; error codes on "
                    f"{len(self.status_codes)} attempts are {self.status_codes}"
                )
        super().__init__(message)


class CacheIOError(UniProtProxyError, OSError):
    """Reading or writing the local record cache failed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cache I/O error for {path}: {reason}")

    def __str__(self) -> str:
        return f"Cache I/O error for {self.path}: {self.reason}"


class DocumentParseError(UniProtProxyError):
    """Record bytes are not well-formed XML."""


class DocumentNavigationError(UniProtProxyError):
    """An expected element could not be selected from a record."""


class ElementNotFoundError(DocumentNavigationError):
    """No child element with the requested tag."""


class AmbiguousElementError(DocumentNavigationError):
    """More than one child element with the requested tag."""


class InvalidSymbolError(UniProtProxyError):
    """Part of a sequence does not resolve to any compound of the alphabet."""

    def __init__(self, symbol: str, position: int):
        self.symbol = symbol
        self.position = position
        super().__init__(f"Compound {symbol!r} not found at position {position}")


class OutOfRangeError(UniProtProxyError, IndexError):
    """Position outside ``[1, length]``."""

    def __init__(self, position: int, length: int):
        self.position = position
        self.length = length
        super().__init__(f"Position {position} is outside [1, {length}]")


class UnsupportedOperationError(UniProtProxyError, NotImplementedError):
    """Operation is deliberately not implemented."""
