"""Retrieval of UniProt XML records with a local file cache and bounded retry."""

import time
from http.cookiejar import DefaultCookiePolicy
from pathlib import Path
from typing import List, Optional
from urllib.parse import urljoin

import requests

from .accession import validate_accession
from .config import Config, FetchSettings, get_default_config
from .error_handler import ErrorHandler, get_error_handler
from .exceptions import CacheIOError, FetchError
from .logging_config import LogTimer, get_logger, log_api_call, log_cache_hit
from .xml_helper import strip_default_namespace

logger = get_logger('fetcher')

# Moved permanently, found, see other
REDIRECT_CODES = (301, 302, 303)
MAX_REDIRECTS = 30


class CachedFetcher:
    """
    Resolves accessions to UniProt XML bytes.

    The cache directory is consulted first; on a miss the record is downloaded
    from ``<base_url>/uniprot/<ACCESSION>.xml`` and written back to the cache.
    Settings are read from the shared :class:`Config` on every fetch, so
    changes made to it apply to fetchers that already exist.
    """

    def __init__(self,
                 config: Optional[Config] = None,
                 session: Optional[requests.Session] = None,
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the fetcher.

        Args:
            config: Configuration shared by reference (process default if None)
            session: HTTP session to use; one is created if None
            error_handler: Error bookkeeping (global handler if None)
        """
        self.config = config or get_default_config()
        self.session = session or self._create_session()
        self.error_handler = error_handler or get_error_handler()
        self.network_attempts = 0
        self.cache_hits = 0

    @staticmethod
    def _create_session() -> requests.Session:
        session = requests.Session()
        # Redirect cookies are passed on explicitly; the jar must not add its own
        session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        return session

    @staticmethod
    def record_url(accession: str, settings: FetchSettings) -> str:
        return f"{settings.base_url}/uniprot/{accession.upper()}.xml"

    @staticmethod
    def cache_path(accession: str, settings: FetchSettings) -> Optional[Path]:
        if settings.cache_directory is None:
            return None
        return settings.cache_directory / f"{accession}.xml"

    def fetch(self, accession: str) -> bytes:
        """
        Get the record for an accession, from cache or network.

        Args:
            accession: UniProt accession

        Returns:
            Record XML with the root default namespace removed

        Raises:
            ValidationError: Malformed accession (checked before any I/O)
            CacheIOError: The cache file could not be read or written
            FetchError: Every attempt failed, or a redirect loop was detected
        """
        validate_accession(accession)
        settings = self.config.snapshot()

        cache_path = self.cache_path(accession, settings)
        if cache_path is not None:
            if cache_path.exists():
                log_cache_hit('records', accession, True)
                self.cache_hits += 1
                return strip_default_namespace(self._read_cache(cache_path))
            log_cache_hit('records', accession, False)

        url = self.record_url(accession, settings)
        logger.info(f"Loading: {url}")
        data = strip_default_namespace(self._fetch_with_retry(url, accession, settings))

        if cache_path is not None:
            self._write_cache(cache_path, data)

        logger.info(f"Load complete: {accession} ({len(data)} bytes)")
        return data

    def _fetch_with_retry(self, url: str, accession: str, settings: FetchSettings) -> bytes:
        """Up to ``max_attempts`` GETs; the first 200 response wins."""
        status_codes: List[str] = []

        for attempt in range(1, settings.max_attempts + 1):
            self.network_attempts += 1
            operation = f"GET {url}"
            try:
                with LogTimer(operation, logger) as timer:
                    response = self._open(url, settings)
            except FetchError as e:
                self.error_handler.handle_error(e, operation, item_id=accession, retry_count=attempt)
                raise
            except requests.RequestException as e:
                status_codes.append(type(e).__name__)
                self.error_handler.handle_error(e, operation, item_id=accession, retry_count=attempt)
            else:
                ok = response.status_code == requests.codes.ok
                log_api_call('uniprot', url, response.status_code, timer.elapsed, ok)
                if ok:
                    return response.content
                status_codes.append(str(response.status_code))
                response.close()
                self.error_handler.handle_error(
                    FetchError(url, message=f"HTTP {response.status_code} from {url}"),
                    operation,
                    item_id=accession,
                    retry_count=attempt,
                    status_code=response.status_code
                )

            if attempt < settings.max_attempts and settings.backoff_factor > 0:
                wait_time = self._calculate_backoff(attempt - 1, settings)
                logger.info(f"Retrying {accession} in {wait_time:.1f}s...")
                time.sleep(wait_time)

        raise FetchError(url, status_codes)

    def _open(self, url: str, settings: FetchSettings) -> requests.Response:
        """
        GET a URL, following 301/302/303 redirects by hand.

        ``Set-Cookie`` from each redirect is sent as ``Cookie`` on the next
        request.

        Raises:
            FetchError: A redirect points to a URL already visited, or more
                than MAX_REDIRECTS redirects are followed
        """
        timeout = (settings.timeout_seconds, settings.timeout_seconds)
        headers = {'User-Agent': settings.user_agent}
        response = self.session.get(url, headers=headers, timeout=timeout, allow_redirects=False)
        visited = {url}
        start_url = url

        while response.status_code in REDIRECT_CODES:
            location = response.headers.get('Location')
            if not location:
                break
            new_url = urljoin(url, location)
            if new_url in visited:
                response.close()
                raise FetchError(new_url, cyclic=True)
            if len(visited) > MAX_REDIRECTS:
                response.close()
                raise FetchError(new_url, message=f"Exceeded {MAX_REDIRECTS} redirects starting from {start_url}")

            cookies = response.headers.get('Set-Cookie')
            response.close()

            headers = {'User-Agent': settings.user_agent}
            if cookies:
                headers['Cookie'] = cookies
            logger.info(f"Redirecting from {url} to {new_url}")

            url = new_url
            visited.add(url)
            response = self.session.get(url, headers=headers, timeout=timeout, allow_redirects=False)

        return response

    @staticmethod
    def _calculate_backoff(attempt: int, settings: FetchSettings) -> float:
        """Calculate exponential backoff time."""
        return min(settings.backoff_factor * (2 ** attempt), 300.0)  # Max 5 minutes

    @staticmethod
    def _read_cache(path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise CacheIOError(path, str(e)) from e

    @staticmethod
    def _write_cache(path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise CacheIOError(path, str(e)) from e
        logger.debug(f"Cached record at {path}")

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
