"""Configuration management for the UniProt proxy."""

import json
import os
from dataclasses import dataclass, asdict, field
from pathlib import Path
from threading import Lock
from typing import Optional

DEFAULT_UNIPROT_BASE_URL = "https://www.uniprot.org"


@dataclass
class CacheConfig:
    """Cache configuration settings."""
    enabled: bool = True
    directory: Optional[str] = None


@dataclass
class APIConfig:
    """API configuration settings."""
    base_url: str = DEFAULT_UNIPROT_BASE_URL
    user_agent: str = "uniprot-proxy"
    timeout_ms: int = 5000
    max_attempts: int = 5
    backoff_factor: float = 0.0  # seconds; 0 retries immediately


@dataclass(frozen=True)
class FetchSettings:
    """Consistent view of the settings one fetch needs."""
    base_url: str
    cache_directory: Optional[Path]
    user_agent: str
    timeout_seconds: float
    max_attempts: int
    backoff_factor: float


@dataclass
class Config:
    """Main configuration container.

    A single instance is meant to be shared by every fetcher in the process.
    Use :meth:`set_base_url`, :meth:`set_cache_directory` and
    :meth:`snapshot` when other threads may be fetching concurrently.
    """
    cache: CacheConfig
    api: APIConfig
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    @classmethod
    def default(cls) -> 'Config':
        """Create default configuration."""
        return cls(cache=CacheConfig(), api=APIConfig())

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from JSON file."""
        if not path.exists():
            return cls.default()

        with open(path, 'r') as f:
            data = json.load(f)

        return cls(
            cache=CacheConfig(**data.get('cache', {})),
            api=APIConfig(**data.get('api', {}))
        )

    def to_file(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)

        with self._lock:
            data = {
                'cache': asdict(self.cache),
                'api': asdict(self.api)
            }

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)

    def merge_env_vars(self) -> None:
        """Merge environment variables into configuration."""
        if os.getenv('UNIPROT_BASE_URL'):
            self.set_base_url(os.getenv('UNIPROT_BASE_URL'))

        if os.getenv('UNIPROT_CACHE_DIR'):
            self.set_cache_directory(os.getenv('UNIPROT_CACHE_DIR'))
        if os.getenv('UNIPROT_NO_CACHE'):
            with self._lock:
                self.cache.enabled = False

        if os.getenv('UNIPROT_TIMEOUT_MS'):
            with self._lock:
                self.api.timeout_ms = int(os.getenv('UNIPROT_TIMEOUT_MS'))

    def merge_cli_args(self, **kwargs) -> None:
        """Merge CLI arguments into configuration."""
        if kwargs.get('base_url'):
            self.set_base_url(kwargs['base_url'])

        if kwargs.get('cache_dir'):
            self.set_cache_directory(kwargs['cache_dir'])
        if kwargs.get('no_cache'):
            with self._lock:
                self.cache.enabled = False

        with self._lock:
            if kwargs.get('timeout_ms'):
                self.api.timeout_ms = kwargs['timeout_ms']
            if kwargs.get('max_attempts'):
                self.api.max_attempts = kwargs['max_attempts']

    def set_base_url(self, base_url: str) -> None:
        """Point every fetcher sharing this config at another UniProt mirror."""
        with self._lock:
            self.api.base_url = base_url.rstrip('/')

    def set_cache_directory(self, directory: Optional[str]) -> None:
        """Set (and create) the record cache directory; None disables caching."""
        if directory:
            Path(directory).mkdir(parents=True, exist_ok=True)
        with self._lock:
            self.cache.directory = str(directory) if directory else None
            self.cache.enabled = bool(directory)

    def snapshot(self) -> FetchSettings:
        """Read all fetch settings at once under the lock."""
        with self._lock:
            cache_dir = self.cache.directory if self.cache.enabled else None
            return FetchSettings(
                base_url=self.api.base_url.rstrip('/'),
                cache_directory=Path(cache_dir) if cache_dir else None,
                user_agent=self.api.user_agent,
                timeout_seconds=self.api.timeout_ms / 1000.0,
                max_attempts=self.api.max_attempts,
                backoff_factor=self.api.backoff_factor,
            )


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    locations = [
        Path.home() / '.uniprot_proxy' / 'config.json',
        Path.home() / '.config' / 'uniprot_proxy' / 'config.json',
        Path('.uniprot_proxy.json'),
        Path('uniprot_proxy.config.json')
    ]

    # Return first existing file
    for path in locations:
        if path.exists():
            return path

    return Path.home() / '.uniprot_proxy' / 'config.json'


def create_example_config(path: Optional[Path] = None) -> Path:
    """Create an example configuration file."""
    if path is None:
        path = Path('uniprot_proxy.config.example.json')

    config = Config.default()
    config.cache.directory = ".uniprot_cache"
    config.api.base_url = DEFAULT_UNIPROT_BASE_URL

    config.to_file(path)
    return path


# Process-wide configuration shared by fetchers that are not given their own
_default_config: Optional[Config] = None
_default_config_lock = Lock()


def get_default_config() -> Config:
    """Get the shared process-wide configuration."""
    global _default_config
    with _default_config_lock:
        if _default_config is None:
            _default_config = Config.default()
        return _default_config
