"""
Configuration settings for the OSM element fetcher
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class APIConfig:
    """OSM editing API endpoint and request settings"""
    # OSM API v0.6 (XML). Elements are addressed as {base_url}/{type}/{id}
    base_url: str = "https://www.openstreetmap.org/api/0.6"
    
    # Request settings
    request_timeout: int = 30
    max_retries: int = 0  # Extra attempts after the first one; 0 keeps fail-fast
    retry_delay: float = 1.0
    
    # User agent for API requests
    user_agent: str = "osmfetch/1.0"


@dataclass
class FetcherConfig:
    """Fetch and resolve configuration"""
    # API config
    api: APIConfig = field(default_factory=APIConfig)
    
    # Upper bound on node requests in flight during resolution
    max_concurrency: int = 16
    
    # Drop failed node fetches instead of failing the whole resolution
    best_effort: bool = False
    
    # Deadline for the whole node fan-out (seconds), None = no deadline
    resolve_timeout: Optional[float] = None


# Global config instance
config = FetcherConfig()


def get_config() -> FetcherConfig:
    """Get global configuration"""
    return config


def validate_config(config: FetcherConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []
    
    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        if not config.api.base_url:
            errors.append("api.base_url is required but not set")
        elif not config.api.base_url.startswith(("http://", "https://")):
            errors.append(f"api.base_url must be an http(s) URL, got {config.api.base_url!r}")
        if config.api.request_timeout is None or config.api.request_timeout <= 0:
            errors.append(f"api.request_timeout must be positive, got {config.api.request_timeout}")
        if config.api.max_retries is None or config.api.max_retries < 0:
            errors.append(f"api.max_retries must be >= 0, got {config.api.max_retries}")
        if config.api.retry_delay is None or config.api.retry_delay < 0:
            errors.append(f"api.retry_delay must be >= 0, got {config.api.retry_delay}")
    
    if config.max_concurrency is None or config.max_concurrency < 1:
        errors.append(f"max_concurrency must be at least 1, got {config.max_concurrency}")
    
    if config.resolve_timeout is not None and config.resolve_timeout <= 0:
        errors.append(f"resolve_timeout must be positive when set, got {config.resolve_timeout}")
    
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
