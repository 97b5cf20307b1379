"""
OSM API client

Blocking HTTP fetcher for the OSM editing API. Handles:
- Request headers and timeout
- Optional retry with linear backoff
"""

import time
from typing import Optional
import requests
from loguru import logger

from .config import APIConfig, get_config


class OSMAPIClient:
    """Client for GET requests against the OSM API"""
    
    def __init__(self, api_config: Optional[APIConfig] = None):
        self.api_config = api_config or get_config().api
        self.timeout = self.api_config.request_timeout
        self.max_retries = self.api_config.max_retries
        self.retry_delay = self.api_config.retry_delay
    
    def _headers(self):
        return {
            "User-Agent": self.api_config.user_agent,
            "Accept": "application/xml, text/xml",
        }
    
    def get_text(self, url: str) -> str:
        """
        Fetch a URL and return the response body
        
        Args:
            url: Absolute request URL
            
        Returns:
            Response text
            
        Raises:
            requests.exceptions.RequestException: Transport errors and non-2xx
                responses (HTTPError), re-raised as-is once retries run out
        """
        attempts = self.max_retries + 1
        for attempt in range(attempts):
            try:
                logger.debug(f"GET {url}")
                response = requests.get(url, headers=self._headers(), timeout=self.timeout)
                response.raise_for_status()
                return response.text
            except requests.exceptions.RequestException as e:
                if attempt < attempts - 1:
                    wait_time = self.retry_delay * (attempt + 1)
                    logger.warning(f"OSM API request failed (attempt {attempt + 1}/{attempts}): {e}. Retrying in {wait_time}s...")
                    time.sleep(wait_time)
                else:
                    logger.debug(f"OSM API request failed for {url}: {e}")
                    raise
