"""Fetch an updated compromised package list over HTTP."""

import asyncio
import ssl
from typing import Optional

import aiohttp
import certifi
from aiohttp import ClientTimeout

from ..utils.logging import get_logger
from .registry import CompromisedRegistry, parse_compromised_list


class CompromisedListClient:
    """Async client that downloads compromised-list text.
    
    A failed fetch never raises: it is logged and yields an empty string,
    which parses to a registry with no entries.
    """
    
    TIMEOUT = ClientTimeout(total=30)
    
    def __init__(self, session: Optional[aiohttp.ClientSession] = None) -> None:
        """Initialize the client.
        
        Args:
            session: Optional aiohttp session for connection reuse
        """
        self.logger = get_logger("CompromisedListClient")
        self._session = session
        self._owns_session = session is None
        self._ssl_context = ssl.create_default_context(cafile=certifi.where())
    
    async def __aenter__(self) -> "CompromisedListClient":
        """Async context manager entry."""
        self._get_session()
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
    
    async def fetch_text(self, url: str) -> str:
        """Download the list text.
        
        Args:
            url: Location of the list
            
        Returns:
            Response body, or an empty string on any network failure
        """
        try:
            session = self._get_session()
            async with session.get(url) as response:
                if response.status != 200:
                    self.logger.error(
                        f"Failed to fetch compromised packages: {response.status} {response.reason}"
                    )
                    return ""
                return await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f"Failed to fetch compromised packages: {e}")
            return ""
    
    async def fetch_registry(self, url: str) -> CompromisedRegistry:
        """Download and parse the list."""
        text = await self.fetch_text(url)
        if not text:
            self.logger.warning(f"No compromised entries retrieved from {url}")
        return parse_compromised_list(text)
    
    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session.
        
        Returns:
            aiohttp ClientSession
        """
        if not self._session or self._session.closed:
            connector = aiohttp.TCPConnector(ssl=self._ssl_context)
            self._session = aiohttp.ClientSession(
                timeout=self.TIMEOUT,
                connector=connector
            )
            self._owns_session = True
        return self._session
