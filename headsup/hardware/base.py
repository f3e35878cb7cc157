"""
Base hardware abstraction for Heads Up.

BaseHardware gives every device-facing component the same
initialize/shutdown lifecycle and structured logging.
"""

import asyncio
import structlog
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

class BaseHardware(ABC):
    """
    Base class for all hardware abstractions.

    Subclasses implement ``_initialize_impl`` and ``_shutdown_impl``.
    """

    def __init__(self, config: Optional[Any] = None, name: Optional[str] = None):
        """
        Initialize the hardware component.

        Args:
            config: Optional hardware-specific configuration
            name: Optional name for this hardware instance
        """
        self.config = config
        self.name = name or self.__class__.__name__
        self.logger = structlog.get_logger(hardware=self.name)
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """
        Initialize the hardware component.

        Errors from the implementation are logged and re-raised.
        """
        async with self._lock:
            if self._initialized:
                self.logger.warning("Hardware already initialized")
                return

            try:
                await self._initialize_impl()
            except Exception as e:
                self.logger.error(f"Error initializing hardware: {e}")
                raise

            self._initialized = True
            self.logger.info("Hardware initialized")

    async def shutdown(self) -> None:
        """Shut down the hardware component."""
        async with self._lock:
            if not self._initialized:
                self.logger.warning("Hardware not initialized")
                return

            try:
                await self._shutdown_impl()
            except Exception as e:
                self.logger.error(f"Error shutting down hardware: {e}")
                raise
            finally:
                self._initialized = False

            self.logger.info("Hardware shut down")

    def is_initialized(self) -> bool:
        return self._initialized

    @abstractmethod
    async def _initialize_impl(self) -> None:
        """Implementation-specific initialization."""

    @abstractmethod
    async def _shutdown_impl(self) -> None:
        """Implementation-specific cleanup."""

    async def check_health(self) -> Dict[str, Any]:
        """
        Report the health of the component.

        Returns:
            Dictionary with ``name``, ``initialized`` and ``status``
        """
        return {
            "name": self.name,
            "initialized": self._initialized,
            "status": "ok" if self._initialized else "offline"
        }
