"""
Barcode Scanner Loop

Polls a camera source for decoded barcode text until a plausible ISBN
appears or the scan is stopped. The camera is opened before the loop and
closed on every exit path.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Protocol, Union

from loguru import logger

from bookish.identification import isbn as isbn_utils


DEFAULT_POLL_INTERVAL = 0.3  # seconds between decode attempts


class BarcodeSource(Protocol):
    """Camera-backed barcode decoder supplied by the front-end."""

    async def open(self) -> None: ...

    async def read_barcode(self) -> Optional[str]:
        """Decode the current frame; None when nothing was recognized."""
        ...

    async def close(self) -> None: ...


DetectionCallback = Callable[[str], Union[None, Awaitable[None]]]


class BarcodeScanner:
    """
    Cooperative barcode polling loop.

    Usage:
        scanner = BarcodeScanner(camera)
        isbn = await scanner.scan()   # None if stop() was called
    """

    def __init__(
        self,
        source: BarcodeSource,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.source = source
        self.poll_interval = poll_interval
        self._stop = asyncio.Event()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """
        Request the loop to end; no detection callback fires afterwards.

        Also honored when called after scan() was scheduled but before it
        first ran.
        """
        self._stop.set()

    async def scan(self, on_detected: Optional[DetectionCallback] = None) -> Optional[str]:
        """
        Run the polling loop.

        Args:
            on_detected: Called with the cleaned ISBN when one is found

        Returns:
            Cleaned ISBN, or None when stopped

        Raises:
            RuntimeError: If a scan is already running on this scanner
        """
        if self._running:
            raise RuntimeError("Scan already in progress")

        self._running = True
        attempts = 0

        try:
            await self.source.open()
        except BaseException:
            self._running = False
            self._stop.clear()
            raise

        try:
            while not self._stop.is_set():
                attempts += 1
                text = await self.source.read_barcode()

                if text and not self._stop.is_set():
                    identifier = isbn_utils.clean(text)
                    if isbn_utils.is_plausible(identifier):
                        logger.info(f"Scanned ISBN {identifier} after {attempts} frames")
                        if on_detected is not None:
                            result = on_detected(identifier)
                            if asyncio.iscoroutine(result):
                                await result
                        return identifier
                    logger.debug(f"Ignoring non-ISBN barcode {text!r}")

                await self._wait()

            logger.info(f"Scan stopped after {attempts} frames")
            return None
        finally:
            # Re-arm for the next scan
            self._stop.clear()
            self._running = False
            await self.source.close()

    async def _wait(self) -> None:
        """Sleep between frames, waking early on stop()."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=self.poll_interval)
        except asyncio.TimeoutError:
            pass
