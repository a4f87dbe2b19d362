"""Keystroke buffering for USB barcode/QR scanners.

Scanners type like a keyboard: the code's characters arrive one key at
a time followed by Enter. ScanSession turns that stream into tokens and
hands each one to the reconciliation engine, while staying out of the
way of anyone typing into a text field.
"""

import enum
import logging
import time
from typing import Callable, Optional

from pydantic import BaseModel
from meeple.configs import SCAN_IDLE_TIMEOUT
from meeple.schemas.outcome import Outcome

logger = logging.getLogger(__name__)

TERMINATOR = "Enter"
TEXT_INPUTS = {"input", "textarea", "select", "contenteditable"}


class KeyEvent(BaseModel):
    key: str
    # kind of element holding focus when the key was pressed, if any
    focus: Optional[str] = None

    @property
    def in_text_field(self) -> bool:
        return (self.focus or "").lower() in TEXT_INPUTS


class ScanState(str, enum.Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    DISPATCHING = "dispatching"


class ScanSession:
    """Idle -> Accumulating -> (Enter) -> Dispatching -> Idle.

    Keys keep buffering while a token is being dispatched. A partial
    buffer left untouched for `idle_timeout` seconds is dropped on the
    next key so a stray keypress can't prefix the next scan.
    """

    def __init__(self, engine, idle_timeout: float = SCAN_IDLE_TIMEOUT,
                 clock: Callable[[], float] = time.monotonic):
        self.engine = engine
        self.idle_timeout = idle_timeout
        self.clock = clock
        self.buffer = ""
        self.state = ScanState.IDLE
        self._last_key = None
        self._in_flight = 0

    def reset(self):
        self.buffer = ""
        self._last_key = None
        if self.state == ScanState.ACCUMULATING:
            self.state = ScanState.IDLE

    def _expired(self, now: float) -> bool:
        return (self.idle_timeout > 0 and self._last_key is not None
                and now - self._last_key > self.idle_timeout)

    def feed(self, event: KeyEvent) -> Optional[str]:
        """Consumes one key and returns a completed token on Enter."""
        if event.in_text_field:
            return None
        now = self.clock()
        if event.key == TERMINATOR:
            token = self.buffer.strip()
            self.buffer = ""
            self._last_key = None
            if self.state == ScanState.ACCUMULATING:
                self.state = ScanState.IDLE
            return token or None
        if len(event.key) != 1 or not event.key.isprintable():
            return None
        if self.buffer and self._expired(now):
            logger.debug(f"Dropping stale scan buffer '{self.buffer}'")
            self.buffer = ""
        self.buffer += event.key
        self._last_key = now
        if self.state == ScanState.IDLE:
            self.state = ScanState.ACCUMULATING
        return None

    async def dispatch(self, token: str) -> Outcome:
        self.state = ScanState.DISPATCHING
        self._in_flight += 1
        try:
            return await self.engine.auto_return(token)
        finally:
            self._in_flight -= 1
            if not self._in_flight:
                self.state = ScanState.ACCUMULATING if self.buffer else ScanState.IDLE

    async def on_key(self, event: KeyEvent) -> Optional[Outcome]:
        if token := self.feed(event):
            return await self.dispatch(token)
        return None
