"""Shared lifecycle for stream consuming workers."""

from __future__ import annotations

import asyncio
import os
import socket
import uuid
from abc import ABC, abstractmethod


class BaseWorker(ABC):
    """Async worker with a cooperative shutdown flag."""

    def __init__(self, consumer_name: str | None = None):
        self.consumer_name = consumer_name or self._build_consumer_name()
        self._shutdown_event = asyncio.Event()

    @abstractmethod
    async def run_forever(self) -> None:
        """Consume until shutdown is requested."""

    @staticmethod
    def _build_consumer_name() -> str:
        return f"{socket.gethostname()}:{os.getpid()}:{uuid.uuid4().hex[:6]}"

    def shutdown(self) -> None:
        self._shutdown_event.set()

    def is_shutdown_requested(self) -> bool:
        return self._shutdown_event.is_set()
