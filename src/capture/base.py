"""
CaptureSource interface for pluggable scan sources.

This defines the contract that all scan sources must implement, enabling
the replication engine to work with any producer of scan updates:
- Recorded scan sessions replayed from file
- Live scanners pushing updates from a background thread
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional

from models.scan import ScanBatch


@dataclass
class CaptureConfig:
    """
    Base configuration for capture sources.

    Attributes:
        source_id: Unique identifier for this source (e.g., "room-scan").
    """
    source_id: str = "default"


class CaptureSource(ABC):
    """
    Abstract base class for capture sources.

    A capture source provides scan batches, one per scan update.

    Lifecycle:
        1. Create instance with config
        2. Call open() to initialize the source
        3. Call read() repeatedly to get batches
        4. Call close() to release resources

    Can also be used as a context manager:
        with ReplayCaptureSource(config) as source:
            for batch in source:
                replicator.replicate(batch.elements)
    """

    def __init__(self, config: CaptureConfig):
        self._config = config
        self._is_open = False
        self._batch_index = 0

    @property
    def source_id(self) -> str:
        """Unique identifier for this source."""
        return self._config.source_id

    @property
    def is_open(self) -> bool:
        """Whether the source is currently open and ready to read."""
        return self._is_open

    @property
    def batch_index(self) -> int:
        """Number of batches read since open."""
        return self._batch_index

    @property
    def is_exhausted(self) -> bool:
        """
        Whether the source will never produce another batch.

        A None from read() on a source that is not exhausted is a transient
        miss, not the end of the stream.
        """
        return False

    @abstractmethod
    def open(self) -> None:
        """
        Open/initialize the capture source.

        Raises:
            RuntimeError: If the source cannot be opened.
        """
        pass

    @abstractmethod
    def read(self) -> Optional[ScanBatch]:
        """
        Read the next scan batch.

        Returns:
            ScanBatch, or None if no batch is available right now.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """
        Close/release the capture source.

        Safe to call multiple times.
        """
        pass

    def __enter__(self) -> "CaptureSource":
        """Context manager entry - opens the source."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes the source."""
        self.close()

    def __iter__(self) -> Iterator[ScanBatch]:
        """
        Iterate over batches until the source is exhausted.

        The source must be open before iterating.
        """
        if not self._is_open:
            raise RuntimeError("Source must be open before iterating")

        while True:
            batch = self.read()
            if batch is None:
                if self.is_exhausted:
                    break
                continue
            yield batch
