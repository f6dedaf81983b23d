"""
app/connectors/base.py

Base abstraction for upstream anomaly sources.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SourceFetchResult:
    """
    Raw records pulled from one upstream source, still in its native field names.
    """

    source: str
    records: list[dict[str, Any]] = field(default_factory=list)
    simulated: bool = False


class BaseSourceConnector(ABC):
    """
    Connector interface for pulling raw anomaly records from an upstream system.
    """

    source: str

    def __init__(self, *, source: str) -> None:
        self.source = source

    @abstractmethod
    def fetch_records(self) -> SourceFetchResult:
        """
        Fetch raw records; normalization happens downstream.
        """
