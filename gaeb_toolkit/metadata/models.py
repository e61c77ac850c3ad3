"""
Canonical hierarchy models for the parsing pipeline.
These are shared across parsing, UI, and export layers.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import List, Dict, Optional, Any, Iterable, Tuple

from ..system.error_handling import DataValidationError


class PositionType(str, Enum):
    """Closed set of node kinds produced by both parsing paths."""
    TITLE = "title"
    POSITION = "position"
    TEXT = "text"
    CALCULATION = "calculation"


@dataclass(frozen=True)
class DocumentHeader:
    version: Optional[str] = None
    project_name: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    detected_format: Optional[str] = None


@dataclass(frozen=True)
class PositionNode:
    id: str
    title: str
    type: PositionType
    level: int = 0
    position_number: Optional[str] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None
    total_price: Optional[float] = None
    parent: Optional[str] = None

    def __post_init__(self):
        if not self.title:
            raise DataValidationError("Position title must not be empty", field_name="title", value=self.title)
        if self.level < 0:
            raise DataValidationError("Position level must be non-negative", field_name="level", value=self.level)

    @property
    def is_category(self) -> bool:
        return self.type is PositionType.TITLE


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


@dataclass(frozen=True)
class ParsedDocument:
    header: DocumentHeader
    positions: Tuple[PositionNode, ...]
    raw_content: str
    file_name: str
    processed_at: str
    total_positions: int

    def __post_init__(self):
        if self.total_positions != len(self.positions):
            raise DataValidationError(
                f"total_positions={self.total_positions} does not match {len(self.positions)} positions",
                field_name="total_positions",
                value=self.total_positions,
            )

    @classmethod
    def build(
        cls,
        header: DocumentHeader,
        positions: Iterable[PositionNode],
        raw_content: str,
        file_name: str,
        processed_at: Optional[str] = None,
    ) -> "ParsedDocument":
        nodes = tuple(positions)
        return cls(
            header=header,
            positions=nodes,
            raw_content=raw_content,
            file_name=file_name,
            processed_at=processed_at or _utc_now_iso(),
            total_positions=len(nodes),
        )

    def nodes_of_type(self, node_type: PositionType) -> List[PositionNode]:
        return [p for p in self.positions if p.type is node_type]

    def counts(self) -> Tuple[int, int, int]:
        """Return (categories, items, total) as shown in summaries."""
        return (
            len(self.nodes_of_type(PositionType.TITLE)),
            len(self.nodes_of_type(PositionType.POSITION)),
            self.total_positions,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["positions"] = [
            {**asdict(p), "type": p.type.value} for p in self.positions
        ]
        return payload


@dataclass
class PositionIdRegistry:
    """Hands out document-unique ids, suffixing repeats with _2, _3, ..."""
    seen: Dict[str, int] = field(default_factory=dict)

    def claim(self, candidate: str) -> str:
        if candidate not in self.seen:
            self.seen[candidate] = 1
            return candidate
        count = self.seen[candidate]
        while True:
            count += 1
            unique = f"{candidate}_{count}"
            if unique not in self.seen:
                self.seen[candidate] = count
                self.seen[unique] = 1
                return unique
