"""Per-item outcome tracking for bulk operations."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional

SUCCESS = "success"
FAILURE = "failure"


@dataclass
class ItemOutcome:
    """Result of one unit of work inside a bulk operation.

    ``warning`` is set when a dependency step failed but the item itself was
    still attempted.
    """
    item: str
    status: str
    error: Optional[str] = None
    warning: Optional[str] = None


@dataclass
class BatchResult:
    """Tally plus one outcome per item.

    Invariants: successes + failures <= total; an item counts at most one
    warning and warnings never reduce successes.
    """
    total: int = 0
    successes: int = 0
    warnings: int = 0
    failures: int = 0
    message: str = ""
    outcomes: List[ItemOutcome] = field(default_factory=list)

    def record_success(self, item: str, warning: Any = None) -> None:
        self.successes += 1
        self._append(ItemOutcome(item, SUCCESS), warning)

    def record_failure(self, item: str, error: Any, warning: Any = None) -> None:
        self.failures += 1
        self._append(ItemOutcome(item, FAILURE, error=str(error)), warning)

    def _append(self, outcome: ItemOutcome, warning: Any) -> None:
        if warning is not None:
            self.warnings += 1
            outcome.warning = str(warning)
        self.outcomes.append(outcome)

    def failed_items(self) -> List[str]:
        return [outcome.item for outcome in self.outcomes if outcome.status == FAILURE]

    def warned_items(self) -> List[str]:
        return [outcome.item for outcome in self.outcomes if outcome.warning is not None]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "successes": self.successes,
            "warnings": self.warnings,
            "failures": self.failures,
            "message": self.message,
        }
