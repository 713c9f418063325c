# utils/batch.py
from dataclasses import dataclass, field
from typing import Any, List


@dataclass
class RecordFailure:
    key: Any
    label: str
    error: str

    def to_dict(self) -> dict:
        return {"key": _jsonable(self.key), "label": self.label, "error": self.error}


@dataclass
class BatchResult:
    """Per-record outcome of a bulk write. Nothing is rolled back across records."""

    updated: List[Any] = field(default_factory=list)
    failed: List[RecordFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def failed_keys(self) -> List[Any]:
        return [f.key for f in self.failed]

    def to_dict(self) -> dict:
        return {
            "updated": [_jsonable(k) for k in self.updated],
            "failed": [f.to_dict() for f in self.failed],
        }


def _jsonable(key):
    return list(key) if isinstance(key, tuple) else key
