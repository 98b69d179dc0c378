from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class MutationResult:
    """
    Outcome of one gateway operation.

    Either ``success`` is True and ``data`` holds the server's authoritative
    values, or it is False and ``error``/``error_kind`` describe the failure.
    """

    success: bool
    data: Optional[dict] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[dict] = None) -> "MutationResult":
        return cls(success=True, data=data or {})

    @classmethod
    def failure(cls, error: str, kind: str) -> "MutationResult":
        return cls(success=False, error=error, error_kind=kind)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error, "error_kind": self.error_kind}

    @classmethod
    def from_dict(cls, payload: dict) -> "MutationResult":
        if payload.get("success"):
            return cls.ok(payload.get("data"))
        return cls.failure(
            payload.get("error") or "Unknown error",
            payload.get("error_kind") or "store_error",
        )
