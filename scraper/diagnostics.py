from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class DiagnosticStep:
    label: str
    ok: bool
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"label": self.label, "ok": self.ok}
        if self.details is not None:
            payload["details"] = self.details
        return payload


@dataclass
class Diagnostics:
    """Ordered record of what happened during one scrape attempt.

    Steps are appended in call order and never removed. Once an attempt has
    finished the object is treated as read-only; `chained` derives a new
    snapshot instead of mutating it.
    """

    source_url: str
    steps: List[DiagnosticStep] = field(default_factory=list)
    cards_found: int = 0
    complete_results: int = 0
    http_status: Optional[int] = None
    used_fallback: Optional[bool] = None
    errors: List[str] = field(default_factory=list)

    def add_step(self, label: str, ok: bool, details: Optional[str] = None) -> None:
        self.steps.append(DiagnosticStep(label=label, ok=ok, details=details))

    def fail(self, label: str, error: BaseException | str) -> None:
        message = str(error)
        self.errors.append(message)
        self.add_step(label, False, message)

    def chained(self, label: str, ok: bool, details: Optional[str] = None, **updates: Any) -> "Diagnostics":
        snapshot = copy.deepcopy(self)
        for key, value in updates.items():
            setattr(snapshot, key, value)
        snapshot.add_step(label, ok, details)
        return snapshot

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "steps": [step.to_dict() for step in self.steps],
            "counts": {
                "cardsFound": self.cards_found,
                "completeResults": self.complete_results,
            },
            "sourceUrl": self.source_url,
            "errors": list(self.errors),
        }
        if self.http_status is not None:
            payload["httpStatus"] = self.http_status
        if self.used_fallback is not None:
            payload["usedFallback"] = self.used_fallback
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
