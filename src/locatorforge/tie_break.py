from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol

from .models import TieBreakProposal, TieBreakRequest, normalize_reliability, normalize_selector_kind

logger = logging.getLogger(__name__)

ProposalCallable = Callable[[dict[str, Any]], Mapping[str, Any] | None]


class SelectorTieBreaker(Protocol):
    def propose_selector(self, request: TieBreakRequest) -> TieBreakProposal | None:
        ...


class RankedTieBreaker:
    """Deterministic strategy: the best ranked candidate wins."""

    def propose_selector(self, request: TieBreakRequest) -> TieBreakProposal | None:
        if not request.ranked_candidates:
            return None
        best = request.ranked_candidates[0]
        return TieBreakProposal(
            kind=best.kind,
            selector=best.selector,
            reliability=best.reliability,
            explanation=f"Top ranked {best.kind} candidate with {best.reliability} reliability.",
        )


@dataclass(slots=True)
class CallableTieBreaker:
    """Adapts an external suggestion service to the tie-break interface.

    ``propose`` receives the request payload (``originalLocator``,
    ``rankedCandidates``, ``elementHtml``, ``elementAttributes``) and returns a
    mapping with ``kind`` (or ``type``), ``selector``, ``reliability`` and
    ``explanation``. Timeouts, errors and malformed responses all yield ``None``.
    """

    propose: ProposalCallable
    timeout_s: float | None = 30.0

    def propose_selector(self, request: TieBreakRequest) -> TieBreakProposal | None:
        payload = request.to_payload()
        try:
            response = self._call(payload)
        except TimeoutError:
            logger.warning("Selector suggestion timed out after %.1fs", self.timeout_s or 0.0)
            return None
        except Exception:
            logger.warning("Selector suggestion failed", exc_info=True)
            return None

        proposal = parse_tie_break_payload(response)
        if proposal is None:
            logger.warning("Selector suggestion response was malformed: %r", response)
        return proposal

    def _call(self, payload: dict[str, Any]) -> Mapping[str, Any] | None:
        if not self.timeout_s:
            return self.propose(payload)

        # daemon worker: an unanswered suggestion must not hold interpreter exit
        outcome: dict[str, Any] = {}

        def run() -> None:
            try:
                outcome["response"] = self.propose(payload)
            except Exception as exc:
                outcome["error"] = exc

        worker = threading.Thread(target=run, name="selector-tie-break", daemon=True)
        worker.start()
        worker.join(self.timeout_s)
        if worker.is_alive():
            raise TimeoutError(f"selector suggestion exceeded {self.timeout_s}s")
        if "error" in outcome:
            raise outcome["error"]
        return outcome.get("response")


def parse_tie_break_payload(payload: Any) -> TieBreakProposal | None:
    if not isinstance(payload, Mapping):
        return None

    kind = normalize_selector_kind(payload.get("kind", payload.get("type")))
    selector = payload.get("selector")
    reliability = normalize_reliability(payload.get("reliability"))
    if kind is None or reliability is None:
        return None
    if not isinstance(selector, str) or not selector.strip():
        return None

    explanation = payload.get("explanation")
    return TieBreakProposal(
        kind=kind,
        selector=selector,
        reliability=reliability,
        explanation=str(explanation) if explanation else "",
    )
