import os
import subprocess
import sys
import textwrap
import time
from pathlib import Path

from locatorforge.models import SelectorInfo, TieBreakProposal, TieBreakRequest
from locatorforge.tie_break import CallableTieBreaker, RankedTieBreaker, parse_tie_break_payload


def _request(*candidates: SelectorInfo) -> TieBreakRequest:
    return TieBreakRequest(
        original_locator="//form/button",
        ranked_candidates=candidates,
        element_html="<button>Save</button>",
        element_attributes={"class": "primary"},
    )


def test_ranked_tie_breaker_returns_top_candidate() -> None:
    proposal = RankedTieBreaker().propose_selector(
        _request(SelectorInfo("button|Save", "role", "high"), SelectorInfo("Save", "text", "medium"))
    )
    assert proposal is not None
    assert (proposal.kind, proposal.selector, proposal.reliability) == ("role", "button|Save", "high")


def test_ranked_tie_breaker_without_candidates() -> None:
    assert RankedTieBreaker().propose_selector(_request()) is None


def test_parse_tie_break_payload_accepts_type_alias() -> None:
    proposal = parse_tie_break_payload(
        {"type": "getByTestId", "selector": "save", "reliability": "high", "explanation": "stable"}
    )
    assert proposal == TieBreakProposal(kind="test-id", selector="save", reliability="high", explanation="stable")


def test_parse_tie_break_payload_rejects_malformed_values() -> None:
    assert parse_tie_break_payload(None) is None
    assert parse_tie_break_payload({"kind": "css", "selector": "", "reliability": "high"}) is None
    assert parse_tie_break_payload({"kind": "css", "selector": "#a", "reliability": "sure"}) is None
    assert parse_tie_break_payload({"kind": "shadow", "selector": "#a", "reliability": "high"}) is None


def test_callable_tie_breaker_sends_request_payload() -> None:
    seen: list[dict] = []

    def propose(payload: dict) -> dict:
        seen.append(payload)
        return {"kind": "css", "selector": "form .primary", "reliability": "medium"}

    proposal = CallableTieBreaker(propose).propose_selector(_request(SelectorInfo("Save", "text", "medium")))
    assert proposal is not None
    assert proposal.selector == "form .primary"
    assert seen[0]["originalLocator"] == "//form/button"
    assert seen[0]["rankedCandidates"] == [{"selector": "Save", "kind": "text", "reliability": "medium"}]


def test_callable_tie_breaker_swallows_errors_and_timeouts() -> None:
    def explode(_payload: dict) -> dict:
        raise RuntimeError("service unavailable")

    def slow(_payload: dict) -> dict:
        time.sleep(0.5)
        return {"kind": "css", "selector": "#a", "reliability": "high"}

    assert CallableTieBreaker(explode).propose_selector(_request()) is None
    assert CallableTieBreaker(slow, timeout_s=0.05).propose_selector(_request()) is None
    assert CallableTieBreaker(lambda _payload: {"selector": "#a"}).propose_selector(_request()) is None


def test_timed_out_suggestion_does_not_delay_interpreter_exit() -> None:
    source = textwrap.dedent(
        """
        import time
        from locatorforge.models import TieBreakRequest
        from locatorforge.tie_break import CallableTieBreaker

        request = TieBreakRequest(original_locator="//a", ranked_candidates=())
        breaker = CallableTieBreaker(lambda _payload: time.sleep(4), timeout_s=0.1)
        assert breaker.propose_selector(request) is None
        """
    )
    src_dir = Path(__file__).resolve().parents[1] / "src"
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [str(src_dir), os.environ.get("PYTHONPATH")]))}

    started = time.monotonic()
    completed = subprocess.run([sys.executable, "-c", source], env=env, capture_output=True, text=True, timeout=30)
    elapsed = time.monotonic() - started

    assert completed.returncode == 0, completed.stderr
    assert elapsed < 3
