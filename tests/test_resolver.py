from locatorforge.config import ResolverPolicy
from locatorforge.models import CommandDetails, CommandResult, PlanStep, SelectorInfo, TieBreakProposal, TieBreakRequest
from locatorforge.resolver import SelectorResolver, find_stable_selector, resolve_plan_selectors
from playwright_fakes import FakePage

SIGN_UP = {"tag": "button", "text": "Sign up", "attributes": {"class": "btn"}}


class _FixedTieBreaker:
    def __init__(self, proposal: TieBreakProposal | None) -> None:
        self.proposal = proposal
        self.requests: list[TieBreakRequest] = []

    def propose_selector(self, request: TieBreakRequest) -> TieBreakProposal | None:
        self.requests.append(request)
        return self.proposal


class _BrokenTieBreaker:
    def propose_selector(self, request: TieBreakRequest) -> TieBreakProposal | None:
        raise RuntimeError("boom")


def test_unresolvable_xpath_falls_back_to_original() -> None:
    page = FakePage(attached=False)
    result = find_stable_selector(page, "xpath=//div[@id='gone']")
    assert result == SelectorInfo("xpath=//div[@id='gone']", "xpath", "low")
    assert page.probes == []


def test_attach_wait_uses_policy_timeout() -> None:
    page = FakePage(attached=False)
    SelectorResolver(ResolverPolicy(attach_timeout_ms=250)).resolve(page, "//div")
    assert page.waits == [(("xpath", "//div"), "attached", 250)]


def test_best_ranked_candidate_is_selected() -> None:
    page = FakePage(
        counts={("role", "button|Sign up"): 1, ("text", "Sign up"): 1},
        snapshot=SIGN_UP,
    )
    result = find_stable_selector(page, "//form/button")
    assert result == SelectorInfo("button|Sign up", "role", "high")


def test_early_return_skips_tie_break() -> None:
    page = FakePage(
        counts={("test-id", "signup"): 1},
        snapshot={"tag": "button", "attributes": {"data-testid": "signup"}},
    )
    tie_breaker = _FixedTieBreaker(TieBreakProposal(kind="css", selector=".btn", reliability="high"))
    result = find_stable_selector(page, "//form/button", tie_breaker=tie_breaker)
    assert result == SelectorInfo("signup", "test-id", "high")
    assert tie_breaker.requests == []


def test_unique_tie_break_proposal_is_accepted() -> None:
    page = FakePage(
        counts={("text", "Sign up"): 1, ("css", "form .btn"): 1},
        snapshot=SIGN_UP,
    )
    tie_breaker = _FixedTieBreaker(TieBreakProposal(kind="css", selector="form .btn", reliability="medium"))
    result = find_stable_selector(page, "//form/button", tie_breaker=tie_breaker)
    assert result == SelectorInfo("form .btn", "css", "medium")

    request = tie_breaker.requests[0]
    assert request.original_locator == "//form/button"
    assert [item.kind for item in request.ranked_candidates] == ["text", "xpath"]
    assert request.element_attributes == {"class": "btn"}


def test_non_unique_tie_break_proposal_is_rejected() -> None:
    page = FakePage(
        counts={("text", "Sign up"): 1, ("css", ".btn"): 4},
        snapshot=SIGN_UP,
    )
    tie_breaker = _FixedTieBreaker(TieBreakProposal(kind="css", selector=".btn", reliability="high"))
    result = find_stable_selector(page, "//form/button", tie_breaker=tie_breaker)
    assert result == SelectorInfo("Sign up", "text", "medium")


def test_failing_tie_breaker_uses_ranked_choice() -> None:
    page = FakePage(counts={("text", "Sign up"): 1}, snapshot=SIGN_UP)
    result = find_stable_selector(page, "//form/button", tie_breaker=_BrokenTieBreaker())
    assert result == SelectorInfo("Sign up", "text", "medium")


def test_no_stable_candidate_returns_xpath() -> None:
    page = FakePage(snapshot={"tag": "div"})
    assert find_stable_selector(page, "//div[3]") == SelectorInfo("//div[3]", "xpath", "low")


def test_unexpected_error_returns_xpath() -> None:
    page = FakePage(snapshot_error=RuntimeError("target closed"))
    assert find_stable_selector(page, "//div[3]") == SelectorInfo("//div[3]", "xpath", "low")


def _act_step(index: int, details: CommandDetails) -> PlanStep:
    return PlanStep(index=index, type="act", command=CommandResult(success=True, command_details=details))


def test_resolve_plan_selectors_attaches_selectors_to_act_steps() -> None:
    page = FakePage(counts={("role", "button|Sign up"): 1}, snapshot=SIGN_UP)
    goto = PlanStep(
        index=0,
        type="goto",
        command=CommandResult(success=True, command_details=CommandDetails(method="goto", url="https://example.com")),
    )
    click = _act_step(1, CommandDetails(method="click", xpath="//form/button"))
    already = _act_step(2, CommandDetails(method="click", xpath="//a", selector="Home", selector_kind="text"))

    resolved = resolve_plan_selectors(page, [goto, click, already])

    assert resolved[0] is goto
    assert resolved[2] is already
    details = resolved[1].details
    assert details is not None
    assert details.stable_selector == SelectorInfo("button|Sign up", "role", "high")
    assert details.xpath == "//form/button"
    assert click.details.selector is None
