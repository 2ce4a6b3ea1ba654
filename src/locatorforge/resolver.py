from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Iterable

from .config import ResolverPolicy
from .locator_generator import CandidateGeneration, generate_selector_candidates
from .models import PlanStep, SelectorInfo, TieBreakRequest
from .scoring import rank_candidates
from .selector_rules import strip_xpath_prefix
from .tie_break import RankedTieBreaker, SelectorTieBreaker
from .validation import is_selector_unique

if TYPE_CHECKING:
    from playwright.sync_api import Page

logger = logging.getLogger(__name__)


class SelectorResolver:
    """Finds the most durable selector for an element addressed by XPath.

    Resolution never raises: every failure path ends in the original XPath
    with low reliability.
    """

    def __init__(
        self,
        policy: ResolverPolicy | None = None,
        tie_breaker: SelectorTieBreaker | None = None,
    ) -> None:
        self.policy = policy or ResolverPolicy()
        self.tie_breaker = tie_breaker
        self._default_choice = RankedTieBreaker()

    def resolve(self, page: Page, xpath: str) -> SelectorInfo:
        try:
            return self._resolve(page, xpath)
        except Exception:
            logger.warning("Error finding stable selector for %s", xpath, exc_info=True)
            return SelectorInfo.xpath_fallback(xpath)

    def _resolve(self, page: Page, xpath: str) -> SelectorInfo:
        cleaned = strip_xpath_prefix(xpath)
        if not cleaned:
            return SelectorInfo.xpath_fallback(xpath)

        element = page.locator(f"xpath={cleaned}").first
        try:
            element.wait_for(state="attached", timeout=self.policy.attach_timeout_ms)
        except Exception:
            logger.warning("Original XPath did not resolve, returning as is: %s", xpath)
            return SelectorInfo.xpath_fallback(xpath)

        generation = generate_selector_candidates(page, element, xpath, self.policy)
        if generation.early_return is not None:
            logger.debug(
                "Selected %s selector %r for %s without ranking",
                generation.early_return.kind,
                generation.early_return.selector,
                xpath,
            )
            return generation.early_return

        ranked = rank_candidates(generation.candidates, self.policy.kind_preference)
        request = _build_request(xpath, ranked, generation)

        if self.tie_breaker is not None:
            suggested = self._try_tie_break(page, request)
            if suggested is not None:
                return suggested

        return self._choose_final(request, xpath)

    def _try_tie_break(self, page: Page, request: TieBreakRequest) -> SelectorInfo | None:
        try:
            proposal = self.tie_breaker.propose_selector(request)  # type: ignore[union-attr]
        except Exception:
            logger.warning("Selector tie-break failed for %s", request.original_locator, exc_info=True)
            return None

        if proposal is None:
            return None
        if not is_selector_unique(page, proposal.selector, proposal.kind):
            logger.debug(
                "Suggested %s selector %r is not unique, rejecting",
                proposal.kind,
                proposal.selector,
            )
            return None

        logger.debug(
            "Using suggested %s selector %r for %s: %s",
            proposal.kind,
            proposal.selector,
            request.original_locator,
            proposal.explanation or "no explanation provided",
        )
        return proposal.to_selector_info()

    def _choose_final(self, request: TieBreakRequest, xpath: str) -> SelectorInfo:
        proposal = self._default_choice.propose_selector(request)
        if proposal is None:
            logger.warning("No stable selector found, using original XPath: %s", xpath)
            return SelectorInfo.xpath_fallback(xpath)

        chosen = proposal.to_selector_info()
        logger.info(
            "Selected %s selector with %s reliability for %s (candidates: %s)",
            chosen.kind,
            chosen.reliability,
            xpath,
            ", ".join(f"{item.kind}={item.selector!r}/{item.reliability}" for item in request.ranked_candidates),
        )
        return chosen


def _build_request(xpath: str, ranked: list[SelectorInfo], generation: CandidateGeneration) -> TieBreakRequest:
    return TieBreakRequest(
        original_locator=xpath,
        ranked_candidates=tuple(ranked),
        element_html=generation.snapshot.outer_html,
        element_attributes=dict(generation.snapshot.attributes),
    )


def find_stable_selector(
    page: Page,
    xpath: str,
    tie_breaker: SelectorTieBreaker | None = None,
    policy: ResolverPolicy | None = None,
) -> SelectorInfo:
    return SelectorResolver(policy=policy, tie_breaker=tie_breaker).resolve(page, xpath)


def resolve_plan_selectors(
    page: Page,
    steps: Iterable[PlanStep],
    resolver: SelectorResolver | None = None,
) -> list[PlanStep]:
    active = resolver or SelectorResolver()
    resolved: list[PlanStep] = []
    for step in steps:
        resolved.append(_attach_selector(page, step, active))
    return resolved


def _attach_selector(page: Page, step: PlanStep, resolver: SelectorResolver) -> PlanStep:
    if step.type not in {"act", "assert"} or step.command is None:
        return step
    details = step.details
    if details is None or not details.xpath or details.method == "goto":
        return step
    attached = details.stable_selector
    if attached is not None and attached.kind != "xpath":
        return step

    info = resolver.resolve(page, details.xpath)
    updated_details = replace(
        details,
        selector=info.selector,
        selector_kind=info.kind,
        selector_reliability=info.reliability,
    )
    return replace(step, command=replace(step.command, command_details=updated_details))
