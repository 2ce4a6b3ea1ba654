from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .config import ResolverPolicy
from .dom_extractor import extract_element_snapshot, resolve_accessible_name
from .models import ElementSnapshot, Reliability, SelectorInfo, SelectorKind
from .selector_rules import build_css_attribute_selector, implicit_role, join_role_selector
from .validation import is_selector_unique

if TYPE_CHECKING:
    from playwright.sync_api import Locator, Page

logger = logging.getLogger(__name__)

ATTRIBUTE_KIND_TIERS: tuple[tuple[str, SelectorKind], ...] = (
    ("placeholder", "placeholder"),
    ("alt", "alt-text"),
    ("title", "title"),
)


@dataclass(slots=True)
class CandidateGeneration:
    candidates: list[SelectorInfo]
    snapshot: ElementSnapshot
    early_return: SelectorInfo | None = None


@dataclass(slots=True)
class CandidateFactory:
    page: Page
    xpath: str
    snapshot: ElementSnapshot
    policy: ResolverPolicy = field(default_factory=ResolverPolicy)
    _candidates: list[SelectorInfo] = field(default_factory=list)

    def generate(self) -> CandidateGeneration:
        early = self._add_test_id_strategy() or self._add_label_strategy()
        if early is not None:
            return CandidateGeneration(list(self._candidates), self.snapshot, early_return=early)

        self._add_role_strategies()
        self._add_text_strategy()
        self._add_attribute_kind_strategies()
        self._add_css_attribute_strategies()
        self._candidates.append(SelectorInfo.xpath_fallback(self.xpath))
        return CandidateGeneration(list(self._candidates), self.snapshot)

    def _unique(self, selector: str, kind: SelectorKind) -> bool:
        return is_selector_unique(self.page, selector, kind)

    def _add(self, selector: str, kind: SelectorKind, reliability: Reliability) -> None:
        self._candidates.append(SelectorInfo.create(selector, kind, reliability))

    def _add_test_id_strategy(self) -> SelectorInfo | None:
        for attr in self.policy.test_id_attributes:
            value = self.snapshot.attr(attr)
            if not value:
                continue

            if attr == "data-testid":
                selector, kind = value, "test-id"
            else:
                selector, kind = build_css_attribute_selector(attr, value), "css"

            if self._unique(selector, kind):
                logger.debug("Found %s selector from %s for %s", kind, attr, self.xpath)
                return SelectorInfo.create(selector, kind, "high")
            self._add(selector, kind, "medium")
            return None
        return None

    def _add_label_strategy(self) -> SelectorInfo | None:
        if self.snapshot.tag not in self.policy.label_tags:
            return None
        label = self.snapshot.label_text()
        if label and self._unique(label, "label"):
            logger.debug("Found label selector %r for %s", label, self.xpath)
            return SelectorInfo.create(label, "label", "high")
        return None

    def _add_role_strategies(self) -> None:
        role = self.snapshot.explicit_role or implicit_role(self.snapshot.tag, self.snapshot.input_type)
        if not role:
            return

        accessible_name = resolve_accessible_name(self.snapshot)
        if accessible_name:
            selector = join_role_selector(role, accessible_name)
            if self._unique(selector, "role"):
                self._add(selector, "role", "high")
        elif self._unique(role, "role"):
            self._add(role, "role", "medium")

        aria_label = self.snapshot.attr("aria-label")
        if aria_label:
            selector = join_role_selector(role, aria_label)
            if self._unique(selector, "role"):
                self._add(selector, "role", "high")

    def _add_text_strategy(self) -> None:
        text = self.snapshot.text
        if text and len(text) < self.policy.max_text_length and self._unique(text, "text"):
            self._add(text, "text", "medium")

    def _add_attribute_kind_strategies(self) -> None:
        for attr, kind in ATTRIBUTE_KIND_TIERS:
            value = self.snapshot.attr(attr)
            if value and self._unique(value, kind):
                self._add(value, kind, "high")

    def _add_css_attribute_strategies(self) -> None:
        for attr in self.policy.css_attributes:
            value = self.snapshot.attr(attr)
            if not value:
                continue
            selector = build_css_attribute_selector(attr, value)
            if self._unique(selector, "css"):
                reliability: Reliability = "high" if self.policy.is_high_reliability_attribute(attr) else "medium"
                self._add(selector, "css", reliability)


def generate_selector_candidates(
    page: Page,
    element: Locator,
    xpath: str,
    policy: ResolverPolicy | None = None,
) -> CandidateGeneration:
    snapshot = extract_element_snapshot(element)
    factory = CandidateFactory(page=page, xpath=xpath, snapshot=snapshot, policy=policy or ResolverPolicy())
    return factory.generate()
