from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from .models import SelectorInfo, SelectorKind
from .selector_rules import split_role_selector, strip_xpath_prefix

if TYPE_CHECKING:
    from playwright.sync_api import Locator, Page

logger = logging.getLogger(__name__)


def _role_locator(page: Page, selector: str) -> Locator:
    role, name = split_role_selector(selector)
    if name:
        return page.get_by_role(role, name=name)  # type: ignore[arg-type]
    return page.get_by_role(role)  # type: ignore[arg-type]


LOCATOR_FACTORIES: dict[SelectorKind, Callable[[Page, str], Locator]] = {
    "test-id": lambda page, selector: page.get_by_test_id(selector),
    "role": _role_locator,
    "label": lambda page, selector: page.get_by_label(selector),
    "placeholder": lambda page, selector: page.get_by_placeholder(selector),
    "alt-text": lambda page, selector: page.get_by_alt_text(selector),
    "title": lambda page, selector: page.get_by_title(selector),
    "text": lambda page, selector: page.get_by_text(selector),
    "css": lambda page, selector: page.locator(selector),
    "xpath": lambda page, selector: page.locator(f"xpath={strip_xpath_prefix(selector)}"),
}


def build_locator(page: Page, selector: str, kind: SelectorKind) -> Locator:
    factory = LOCATOR_FACTORIES.get(kind)
    if factory is None:
        raise ValueError(f"Unsupported selector kind: {kind}")
    return factory(page, selector)


def count_selector_matches(page: Page, selector: str, kind: SelectorKind) -> int:
    text = str(selector or "").strip()
    if not text or kind not in LOCATOR_FACTORIES:
        return 0
    try:
        return int(build_locator(page, selector, kind).count())
    except Exception as exc:
        logger.debug("Selector probe failed for %s %r: %s", kind, selector, exc)
        return 0


def is_selector_unique(page: Page, selector: str, kind: SelectorKind) -> bool:
    return count_selector_matches(page, selector, kind) == 1


def create_stable_locator(page: Page, info: SelectorInfo) -> Locator:
    kind = info.kind if info.kind in LOCATOR_FACTORIES else "css"
    return build_locator(page, info.selector, kind).first
