from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .models import SelectorKind

DEFAULT_ATTACH_TIMEOUT_MS = 1000
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_CONDITIONAL_TIMEOUT_MS = 10000

TIMEOUT_VAR = "LOCATOR_WAIT_TIMEOUT"
CONDITIONAL_TIMEOUT_VAR = "LOCATOR_WAIT_TIMEOUT_CONDITIONAL"

TEST_ID_ATTRIBUTES: tuple[str, ...] = (
    "data-testid",
    "data-test-id",
    "data-qa",
    "data-cy",
    "data-e2e",
)

CSS_ATTRIBUTE_PRIORITY: tuple[str, ...] = (
    "data-testid",
    "data-test-id",
    "data-qa",
    "data-cy",
    "data-e2e",
    "id",
    "name",
    "aria-label",
    "role",
    "aria-role",
    "title",
    "placeholder",
    "alt",
)

KIND_PREFERENCE: tuple[SelectorKind, ...] = (
    "test-id",
    "role",
    "label",
    "placeholder",
    "alt-text",
    "title",
    "text",
    "css",
    "xpath",
)

LABELLED_TAGS: tuple[str, ...] = ("input", "select", "textarea")


@dataclass(frozen=True, slots=True)
class ResolverPolicy:
    attach_timeout_ms: int = DEFAULT_ATTACH_TIMEOUT_MS
    test_id_attributes: tuple[str, ...] = TEST_ID_ATTRIBUTES
    css_attributes: tuple[str, ...] = CSS_ATTRIBUTE_PRIORITY
    kind_preference: tuple[SelectorKind, ...] = KIND_PREFERENCE
    label_tags: tuple[str, ...] = LABELLED_TAGS
    max_text_length: int = 100

    def is_high_reliability_attribute(self, attr: str) -> bool:
        return attr == "id" or attr.startswith("data-test")


@dataclass(frozen=True, slots=True)
class EmitterOptions:
    test_name: str = "Automated Test"
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    conditional_timeout_ms: int = DEFAULT_CONDITIONAL_TIMEOUT_MS
    timeout_var: str = TIMEOUT_VAR
    conditional_timeout_var: str = CONDITIONAL_TIMEOUT_VAR
    variables: Mapping[str, Any] = field(default_factory=dict)

    def timeout_token(self, conditional: bool, *, named: bool) -> str:
        if named:
            return self.conditional_timeout_var if conditional else self.timeout_var
        return str(self.conditional_timeout_ms if conditional else self.timeout_ms)
