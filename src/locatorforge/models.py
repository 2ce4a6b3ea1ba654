from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, get_args

SelectorKind = Literal[
    "test-id",
    "role",
    "label",
    "placeholder",
    "alt-text",
    "title",
    "text",
    "css",
    "xpath",
]
Reliability = Literal["high", "medium", "low"]
StepType = Literal["act", "assert", "goto"]

SELECTOR_KINDS: tuple[SelectorKind, ...] = get_args(SelectorKind)
RELIABILITIES: tuple[Reliability, ...] = get_args(Reliability)
STEP_TYPES: tuple[StepType, ...] = get_args(StepType)

# Recorded plans store the Playwright method name instead of the kind.
SELECTOR_KIND_ALIASES: dict[str, SelectorKind] = {
    "getbytestid": "test-id",
    "getbyrole": "role",
    "getbylabel": "label",
    "getbyplaceholder": "placeholder",
    "getbyalttext": "alt-text",
    "getbytitle": "title",
    "getbytext": "text",
    "testid": "test-id",
    "test_id": "test-id",
    "alt": "alt-text",
    "alt_text": "alt-text",
}


class PlanPayloadError(ValueError):
    """Raised when a recorded plan payload cannot be turned into plan steps."""


def normalize_selector_kind(raw: Any) -> SelectorKind | None:
    text = str(raw or "").strip()
    if not text:
        return None
    if text in SELECTOR_KINDS:
        return text  # type: ignore[return-value]
    lowered = text.lower()
    if lowered in SELECTOR_KINDS:
        return lowered  # type: ignore[return-value]
    return SELECTOR_KIND_ALIASES.get(lowered)


def normalize_reliability(raw: Any) -> Reliability | None:
    text = str(raw or "").strip().lower()
    if text in RELIABILITIES:
        return text  # type: ignore[return-value]
    return None


@dataclass(frozen=True, slots=True)
class SelectorInfo:
    selector: str
    kind: SelectorKind
    reliability: Reliability

    @classmethod
    def create(cls, selector: str, kind: SelectorKind, reliability: Reliability) -> SelectorInfo:
        # xpath never earns more than low reliability
        if kind == "xpath":
            reliability = "low"
        return cls(selector=selector, kind=kind, reliability=reliability)

    @classmethod
    def xpath_fallback(cls, xpath: str) -> SelectorInfo:
        return cls(selector=xpath, kind="xpath", reliability="low")

    def to_payload(self) -> dict[str, str]:
        return {"selector": self.selector, "kind": self.kind, "reliability": self.reliability}


@dataclass(slots=True)
class ElementSnapshot:
    tag: str
    input_type: str | None = None
    explicit_role: str | None = None
    text: str = ""
    text_content: str | None = None
    outer_html: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    value: str | None = None
    label_for_text: str | None = None
    ancestor_label_text: str | None = None
    labelledby_texts: list[str] = field(default_factory=list)

    def attr(self, key: str) -> str | None:
        raw = self.attributes.get(key)
        if raw is None:
            return None
        value = str(raw)
        return value if value.strip() else None

    def label_text(self) -> str | None:
        for value in (self.label_for_text, self.ancestor_label_text):
            text = (value or "").strip()
            if text:
                return text
        return None


@dataclass(frozen=True, slots=True)
class CommandDetails:
    method: str
    xpath: str | None = None
    args: Any = None
    value: Any = None
    url: str | None = None
    selector: str | None = None
    selector_kind: SelectorKind | None = None
    selector_reliability: Reliability | None = None

    @property
    def stable_selector(self) -> SelectorInfo | None:
        if not self.selector or not self.selector_kind:
            return None
        return SelectorInfo.create(self.selector, self.selector_kind, self.selector_reliability or "medium")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CommandDetails:
        if not isinstance(payload, Mapping):
            raise PlanPayloadError("commandDetails must be an object.")
        method = str(payload.get("method") or "").strip()
        if not method:
            raise PlanPayloadError("commandDetails.method is required.")

        kind_raw = payload.get("selectorType", payload.get("selector_kind", payload.get("kind")))
        selector_kind = normalize_selector_kind(kind_raw)
        if kind_raw and selector_kind is None:
            raise PlanPayloadError(f"Unknown selector type: {kind_raw}")

        xpath = payload.get("xpath")
        selector = payload.get("selector")
        url = payload.get("url")
        return cls(
            method=method,
            xpath=str(xpath) if xpath else None,
            args=payload.get("args"),
            value=payload.get("value"),
            url=str(url) if url else None,
            selector=str(selector) if selector else None,
            selector_kind=selector_kind,
            selector_reliability=normalize_reliability(
                payload.get("selectorReliability", payload.get("selector_reliability"))
            ),
        )


@dataclass(frozen=True, slots=True)
class CommandResult:
    success: bool
    command_details: CommandDetails | None = None
    message: str = ""
    action: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CommandResult:
        if not isinstance(payload, Mapping):
            raise PlanPayloadError("command must be an object.")
        raw_details = payload.get("commandDetails", payload.get("command_details"))
        details = CommandDetails.from_payload(raw_details) if raw_details else None
        return cls(
            success=bool(payload.get("success")),
            command_details=details,
            message=str(payload.get("message") or ""),
            action=str(payload.get("action") or ""),
        )


@dataclass(frozen=True, slots=True)
class PlanStep:
    index: int
    type: StepType
    description: str = ""
    conditional: bool = False
    command: CommandResult | None = None

    @property
    def details(self) -> CommandDetails | None:
        if self.command is None:
            return None
        return self.command.command_details

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], position: int) -> PlanStep:
        if not isinstance(payload, Mapping):
            raise PlanPayloadError(f"Step {position + 1} must be an object.")
        step_type = str(payload.get("type") or "").strip()
        if step_type not in STEP_TYPES:
            raise PlanPayloadError(f"Step {position + 1} has unsupported type: {step_type or '<missing>'}")

        raw_index = payload.get("index", position)
        try:
            index = int(raw_index)
        except (TypeError, ValueError) as exc:
            raise PlanPayloadError(f"Step {position + 1} has invalid index: {raw_index!r}") from exc

        conditional = payload.get("conditional")
        if conditional is None:
            conditional = False
        elif not isinstance(conditional, bool):
            raise PlanPayloadError(f"Step {position + 1} has non-boolean conditional: {conditional!r}")

        raw_command = payload.get("command")
        return cls(
            index=index,
            type=step_type,  # type: ignore[arg-type]
            description=str(payload.get("description") or ""),
            conditional=conditional,
            command=CommandResult.from_payload(raw_command) if raw_command else None,
        )


def parse_plan_steps(payload: Any) -> list[PlanStep]:
    raw_steps = payload.get("steps") if isinstance(payload, Mapping) else payload
    if not isinstance(raw_steps, list):
        raise PlanPayloadError("Plan must be a list of steps or an object with a 'steps' list.")
    steps = [PlanStep.from_payload(item, position) for position, item in enumerate(raw_steps)]
    seen: set[int] = set()
    for step in steps:
        if step.index in seen:
            raise PlanPayloadError(f"Duplicate step index: {step.index}")
        seen.add(step.index)
    return steps


@dataclass(frozen=True, slots=True)
class TieBreakRequest:
    original_locator: str
    ranked_candidates: tuple[SelectorInfo, ...]
    element_html: str = ""
    element_attributes: Mapping[str, str] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return {
            "originalLocator": self.original_locator,
            "rankedCandidates": [item.to_payload() for item in self.ranked_candidates],
            "elementHtml": self.element_html,
            "elementAttributes": dict(self.element_attributes),
        }


@dataclass(frozen=True, slots=True)
class TieBreakProposal:
    kind: SelectorKind
    selector: str
    reliability: Reliability
    explanation: str = ""

    def to_selector_info(self) -> SelectorInfo:
        return SelectorInfo.create(self.selector, self.kind, self.reliability)
