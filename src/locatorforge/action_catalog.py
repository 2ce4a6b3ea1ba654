from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ActionArgument = Literal["none", "args"]
AssertionArgument = Literal["none", "value", "count", "pair", "values"]
AssertionTarget = Literal["page", "element"]


@dataclass(frozen=True, slots=True)
class ActionSpec:
    key: str
    call: str
    argument: ActionArgument
    description: str


@dataclass(frozen=True, slots=True)
class AssertionSpec:
    key: str
    matcher: str
    argument: AssertionArgument
    target: AssertionTarget = "element"


ACTION_CATALOG: tuple[ActionSpec, ...] = (
    ActionSpec(key="click", call="click", argument="none", description="Clicks the element."),
    ActionSpec(key="type", call="fill", argument="args", description="Types text by filling the field."),
    ActionSpec(key="fill", call="fill", argument="args", description="Fills the field."),
    ActionSpec(key="selectOption", call="selectOption", argument="args", description="Selects option(s)."),
    ActionSpec(key="check", call="check", argument="none", description="Checks a checkbox or radio."),
    ActionSpec(key="uncheck", call="uncheck", argument="none", description="Unchecks a checkbox."),
)

ASSERTION_CATALOG: tuple[AssertionSpec, ...] = (
    AssertionSpec(key="url", matcher="toHaveURL", argument="value", target="page"),
    AssertionSpec(key="title", matcher="toHaveTitle", argument="value", target="page"),
    AssertionSpec(key="toBeVisible", matcher="toBeVisible", argument="none"),
    AssertionSpec(key="toBeHidden", matcher="toBeHidden", argument="none"),
    AssertionSpec(key="toBeEnabled", matcher="toBeEnabled", argument="none"),
    AssertionSpec(key="toBeDisabled", matcher="toBeDisabled", argument="none"),
    AssertionSpec(key="toBeChecked", matcher="toBeChecked", argument="none"),
    AssertionSpec(key="toBeAttached", matcher="toBeAttached", argument="none"),
    AssertionSpec(key="toBeEmpty", matcher="toBeEmpty", argument="none"),
    AssertionSpec(key="toBeFocused", matcher="toBeFocused", argument="none"),
    AssertionSpec(key="toBeInViewport", matcher="toBeInViewport", argument="none"),
    AssertionSpec(key="toHaveText", matcher="toHaveText", argument="value"),
    AssertionSpec(key="toHaveValue", matcher="toHaveValue", argument="value"),
    AssertionSpec(key="toHaveClass", matcher="toHaveClass", argument="value"),
    AssertionSpec(key="toHaveId", matcher="toHaveId", argument="value"),
    AssertionSpec(key="toHaveRole", matcher="toHaveRole", argument="value"),
    AssertionSpec(key="toHaveScreenshot", matcher="toHaveScreenshot", argument="value"),
    AssertionSpec(key="toHaveAttribute", matcher="toHaveAttribute", argument="pair"),
    AssertionSpec(key="toHaveCSS", matcher="toHaveCSS", argument="pair"),
    AssertionSpec(key="toHaveCount", matcher="toHaveCount", argument="count"),
    AssertionSpec(key="toHaveValues", matcher="toHaveValues", argument="values"),
)

_ACTIONS_BY_KEY = {item.key: item for item in ACTION_CATALOG}
_ASSERTIONS_BY_KEY = {item.key: item for item in ASSERTION_CATALOG}


def action_spec(method: str) -> ActionSpec:
    spec = _ACTIONS_BY_KEY.get(method)
    if spec is not None:
        return spec
    return ActionSpec(key=method, call=method, argument="args", description=f"Calls {method} on the element.")


def assertion_spec(method: str, target: AssertionTarget = "element") -> AssertionSpec | None:
    spec = _ASSERTIONS_BY_KEY.get(method)
    if spec is None or spec.target != target:
        return None
    return spec


def supported_assertions(target: AssertionTarget = "element") -> list[str]:
    return [item.key for item in ASSERTION_CATALOG if item.target == target]
