from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Sequence

from .action_catalog import AssertionSpec, action_spec, assertion_spec
from .config import EmitterOptions
from .formatting import (
    format_args,
    format_array,
    format_number,
    format_selector,
    format_variable_declaration,
    quote_literal,
    stable_selector_to_code,
)
from .models import CommandDetails, CommandResult, PlanStep
from .selector_rules import normalize_space

logger = logging.getLogger(__name__)

PLAYWRIGHT_IMPORT = "import { test, expect } from '@playwright/test';"
INDENT = "  "


def act_command_to_code(details: CommandDetails, timeout: str, step_number: int = 0) -> list[str]:
    method = details.method
    if method == "goto":
        return goto_command_to_code(details)

    locator_var = f"locator_step{step_number}_{_identifier_fragment(method)}"
    locator_lines = _locator_lines(details, locator_var, timeout)
    if locator_lines is None:
        return [f"// Step {step_number + 1}: No locator recorded for {method}"]

    spec = action_spec(method)
    arguments = "" if spec.argument == "none" else _format_call_args(details.args)
    return [*locator_lines, f"await {locator_var}.{spec.call}({arguments});"]


def assert_command_to_code(details: CommandDetails, timeout: str, step_number: int = 0) -> list[str]:
    method = details.method
    value = details.value

    if not details.xpath and details.stable_selector is None:
        page_spec = assertion_spec(method, target="page")
        if page_spec is None:
            return [f"// Unsupported assertion: {method}"]
        return [f"await expect(page).{page_spec.matcher}({format_args(value)});"]

    spec = assertion_spec(method)
    if spec is None:
        return [f"// Unsupported assertion: {method}"]

    arguments = _assertion_arguments(spec, value)
    if arguments is None:
        return [f"// Invalid assertion parameters for: {method}"]

    locator_var = f"locator_step{step_number}_assert"
    locator_lines = _locator_lines(details, locator_var, timeout)
    if locator_lines is None:
        return [f"// Unsupported assertion: {method}"]

    options = f"{{ timeout: {timeout} }}"
    rendered = ", ".join([*arguments, options])
    return [*locator_lines, f"await expect({locator_var}).{spec.matcher}({rendered});"]


def goto_command_to_code(details: CommandDetails | None) -> list[str]:
    target = _navigation_target(details)
    if target is None:
        return ["// Goto command details not found or step failed"]
    return [f"await page.goto({target});"]


def generate_test_script(
    steps: Sequence[PlanStep],
    act_results: Mapping[int, CommandResult],
    assert_results: Mapping[int, CommandResult],
    options: EmitterOptions | None = None,
) -> str:
    opts = options or EmitterOptions()
    lines: list[str] = [
        PLAYWRIGHT_IMPORT,
        "// Timeout for waiting for elements to be present (in milliseconds)",
        f"const {opts.timeout_var} = {format_number(opts.timeout_ms)};",
        f"const {opts.conditional_timeout_var} = {format_number(opts.conditional_timeout_ms)};",
        "",
    ]
    lines.extend(_variable_lines(opts.variables))
    lines.append(f"test({quote_literal(opts.test_name)}, async ({{ page }}) => {{")

    for step in steps:
        step_label = f"Step {step.index + 1}: {step.description}"
        body = _step_body(step, act_results, assert_results, opts, named=True)
        if step.type == "goto":
            body.insert(0, f"// Step {step.index + 1}: Navigation - {_comment_text(step.description)}")
        if step.conditional:
            body = _wrap_conditional(body)

        lines.append(f"{INDENT}await test.step({quote_literal(step_label)}, async () => {{")
        lines.extend(_indent(body, 2))
        lines.append(f"{INDENT}}});")

    lines.append("});")
    return "\n".join(lines) + "\n"


def convert_plan_to_test(steps: Sequence[PlanStep], options: EmitterOptions | None = None) -> str:
    act_results, assert_results = collect_command_results(steps)
    return generate_test_script(steps, act_results, assert_results, options)


def convert_plan_to_raw_code(steps: Sequence[PlanStep], options: EmitterOptions | None = None) -> str:
    opts = options or EmitterOptions()
    act_results, assert_results = collect_command_results(steps)

    lines: list[str] = list(_variable_lines(opts.variables))
    for step in steps:
        lines.append(f"// Step {step.index + 1}: {_comment_text(step.description)}")
        body = _step_body(step, act_results, assert_results, opts, named=False)
        if step.type == "goto":
            body.insert(0, f"// Navigation command - {_comment_text(step.description)}")
        if step.conditional:
            body = _wrap_conditional(body)
        lines.extend(body)
        lines.append("")
    return "\n".join(lines) + ("\n" if lines else "")


def collect_command_results(
    steps: Sequence[PlanStep],
) -> tuple[dict[int, CommandResult], dict[int, CommandResult]]:
    act_results: dict[int, CommandResult] = {}
    assert_results: dict[int, CommandResult] = {}
    for step in steps:
        if step.command is None:
            continue
        if step.index in act_results or step.index in assert_results:
            logger.warning("Duplicate step index %s, keeping the first recorded command", step.index)
            continue
        if step.type == "act":
            act_results[step.index] = step.command
        elif step.type == "assert":
            assert_results[step.index] = step.command
    return act_results, assert_results


def _step_body(
    step: PlanStep,
    act_results: Mapping[int, CommandResult],
    assert_results: Mapping[int, CommandResult],
    options: EmitterOptions,
    *,
    named: bool,
) -> list[str]:
    timeout = options.timeout_token(step.conditional, named=named)
    try:
        if step.type == "act":
            result = act_results.get(step.index)
            if result is None or not result.success or result.command_details is None:
                return [f"// Step {step.index + 1}: Action could not be converted to code"]
            return act_command_to_code(result.command_details, timeout, step.index)

        if step.type == "assert":
            result = assert_results.get(step.index)
            if result is None or not result.success or result.command_details is None:
                return [f"// Step {step.index + 1}: Assertion could not be converted to code"]
            return assert_command_to_code(result.command_details, timeout, step.index)

        if step.type == "goto":
            command = step.command
            if command is None or not command.success:
                return goto_command_to_code(None)
            return goto_command_to_code(command.command_details)
    except Exception:
        logger.warning("Could not generate code for step %s", step.index + 1, exc_info=True)
        return [f"// Step {step.index + 1}: Code generation failed"]

    return [f"// Step {step.index + 1}: Unsupported step type: {step.type}"]


def _locator_lines(details: CommandDetails, locator_var: str, timeout: str) -> list[str] | None:
    stable = details.stable_selector
    if stable is not None and stable.kind != "xpath":
        expression = stable_selector_to_code(stable.selector, stable.kind)
    elif details.xpath:
        expression = f"page.locator({format_selector(details.xpath)})"
    elif stable is not None:
        expression = f"page.locator({format_selector(stable.selector)})"
    else:
        return None
    return [
        f"const {locator_var} = {expression};",
        f"await {locator_var}.waitFor({{ state: 'visible', timeout: {timeout} }});",
    ]


def _assertion_arguments(spec: AssertionSpec, value: Any) -> list[str] | None:
    if spec.argument == "none":
        return []
    if spec.argument == "value":
        return [format_args(value)]
    if spec.argument == "values":
        return [format_array(value)]
    if spec.argument == "count":
        count = _parse_count(value)
        return None if count is None else [format_number(count)]
    pair = _parse_pair(value)
    if pair is None:
        return None
    name, expected = pair
    return [quote_literal(name), format_args(expected)]


def _parse_count(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return _parse_count(value[0])
    text = str(value or "").strip()
    if re.fullmatch(r"-?\d+", text):
        return int(text)
    if re.fullmatch(r"-?\d*\.\d+", text):
        return float(text)
    return None


def _parse_pair(value: Any) -> tuple[str, Any] | None:
    if isinstance(value, (list, tuple)) and len(value) == 2:
        name, expected = value
        name = str(name or "").strip()
        if name and expected not in (None, ""):
            return name, expected
        return None
    if isinstance(value, Mapping):
        name = str(value.get("name") or "").strip()
        expected = value.get("value")
        if name and expected not in (None, ""):
            return name, expected
        return None
    text = "" if value is None else str(value)
    name, separator, expected = text.partition("=")
    name = name.strip()
    if not separator or not name or not expected:
        return None
    return name, expected


def _navigation_target(details: CommandDetails | None) -> str | None:
    if details is None:
        return None
    args = details.args
    if args not in (None, "", [], ()):
        return format_args(args)
    if details.url:
        return format_args(details.url)
    return None


def _format_call_args(args: Any) -> str:
    if args is None or (isinstance(args, (list, tuple)) and not args):
        return ""
    return format_args(args)


def _variable_lines(variables: Mapping[str, Any]) -> list[str]:
    if not variables:
        return []
    lines = ["// Test variables"]
    lines.extend(format_variable_declaration(str(name), value) for name, value in variables.items())
    lines.append("")
    return lines


def _wrap_conditional(body: list[str]) -> list[str]:
    return [
        "try {",
        *_indent(body, 1),
        "} catch (error) {",
        f"{INDENT}// This is a conditional step, so we can continue even if it fails",
        f"{INDENT}console.log('Conditional step failed:', error);",
        "}",
    ]


def _indent(lines: Sequence[str], depth: int) -> list[str]:
    prefix = INDENT * depth
    return [f"{prefix}{line}" if line else line for line in lines]


def _identifier_fragment(method: str) -> str:
    fragment = re.sub(r"[^A-Za-z0-9_$]", "_", method)
    return fragment or "action"


def _comment_text(value: str) -> str:
    return normalize_space(value, limit=500)
