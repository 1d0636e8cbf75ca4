"""Rule documentation catalog for junitguard explain command."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class RuleInfo:
    code: str
    name: str
    category: str
    description: str
    bad_example: str
    good_example: str
    config_options: str


RULE_CATALOG: Final[dict[str, RuleInfo]] = {
    "EXC001": RuleInfo(
        code="EXC001",
        name="One Expected Checked Exception",
        category="exceptions",
        description=(
            "An assertThrows lambda or a try/catch ending in fail() should\n"
            "contain a single call able to throw the expected checked\n"
            "exception. With several candidates the test cannot tell which\n"
            "one threw."
        ),
        bad_example=(
            "assertThrows(IOException.class, () -> reader.read(open(path)));"
        ),
        good_example=(
            "Reader r = open(path);\n"
            "assertThrows(IOException.class, () -> reader.read(r));"
        ),
        config_options=(
            "[rules.EXC001]\n"
            "include_supertypes = true  # count 'throws Exception' for IOException"
        ),
    ),
    "EXC002": RuleInfo(
        code="EXC002",
        name="One Expected Runtime Exception",
        category="exceptions",
        description=(
            "When a runtime exception is expected, the guarded code should\n"
            "contain a single invocation. Any call can raise a runtime\n"
            "exception, so extra calls make the expectation ambiguous."
        ),
        bad_example=(
            "assertThrows(IllegalArgumentException.class, () -> new Foo(bar()));"
        ),
        good_example=(
            "Bar b = bar();\n"
            "assertThrows(IllegalArgumentException.class, () -> new Foo(b));"
        ),
        config_options=(
            "[rules.EXC002]\n"
            "count_unresolved = true  # count calls that cannot be resolved"
        ),
    ),
}


def format_rule_detail(*, info: RuleInfo, default_severity: str) -> str:
    """Format a single rule's full documentation."""
    lines: list[str] = [
        f"{info.code}: {info.name}",
        f"Category: {info.category} | Default severity: {default_severity}",
        "",
        f"  {info.description}",
        "",
        f"  Bad:   {info.bad_example.splitlines()[0]}",
        f"  Good:  {info.good_example.splitlines()[0]}",
    ]
    for good_line in info.good_example.splitlines()[1:]:
        lines.append(f"         {good_line}")

    if info.config_options:
        lines.extend(["", f"  Config: {info.config_options.splitlines()[0]}"])
        for opt_line in info.config_options.splitlines()[1:]:
            lines.append(f"          {opt_line}")

    lines.extend([
        "",
        f"  Suppress: // junitguard: ignore[{info.code}] because: <reason>",
    ])

    return "\n".join(lines)


def format_rule_table(*, catalog: dict[str, RuleInfo], severities: dict[str, str]) -> str:
    """Format all rules as a summary table."""
    lines: list[str] = [
        f"{'CODE':<8} {'SEVERITY':<10} {'NAME':<35} {'CATEGORY':<12}",
        "-" * 68,
    ]
    for code in sorted(catalog):
        info: RuleInfo = catalog[code]
        severity: str = severities.get(code, "off")
        lines.append(f"{code:<8} {severity:<10} {info.name:<35} {info.category:<12}")
    return "\n".join(lines)
