"""CSS serialization for compiled selectors and stylesheets."""

from __future__ import annotations

from .rules import Declaration, Rule, Stylesheet, Value
from .selector import Combinator, ComplexSelector, CompoundSelector


def _format_number(number: float | int) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return repr(number)


def _quote_string(text: str) -> str:
    # The parser has no escapes, so pick a quote the text does not contain.
    # Text holding both quote characters cannot round-trip.
    if '"' in text and "'" not in text:
        return f"'{text}'"
    return f'"{text}"'


def compound_to_css(compound: CompoundSelector) -> str:
    parts: list[str] = []
    type_selector = compound.type_selector
    if type_selector is not None:
        parts.append("*" if type_selector.tag is None else type_selector.tag.name)
    if compound.id_selector is not None:
        parts.extend(["#", compound.id_selector.name])
    for class_ in compound.class_selectors:
        parts.extend([".", class_.name])
    return "".join(parts)


def selector_to_css(selector: ComplexSelector) -> str:
    parts = [compound_to_css(selector.first)]
    for combinator, compound in selector.tail:
        if combinator == Combinator.DESCENDANT:
            parts.append(" ")
        else:
            parts.append(f" {combinator.value} ")
        parts.append(compound_to_css(compound))
    return "".join(parts)


def value_to_css(value: Value) -> str:
    kind = value.kind
    if kind == Value.STRING:
        return _quote_string(str(value.value))
    if kind == Value.NUMBER:
        return _format_number(value.value)  # type: ignore[arg-type]
    if kind == Value.PERCENT:
        return _format_number(value.value) + "%"  # type: ignore[arg-type]
    if kind == Value.DIMENSION:
        unit = value.unit.name if value.unit is not None else ""
        return _format_number(value.value) + unit  # type: ignore[arg-type]
    if kind == Value.COLOR:
        return f"#{value.value:06x}"
    if kind == Value.FUNCTION:
        args = ", ".join(value_to_css(arg) for arg in value.args)
        return f"{value.value}({args})"
    return str(value.value)


def declaration_to_css(declaration: Declaration) -> str:
    values = " ".join(value_to_css(v) for v in declaration.values)
    return f"{declaration.name.name}: {values};"


def rule_to_css(rule: Rule, indent_size: int = 2) -> str:
    selectors = ", ".join(selector_to_css(s) for s in rule.selectors)
    if not rule.declarations:
        return selectors + " {}"
    pad = " " * indent_size
    lines = [selectors + " {"]
    lines.extend(pad + declaration_to_css(d) for d in rule.declarations)
    lines.append("}")
    return "\n".join(lines)


def to_css(stylesheet: Stylesheet, indent_size: int = 2) -> str:
    """Convert a stylesheet back to CSS text."""
    return "\n\n".join(rule_to_css(rule, indent_size) for rule in stylesheet.rules)
