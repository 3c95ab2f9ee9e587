import pytest

from cuss import (
    Combinator,
    CssSyntaxError,
    ParserOpts,
    SymbolPool,
    Value,
    parse_selector_list,
    parse_stylesheet,
)


def _names(symbols):
    return [s.name for s in symbols]


def _declarations(text):
    sheet = parse_stylesheet(f"a {{ {text} }}")
    return {d.name.name: d.values for d in sheet.rules[0].declarations}


# Selectors


def test_compound_selector_parts():
    (selector,) = parse_selector_list("div#main.note")
    compound = selector.first
    assert compound.type_selector.tag.name == "div"
    assert compound.id_selector.name == "main"
    assert _names(compound.class_selectors) == ["note"]
    assert selector.tail == ()


def test_class_selectors_sorted_by_intern_order_and_deduplicated():
    (selector,) = parse_selector_list("div.b.a.b")
    # "b" was interned before "a", so it sorts first.
    assert _names(selector.first.class_selectors) == ["b", "a"]


def test_universal_and_absent_type_selectors():
    star, bare = parse_selector_list("*.x, .x")
    assert star.first.type_selector.is_universal
    assert bare.first.type_selector is None


def test_combinators():
    first, second, third = parse_selector_list("a > b, c d, e>f")
    assert [c for c, _ in first.tail] == [Combinator.CHILD]
    assert first.tail[0][1].type_selector.tag.name == "b"
    assert [c for c, _ in second.tail] == [Combinator.DESCENDANT]
    assert [c for c, _ in third.tail] == [Combinator.CHILD]


def test_long_chain():
    (selector,) = parse_selector_list("html body > div .note")
    assert [c for c, _ in selector.tail] == [Combinator.DESCENDANT, Combinator.CHILD, Combinator.DESCENDANT]
    assert len(selector) == 4
    assert selector.compound(3).class_selectors[0].name == "note"
    assert selector.combinator_before(0) is None
    assert selector.combinator_before(2) == Combinator.CHILD


def test_type_selectors_lowercased_by_default():
    (selector,) = parse_selector_list("DIV.Note")
    assert selector.first.type_selector.tag.name == "div"
    assert _names(selector.first.class_selectors) == ["Note"]
    (selector,) = parse_selector_list("DIV", opts=ParserOpts(lowercase_tags=False))
    assert selector.first.type_selector.tag.name == "DIV"


def test_identifiers_with_digits_and_dashes():
    (selector,) = parse_selector_list("h1.-x.a-2")
    assert selector.first.type_selector.tag.name == "h1"
    assert sorted(_names(selector.first.class_selectors)) == ["-x", "a-2"]


def test_selectors_share_pool():
    pool = SymbolPool()
    parse_selector_list("div.x", pool)
    (selector,) = parse_selector_list("span.x", pool)
    assert selector.first.class_selectors[0] is pool.lookup("x")


@pytest.mark.parametrize(
    ("text", "code"),
    [
        ("", "empty-selector"),
        ("   ", "empty-selector"),
        ("a + b", "unsupported-combinator"),
        ("a ~ b", "unsupported-combinator"),
        ("a[href]", "unsupported-attribute-selector"),
        ("a:hover", "unsupported-pseudo-class"),
        ("#", "missing-id"),
        (".1x", "missing-class"),
        ("a >", "missing-child"),
        ("a,", "expected-selector-after-comma"),
        ("a {", "unexpected-character"),
        ("--x", "unexpected-character"),
    ],
)
def test_selector_errors(text, code):
    with pytest.raises(CssSyntaxError) as exc_info:
        parse_selector_list(text)
    assert exc_info.value.code == code


# Stylesheets


def test_stylesheet_rules_and_selector_table():
    sheet = parse_stylesheet(
        """
        div.note, #main > p { color: red; }
        /* comment */
        span { }
        """
    )
    assert len(sheet) == 2
    assert len(sheet.rules[0].selectors) == 2
    assert sheet.rules[1].declarations == ()
    table = sheet.selector_table()
    assert len(table) == 3
    assert table.owners == (0, 0, 1)
    assert table[2].first.type_selector.tag is sheet.pool.lookup("span")


def test_comments_between_tokens():
    sheet = parse_stylesheet("/* a */ a /* b */ { /* c */ color: red }")
    (rule,) = sheet.rules
    assert rule.selectors[0].tail == ()
    assert len(rule.declarations) == 1


def test_empty_stylesheet():
    assert len(parse_stylesheet("  /* nothing */  ")) == 0


def test_numeric_values():
    decls = _declarations("margin: 0 10px -1.5em; width: 50%; z: 1e3")
    zero, ten, neg = decls["margin"]
    assert zero == Value(Value.NUMBER, 0.0)
    assert ten.kind == Value.DIMENSION
    assert ten.value == 10.0
    assert ten.unit.name == "px"
    assert neg.value == -1.5
    assert neg.unit.name == "em"
    assert decls["width"][0] == Value(Value.PERCENT, 50.0)
    assert decls["z"][0] == Value(Value.NUMBER, 1000.0)


def test_color_values():
    decls = _declarations("color: #abc; background: #123456")
    assert decls["color"][0] == Value(Value.COLOR, 0xAABBCC)
    assert decls["background"][0] == Value(Value.COLOR, 0x123456)


def test_string_and_ident_values():
    decls = _declarations("content: \"hi\" 'there'; display: -moz-box")
    assert decls["content"] == (Value(Value.STRING, "hi"), Value(Value.STRING, "there"))
    (display,) = decls["display"]
    assert display.kind == Value.IDENT
    assert display.value.name == "-moz-box"


def test_string_line_continuation():
    decls = _declarations('content: "a\\\nb"')
    assert decls["content"][0] == Value(Value.STRING, "ab")


def test_function_values():
    decls = _declarations("color: rgb(1, 2, 3); x: f()")
    (rgb,) = decls["color"]
    assert rgb.kind == Value.FUNCTION
    assert rgb.value.name == "rgb"
    assert [a.value for a in rgb.args] == [1.0, 2.0, 3.0]
    assert decls["x"][0].args == ()


def test_semicolons_are_optional_and_repeatable():
    sheet = parse_stylesheet("a { ;; color: red;; margin: 0 }")
    assert len(sheet.rules[0].declarations) == 2


@pytest.mark.parametrize(
    ("text", "code"),
    [
        ("/* open", "unclosed-comment"),
        ("a {", "expected-declaration"),
        ("a { color red }", "expected-colon"),
        ("a { color: }", "expected-value"),
        ("a { color: #ab }", "invalid-color"),
        ("a { content: 'x\n' }", "unclosed-string-at-eol"),
        ("a { content: 'x", "unclosed-string-at-eof"),
        ("a { content: 'a\\b' }", "unsupported-escape"),
        ("a { color: rgb(1, ) }", "expected-function-arg"),
        ("a { color: rgb(1 }", "expected-close-paren"),
        ("a b", "expected-block"),
        ("a {} }", "trailing-content"),
    ],
)
def test_stylesheet_errors(text, code):
    with pytest.raises(CssSyntaxError) as exc_info:
        parse_stylesheet(text)
    assert exc_info.value.code == code


def test_error_location():
    source = "a {\n  color red\n}"
    with pytest.raises(CssSyntaxError) as exc_info:
        parse_stylesheet(source)
    error = exc_info.value
    assert isinstance(error, SyntaxError)
    assert error.error.line == 2
    assert error.error.column == 9
    assert error.lineno == 2
    assert error.text == "  color red"
    assert str(error) == "(2,9): expected-colon - Expected : after property name"
