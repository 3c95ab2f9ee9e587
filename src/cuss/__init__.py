from .errors import CssSyntaxError, ParseError
from .matcher import Matcher, match_tree, matches, query
from .node import ElementNode
from .parser import ParserOpts, parse_selector_list, parse_stylesheet
from .rules import Declaration, Rule, SelectorTable, Stylesheet, Value
from .selector import Combinator, ComplexSelector, CompoundSelector, TypeSelector
from .serialize import selector_to_css, to_css
from .statemachine import Cursor, NfaState, SelState
from .symbol import Symbol, SymbolPool

__all__ = [
    "Combinator",
    "ComplexSelector",
    "CompoundSelector",
    "CssSyntaxError",
    "Cursor",
    "Declaration",
    "ElementNode",
    "Matcher",
    "NfaState",
    "ParseError",
    "ParserOpts",
    "Rule",
    "SelState",
    "SelectorTable",
    "Stylesheet",
    "Symbol",
    "SymbolPool",
    "TypeSelector",
    "Value",
    "match_tree",
    "matches",
    "parse_selector_list",
    "parse_stylesheet",
    "query",
    "selector_to_css",
    "to_css",
]
