import io
import json
import sys

import pytest

from cuss.__main__ import main

TREE = {
    "tag": "div",
    "attrs": {"id": "a"},
    "children": [
        {"tag": "span", "children": [{"tag": "b"}]},
        {"tag": "b", "attrs": {"class": "x"}},
    ],
}


@pytest.fixture
def files(tmp_path):
    def write(css, tree=TREE):
        css_path = tmp_path / "site.css"
        css_path.write_text(css)
        tree_path = tmp_path / "tree.json"
        tree_path.write_text(json.dumps(tree))
        return str(css_path), str(tree_path)

    return write


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["cuss", *argv])
    main()


def test_text_output(files, monkeypatch, capsys):
    css, tree = files("#a b { color: red }\n#a > .x { color: blue }")
    _run(monkeypatch, css, tree)
    out = capsys.readouterr().out
    assert out == ("div#a > span > b\t[0] #a b\ndiv#a > b.x\t[0] #a b, [1] #a > .x\n")


def test_json_output(files, monkeypatch, capsys):
    css, tree = files("#a > b {}")
    _run(monkeypatch, css, tree, "--format", "json")
    payload = json.loads(capsys.readouterr().out)
    assert payload == [{"path": "div#a > b.x", "rules": [0], "selectors": ["#a > b"]}]


def test_selector_filter(files, monkeypatch, capsys):
    css, tree = files("b {}")
    _run(monkeypatch, css, tree, "--selector", "span b")
    assert capsys.readouterr().out == "div#a > span > b\t[0] b\n"


def test_stdin_tree(files, monkeypatch, capsys):
    css, _ = files("span {}")
    monkeypatch.setattr(sys, "stdin", io.StringIO(json.dumps(TREE)))
    _run(monkeypatch, css, "-")
    assert capsys.readouterr().out == "div#a > span\t[0] span\n"


def test_dump(files, monkeypatch, capsys):
    css, _ = files("a, b > c {} d {}")
    _run(monkeypatch, css, "--dump")
    assert capsys.readouterr().out == "0\t0\ta\n1\t0\tb > c\n2\t1\td\n"


def test_no_match_exits_1(files, monkeypatch):
    css, tree = files("table {}")
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, css, tree)
    assert exc_info.value.code == 1


def test_bad_stylesheet_exits_2(files, monkeypatch, capsys):
    css, tree = files("a:hover {}")
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, css, tree)
    assert exc_info.value.code == 2
    assert "unsupported-pseudo-class" in capsys.readouterr().err


def test_bad_selector_exits_2(files, monkeypatch, capsys):
    css, tree = files("b {}")
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, css, tree, "--selector", "a + b")
    assert exc_info.value.code == 2
    assert "unsupported-combinator" in capsys.readouterr().err


def test_missing_tree_prints_help(files, monkeypatch, capsys):
    css, _ = files("b {}")
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, css)
    assert exc_info.value.code == 1
    assert "usage: cuss" in capsys.readouterr().err


def test_case_sensitive_tags_applies_to_selector_filter(files, monkeypatch, capsys):
    tree = {"tag": "div", "children": [{"tag": "B"}, {"tag": "b"}]}
    css, tree_path = files("* {}", tree)
    _run(monkeypatch, css, tree_path, "--case-sensitive-tags", "--selector", "b")
    assert capsys.readouterr().out == "div > b\t[0] *\n"


def test_selector_filter_folds_case_by_default(files, monkeypatch, capsys):
    tree = {"tag": "div", "children": [{"tag": "B"}, {"tag": "b"}]}
    css, tree_path = files("* {}", tree)
    _run(monkeypatch, css, tree_path, "--selector", "div > b")
    assert capsys.readouterr().out == "div > B\t[0] *\ndiv > b\t[0] *\n"


def test_case_sensitive_tags_applies_to_stylesheet(files, monkeypatch, capsys):
    tree = {"tag": "div", "children": [{"tag": "B"}, {"tag": "b"}]}
    css, tree_path = files("B {}", tree)
    _run(monkeypatch, css, tree_path, "--case-sensitive-tags")
    assert capsys.readouterr().out == "div > B\t[0] B\n"


@pytest.mark.parametrize("text", ["{not json", '{"tag": "a", "attrs": {"class": ["x"]}}'])
def test_malformed_tree_exits_2(files, monkeypatch, capsys, tmp_path, text):
    css, _ = files("b {}")
    tree_path = tmp_path / "bad.json"
    tree_path.write_text(text)
    with pytest.raises(SystemExit) as exc_info:
        _run(monkeypatch, css, str(tree_path))
    assert exc_info.value.code == 2
    assert str(tree_path) in capsys.readouterr().err
