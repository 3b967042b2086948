import json
import textwrap

import pytest

from surimi import CompileResult
from surimi.__main__ import main


def run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr()


def test_tokenize_selector(capsys):
    out = run(capsys, "tokenize", "selector", "ul > li.item").out
    assert [line.split() for line in out.splitlines()] == [
        ["type", "'ul'"],
        ["combinator", "'>'"],
        ["type", "'li'"],
        ["class", "'.item'"],
    ]


def test_tokenize_at_rule_json(capsys):
    out = run(capsys, "tokenize", "at-rule", "@media (min-width: 768px)", "--json").out
    assert json.loads(out) == [
        {"type": "at-rule-name", "name": "media", "content": "@media"},
        {"type": "delimiter", "delimiter": "(", "content": "("},
        {"type": "identifier", "value": "min-width", "content": "min-width"},
        {"type": "delimiter", "delimiter": ":", "content": ":"},
        {"type": "dimension", "value": 768, "unit": "px", "content": "768px"},
        {"type": "delimiter", "delimiter": ")", "content": ")"},
    ]


def test_normalize(capsys):
    assert run(capsys, "normalize", "selector", "a>b  ,c").out == "a > b, c\n"
    assert run(capsys, "normalize", "at-rule", "@media (min-width:768px)").out == "@media ( min-width : 768px )\n"


def test_invalid_selector_exits_with_2(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["tokenize", "selector", "a!"])
    assert excinfo.value.code == 2
    assert "Unexpected character" in capsys.readouterr().err


def test_missing_command_exits_with_1(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 1
    assert "usage:" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("surimi ")


@pytest.fixture
def style_module(tmp_path):
    path = tmp_path / "cli_styles.py"
    path.write_text(
        textwrap.dedent(
            """\
            from surimi import Stylesheet

            sheet = Stylesheet()
            sheet.select(".a").hover().style(color="red")
            """
        )
    )
    return path


def test_compile_to_stdout(capsys, style_module):
    assert run(capsys, "compile", str(style_module)).out == ".a:hover {\n    color: red;\n}\n"


def test_compile_to_file(capsys, style_module, tmp_path):
    output = tmp_path / "dist" / "styles.css"
    run(capsys, "compile", str(style_module), "-o", str(output))
    assert output.read_text() == ".a:hover {\n    color: red;\n}\n"


def test_compile_missing_module_exits_with_3(capsys, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["compile", str(tmp_path / "nope.py")])
    assert excinfo.value.code == 3
    assert "not found" in capsys.readouterr().err


def test_compile_style_error_exits_with_2(capsys, tmp_path):
    path = tmp_path / "cli_bad.py"
    path.write_text("from surimi import Stylesheet\nStylesheet().select('.a').style(hidden=True)\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["compile", str(path)])
    assert excinfo.value.code == 2


def test_watch_writes_output(monkeypatch, style_module, tmp_path):
    output = tmp_path / "watched.css"
    calls = []

    def fake_watch(options, on_change, on_error, interval):
        calls.append((options.input_path, interval))
        on_change(CompileResult(".b {\n}", [], 0.0))
        raise KeyboardInterrupt

    monkeypatch.setattr("surimi.__main__.watch", fake_watch)
    main(["watch", str(style_module), "-o", str(output), "--interval", "0.1"])
    assert calls == [(style_module, 0.1)]
    assert output.read_text() == ".b {\n}\n"
