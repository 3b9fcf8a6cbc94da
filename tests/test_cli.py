"""
Tests de la ligne de commande (Typer).
"""

import pytest
from typer.testing import CliRunner

import wiki_translator.__main__ as cli
from conftest import FakeLLM
from wiki_translator.htmlpage.constants import TOKEN_CLASS
from wiki_translator.translation import PageTranslator

runner = CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text('<p>Hello <a href="/wiki/Apple">Apple</a></p>', encoding="utf-8")
    return path


def test_translate(monkeypatch, source_file, tmp_path, translator):
    monkeypatch.setattr(cli, "build_translator", lambda settings: translator)
    output = tmp_path / "out.html"

    result = runner.invoke(
        cli.app, ["translate", str(source_file), "--lang", "es", "-o", str(output)]
    )

    assert result.exit_code == 0
    assert output.read_text(encoding="utf-8") == (
        '<p>[es] Hello <a href="/wiki/Apple/es">[es] Apple</a></p>'
    )


def test_translate_failure_exit_code(monkeypatch, source_file, failing_translator):
    monkeypatch.setattr(cli, "build_translator", lambda settings: failing_translator)

    result = runner.invoke(cli.app, ["translate", str(source_file), "--lang", "es"])

    assert result.exit_code == 1


def test_skeleton(source_file, tmp_path):
    output = tmp_path / "skeleton.html"

    result = runner.invoke(
        cli.app, ["skeleton", str(source_file), "--lang", "es", "-o", str(output)]
    )

    html = output.read_text(encoding="utf-8")
    assert result.exit_code == 0
    assert TOKEN_CLASS in html
    assert 'href="/wiki/Apple/es"' in html


def test_fill(monkeypatch, source_file, tmp_path, store):
    from wiki_translator.delivery import LocalBatchTransport

    translator = PageTranslator(FakeLLM(), store)
    skeleton_file = tmp_path / "skeleton.html"
    runner.invoke(
        cli.app, ["skeleton", str(source_file), "--lang", "es", "-o", str(skeleton_file)]
    )
    monkeypatch.setattr(
        cli,
        "HttpBatchTransport",
        lambda server, page_title=None: LocalBatchTransport(translator),
    )
    output = tmp_path / "filled.html"

    result = runner.invoke(
        cli.app,
        [
            "fill",
            str(skeleton_file),
            "--lang",
            "es",
            "--server",
            "http://localhost:5000/wiki-translator",
            "-o",
            str(output),
        ],
    )

    assert result.exit_code == 0
    assert output.read_text(encoding="utf-8") == (
        '<p>[es] Hello <a href="/wiki/Apple/es">[es] Apple</a></p>'
    )


def test_missing_file():
    result = runner.invoke(cli.app, ["skeleton", "does-not-exist.html", "--lang", "es"])
    assert result.exit_code != 0
