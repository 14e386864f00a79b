"""Test the slide-engine command line."""

import json

import pytest
from slide_engine.cli import main

DECK = "---\ntitle: Demo\n---\n# One\n\nNote\n---\n## Two\n\t- a\n\t- b\n"


@pytest.fixture
def deck_file(tmp_path):
    path = tmp_path / "deck.md"
    path.write_text(DECK, encoding="utf-8")
    return path


def run_cli(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


def test_parse_prints_json(deck_file, capsys):
    assert run_cli(["parse", str(deck_file)]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["frontmatter"] == {"title": "Demo"}
    assert len(data["slides"]) == 2
    assert data["slides"][0]["speaker_notes"] == ["Note"]
    assert data["slides"][1]["elements"][1]["type"] == "list"


def test_parse_html(deck_file, capsys):
    assert run_cli(["parse", str(deck_file), "--html"]) == 0

    out = capsys.readouterr().out
    assert out.count("<section") == 2
    assert "Note" not in out


def test_cache_then_diff_unchanged(deck_file, tmp_path, capsys):
    cache_path = tmp_path / "cache" / "deck.json"
    assert run_cli(["cache", str(deck_file), "-o", str(cache_path)]) == 0
    assert cache_path.exists()
    capsys.readouterr()

    assert run_cli(["diff", str(cache_path), str(deck_file)]) == 0

    result = json.loads(capsys.readouterr().out)
    assert result["type"] == "none"
    assert result["requires_full_render"] is False


def test_diff_with_update(deck_file, tmp_path, capsys):
    cache_path = tmp_path / "deck.json"
    run_cli(["cache", str(deck_file), "-o", str(cache_path)])
    deck_file.write_text(DECK + "---\n# Three\n", encoding="utf-8")
    capsys.readouterr()

    assert run_cli(["diff", str(cache_path), str(deck_file), "--update"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["type"] == "structural"
    assert result["added_indices"] == [2]

    run_cli(["diff", str(cache_path), str(deck_file)])
    assert json.loads(capsys.readouterr().out)["type"] == "none"


def test_missing_deck_exits_with_error(tmp_path):
    assert run_cli(["parse", str(tmp_path / "missing.md")]) == 1


def test_corrupt_cache_exits_with_error(deck_file, tmp_path):
    cache_path = tmp_path / "bad.json"
    cache_path.write_text("{not json", encoding="utf-8")

    assert run_cli(["diff", str(cache_path), str(deck_file)]) == 1


def test_directory_as_deck_exits_with_error(tmp_path):
    assert run_cli(["parse", str(tmp_path)]) == 1


def test_directory_as_cache_exits_with_error(deck_file, tmp_path):
    cache_dir = tmp_path / "snapshots"
    cache_dir.mkdir()

    assert run_cli(["diff", str(cache_dir), str(deck_file)]) == 1
