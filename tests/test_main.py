"""Tests for main entry and helpers."""
from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from main import _safe_file_name, main

_ROOT = Path(__file__).resolve().parent.parent

PHRASE = "[S [NP John][VP [V runs]]]"


def test_safe_file_name() -> None:
    """_safe_file_name keeps the words of a phrase and drops notation characters."""
    assert _safe_file_name("[S [NP John]]") == "S_NP_John"
    assert _safe_file_name("[N_s +F {Acc} ->1]") == "N_s_F_Acc_1"
    assert _safe_file_name("[ ]") == "syntax_tree"
    assert len(_safe_file_name("[A " + "b" * 300 + "]")) == 80


def test_main_help_exits_zero() -> None:
    """python main.py --help exits with 0."""
    result = subprocess.run(
        [sys.executable, "main.py", "--help"],
        cwd=_ROOT,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "--alignment" in result.stdout
    assert "--no-triangles" in result.stdout


def test_main_writes_png(tmp_path: Path) -> None:
    out = tmp_path / "tree.png"
    assert main([PHRASE, "-o", str(out)]) == 0
    assert out.is_file()
    assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_main_writes_svg_with_options(tmp_path: Path) -> None:
    out = tmp_path / "tree.svg"
    code = main([
        "[S [NP the dog][VP barks ->1]]",
        "-o", str(out),
        "--alignment", "bottom",
        "--no-color",
        "--arrow-color", "Navy",
        "--no-triangles",
        "--spacing", "150",
    ])
    assert code == 0
    svg = out.read_text(encoding="utf-8")
    assert 'stroke="Navy"' in svg
    assert "#CC0000" not in svg


def test_main_default_output_dir(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SYNTAXTREE_OUTPUT_DIR", str(tmp_path))
    assert main([PHRASE]) == 0
    assert (tmp_path / "S_NP_John_VP_V_runs.png").is_file()


def test_main_reads_phrase_file(tmp_path: Path) -> None:
    src = tmp_path / "phrase.txt"
    src.write_text(PHRASE + "\n", encoding="utf-8")
    out = tmp_path / "from_file.png"
    assert main(["--file", str(src), "-o", str(out)]) == 0
    assert out.is_file()


def test_main_json_and_debug(tmp_path: Path) -> None:
    out = tmp_path / "tree.png"
    assert main([PHRASE, "-o", str(out), "--json", "--debug"]) == 0
    tree = json.loads((tmp_path / "tree.json").read_text(encoding="utf-8"))
    assert tree["type"] == "ROOT"
    assert tree["values"][0]["label"] == "S"
    assert (tmp_path / "tree_layout.html").is_file()


@pytest.mark.parametrize(
    "phrase",
    ["[S [NP John]", "S NP", "[A 5]", '[A "open]', "[A B ->]"],
)
def test_main_parse_error_exits_one(tmp_path: Path, phrase: str, caplog) -> None:
    out = tmp_path / "bad.png"
    assert main([phrase, "-o", str(out)]) == 1
    assert not out.exists()
    assert "Parse error" in caplog.text


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["--file", "does/not/exist.txt"],
        [PHRASE, "-o", "tree.jpg"],
        [PHRASE, "-o", "tree"],
        [PHRASE, "--spacing", "0"],
        [PHRASE, "--font-size", "0"],
    ],
)
def test_main_bad_arguments_exit_one(tmp_path: Path, args: list[str]) -> None:
    args = [a if a != "tree.jpg" and a != "tree" else str(tmp_path / a) for a in args]
    assert main(args) == 1
    assert list(tmp_path.iterdir()) == []


def test_main_json_reuses_rendered_tree(monkeypatch, tmp_path: Path) -> None:
    """--json dumps the tree parsed for rendering instead of parsing the phrase again."""
    import syntaxtree.render.tree as tree_module

    calls = []
    real_parse = tree_module.parse_phrase

    def counting_parse(phrase: str):
        calls.append(phrase)
        return real_parse(phrase)

    monkeypatch.setattr(tree_module, "parse_phrase", counting_parse)
    out = tmp_path / "tree.png"
    assert main([PHRASE, "-o", str(out), "--json"]) == 0
    assert calls == [PHRASE]
    tree = json.loads((tmp_path / "tree.json").read_text(encoding="utf-8"))
    assert tree["values"][0]["values"][0]["label"] == "NP"
