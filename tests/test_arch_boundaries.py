from __future__ import annotations

import ast
import sys
from pathlib import Path

import pytest

CORE_DIR = Path(__file__).resolve().parents[1] / "src" / "cct" / "core"

# Codecs see text, callbacks and errors only: no dispatch, config or file I/O.
CORE_MAY_IMPORT = ("cct.core", "cct.errors", "cct.progress")


def _imports(py_file: Path) -> list[tuple[str, int]]:
    """Absolute module names imported by a cct.core file (relative ones resolved)."""
    tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    here = ["cct", "core", py_file.stem]
    out: list[tuple[str, int]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            out.extend((a.name, node.lineno) for a in node.names)
        elif isinstance(node, ast.ImportFrom):
            if node.level:
                base = here[: len(here) - node.level]
                mod = ".".join(base + ([node.module] if node.module else []))
            else:
                mod = node.module or ""
            out.append((mod, node.lineno))
    return out


def _core_files() -> list[Path]:
    return sorted(CORE_DIR.glob("*.py"))


def test_core_files_found() -> None:
    names = {p.name for p in _core_files()}
    assert {"codec_huffman.py", "codec_rle.py", "codec_lz77.py", "result.py"} <= names


@pytest.mark.parametrize("py_file", _core_files(), ids=lambda p: p.name)
def test_core_imports_stay_inside_allowed_modules(py_file: Path) -> None:
    bad = []
    for mod, lineno in _imports(py_file):
        top = mod.split(".")[0]
        if top == "cct":
            ok = any(mod == p or mod.startswith(p + ".") for p in CORE_MAY_IMPORT)
        else:
            # runtime is stdlib only
            ok = top == "__future__" or top in sys.stdlib_module_names
        if not ok:
            bad.append(f"{py_file.name}:{lineno} imports {mod}")
    assert not bad, "\n".join(bad)
