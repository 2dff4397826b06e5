"""
Output for build integration: a generated Python module holding the package, a
Make-style depfile listing its inputs, and a JSON-friendly manifest.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined
from strif import atomic_output_file

from respack.package import Package
from respack.pipeline import BundleResult

MODULE_TEMPLATE = '''\
# Generated by respack. Do not edit.
{%- for pattern in patterns %}
# Source: {{ pattern | tojson }}
{%- endfor %}

from respack.package import Package

PACKAGE = Package.from_pairs(
    [
{%- for name, content in entries %}
        ({{ name }}, {{ content }}),
{%- endfor %}
    ]
)
'''


def render_module(package: Package, patterns: Sequence[str] = ()) -> str:
    """Render Python source that rebuilds `package` as the constant `PACKAGE`."""
    env = Environment(undefined=StrictUndefined, keep_trailing_newline=True)
    template = env.from_string(MODULE_TEMPLATE)
    entries = [(repr(name), repr(content)) for name, content in package.iterate()]
    return template.render(patterns=patterns, entries=entries)


def write_atomic(output_path: Path, content: str) -> None:
    """Write output atomically."""
    with atomic_output_file(output_path, make_parents=True) as temp_path:
        Path(temp_path).write_text(content, encoding="utf-8")


def write_module(package: Package, output_path: Path, patterns: Sequence[str] = ()) -> None:
    write_atomic(output_path, render_module(package, patterns))


def _escape_make(path: str) -> str:
    return path.replace("\\", "\\\\").replace(" ", "\\ ").replace("#", "\\#").replace("$", "$$")


def render_depfile(target: str | Path, dependencies: Iterable[Path]) -> str:
    """
    Render a Make-style dependency rule, `target: dep ...`, one dependency per
    continued line.
    """
    lines = [f"{_escape_make(str(target))}:"]
    lines.extend(f"  {_escape_make(str(dep))}" for dep in dependencies)
    return " \\\n".join(lines) + "\n"


def write_depfile(target: str | Path, dependencies: Iterable[Path], depfile_path: Path) -> None:
    write_atomic(depfile_path, render_depfile(target, dependencies))


def package_manifest(result: BundleResult) -> dict[str, Any]:
    """Names and sizes of the entries plus the dependency list, ready for `json.dumps`."""
    return {
        "entries": [
            {"name": entry.name_str, "size": len(entry.content)}
            for entry in result.package.entries
        ],
        "dependencies": [str(path) for path in result.dependencies],
    }
