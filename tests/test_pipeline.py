"""End-to-end tests for the bundling pipeline."""

from __future__ import annotations

import errno
import logging
from collections import Counter
from pathlib import Path

import pytest

from respack import (
    BundleConfig,
    ConfigError,
    EnumerationError,
    ReadError,
    ShapeError,
    bundle,
    resources_package,
)
from respack.dependencies import DependencySet
from respack.loader import load_content


def _make_fixture(root: Path) -> Path:
    fixture = root / "fixture"
    (fixture / "subdir").mkdir(parents=True)
    (fixture / "aaa.txt").write_bytes(b"aaa\naaa")
    (fixture / "b.txt").write_bytes(b"b b b")
    (fixture / "subdir" / "cc.txt").write_bytes(b"ccc")
    return fixture


def test_walk_scenario(tmp_path: Path):
    _make_fixture(tmp_path)
    package = resources_package("fixture", unit_dir=tmp_path)
    assert len(package) == 3
    assert package.find("aaa.txt") == b"aaa\naaa"
    assert package.find("b.txt") == b"b b b"
    assert package.find("subdir/cc.txt") == b"ccc"
    assert package.find("missing.txt") is None


def test_glob_scenario(tmp_path: Path):
    _make_fixture(tmp_path)
    package = resources_package("fixture/*.txt", unit_dir=tmp_path)
    assert len(package) == 2
    assert sorted(package.names()) == ["aaa.txt", "b.txt"]
    assert package.find("subdir/cc.txt") is None


def test_missing_base_raises_and_returns_nothing(tmp_path: Path):
    with pytest.raises(EnumerationError) as exc:
        resources_package("nope", unit_dir=tmp_path)
    assert exc.value.path == tmp_path / "nope"


def test_unit_file_anchors_relative_patterns(tmp_path: Path):
    _make_fixture(tmp_path)
    unit_file = tmp_path / "module.py"
    unit_file.write_text("")
    package = resources_package(["fixture"], unit_file=unit_file)
    assert len(package) == 3


def test_multiple_patterns_concatenate_in_order(tmp_path: Path):
    _make_fixture(tmp_path)
    (tmp_path / "extra").mkdir()
    (tmp_path / "extra" / "first.bin").write_bytes(b"\x00\x01")
    package = resources_package(["extra", "fixture/*.txt"], unit_dir=tmp_path)
    names = package.names()
    assert names[0] == "first.bin"
    assert sorted(names[1:]) == ["aaa.txt", "b.txt"]


def test_duplicate_names_first_wins(tmp_path: Path):
    for d in ("one", "two"):
        (tmp_path / d).mkdir()
        (tmp_path / d / "same.txt").write_text(d)
    package = resources_package(["one", "two"], unit_dir=tmp_path)
    assert len(package) == 2
    assert package.find("same.txt") == b"one"


def test_same_file_twice_is_registered_twice_but_listed_once(tmp_path: Path):
    _make_fixture(tmp_path)
    registrar = DependencySet()
    result = bundle(
        BundleConfig(patterns=["fixture/*.txt", "fixture/aaa.txt*"], unit_dir=tmp_path),
        registrar=registrar,
    )
    assert len(result.package) == 3
    assert len(registrar.registrations) == 3
    assert len(result.dependencies) == 2


def test_single_string_patterns_field(tmp_path: Path):
    _make_fixture(tmp_path)
    result = bundle(BundleConfig(patterns="fixture", unit_dir=tmp_path))  # type: ignore[arg-type]
    assert len(result.package) == 3


def test_empty_config_is_empty_package(tmp_path: Path):
    result = bundle(BundleConfig(patterns=[], unit_dir=tmp_path))
    assert len(result.package) == 0
    assert result.dependencies == ()


def test_zero_glob_matches_is_empty_package(tmp_path: Path):
    _make_fixture(tmp_path)
    assert len(resources_package("fixture/*.png", unit_dir=tmp_path)) == 0


def test_contents_are_raw_bytes(tmp_path: Path):
    data = bytes(range(256)) + b"\r\n\xff\xfe"
    (tmp_path / "raw").mkdir()
    (tmp_path / "raw" / "blob.bin").write_bytes(data)
    assert resources_package("raw", unit_dir=tmp_path).find("blob.bin") == data


def test_dependencies_are_absolute_discovered_files(tmp_path: Path):
    fixture = _make_fixture(tmp_path)
    result = bundle(BundleConfig(patterns=["fixture"], unit_dir=tmp_path))
    assert sorted(result.dependencies) == sorted(
        [fixture / "aaa.txt", fixture / "b.txt", fixture / "subdir" / "cc.txt"]
    )
    assert all(p.is_absolute() for p in result.dependencies)


def test_custom_registrar_called_once_per_file(tmp_path: Path):
    _make_fixture(tmp_path)

    class Recorder:
        def __init__(self) -> None:
            self.seen: list[Path] = []

        def register(self, path: Path) -> None:
            self.seen.append(path)

    recorder = Recorder()
    bundle(BundleConfig(patterns=["fixture"], unit_dir=tmp_path), registrar=recorder)
    assert len(recorder.seen) == 3
    assert len(set(recorder.seen)) == 3


def test_idempotent(tmp_path: Path):
    _make_fixture(tmp_path)
    config = BundleConfig(patterns=["fixture"], unit_dir=tmp_path)
    first = bundle(config).package
    second = bundle(config).package
    assert Counter(first.iterate()) == Counter(second.iterate())


def test_sorted_bundle(tmp_path: Path):
    _make_fixture(tmp_path)
    result = bundle(BundleConfig(patterns=["fixture"], unit_dir=tmp_path, sort=True))
    assert result.package.names() == ["aaa.txt", "b.txt", "subdir/cc.txt"]


def test_exclude(tmp_path: Path):
    _make_fixture(tmp_path)
    package = resources_package("fixture", unit_dir=tmp_path, exclude=["subdir/"])
    assert sorted(package.names()) == ["aaa.txt", "b.txt"]


def test_bad_config_fails_before_filesystem_access(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    def fail(*args: object, **kwargs: object) -> None:
        raise AssertionError("filesystem touched")

    monkeypatch.setattr("respack.pipeline.resolve_base", fail)
    with pytest.raises(ShapeError):
        bundle(BundleConfig(patterns=["ok", 5], unit_dir=tmp_path))  # type: ignore[list-item]
    with pytest.raises(ConfigError):
        resources_package(42, unit_dir=tmp_path)


def test_read_error_aborts_whole_bundle(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    fixture = _make_fixture(tmp_path)
    broken = fixture / "b.txt"
    real_read_bytes = Path.read_bytes

    def flaky_read_bytes(self: Path) -> bytes:
        if self == broken:
            raise PermissionError(errno.EACCES, "Permission denied", str(self))
        return real_read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", flaky_read_bytes)
    with pytest.raises(ReadError) as exc:
        bundle(BundleConfig(patterns=["fixture"], unit_dir=tmp_path))
    assert exc.value.path == broken
    assert exc.value.pattern == "fixture"
    assert isinstance(exc.value.__cause__, PermissionError)


def test_load_content_of_directory_is_read_error(tmp_path: Path):
    with pytest.raises(ReadError):
        load_content(tmp_path)


def test_logs_summary(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    _make_fixture(tmp_path)
    with caplog.at_level(logging.INFO, logger="respack"):
        bundle(BundleConfig(patterns=["fixture"], unit_dir=tmp_path))
    assert "Bundled 3 file(s)" in caplog.text


def test_from_arg(tmp_path: Path):
    config = BundleConfig.from_arg(["a", "b"], unit_dir=str(tmp_path), sort=True)
    assert config.patterns == ("a", "b")
    assert config.unit_dir == tmp_path
    assert config.sort is True


def test_glob_scenario_under_bracketed_unit_dir(tmp_path: Path):
    unit = tmp_path / "proj[1]"
    _make_fixture(unit)
    package = resources_package("fixture/*.txt", unit_dir=unit)
    assert sorted(package.names()) == ["aaa.txt", "b.txt"]
