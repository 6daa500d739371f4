from __future__ import annotations

from pathlib import Path

import pytest

from usageindex.config import build_parser, resolve_config

POSITIONALS = ["raylib_api.txt", "examples", "out.json"]


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_config_defaults():
    cfg = resolve_config(build_parser().parse_args(POSITIONALS))
    assert cfg.report_path == "raylib_api.txt"
    assert cfg.examples_path == "examples"
    assert cfg.output_path == "out.json"
    assert cfg.report.marker == "Functions found:"
    assert cfg.scan.languages == ["c"]
    assert cfg.scan.jobs == 1
    assert cfg.output_cfg.indent == "\t"


def test_config_cli_overrides_toml(tmp_path: Path):
    cfg_file = tmp_path / "custom.toml"
    cfg_file.write_text(
        """
[scan]
jobs = 2
extensions = [".c", ".h"]

[output]
indent = 2
summary = true
""".strip()
    )
    args = build_parser().parse_args([*POSITIONALS, "--config", str(cfg_file), "--jobs", "8"])
    cfg = resolve_config(args)

    assert cfg.config_path == str(cfg_file)
    assert cfg.scan.jobs == 8
    assert cfg.scan.extensions == [".c", ".h"]
    assert cfg.output_cfg.indent == "  "
    assert cfg.output_cfg.summary is True


def test_config_discovers_local_toml(tmp_path: Path):
    (tmp_path / "usageindex.toml").write_text('[report]\nmarker = "Functions:"\n')
    cfg = resolve_config(build_parser().parse_args(POSITIONALS))
    assert cfg.report.marker == "Functions:"


def test_config_env_overrides_toml(tmp_path: Path, monkeypatch):
    cfg_file = tmp_path / "custom.toml"
    cfg_file.write_text("[scan]\njobs = 2\n")
    monkeypatch.setenv("USAGEINDEX_SCAN__JOBS", "3")
    monkeypatch.setenv("USAGEINDEX_SCAN__EXTENSIONS", ".h")
    cfg = resolve_config(build_parser().parse_args([*POSITIONALS, "--config", str(cfg_file)]))
    assert cfg.scan.jobs == 3
    assert cfg.scan.extensions == [".h"]


def test_config_compact_and_ext_flags():
    args = build_parser().parse_args([*POSITIONALS, "--compact", "--ext", ".c, .cpp", "--quiet"])
    cfg = resolve_config(args)
    assert cfg.output_cfg.indent is None
    assert cfg.scan.extensions == [".c", ".cpp"]
    assert cfg.logging.quiet is True


def test_config_rejects_output_without_extension():
    args = build_parser().parse_args(["raylib_api.txt", "examples", "out"])
    with pytest.raises(ValueError, match="Missing extension on output file"):
        resolve_config(args)


def test_config_rejects_bad_jobs_and_extensions():
    with pytest.raises(ValueError, match="scan.jobs must be >= 1"):
        resolve_config(build_parser().parse_args([*POSITIONALS, "--jobs", "0"]))
    with pytest.raises(ValueError, match="Invalid file extension"):
        resolve_config(build_parser().parse_args([*POSITIONALS, "--ext", "c"]))
    with pytest.raises(ValueError, match="Unsupported language: rust"):
        resolve_config(build_parser().parse_args([*POSITIONALS, "--lang", "rust"]))


def test_config_rejects_unknown_keys(tmp_path: Path):
    cfg_file = tmp_path / "custom.toml"
    cfg_file.write_text("[scan]\nthreads = 2\n")
    with pytest.raises(ValueError, match="Unknown config key"):
        resolve_config(build_parser().parse_args([*POSITIONALS, "--config", str(cfg_file)]))


def test_config_rejects_unknown_encoding():
    with pytest.raises(ValueError, match="Unknown encoding: nope"):
        resolve_config(build_parser().parse_args([*POSITIONALS, "--encoding", "nope"]))


def test_config_rejects_wrongly_typed_values(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("USAGEINDEX_REPORT__MARKER", "a,b")
    with pytest.raises(ValueError, match="report.marker must be a str"):
        resolve_config(build_parser().parse_args(POSITIONALS))
    monkeypatch.delenv("USAGEINDEX_REPORT__MARKER")

    cfg_file = tmp_path / "custom.toml"
    cfg_file.write_text('[scan]\njobs = "4"\n')
    with pytest.raises(ValueError, match="scan.jobs must be an int"):
        resolve_config(build_parser().parse_args([*POSITIONALS, "--config", str(cfg_file)]))
