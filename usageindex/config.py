from __future__ import annotations

import argparse
import codecs
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from usageindex.report.api_report import DEFAULT_MARKER
from usageindex.scanner.language_filter import LANG_EXTENSIONS


@dataclass
class ReportConfig:
    marker: str = DEFAULT_MARKER


@dataclass
class ScanConfig:
    languages: list[str] = field(default_factory=lambda: ["c"])
    extensions: list[str] = field(default_factory=list)
    follow_symlinks: bool = False
    jobs: int = 1
    encoding: str = "utf-8"


@dataclass
class OutputConfig:
    indent: str | None = "\t"
    summary: bool = False


@dataclass
class LoggingConfig:
    progress: bool = False
    quiet: bool = False
    verbose: bool = False
    log_file: str | None = None


@dataclass
class Config:
    report_path: str = ""
    examples_path: str = ""
    output_path: str = ""
    config_path: str | None = None

    report: ReportConfig = field(default_factory=ReportConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    output_cfg: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="usageindex",
        description="Index where each API function is used across a tree of example sources",
    )
    p.add_argument("report", help="API report listing the library functions")
    p.add_argument("examples", help="Examples root; each subdirectory is an example group")
    p.add_argument("output", help="Output JSON file")
    p.add_argument("--config", dest="config_path")

    p.add_argument("--marker", help="Line prefix that opens the function block of the report")
    p.add_argument("--lang", help="Comma-separated: c,cpp")
    p.add_argument("--ext", help="Comma-separated file extensions, e.g. .c,.h (overrides --lang)")
    p.add_argument("--follow-symlinks", action="store_true")
    p.add_argument("--jobs", type=int)
    p.add_argument("--encoding")

    p.add_argument("--compact", action="store_true", help="Write JSON without indentation")
    p.add_argument("--summary", action="store_true", help="Print index statistics")

    p.add_argument("--progress", action="store_true", default=None)
    p.add_argument("--quiet", action="store_true")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--log-file")

    return p


def _deep_update(dst: dict[str, Any], src: dict[str, Any]) -> dict[str, Any]:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _deep_update(dst[k], v)
        else:
            dst[k] = v
    return dst


def _discover_config_path() -> Path | None:
    candidates = [
        Path("./usageindex.toml"),
        Path("./.usageindex.toml"),
        Path.home() / ".config" / "usageindex" / "config.toml",
    ]
    for c in candidates:
        if c.exists():
            return c
    return None


def _load_toml(path: Path | None) -> dict[str, Any]:
    if not path:
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ValueError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e


def _split_csv(raw: str) -> list[str]:
    return [x.strip() for x in raw.split(",") if x.strip()]


def _parse_env_value(raw: str) -> Any:
    low = raw.lower()
    if low in {"true", "false"}:
        return low == "true"
    try:
        return int(raw)
    except ValueError:
        if "," in raw:
            return _split_csv(raw)
        return raw


def _load_env_overrides() -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith("USAGEINDEX_"):
            continue
        key = k[len("USAGEINDEX_") :].lower()
        parts = key.split("__")
        cur = out
        for part in parts[:-1]:
            cur = cur.setdefault(part, {})
        cur[parts[-1]] = _parse_env_value(v)
    return out


def _apply_cli_overrides(data: dict[str, Any], args: argparse.Namespace) -> dict[str, Any]:
    cli: dict[str, Any] = {
        "report_path": args.report,
        "examples_path": args.examples,
        "output_path": args.output,
    }

    def sec(section: str) -> dict[str, Any]:
        return cli.setdefault(section, {})

    mapping = {
        ("report", "marker"): args.marker,
        ("scan", "jobs"): args.jobs,
        ("scan", "encoding"): args.encoding,
        ("logging", "log_file"): args.log_file,
    }
    for (s, k), v in mapping.items():
        if v is not None:
            sec(s)[k] = v

    if args.lang is not None:
        sec("scan")["languages"] = _split_csv(args.lang)
    if args.ext is not None:
        sec("scan")["extensions"] = _split_csv(args.ext)
    if args.follow_symlinks:
        sec("scan")["follow_symlinks"] = True
    if args.compact:
        sec("output")["indent"] = None
    if args.summary:
        sec("output")["summary"] = True
    if args.progress is True:
        sec("logging")["progress"] = True
    if args.quiet:
        sec("logging")["quiet"] = True
    if args.verbose:
        sec("logging")["verbose"] = True

    _deep_update(data, cli)
    return data


def _from_dict(d: dict[str, Any]) -> Config:
    try:
        return Config(
            report_path=d.get("report_path", ""),
            examples_path=d.get("examples_path", ""),
            output_path=d.get("output_path", ""),
            config_path=d.get("config_path"),
            report=ReportConfig(**d.get("report", {})),
            scan=ScanConfig(**d.get("scan", {})),
            output_cfg=OutputConfig(**d.get("output", {})),
            logging=LoggingConfig(**d.get("logging", {})),
        )
    except TypeError as e:
        raise ValueError(f"Unknown config key: {e}") from e


def _check_types(cfg: Config) -> None:
    scalars = {
        "report.marker": (cfg.report.marker, str),
        "scan.encoding": (cfg.scan.encoding, str),
        "scan.follow_symlinks": (cfg.scan.follow_symlinks, bool),
        "output.summary": (cfg.output_cfg.summary, bool),
    }
    for key, (value, expected) in scalars.items():
        if not isinstance(value, expected):
            raise ValueError(f"{key} must be a {expected.__name__}, got {value!r}")
    # bool is an int subclass; "jobs = true" is not a worker count.
    if isinstance(cfg.scan.jobs, bool) or not isinstance(cfg.scan.jobs, int):
        raise ValueError(f"scan.jobs must be an int, got {cfg.scan.jobs!r}")
    for key, values in (("scan.languages", cfg.scan.languages), ("scan.extensions", cfg.scan.extensions)):
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise ValueError(f"{key} must be a list of strings, got {values!r}")
    indent = cfg.output_cfg.indent
    if indent is not None and (isinstance(indent, bool) or not isinstance(indent, (str, int))):
        raise ValueError(f"output.indent must be a string or int, got {indent!r}")


def resolve_config(args: argparse.Namespace) -> Config:
    data: dict[str, Any] = {}

    config_path = Path(args.config_path) if args.config_path else _discover_config_path()
    if config_path:
        _deep_update(data, _load_toml(config_path))
        data["config_path"] = str(config_path)

    _deep_update(data, _load_env_overrides())
    _apply_cli_overrides(data, args)

    cfg = _from_dict(data)

    # A single env value ("USAGEINDEX_SCAN__EXTENSIONS=.c") arrives as a plain string.
    if isinstance(cfg.scan.languages, str):
        cfg.scan.languages = _split_csv(cfg.scan.languages)
    if isinstance(cfg.scan.extensions, str):
        cfg.scan.extensions = _split_csv(cfg.scan.extensions)

    _check_types(cfg)

    if not Path(cfg.output_path).suffix:
        raise ValueError(f"Missing extension on output file: {cfg.output_path}")
    if not cfg.report.marker:
        raise ValueError("report.marker must not be empty")
    if cfg.scan.jobs < 1:
        raise ValueError("scan.jobs must be >= 1")
    for lang in cfg.scan.languages:
        if lang not in LANG_EXTENSIONS:
            raise ValueError(f"Unsupported language: {lang}")
    for ext in cfg.scan.extensions:
        if not ext.startswith(".") or len(ext) < 2:
            raise ValueError(f"Invalid file extension: {ext!r} (expected e.g. '.c')")
    try:
        codecs.lookup(cfg.scan.encoding)
    except LookupError as e:
        raise ValueError(f"Unknown encoding: {cfg.scan.encoding}") from e
    if isinstance(cfg.output_cfg.indent, int):
        cfg.output_cfg.indent = " " * cfg.output_cfg.indent

    return cfg
