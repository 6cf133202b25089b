from __future__ import annotations

import json
import os
import sys
import tomllib
from pathlib import Path

import yaml

DEFAULT_PASSTHROUGH = [
    "assets/images",
    "assets/js",
    "assets/styles",
    "robots.txt",
]
ENV_VAR = "SITE_ENV"


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be an object: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def resolve_passthrough(config: dict) -> list[str]:
    value = config.get("passthrough")
    if value is None:
        return list(DEFAULT_PASSTHROUGH)
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        print("Config key 'passthrough' must be a list of paths.", file=sys.stderr)
        sys.exit(1)
    return [str(item).strip().strip("/") for item in value if str(item).strip()]


def resolve_env(config: dict) -> str:
    value = os.environ.get(ENV_VAR) or config.get("env") or "development"
    return str(value).strip().lower()
