#!/usr/bin/env python3
"""VisionaryAI — Environment Setup Checker

Validates that the required packages, settings and the Gemini credential
are present before running the estimator for the first time.

Usage:
    python scripts/setup_check.py            # full check
    python scripts/setup_check.py --quick    # skip the locale data check
"""
from __future__ import annotations

import argparse
import importlib
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

try:
    import yaml
except ImportError:
    print("ERROR: PyYAML not installed.  Run: pip install -e .")
    sys.exit(1)

# ── Paths ─────────────────────────────────────────────────────────────────────
REPO_ROOT = Path(__file__).parent.parent
CONFIG_DIR = REPO_ROOT / "backend" / "config"
SETTINGS_YAML = CONFIG_DIR / "settings.yaml"
TEMPLATES_DIR = REPO_ROOT / "backend" / "templates"

# ── ANSI colours ──────────────────────────────────────────────────────────────
GREEN  = "\033[92m"
YELLOW = "\033[93m"
RED    = "\033[91m"
BLUE   = "\033[94m"
RESET  = "\033[0m"
BOLD   = "\033[1m"


def ok(msg: str) -> str:
    return f"  {GREEN}✓{RESET}  {msg}"


def warn(msg: str) -> str:
    return f"  {YELLOW}⚠{RESET}  {msg}"


def err(msg: str) -> str:
    return f"  {RED}✗{RESET}  {msg}"


def section(title: str) -> None:
    print(f"\n{BOLD}{BLUE}━━ {title} ━━{RESET}")


# ── Result accumulator ────────────────────────────────────────────────────────
@dataclass
class CheckResult:
    passed: int = 0
    warned: int = 0
    failed: int = 0
    messages: List[Tuple[str, str]] = field(default_factory=list)

    def add(self, level: str, msg: str) -> None:
        self.messages.append((level, msg))
        if level == "ok":
            self.passed += 1
        elif level == "warn":
            self.warned += 1
        else:
            self.failed += 1

    def print_summary(self) -> None:
        section("Summary")
        total = self.passed + self.warned + self.failed
        print(f"  {GREEN}{self.passed}{RESET} passed  "
              f"{YELLOW}{self.warned}{RESET} warnings  "
              f"{RED}{self.failed}{RESET} failed  "
              f"({total} checks)")

    @property
    def exit_code(self) -> int:
        return 0 if self.failed == 0 else 1


# ── Individual checks ─────────────────────────────────────────────────────────


def check_python_version(result: CheckResult) -> None:
    section("Python")
    major, minor = sys.version_info[:2]
    ver = f"{major}.{minor}"
    if (major, minor) >= (3, 10):
        print(ok(f"Python {ver}"))
        result.add("ok", f"Python {ver}")
    else:
        print(err(f"Python {ver} — need 3.10+"))
        result.add("fail", f"Python {ver} — need 3.10+")


def check_python_packages(result: CheckResult) -> None:
    section("Python packages")

    # distribution name → import name
    required = {
        "fastapi":          "fastapi",
        "uvicorn":          "uvicorn",
        "pydantic":         "pydantic",
        "pyyaml":           "yaml",
        "python-dotenv":    "dotenv",
        "google-genai":     "google.genai",
        "babel":            "babel",
        "jinja2":           "jinja2",
        "python-multipart": "multipart",
    }
    for dist, module in required.items():
        try:
            importlib.import_module(module)
            print(ok(dist))
            result.add("ok", f"Package: {dist}")
        except ImportError:
            print(err(f"{dist} not installed"))
            result.add("fail", f"Package missing: {dist}")


def check_settings(result: CheckResult) -> dict:
    section("Configuration")

    if not SETTINGS_YAML.exists():
        print(err(f"settings.yaml not found at {SETTINGS_YAML}"))
        result.add("fail", "settings.yaml missing")
        return {}

    with open(SETTINGS_YAML, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    for key in ("gemini", "estimate", "logging"):
        if key in data:
            print(ok(f"settings.{key}"))
            result.add("ok", f"settings.{key}")
        else:
            print(warn(f"settings.{key} missing — defaults will be used"))
            result.add("warn", f"settings.{key} missing")

    if (TEMPLATES_DIR / "index.html").exists():
        print(ok("templates/index.html"))
        result.add("ok", "Page template present")
    else:
        print(err(f"index.html not found in {TEMPLATES_DIR}"))
        result.add("fail", "Page template missing")
    return data


def check_locale(result: CheckResult, settings: dict) -> None:
    section("Currency formatting")
    estimate = settings.get("estimate", {})
    currency = estimate.get("currency", "KRW")
    locale = estimate.get("locale", "ko_KR")
    try:
        from babel.numbers import format_currency
        sample = format_currency(1000000, currency, locale=locale)
        print(ok(f"{locale} / {currency}: {sample}"))
        result.add("ok", f"Locale {locale}")
    except Exception as exc:  # noqa: BLE001
        print(err(f"Cannot format {currency} for {locale}: {exc}"))
        result.add("fail", f"Locale {locale} unusable")


def check_api_key(result: CheckResult, settings: dict) -> None:
    section("API keys")

    from dotenv import load_dotenv
    load_dotenv(Path.home() / ".visionary" / ".env", override=False)
    load_dotenv(REPO_ROOT / "backend" / ".env", override=False)

    var = settings.get("gemini", {}).get("api_key_env", "GEMINI_API_KEY")
    val = os.environ.get(var, "")
    if val:
        masked = val[:4] + "..." + val[-4:] if len(val) > 8 else "****"
        print(ok(f"{var}: {masked}"))
        result.add("ok", f"{var} set")
    else:
        print(err(f"{var}: not set — every estimate request will fail"))
        result.add("fail", f"{var} missing")


# ── Main ──────────────────────────────────────────────────────────────────────


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="VisionaryAI environment setup checker"
    )
    parser.add_argument("--quick", action="store_true", help="Skip the locale data check")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    result = CheckResult()

    print(f"\n{BOLD}VisionaryAI — Setup Checker{RESET}")
    print(f"Repo root: {REPO_ROOT}")

    check_python_version(result)
    check_python_packages(result)
    settings = check_settings(result)
    if not args.quick:
        check_locale(result, settings)
    check_api_key(result, settings)

    result.print_summary()
    print()

    if result.failed == 0 and result.warned == 0:
        print(f"{GREEN}{BOLD}✓ All checks passed — run: uvicorn backend.main:app{RESET}\n")
    elif result.failed == 0:
        print(f"{YELLOW}{BOLD}⚠ Setup complete with warnings.{RESET}\n")
    else:
        print(f"{RED}{BOLD}✗ {result.failed} check(s) failed — resolve errors before "
              f"starting the server.{RESET}\n")

    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
