#!/usr/bin/env python3
"""
Environment setup for the Q&A topic scraper.
Creates working directories, writes default settings and checks the browser toolchain.
"""

import json
import subprocess
import sys
from pathlib import Path

from qa_scraper.constants import DEFAULT_PATHS
from qa_scraper.scraper.config import DEFAULT_SETTINGS


def create_directories():
    """Create the output and log directories."""
    print("Creating directory structure...")
    for directory in (DEFAULT_PATHS['output_dir'], DEFAULT_PATHS['logs_dir']):
        Path(directory).mkdir(parents=True, exist_ok=True)
        print(f"  ✓ Created: {directory}")


def validate_config_file():
    """Write the default settings file if missing, otherwise check it parses."""
    print("\nValidating configuration file...")
    config_path = Path(DEFAULT_PATHS['config_file'])
    config_path.parent.mkdir(parents=True, exist_ok=True)

    if not config_path.exists():
        with open(config_path, 'w', encoding='utf-8') as f:
            json.dump(DEFAULT_SETTINGS, f, indent=2)
        print(f"  ✓ Created default: {config_path}")
        return True

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            json.load(f)
        print(f"  ✓ Validated: {config_path}")
        return True
    except json.JSONDecodeError as e:
        print(f"  ❌ Invalid JSON in {config_path}: {e}")
        return False


def check_dependencies():
    """Check that the runtime packages can be imported."""
    print("\nChecking dependencies...")
    missing = []
    for package in ("playwright", "pandas", "aiohttp", "tenacity", "bs4", "dotenv"):
        try:
            __import__(package)
            print(f"  ✓ {package}")
        except ImportError:
            missing.append(package)
            print(f"  ❌ {package} - Missing")

    if missing:
        print(f"\nMissing packages: {', '.join(missing)}")
        print("Install with: pip install -e .")
        return False
    return True


def check_playwright_browsers():
    """Check that Chromium is installed for Playwright."""
    print("\nChecking Playwright browsers...")
    try:
        result = subprocess.run(
            [sys.executable, "-c", "from playwright.sync_api import sync_playwright; "
                                   "p = sync_playwright().start(); p.chromium.launch().close(); p.stop()"],
            capture_output=True,
            text=True,
            timeout=30
        )
    except subprocess.TimeoutExpired:
        print("  ❌ Playwright browser check timed out")
        return False

    if result.returncode == 0:
        print("  ✓ Playwright browsers installed")
        return True
    print("  ❌ Playwright browsers not installed")
    print("Install with: playwright install chromium")
    return False


def create_env_example():
    """Create an example environment file."""
    env_content = """# Q&A Scraper Environment Variables

# Site credentials
QUORA_EMAIL=you@example.com
QUORA_PASS=change-me

# Hosted browser (hyper driver only)
HYPERBROWSER_API_KEY=

# Defaults
DEFAULT_TOPIC=Growth Hacking

# Proxy (optional)
PROXY_HOST=
PROXY_PORT=
PROXY_USER=
PROXY_PASS=
"""
    env_path = Path(".env.example")
    if not env_path.exists():
        env_path.write_text(env_content, encoding='utf-8')
        print("  ✓ Created: .env.example")


def main():
    print("🚀 Q&A Scraper Setup")
    print("=" * 40)

    create_directories()

    if not validate_config_file():
        print("\n❌ Setup failed: Configuration file errors")
        return False

    create_env_example()

    if not check_dependencies():
        print("\n❌ Setup failed: Missing dependencies")
        return False

    playwright_ok = check_playwright_browsers()

    print("\n" + "=" * 40)
    print("✅ Setup completed successfully!")
    print("\nNext steps:")
    if not playwright_ok:
        print("1. Install Playwright browsers: playwright install chromium")
    print("2. Fill in credentials: cp .env.example .env")
    print("3. Run offline against fixtures: qa-scraper --driver local --site quora --limit 5")

    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
