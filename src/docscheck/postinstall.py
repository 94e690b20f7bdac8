"""
Post-install helper for setting up the crawler's browser.

Downloads the Chromium build Playwright drives during site link checks.
"""
import subprocess
import sys


def postinstall():
    """
    Run playwright install to download browser binaries.

    Exposed as the ``docscheck-install-browser`` command.
    """
    print("Checking for browser installation...")

    # Check if playwright is installed
    try:
        from playwright.async_api import async_playwright  # noqa: F401
    except ImportError:
        print(
            "Playwright is not installed. Skipping browser setup.\n"
            "To install, run: pip install playwright"
        )
        return 1

    print("Running 'playwright install chromium'...")
    try:
        result = subprocess.run(
            [sys.executable, "-m", "playwright", "install", "chromium"],
            check=True,
            capture_output=True,
            text=True
        )
        if result.stdout:
            print(result.stdout)
        print("Chromium browser installed successfully.")
    except subprocess.CalledProcessError as e:
        print(f"Error installing Chromium browser for Playwright: {e}", file=sys.stderr)
        if e.stderr:
            print(e.stderr, file=sys.stderr)
        print(
            "Please run the following command manually:\n"
            "  python -m playwright install chromium",
            file=sys.stderr
        )
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(postinstall())
