#!/usr/bin/env python3
"""
YouTube Thumbnail Studio - Setup Checker
========================================
Verifies that all dependencies are correctly installed and that the Gemini
credential is configured.
"""

import sys


def check_import(module_name, package_name=None):
    """Try to import a module and report status"""
    package_name = package_name or module_name
    try:
        __import__(module_name)
        print(f"  [OK] {package_name}")
        return True
    except ImportError:
        print(f"  [X]  {package_name} - Not installed")
        return False


def check_api_key():
    """Check that the Gemini credential is configured"""
    from config import load_settings
    from errors import MissingCredentialError

    print("\nAPI Keys:")
    try:
        load_settings()
    except MissingCredentialError:
        print("  [X]  Gemini (Nano Banana) - GEMINI_API_KEY not configured")
        return False
    print("  [OK] Gemini (Nano Banana)")
    return True


def check_models():
    """Show which models will be used"""
    from config import GEMINI_IMAGE_MODEL, GEMINI_TEXT_MODEL, REQUEST_TIMEOUT_SECONDS

    print("\nModels:")
    print(f"  [OK] Image generation: {GEMINI_IMAGE_MODEL}")
    print(f"  [OK] Suggestions:      {GEMINI_TEXT_MODEL}")
    if REQUEST_TIMEOUT_SECONDS:
        print(f"  [OK] Request timeout:  {REQUEST_TIMEOUT_SECONDS:g}s")
    else:
        print("  [!]  Request timeout:  disabled")
    return True


def run_checks():
    """Run every check; True when the studio is ready to generate thumbnails"""
    all_ok = True

    # Core dependencies
    print("\nCore Dependencies:")
    all_ok &= check_import('PIL', 'Pillow')
    all_ok &= check_import('pydantic', 'Pydantic')
    all_ok &= check_import('dotenv', 'python-dotenv')

    # LLM APIs
    print("\nLLM APIs:")
    all_ok &= check_import('google.genai', 'Google GenAI')

    if not all_ok:
        return False

    all_ok &= check_api_key()
    check_models()
    return all_ok


def main():
    print("=" * 60)
    print("YouTube Thumbnail Studio - Setup Check")
    print("=" * 60)

    all_ok = run_checks()

    # Summary
    print("\n" + "=" * 60)
    if all_ok:
        print("All core dependencies OK!")
    else:
        print("Some dependencies are missing or not configured.")
        print("\nInstall missing packages with:")
        print("  pip install -e .")
        print("\nThen copy .env.example to .env and set GEMINI_API_KEY.")
    print("=" * 60)

    return 0 if all_ok else 1


if __name__ == "__main__":
    sys.exit(main())
