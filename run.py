#!/usr/bin/env python3
"""
lifehooks - Direct Entry Point
===============================
Run this file directly to start the lifehooks CLI.

Usage:
    python run.py run lifehooks.yaml     # Run every lifecycle point
    python run.py show lifehooks.yaml    # List configured hooks
    python run.py --help                 # Show all commands
"""

import sys


def main():
    """Main entry point"""
    try:
        from lifehooks.cli.main import main_entry
        main_entry()
    except ImportError as e:
        print(f"Import Error: {e}")
        print("\nMake sure you've installed dependencies:")
        print("  pip install -e .")
        sys.exit(1)


if __name__ == "__main__":
    main()
