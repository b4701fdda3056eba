"""Entry point for running depsplit as a module."""

from depsplit.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
