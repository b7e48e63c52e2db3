"""Module entry point for `python -m deploy_verify`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
