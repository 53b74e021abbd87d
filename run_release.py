"""Convenience shim to run the batch release workflow from a checkout."""

from __future__ import annotations

from ghrelease.runner import main


if __name__ == "__main__":
    main()
