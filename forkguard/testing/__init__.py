"""Helpers for verifying caller-supplied store adapters."""

from forkguard.testing.conformance import check_store_conformance

__all__ = ["check_store_conformance"]
