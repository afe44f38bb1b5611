"""Provenance tracking for analysis runs."""

from oncodomain.persistence.provenance import ProvenanceTracker, describe_input

__all__ = ["ProvenanceTracker", "describe_input"]
