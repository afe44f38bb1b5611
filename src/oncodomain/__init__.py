"""Protein-domain localisation analysis of oncogenic and germline variants."""

__version__ = "0.1.0"
