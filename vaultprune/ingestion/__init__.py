"""Ingestion module for reading vault files into facts and references."""

from vaultprune.ingestion.file_facts import collect_file_facts, compute_file_facts, detect_format
from vaultprune.ingestion.link_resolver import LinkResolver
from vaultprune.ingestion.reference_extractor import ReferenceExtractor
from vaultprune.ingestion.scanner import VaultListing, scan_vault

__all__ = [
    "LinkResolver",
    "ReferenceExtractor",
    "VaultListing",
    "collect_file_facts",
    "compute_file_facts",
    "detect_format",
    "scan_vault",
]
