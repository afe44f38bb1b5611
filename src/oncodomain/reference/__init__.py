"""Reference tables linking gene symbols to Pfam domain coordinates.

Loads four flat files:
- gene symbol -> UniProt accession cross-reference
- UniProt -> Pfam accession mapping (headerless, positional)
- Pfam family catalog (clan, symbol, name)
- Pfam domain regions (start/end per occurrence)
"""

from oncodomain.reference.models import (
    DOMAIN_CATALOG_COLUMNS,
    UNIPROT_PFAM_COLUMNS,
    UNIPROT_PFAM_N_COLUMNS,
    DomainCatalogRecord,
    DomainRegionRecord,
    GeneUniProtRecord,
    UniProtPfamRecord,
)
from oncodomain.reference.load import (
    ReferenceTables,
    load_domain_catalog,
    load_domain_regions,
    load_gene_uniprot_map,
    load_reference_tables,
    load_uniprot_pfam_map,
)

__all__ = [
    "DOMAIN_CATALOG_COLUMNS",
    "UNIPROT_PFAM_COLUMNS",
    "UNIPROT_PFAM_N_COLUMNS",
    "DomainCatalogRecord",
    "DomainRegionRecord",
    "GeneUniProtRecord",
    "UniProtPfamRecord",
    "ReferenceTables",
    "load_domain_catalog",
    "load_domain_regions",
    "load_gene_uniprot_map",
    "load_reference_tables",
    "load_uniprot_pfam_map",
]
