"""Column layouts and record models for the reference tables."""

from pydantic import BaseModel

# Header spellings accepted for the gene symbol -> UniProt cross-reference.
# HGNC custom downloads, biomart exports and mygene dumps all name these differently.
GENE_UNIPROT_COLUMN_VARIANTS = {
    "gene_symbol": [
        "gene_symbol",
        "symbol",
        "Approved symbol",
        "GeneSymbol",
        "hgnc_symbol",
        "SYMBOL",
    ],
    "uniprot_accession": [
        "uniprot_accession",
        "uniprot",
        "uniprot_ids",
        "UniProt ID(supplied by UniProt)",
        "UniProt accession",
        "UNIPROT",
        "uniprot_id",
    ],
}

# The PDB/UniProt/Pfam mapping ships without a usable header.
# Positions are 0-based; every other column is carried under a placeholder name
# only to validate the width of the file.
UNIPROT_PFAM_N_COLUMNS = 11
UNIPROT_PFAM_LAYOUT = {
    4: "uniprot_accession",
    10: "pfam_accession",
}
UNIPROT_PFAM_COLUMNS = [
    UNIPROT_PFAM_LAYOUT.get(i, f"column_{i + 1}") for i in range(UNIPROT_PFAM_N_COLUMNS)
]

# Pfam-A.clans.tsv: five positional columns, no header
DOMAIN_CATALOG_COLUMNS = [
    "pfam_accession",
    "clan_accession",
    "clan_name",
    "domain_symbol",
    "domain_name",
]

# Pfam-A.regions.uniprot.tsv.gz header names (leading sequence columns are dropped)
DOMAIN_REGION_COLUMN_VARIANTS = {
    "pfam_accession": ["pfamA_acc", "pfam_accession", "PFAM_ACCESSION"],
    "region_start": ["seq_start", "region_start", "start"],
    "region_end": ["seq_end", "region_end", "end"],
}

# Pfam family accession, with the release version suffix optional
PFAM_ACCESSION_PATTERN = r"^PF\d{5}(\.\d+)?$"


class GeneUniProtRecord(BaseModel):
    """One gene symbol -> UniProt accession pair.

    A symbol may map to several accessions when the source cell lists them
    comma-separated; rows without an accession are dropped at load.
    """

    gene_symbol: str
    uniprot_accession: str


class UniProtPfamRecord(BaseModel):
    """One UniProt accession -> Pfam accession pair (one-to-many)."""

    uniprot_accession: str
    pfam_accession: str


class DomainCatalogRecord(BaseModel):
    """Pfam family metadata, one row per Pfam accession."""

    pfam_accession: str
    clan_accession: str | None = None
    clan_name: str | None = None
    domain_symbol: str | None = None
    domain_name: str | None = None


class DomainRegionRecord(BaseModel):
    """A single occurrence of a Pfam domain on a protein sequence.

    Coordinates are 1-based and inclusive. Rows with ``region_start`` greater
    than ``region_end`` are rejected when the table is loaded.
    """

    pfam_accession: str
    region_start: int
    region_end: int
