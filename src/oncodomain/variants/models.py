"""Column layout and record models for ClinVar variant_summary rows."""

from pydantic import BaseModel

# variant_summary header -> standardized column name.
# The first six are required; the rest are carried through the pipeline when present.
REQUIRED_COLUMNS = {
    "Assembly": "assembly",
    "GeneSymbol": "gene_symbol",
    "Oncogenicity": "oncogenicity",
    "OriginSimple": "origin",
    "Name": "name",
    "Type": "variant_type",
}

RETAINED_COLUMNS = {
    "#AlleleID": "allele_id",
    "VariationID": "variation_id",
    "GeneID": "gene_id",
    "HGNC_ID": "hgnc_id",
    "ClinicalSignificance": "clinical_significance",
    "ClinSigSimple": "clin_sig_simple",
    "Origin": "origin_detail",
    "Chromosome": "chromosome",
    "Start": "start",
    "Stop": "stop",
    "ReferenceAlleleVCF": "reference_allele",
    "AlternateAlleleVCF": "alternate_allele",
    "ReviewStatus": "review_status",
    "NumberSubmitters": "number_submitters",
    "PhenotypeList": "phenotype_list",
    "SomaticClinicalImpact": "somatic_clinical_impact",
    "ReviewStatusOncogenicity": "review_status_oncogenicity",
}

# Cohort identifiers
ONCOGENIC = "oncogenic"
GERMLINE = "germline"

# Labels used for the two-level oncogenicity factor in the regression
ONCOGENIC_CLASS = "Oncogenic"
CONTROL_CLASS = "None"


class VariantRecord(BaseModel):
    """A ClinVar variant after loading and name parsing.

    Attributes:
        gene_symbol: HGNC gene symbol (join key to the gene -> UniProt map)
        variant_type: ClinVar Type (single nucleotide variant, Deletion, ...)
        name: Raw ClinVar Name, e.g. "NM_004333.6(BRAF):c.1799T>A (p.Val600Glu)"
        origin: OriginSimple (somatic, germline, unknown, ...)
        oncogenicity: Oncogenicity classification or the "not applicable" label
        assembly: Genome assembly (GRCh37, GRCh38, ...)
        protein_change: Name with parentheses removed, up to the first space
        variant_token: Remainder of the name after the first space
        position: First integer in variant_token (NULL if none)
    """

    gene_symbol: str
    variant_type: str
    name: str
    origin: str | None = None
    oncogenicity: str | None = None
    assembly: str
    protein_change: str | None = None
    variant_token: str | None = None
    position: int | None = None


class EnrichedVariantRecord(VariantRecord):
    """A variant joined to one Pfam domain region.

    A variant whose Pfam family occurs at several regions appears once per
    region. variant_in_domain is 1 only when position, region_start and
    region_end are all present and region_start <= position <= region_end.
    """

    uniprot_accession: str | None = None
    pfam_accession: str | None = None
    clan_accession: str | None = None
    clan_name: str | None = None
    domain_symbol: str | None = None
    domain_name: str | None = None
    region_start: int | None = None
    region_end: int | None = None
    variant_in_domain: int = 0
