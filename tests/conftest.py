"""Shared synthetic inputs: three genes, three Pfam families, two cohorts.

Expected outcome of a full run with these files:
- oncogenic cohort: 8 GRCh38 rows, 1 without a position, 7 classified
  (5 inside a domain, 2 outside)
- germline cohort: 10 classified rows (4 inside, 6 outside)
- in-domain domain symbols: PK_Tyr_Ser-Thr (2), Ras (2), P53 (1)
"""

import gzip
from pathlib import Path

import pytest


GENE_UNIPROT_ROWS = [
    ("Approved symbol", "UniProt ID(supplied by UniProt)"),
    ("BRAF", "P15056"),
    ("KRAS", "P01116"),
    ("TP53", "P04637"),
    ("TP53", "P04637"),
    ("EGFR", "P00533"),
    ("ORPHAN1", ""),
]

UNIPROT_PFAM_HEADER = (
    "PDB", "CHAIN", "SP_PRIMARY", "WHOLE_CHAIN", "UNIPROT",
    "RES_BEG", "RES_END", "PDB_BEG", "PDB_END", "PFAM_NAME", "PFAM_ID",
)

UNIPROT_PFAM_ROWS = [
    ("1uwh", "A", "P15056", "N", "P15056", "448", "723", "448", "723", "Pkinase_Tyr", "PF07714.20"),
    ("4mne", "B", "P15056", "N", "P15056", "448", "723", "448", "723", "Pkinase_Tyr", "PF07714.20"),
    ("4obe", "A", "P01116", "Y", "P01116", "1", "169", "1", "169", "Ras", "PF00071.25"),
    ("2ocj", "A", "P04637", "N", "P04637", "94", "292", "94", "292", "P53", "PF00870"),
    ("1ivo", "A", "P00533", "N", "P00533", "712", "968", "712", "968", "Pkinase_Tyr", "PF07714.20"),
]

DOMAIN_CATALOG_ROWS = [
    ("PF07714", "CL0016", "PKinase", "PK_Tyr_Ser-Thr", "Protein tyrosine and serine/threonine kinase"),
    ("PF00071", "CL0023", "P-loop_NTPase", "Ras", "Ras family"),
    ("PF00870", "", "", "P53", "P53 DNA-binding domain"),
    ("PF00001", "CL0192", "GPCR_A", "7tm_1", "7 transmembrane receptor (rhodopsin family)"),
]

DOMAIN_REGION_HEADER = (
    "uniprot_acc", "seq_version", "crc64", "md5", "pfamA_acc", "seq_start", "seq_end",
)

DOMAIN_REGION_ROWS = [
    ("P15056", "4", "A1B2C3D4", "aa11", "PF07714.20", "457", "712"),
    ("Q9XXX1", "1", "A1B2C3D5", "aa12", "PF07714", "457", "712"),
    ("P01116", "1", "B1B2C3D4", "bb11", "PF00071", "5", "164"),
    ("P04637", "4", "C1B2C3D4", "cc11", "PF00870", "95", "288"),
    ("P08588", "2", "D1B2C3D4", "dd11", "PF00001", "60", "360"),
    ("P99999", "1", "E1B2C3D4", "ee11", "PF00870", "300", "200"),
]

VARIANT_HEADER = (
    "#AlleleID", "Type", "Name", "GeneSymbol", "ClinicalSignificance",
    "OriginSimple", "Assembly", "Oncogenicity",
)

SNV = "single nucleotide variant"


def _variant(allele_id, name, gene, origin, oncogenicity,
             assembly="GRCh38", variant_type=SNV, significance="-"):
    return (str(allele_id), variant_type, name, gene, significance, origin, assembly, oncogenicity)


VARIANT_ROWS = [
    # Oncogenic cohort
    _variant(1, "NM_004333.6(BRAF):c.1799T>A (p.Val600Glu)", "BRAF", "somatic", "Oncogenic"),
    _variant(2, "NM_004333.6(BRAF):c.1406G>C (p.Gly469Ala)", "BRAF", "somatic", "Likely oncogenic"),
    _variant(3, "NM_004985.5(KRAS):c.35G>A (p.Gly12Asp)", "KRAS", "germline/somatic", "Oncogenic"),
    _variant(4, "NM_004985.5(KRAS):c.183A>C (p.Gln61His)", "KRAS", "somatic", "Oncogenic"),
    _variant(5, "NM_000546.6(TP53):c.743G>A (p.Arg248Gln)", "TP53", "somatic", "Oncogenic"),
    _variant(6, "NM_000546.6(TP53):c.1024C>T (p.Arg342Ter)", "TP53", "somatic", "Likely oncogenic"),
    _variant(7, "NM_004333.6(BRAF):c.2185_2187del (p.Ser729del)", "BRAF", "somatic", "Oncogenic",
             variant_type="Deletion"),
    _variant(8, "NM_004333.6(BRAF):c.-10C>T", "BRAF", "somatic", "Oncogenic"),
    # Other assembly
    _variant(1, "NM_004333.6(BRAF):c.1799T>A (p.Val600Glu)", "BRAF", "somatic", "Oncogenic",
             assembly="GRCh37"),
    # Germline controls
    _variant(11, "NM_004333.6(BRAF):c.299C>T (p.Ala100Val)", "BRAF", "unknown", "not applicable"),
    _variant(12, "NM_004333.6(BRAF):c.1499A>G (p.Asn500Ser)", "BRAF", "unknown", "not applicable"),
    _variant(13, "NM_004985.5(KRAS):c.539C>T (p.Thr180Ile)", "KRAS", "not provided", "not applicable"),
    _variant(14, "NM_004985.5(KRAS):c.59C>T (p.Ala20Val)", "KRAS", "unknown", "not applicable"),
    _variant(15, "NM_000546.6(TP53):c.149C>T (p.Pro50Leu)", "TP53", "unknown", "not applicable"),
    _variant(16, "NM_000546.6(TP53):c.899A>G (p.His300Arg)", "TP53", "unknown", "not applicable"),
    _variant(17, "NM_000546.6(TP53):c.449C>T (p.Thr150Ile)", "TP53", "unknown", "not applicable"),
    _variant(18, "NM_004333.6(BRAF):c.2398G>A (p.Ala800Thr)", "BRAF", "unknown", "not applicable"),
    _variant(19, "NM_004985.5(KRAS):c.509G>A (p.Gly170Asp)", "KRAS", "unknown", "not applicable"),
    _variant(20, "NM_000546.6(TP53):c.599A>G (p.Asn200Ser)", "TP53", "unknown", "not applicable"),
    # Excluded from both cohorts
    _variant(21, "NM_000546.6(TP53):c.215C>G (p.Pro72Arg)", "TP53", "germline", "not applicable"),
    _variant(22, "NM_004985.5(KRAS):c.40G>A (p.Val14Ile)", "KRAS", "somatic", "not applicable"),
    _variant(23, "NM_005228.5(EGFR):c.2573T>G (p.Leu858Arg)", "EGFR", "unknown", "not applicable"),
    _variant(24, "NM_004333.6(BRAF):c.1781A>G (p.Asp594Gly)", "BRAF", "somatic", "Benign"),
]


def write_tsv(path: Path, rows, header=None, compress=False) -> Path:
    """Write rows as tab-delimited text, gzip-compressed if requested."""
    lines = []
    if header is not None:
        lines.append("\t".join(header))
    lines.extend("\t".join(row) for row in rows)
    content = "\n".join(lines) + "\n"

    if compress:
        with gzip.open(path, "wt") as f:
            f.write(content)
    else:
        path.write_text(content)
    return path


@pytest.fixture
def input_dir(tmp_path):
    """Directory holding all five synthetic input files."""
    data = tmp_path / "data"
    data.mkdir()

    write_tsv(data / "hgnc_uniprot.tsv", GENE_UNIPROT_ROWS)
    write_tsv(data / "pdb_pfam_mapping.tsv", UNIPROT_PFAM_ROWS, header=UNIPROT_PFAM_HEADER)
    write_tsv(data / "Pfam-A.clans.tsv", DOMAIN_CATALOG_ROWS)
    write_tsv(
        data / "Pfam-A.regions.uniprot.tsv.gz",
        DOMAIN_REGION_ROWS,
        header=DOMAIN_REGION_HEADER,
        compress=True,
    )
    write_tsv(
        data / "variant_summary.txt.gz",
        VARIANT_ROWS,
        header=VARIANT_HEADER,
        compress=True,
    )
    return data


@pytest.fixture
def config_file(tmp_path, input_dir):
    """Config YAML pointing at the synthetic inputs."""
    config_path = tmp_path / "test_config.yaml"
    config_path.write_text(f"""
inputs:
  gene_uniprot: {input_dir / "hgnc_uniprot.tsv"}
  uniprot_pfam: {input_dir / "pdb_pfam_mapping.tsv"}
  domain_catalog: {input_dir / "Pfam-A.clans.tsv"}
  domain_regions: {input_dir / "Pfam-A.regions.uniprot.tsv.gz"}
  variant_summary: {input_dir / "variant_summary.txt.gz"}

output_dir: {tmp_path / "results"}

analysis:
  assembly: GRCh38
  batch_size: 3
  top_n_domains: 2
  seed: 7
""")
    return config_path
