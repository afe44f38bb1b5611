"""Tests for domain annotation and membership classification."""

import polars as pl
import pytest
from polars.testing import assert_frame_equal

from oncodomain.annotation import (
    annotate_cohort,
    classify_in_batches,
    classify_membership,
    enrich_cohorts,
    iter_batches,
    restrict_regions,
)
from oncodomain.reference import ReferenceTables
from oncodomain.variants import CohortPair


@pytest.fixture
def references():
    """Two genes: BRAF with one kinase domain, KRAS with two Ras regions."""
    return ReferenceTables(
        gene_uniprot=pl.DataFrame({
            "gene_symbol": ["BRAF", "KRAS", "TP53"],
            "uniprot_accession": ["P15056", "P01116", "P04637"],
        }),
        uniprot_pfam=pl.DataFrame({
            "uniprot_accession": ["P15056", "P01116"],
            "pfam_accession": ["PF07714", "PF00071"],
        }),
        domain_catalog=pl.DataFrame({
            "pfam_accession": ["PF07714", "PF00071"],
            "clan_accession": ["CL0016", "CL0023"],
            "clan_name": ["PKinase", "P-loop_NTPase"],
            "domain_symbol": ["PK_Tyr_Ser-Thr", "Ras"],
            "domain_name": ["Protein kinase", "Ras family"],
        }),
        domain_regions=pl.DataFrame({
            "pfam_accession": ["PF07714", "PF00071", "PF00071", "PF00001"],
            "region_start": [50, 5, 200, 1],
            "region_end": [150, 60, 260, 300],
        }),
    )


def make_cohort(genes, positions):
    return pl.DataFrame(
        {
            "gene_symbol": genes,
            "variant_type": ["single nucleotide variant"] * len(genes),
            "position": positions,
        },
        schema_overrides={"position": pl.Int64},
    )


def test_annotate_cohort_joins_catalog(references):
    cohort = make_cohort(["BRAF", "KRAS"], [100, 12])

    annotated = annotate_cohort(cohort, references)

    assert annotated.height == 2
    row = annotated.row(0, named=True)
    assert row["uniprot_accession"] == "P15056"
    assert row["pfam_accession"] == "PF07714"
    assert row["domain_symbol"] == "PK_Tyr_Ser-Thr"


def test_annotate_cohort_drops_unplaceable_rows(references):
    """No position, no UniProt match, or no Pfam family: row is dropped."""
    cohort = make_cohort(["BRAF", "BRAF", "UNKNOWN", "TP53"], [100, None, 10, 10])

    annotated = annotate_cohort(cohort, references)

    assert annotated["gene_symbol"].to_list() == ["BRAF"]


def test_annotate_cohort_removes_duplicate_rows(references):
    cohort = make_cohort(["BRAF", "BRAF"], [100, 100])

    annotated = annotate_cohort(cohort, references)

    assert annotated.height == 1


@pytest.mark.parametrize(
    "position,expected",
    [(100, 1), (40, 0), (50, 1), (150, 1), (151, 0)],
)
def test_membership_boundaries_inclusive(references, position, expected):
    annotated = annotate_cohort(make_cohort(["BRAF"], [position]), references)

    result = classify_membership(annotated, references.domain_regions)

    assert result["variant_in_domain"].to_list() == [expected]
    assert result.schema["variant_in_domain"] == pl.Int8


def test_membership_fans_out_per_region(references):
    """KRAS family has two regions; each yields its own row."""
    annotated = annotate_cohort(make_cohort(["KRAS"], [220]), references)

    result = classify_membership(annotated, references.domain_regions)

    assert result.height == 2
    assert sorted(result["variant_in_domain"].to_list()) == [0, 1]


def test_membership_family_without_regions(references):
    regions = references.domain_regions.filter(pl.col("pfam_accession") != "PF07714")
    annotated = annotate_cohort(make_cohort(["BRAF"], [100]), references)

    result = classify_membership(annotated, regions)

    assert result.height == 1
    assert result["region_start"].to_list() == [None]
    assert result["variant_in_domain"].to_list() == [0]


def test_restrict_regions_semi_join(references):
    annotated = annotate_cohort(make_cohort(["BRAF"], [100]), references)

    restricted = restrict_regions(references.domain_regions, annotated)

    assert restricted["pfam_accession"].to_list() == ["PF07714"]


def test_restriction_does_not_change_result(references):
    annotated = annotate_cohort(make_cohort(["BRAF", "KRAS", "KRAS"], [100, 12, 230]), references)

    with_restriction = classify_membership(annotated, references.domain_regions, restrict=True)
    without = classify_membership(annotated, references.domain_regions, restrict=False)

    key = ["gene_symbol", "position", "region_start"]
    assert with_restriction.sort(key).equals(without.sort(key))


def test_restriction_is_per_cohort(references):
    """Each cohort keeps matches in families only the other cohort has."""
    cohorts = CohortPair(
        oncogenic=make_cohort(["BRAF"], [100]),
        germline=make_cohort(["KRAS"], [12]),
    )

    classified = enrich_cohorts(cohorts, references)

    assert classified.oncogenic["variant_in_domain"].to_list() == [1]
    assert classified.germline.filter(pl.col("variant_in_domain") == 1).height == 1


def test_iter_batches_sizes():
    df = pl.DataFrame({"x": list(range(10))})

    batches = list(iter_batches(df, 4))

    assert [b.height for b in batches] == [4, 4, 2]
    assert pl.concat(batches).equals(df)


def test_iter_batches_invalid_size():
    with pytest.raises(ValueError):
        list(iter_batches(pl.DataFrame({"x": [1]}), 0))


@pytest.mark.parametrize("batch_size", [1, 2, 3, 50])
def test_batched_equals_unbatched(references, batch_size):
    genes = ["BRAF", "KRAS"] * 5
    positions = [100, 12, 40, 230, 150, 61, 151, 5, 50, 199]
    annotated = annotate_cohort(make_cohort(genes, positions), references)

    batched = classify_in_batches(annotated, references.domain_regions, batch_size=batch_size)
    unbatched = classify_membership(annotated, references.domain_regions)

    assert_frame_equal(batched, unbatched)


def test_enrich_cohorts_end_to_end(references):
    """Five variants with hand-computed membership."""
    cohorts = CohortPair(
        oncogenic=make_cohort(["BRAF", "BRAF", "KRAS"], [100, 40, 12]),
        germline=make_cohort(["KRAS", "TP53"], [230, 10]),
    )

    classified = enrich_cohorts(cohorts, references, batch_size=2)

    # BRAF 100 in, BRAF 40 out, KRAS 12 in region 1 and out of region 2
    assert classified.oncogenic.height == 4
    assert classified.oncogenic["variant_in_domain"].sum() == 2
    # KRAS 230 out of region 1 and in region 2; TP53 has no Pfam family
    assert classified.germline.height == 2
    assert classified.germline["variant_in_domain"].sum() == 1
