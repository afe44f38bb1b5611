"""Domain annotation of variant cohorts.

gene symbol -> UniProt -> Pfam -> catalog joins, followed by the fan-out
join against domain regions that sets variant_in_domain.
"""

from oncodomain.annotation.join import (
    DEFAULT_BATCH_SIZE,
    annotate_cohort,
    classify_in_batches,
    classify_membership,
    enrich_cohorts,
    iter_batches,
    restrict_regions,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "annotate_cohort",
    "classify_in_batches",
    "classify_membership",
    "enrich_cohorts",
    "iter_batches",
    "restrict_regions",
]
