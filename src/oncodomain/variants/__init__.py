"""ClinVar variant loading, cohort definition and position parsing.

- load -> assembly filter -> oncogenic / germline-control cohorts
- amino-acid position parsed from the variant name
"""

from oncodomain.variants.models import (
    CONTROL_CLASS,
    GERMLINE,
    ONCOGENIC,
    ONCOGENIC_CLASS,
    REQUIRED_COLUMNS,
    RETAINED_COLUMNS,
    EnrichedVariantRecord,
    VariantRecord,
)
from oncodomain.variants.load import filter_assembly, load_variant_summary
from oncodomain.variants.names import (
    ParsedName,
    add_positions,
    count_unparseable,
    parse_variant_name,
)
from oncodomain.variants.cohorts import (
    CohortPair,
    select_germline_controls,
    select_oncogenic,
    split_cohorts,
)

__all__ = [
    "CONTROL_CLASS",
    "GERMLINE",
    "ONCOGENIC",
    "ONCOGENIC_CLASS",
    "REQUIRED_COLUMNS",
    "RETAINED_COLUMNS",
    "EnrichedVariantRecord",
    "VariantRecord",
    "filter_assembly",
    "load_variant_summary",
    "ParsedName",
    "add_positions",
    "count_unparseable",
    "parse_variant_name",
    "CohortPair",
    "select_germline_controls",
    "select_oncogenic",
    "split_cohorts",
]
