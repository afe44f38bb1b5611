from .loader import load_config, load_config_with_overrides, missing_inputs
from .schema import AnalysisSettings, InputFiles, PipelineConfig

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "missing_inputs",
    "PipelineConfig",
    "InputFiles",
    "AnalysisSettings",
]
