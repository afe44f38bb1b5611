"""Read pipeline configuration from YAML, with CLI overrides."""

from pathlib import Path
from typing import Any

import pydantic_yaml

from .schema import PipelineConfig


def load_config(config_path: Path | str) -> PipelineConfig:
    """
    Parse and validate a pipeline configuration file.

    Input paths are not resolved or checked here; relative paths are taken
    relative to the working directory of the run, and a missing input
    surfaces as MissingFileError from the stage that reads it.

    Args:
        config_path: YAML file with ``inputs``, ``output_dir`` and ``analysis``

    Returns:
        Validated PipelineConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(config_path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return pydantic_yaml.parse_yaml_raw_as(PipelineConfig, config_path.read_text())


def _set_dotted(data: dict, key: str, value: Any) -> None:
    # "analysis.seed" -> data["analysis"]["seed"]
    *sections, field = key.split(".")
    target = data
    for section in sections:
        if not isinstance(target.get(section), dict):
            raise KeyError(f"Unknown config section in override '{key}'")
        target = target[section]
    target[field] = value


def load_config_with_overrides(
    config_path: Path | str,
    overrides: dict[str, Any],
) -> PipelineConfig:
    """
    Load a configuration and replace selected values.

    The CLI passes every option through unconditionally; options the user
    did not give arrive as ``None`` and leave the file's value in place.

    Args:
        config_path: YAML configuration file
        overrides: Dotted key -> value, e.g. ``{"analysis.seed": 7,
            "inputs.variant_summary": Path("vs.txt.gz"), "output_dir": ...}``

    Returns:
        Re-validated PipelineConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        KeyError: If an override names a section that does not exist
        pydantic.ValidationError: If an override value is invalid
    """
    config_dict = load_config(config_path).model_dump()

    for key, value in overrides.items():
        if value is not None:
            _set_dotted(config_dict, key, value)

    return PipelineConfig.model_validate(config_dict)


def missing_inputs(config: PipelineConfig) -> dict[str, Path]:
    """Input name -> path for every configured input file that does not exist."""
    return {
        name: path
        for name, path in config.inputs.model_dump().items()
        if not Path(path).is_file()
    }
