"""Default city tick pipeline."""

from importlib import resources
from pathlib import Path

from citysim.core.pipeline import Pipeline


def create_default_pipeline() -> Pipeline:
    """
    Create the reference tick pipeline.

    Loads the pipeline from default_pipeline.yml. The twelve events run the
    link resolution followed by the eleven phases of the economic model, in
    that exact order.

    Returns
    -------
    Pipeline
        Default pipeline with all events in correct order.

    Notes
    -----
    Users can modify it using insert_after(), remove(), replace() methods,
    or create their own pipeline from a custom YAML file using
    Pipeline.from_yaml().
    """
    traversable = resources.files("citysim") / "default_pipeline.yml"
    with resources.as_file(traversable) as yaml_fs_path:
        return Pipeline.from_yaml(Path(yaml_fs_path))
