"""
Data Loader - YAML Tables and Engine Settings

Shape families, progression tables and engine defaults live as YAML
files next to this module. Each file is parsed with yaml.safe_load and
validated by its Pydantic model, so a typo in a shape surfaces as a
ShapeDataError naming the file instead of a wrong chord diagram.

Usage:
    from fretlab.data.loader import load_shape_library, load_settings

    library = load_shape_library()
    settings = load_settings("my_settings.yaml")
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from fretlab.data.schema import EngineSettings, ProgressionCatalog, ShapeLibrary

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent

SHAPES_FILE = DATA_DIR / "shapes.yaml"
PROGRESSIONS_FILE = DATA_DIR / "progressions.yaml"
DEFAULTS_FILE = DATA_DIR / "defaults.yaml"

ModelT = TypeVar("ModelT", bound=BaseModel)


class ShapeDataError(ValueError):
    """Raised when a YAML data or settings file is missing or invalid."""


def read_yaml(path: Union[str, Path]) -> Any:
    """Parse a YAML file, wrapping I/O and syntax errors in ShapeDataError."""
    path = Path(path)
    if not path.is_file():
        raise ShapeDataError(f"Data file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ShapeDataError(f"Invalid YAML in {path}: {e}") from e


def load_model(path: Union[str, Path], model: Type[ModelT]) -> ModelT:
    """Read a YAML mapping and validate it into a Pydantic model."""
    data = read_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ShapeDataError(f"{path} must contain a mapping, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ShapeDataError(f"{path} failed validation:\n{e}") from e


@lru_cache(maxsize=None)
def load_shape_library() -> ShapeLibrary:
    library = load_model(SHAPES_FILE, ShapeLibrary)
    logger.debug(
        "Loaded %d voicing families and %d CAGED shapes",
        len(library.voicing_families), len(library.caged_shapes),
    )
    return library


@lru_cache(maxsize=None)
def load_progression_catalog() -> ProgressionCatalog:
    return load_model(PROGRESSIONS_FILE, ProgressionCatalog)


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """
    Load engine settings.

    The packaged defaults are read first; keys present in the optional
    user file override them.
    """
    data = read_yaml(DEFAULTS_FILE) or {}
    if path is not None:
        overrides = read_yaml(path) or {}
        if not isinstance(overrides, dict):
            raise ShapeDataError(f"{path} must contain a mapping")
        logger.debug("Settings overrides from %s: %s", path, sorted(overrides))
        data.update(overrides)
    try:
        return EngineSettings.model_validate(data)
    except ValidationError as e:
        raise ShapeDataError(f"Invalid settings: {e}") from e
