"""
Feature Requirement Table.

Maps each `ESFeature` to the per-engine versions at which it is supported
natively. The table lives in the packaged ``data/es_features.json`` file and is
validated and built exactly once, on first use. It is never mutated afterwards,
so concurrent readers need no synchronization.

JSON shape::

    {
      "es2015.arrow_functions": {
        "description": "...",
        "targets": {"chrome": "47", "node": "6", ...}
      }
    }
"""

import json
import threading
from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from compat_targets.enums import Engine, ESFeature
from compat_targets.errors import AliasParseError, FeatureTableError, VersionParseError
from compat_targets.targets import EngineTargets
from compat_targets.utils.console import log_debug
from compat_targets.version import Version

FEATURES_FILENAME = "es_features.json"

Requirement = Mapping[Engine, Version]

_TABLE: Optional[Mapping[ESFeature, Requirement]] = None
_TABLE_LOCK = threading.Lock()


class FeatureEntry(BaseModel):
  """
  One row of the feature requirement table.
  """

  model_config = ConfigDict(extra="forbid")

  description: Optional[str] = Field(None, description="What the compatibility transform rewrites.")
  targets: Dict[str, str] = Field(description="Canonical engine name -> first natively supporting version.")


def resolve_data_dir() -> Path:
  """
  Locates the directory holding the packaged JSON data.

  Prefers the directory next to this file (source checkouts and editable
  installs), falling back to package resources for installed distributions.

  Returns:
      Path: Directory containing ``es_features.json``.
  """
  local_path = Path(__file__).parent / "data"
  if (local_path / FEATURES_FILENAME).exists():
    return local_path

  try:
    return Path(str(files("compat_targets") / "data"))
  except (ModuleNotFoundError, TypeError):
    pass

  return local_path


def load_feature_table(path: Optional[Path] = None) -> Dict[ESFeature, EngineTargets]:
  """
  Reads and validates a feature requirement table.

  Every `ESFeature` must have exactly one entry, every engine key must be a
  canonical engine name and every version must parse.

  Args:
      path (Optional[Path]): JSON file to read. Defaults to the packaged table.

  Returns:
      Dict[ESFeature, EngineTargets]: Freshly built table.

  Raises:
      FeatureTableError: If the file is missing or inconsistent.
  """
  fpath = path or resolve_data_dir() / FEATURES_FILENAME
  try:
    with open(fpath, "r", encoding="utf-8") as f:
      raw = json.load(f)
  except (OSError, json.JSONDecodeError) as e:
    raise FeatureTableError(f"Cannot read feature table {fpath}: {e}") from e

  if not isinstance(raw, dict):
    raise FeatureTableError(f"Feature table {fpath} must be a JSON object")

  table: Dict[ESFeature, EngineTargets] = {}
  for name, body in raw.items():
    try:
      feature = ESFeature(name)
    except ValueError:
      raise FeatureTableError(f"Unknown feature '{name}' in {fpath.name}") from None

    try:
      entry = FeatureEntry.model_validate(body)
    except ValidationError as e:
      raise FeatureTableError(f"Malformed entry for '{name}': {e}") from e

    required = EngineTargets()
    for engine_name, version_str in entry.targets.items():
      try:
        required.set_floor(Engine.parse(engine_name), Version.parse(version_str))
      except (AliasParseError, VersionParseError) as e:
        raise FeatureTableError(f"Invalid requirement for '{name}': {e}") from e
    table[feature] = required

  missing = [f.value for f in ESFeature if f not in table]
  if missing:
    raise FeatureTableError(f"Feature table {fpath.name} has no entry for: {', '.join(missing)}")

  return table


def features() -> Mapping[ESFeature, Requirement]:
  """
  Returns the process-wide feature requirement table.

  Built exactly once, on the first call. Both the table and each row are
  read-only views. Use `feature_requirement` for a mutable `EngineTargets` copy.

  Returns:
      Mapping[ESFeature, Requirement]: Feature -> engine -> native support floor.
  """
  global _TABLE
  if _TABLE is None:
    with _TABLE_LOCK:
      if _TABLE is None:
        table = load_feature_table()
        frozen = {feature: MappingProxyType(dict(required.items())) for feature, required in table.items()}
        log_debug("Loaded requirements for %d features", len(frozen))
        _TABLE = MappingProxyType(frozen)
  return _TABLE


def feature_requirement(feature: ESFeature) -> EngineTargets:
  """
  Returns an owned copy of the native support floors for `feature`.

  Args:
      feature (ESFeature): The feature (or its string key).

  Returns:
      EngineTargets: Copy safe to mutate.
  """
  return EngineTargets(features()[ESFeature(feature)])
