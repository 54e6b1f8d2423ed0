"""
Engine Targets.

`EngineTargets` maps each in-scope engine to the lowest version the output must
run on. It is built once per configuration, by one of:

- `from_pairs`: lenient merge of raw resolver output. Unknown engines and
  unparsable versions are dropped; duplicates keep the lowest version.
- `from_query`: resolve a query, then `from_pairs`.
- `from_config`: strict conversion of a structured ``targets`` config.
- `from_target_list`: strict parse of compact tokens such as ``"chrome58"``.

An engine missing from the map is out of scope for the configuration. An empty
map means any target; it never forces a transform.
"""

import logging
import re
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from compat_targets.enums import Engine, ESFeature
from compat_targets.errors import AliasParseError, ConfigConversionError, VersionParseError
from compat_targets.resolver import QueryResolver, get_default_resolver
from compat_targets.utils.console import log_warning
from compat_targets.version import Version

logger = logging.getLogger(__name__)

# Config keys that are not engine names
BROWSERS_KEY = "browsers"
ESMODULES_KEY = "esmodules"

_TARGET_TOKEN = re.compile(r"^([a-z_]+?)(\d[\d.]*)$")


class EngineTargets:
  """
  Per-engine version floors for one configuration.

  Mutation goes through `merge_floor`, `set_floor` and `remove`. Each engine
  holds at most one floor, and merges only ever lower it.
  """

  __slots__ = ("_floors",)

  def __init__(self, floors: Optional[Mapping[Engine, Version]] = None):
    self._floors: Dict[Engine, Version] = {}
    for engine, version in (floors or {}).items():
      self.merge_floor(Engine(engine), version)

  # --- Construction ---

  @classmethod
  def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "EngineTargets":
    """
    Builds targets from raw ``(engine, version)`` pairs, best effort.

    Args:
        pairs: Raw pairs, typically resolver output such as
            ``[("and_chr", "120"), ("ios_saf", "17.2-17.3")]``.

    Returns:
        EngineTargets: Never raises for unknown or malformed entries.
    """
    targets = cls()
    for raw_engine, raw_version in pairs:
      engine = Engine.resolve_alias(raw_engine)
      if engine is None:
        logger.debug("Dropping unknown engine %r", raw_engine)
        continue
      try:
        version = Version.parse(raw_version)
      except VersionParseError:
        logger.debug("Dropping %r: unparsable version %r", raw_engine, raw_version)
        continue
      targets.merge_floor(engine, version)
    return targets

  @classmethod
  def from_query(cls, query: str, resolver: Optional[QueryResolver] = None) -> "EngineTargets":
    """
    Resolves a target query and merges the result leniently.

    Args:
        query (str): e.g. ``"last 2 versions, not dead"``.
        resolver (Optional[QueryResolver]): Defaults to the process-wide resolver.

    Returns:
        EngineTargets: Merged floors.

    Raises:
        QueryResolutionError: Propagated from the resolver.
    """
    active = resolver if resolver is not None else get_default_resolver()
    return cls.from_pairs(active.resolve(query))

  @classmethod
  def from_config(cls, config: Any, resolver: Optional[QueryResolver] = None) -> "EngineTargets":
    """
    Strictly converts a structured ``targets`` config.

    Accepted shapes:

    - ``None``: any target.
    - a string: a target query.
    - a list of strings: joined into one query.
    - a mapping of canonical engine names to versions (strings or numbers).
      ``browsers`` holds a query (string or list) whose result is merged
      first; explicit engine keys then override their engine's floor.
      ``esmodules`` must be a boolean and is ignored.

    Args:
        config (Any): The deserialized config value.
        resolver (Optional[QueryResolver]): Used for query shapes.

    Returns:
        EngineTargets: Converted floors.

    Raises:
        ConfigConversionError: On an unknown key or a value that is not a version.
        QueryResolutionError: If an embedded query cannot be resolved.
    """
    if config is None:
      return cls()
    if isinstance(config, str):
      return cls.from_query(config, resolver)
    if isinstance(config, (list, tuple)):
      return cls.from_query(_join_query(None, config), resolver)
    if not isinstance(config, Mapping):
      raise ConfigConversionError(None, config, "expected a query string, a list of queries or a mapping")

    targets = cls()
    if BROWSERS_KEY in config:
      query = config[BROWSERS_KEY]
      if not isinstance(query, str):
        query = _join_query(BROWSERS_KEY, query)
      targets.merge(cls.from_query(query, resolver))

    for key, value in config.items():
      if key == BROWSERS_KEY:
        continue
      if key == ESMODULES_KEY:
        if not isinstance(value, bool):
          raise ConfigConversionError(key, value, "expected a boolean")
        log_warning("Ignoring unsupported targets option '%s'", key)
        continue
      try:
        engine = Engine.parse(key)
      except AliasParseError as e:
        raise ConfigConversionError(key, value, "unknown engine") from e
      try:
        version = Version.from_value(value)
      except VersionParseError as e:
        raise ConfigConversionError(key, value, "not a valid version") from e
      targets.set_floor(engine, version)
    return targets

  @classmethod
  def from_target_list(cls, targets: Union[str, Iterable[str]]) -> "EngineTargets":
    """
    Strictly parses compact ``<engine><version>`` tokens.

    Example: ``EngineTargets.from_target_list("chrome58,node12.1")``.

    Args:
        targets: A comma separated string or an iterable of tokens.

    Returns:
        EngineTargets: Min-merged floors.

    Raises:
        ConfigConversionError: If a token has no version or names an unknown engine.
    """
    tokens = targets.split(",") if isinstance(targets, str) else list(targets)
    result = cls()
    for raw in tokens:
      token = raw.strip().lower()
      if not token:
        continue
      match = _TARGET_TOKEN.match(token)
      if not match:
        raise ConfigConversionError(None, raw, "expected '<engine><version>', e.g. 'chrome58'")
      name, number = match.groups()
      try:
        engine = Engine.parse(name)
        version = Version.parse(number)
      except AliasParseError as e:
        raise ConfigConversionError(None, raw, f"unknown engine '{name}'") from e
      except VersionParseError as e:
        raise ConfigConversionError(None, raw, "not a valid version") from e
      result.merge_floor(engine, version)
    return result

  # --- Narrow mapping interface ---

  def get(self, engine: Engine) -> Optional[Version]:
    """Returns the floor for `engine`, or None if it is out of scope."""
    return self._floors.get(engine)

  def merge_floor(self, engine: Engine, version: Version) -> bool:
    """
    Records `version` for `engine`, keeping the lower of old and new.

    Args:
        engine (Engine): Target engine.
        version (Version): Candidate floor.

    Returns:
        bool: True if the stored floor changed.
    """
    current = self._floors.get(engine)
    if current is not None and not version < current:
      return False
    self._floors[engine] = version
    return True

  def set_floor(self, engine: Engine, version: Version) -> None:
    """Replaces the floor for `engine` unconditionally (explicit configuration)."""
    self._floors[engine] = version

  def remove(self, engine: Engine) -> Optional[Version]:
    """Takes `engine` out of scope, returning its previous floor."""
    return self._floors.pop(engine, None)

  def merge(self, other: "EngineTargets") -> "EngineTargets":
    """
    Unions `other` into this instance, keeping per-engine minima.

    Returns:
        EngineTargets: self, to allow chaining.
    """
    for engine, version in other.items():
      self.merge_floor(engine, version)
    return self

  def items(self) -> Iterator[Tuple[Engine, Version]]:
    return iter(list(self._floors.items()))

  def copy(self) -> "EngineTargets":
    clone = EngineTargets()
    clone._floors = dict(self._floors)
    return clone

  def to_dict(self) -> Dict[str, str]:
    """Canonical engine name -> version string, sorted by engine name."""
    return {engine.value: str(version) for engine, version in sorted(self._floors.items(), key=_by_name)}

  def __iter__(self) -> Iterator[Engine]:
    return iter(list(self._floors))

  def __len__(self) -> int:
    return len(self._floors)

  def __contains__(self, engine: object) -> bool:
    return engine in self._floors

  def __eq__(self, other: object) -> bool:
    if not isinstance(other, EngineTargets):
      return NotImplemented
    return self._floors == other._floors

  __hash__ = None  # mutable

  def __repr__(self) -> str:
    return f"EngineTargets({self.to_dict()!r})"

  def __str__(self) -> str:
    if not self._floors:
      return "any target"
    return ", ".join(f"{name} {version}" for name, version in self.to_dict().items())

  # --- Queries ---

  def is_any_target(self) -> bool:
    """True if no engine is constrained."""
    return not self._floors

  def should_enable(self, required: Union["EngineTargets", Mapping[Engine, Version]]) -> bool:
    """
    Decides whether a transform is needed for a feature supported from `required`.

    Only engines present in both maps are compared. An engine missing here is
    out of scope and is skipped, so an empty (any target) instance never
    forces a transform.

    Args:
        required: Versions at which native support begins, as `EngineTargets`
            or a read-only engine -> version mapping from the feature table.

    Returns:
        bool: True if some in-scope engine floor is below the required version.
    """
    for engine, needed in required.items():
      floor = self._floors.get(engine)
      if floor is not None and floor < needed:
        return True
    return False

  def has_feature(self, feature: ESFeature) -> bool:
    """
    Looks up `feature` in the feature requirement table and applies `should_enable`.

    Args:
        feature (ESFeature): The language feature.

    Returns:
        bool: True if the feature must be transformed for these targets.
    """
    from compat_targets.features import features

    return self.should_enable(features()[ESFeature(feature)])


def _by_name(item: Tuple[Engine, Version]) -> str:
  return item[0].value


def _join_query(key: Optional[str], parts: Any) -> str:
  if not isinstance(parts, (list, tuple)):
    raise ConfigConversionError(key, parts, "expected a query string or a list of query strings")
  queries: List[str] = []
  for part in parts:
    if not isinstance(part, str):
      raise ConfigConversionError(key, part, "expected a query string")
    queries.append(part)
  return ", ".join(queries)
