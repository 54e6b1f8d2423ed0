"""
Targets Configuration.

Pydantic model for the ``targets`` section of a compiler configuration, in the
same shapes Babel accepts. Shape errors are reported by pydantic on
construction; the semantic conversion to `EngineTargets` goes through the
strict `EngineTargets.from_config` path.
"""

from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from compat_targets.resolver import QueryResolver
from compat_targets.targets import EngineTargets

TargetValue = Union[bool, int, float, str, List[str]]
TargetsShape = Union[str, List[str], Dict[str, TargetValue]]


class EnvOptions(BaseModel):
  """
  Environment options for a compilation.

  Example:
      >>> opts = EnvOptions(targets={"chrome": "58", "ie": 11})
      >>> opts.engine_targets().to_dict()
      {'chrome': '58.0.0', 'ie': '11.0.0'}
  """

  model_config = ConfigDict(extra="forbid")

  targets: Optional[TargetsShape] = Field(
    None,
    description="Target query, list of queries, or mapping of engine name to minimum version. None means any target.",
  )

  def engine_targets(self, resolver: Optional[QueryResolver] = None) -> EngineTargets:
    """
    Converts `targets` into a fresh `EngineTargets`.

    Each call returns a new instance owned by the caller.

    Args:
        resolver (Optional[QueryResolver]): Used when `targets` holds a query.

    Returns:
        EngineTargets: The per-engine floors.

    Raises:
        ConfigConversionError: If a key or version is invalid.
        QueryResolutionError: If a query cannot be resolved.
    """
    return EngineTargets.from_config(self.targets, resolver=resolver)

  @classmethod
  def from_target_list(cls, targets: Union[str, Iterable[str]]) -> "EnvOptions":
    """
    Builds options from compact tokens such as ``"chrome58,node12"``.

    Raises:
        ConfigConversionError: If a token is invalid.
    """
    parsed = EngineTargets.from_target_list(targets)
    return cls(targets=parsed.to_dict())
