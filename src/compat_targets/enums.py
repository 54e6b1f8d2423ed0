"""
Enumerations for compat-targets.

This module defines the closed set of target engines, the alias table used to
normalize raw engine identifiers, and the language features whose native
support is tracked per engine.
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from compat_targets.errors import AliasParseError


class Engine(str, Enum):
  """
  Canonical identifier of a target runtime or browser.

  The enum value is the canonical lowercase name accepted by strict parsing
  and used as the key in structured targets config.
  """

  CHROME = "chrome"
  DENO = "deno"
  EDGE = "edge"
  FIREFOX = "firefox"
  HERMES = "hermes"
  IE = "ie"
  IOS = "ios"  # iOS Safari
  NODE = "node"
  OPERA = "opera"
  RHINO = "rhino"
  SAFARI = "safari"
  SAMSUNG = "samsung"  # Samsung Internet
  ELECTRON = "electron"
  OPERA_MOBILE = "opera_mobile"
  ANDROID = "android"

  def __str__(self) -> str:
    return self.value

  @classmethod
  def parse(cls, name: str) -> "Engine":
    """
    Strictly parses a canonical engine name.

    Only the canonical names (the enum values) are accepted. Usage-feed
    aliases such as ``and_chr`` are rejected here; use `resolve_alias` for those.

    Args:
        name (str): Canonical engine name, e.g. ``"chrome"``.

    Returns:
        Engine: The matching engine.

    Raises:
        AliasParseError: If `name` is not a canonical engine name.
    """
    # Aliases are not folded in here, so a config key such as "and_chr" fails.
    # Feed data goes through resolve_alias instead.
    try:
      return cls(name)
    except ValueError:
      raise AliasParseError(name) from None

  @classmethod
  def resolve_alias(cls, name: str) -> Optional["Engine"]:
    """
    Maps a raw engine identifier (canonical name or alias) to an Engine.

    Args:
        name (str): Raw identifier as produced by a target query resolver.

    Returns:
        Optional[Engine]: The engine, or None if the identifier is unknown or not a string.
    """
    if not isinstance(name, str):
      return None
    return ENGINE_ALIASES.get(name)


# Raw identifier -> canonical engine. Canonical names map to themselves.
# Adding an engine alias is a single edit here.
ENGINE_ALIASES: Dict[str, Engine] = {
  **{engine.value: engine for engine in Engine},
  "and_chr": Engine.CHROME,
  "and_ff": Engine.FIREFOX,
  "ie_mob": Engine.IE,
  "ios_saf": Engine.IOS,
  "op_mob": Engine.OPERA,
}


def aliases_for(engine: Engine) -> Tuple[str, ...]:
  """
  Lists every raw identifier that resolves to `engine`, canonical name first.

  Args:
      engine (Engine): The canonical engine.

  Returns:
      Tuple[str, ...]: Identifiers accepted by `Engine.resolve_alias`.
  """
  extra = sorted(raw for raw, target in ENGINE_ALIASES.items() if target is engine and raw != engine.value)
  return (engine.value, *extra)


class ESFeature(str, Enum):
  """
  Language features that may need a compatibility transform.

  Values are the keys of the packaged feature requirement table.
  """

  ES5_MEMBER_EXPRESSION_LITERALS = "es5.member_expression_literals"
  ES5_PROPERTY_LITERALS = "es5.property_literals"
  ES2015_TEMPLATE_LITERALS = "es2015.template_literals"
  ES2015_ARROW_FUNCTIONS = "es2015.arrow_functions"
  ES2015_CLASSES = "es2015.classes"
  ES2015_BLOCK_SCOPING = "es2015.block_scoping"
  ES2015_SPREAD = "es2015.spread"
  ES2016_EXPONENTIATION_OPERATOR = "es2016.exponentiation_operator"
  ES2017_ASYNC_TO_GENERATOR = "es2017.async_to_generator"
  ES2018_OBJECT_REST_SPREAD = "es2018.object_rest_spread"
  ES2018_ASYNC_GENERATOR_FUNCTIONS = "es2018.async_generator_functions"
  ES2019_OPTIONAL_CATCH_BINDING = "es2019.optional_catch_binding"
  ES2020_NULLISH_COALESCING_OPERATOR = "es2020.nullish_coalescing_operator"
  ES2020_OPTIONAL_CHAINING = "es2020.optional_chaining"
  ES2021_LOGICAL_ASSIGNMENT_OPERATORS = "es2021.logical_assignment_operators"
  ES2021_NUMERIC_SEPARATOR = "es2021.numeric_separator"
  ES2022_CLASS_PROPERTIES = "es2022.class_properties"
  ES2022_PRIVATE_METHODS = "es2022.private_methods"
  ES2022_CLASS_STATIC_BLOCK = "es2022.class_static_block"
  ES2024_UNICODE_SETS_REGEX = "es2024.unicode_sets_regex"
  ES2025_DUPLICATE_NAMED_CAPTURING_GROUPS_REGEX = "es2025.duplicate_named_capturing_groups_regex"
