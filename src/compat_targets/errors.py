"""
Error Types for Target Resolution.

Strict entry points (engine name parsing, structured config conversion and
query resolution) raise one of these. The lenient pair merge never does.
"""

from typing import Any, Optional


class CompatTargetsError(ValueError):
  """Base class for all compat-targets errors."""


class AliasParseError(CompatTargetsError):
  """
  Raised when a string is not a canonical engine name.

  Attributes:
      name (str): The rejected input.
  """

  def __init__(self, name: str):
    self.name = name
    super().__init__(f"Unknown engine: '{name}'")


class VersionParseError(CompatTargetsError):
  """
  Raised when a value cannot be read as a version.

  Attributes:
      text (Any): The rejected input.
  """

  def __init__(self, text: Any, reason: str = "expected 'major[.minor[.patch]]'"):
    self.text = text
    self.reason = reason
    super().__init__(f"Invalid version {text!r}: {reason}")


class QueryResolutionError(CompatTargetsError):
  """
  Raised when a target query cannot be turned into engine/version pairs.

  Attributes:
      query (str): The query that failed.
      reason (str): Human readable cause reported by the resolver.
  """

  def __init__(self, query: str, reason: str):
    self.query = query
    self.reason = reason
    super().__init__(f"Failed to resolve target query '{query}': {reason}")


class ConfigConversionError(CompatTargetsError):
  """
  Raised when a structured targets config cannot be converted.

  Attributes:
      key (Optional[str]): Offending config key, if any.
      value (Any): Offending value.
      reason (str): Why conversion failed.
  """

  def __init__(self, key: Optional[str], value: Any, reason: str):
    self.key = key
    self.value = value
    self.reason = reason
    where = f" for '{key}'" if key is not None else ""
    super().__init__(f"Invalid targets config{where}: {reason} (got {value!r})")


class FeatureTableError(CompatTargetsError):
  """Raised when the packaged feature requirement table is inconsistent."""
