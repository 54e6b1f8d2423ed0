"""
Engine Version Type.

A totally ordered (major, minor, patch) triple. Parsing follows the shape of
versions found in browser usage data: missing components default to zero and
a range such as ``"15.2-15.3"`` is read as its lower bound.
"""

import re
from dataclasses import dataclass
from typing import Any

from compat_targets.errors import VersionParseError

_COMPONENT = re.compile(r"[0-9]+")


@dataclass(frozen=True, order=True)
class Version:
  """
  Engine version, compared component-wise, most significant first.
  """

  major: int
  minor: int = 0
  patch: int = 0

  @classmethod
  def parse(cls, text: str) -> "Version":
    """
    Parses a version string.

    Args:
        text (str): e.g. ``"90"``, ``"13.1"``, ``"16.11.0"`` or ``"15.2-15.3"``.

    Returns:
        Version: The parsed version.

    Raises:
        VersionParseError: If `text` is not a dotted numeric version of at most
            three components (e.g. ``"TP"`` or ``"all"``).
    """
    if not isinstance(text, str):
      raise VersionParseError(text, "expected a string")

    lower = text.strip().split("-", 1)[0]
    parts = lower.split(".")
    if len(parts) > 3:
      raise VersionParseError(text, "too many components")
    if not all(_COMPONENT.fullmatch(p) for p in parts):
      raise VersionParseError(text)

    numbers = [int(p) for p in parts]
    return cls(*numbers)

  @classmethod
  def from_value(cls, value: Any) -> "Version":
    """
    Converts a config value (string or number) to a Version.

    Booleans are rejected even though they are ints in Python.

    Args:
        value (Any): ``"58"``, ``58``, ``10.1`` and so on.

    Returns:
        Version: The parsed version.

    Raises:
        VersionParseError: If the value is not version-like.
    """
    if isinstance(value, Version):
      return value
    if isinstance(value, bool):
      raise VersionParseError(value, "expected a string or number, got a boolean")
    if isinstance(value, (int, float)):
      if value < 0:
        raise VersionParseError(value, "negative version")
      return cls.parse(str(value))
    return cls.parse(value)

  def __str__(self) -> str:
    return f"{self.major}.{self.minor}.{self.patch}"
