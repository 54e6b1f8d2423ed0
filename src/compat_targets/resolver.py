"""
Target Query Resolution.

Turning a browserslist-style query (``"> 0.5%, last 2 versions"``) into raw
``(engine, version)`` pairs is delegated to a resolver. This module defines the
resolver protocol, two implementations, and the process-wide default used by
`EngineTargets.from_query` when no resolver is passed explicitly.

Resolvers return the raw identifiers untouched (``"and_chr"``, ``"15.2-15.3"``).
Normalization happens in `EngineTargets.from_pairs`.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from compat_targets.errors import QueryResolutionError

logger = logging.getLogger(__name__)

RawPair = Tuple[str, str]

DEFAULT_COMMAND: Tuple[str, ...] = ("npx", "--no-install", "browserslist")
DEFAULT_TIMEOUT = 60


@runtime_checkable
class QueryResolver(Protocol):
  """
  Protocol for anything that can resolve a target query.
  """

  def resolve(self, query: str) -> List[RawPair]:
    """
    Resolves a query to raw pairs.

    Raises:
        QueryResolutionError: If the query cannot be resolved.
    """
    ...


def parse_browserslist_output(text: str) -> List[RawPair]:
  """
  Parses the line-oriented output of the browserslist CLI.

  Each line is ``<name> <version>``, e.g. ``and_chr 120`` or ``ios_saf 17.2-17.3``.
  Blank lines and lines that do not split into exactly two tokens are skipped.

  Args:
      text (str): Captured standard output.

  Returns:
      List[RawPair]: Pairs in output order.
  """
  pairs: List[RawPair] = []
  for line in text.splitlines():
    tokens = line.split()
    if not tokens:
      continue
    if len(tokens) != 2:
      logger.debug("Skipping unrecognized browserslist line: %r", line)
      continue
    pairs.append((tokens[0], tokens[1]))
  return pairs


class BrowserslistCliResolver:
  """
  Resolves queries by running the ``browserslist`` command line tool.

  Attributes:
      command (Tuple[str, ...]): Executable and leading arguments.
      cwd (Optional[Path]): Working directory, which controls where
          browserslist looks up its usage data and project config.
      timeout (int): Seconds before the process is abandoned.
  """

  def __init__(
    self,
    command: Sequence[str] = DEFAULT_COMMAND,
    cwd: Optional[Path] = None,
    timeout: int = DEFAULT_TIMEOUT,
  ):
    if not command:
      raise ValueError("Resolver command must not be empty")
    self.command = tuple(command)
    self.cwd = cwd
    self.timeout = timeout

  def resolve(self, query: str) -> List[RawPair]:
    """
    Runs the CLI for `query` and parses its output.

    Args:
        query (str): The target query.

    Returns:
        List[RawPair]: Raw pairs reported by browserslist.

    Raises:
        QueryResolutionError: If the executable is missing, times out, or exits
            with a non-zero status (typically an invalid query).
    """
    executable = self.command[0]
    if shutil.which(executable) is None:
      raise QueryResolutionError(query, f"executable '{executable}' not found on PATH")

    cmd = [*self.command, query]
    logger.debug("Resolving target query %r via %s", query, " ".join(self.command))
    try:
      completed = subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=max(1, self.timeout),
        check=False,
        cwd=str(self.cwd) if self.cwd else None,
      )
    except subprocess.TimeoutExpired:
      raise QueryResolutionError(query, f"timed out after {self.timeout}s") from None
    except OSError as e:
      raise QueryResolutionError(query, str(e)) from e

    if completed.returncode != 0:
      reason = completed.stderr.strip() or f"exit status {completed.returncode}"
      raise QueryResolutionError(query, reason)

    pairs = parse_browserslist_output(completed.stdout)
    logger.debug("Query %r resolved to %d entries", query, len(pairs))
    return pairs


class StaticQueryResolver:
  """
  Resolves queries from an in-memory table.

  Useful for embedding precomputed results and for tests.
  """

  def __init__(self, table: Optional[Dict[str, Iterable[RawPair]]] = None):
    self._table: Dict[str, List[RawPair]] = {}
    for query, pairs in (table or {}).items():
      self.add(query, pairs)

  def add(self, query: str, pairs: Iterable[RawPair]) -> None:
    """Registers the pairs returned for `query` (exact match after stripping)."""
    self._table[query.strip()] = [(str(name), str(version)) for name, version in pairs]

  def resolve(self, query: str) -> List[RawPair]:
    key = query.strip()
    if key not in self._table:
      raise QueryResolutionError(query, "unknown query")
    return list(self._table[key])


_DEFAULT_RESOLVER: Optional[QueryResolver] = None


def get_default_resolver() -> QueryResolver:
  """
  Returns the process-wide resolver, creating a `BrowserslistCliResolver` lazily.

  Returns:
      QueryResolver: The active default.
  """
  global _DEFAULT_RESOLVER
  if _DEFAULT_RESOLVER is None:
    _DEFAULT_RESOLVER = BrowserslistCliResolver()
  return _DEFAULT_RESOLVER


def set_default_resolver(resolver: QueryResolver) -> None:
  """
  Replaces the process-wide resolver.

  Args:
      resolver (QueryResolver): Object implementing ``resolve(query)``.

  Raises:
      TypeError: If `resolver` does not implement the protocol.
  """
  global _DEFAULT_RESOLVER
  if not isinstance(resolver, QueryResolver):
    raise TypeError(f"Expected a QueryResolver, got {type(resolver).__name__}")
  _DEFAULT_RESOLVER = resolver


def reset_default_resolver() -> None:
  """Drops any configured resolver so the next lookup builds a fresh default."""
  global _DEFAULT_RESOLVER
  _DEFAULT_RESOLVER = None
