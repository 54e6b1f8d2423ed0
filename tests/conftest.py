"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Isolation of the process-wide query resolver between tests.
- A static resolver pre-loaded with a few browserslist-style queries.
"""

import sys
import pytest
from pathlib import Path

# Add src to path so we can import 'compat_targets' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from compat_targets.resolver import StaticQueryResolver, reset_default_resolver, set_default_resolver  # noqa: E402

# Output shaped like `npx browserslist "<query>"`
SAMPLE_QUERIES = {
  "defaults": [
    ("and_chr", "120"),
    ("and_ff", "119"),
    ("chrome", "119"),
    ("chrome", "118"),
    ("edge", "119"),
    ("firefox", "119"),
    ("ios_saf", "17.1"),
    ("ios_saf", "16.6-16.7"),
    ("op_mini", "all"),
    ("safari", "17.1"),
    ("safari", "TP"),
    ("samsung", "23"),
  ],
  "node 18": [("node", "18.0.0")],
  "ie 11": [("ie", "11")],
}


@pytest.fixture(autouse=True)
def isolate_default_resolver():
  """
  Ensures a resolver installed by one test never leaks into another.
  """
  reset_default_resolver()
  yield
  reset_default_resolver()


@pytest.fixture
def static_resolver():
  """A StaticQueryResolver knowing SAMPLE_QUERIES."""
  return StaticQueryResolver(SAMPLE_QUERIES)


@pytest.fixture
def default_static_resolver(static_resolver):
  """Installs `static_resolver` as the process default."""
  set_default_resolver(static_resolver)
  return static_resolver
