"""
compat-targets Package.

Resolves target environment descriptions (browserslist queries, Babel-style
``targets`` config, compact ``chrome58`` tokens) into per-engine version floors,
and decides whether a language feature needs a compatibility transform for them.

Usage
-----

.. code-block:: python

    from compat_targets import EngineTargets, ESFeature

    targets = EngineTargets.from_config({"chrome": "80", "safari": "13"})
    targets.has_feature(ESFeature.ES2020_OPTIONAL_CHAINING)
    # True: Chrome 80 predates native optional chaining (91)
"""

from compat_targets.config import EnvOptions
from compat_targets.enums import ENGINE_ALIASES, Engine, ESFeature, aliases_for
from compat_targets.errors import (
  AliasParseError,
  CompatTargetsError,
  ConfigConversionError,
  FeatureTableError,
  QueryResolutionError,
  VersionParseError,
)
from compat_targets.features import feature_requirement, features
from compat_targets.resolver import (
  BrowserslistCliResolver,
  QueryResolver,
  StaticQueryResolver,
  get_default_resolver,
  reset_default_resolver,
  set_default_resolver,
)
from compat_targets.targets import EngineTargets
from compat_targets.utils.console import get_console, set_console, set_verbosity
from compat_targets.version import Version

__version__ = "0.1.0"

__all__ = [
  "AliasParseError",
  "BrowserslistCliResolver",
  "CompatTargetsError",
  "ConfigConversionError",
  "ENGINE_ALIASES",
  "Engine",
  "EngineTargets",
  "EnvOptions",
  "ESFeature",
  "FeatureTableError",
  "QueryResolutionError",
  "QueryResolver",
  "StaticQueryResolver",
  "Version",
  "VersionParseError",
  "aliases_for",
  "feature_requirement",
  "features",
  "get_console",
  "get_default_resolver",
  "reset_default_resolver",
  "set_console",
  "set_default_resolver",
  "set_verbosity",
  "__version__",
]
