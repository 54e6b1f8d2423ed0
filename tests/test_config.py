"""
Tests for the EnvOptions configuration model.
"""

import pytest
from pydantic import ValidationError

from compat_targets.config import EnvOptions
from compat_targets.enums import Engine, ESFeature
from compat_targets.errors import ConfigConversionError
from compat_targets.version import Version


def test_default_is_any_target():
  opts = EnvOptions()
  assert opts.targets is None
  assert opts.engine_targets().is_any_target()


def test_mapping_targets():
  opts = EnvOptions(targets={"chrome": "58", "ie": 11})
  assert opts.engine_targets().to_dict() == {"chrome": "58.0.0", "ie": "11.0.0"}


def test_model_validate_from_deserialized_data():
  opts = EnvOptions.model_validate({"targets": {"node": 14.17, "esmodules": False}})
  assert opts.engine_targets().get(Engine.NODE) == Version(14, 17)


def test_each_call_returns_owned_instance():
  opts = EnvOptions(targets={"chrome": "80"})
  first = opts.engine_targets()
  first.remove(Engine.CHROME)
  assert opts.engine_targets().get(Engine.CHROME) == Version(80)


def test_query_targets_use_resolver(static_resolver):
  opts = EnvOptions(targets="ie 11")
  targets = opts.engine_targets(resolver=static_resolver)
  assert targets.to_dict() == {"ie": "11.0.0"}
  assert targets.has_feature(ESFeature.ES2015_ARROW_FUNCTIONS) is False


def test_query_targets_use_default_resolver(default_static_resolver):
  assert EnvOptions(targets=["node 18"]).engine_targets().to_dict() == {"node": "18.0.0"}


def test_unknown_engine_fails_on_conversion():
  opts = EnvOptions(targets={"netscape": "4"})
  with pytest.raises(ConfigConversionError):
    opts.engine_targets()


def test_shape_errors_fail_on_construction():
  with pytest.raises(ValidationError):
    EnvOptions(targets={"chrome": {"min": "58"}})
  with pytest.raises(ValidationError):
    EnvOptions(targets="defaults", bugfixes=True)


def test_from_target_list():
  opts = EnvOptions.from_target_list("chrome58,node12")
  assert opts.targets == {"chrome": "58.0.0", "node": "12.0.0"}
  assert opts.engine_targets().has_feature(ESFeature.ES2020_NULLISH_COALESCING_OPERATOR)
