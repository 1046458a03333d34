import logging

import pytest

from courier.networking.errors import ConfigurationError
from courier.networking.validation import (
    PARAMS_SERIALIZER_SCHEMA,
    TRANSITIONAL_SCHEMA,
    assert_options,
    validate_config,
)


def test_valid_transitional_options_pass():
    validate_config({"transitional": {"silent_json_parsing": False, "clarify_timeout_error": True}})


def test_transitional_type_mismatch_names_option():
    with pytest.raises(ConfigurationError, match="transitional.forced_json_parsing"):
        validate_config({"transitional": {"forced_json_parsing": 1}})


def test_transitional_rejects_unknown_options():
    with pytest.raises(ConfigurationError, match="transitional.legacy"):
        assert_options({"legacy": True}, TRANSITIONAL_SCHEMA, False, "transitional")


def test_params_serializer_allows_unknown_options(caplog):
    with caplog.at_level(logging.WARNING):
        validate_config({"params_serializer": {"indexes": False}})

    assert "params_serializer.indexes" in caplog.text


def test_params_serializer_requires_callables():
    with pytest.raises(ConfigurationError, match="params_serializer.encode"):
        assert_options({"encode": "nope"}, PARAMS_SERIALIZER_SCHEMA, True, "params_serializer")


def test_non_mapping_options_are_rejected():
    with pytest.raises(ConfigurationError):
        validate_config({"transitional": True})


def test_error_code():
    with pytest.raises(ConfigurationError) as excinfo:
        validate_config({"transitional": {"silent_json_parsing": "no"}})

    assert excinfo.value.code == "ERR_BAD_OPTION"
