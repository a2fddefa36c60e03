"""
Name: Site Settings Catalog Unit Tests

Responsibilities:
  - Verify closed key catalog parsing
  - Verify partial values are completed with defaults
  - Verify type errors surface as pydantic ValidationError
"""

import pytest
from pydantic import ValidationError
from tienda.domain.site_settings import (
    SettingKey,
    default_value,
    merge_with_defaults,
    parse_setting_key,
)

pytestmark = pytest.mark.unit


def test_parse_known_and_unknown_keys():
    assert parse_setting_key("siteColors") == SettingKey.SITE_COLORS
    assert parse_setting_key("banners") == SettingKey.BANNERS
    assert parse_setting_key("fonts") is None


def test_default_site_colors():
    value = default_value(SettingKey.SITE_COLORS)

    assert value["primaryColor"] == "#f5a938"
    assert set(value) >= {"bodyBg", "footerBg", "accentBg"}


def test_partial_value_is_merged_with_defaults():
    merged = merge_with_defaults(SettingKey.BANNERS, {"natura": "/img/n.png"})

    assert merged["natura"] == "/img/n.png"
    assert merged["avon"] == default_value(SettingKey.BANNERS)["avon"]


def test_unknown_fields_are_dropped():
    merged = merge_with_defaults(SettingKey.SITE_COLORS, {"comicSans": True})

    assert "comicSans" not in merged


def test_invalid_field_type_raises():
    with pytest.raises(ValidationError):
        merge_with_defaults(SettingKey.SITE_COLORS, {"primaryColor": ["red"]})
