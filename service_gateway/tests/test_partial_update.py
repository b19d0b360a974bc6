"""
Unit tests for the partial-update codec.
"""

import pytest
from pydantic import ValidationError

from service_gateway.app.domain.items import ITEM_CODEC
from service_gateway.app.domain.partial_update import UNSET, PartialUpdateCodec, SetValue
from service_gateway.app.domain.users import USER_CODEC
from service_gateway.app.models import UpdateItemRequest, UpdateUserRequest


class TestPartialUpdateCodec:
    """Test cases for PartialUpdateCodec."""

    def test_omitted_and_null_fields_are_unset(self):
        request = UpdateItemRequest.model_validate({"id": 1, "name": "widget2", "quantity": None})

        fields = ITEM_CODEC.from_request(request)

        assert fields == {"name": SetValue("widget2"), "quantity": UNSET, "price": UNSET}
        assert ITEM_CODEC.encode(fields) == {"name": "widget2"}

    def test_zero_values_are_set(self):
        """Set(0) and Set("") must stay distinguishable from Unset."""
        request = UpdateItemRequest.model_validate({"id": 1, "name": "", "quantity": 0})

        fields = ITEM_CODEC.from_request(request)

        assert fields["name"] == SetValue("")
        assert fields["quantity"] == SetValue(0)
        assert fields["price"] is UNSET
        assert ITEM_CODEC.encode(fields) == {"name": "", "quantity": 0}

    def test_false_boolean_is_set(self):
        request = UpdateUserRequest.model_validate({"id": 3, "auto_renew": False, "plan": 0})

        payload = USER_CODEC.encode(USER_CODEC.from_request(request))

        assert payload == {"auto_renew": False, "plan": 0}

    def test_empty_update_encodes_nothing(self):
        request = UpdateUserRequest.model_validate({"id": 3})

        assert USER_CODEC.encode(USER_CODEC.from_request(request)) == {}

    def test_unknown_attribute_is_rejected(self):
        codec = PartialUpdateCodec(("name",))

        with pytest.raises(KeyError):
            codec.encode({"owner": SetValue(1)})

    def test_raw_values_are_rejected(self):
        codec = PartialUpdateCodec(("name",))

        with pytest.raises(TypeError):
            codec.encode({"name": "widget"})

    def test_map_value_skips_unset(self):
        assert PartialUpdateCodec.map_value(UNSET, str.upper) is UNSET
        assert PartialUpdateCodec.map_value(SetValue("abc"), str.upper) == SetValue("ABC")

    def test_unset_is_a_falsy_singleton(self):
        assert not UNSET
        assert type(UNSET)() is UNSET

    def test_mistyped_values_are_not_coerced(self):
        with pytest.raises(ValidationError):
            UpdateItemRequest.model_validate({"id": 1, "quantity": "5"})
        with pytest.raises(ValidationError):
            UpdateUserRequest.model_validate({"id": 1, "auto_renew": "yes"})
