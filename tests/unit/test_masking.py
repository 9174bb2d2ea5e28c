import copy

from api_envelope.utils.masking import (
    MASK_STRING,
    MaskingProcessor,
    mask_email,
    mask_ip_address,
    mask_sensitive_data,
    partial_mask,
)


def test_masks_nested_sensitive_fields():
    data = {"user": {"password": "p1", "name": "Ada"}}
    assert mask_sensitive_data(data) == {"user": {"password": MASK_STRING, "name": "Ada"}}


def test_key_match_is_case_insensitive():
    data = {"PASSWORD": "x", "AccessToken": "y", "ApiKey": "z", "email": "a@b.co"}
    masked = mask_sensitive_data(data)
    assert masked == {
        "PASSWORD": MASK_STRING,
        "AccessToken": MASK_STRING,
        "ApiKey": MASK_STRING,
        "email": "a@b.co",
    }


def test_masks_inside_lists_at_every_depth():
    data = {"cards": [{"cardNumber": "4111", "label": "main"}, [{"cvv": "123"}], "plain"]}
    assert mask_sensitive_data(data) == {
        "cards": [{"cardNumber": MASK_STRING, "label": "main"}, [{"cvv": MASK_STRING}], "plain"]
    }


def test_sensitive_container_value_is_replaced_whole():
    assert mask_sensitive_data({"secret": {"nested": 1}}) == {"secret": MASK_STRING}


def test_does_not_mutate_input():
    data = {"auth": {"token": "abc", "scopes": ["read"]}}
    snapshot = copy.deepcopy(data)
    masked = mask_sensitive_data(data)
    assert data == snapshot
    assert masked["auth"] is not data["auth"]
    assert masked["auth"]["scopes"] is not data["auth"]["scopes"]


def test_non_containers_pass_through():
    assert mask_sensitive_data(None) is None
    assert mask_sensitive_data("password") == "password"
    assert mask_sensitive_data(42) == 42


def test_scalar_values_are_preserved_exactly():
    data = {"count": 3, "ratio": 0.5, "active": True, "missing": None}
    assert mask_sensitive_data(data) == data


def test_masking_is_idempotent():
    data = {"password": "p", "profile": {"pin": "1234", "city": "Izmir"}}
    once = mask_sensitive_data(data)
    assert mask_sensitive_data(once) == once


def test_custom_sensitive_fields():
    masked = mask_sensitive_data({"Email": "a@b.co", "password": "x"}, ["email"])
    assert masked == {"Email": MASK_STRING, "password": "x"}


def test_partial_mask_keeps_prefix_and_suffix():
    assert partial_mask("abcdefghijkl") == "abcd****ijkl"


def test_partial_mask_caps_hidden_section_at_eight():
    assert partial_mask("a" * 4 + "b" * 20 + "c" * 4) == "aaaa********cccc"


def test_partial_mask_short_or_invalid_values():
    assert partial_mask("abcdefgh") == MASK_STRING
    assert partial_mask("") == MASK_STRING
    assert partial_mask(None) == MASK_STRING
    assert partial_mask("abcdef", visible_start=1, visible_end=0) == "a*****"


def test_mask_email():
    assert mask_email("john.doe@example.com") == "j***e@e***.com"
    assert mask_email("jo@example.com") == "***@e***.com"
    assert mask_email("john@localhost") == "j***n@***"
    assert mask_email("not-an-email") == MASK_STRING


def test_mask_ip_address():
    assert mask_ip_address("192.168.1.100") == "192.***.***"
    assert mask_ip_address("2001:db8::1") == "2001:****:****"
    assert mask_ip_address("localhost") == MASK_STRING


def test_masking_processor_masks_event_dict():
    processor = MaskingProcessor()
    event = {"event": "login", "request_body": {"password": "p"}, "stack": "Traceback..."}
    assert processor(None, "info", event) == {
        "event": "login",
        "request_body": {"password": MASK_STRING},
        "stack": "Traceback...",
    }
