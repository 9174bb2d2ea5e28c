from api_envelope.utils.client_ip import resolve_client_ip


def test_first_forwarded_address_wins():
    info = resolve_client_ip({"x-forwarded-for": "203.0.113.5, 10.0.0.1"})
    assert info.ipv4 == "203.0.113.5"
    assert info.ipv6 == ""
    assert info.display == "IPv4: 203.0.113.5"


def test_loopback_ipv6_defaults_ipv4():
    info = resolve_client_ip({}, remote_address="::1")
    assert info.ipv4 == "127.0.0.1"
    assert info.ipv6 == "::1"
    assert info.display == "IPv6: ::1\n IPv4: 127.0.0.1"


def test_loopback_ipv4_defaults_ipv6():
    info = resolve_client_ip({}, resolved_address="127.0.0.1")
    assert info.ipv6 == "::1"


def test_ipv4_mapped_ipv6_contributes_ipv4():
    info = resolve_client_ip({}, remote_address="::ffff:192.0.2.10")
    assert info.ipv4 == "192.0.2.10"
    assert info.ipv6 == ""


def test_mapped_address_does_not_override_earlier_ipv4():
    info = resolve_client_ip({"x-real-ip": "198.51.100.1"}, remote_address="::ffff:192.0.2.10")
    assert info.ipv4 == "198.51.100.1"


def test_collects_both_families_across_headers():
    info = resolve_client_ip(
        {
            "X-Forwarded-For": "2001:db8::7",
            "cf-connecting-ip": "198.51.100.23",
        },
        remote_address="10.0.0.2",
    )
    assert info.ipv6 == "2001:db8::7"
    assert info.ipv4 == "198.51.100.23"
    assert info.display == "IPv6: 2001:db8::7\n IPv4: 198.51.100.23"


def test_header_sequences_are_split_and_trimmed():
    info = resolve_client_ip({"x-client-ip": [" 192.0.2.1 , 192.0.2.2", "192.0.2.3"]})
    assert info.ipv4 == "192.0.2.1"


def test_header_priority_follows_fixed_order():
    info = resolve_client_ip({"true-client-ip": "192.0.2.9", "x-forwarded-for": "192.0.2.8"})
    assert info.ipv4 == "192.0.2.8"


def test_unknown_when_nothing_resolves():
    info = resolve_client_ip({}, remote_address="testclient")
    assert info.ipv4 == ""
    assert info.ipv6 == ""
    assert info.display == "unknown"
