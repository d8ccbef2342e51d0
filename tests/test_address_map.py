from vusd_engine.chain.environment import ZERO_ADDRESS
from vusd_engine.governance.address_map import AddressMap


def test_add_and_lookup():
    wl = AddressMap()
    assert wl.add("0xa", "0xca") is True
    assert wl.add("0xb", "0xcb") is True
    assert wl.keys() == ["0xa", "0xb"]
    assert wl.values() == ["0xca", "0xcb"]
    assert wl.get("0xb") == "0xcb"
    assert wl.get("0xz") == ZERO_ADDRESS
    assert "0xa" in wl and len(wl) == 2


def test_duplicate_add_is_rejected_without_change():
    wl = AddressMap()
    wl.add("0xa", "0xca")
    assert wl.add("0xa", "0xother") is False
    assert wl.get("0xa") == "0xca"
    assert len(wl) == 1


def test_remove_swaps_last_entry_into_slot():
    wl = AddressMap()
    for key in ("0xa", "0xb", "0xc"):
        wl.add(key, "0xc" + key[2:])
    assert wl.remove("0xa") is True
    assert wl.keys() == ["0xc", "0xb"]
    assert wl.values() == ["0xcc", "0xcb"]
    assert wl.at(0) == ("0xc", "0xcc")
    assert not wl.contains("0xa")
    assert not wl.contains_value("0xca")


def test_remove_missing_returns_false():
    wl = AddressMap()
    assert wl.remove("0xa") is False
    wl.add("0xa", "0xca")
    wl.remove("0xa")
    assert wl.remove("0xa") is False
    assert wl.items() == []


def test_keys_and_values_stay_aligned():
    wl = AddressMap()
    for i in range(6):
        wl.add(f"0xk{i}", f"0xv{i}")
    wl.remove("0xk1")
    wl.remove("0xk4")
    wl.add("0xk9", "0xv9")
    for key, value in wl.items():
        assert wl.get(key) == value
        assert wl.key_of(value) == key
    assert list(wl) == wl.keys()


def test_value_can_back_only_one_key():
    wl = AddressMap()
    wl.add("0xa", "0xca")
    assert wl.add("0xb", "0xca") is False
    assert not wl.contains("0xb")
    assert wl.key_of("0xca") == "0xa"

    wl.remove("0xa")
    assert wl.add("0xb", "0xca") is True
    assert wl.key_of("0xca") == "0xb"
