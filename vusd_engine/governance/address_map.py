"""Ordered address -> address map backing the collateral whitelists."""

from typing import Dict, Iterator, List, Tuple

from vusd_engine.chain.environment import ZERO_ADDRESS


class AddressMap:
    """
    Enumerable whitelist of token -> wrapped-token pairs.

    Keys and values live in two index-aligned lists with a key -> index
    dictionary, so membership, insertion and removal are O(1) and
    enumeration order is stable between mutations. Removal swaps the last
    entry into the freed slot. Because one structure holds both the member
    list and the mapping, they cannot drift apart.
    """

    def __init__(self):
        self._keys: List[str] = []
        self._values: List[str] = []
        self._index: Dict[str, int] = {}
        self._key_by_value: Dict[str, str] = {}

    def add(self, key: str, value: str) -> bool:
        """
        Add a pair. Each wrapped token may back only one key.

        Returns:
            False if ``key`` or ``value`` is already present (nothing is changed)
        """
        if key in self._index or value in self._key_by_value:
            return False
        self._index[key] = len(self._keys)
        self._keys.append(key)
        self._values.append(value)
        self._key_by_value[value] = key
        return True

    def remove(self, key: str) -> bool:
        """
        Remove a pair by key.

        Returns:
            False if ``key`` is absent (nothing is changed)
        """
        index = self._index.pop(key, None)
        if index is None:
            return False
        del self._key_by_value[self._values[index]]

        last_key = self._keys.pop()
        last_value = self._values.pop()
        if index < len(self._keys):
            self._keys[index] = last_key
            self._values[index] = last_value
            self._index[last_key] = index
        return True

    def get(self, key: str, default: str = ZERO_ADDRESS) -> str:
        index = self._index.get(key)
        return default if index is None else self._values[index]

    def contains(self, key: str) -> bool:
        return key in self._index

    def contains_value(self, value: str) -> bool:
        return value in self._key_by_value

    def key_of(self, value: str, default: str = ZERO_ADDRESS) -> str:
        return self._key_by_value.get(value, default)

    def at(self, index: int) -> Tuple[str, str]:
        return self._keys[index], self._values[index]

    def keys(self) -> List[str]:
        return list(self._keys)

    def values(self) -> List[str]:
        return list(self._values)

    def items(self) -> List[Tuple[str, str]]:
        return list(zip(self._keys, self._values))

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __repr__(self) -> str:
        return f"AddressMap(entries={len(self._keys)})"
