"""Byte-level prefix trie used by every conversion pass.

Keys are stored as their UTF-8 bytes so that a lookup can walk the encoded
text of a token directly. Each node is a two item list:

    [value, children]   # value: str or None, children: {byte: node}

Plain lists and dicts keep the serialized form free of any class reference.
"""

from typing import Iterator, Optional

_VALUE = 0
_CHILDREN = 1


class PrefixTrie:
    """Prefix trie mapping string keys to replacement strings."""

    def __init__(self):
        self._root: list = [None, {}]
        self._size = 0
        self._frozen = False

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "mutable"
        return f"PrefixTrie({self._size} keys, {state})"

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "PrefixTrie":
        """Mark the trie read-only. Returns self."""
        self._frozen = True
        return self

    def insert(self, key: str, value: str) -> None:
        """Insert or overwrite `key`.

        Raises:
            TypeError: If the trie is frozen.
            ValueError: If key is empty (it would match everywhere with zero width).
        """
        if self._frozen:
            raise TypeError("cannot insert into a frozen PrefixTrie")
        if not key:
            raise ValueError("trie keys must not be empty")

        node = self._root
        for byte in key.encode("utf-8"):
            children = node[_CHILDREN]
            child = children.get(byte)
            if child is None:
                child = [None, {}]
                children[byte] = child
            node = child

        if node[_VALUE] is None:
            self._size += 1
        node[_VALUE] = value

    def update(self, entries: dict[str, str]) -> None:
        """Insert every pair of `entries` in iteration order."""
        for key, value in entries.items():
            self.insert(key, value)

    def get(self, key: str) -> Optional[str]:
        """Exact lookup."""
        node = self._root
        for byte in key.encode("utf-8"):
            node = node[_CHILDREN].get(byte)
            if node is None:
                return None
        return node[_VALUE]

    def common_prefix_search(
        self, data: bytes, start: int = 0
    ) -> Iterator[tuple[int, str]]:
        """Yield (byte_length, value) for every key that prefixes data[start:].

        Matches are yielded shortest first.
        """
        node = self._root
        length = 0
        for byte in data[start:]:
            node = node[_CHILDREN].get(byte)
            if node is None:
                return
            length += 1
            if node[_VALUE] is not None:
                yield length, node[_VALUE]

    def longest_prefix(self, data: bytes, start: int = 0) -> Optional[tuple[int, str]]:
        """Longest key prefixing data[start:], as (byte_length, value), or None."""
        best = None
        node = self._root
        for offset in range(start, len(data)):
            node = node[_CHILDREN].get(data[offset])
            if node is None:
                break
            if node[_VALUE] is not None:
                best = (offset - start + 1, node[_VALUE])
        return best

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield (key, value) pairs in byte order."""
        stack = [(b"", self._root)]
        while stack:
            prefix, node = stack.pop()
            if node[_VALUE] is not None:
                yield prefix.decode("utf-8"), node[_VALUE]
            for byte in sorted(node[_CHILDREN], reverse=True):
                stack.append((prefix + bytes([byte]), node[_CHILDREN][byte]))

    def to_state(self) -> tuple:
        """Plain-data form for serialization."""
        return ("ztarcc-trie", self._size, self._root)

    @classmethod
    def from_state(cls, state) -> "PrefixTrie":
        """Rebuild a frozen trie from `to_state()` output.

        Raises:
            ValueError: If state does not look like a serialized trie.
        """
        if (
            not isinstance(state, tuple)
            or len(state) != 3
            or state[0] != "ztarcc-trie"
            or not isinstance(state[1], int)
            or not isinstance(state[2], list)
            or len(state[2]) != 2
            or not isinstance(state[2][_CHILDREN], dict)
        ):
            raise ValueError("not a serialized PrefixTrie")

        trie = cls()
        trie._size = state[1]
        trie._root = state[2]
        return trie.freeze()
