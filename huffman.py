from __future__ import annotations

import heapq
from collections import Counter
from dataclasses import dataclass
from itertools import count
from types import MappingProxyType
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Tuple, Union

Symbol = Hashable


class HuffmanError(ValueError):
    """Base class for every coding failure raised by this module."""


class EmptyAlphabet(HuffmanError):
    def __init__(self):
        super().__init__("cannot build a Huffman tree from an empty frequency table")


class UnknownSymbol(HuffmanError):
    def __init__(self, symbol):
        self.symbol = symbol
        super().__init__(f"symbol {symbol!r} has no entry in the code table")


class ConflictingCode(HuffmanError):
    def __init__(self, symbol, code):
        self.symbol = symbol
        self.code = code
        super().__init__(f"code {code!r} for symbol {symbol!r} conflicts with another code (not prefix-free)")


class TruncatedCode(HuffmanError):
    def __init__(self, position):
        self.position = position # index of the first bit of the unfinished symbol
        super().__init__(f"bit string ends in the middle of a code starting at bit {position}")


class InvalidCode(HuffmanError):
    pass


class InvalidFrequency(HuffmanError):
    def __init__(self, symbol, frequency):
        self.symbol = symbol
        self.frequency = frequency
        super().__init__(f"symbol {symbol!r} has count {frequency!r}; counts must be positive integers")


@dataclass(frozen=True)
class Leaf: # holds one symbol
    symbol: Symbol
    frequency: int


@dataclass(frozen=True)
class Internal: # always exactly two children
    frequency: int
    left: Node
    right: Node


Node = Union[Leaf, Internal]


def count_frequencies(data: Iterable[Symbol]) -> Mapping[Symbol, int]:
    return MappingProxyType(Counter(data))


def _symbol_order(symbols):
    # mixed or unorderable symbol types keep their first-seen order
    try:
        return sorted(symbols)
    except TypeError:
        return list(symbols)


def build_huffman_tree(frequency_table: Mapping[Symbol, int]) -> Node:
    """
    Greedy minimum-combination build.

    Heap entries are (frequency, insertion order, node). Leaves are inserted in
    ascending symbol order, and each combined node takes the next insertion number,
    so ties always pop in insertion order and the same table gives the same tree.
    The first node popped becomes the left child, the second the right child.
    """
    if not frequency_table:
        raise EmptyAlphabet()
    for symbol, frequency in frequency_table.items():
        if frequency < 1:
            raise InvalidFrequency(symbol, frequency)

    order = count()
    priority_queue = [(frequency_table[symbol], next(order), Leaf(symbol, frequency_table[symbol]))
                      for symbol in _symbol_order(frequency_table)]
    heapq.heapify(priority_queue)

    while len(priority_queue) > 1:
        left_freq, _, left = heapq.heappop(priority_queue)
        right_freq, _, right = heapq.heappop(priority_queue)
        merged = Internal(left_freq + right_freq, left, right)
        heapq.heappush(priority_queue, (merged.frequency, next(order), merged))

    return priority_queue[0][2] # a lone Leaf when there is one symbol


def generate_huffman_codes(root: Node) -> Mapping[Symbol, str]:
    # A single-leaf tree would give the empty code, which can't be counted on decode.
    # That symbol gets "0" instead, one bit per occurrence.
    if isinstance(root, Leaf):
        return MappingProxyType({root.symbol: "0"})

    codes: Dict[Symbol, str] = {}
    stack: List[Tuple[Node, str]] = [(root, "")]
    while stack:
        node, prefix = stack.pop()
        if isinstance(node, Leaf):
            codes[node.symbol] = prefix
        else:
            stack.append((node.right, prefix + "1"))
            stack.append((node.left, prefix + "0"))
    return MappingProxyType(codes)


def code_table_items(code_map: Mapping[Symbol, str]) -> List[Tuple[Symbol, str]]:
    """Return the table as (symbol, code) pairs ordered by symbol, ready to serialize."""
    return [(symbol, code_map[symbol]) for symbol in _symbol_order(code_map)]


def weighted_path_length(frequency_table: Mapping[Symbol, int], code_map: Mapping[Symbol, str]) -> int:
    return sum(frequency * len(code_map[symbol]) for symbol, frequency in frequency_table.items())


def huffman_encode(data: Iterable[Symbol], code_map: Mapping[Symbol, str]) -> str:
    parts = []
    for symbol in data:
        try:
            parts.append(code_map[symbol])
        except KeyError:
            raise UnknownSymbol(symbol) from None
    return "".join(parts)


def reconstruct_huffman_tree(code_map: Mapping[Symbol, str]) -> Node:
    """
    Rebuild a decoding tree from nothing but a code table.

    Each code is walked bit by bit through a trie of dicts, creating branches as
    needed and ending in a leaf marker. A code that runs through an existing leaf,
    or ends on a spot already taken, raises ConflictingCode. The finished trie is
    then frozen into Leaf/Internal nodes; a branch with only one side filled in
    raises InvalidCode. The result does not depend on the table's iteration order.
    """
    if not code_map:
        raise EmptyAlphabet()

    if len(code_map) == 1:
        (symbol, code), = code_map.items()
        if code not in ("", "0"):
            raise InvalidCode(f"single-symbol table must use the code '0', got {code!r}")
        return Leaf(symbol, 0)

    trie: dict = {}
    for symbol, code in code_map.items():
        if not code:
            raise ConflictingCode(symbol, code)
        current = trie
        for bit in code:
            if bit not in ("0", "1"):
                raise InvalidCode(f"code {code!r} for symbol {symbol!r} contains {bit!r}")
            if "leaf" in current:
                raise ConflictingCode(symbol, code)
            current = current.setdefault(bit, {})
        if current: # already a leaf, or a prefix of a longer code
            raise ConflictingCode(symbol, code)
        current["leaf"] = symbol

    return _freeze(trie, "")


def _freeze(trie: dict, path: str) -> Node:
    if "leaf" in trie:
        return Leaf(trie["leaf"], 0)
    if "0" not in trie or "1" not in trie:
        raise InvalidCode(f"code table is incomplete: no code continues past {path!r} on both sides")
    return Internal(0, _freeze(trie["0"], path + "0"), _freeze(trie["1"], path + "1"))


def huffman_decode(bitstring: str, code_map: Mapping[Symbol, str], root: Optional[Node] = None) -> List[Symbol]:
    """
    Decode a string of '0'/'1' characters back to the list of symbols.

    Pass root (the tree that produced code_map) to skip rebuilding; without it
    the tree is reconstructed from code_map alone. Both give the same output.
    """
    if not bitstring:
        return []
    if root is None:
        root = reconstruct_huffman_tree(code_map)

    decoded: List[Symbol] = []

    if isinstance(root, Leaf): # one symbol, one '0' per occurrence
        for position, bit in enumerate(bitstring):
            if bit != "0":
                raise InvalidCode(f"unexpected bit {bit!r} at position {position} for a single-symbol code")
            decoded.append(root.symbol)
        return decoded

    node = root
    start = 0
    for position, bit in enumerate(bitstring):
        if bit == "0":
            node = node.left
        elif bit == "1":
            node = node.right
        else:
            raise InvalidCode(f"unexpected character {bit!r} at position {position}")

        if isinstance(node, Leaf): # reached a leaf
            decoded.append(node.symbol)
            node = root
            start = position + 1

    if node is not root:
        raise TruncatedCode(start)
    return decoded


def huffman_decode_text(bitstring: str, code_map: Mapping[str, str], root: Optional[Node] = None) -> str:
    return "".join(huffman_decode(bitstring, code_map, root))


def huffman_decode_bytes(bitstring: str, code_map: Mapping[int, str], root: Optional[Node] = None) -> bytes:
    return bytes(huffman_decode(bitstring, code_map, root))
