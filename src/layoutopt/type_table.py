from __future__ import annotations

from typing import Dict, List, Tuple, Union

from .errors import InvalidArchitectureError, UnknownTypeError
from .models import Architecture


def _word_table(word: int, wide_align: int) -> Dict[str, Tuple[int, int]]:
    """Primitive (size, align) pairs for a target with ``word``-byte machine words.

    ``wide_align`` is the alignment of the 8-byte scalars, which drops to the
    word size on 32-bit targets.
    """
    return {
        "bool": (1, 1),
        "int8": (1, 1),
        "uint8": (1, 1),
        "byte": (1, 1),
        "int16": (2, 2),
        "uint16": (2, 2),
        "int32": (4, 4),
        "uint32": (4, 4),
        "float32": (4, 4),
        "rune": (4, 4),
        "int64": (8, wide_align),
        "uint64": (8, wide_align),
        "float64": (8, wide_align),
        "int": (word, word),
        "uint": (word, word),
        "uintptr": (word, word),
        "pointer": (word, word),
        "map": (word, word),
        "chan": (word, word),
        "func": (word, word),
        # pointer + length
        "string": (2 * word, word),
        # type pointer + data pointer
        "interface": (2 * word, word),
        # pointer + length + capacity
        "slice": (3 * word, word),
    }


TYPE_SIZES: Dict[Architecture, Dict[str, Tuple[int, int]]] = {
    Architecture.amd64: _word_table(8, 8),
    Architecture.arm64: _word_table(8, 8),
    Architecture.i386: _word_table(4, 4),
}


def parse_architecture(value: Union[Architecture, str]) -> Architecture:
    if isinstance(value, Architecture):
        return value
    try:
        return Architecture(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidArchitectureError(value) from exc


def supported_types(arch: Union[Architecture, str] = Architecture.amd64) -> List[str]:
    return list(TYPE_SIZES[parse_architecture(arch)])


def is_known_type(type_name: str) -> bool:
    return type_name in TYPE_SIZES[Architecture.amd64]


def size_and_align_of(type_name: str, arch: Union[Architecture, str]) -> Tuple[int, int]:
    table = TYPE_SIZES[parse_architecture(arch)]
    try:
        return table[type_name]
    except KeyError as exc:
        raise UnknownTypeError(type_name) from exc
