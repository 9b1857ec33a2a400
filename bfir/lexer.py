from __future__ import annotations

import logging
from enum import Enum
from typing import List, Union

logger = logging.getLogger(__name__)


class StructuralError(ValueError):
    """Raised when loop brackets in a program do not pair up."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(message)
        self.position = position


class UnbalancedLoop(StructuralError):
    """Raised by the lexer for a ']' without an open '[' or an unclosed '['."""


class Symbol(Enum):
    MOVE_RIGHT = ">"
    MOVE_LEFT = "<"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    LOOP_START = "["
    LOOP_END = "]"


_SYMBOLS_BY_BYTE = {ord(symbol.value): symbol for symbol in Symbol}


def tokenize(data: Union[bytes, bytearray, str]) -> List[Symbol]:
    """Map source bytes to symbols, dropping every non-command byte.

    Brackets are checked while scanning: a ``]`` with nothing open, or a
    ``[`` still open at end of input, raises :class:`UnbalancedLoop`.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    symbols: List[Symbol] = []
    open_loops: List[int] = []
    for offset, byte in enumerate(data):
        symbol = _SYMBOLS_BY_BYTE.get(byte)
        if symbol is None:
            continue
        if symbol is Symbol.LOOP_START:
            open_loops.append(offset)
        elif symbol is Symbol.LOOP_END:
            if not open_loops:
                raise UnbalancedLoop(f"Unmatched ']' at offset {offset}", offset)
            open_loops.pop()
        symbols.append(symbol)

    if open_loops:
        offset = open_loops[-1]
        raise UnbalancedLoop(f"Unmatched '[' at offset {offset}", offset)

    logger.debug("lexed %d symbols from %d bytes", len(symbols), len(data))
    return symbols


__all__ = [
    "StructuralError",
    "Symbol",
    "UnbalancedLoop",
    "tokenize",
]
