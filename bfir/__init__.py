from .compiler import (
    Instruction,
    Op,
    Program,
    UnclosedLoop,
    UnmatchedLoopEnd,
    compile_source,
    compile_symbols,
)
from .interpreter import IRInterpreter, InputExhausted, Tape
from .lexer import StructuralError, Symbol, UnbalancedLoop, tokenize

__all__ = [
    "IRInterpreter",
    "InputExhausted",
    "Instruction",
    "Op",
    "Program",
    "StructuralError",
    "Symbol",
    "Tape",
    "UnbalancedLoop",
    "UnclosedLoop",
    "UnmatchedLoopEnd",
    "compile_source",
    "compile_symbols",
    "tokenize",
]
