from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from .compiler import CELL_MASK, Instruction, Op, Program

logger = logging.getLogger(__name__)


class InputExhausted(RuntimeError):
    """Raised when an input instruction runs with no byte left to read."""

    def __init__(self, pc: int) -> None:
        super().__init__(f"Input exhausted at instruction {pc}")
        self.pc = pc


@dataclass
class Tape:
    """Growable byte memory addressed by a single data pointer."""

    cells: bytearray = field(default_factory=lambda: bytearray(1))
    pointer: int = 0

    def __post_init__(self) -> None:
        if self.pointer < 0:
            raise ValueError("Tape pointer cannot be negative")
        self._grow_to(self.pointer)

    def _grow_to(self, index: int) -> None:
        missing = index + 1 - len(self.cells)
        if missing > 0:
            self.cells.extend(bytes(missing))

    @property
    def value(self) -> int:
        return self.cells[self.pointer]

    @value.setter
    def value(self, byte: int) -> None:
        self.cells[self.pointer] = byte & CELL_MASK

    def move_right(self, count: int) -> None:
        self.pointer += count
        self._grow_to(self.pointer)

    def move_left(self, count: int) -> None:
        # saturates at the first cell
        self.pointer = max(0, self.pointer - count)

    def add(self, amount: int) -> None:
        self.value = self.value + amount

    def subtract(self, amount: int) -> None:
        self.value = self.value - amount

    def __len__(self) -> int:
        return len(self.cells)


@dataclass
class IRInterpreter:
    """Executes a compiled program against a fresh tape.

    ``stdin`` only needs ``read(1)`` and ``stdout`` needs ``write`` and
    ``flush``; both are binary. Without a ``stdout`` the output is
    captured in memory and returned by :meth:`run`.
    """

    tape: Tape = field(init=False, repr=False)
    pc: int = field(init=False, repr=False)
    captured_output: Optional[io.BytesIO] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self, tape: Optional[Tape] = None) -> None:
        self.tape = tape if tape is not None else Tape()
        self.pc = 0
        self.captured_output = None

    def run(
        self,
        program: Program,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        tape: Optional[Tape] = None,
    ) -> bytes:
        self.reset(tape)
        self._stdin = stdin if stdin is not None else io.BytesIO()
        if stdout is None:
            self.captured_output = io.BytesIO()
            stdout = self.captured_output
        self._stdout = stdout

        length = len(program)
        while self.pc < length:
            self._execute_instruction(program[self.pc])
            # jumps land on target + 1 through this increment
            self.pc += 1

        logger.debug("program of %d instructions finished", length)
        if self.captured_output is None:
            return b""
        return self.captured_output.getvalue()

    def _execute_instruction(self, instruction: Instruction) -> None:
        op = instruction.op
        tape = self.tape
        if op is Op.MOVE_RIGHT:
            tape.move_right(instruction.arg)
        elif op is Op.MOVE_LEFT:
            tape.move_left(instruction.arg)
        elif op is Op.INCREMENT:
            tape.add(instruction.arg)
        elif op is Op.DECREMENT:
            tape.subtract(instruction.arg)
        elif op is Op.OUTPUT:
            self._stdout.write(bytes((tape.value,)))
        elif op is Op.INPUT:
            tape.value = self._read()
        elif op is Op.JUMP_IF_ZERO:
            if tape.value == 0:
                self.pc = instruction.arg
        elif op is Op.JUMP_IF_NOT_ZERO:
            if tape.value != 0:
                self.pc = instruction.arg

    def _read(self) -> int:
        # prompts written so far must be visible before blocking
        self._stdout.flush()
        data = self._stdin.read(1)
        if not data:
            raise InputExhausted(self.pc)
        return data[0]


__all__ = [
    "IRInterpreter",
    "InputExhausted",
    "Tape",
]
