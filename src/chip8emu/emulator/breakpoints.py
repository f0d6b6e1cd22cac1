"""
Breakpoint Support for the CHIP-8 Emulator
==========================================

Provides debugging stops for host tooling:
- PC breakpoints (halt when PC reaches address)
- Register conditions (halt when a register matches)

The CPU consults the BreakpointManager before every instruction executed by
tick(). When a check fails the CPU halts without executing the instruction,
so registers and memory can be inspected. resume() then executes that
instruction before any breakpoint is checked again.

Example usage:

    >>> cpu = CPU()
    >>> cpu.load_program(rom)
    >>> cpu.breakpoints.add_breakpoint(0x208)
    >>> cpu.tick()
    >>> if cpu.is_halted and cpu.breakpoints.last_event:
    ...     print(cpu.breakpoints.last_event)
    Breakpoint at $208

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from .cpu import CPU


class BreakReason(Enum):
    """
    Enumeration of reasons why execution stopped.

    Used in BreakEvent to indicate what triggered the break.
    """
    NONE = auto()                # No specific reason
    PC_BREAKPOINT = auto()       # PC reached a breakpoint address
    REGISTER_CONDITION = auto()  # Register condition met
    ERROR = auto()               # Execution fault


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: PC at the time of the break (if applicable)
        message: Human-readable description
    """
    reason: BreakReason
    address: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        """Return human-readable description."""
        if self.message:
            return self.message
        match self.reason:
            case BreakReason.PC_BREAKPOINT:
                return f"Breakpoint at ${self.address:03X}" if self.address is not None else "Breakpoint"
            case BreakReason.REGISTER_CONDITION:
                return "Register condition met"
            case BreakReason.ERROR:
                return "Execution error"
            case _:
                return "Unknown"


class RegisterCondition:
    """
    Condition on CPU registers.

    Supported registers: v0-vf, i, pc, sp, dt, st

    Supported operators: ==, !=, <, <=, >, >=, & (bitwise test)

    Examples:
        >>> cond = RegisterCondition('v3', '==', 0x42)
        >>> cond = RegisterCondition('i', '>', 0xF00)
        >>> cond = RegisterCondition('vf', '&', 0x01)
    """

    VALID_REGISTERS = frozenset(
        [f"v{n:x}" for n in range(16)] + ['i', 'pc', 'sp', 'dt', 'st']
    )
    VALID_OPERATORS = frozenset({'==', '!=', '<', '<=', '>', '>=', '&'})

    def __init__(self, register: str, operator: str, value: int, description: str = ""):
        """
        Create a register condition.

        Args:
            register: Register name (v0-vf, i, pc, sp, dt, st)
            operator: Comparison operator
            value: Value to compare against
            description: Optional description for debugging
        """
        self.register = register.lower()
        self.operator = operator
        self.value = value
        self.description = description or f"{register} {operator} {value}"

        if self.register not in self.VALID_REGISTERS:
            raise ValueError(
                f"Unknown register '{register}'. Valid registers: "
                f"{', '.join(sorted(self.VALID_REGISTERS))}"
            )
        if self.operator not in self.VALID_OPERATORS:
            raise ValueError(
                f"Unknown operator '{operator}'. Valid operators: "
                f"{', '.join(sorted(self.VALID_OPERATORS))}"
            )

    def check(self, cpu: "CPU") -> bool:
        """
        Check if condition is met against CPU state.

        Returns:
            True if condition is met, False otherwise
        """
        actual = cpu.registers_snapshot()[self.register]

        match self.operator:
            case '==':
                return actual == self.value
            case '!=':
                return actual != self.value
            case '<':
                return actual < self.value
            case '<=':
                return actual <= self.value
            case '>':
                return actual > self.value
            case '>=':
                return actual >= self.value
            case '&':
                return (actual & self.value) != 0
            case _:
                return False

    def __repr__(self) -> str:
        return f"RegisterCondition({self.register!r}, {self.operator!r}, {self.value!r})"


class BreakpointManager:
    """
    Manages PC breakpoints and register conditions.

    Example:
        >>> mgr = BreakpointManager()
        >>> mgr.add_breakpoint(0x20A)
        >>> mgr.add_register_condition(RegisterCondition('v0', '==', 0))
    """

    def __init__(self):
        self._pc_breakpoints: Set[int] = set()
        self._register_conditions: List[RegisterCondition] = []
        self._last_event: Optional[BreakEvent] = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def last_event(self) -> Optional[BreakEvent]:
        """Get the last break event that occurred."""
        return self._last_event

    @property
    def breakpoint_count(self) -> int:
        """Number of active PC breakpoints."""
        return len(self._pc_breakpoints)

    @property
    def is_empty(self) -> bool:
        """True when nothing can trigger a break."""
        return not self._pc_breakpoints and not self._register_conditions

    # =========================================================================
    # PC Breakpoints
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """
        Add PC breakpoint at address.

        Execution will stop when PC reaches this address, before the
        instruction at that address is executed.
        """
        self._pc_breakpoints.add(address & 0xFFFF)

    def remove_breakpoint(self, address: int) -> None:
        """Remove PC breakpoint at address."""
        self._pc_breakpoints.discard(address & 0xFFFF)

    def has_breakpoint(self, address: int) -> bool:
        """Check if breakpoint exists at address."""
        return (address & 0xFFFF) in self._pc_breakpoints

    def list_breakpoints(self) -> List[int]:
        """Sorted list of breakpoint addresses."""
        return sorted(self._pc_breakpoints)

    # =========================================================================
    # Register Conditions
    # =========================================================================

    def add_register_condition(self, condition: RegisterCondition) -> int:
        """
        Add a register condition.

        Returns:
            Index that can be passed to remove_register_condition()
        """
        self._register_conditions.append(condition)
        return len(self._register_conditions) - 1

    def remove_register_condition(self, index: int) -> None:
        """Remove a register condition by index."""
        if 0 <= index < len(self._register_conditions):
            del self._register_conditions[index]

    def clear_all(self) -> None:
        """Remove all breakpoints and conditions."""
        self._pc_breakpoints.clear()
        self._register_conditions.clear()
        self._last_event = None

    # =========================================================================
    # CPU Hooks
    # =========================================================================

    def check_instruction(self, cpu: "CPU", pc: int) -> bool:
        """
        Check breakpoints before an instruction executes.

        Args:
            cpu: CPU about to execute
            pc: Address of the instruction

        Returns:
            True to continue, False to stop
        """
        if pc in self._pc_breakpoints:
            self._last_event = BreakEvent(BreakReason.PC_BREAKPOINT, address=pc)
            return False

        for condition in self._register_conditions:
            if condition.check(cpu):
                self._last_event = BreakEvent(
                    BreakReason.REGISTER_CONDITION,
                    address=pc,
                    message=f"Condition met at ${pc:03X}: {condition.description}",
                )
                return False

        return True

    def record_error(self, pc: int, message: str) -> None:
        """Record an execution fault as the last break event."""
        self._last_event = BreakEvent(BreakReason.ERROR, address=pc, message=message)

    def clear_last_event(self) -> None:
        self._last_event = None
