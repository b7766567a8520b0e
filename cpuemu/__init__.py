"""Emulador de um processador de 8 bits no estilo MOS 6502."""

from .Bus import MAX_MEM, AddressingFault, Bus
from .Cpu import CPU, DecodeFault, ExecutionResult, Registers, Status
from .Cycles import Cycles

__all__ = [
    'MAX_MEM', 'AddressingFault', 'Bus',
    'CPU', 'DecodeFault', 'ExecutionResult', 'Registers', 'Status',
    'Cycles',
]
