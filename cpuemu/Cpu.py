# -*- coding: utf-8 -*-
"""
Núcleo de execução de um processador de 8 bits no estilo MOS 6502.

Este módulo contém os Registradores (`Registers`) e a Unidade Central de
Processamento (`CPU`), que busca, decodifica e executa instruções contra um
`Bus` de 64KB, contabilizando os ciclos de clock de cada operação.
"""

import logging
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Tuple

from .Bus import AddressingFault
from .Cycles import Cycles

logger = logging.getLogger(__name__)

# Endereço do vetor de reset: o PC aponta para cá após `reset`.
RESET_VECTOR = 0xFFFC
# Endereço inicial do ponteiro de pilha (endereço completo de 16 bits).
STACK_START = 0x0100


class Status(Enum):
    """Resultado de uma chamada a `CPU.execute`."""
    OK = 'ok'
    DECODE_FAULT = 'decode_fault'
    ADDRESSING_FAULT = 'addressing_fault'


class ExecutionResult(NamedTuple):
    """O que `CPU.execute` devolve ao driver.

    `cycles_used` pode ser maior que o orçamento pedido: o laço só verifica o
    orçamento entre instruções. Em caso de falha, `opcode` e `address` indicam
    a instrução que falhou (para falha de endereçamento, `address` é o endereço
    de memória inválido).
    """
    status: Status
    cycles_used: int
    opcode: Optional[int] = None
    address: Optional[int] = None
    message: str = ''

    @property
    def ok(self):
        return self.status is Status.OK


class DecodeFault(Exception):
    """Opcode sem entrada na tabela de despacho."""

    def __init__(self, opcode, address):
        self.opcode = opcode
        self.address = address
        super().__init__(
            f"opcode ilegal/não implementado ${opcode:02X} no endereço ${address:04X}")


class Registers:
    """Representa os registradores da CPU."""

    def __init__(self):
        self.reset()

    def reset(self):
        """Coloca todos os registradores nos valores de reset.

        PC aponta para o vetor de reset (0xFFFC), SP começa em 0x0100,
        flags e registradores de uso geral são zerados.
        """
        # Contador de Programa (Program Counter) de 16 bits
        self.pc = RESET_VECTOR
        # Ponteiro de Pilha: endereço completo de 16 bits, não um offset na página 1
        self.sp = STACK_START

        # Registradores de uso geral de 8 bits
        self.a = 0x00  # Acumulador
        self.x = 0x00
        self.y = 0x00

        # Flags de status, cada uma um atributo independente
        self.c = 0  # Carry
        self.z = 0  # Zero
        self.i = 0  # Interrupt Disable
        self.d = 0  # Decimal Mode (sem efeito aritmético aqui)
        self.b = 0  # Break
        self.v = 0  # Overflow
        self.n = 0  # Negative

    def get_status_byte(self):
        """Monta o registrador de status (P) como um byte NV-BDIZC.

        O bit 5 não existe como flag e é sempre lido como 1.
        """
        return (
            (self.n << 7) |
            (self.v << 6) |
            (1 << 5) |
            (self.b << 4) |
            (self.d << 3) |
            (self.i << 2) |
            (self.z << 1) |
            self.c
        )

    def set_status_byte(self, value):
        """Define as sete flags a partir de um byte NV-BDIZC (bit 5 ignorado)."""
        self.n = (value >> 7) & 1
        self.v = (value >> 6) & 1
        self.b = (value >> 4) & 1
        self.d = (value >> 3) & 1
        self.i = (value >> 2) & 1
        self.z = (value >> 1) & 1
        self.c = value & 1

    def update_flag_z(self, result):
        """Atualiza a flag Zero (Z) se o resultado for 0."""
        self.z = 1 if (result & 0xFF) == 0 else 0

    def update_flag_n(self, result):
        """Atualiza a flag Negativa (N) se o bit 7 do resultado for 1."""
        self.n = 1 if (result & 0x80) else 0

    def snapshot(self):
        """Retorna uma cópia dos registradores e flags como dicionário."""
        return {
            'pc': self.pc, 'sp': self.sp,
            'a': self.a, 'x': self.x, 'y': self.y,
            'c': self.c, 'z': self.z, 'i': self.i, 'd': self.d,
            'b': self.b, 'v': self.v, 'n': self.n,
        }

    def __repr__(self):
        return ("Registers(PC={pc:04X} SP={sp:04X} A={a:02X} X={x:02X} Y={y:02X} "
                "N={n} V={v} B={b} D={d} I={i} Z={z} C={c})").format(**self.snapshot())


class CPU:
    """Representa a unidade central de processamento (CPU)."""

    # --- Instruction set ---
    INS_LDA_IMM = 0xA9  # LDA imediato
    INS_LDA_ZP = 0xA5   # LDA da página zero
    INS_LDA_ZPX = 0xB5  # LDA da página zero indexado por X
    INS_JSR = 0x20      # Jump to Subroutine

    def __init__(self, bus):
        """Inicializa a CPU, conectando-a ao barramento fornecido.

        Args:
            bus (Bus): A instância do barramento de memória a ser usada pela CPU.
        """
        self.bus = bus
        self.regs = Registers()
        self.verbose = False  # loga cada instrução executada em nível DEBUG
        self.halted = False
        self.fault: Optional[ExecutionResult] = None
        self.opcode = 0
        self.instr_pc = 0  # endereço do opcode da instrução atual
        self.total_cycles = 0  # ciclos gastos desde o último reset

        self.lookup: Dict[int, Tuple[Callable[[Cycles], None], str]] = self._build_lookup_table()

    def _build_lookup_table(self):
        """Constrói a tabela de despacho: opcode -> (handler, mnemônico)."""
        return {
            self.INS_LDA_IMM: (self.LDA_IMM, 'LDA #imm'),
            self.INS_LDA_ZP: (self.LDA_ZP, 'LDA zp'),
            self.INS_LDA_ZPX: (self.LDA_ZPX, 'LDA zp,X'),
            self.INS_JSR: (self.JSR, 'JSR abs'),
        }

    def register_opcode(self, opcode: int, handler: Callable[[Cycles], None], mnemonic: str):
        """Adiciona (ou substitui) uma entrada na tabela de despacho.

        O handler recebe o orçamento de ciclos; o opcode já foi buscado
        e o PC aponta para o primeiro byte de operando.
        """
        if not 0 <= opcode <= 0xFF:
            raise ValueError(f"opcode fora da faixa de 8 bits: {opcode!r}")
        self.lookup[opcode] = (handler, mnemonic)

    def reset(self):
        """Reseta a CPU e zera a memória do barramento.

        Não custa ciclos. Como a memória é apagada, o programa precisa ser
        escrito no barramento depois que `reset` retornar.
        """
        self.regs.reset()
        self.bus.init()
        self.halted = False
        self.fault = None
        self.opcode = 0
        self.instr_pc = 0
        self.total_cycles = 0

    # --- Funções de Busca e Leitura ---
    def fetch_byte(self, cycles: Cycles) -> int:
        """Busca o byte apontado por PC e incrementa PC. Custa 1 ciclo."""
        value = self.bus.read(self.regs.pc)
        self.regs.pc = (self.regs.pc + 1) & 0xFFFF
        cycles.spend(1)
        return value

    def fetch_word(self, cycles: Cycles) -> int:
        """Busca uma palavra (16 bits, little-endian) a partir de PC. Custa 2 ciclos."""
        low_byte = self.fetch_byte(cycles)
        high_byte = self.fetch_byte(cycles)
        return (high_byte << 8) | low_byte

    def read_byte(self, cycles: Cycles, address: int) -> int:
        """Lê um byte de dados em `address` sem mexer no PC. Custa 1 ciclo."""
        value = self.bus.read(address)
        cycles.spend(1)
        return value

    def lda_set_status(self):
        """Calcula Z e N depois de uma carga no acumulador."""
        self.regs.update_flag_z(self.regs.a)
        self.regs.update_flag_n(self.regs.a)

    # --- Instruções ---
    def LDA_IMM(self, cycles):
        """LDA imediato: o byte seguinte ao opcode vai para o acumulador."""
        self.regs.a = self.fetch_byte(cycles)
        self.lda_set_status()

    def LDA_ZP(self, cycles):
        """LDA página zero: o operando é o endereço (0x00xx) do dado."""
        zero_page_addr = self.fetch_byte(cycles)
        self.regs.a = self.read_byte(cycles, zero_page_addr)
        self.lda_set_status()

    def LDA_ZPX(self, cycles):
        """LDA página zero indexado por X, com wrap dentro da página zero."""
        zero_page_addr = (self.fetch_byte(cycles) + self.regs.x) & 0xFF
        # Ciclo extra da soma do índice
        cycles.spend(1)
        self.regs.a = self.read_byte(cycles, zero_page_addr)
        self.lda_set_status()

    def JSR(self, cycles):
        """JSR: empilha o endereço de retorno (PC - 1) e salta para o destino.

        O SP é um endereço de 16 bits e avança só 1 posição por chamada.
        """
        target_addr = self.fetch_word(cycles)
        return_addr = (self.regs.pc - 1) & 0xFFFF
        self.bus.write_word(cycles, self.regs.sp, return_addr)
        self.regs.sp = (self.regs.sp + 1) & 0xFFFF
        self.regs.pc = target_addr
        cycles.spend(1)

    def XXX(self, cycles):
        """Opcode ilegal ou não implementado."""
        raise DecodeFault(self.opcode, self.instr_pc)

    # --- Função Principal de Execução ---
    def execute(self, cycles) -> ExecutionResult:
        """Executa instruções até esgotar o orçamento de ciclos.

        O orçamento só é verificado entre instruções, então a última instrução
        pode ultrapassá-lo. Falhas de decodificação ou de endereçamento param a
        execução: o PC volta para o opcode que falhou, a CPU fica parada até o
        próximo `reset` e a falha é devolvida no `ExecutionResult`.

        Args:
            cycles (int | Cycles): ciclos disponíveis para esta execução.

        Returns:
            ExecutionResult: status, ciclos gastos e detalhes da falha, se houver.
        """
        if not isinstance(cycles, Cycles):
            cycles = Cycles(cycles)
        if self.halted:
            return self.fault

        start = cycles.spent
        try:
            while cycles.remaining > 0:
                self.instr_pc = self.regs.pc
                self.opcode = self.fetch_byte(cycles)
                instr_func, mnemonic = self.lookup.get(self.opcode, (self.XXX, '???'))
                if self.verbose:
                    logger.debug("$%04X: %02X %-8s %r", self.instr_pc, self.opcode, mnemonic, self.regs)
                instr_func(cycles)
        except DecodeFault as exc:
            return self._halt(Status.DECODE_FAULT, cycles.spent - start, exc.opcode, exc.address, str(exc))
        except AddressingFault as exc:
            return self._halt(Status.ADDRESSING_FAULT, cycles.spent - start, self.opcode, exc.address, str(exc))
        finally:
            self.total_cycles += cycles.spent - start

        return ExecutionResult(Status.OK, cycles.spent - start)

    def _halt(self, status, cycles_used, opcode, address, message):
        # A instrução que falhou não deve deixar o PC no meio dos operandos.
        self.regs.pc = self.instr_pc
        self.halted = True
        self.fault = ExecutionResult(status, cycles_used, opcode, address, message)
        logger.error("%s: %s", status.name, message)
        logger.error("Regs: %r", self.regs)
        return self.fault
