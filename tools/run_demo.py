"""Driver de demonstração: JSR no vetor de reset para uma rotina LDA #$84.

Uso: python tools/run_demo.py [--cycles N] [--verbose]
"""
import argparse
import logging
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from cpuemu.Bus import Bus  # noqa: E402
from cpuemu.Cpu import CPU  # noqa: E402

logger = logging.getLogger('run_demo')


def seed_program(bus):
    # JSR $4242 no vetor de reset; LDA #$84 na sub-rotina
    bus.load(0xFFFC, [CPU.INS_JSR, 0x42, 0x42])
    bus.load(0x4242, [CPU.INS_LDA_IMM, 0x84])


def main(argv=None):
    parser = argparse.ArgumentParser(description='Executa o programa de demonstração da CPU')
    parser.add_argument('--cycles', type=int, default=8, help='orçamento de ciclos (padrão: 8)')
    parser.add_argument('--verbose', action='store_true', help='loga cada instrução executada')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    bus = Bus()
    cpu = CPU(bus)
    cpu.verbose = args.verbose

    # O reset zera a memória, então o programa é escrito depois dele
    cpu.reset()
    seed_program(bus)

    result = cpu.execute(args.cycles)
    logger.info("Status: %s, ciclos gastos: %d (pedidos: %d)",
                result.status.name, result.cycles_used, args.cycles)
    logger.info("%r", cpu.regs)
    logger.info("Pilha[$0100] = $%04X", bus.read_word(0x0100))

    if not result.ok:
        logger.error("Execução interrompida: %s", result.message)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
