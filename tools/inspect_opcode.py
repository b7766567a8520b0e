import argparse
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from cpuemu.Bus import Bus  # noqa: E402
from cpuemu.Cpu import CPU  # noqa: E402


def describe(cpu, opcode):
    entry = cpu.lookup.get(opcode)
    if entry is None:
        return f'opcode ${opcode:02X} -> sem handler (falha de decodificação)'
    instr_func, mnemonic = entry
    return f'opcode ${opcode:02X} -> {mnemonic} ({instr_func.__name__})'


def main(argv=None):
    parser = argparse.ArgumentParser(description='Mostra a tabela de despacho da CPU')
    parser.add_argument('--opcode', type=lambda s: int(s, 0), default=None,
                        help='opcode específico (ex: 0xA9); sem ele lista a tabela inteira')
    args = parser.parse_args(argv)

    cpu = CPU(Bus())
    opcodes = [args.opcode] if args.opcode is not None else sorted(cpu.lookup)
    for opcode in opcodes:
        print(describe(cpu, opcode))


if __name__ == '__main__':
    main()
