import logging

logger = logging.getLogger(__name__)

# Tamanho máximo da memória: 64KB, o mesmo espaço de endereçamento do 6502.
MAX_MEM = 64 * 1024


class AddressingFault(ValueError):
    """Acesso a um endereço fora de [0x0000, 0xFFFF].

    Atributos:
        address: primeiro endereço do acesso que falhou.
        width: número de bytes do acesso (1 para byte, 2 para palavra).
    """

    def __init__(self, address, width=1):
        self.address = address
        self.width = width
        super().__init__(
            f"acesso de {width} byte(s) em ${address:04X} fora do espaço de 64KB"
            if isinstance(address, int) and address >= 0
            else f"endereço inválido: {address!r}")


class Bus:
    """Representa o barramento de memória, conectando CPU e RAM.

    Leituras e escritas simples não consomem ciclos: quem chama é responsável
    por cobrar o custo. Apenas `write_word` desconta ciclos do orçamento.
    """

    def __init__(self):
        """Aloca a memória RAM com 64KB (0x0000 - 0xFFFF) de zeros."""
        self.ram = bytearray(MAX_MEM)

    def _check_range(self, address, width=1):
        # O último byte do acesso também precisa caber no espaço de 16 bits.
        if not isinstance(address, int) or address < 0 or address + width - 1 > 0xFFFF:
            raise AddressingFault(address, width)

    def init(self):
        """Zera toda a memória.

        O 6502 original não fazia isso em hardware, então não custa ciclos.
        """
        self.ram[:] = bytes(MAX_MEM)

    def read(self, address: int) -> int:
        """Lê um byte da memória no endereço especificado."""
        self._check_range(address)
        return self.ram[address]

    def write(self, address: int, value: int):
        """Escreve um byte na memória no endereço especificado."""
        self._check_range(address)
        self.ram[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Lê uma palavra (16 bits, little-endian) da memória.

        Não há wrap-around: ler uma palavra em 0xFFFF é uma falha de endereçamento.
        """
        self._check_range(address, 2)
        return (self.ram[address + 1] << 8) | self.ram[address]

    def write_word(self, cycles, address: int, word: int):
        """Escreve uma palavra (16 bits) na memória em ordem little-endian.

        Args:
            cycles (Cycles): orçamento de ciclos; a escrita custa 2 ciclos.
            address (int): endereço do byte menos significativo.
            word (int): valor de 16 bits.

        Raises:
            AddressingFault: se `address + 1` sair do espaço de endereçamento.
                Nesse caso nenhum byte é escrito e nenhum ciclo é cobrado.
        """
        self._check_range(address, 2)
        word &= 0xFFFF
        self.ram[address] = word & 0xFF
        self.ram[address + 1] = word >> 8
        cycles.spend(2)

    def load(self, address: int, data):
        """Copia bytes crus para a memória a partir de `address`.

        A faixa inteira é validada antes de qualquer escrita.
        """
        data = bytes(data)
        if not data:
            return
        self._check_range(address, len(data))
        self.ram[address:address + len(data)] = data
        logger.debug("Carregados %d bytes em $%04X", len(data), address)
