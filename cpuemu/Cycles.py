class Cycles:
    """Orçamento de ciclos de clock compartilhado entre as primitivas da CPU.

    É passado por referência para cada operação que tem custo em hardware
    (busca, leitura, escrita). `remaining` pode ficar negativo: a última
    instrução executada pode ultrapassar o orçamento pedido.
    """

    def __init__(self, budget: int = 0):
        self.remaining = budget
        self.spent = 0

    def spend(self, count: int = 1):
        """Desconta `count` ciclos do orçamento."""
        self.remaining -= count
        self.spent += count

    def __repr__(self):
        return f"Cycles(remaining={self.remaining}, spent={self.spent})"
