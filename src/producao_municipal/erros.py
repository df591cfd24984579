"""Exceções da coleta SIDRA."""


class ProducaoMunicipalError(Exception):
    """Base de todos os erros do pacote."""


class ArgumentoInvalido(ProducaoMunicipalError, ValueError):
    """Entrada do usuário inválida (anos, variável, tamanho de bloco)."""


class UniversoInvalido(ProducaoMunicipalError, RuntimeError):
    """Tabela de municípios ausente ou malformada — nenhuma coleta é possível."""


class RespostaInvalida(ProducaoMunicipalError, ValueError):
    """Corpo de resposta 200 que não segue o formato cabeçalho + linhas."""


class FalhaTransporte(ProducaoMunicipalError, RuntimeError):
    """Falha irrecuperável de rede/parse quando a coleta roda em modo estrito."""

    def __init__(self, mensagem: str, ano: int, indice_bloco: int):
        super().__init__(mensagem)
        self.ano = ano
        self.indice_bloco = indice_bloco
