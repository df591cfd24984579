"""
Validação das entradas do usuário antes de qualquer requisição.
"""

import logging
import numbers
from typing import Iterable, Mapping

from producao_municipal import config
from producao_municipal.erros import ArgumentoInvalido

log = logging.getLogger(__name__)


def _inteiro(valor) -> int | None:
    """Converte para int se o valor for numérico e inteiro; senão None."""
    if isinstance(valor, bool) or not isinstance(valor, numbers.Real):
        return None
    try:
        if valor != int(valor):
            return None
    except (ValueError, OverflowError):  # nan, inf
        return None
    return int(valor)


def validar_anos(
    anos: int | Iterable[int],
    ano_minimo: int = config.ANO_MINIMO,
    ano_maximo: int = config.ANO_MAXIMO,
) -> list[int]:
    """
    Valida a lista de anos e devolve os anos únicos em ordem crescente.

    Ordem das verificações:
      1. todos os elementos inteiros;
      2. todos dentro de [ano_minimo, ano_maximo];
      3. duplicados removidos (apenas aviso);
      4. lista não vazia.
    """
    if isinstance(anos, (str, bytes)):
        raise ArgumentoInvalido("'anos' deve ser um vetor numérico de inteiros.")
    if _inteiro(anos) is not None:
        anos = [anos]

    try:
        brutos = list(anos)
    except TypeError:
        raise ArgumentoInvalido("'anos' deve ser um vetor numérico de inteiros.") from None

    convertidos = [_inteiro(a) for a in brutos]
    if any(a is None for a in convertidos):
        invalidos = [b for b, c in zip(brutos, convertidos) if c is None]
        raise ArgumentoInvalido(
            f"'anos' deve ser um vetor numérico de inteiros. Inválidos: {invalidos}"
        )

    fora = [a for a in convertidos if not ano_minimo <= a <= ano_maximo]
    if fora:
        raise ArgumentoInvalido(
            f"Todos os anos devem estar no intervalo {ano_minimo} a {ano_maximo}. "
            f"Fora: {fora}"
        )

    unicos = sorted(set(convertidos))
    if len(unicos) != len(convertidos):
        log.warning(f"Anos duplicados removidos da lista: {len(convertidos) - len(unicos)}")

    if not unicos:
        raise ArgumentoInvalido("A lista de anos não pode ser vazia. Informe ao menos um ano válido.")

    return unicos


def validar_variavel(variavel: str, variaveis: Mapping[str, str]) -> str:
    """Devolve o código SIDRA da variável nomeada ou falha listando as opções."""
    if variavel not in variaveis:
        opcoes = ", ".join(f"'{v}'" for v in variaveis)
        raise ArgumentoInvalido(f"Variável inválida: {variavel!r}. Escolha entre: {opcoes}.")
    return variaveis[variavel]
