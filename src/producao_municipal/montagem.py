"""
Montagem da tabela longa: união por nome de coluna dos blocos de um ano,
coluna `year` com o ano requisitado e união final entre anos.
"""

from typing import Iterable

import pandas as pd

from producao_municipal import config


def unir_tabelas(tabelas: Iterable[pd.DataFrame]) -> pd.DataFrame:
    """
    Empilha as tabelas na ordem recebida, com união externa de colunas.

    Colunas ausentes em uma das fontes ficam como valor faltante.
    """
    tabelas = [t for t in tabelas if t is not None and len(t.columns) > 0]
    if not tabelas:
        return pd.DataFrame()
    if len(tabelas) == 1:
        return tabelas[0].reset_index(drop=True)
    return pd.concat(tabelas, join="outer", ignore_index=True, sort=False)


def montar_ano(tabelas: Iterable[pd.DataFrame], ano: int) -> pd.DataFrame:
    """Une os blocos de um ano e marca todas as linhas com o ano requisitado."""
    df = unir_tabelas(tabelas)
    # Ano do laço, não o período ecoado pela API
    df[config.COLUNA_ANO] = pd.Series([ano] * len(df), index=df.index, dtype="int64")
    return df


def montar_final(tabelas_anuais: Iterable[pd.DataFrame]) -> pd.DataFrame:
    df = unir_tabelas(t for t in tabelas_anuais if len(t) > 0)
    if config.COLUNA_ANO not in df.columns:
        df[config.COLUNA_ANO] = pd.Series([], dtype="int64")
    return df
