"""
Coletor PEVS (Produção da Extração Vegetal e da Silvicultura) — SIDRA tabela 291.

Quantidade produzida na extração vegetal (variável 142) por produto
(classificação 194).
"""

from pathlib import Path
from typing import Sequence

import httpx
import pandas as pd

from producao_municipal import config
from producao_municipal.pipeline import ConfiguracaoDataset, executar_coleta

PEVS = ConfiguracaoDataset(
    nome="PEVS",
    tabela="291",
    classificacao="c194",
    descricao="Produção da Extração Vegetal e da Silvicultura",
    variavel_fixa="142",
    nome_variavel_fixa="production",
)


def baixar_pevs(
    anos,
    *,
    municipios: Sequence[str] | None = None,
    diretorio_saida: str | Path = ".",
    formato: str = config.FORMATO_PADRAO,
    client: httpx.Client | None = None,
    max_workers: int | None = None,
    estrito: bool = False,
) -> pd.DataFrame:
    """
    Baixa a PEVS para todos os municípios nos anos pedidos.

    Ex.: baixar_pevs([1998, 2002]) grava PEVS_data_production_1998_to_2002.parquet
    """
    resultado = executar_coleta(
        PEVS,
        anos,
        municipios=municipios,
        diretorio_saida=diretorio_saida,
        formato=formato,
        client=client,
        max_workers=max_workers,
        estrito=estrito,
    )
    return resultado.tabela
