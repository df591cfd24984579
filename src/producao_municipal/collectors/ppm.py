"""
Coletor PPM (Pesquisa da Pecuária Municipal) — SIDRA tabela 3939.

Efetivo dos rebanhos por espécie (classificação 79), todas as variáveis.
"""

from pathlib import Path
from typing import Sequence

import httpx
import pandas as pd

from producao_municipal import config
from producao_municipal.pipeline import ConfiguracaoDataset, executar_coleta

PPM = ConfiguracaoDataset(
    nome="PPM",
    tabela="3939",
    classificacao="c79",
    descricao="Pesquisa da Pecuária Municipal — efetivo dos rebanhos",
    variavel_fixa="all",
    nome_variavel_fixa="livestock",
)


def baixar_ppm(
    anos,
    *,
    municipios: Sequence[str] | None = None,
    diretorio_saida: str | Path = ".",
    formato: str = config.FORMATO_PADRAO,
    client: httpx.Client | None = None,
    max_workers: int | None = None,
    estrito: bool = False,
) -> pd.DataFrame:
    resultado = executar_coleta(
        PPM,
        anos,
        municipios=municipios,
        diretorio_saida=diretorio_saida,
        formato=formato,
        client=client,
        max_workers=max_workers,
        estrito=estrito,
    )
    return resultado.tabela
