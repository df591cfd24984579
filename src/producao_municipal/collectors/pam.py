"""
Coletor PAM (Produção Agrícola Municipal) — SIDRA tabela 5457.

Lavouras temporárias e permanentes, todos os produtos (classificação 782),
uma variável por coleta:
  - planted_area   : Área plantada ou destinada à colheita (ha)   — v8331
  - harvested_area : Área colhida (ha)                            — v216
  - production     : Quantidade produzida                         — v214
  - average_yield  : Rendimento médio da produção                 — v112

Exemplo:
    df = baixar_pam("planted_area", range(1998, 2024))
"""

from pathlib import Path
from typing import Sequence

import httpx
import pandas as pd

from producao_municipal import config
from producao_municipal.pipeline import ConfiguracaoDataset, executar_coleta

VARIAVEIS_PAM = {
    "planted_area":   "8331",
    "harvested_area": "216",
    "production":     "214",
    "average_yield":  "112",
}

PAM = ConfiguracaoDataset(
    nome="PAM",
    tabela="5457",
    classificacao="c782",
    descricao="Produção Agrícola Municipal — lavouras temporárias e permanentes",
    variaveis=VARIAVEIS_PAM,
)


def baixar_pam(
    variavel: str,
    anos,
    *,
    municipios: Sequence[str] | None = None,
    diretorio_saida: str | Path = ".",
    formato: str = config.FORMATO_PADRAO,
    client: httpx.Client | None = None,
    max_workers: int | None = None,
    estrito: bool = False,
) -> pd.DataFrame:
    """Baixa a variável da PAM para todos os municípios e grava o snapshot."""
    resultado = executar_coleta(
        PAM,
        anos,
        variavel,
        municipios=municipios,
        diretorio_saida=diretorio_saida,
        formato=formato,
        client=client,
        max_workers=max_workers,
        estrito=estrito,
    )
    return resultado.tabela
