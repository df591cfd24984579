"""
Nome determinístico e gravação do snapshot da coleta.
"""

import json
import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from producao_municipal import config
from producao_municipal.erros import ArgumentoInvalido

log = logging.getLogger(__name__)


def nome_arquivo(
    dataset: str,
    variavel: str,
    anos: Sequence[int],
    formato: str = config.FORMATO_PADRAO,
) -> str:
    """
    `<Dataset>_data_<variavel>_<ano>.<ext>` para um único ano ou
    `<Dataset>_data_<variavel>_<min>_to_<max>.<ext>` para vários.

    Intervalo calculado sobre os anos únicos, independente da ordem.
    """
    _checar_formato(formato)
    unicos = sorted(set(anos))
    if not unicos:
        raise ArgumentoInvalido("A lista de anos não pode ser vazia.")

    if len(unicos) == 1:
        sufixo = f"{unicos[0]}"
    else:
        sufixo = f"{unicos[0]}_to_{unicos[-1]}"
    return f"{dataset}_data_{variavel}_{sufixo}.{formato}"


def salvar_snapshot(
    df: pd.DataFrame,
    caminho: str | Path,
    formato: str = config.FORMATO_PADRAO,
) -> Path:
    """Grava a tabela final; sobrescreve arquivo existente sem confirmação."""
    _checar_formato(formato)
    caminho = Path(caminho)
    caminho.parent.mkdir(parents=True, exist_ok=True)

    if formato == "parquet":
        df.to_parquet(caminho, index=False, engine="pyarrow")
    else:
        df.to_csv(caminho, index=False, encoding="utf-8", na_rep=config.MARCADOR_AUSENTE)

    log.info(f"💾 Snapshot salvo: {len(df):,} linhas → {caminho}")
    return caminho


def carregar_snapshot(caminho: str | Path) -> pd.DataFrame:
    """Recarrega um snapshot gravado por `salvar_snapshot`."""
    caminho = Path(caminho)
    if caminho.suffix == ".parquet":
        return pd.read_parquet(caminho, engine="pyarrow")

    # CSV: valores do SIDRA são texto; só o ano volta como inteiro
    df = pd.read_csv(
        caminho,
        dtype=str,
        encoding="utf-8",
        keep_default_na=False,
        na_values=[config.MARCADOR_AUSENTE],
    )
    if config.COLUNA_ANO in df.columns:
        df[config.COLUNA_ANO] = df[config.COLUNA_ANO].astype("int64")
    return df


def salvar_relatorio(relatorio: dict, caminho_snapshot: str | Path) -> Path:
    """Grava o relatório de falhas ao lado do snapshot (`<stem>_relatorio.json`)."""
    caminho_snapshot = Path(caminho_snapshot)
    caminho = caminho_snapshot.with_name(f"{caminho_snapshot.stem}_relatorio.json")
    with open(caminho, "w", encoding="utf-8") as f:
        json.dump(relatorio, f, indent=2, ensure_ascii=False)
    return caminho


def _checar_formato(formato: str) -> None:
    if formato not in config.FORMATOS:
        raise ArgumentoInvalido(
            f"Formato inválido: {formato!r}. Use um de {list(config.FORMATOS)}."
        )
