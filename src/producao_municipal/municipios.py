"""
Universo de municípios (códigos IBGE) e particionamento em blocos.

A tabela `data/br_cd_mun.csv` é a dimensão primária de todas as coletas:
cada requisição ao SIDRA cobre um bloco contíguo desses códigos.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Sequence

import httpx
import pandas as pd

from producao_municipal import config
from producao_municipal.erros import ArgumentoInvalido, UniversoInvalido

log = logging.getLogger(__name__)

# Caracteres que quebrariam o segmento /n6/<id1>,<id2>,... da URL
SEPARADORES_PROIBIDOS = (",", "/")


def carregar_municipios(caminho: str | Path | None = None) -> tuple[str, ...]:
    """
    Lê a tabela de municípios e devolve os códigos IBGE na ordem do arquivo.

    Aceita CSV com coluna `cod_ibge` ou uma única coluna de códigos.
    Qualquer problema (arquivo ausente, vazio, código com separador) é fatal:
    sem o universo nenhuma coleta pode prosseguir.
    """
    caminho = Path(caminho) if caminho is not None else config.CAMINHO_MUNICIPIOS

    if not caminho.exists():
        raise UniversoInvalido(
            f"Tabela de municípios não encontrada: {caminho}. "
            f"Gere com `producao-municipal municipios`."
        )

    try:
        df = pd.read_csv(caminho, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise UniversoInvalido(f"Tabela de municípios ilegível ({caminho}): {e}") from e

    if config.COLUNA_CODIGO in df.columns:
        codigos = df[config.COLUNA_CODIGO]
    elif len(df.columns) == 1:
        codigos = df.iloc[:, 0]
    else:
        raise UniversoInvalido(
            f"Coluna '{config.COLUNA_CODIGO}' ausente em {caminho}. "
            f"Colunas: {list(df.columns)}"
        )

    codigos = validar_codigos(codigos, caminho)
    log.debug(f"{len(codigos)} municípios carregados de {caminho}")
    return codigos


def validar_codigos(codigos: Sequence, origem: object = "universo informado") -> tuple[str, ...]:
    """
    Normaliza códigos IBGE para texto sem espaços, descartando vazios.
    Lista vazia ou código com separador de URL é fatal.
    """
    codigos = tuple(str(c).strip() for c in codigos if str(c).strip())
    if not codigos:
        raise UniversoInvalido(f"Lista de municípios vazia: {origem}")

    invalidos = [c for c in codigos if any(s in c for s in SEPARADORES_PROIBIDOS)]
    if invalidos:
        raise UniversoInvalido(
            f"{len(invalidos)} códigos contêm separador de URL (ex.: {invalidos[0]!r})"
        )
    return codigos


@lru_cache(maxsize=1)
def municipios_padrao() -> tuple[str, ...]:
    """Universo padrão, lido uma única vez por processo."""
    return carregar_municipios()


def particionar_blocos(
    municipios: Sequence[str],
    tamanho: int = config.TAMANHO_BLOCO,
) -> list[tuple[str, ...]]:
    """
    Divide o universo em blocos contíguos de no máximo `tamanho` códigos.

    Os blocos cobrem o universo exatamente e na ordem original; o último
    pode ser menor. Universo vazio gera zero blocos.
    """
    if isinstance(tamanho, bool) or not isinstance(tamanho, int) or tamanho < 1:
        raise ArgumentoInvalido(f"Tamanho de bloco deve ser inteiro positivo: {tamanho!r}")

    return [
        tuple(municipios[i:i + tamanho])
        for i in range(0, len(municipios), tamanho)
    ]


def gerar_tabela_municipios(
    caminho: str | Path | None = None,
    client: httpx.Client | None = None,
) -> pd.DataFrame:
    """
    Baixa o cadastro de municípios da API de localidades do IBGE e grava
    a tabela `cod_ibge,nome,uf` usada como universo das coletas.
    """
    caminho = Path(caminho) if caminho is not None else config.CAMINHO_MUNICIPIOS

    log.info("Buscando municípios no IBGE...")
    if client is None:
        with httpx.Client(timeout=config.TIMEOUT_SEGUNDOS, follow_redirects=True) as c:
            resposta = c.get(config.URL_LOCALIDADES)
    else:
        resposta = client.get(config.URL_LOCALIDADES)
    resposta.raise_for_status()

    registros = []
    for mun in resposta.json():
        # microrregiao pode vir nula para municípios recém-criados
        mesorregiao = (mun.get("microrregiao") or {}).get("mesorregiao") or {}
        uf = (mesorregiao.get("UF") or {}).get("sigla", "")
        registros.append({
            "cod_ibge": str(mun["id"]),
            "nome":     mun.get("nome", ""),
            "uf":       uf,
        })

    df = pd.DataFrame(registros, columns=["cod_ibge", "nome", "uf"])
    if df.empty:
        raise UniversoInvalido("API de localidades não retornou municípios")

    df = df.sort_values("cod_ibge").reset_index(drop=True)
    caminho.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(caminho, index=False, encoding="utf-8")

    municipios_padrao.cache_clear()
    log.info(f"✅ {len(df)} municípios salvos em {caminho}")
    return df
