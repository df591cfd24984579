"""
Cliente da API de valores do SIDRA/IBGE.

Monta a URL de uma consulta (tabela × bloco de municípios × variável × ano),
executa o GET com retentativas e converte a resposta — cuja primeira linha
traz os nomes das colunas — em DataFrame.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Sequence

import httpx
import pandas as pd

from producao_municipal import config
from producao_municipal.erros import FalhaTransporte, RespostaInvalida

log = logging.getLogger(__name__)

# Status que justificam nova tentativa (rate limit e instabilidade do servidor)
STATUS_RETENTAVEIS = {429, 500, 502, 503, 504}

OK = "ok"
SEM_DADOS = "sem_dados"
FALHA = "falha"


@dataclass
class ResultadoBloco:
    """Desfecho de uma requisição (ano, bloco)."""

    ano: int
    indice_bloco: int
    status: str  # "ok" | "sem_dados" | "falha"
    tabela: pd.DataFrame | None = None
    status_http: int | None = None
    motivo: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == OK

    @property
    def linhas(self) -> int:
        return 0 if self.tabela is None else len(self.tabela)


def montar_url(
    tabela: str,
    variavel: str,
    ano: int,
    bloco: Sequence[str],
    classificacao: str,
    base_url: str = config.SIDRA_BASE_URL,
) -> str:
    """
    Monta a consulta /values do SIDRA para um bloco de municípios.

    Formato:
        <base>/values/t/<tabela>/n6/<id1>,...,<idN>/v/<variavel>/p/<ano>/<classificacao>/all

    `variavel` é o código da variável ou 'all'; `classificacao` é o token da
    dimensão (ex.: 'c782'), sempre com todas as categorias.
    """
    municipios = ",".join(str(c) for c in bloco)
    return (
        f"{base_url.rstrip('/')}/values"
        f"/t/{tabela}"
        f"/{config.NIVEL_TERRITORIAL}/{municipios}"
        f"/v/{variavel}"
        f"/p/{ano}"
        f"/{classificacao}/all"
    )


def parse_resposta(payload: Any) -> pd.DataFrame:
    """
    Converte o JSON do SIDRA em DataFrame promovendo a linha 0 a cabeçalho.

    O SIDRA devolve uma lista de objetos em que o primeiro traz os rótulos
    ({"NC": "Nível Territorial (Código)", "V": "Valor", ...}) e os demais os
    valores com as mesmas chaves. Listas posicionais também são aceitas.
    Com uma linha ou menos não há dados: retorna DataFrame vazio.
    """
    if not isinstance(payload, list):
        raise RespostaInvalida(f"Esperada lista de linhas, recebido {type(payload).__name__}")

    if len(payload) <= 1:
        return pd.DataFrame()

    cabecalho, dados = payload[0], payload[1:]

    if isinstance(cabecalho, dict):
        chaves = list(cabecalho.keys())
        colunas = [str(cabecalho[k]) for k in chaves]
        linhas = []
        for i, linha in enumerate(dados, start=1):
            if not isinstance(linha, dict):
                raise RespostaInvalida(f"Linha {i} não é objeto como o cabeçalho")
            linhas.append([_texto(linha.get(k)) for k in chaves])

    elif isinstance(cabecalho, list):
        colunas = [str(c) for c in cabecalho]
        linhas = []
        for i, linha in enumerate(dados, start=1):
            if not isinstance(linha, list) or len(linha) != len(colunas):
                raise RespostaInvalida(
                    f"Linha {i} não alinha com o cabeçalho ({len(colunas)} colunas)"
                )
            linhas.append([_texto(v) for v in linha])

    else:
        raise RespostaInvalida(f"Cabeçalho inesperado: {type(cabecalho).__name__}")

    return pd.DataFrame(linhas, columns=colunas, dtype=object)


def _texto(valor: Any) -> str | None:
    # células do SIDRA são sempre texto
    return None if valor is None else str(valor)


def buscar_bloco(
    client: httpx.Client,
    url: str,
    ano: int,
    indice_bloco: int,
    estrito: bool = False,
    tentativas: int | None = None,
    delay: float | None = None,
) -> ResultadoBloco:
    """
    Executa uma consulta e devolve o resultado tipado do bloco.

    Args:
        client: Sessão HTTPX ativa (timeout configurado na sessão).
        url: Consulta montada por `montar_url`.
        ano: Ano requisitado — identifica o bloco nos avisos.
        indice_bloco: Posição do bloco na partição.
        estrito: Se True, erros de rede e JSON malformado abortam a coleta
                 (FalhaTransporte). Se False, viram falha recuperável.
        tentativas: Limite de tentativas para 429/5xx e erros de rede
                    (padrão: config.MAX_TENTATIVAS).
        delay: Espera base entre tentativas, multiplicada pela tentativa
               (padrão: config.DELAY_SEGUNDOS).

    Returns:
        ResultadoBloco com status 'ok', 'sem_dados' ou 'falha'.
    """
    tentativas = config.MAX_TENTATIVAS if tentativas is None else max(1, tentativas)
    delay = config.DELAY_SEGUNDOS if delay is None else delay
    rotulo = f"ano {ano} | bloco {indice_bloco}"
    erro_rede: httpx.RequestError | None = None
    resposta: httpx.Response | None = None

    for tentativa in range(1, tentativas + 1):
        try:
            resposta = client.get(url)
            erro_rede = None
        except httpx.RequestError as e:
            erro_rede = e
            log.warning(f"  Erro de rede: {e!r} | {rotulo} | tentativa {tentativa}")
            if tentativa < tentativas:
                time.sleep(delay * tentativa)
            continue

        if resposta.status_code in STATUS_RETENTAVEIS and tentativa < tentativas:
            log.warning(f"  HTTP {resposta.status_code} | {rotulo} | tentativa {tentativa}")
            time.sleep(delay * tentativa)
            continue
        break

    if erro_rede is not None:
        motivo = f"erro de rede: {erro_rede!r}"
        if estrito:
            raise FalhaTransporte(f"{rotulo}: {motivo}", ano, indice_bloco) from erro_rede
        log.warning(f"Falha ao obter dados do bloco de municípios no {rotulo}: {motivo}")
        return ResultadoBloco(ano, indice_bloco, FALHA, motivo=motivo)

    if resposta.status_code != 200:
        log.warning(
            f"Falha ao obter dados do bloco de municípios no {rotulo}: "
            f"HTTP {resposta.status_code}"
        )
        return ResultadoBloco(
            ano, indice_bloco, FALHA,
            status_http=resposta.status_code,
            motivo=f"HTTP {resposta.status_code}",
        )

    try:
        tabela = parse_resposta(resposta.json())
    except (ValueError, RespostaInvalida) as e:
        motivo = f"resposta inválida: {e}"
        if estrito:
            raise FalhaTransporte(f"{rotulo}: {motivo}", ano, indice_bloco) from e
        log.warning(f"Resposta descartada no {rotulo}: {motivo}")
        return ResultadoBloco(ano, indice_bloco, FALHA, status_http=200, motivo=motivo)

    if tabela.empty and len(tabela.columns) == 0:
        log.debug(f"  Sem dados | {rotulo}")
        return ResultadoBloco(ano, indice_bloco, SEM_DADOS, status_http=200)

    log.debug(f"  {len(tabela)} linhas | {rotulo}")
    return ResultadoBloco(ano, indice_bloco, OK, tabela=tabela, status_http=200)
