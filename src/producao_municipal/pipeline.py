"""
Pipeline genérico de coleta SIDRA por município.

Cada pesquisa (PAM, PPM, PEVS) é só uma ConfiguracaoDataset; este módulo
valida as entradas, dispara as requisições (ano × bloco) em um pool de
threads limitado, monta a tabela longa e grava o snapshot.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import httpx
import pandas as pd

from producao_municipal import config
from producao_municipal.erros import ArgumentoInvalido
from producao_municipal.montagem import montar_ano, montar_final
from producao_municipal.municipios import municipios_padrao, particionar_blocos, validar_codigos
from producao_municipal.persistencia import nome_arquivo, salvar_relatorio, salvar_snapshot
from producao_municipal.sidra import FALHA, OK, SEM_DADOS, ResultadoBloco, buscar_bloco, montar_url
from producao_municipal.validacao import validar_anos, validar_variavel

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfiguracaoDataset:
    """Parâmetros fixos de uma pesquisa no SIDRA."""

    nome: str  # prefixo do arquivo, ex. "PAM"
    tabela: str  # id da tabela SIDRA
    classificacao: str  # token da dimensão, ex. "c782"
    descricao: str = ""
    # Pesquisas com variável selecionável (só a PAM): nome -> código SIDRA
    variaveis: dict[str, str] = field(default_factory=dict)
    # Pesquisas de variável única: seletor na URL e nome usado no arquivo
    variavel_fixa: str | None = None
    nome_variavel_fixa: str | None = None
    ano_minimo: int = config.ANO_MINIMO
    ano_maximo: int = config.ANO_MAXIMO

    def resolver_variavel(self, variavel: str | None = None) -> tuple[str, str]:
        """Devolve (nome para o arquivo, seletor para a URL)."""
        if self.variaveis:
            if variavel is None:
                opcoes = ", ".join(f"'{v}'" for v in self.variaveis)
                raise ArgumentoInvalido(f"{self.nome} exige uma variável: {opcoes}.")
            return variavel, validar_variavel(variavel, self.variaveis)

        if variavel is not None:
            raise ArgumentoInvalido(f"{self.nome} não aceita variável (recebido {variavel!r}).")
        return self.nome_variavel_fixa, self.variavel_fixa


@dataclass
class RelatorioColeta:
    """Desfecho de cada requisição (ano, bloco) de uma coleta."""

    dataset: str
    variavel: str
    anos: list[int]
    n_blocos: int
    resultados: list[ResultadoBloco] = field(default_factory=list)
    duracao_segundos: float = 0.0

    @property
    def falhas(self) -> list[ResultadoBloco]:
        return [r for r in self.resultados if r.status == FALHA]

    @property
    def anos_com_falha(self) -> list[int]:
        return sorted({r.ano for r in self.falhas})

    @property
    def completo(self) -> bool:
        return not self.falhas

    def contagem(self) -> dict[str, int]:
        return {
            status: sum(1 for r in self.resultados if r.status == status)
            for status in (OK, SEM_DADOS, FALHA)
        }

    def to_dict(self) -> dict:
        return {
            "dataset": self.dataset,
            "variavel": self.variavel,
            "anos": self.anos,
            "n_blocos": self.n_blocos,
            "duracao_segundos": round(self.duracao_segundos, 2),
            "contagem": self.contagem(),
            "blocos": [
                {
                    "ano": r.ano,
                    "bloco": r.indice_bloco,
                    "status": r.status,
                    "linhas": r.linhas,
                    "status_http": r.status_http,
                    "motivo": r.motivo,
                }
                for r in self.resultados
            ],
        }


@dataclass
class ResultadoColeta:
    tabela: pd.DataFrame
    relatorio: RelatorioColeta
    caminho: Path | None = None


def executar_coleta(
    dataset: ConfiguracaoDataset,
    anos,
    variavel: str | None = None,
    *,
    municipios: Sequence[str] | None = None,
    diretorio_saida: str | Path = ".",
    formato: str = config.FORMATO_PADRAO,
    client: httpx.Client | None = None,
    max_workers: int | None = None,
    tamanho_bloco: int | None = None,
    estrito: bool = False,
    salvar: bool = True,
) -> ResultadoColeta:
    """
    Coleta um dataset para todos os municípios nos anos pedidos.

    Parâmetros
    ----------
    dataset        : configuração da pesquisa (PAM, PPM, PEVS)
    anos           : anos inteiros dentro do intervalo da pesquisa
    variavel       : nome da variável (só para pesquisas com `variaveis`)
    municipios     : universo de códigos IBGE; padrão data/br_cd_mun.csv
    diretorio_saida: onde gravar o snapshot e o relatório
    formato        : 'parquet' ou 'csv'
    client         : sessão HTTPX (criada e fechada aqui se omitida)
    max_workers    : requisições simultâneas (1 = sequencial)
    tamanho_bloco  : municípios por requisição
    estrito        : erros de rede/JSON abortam a coleta em vez de virarem falha
    salvar         : se False, não grava nada em disco

    Toda validação ocorre antes da primeira requisição.
    """
    inicio = time.perf_counter()

    nome_var, seletor = dataset.resolver_variavel(variavel)
    anos = validar_anos(anos, dataset.ano_minimo, dataset.ano_maximo)
    arquivo = nome_arquivo(dataset.nome, nome_var, anos, formato)

    max_workers = config.MAX_WORKERS if max_workers is None else max_workers
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ArgumentoInvalido(f"max_workers deve ser inteiro positivo: {max_workers!r}")

    universo = municipios_padrao() if municipios is None else validar_codigos(municipios)
    blocos = particionar_blocos(
        universo, config.TAMANHO_BLOCO if tamanho_bloco is None else tamanho_bloco
    )

    tarefas = [
        (ano, i, montar_url(dataset.tabela, seletor, ano, bloco, dataset.classificacao))
        for ano in anos
        for i, bloco in enumerate(blocos)
    ]

    log.info(
        f"Coleta {dataset.nome} ({nome_var}) — {len(anos)} ano(s) × {len(blocos)} blocos "
        f"= {len(tarefas)} requisições | {len(universo)} municípios"
    )

    if client is None:
        with httpx.Client(timeout=config.TIMEOUT_SEGUNDOS, follow_redirects=True) as sessao:
            resultados = _executar_tarefas(sessao, tarefas, max_workers, estrito)
    else:
        resultados = _executar_tarefas(client, tarefas, max_workers, estrito)

    # Redução determinística: nunca depende da ordem de conclusão
    resultados.sort(key=lambda r: (r.ano, r.indice_bloco))

    tabelas_anuais = []
    for ano in anos:
        do_ano = [r for r in resultados if r.ano == ano]
        df_ano = montar_ano([r.tabela for r in do_ano if r.ok], ano)
        falhas = sum(1 for r in do_ano if r.status == FALHA)
        if falhas:
            log.warning(f"Ano {ano}: {falhas}/{len(do_ano)} blocos falharam")
        log.info(f"  {ano}: {len(df_ano):,} linhas")
        tabelas_anuais.append(df_ano)

    final = montar_final(tabelas_anuais)

    relatorio = RelatorioColeta(
        dataset=dataset.nome,
        variavel=nome_var,
        anos=anos,
        n_blocos=len(blocos),
        resultados=resultados,
        duracao_segundos=time.perf_counter() - inicio,
    )

    caminho = None
    if salvar:
        caminho = salvar_snapshot(final, Path(diretorio_saida) / arquivo, formato)
        salvar_relatorio(relatorio.to_dict(), caminho)

    contagem = relatorio.contagem()
    log.info(
        f"✅ {dataset.nome} concluído em {relatorio.duracao_segundos / 60:.1f} min — "
        f"{len(final):,} linhas | ok: {contagem[OK]} | sem dados: {contagem[SEM_DADOS]} "
        f"| falhas: {contagem[FALHA]}"
    )
    return ResultadoColeta(tabela=final, relatorio=relatorio, caminho=caminho)


def _executar_tarefas(
    client: httpx.Client,
    tarefas: list[tuple[int, int, str]],
    max_workers: int,
    estrito: bool,
) -> list[ResultadoBloco]:
    total = len(tarefas)

    if max_workers == 1:
        resultados = []
        for n, (ano, i, url) in enumerate(tarefas, start=1):
            log.debug(f"[{n:5d}/{total}] ano {ano} | bloco {i}")
            resultados.append(buscar_bloco(client, url, ano, i, estrito=estrito))
        return resultados

    resultados = []
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futuros = [
            pool.submit(buscar_bloco, client, url, ano, i, estrito=estrito)
            for ano, i, url in tarefas
        ]
        try:
            for n, futuro in enumerate(as_completed(futuros), start=1):
                resultado = futuro.result()
                log.debug(
                    f"[{n:5d}/{total}] ano {resultado.ano} | bloco {resultado.indice_bloco} "
                    f"→ {resultado.status}"
                )
                resultados.append(resultado)
        except BaseException:
            # Modo estrito ou Ctrl-C: descarta o que ainda não começou
            for futuro in futuros:
                futuro.cancel()
            raise
    return resultados
