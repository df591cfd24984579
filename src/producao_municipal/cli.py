"""
Linha de comando da coleta SIDRA.

Uso:
    producao-municipal pam planted_area 1998-2023
    producao-municipal ppm 2020 2021 --formato csv --saida data/raw
    producao-municipal pevs 1998 2002 2010-2012 --workers 1
    producao-municipal municipios
"""

import functools
import logging

import click

from producao_municipal import config
from producao_municipal.collectors import PAM, PEVS, PPM
from producao_municipal.collectors.pam import VARIAVEIS_PAM
from producao_municipal.erros import ArgumentoInvalido, FalhaTransporte, UniversoInvalido
from producao_municipal.logs import configurar_logging
from producao_municipal.municipios import carregar_municipios, gerar_tabela_municipios
from producao_municipal.pipeline import executar_coleta

log = logging.getLogger(__name__)


class AnoParam(click.ParamType):
    """Ano único (2020) ou intervalo inclusivo (1998-2023)."""

    name = "ano"

    def convert(self, value, param, ctx):
        if isinstance(value, list):
            return value
        texto = str(value).strip()
        try:
            if "-" in texto:
                inicio, fim = (int(p) for p in texto.split("-", 1))
                if inicio > fim:
                    self.fail(f"intervalo decrescente: {texto}", param, ctx)
                return list(range(inicio, fim + 1))
            return [int(texto)]
        except ValueError:
            self.fail(f"{texto!r} não é ano nem intervalo AAAA-AAAA", param, ctx)


def _opcoes_coleta(func):
    @click.argument("anos", nargs=-1, required=True, type=AnoParam())
    @click.option("--saida", "-o", default=".", show_default=True,
                  type=click.Path(file_okay=False), help="Diretório do snapshot.")
    @click.option("--formato", "-f", default=config.FORMATO_PADRAO, show_default=True,
                  type=click.Choice(config.FORMATOS))
    @click.option("--municipios", "-m", default=None,
                  type=click.Path(exists=True, dir_okay=False),
                  help="Tabela de municípios (padrão: data/br_cd_mun.csv).")
    @click.option("--workers", "-w", default=config.MAX_WORKERS, show_default=True,
                  type=click.IntRange(min=1), help="Requisições simultâneas.")
    @click.option("--estrito", is_flag=True,
                  help="Aborta na primeira falha de rede ou JSON malformado.")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def _coletar(dataset, variavel, anos, saida, formato, municipios, workers, estrito):
    anos = [a for grupo in anos for a in grupo]
    try:
        universo = carregar_municipios(municipios) if municipios else None
        resultado = executar_coleta(
            dataset,
            anos,
            variavel,
            municipios=universo,
            diretorio_saida=saida,
            formato=formato,
            max_workers=workers,
            estrito=estrito,
        )
    except ArgumentoInvalido as e:
        raise click.UsageError(str(e)) from e
    except (UniversoInvalido, FalhaTransporte) as e:
        raise click.ClickException(str(e)) from e

    relatorio = resultado.relatorio
    click.echo(f"{resultado.caminho} — {len(resultado.tabela):,} linhas")
    if not relatorio.completo:
        click.echo(
            f"⚠️  {len(relatorio.falhas)} bloco(s) falharam nos anos "
            f"{relatorio.anos_com_falha}",
            err=True,
        )


@click.group()
@click.option("--log-level", default=None,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Nível de log (padrão: LOG_LEVEL ou INFO).")
@click.version_option(package_name="producao-municipal")
def main(log_level):
    """Coleta PAM, PPM e PEVS do SIDRA/IBGE para todos os municípios."""
    configurar_logging(log_level)


@main.command()
@click.argument("variavel", type=click.Choice(list(VARIAVEIS_PAM)))
@_opcoes_coleta
def pam(variavel, anos, saida, formato, municipios, workers, estrito):
    """Produção Agrícola Municipal (tabela 5457)."""
    _coletar(PAM, variavel, anos, saida, formato, municipios, workers, estrito)


@main.command()
@_opcoes_coleta
def ppm(anos, saida, formato, municipios, workers, estrito):
    """Pecuária Municipal — efetivo dos rebanhos (tabela 3939)."""
    _coletar(PPM, None, anos, saida, formato, municipios, workers, estrito)


@main.command()
@_opcoes_coleta
def pevs(anos, saida, formato, municipios, workers, estrito):
    """Extração Vegetal e Silvicultura (tabela 291)."""
    _coletar(PEVS, None, anos, saida, formato, municipios, workers, estrito)


@main.command()
@click.option("--saida", "-o", default=str(config.CAMINHO_MUNICIPIOS), show_default=True,
              type=click.Path(dir_okay=False))
def municipios(saida):
    """Gera a tabela de municípios a partir da API de localidades do IBGE."""
    df = gerar_tabela_municipios(saida)
    click.echo(f"{len(df)} municípios → {saida}")


if __name__ == "__main__":
    main()
