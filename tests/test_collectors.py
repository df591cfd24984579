"""
Testes das configurações PAM/PPM/PEVS e dos pontos de entrada baixar_*.
"""

import pandas as pd
import pytest

from conftest import SidraFalso
from producao_municipal import DATASETS, baixar_pam, baixar_pevs, baixar_ppm, config
from producao_municipal.collectors.pam import VARIAVEIS_PAM
from producao_municipal.erros import ArgumentoInvalido


class TestConfiguracoes:

    @pytest.mark.parametrize("nome, tabela, classificacao", [
        ("PAM", "5457", "c782"),
        ("PPM", "3939", "c79"),
        ("PEVS", "291", "c194"),
    ])
    def test_parametros_fixos(self, nome, tabela, classificacao):
        dataset = DATASETS[nome]
        assert dataset.nome == nome
        assert dataset.tabela == tabela
        assert dataset.classificacao == classificacao

    def test_variaveis_pam_fechadas(self):
        assert VARIAVEIS_PAM == {
            "planted_area": "8331",
            "harvested_area": "216",
            "production": "214",
            "average_yield": "112",
        }

    @pytest.mark.parametrize("variavel", list(VARIAVEIS_PAM))
    def test_pam_resolve_cada_variavel(self, variavel):
        assert DATASETS["PAM"].resolver_variavel(variavel) == (variavel, VARIAVEIS_PAM[variavel])

    def test_variavel_implicita(self):
        assert DATASETS["PPM"].resolver_variavel() == ("livestock", "all")
        assert DATASETS["PEVS"].resolver_variavel() == ("production", "142")

    def test_intervalo_de_anos(self):
        for dataset in DATASETS.values():
            assert dataset.ano_minimo == config.ANO_MINIMO == 1998
            assert dataset.ano_maximo >= 2023


class TestPontosDeEntrada:

    def test_baixar_pam(self, tmp_path, universo):
        sidra = SidraFalso()
        df = baixar_pam("production", [2020], municipios=universo,
                        diretorio_saida=tmp_path, client=sidra.client())

        assert isinstance(df, pd.DataFrame)
        assert len(df) == 250
        assert (tmp_path / "PAM_data_production_2020.parquet").exists()
        assert {r["variavel"] for r in sidra.requisicoes} == {"214"}

    def test_baixar_pam_variavel_invalida(self, tmp_path):
        with pytest.raises(ArgumentoInvalido):
            baixar_pam("yield", [2020], municipios=["1"], diretorio_saida=tmp_path)

    def test_baixar_ppm(self, tmp_path, universo):
        sidra = SidraFalso()
        df = baixar_ppm([2019, 2020], municipios=universo, diretorio_saida=tmp_path,
                        formato="csv", client=sidra.client())

        assert df["year"].unique().tolist() == [2019, 2020]
        assert (tmp_path / "PPM_data_livestock_2019_to_2020.csv").exists()
        assert {(r["tabela"], r["variavel"], r["classificacao"]) for r in sidra.requisicoes} == \
            {("3939", "all", "c79")}

    def test_baixar_pevs(self, tmp_path):
        sidra = SidraFalso()
        baixar_pevs([1998, 2002], municipios=["1100015"], diretorio_saida=tmp_path,
                    client=sidra.client(), max_workers=1)

        assert (tmp_path / "PEVS_data_production_1998_to_2002.parquet").exists()
        assert [r["ano"] for r in sidra.requisicoes] == [1998, 2002]
        assert {(r["tabela"], r["variavel"], r["classificacao"]) for r in sidra.requisicoes} == \
            {("291", "142", "c194")}

    def test_universo_padrao(self, monkeypatch, tmp_path, tabela_municipios):
        from producao_municipal import municipios

        monkeypatch.setattr(config, "CAMINHO_MUNICIPIOS", tabela_municipios)
        municipios.municipios_padrao.cache_clear()
        try:
            sidra = SidraFalso()
            df = baixar_pevs([2020], diretorio_saida=tmp_path, client=sidra.client())
            assert len(df) == 250
            assert len(sidra.requisicoes) == 3
        finally:
            municipios.municipios_padrao.cache_clear()
