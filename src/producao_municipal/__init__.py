"""
producao_municipal — coleta PAM, PPM e PEVS do SIDRA/IBGE por município.

Uso:
    from producao_municipal import baixar_pam, baixar_ppm, baixar_pevs
    df = baixar_pam("production", [2020, 2021])
"""

from producao_municipal.collectors import DATASETS, baixar_pam, baixar_pevs, baixar_ppm
from producao_municipal.erros import (
    ArgumentoInvalido,
    FalhaTransporte,
    ProducaoMunicipalError,
    RespostaInvalida,
    UniversoInvalido,
)
from producao_municipal.pipeline import ConfiguracaoDataset, ResultadoColeta, executar_coleta

__version__ = "0.1.0"

__all__ = [
    "DATASETS",
    "ArgumentoInvalido",
    "ConfiguracaoDataset",
    "FalhaTransporte",
    "ProducaoMunicipalError",
    "RespostaInvalida",
    "ResultadoColeta",
    "UniversoInvalido",
    "baixar_pam",
    "baixar_pevs",
    "baixar_ppm",
    "executar_coleta",
]
