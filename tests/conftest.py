"""
Fixtures compartilhadas: universo sintético de municípios e um SIDRA falso
servido por httpx.MockTransport, sem acesso à rede.
"""

import json
import threading

import httpx
import pytest

from producao_municipal import config


def codigos_sinteticos(n: int) -> tuple[str, ...]:
    """Códigos IBGE fictícios de 7 dígitos, em ordem."""
    return tuple(str(1100000 + i) for i in range(n))


def payload_sidra(codigos, ano, categorias=("Soja (em grão)",), variavel="Área plantada"):
    """Resposta no formato real do /values: linha 0 com rótulos, mesmas chaves."""
    cabecalho = {
        "NC": "Nível Territorial (Código)",
        "NN": "Nível Territorial",
        "MC": "Unidade de Medida (Código)",
        "MN": "Unidade de Medida",
        "V": "Valor",
        "D1C": "Município (Código)",
        "D1N": "Município",
        "D2C": "Variável (Código)",
        "D2N": "Variável",
        "D3C": "Ano (Código)",
        "D3N": "Ano",
        "D4C": "Produto (Código)",
        "D4N": "Produto",
    }
    linhas = [cabecalho]
    for cod in codigos:
        for j, cat in enumerate(categorias):
            linhas.append({
                "NC": "6",
                "NN": "Município",
                "MC": "1006",
                "MN": "Hectares",
                "V": str(int(cod) % 1000 + j),
                "D1C": cod,
                "D1N": f"Município {cod}",
                "D2C": "8331",
                "D2N": variavel,
                "D3C": str(ano),
                "D3N": str(ano),
                "D4C": str(40000 + j),
                "D4N": cat,
            })
    return linhas


def decompor_url(url: httpx.URL) -> dict:
    """Extrai tabela, municípios, variável, ano e classificação da URL /values."""
    partes = url.path.strip("/").split("/")
    # values / t / <tab> / n6 / <ids> / v / <var> / p / <ano> / <cdim> / all
    return {
        "tabela": partes[2],
        "municipios": partes[4].split(","),
        "variavel": partes[6],
        "ano": int(partes[8]),
        "classificacao": partes[9],
    }


class SidraFalso:
    """
    Servidor SIDRA em memória.

    `respostas` mapeia ano -> status HTTP, payload ou callable(municipios, ano).
    Anos ausentes respondem com `payload_sidra` dos municípios do bloco.
    """

    def __init__(self, respostas=None):
        self.respostas = respostas or {}
        self.requisicoes: list[dict] = []
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        consulta = decompor_url(request.url)
        with self._lock:
            self.requisicoes.append(consulta)

        resposta = self.respostas.get(consulta["ano"])
        if resposta is None:
            return httpx.Response(200, json=payload_sidra(consulta["municipios"], consulta["ano"]))
        if callable(resposta):
            resposta = resposta(consulta["municipios"], consulta["ano"])
        if isinstance(resposta, httpx.Response):
            return resposta
        if isinstance(resposta, int):
            return httpx.Response(resposta, text="erro")
        return httpx.Response(200, content=json.dumps(resposta).encode())

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def sem_espera(monkeypatch):
    """Retentativas sem sleep nos testes."""
    monkeypatch.setattr(config, "DELAY_SEGUNDOS", 0.0)


@pytest.fixture
def universo():
    """250 municípios → 3 blocos de 100, 100 e 50."""
    return codigos_sinteticos(250)


@pytest.fixture
def sidra():
    return SidraFalso()


@pytest.fixture
def tabela_municipios(tmp_path, universo):
    caminho = tmp_path / "br_cd_mun.csv"
    linhas = ["cod_ibge,nome"] + [f"{c},Município {c}" for c in universo]
    caminho.write_text("\n".join(linhas) + "\n", encoding="utf-8")
    return caminho
