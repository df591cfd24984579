"""
Configurações centrais da coleta SIDRA (PAM, PPM e PEVS).
Diretórios, endpoint da API e parâmetros de requisição/concorrência.
"""

from pathlib import Path

# ── Configurações de Diretórios ───────────────────────────────────────────────
BASE_DIR = Path(__file__).resolve().parent.parent.parent
DATA_DIR = BASE_DIR / "data"

# Tabela de municípios (universo de códigos IBGE) usada por todos os coletores
CAMINHO_MUNICIPIOS = DATA_DIR / "br_cd_mun.csv"
COLUNA_CODIGO = "cod_ibge"

# ── Configurações de API ──────────────────────────────────────────────────────
SIDRA_BASE_URL = "https://apisidra.ibge.gov.br"
URL_LOCALIDADES = "https://servicodados.ibge.gov.br/api/v1/localidades/municipios"

# Nível territorial município (n6) — fixo em todas as consultas
NIVEL_TERRITORIAL = "n6"

# Limite de municípios por requisição (a API recusa URLs longas demais)
TAMANHO_BLOCO = 100

TIMEOUT_SEGUNDOS = 60.0
MAX_TENTATIVAS = 3
DELAY_SEGUNDOS = 0.4

# Requisições simultâneas por coleta (1 = sequencial)
MAX_WORKERS = 4

# ── Período coberto ───────────────────────────────────────────────────────────
# Primeiro ano com série municipal harmonizada nas três pesquisas.
ANO_MINIMO = 1998
# Último ano publicado em nov/2024 (PAM, PPM e PEVS). Atualizar a cada release.
ANO_MAXIMO = 2023

# ── Persistência ──────────────────────────────────────────────────────────────
FORMATO_PADRAO = "parquet"
FORMATOS = ("parquet", "csv")
COLUNA_ANO = "year"
# Célula ausente no CSV; texto vazio do SIDRA continua sendo ""
MARCADOR_AUSENTE = r"\N"
