"""
Configuração de logging compartilhada pelos coletores.

Os módulos só criam `log = logging.getLogger(__name__)`; o formato e o
nível são definidos uma vez pelo ponto de entrada (CLI ou script).
"""

import logging
import os

FORMATO = "%(asctime)s [%(levelname)s] %(message)s"
FORMATO_DATA = "%H:%M:%S"


def configurar_logging(nivel: str | int | None = None) -> None:
    """
    Configura o logger raiz com saída no console.

    Nível padrão: variável de ambiente LOG_LEVEL ou INFO.
    """
    if nivel is None:
        nivel = os.environ.get("LOG_LEVEL", "INFO")
    if isinstance(nivel, str):
        nivel = getattr(logging, nivel.upper(), logging.INFO)

    logging.basicConfig(
        level=nivel,
        format=FORMATO,
        datefmt=FORMATO_DATA,
        force=True,
    )
    # httpx loga cada requisição em INFO — ruído com milhares de blocos
    logging.getLogger("httpx").setLevel(logging.WARNING)
