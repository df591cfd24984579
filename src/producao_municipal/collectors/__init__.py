"""Coletores PAM, PPM e PEVS — configurações do pipeline genérico."""

from producao_municipal.collectors.pam import PAM, baixar_pam
from producao_municipal.collectors.pevs import PEVS, baixar_pevs
from producao_municipal.collectors.ppm import PPM, baixar_ppm

DATASETS = {
    "PAM": PAM,
    "PPM": PPM,
    "PEVS": PEVS,
}

__all__ = ["DATASETS", "PAM", "PPM", "PEVS", "baixar_pam", "baixar_ppm", "baixar_pevs"]
