"""Unit tests for storage filename cleaning."""

import pytest

from planejar.shared.utils.filenames import clean_file_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Certidão de Casamento.pdf", "Certidao_de_Casamento.pdf"),
        ("contrato social (v2).pdf", "contrato_social_v2.pdf"),
        ("IPTU  2024\tçãé.pdf", "IPTU_2024_cae.pdf"),
        ("already-clean_name.PDF", "already-clean_name.PDF"),
        ("é", "e"),
        ("", ""),
    ],
)
def test_clean_file_name(raw: str, expected: str) -> None:
    assert clean_file_name(raw) == expected


def test_clean_file_name_output_alphabet() -> None:
    """Only ASCII letters, digits, '.', '_' and '-' survive."""
    cleaned = clean_file_name("Relatório #1 / Família & Cia: final!.pdf")
    assert cleaned
    assert all(ch.isascii() and (ch.isalnum() or ch in "._-") for ch in cleaned)
