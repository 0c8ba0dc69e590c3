"""Shared pytest fixtures for koszyk tests."""

from __future__ import annotations

import pytest

BIEDRONKA_RECEIPT = """\
Jeronimo Martins Polska S.A.
BIEDRONKA "CODZIENNIE NISKIE CENY" 3125
ul. Przykładowa 1, 00-001 Warszawa
NIP 779-101-13-27
25/12/2023 14:05:30
PARAGON FISKALNY
MLEKO 1L
CHLEB RAZOWY 500g
PTU Ilość
Cena
Wartość
A
1 x
4,50
4,50
C
2 x
3,20
6,40
SUMA PTU A
1,03
SUMA PLN
SUMA
10,90
KARTA PŁATNICZA
10,90
"""


@pytest.fixture
def biedronka_receipt_text() -> str:
    return BIEDRONKA_RECEIPT


@pytest.fixture
def project_root(tmp_path, monkeypatch):
    """Point the path singleton at a temporary root for the test."""
    from koszyk.runtime import paths

    monkeypatch.setattr(paths, "_paths", None)
    monkeypatch.setenv("KOSZYK_HOME", str(tmp_path))
    return paths.get_paths()
