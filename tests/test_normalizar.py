import pytest

from guionbd.normalizar import compact, initials, is_unspecified, normalize_program_name, normalize_text


@pytest.mark.parametrize("raw, expected", [
    ("Cambio climático, en la región.", "CAMBIO CLIMATICO EN LA REGION"),
    ("  Buenos   días\tBayamo ", "BUENOS DIAS BAYAMO"),
    ("B.D.B", "B D B"),
    ("Ñandú_rápido--(2024)", "NANDU RAPIDO 2024"),
    ("", ""),
    (None, ""),
])
def test_normalize_text(raw, expected):
    assert normalize_text(raw) == expected


@pytest.mark.parametrize("raw", [
    "Cómplices «en vivo» ¿sí?",
    "ESTACIÓN 95.3",
    "  ##  ",
    "straße — über",
    "Año nuevo ya",
])
def test_normalize_text_is_idempotent(raw):
    once = normalize_text(raw)
    assert normalize_text(once) == once


def test_normalize_program_name_drops_parenthesized_suffix():
    assert normalize_program_name("Hablando con Juana (A)") == "HABLANDO CON JUANA"
    assert normalize_program_name("RCM Noticias (edición tarde) (B)") == "RCM NOTICIAS"


def test_initials_and_compact():
    assert initials("Buenos Días Bayamo") == "BDB"
    assert compact("B.D.B") == "BDB"


@pytest.mark.parametrize("value, expected", [
    ("NO ESPECIFICADO", True),
    ("no especificado", True),
    ("No pecificado", True),
    ("NO ESPE CIFICADO", True),
    ("", True),
    ("   ", True),
    ("Ana Pérez", False),
])
def test_is_unspecified(value, expected):
    assert is_unspecified(value) is expected
