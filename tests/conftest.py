import logging
from datetime import datetime

import pytest

from guionbd.registros import Record

NOW = datetime(2026, 3, 1, 9, 30)

SAMPLE = (
    "Programa: RCM NOTICIAS\n"
    "Fecha: 5 de enero de 2024\n"
    "Escritor: Ana Pérez\n"
    "Asesor: es Juan Gómez, jefe de redacción\n"
    "Tema: Cambio climático en la región\n"
    ">>>Programa: PARADA JOVEN\n"
    "Fecha: 12/3/2024\n"
    "Escribe: Luis Mora\n"
    "Asesora: María Ruiz\n"
    "Tema: Jóvenes y\n"
    "el deporte escolar\n"
)


@pytest.fixture(autouse=True)
def reset_guionbd_logger():
    yield
    logger = logging.getLogger("guionbd")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_text():
    return SAMPLE


def make_record(title="Tema", writer="Ana Pérez", day=(2024, 1, 5), **kw):
    defaults = dict(
        id=kw.pop("id", f"id-{title}"),
        program=kw.pop("program", "RCM NOTICIAS"),
        date_added=datetime(*day, 12),
        writer=writer,
        advisor=kw.pop("advisor", "Juan Gómez"),
        title=title,
        tags=kw.pop("tags", ["General"]),
    )
    defaults.update(kw)
    return Record(**defaults)


@pytest.fixture
def record_factory():
    return make_record
