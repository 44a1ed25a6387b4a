import json

import pytest

from guionbd.almacen import JsonStore
from guionbd.cli import main


@pytest.fixture
def workspace(tmp_path, sample_text):
    export = tmp_path / "export.txt"
    export.write_text(sample_text, encoding="utf-8")
    return tmp_path, str(tmp_path / "datos"), str(export)


def test_cargar_global_twice_keeps_ids(workspace):
    _, datos, export = workspace
    assert main(["--datos", datos, "cargar", export, "--global"]) == 0
    first = {r.title: r.id for r in JsonStore(datos).load_all()}
    assert main(["--datos", datos, "cargar", export, "--global"]) == 0
    second = {r.title: r.id for r in JsonStore(datos).load_all()}
    assert len(first) == 2
    assert first == second


def test_cargar_programa_with_monitor(workspace):
    _, datos, export = workspace
    assert main(["--datos", datos, "cargar", export, "--programa", "Arte Bayamo", "--monitor"]) == 0
    recs = JsonStore(datos).load("guionbd_data_arte.json")
    assert [r.program for r in recs] == ["ARTE BAYAMO", "ARTE BAYAMO"]


def test_cargar_empty_file_fails(tmp_path):
    empty = tmp_path / "vacio.txt"
    empty.write_text("", encoding="utf-8")
    assert main(["--datos", str(tmp_path / "datos"), "cargar", str(empty), "--global"]) == 1


def test_cargar_missing_file_fails(tmp_path):
    assert main(["--datos", str(tmp_path), "cargar", str(tmp_path / "no.txt"), "--global"]) == 1


def test_buscar(workspace, capsys):
    _, datos, export = workspace
    main(["--datos", datos, "cargar", export, "--global"])
    capsys.readouterr()
    assert main(["--datos", datos, "buscar", "deporte"]) == 0
    out = capsys.readouterr().out
    assert "1 RESULTADOS" in out
    assert "Jóvenes y el deporte escolar" in out
    assert "Escritor: Luis Mora | Asesor: María Ruiz" in out

    main(["--datos", datos, "buscar", "astronomía"])
    assert "No se encontraron registros." in capsys.readouterr().out


def test_informe_to_csv(workspace):
    tmp_path, datos, export = workspace
    main(["--datos", datos, "cargar", export, "--global"])
    out = tmp_path / "informes" / "programas.csv"
    assert main(["--datos", datos, "informe", "programas", "--salida", str(out)]) == 0
    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Programa,Guiones"
    assert sorted(lines[1:]) == ["PARADA JOVEN,1", "RCM NOTICIAS,1"]


def test_informe_without_data(tmp_path, capsys):
    assert main(["--datos", str(tmp_path), "informe", "meses"]) == 0
    assert "No hay datos suficientes" in capsys.readouterr().out


def test_balance_and_programas(workspace, capsys):
    _, datos, export = workspace
    main(["--datos", datos, "cargar", export, "--global"])
    capsys.readouterr()
    assert main(["--datos", datos, "balance", "--fecha", "enero"]) == 0
    out = capsys.readouterr().out
    assert "(0/1 incompletos)" in out
    assert "5 de enero de 2024" in out

    assert main(["--datos", datos, "programas"]) == 0
    out = capsys.readouterr().out
    assert "guionbd_data_noticias.json" in out
    assert "BUENOS DÍAS BAYAMO" in out


def test_sincronizar_json(tmp_path, capsys):
    src = tmp_path / "remoto.json"
    src.write_text(json.dumps([
        {"id": "r1", "program": "Parada Joven", "title": "Deporte", "dateAdded": "2024-03-12T12:00:00"},
        {"id": "r2", "program": "Otra emisora", "title": "X", "dateAdded": "2024-03-13T12:00:00"},
    ]), encoding="utf-8")
    datos = str(tmp_path / "datos")
    assert main(["--datos", datos, "sincronizar", "--json", str(src)]) == 0
    out = capsys.readouterr().out
    assert "guionbd_data_joven.json" in out
    assert "1 registros ignorados" in out
    [rec] = JsonStore(datos).load("guionbd_data_joven.json")
    assert (rec.id, rec.program) == ("r1", "PARADA JOVEN")


def test_bad_config_is_reported(tmp_path, workspace):
    _, datos, export = workspace
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"separador": ">>>"}), encoding="utf-8")
    assert main(["--datos", datos, "--config", str(cfg), "cargar", export, "--global"]) == 1


def test_log_file(workspace):
    tmp_path, datos, export = workspace
    logs = tmp_path / "logs"
    main(["--datos", datos, "--log-dir", str(logs), "-v", "cargar", export, "--global"])
    text = (logs / "guionbd.log").read_text(encoding="utf-8")
    assert "[INFO] guionbd" in text


def test_archivar_restaurar_and_search_tabs(workspace, capsys):
    _, datos, export = workspace
    main(["--datos", datos, "cargar", export, "--global"])
    target = next(r for r in JsonStore(datos).load_all() if r.program == "PARADA JOVEN")

    assert main(["--datos", datos, "archivar", target.id]) == 0
    capsys.readouterr()
    main(["--datos", datos, "buscar", "deporte"])
    assert "No se encontraron registros." in capsys.readouterr().out
    main(["--datos", datos, "buscar", "deporte", "--estado", "inactive"])
    assert "1 RESULTADOS" in capsys.readouterr().out
    main(["--datos", datos, "buscar", "", "--estado", "todos"])
    assert "2 RESULTADOS" in capsys.readouterr().out

    assert main(["--datos", datos, "restaurar", target.id, "--programa", "Parada Joven"]) == 0
    [rec] = JsonStore(datos).load("guionbd_data_joven.json")
    assert rec.status == "active"


def test_eliminar(workspace):
    _, datos, export = workspace
    main(["--datos", datos, "cargar", export, "--global"])
    target = next(r for r in JsonStore(datos).load_all() if r.program == "RCM NOTICIAS")
    assert main(["--datos", datos, "eliminar", target.id]) == 0
    assert main(["--datos", datos, "eliminar", target.id]) == 1
    assert JsonStore(datos).keys() == ["guionbd_data_joven.json"]


def test_buscar_solo_validos(tmp_path, capsys):
    export = tmp_path / "export.txt"
    export.write_text("Programa: ARTE BAYAMO\nFecha: 2 de mayo de 2024\nEscritor: NO ESPECIFICADO\n"
                      "Asesor: Rosa Blanco\nTema: Pintura", encoding="utf-8")
    datos = str(tmp_path / "datos")
    main(["--datos", datos, "cargar", str(export), "--global"])
    capsys.readouterr()
    main(["--datos", datos, "buscar", "pintura"])
    assert "[incompleto]" in capsys.readouterr().out
    main(["--datos", datos, "buscar", "pintura", "--solo-validos"])
    assert "No se encontraron registros." in capsys.readouterr().out
