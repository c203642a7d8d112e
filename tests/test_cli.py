"""Tests for the settleme-export command line."""

from __future__ import annotations

import json

import pytest

from settleme.cli import build_parser, main


def test_export_writes_requested_output(data_file, tmp_path, capsys):
    output = tmp_path / "out" / "horas.csv"
    code = main([
        "export", "user", "usr_beta", "times",
        "--data-file", str(data_file),
        "--output", str(output),
    ])
    assert code == 0
    assert output.read_text(encoding="utf-8").startswith("Nombre,Entrada,Salida,Horas\n")
    assert str(output) in capsys.readouterr().out


def test_export_defaults_to_suggested_name_in_cwd(data_file, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    code = main(["export", "group", "grp_ventas", "receipts", "--format", "pdf"])
    assert code == 0
    assert (tmp_path / "recibos_grupo_Ventas.pdf").read_bytes().startswith(b"%PDF-1.4")


def test_export_timezone_option(data_file, tmp_path):
    output = tmp_path / "alpha.csv"
    main(["export", "user", "usr_alpha", "times", "--output", str(output), "--timezone", "Europe/Madrid"])
    assert '"07/03/24, 09:00"' in output.read_text(encoding="utf-8")


def test_malformed_request_exits_2(data_file, tmp_path, capsys):
    code = main(["export", "user", "usr_beta", "times", "--format", "xlsx", "--output", str(tmp_path / "x")])
    assert code == 2
    assert "Invalid format" in capsys.readouterr().err
    assert not (tmp_path / "x").exists()


def test_unknown_user_exits_1(data_file, tmp_path, capsys):
    output = tmp_path / "x.csv"
    code = main(["export", "user", "usr_nobody", "times", "--output", str(output)])
    assert code == 1
    assert "usr_nobody" in capsys.readouterr().err
    assert not output.exists()


def test_corrupt_data_file_exits_1(tmp_path, capsys):
    bad = tmp_path / "data.json"
    bad.write_text("[]", encoding="utf-8")
    code = main(["export", "user", "usr_beta", "times", "--data-file", str(bad)])
    assert code == 1
    assert capsys.readouterr().err.startswith("error:")


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_serve_defaults():
    args = build_parser().parse_args(["serve"])
    assert (args.host, args.port) == ("127.0.0.1", 3000)


def test_malformed_record_exits_1(data_file, sample_data, tmp_path, capsys):
    sample_data["users"][0]["receipts"][0]["date"] = "garbage"
    data_file.write_text(json.dumps(sample_data), encoding="utf-8")
    assert main(["export", "user", "usr_beta", "receipts", "--output", str(tmp_path / "b.csv")]) == 1
    assert "usr_beta" in capsys.readouterr().err
    assert main(["export", "user", "usr_alpha", "receipts", "--output", str(tmp_path / "a.csv")]) == 0


def test_unknown_timezone_exits_2(data_file, tmp_path, capsys, monkeypatch):
    output = tmp_path / "x.csv"
    code = main(["export", "user", "usr_beta", "times", "--output", str(output), "--timezone", "Mars/Base"])
    assert code == 2
    assert "Mars/Base" in capsys.readouterr().err
    assert not output.exists()

    monkeypatch.setenv("SETTLEME_TIMEZONE", "Mars/Base")
    assert main(["export", "user", "usr_beta", "times", "--output", str(output)]) == 2
