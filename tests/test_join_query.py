import pytest

from JoinDB.join_query import main

T_DDL = "CREATE TABLE T (id INTEGER PRIMARY KEY, v TEXT)"


def test_main_with_defaults(tmp_path, monkeypatch, make_db, read_rows, capsys):
    make_db(tmp_path / "a.db", {"T": (T_DDL, [(1, "a")])})
    make_db(tmp_path / "sub" / "b.sqlite", {"T": (T_DDL, [(2, "b")])})
    monkeypatch.chdir(tmp_path)

    summary = main([])

    assert summary.databases_found == 2
    assert read_rows(tmp_path / "result.db", "T") == [(1, "a"), (2, "b")]
    out = capsys.readouterr().out
    assert str(tmp_path / "result.db") in out
    assert "Copied 2 tables from 2 databases" in out


def test_main_options(tmp_path, make_db, read_rows, table_names):
    make_db(tmp_path / "in" / "a.data", {"T": (T_DDL, [(1, "a")]), "U": ("CREATE TABLE U (x)", [(1,)])})
    make_db(tmp_path / "in" / "b.db", {"T": (T_DDL, [(2, "b")])})
    target = tmp_path / "out.db"
    report = tmp_path / "report.csv"

    summary = main([str(tmp_path / "in"), "-d", str(target), "-e", ".DATA", "-t", "T",
                    "-w", "2", "--max-params", "2", "--report", str(report), "--report-format", "csv"])

    assert summary.databases_found == 1
    assert table_names(target) == {"T"}
    assert read_rows(target, "T") == [(1, "a")]
    assert report.exists()


def test_main_reads_yaml_config(tmp_path, make_db, read_rows):
    make_db(tmp_path / "in" / "a.sqlite3", {"T": (T_DDL, [(1, "a")])})
    target = tmp_path / "merged.db"
    config = tmp_path / "params.yaml"
    config.write_text(f"sources:\n  - {tmp_path / 'in'}\ndestination: {target}\nextensions:\n  - sqlite3\n")

    summary = main(["-c", str(config)])

    assert summary.databases_found == 1
    assert read_rows(target, "T") == [(1, "a")]


def test_command_line_overrides_yaml(tmp_path, make_db, read_rows):
    make_db(tmp_path / "in" / "a.db", {"T": (T_DDL, [(1, "a")])})
    config = tmp_path / "params.yaml"
    config.write_text(f"destination: {tmp_path / 'from_yaml.db'}\n")
    target = tmp_path / "from_cli.db"

    main([str(tmp_path / "in"), "-c", str(config), "-d", str(target)])

    assert read_rows(target, "T") == [(1, "a")]
    assert not (tmp_path / "from_yaml.db").exists()


def test_unknown_config_key_is_rejected(tmp_path):
    config = tmp_path / "params.yaml"
    config.write_text("destinaton: typo.db\n")

    with pytest.raises(ValueError, match="destinaton"):
        main(["-c", str(config)])
