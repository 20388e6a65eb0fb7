from parenshell.cli import main, repl, run_file


def test_run_file_returns_last_value():
    assert run_file("var x 3\nval $x\n") == "3"


def test_run_file_syntax_error(capsys):
    assert run_file("val 'open\n") is None
    assert capsys.readouterr().out == "syntax error\n"


def test_run_file_stops_at_error(capsys):
    assert run_file("fail\nprintln never\n") is None
    out = capsys.readouterr().out
    assert out == "error: fail\n"
    assert "never" not in out


def test_repl_prints_values(capsys):
    repl(["val 3"])
    assert capsys.readouterr().out == "$ '3'\n$ "


def test_repl_keeps_state_between_commands(capsys):
    repl(["var x hello\n", "val $x\n"])
    out = capsys.readouterr().out
    assert out.endswith("'hello'\n$ ")
    assert out.count("$ ") == 3


def test_repl_reports_errors_and_continues(capsys):
    repl(["fail", "val 1"])
    out = capsys.readouterr().out
    assert "error: fail\n" in out
    assert out.endswith("'1'\n$ ")


def test_repl_recovers_from_syntax_error(capsys):
    repl(["val 'x"])
    out = capsys.readouterr().out
    assert "error: syntax error\n" in out
    assert out.endswith("$ ")


def test_main_runs_file(tmp_path, capsys):
    script = tmp_path / "script"
    script.write_text("println hi\n", encoding="utf-8")
    main([str(script)])
    assert capsys.readouterr().out == "'hi'\n\n"


def test_main_missing_file(tmp_path, capsys):
    main([str(tmp_path / "absent")])
    assert capsys.readouterr().out == "Failed to read path\n"