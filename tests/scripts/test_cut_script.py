from pathlib import Path

from cututils.scripts import cut

from pytest import raises


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


def test_fields_with_delimiters(tmp_path: Path, capsys):
    input_file = _write(tmp_path / "in.csv", "a,b,c\nd,e,f\n")
    assert cut.main(["-f", "3,1", "-d", ",", "--output-delimiter", ":", str(input_file)]) == 0
    assert capsys.readouterr().out == "c:a\nf:d\n"


def test_chars_to_output_file(tmp_path: Path):
    input_file = _write(tmp_path / "in.txt", "hello\nworld\n")
    output_file = tmp_path / "out" / "result.txt"
    assert cut.main(["-c", "1,1,5", "-o", str(output_file), str(input_file)]) == 0
    assert output_file.read_text(encoding="utf-8") == "hho\nwwd\n"


def test_bad_list_exits_with_error(tmp_path: Path, capsys):
    input_file = _write(tmp_path / "in.txt", "hello\n")
    assert cut.main(["-b", "5-2", str(input_file)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert (
        "first number in range (5) must be lower than the second number (2)"
        in captured.err
    )


def test_missing_selection(capsys):
    assert cut.main([]) == 1
    assert "Exactly one of the parameters" in capsys.readouterr().err


def test_modes_are_exclusive():
    with raises(SystemExit):
        cut.main(["-b", "1", "-c", "2"])


def test_missing_input_is_reported(tmp_path: Path, capsys):
    good = _write(tmp_path / "good.txt", "abc\n")
    missing = tmp_path / "missing.txt"
    assert cut.main(["-c", "2", str(missing), str(good)]) == 0
    captured = capsys.readouterr()
    assert captured.out == "b\n"
    assert f"{missing}: " in captured.err


def test_param_file_with_command_line_override(tmp_path: Path, capsys):
    input_file = _write(tmp_path / "in.tsv", "a\tb\tc\n")
    param_file = _write(
        tmp_path / "params.yaml",
        f"fields: 2\ninput_files:\n- {input_file}\nlogging:\n    root_level: ERROR\n",
    )
    assert cut.main(["--param-file", str(param_file)]) == 0
    assert capsys.readouterr().out == "b\n"

    # a selection on the command line replaces the one in the parameter file
    assert cut.main(["--param-file", str(param_file), "-c", "1-3"]) == 0
    assert capsys.readouterr().out == "a\tb\n"


def test_bad_param_file(tmp_path: Path, capsys):
    param_file = _write(tmp_path / "params.yaml", "- not\n- a mapping\n")
    assert cut.main(["--param-file", str(param_file)]) == 1
    assert "Failure while loading parameter file" in capsys.readouterr().err


def test_empty_command_line_selection_replaces_param_file(tmp_path: Path, capsys):
    input_file = _write(tmp_path / "in.txt", "abc\n")
    param_file = _write(tmp_path / "params.yaml", "chars: 1\n")
    assert cut.main(["--param-file", str(param_file), "-b", "", str(input_file)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert 'illegal list value: ""' in captured.err
    assert "At most one of" not in captured.err
