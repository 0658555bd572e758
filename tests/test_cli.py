import json

import pytest

from formengine.cli import build_cli_parser, discover_groups, main


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_cli_parser().parse_args([])


def test_transform_command(tmp_path, capsys):
    source = write(tmp_path / "form.jsx", "<Text>{name}</Text>")
    main(["transform", str(source)])
    data = json.loads(capsys.readouterr().out)
    assert data["shape"] == "markup"
    assert data["references"] == ["Text", "name"]
    assert "error" not in data


def test_transform_command_reports_compile_error(tmp_path, capsys):
    source = write(tmp_path / "broken.jsx", "const a = ;\n<Text />")
    main(["transform", str(source)])
    data = json.loads(capsys.readouterr().out)
    assert data["error"]
    assert "references" not in data


def test_render_command_prints_html(tmp_path, capsys):
    source = write(tmp_path / "form.jsx", "<Text>Hi</Text>")
    main(["render", str(source)])
    assert ">Hi</span>" in capsys.readouterr().out


def test_render_command_json(tmp_path, capsys):
    source = write(tmp_path / "form.jsx", 'const InitialData = { a: 1 };\nconst FormComponent = () => <Text>f</Text>;')
    main(["render", str(source), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["shape"] == "whole_form"
    assert data["initial_data"] == {"a": 1}
    assert data["error"] is None
    assert data["tree"][0]["tag"] == "span"


def test_render_command_exits_on_error(tmp_path, capsys):
    source = write(tmp_path / "form.jsx", "<Text>{missing.value}</Text>")
    with pytest.raises(SystemExit) as excinfo:
        main(["render", str(source)])
    assert excinfo.value.code == 1
    assert "error-message" in capsys.readouterr().out


def test_missing_file_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["render", str(tmp_path / "absent.jsx")])
    assert "Cannot read" in str(excinfo.value.code)


def test_discover_groups_reads_folders_and_files(tmp_path):
    write(tmp_path / "Widgets" / "index.jsx", "const Z = () => <span>z</span>;")
    write(tmp_path / "Forms.jsx", "const Y = () => Z();")
    write(tmp_path / "notes.txt", "ignored")
    (tmp_path / "Empty").mkdir()
    sources = discover_groups(tmp_path)
    assert [source.name for source in sources] == ["Forms", "Widgets"]


def test_groups_command(tmp_path, capsys):
    write(tmp_path / "Widgets" / "index.jsx", "const Z = () => <span>z</span>;")
    write(tmp_path / "Forms.jsx", "const Y = () => Z();")
    main(["groups", str(tmp_path)])
    data = json.loads(capsys.readouterr().out)
    assert data["groups"] == {"Forms": ["Y"], "Widgets": ["Z"]}
    assert data["registry"] == ["Y", "Z"]
    assert data["errors"] == []


def test_groups_command_exits_when_a_group_fails(tmp_path, capsys):
    write(tmp_path / "Broken.jsx", "const X = ;")
    with pytest.raises(SystemExit) as excinfo:
        main(["groups", str(tmp_path), "--passes", "1", "--no-cross-references"])
    assert excinfo.value.code == 1
    data = json.loads(capsys.readouterr().out)
    assert data["errors"][0]["group"] == "Broken"


def test_groups_command_requires_directory(tmp_path):
    with pytest.raises(SystemExit):
        main(["groups", str(tmp_path / "missing")])


def test_serve_dry_run(capsys):
    main(["serve", "--dry-run", "--port", "9001"])
    data = json.loads(capsys.readouterr().out)
    assert data == {"status": "ready", "host": "127.0.0.1", "port": 9001}
