from invoice_rows.cli import main
from invoice_rows.config import load_style
from invoice_rows.layout_writer import read_layout


def test_sample_invoice(tmp_path, capsys):
    out = tmp_path / "sample.pdf"
    layout = tmp_path / "rows.jsonl"

    code = main(["--out", str(out), "--num-items", "4", "--seed", "11", "--layout-out", str(layout)])

    assert code == 0
    assert out.read_bytes().startswith(b"%PDF")
    assert len(read_layout(layout)) == 4
    assert "Rendering complete!" in capsys.readouterr().out


def test_input_file_with_preset(tmp_path, items_yaml, capsys):
    out = tmp_path / "invoice.pdf"

    code = main(["--input", str(items_yaml), "--out", str(out), "--preset", "compact"])

    assert code == 0
    assert out.exists()
    assert "Rows: 2" in capsys.readouterr().out


def test_invalid_line_fails(tmp_path, capsys):
    path = tmp_path / "bad.yaml"
    path.write_text(
        "- name: A\n  unit_cost: '12,50'\n  quantity: '1'\n  paid_incl_vat: '1'\n",
        encoding="utf-8",
    )

    code = main(["--input", str(path), "--out", str(tmp_path / "x.pdf")])

    assert code == 1
    assert "unit_cost" in capsys.readouterr().err


def test_invalid_line_skipped(tmp_path, capsys):
    path = tmp_path / "mixed.yaml"
    path.write_text(
        "- name: A\n  unit_cost: '12,50'\n  quantity: '1'\n  paid_incl_vat: '1'\n"
        "- name: B\n  unit_cost: '2'\n  quantity: '1'\n  paid_incl_vat: '2'\n",
        encoding="utf-8",
    )

    code = main(["--input", str(path), "--out", str(tmp_path / "x.pdf"), "--skip-invalid"])

    output = capsys.readouterr().out
    assert code == 0
    assert "Skipped line 0" in output
    assert "Rows: 1" in output


def test_line_missing_field_skipped(tmp_path, capsys):
    path = tmp_path / "missing.yaml"
    path.write_text(
        "- name: A\n  unit_cost: '2'\n  quantity: '1'\n"
        "- name: B\n  unit_cost: '2'\n  quantity: '1'\n  paid_incl_vat: '2'\n",
        encoding="utf-8",
    )

    code = main(["--input", str(path), "--out", str(tmp_path / "x.pdf"), "--skip-invalid"])

    output = capsys.readouterr().out
    assert code == 0
    assert "Skipped line 0: line 0, field 'paid_incl_vat'" in output
    assert "Rows: 1" in output


def test_line_missing_field_fails_without_skip(tmp_path, capsys):
    path = tmp_path / "missing.yaml"
    path.write_text("- name: A\n  unit_cost: '2'\n  quantity: '1'\n", encoding="utf-8")

    code = main(["--input", str(path), "--out", str(tmp_path / "x.pdf")])

    assert code == 1
    assert "paid_incl_vat" in capsys.readouterr().err


def test_write_style(tmp_path):
    path = tmp_path / "style.yaml"
    assert main(["--preset", "letter", "--write-style", str(path)]) == 0
    assert load_style(path).page_size == "LETTER"


def test_style_with_unknown_money_key_fails(tmp_path, capsys):
    path = tmp_path / "style.yaml"
    path.write_text("money:\n  currency: EUR\n", encoding="utf-8")

    code = main(["--style", str(path), "--out", str(tmp_path / "x.pdf")])

    assert code == 1
    assert "Error:" in capsys.readouterr().err
