from atlastext.__main__ import main


def test_reports_font(font_root, capsys):
    code = main(["test", "--path", str(font_root), "--text", "AB\nA", "--technique"])

    out = capsys.readouterr().out
    assert code == 0
    assert "glyphs = 3" in out
    assert "font height = 64" in out
    assert "normalised line height = 1.25" in out
    assert "technique = StandardText(font='test')" in out
    assert "quads = 3, indices = 18" in out


def test_missing_font_exits_nonzero(tmp_path, capsys):
    assert main(["nothing", "--path", str(tmp_path)]) == 1
    assert "glyphs" not in capsys.readouterr().out


def test_broken_descriptor_exits_nonzero(font_root):
    (font_root / "fonts" / "test.txt").write_text("info face=x\n", encoding="utf-8")
    assert main(["test", "--path", str(font_root)]) == 1
