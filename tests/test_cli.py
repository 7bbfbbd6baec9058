from click.testing import CliRunner
from PIL import Image

from main import cli

runner = CliRunner()


def _write_image(path, size, color=(10, 120, 200, 255)):
    Image.new("RGBA", size, color).save(path, format="PNG")


def test_cli_help():
    res = runner.invoke(cli, ["--help"])
    assert res.exit_code == 0
    for command in ("logo", "headshot", "remove-bg", "fit"):
        assert command in res.output


def test_fit_command():
    res = runner.invoke(cli, ["fit", "50", "80", "--ratio", "73:100", "--min-width", "292", "--min-height", "400"])
    assert res.exit_code == 0
    assert "canvas 292x400 offset 121,160" in res.output


def test_fit_command_rejects_bad_ratio():
    res = runner.invoke(cli, ["fit", "10", "10", "--ratio", "0:1"])
    assert res.exit_code != 0
    assert "positive" in res.output


def test_logo_command_writes_variants(tmp_path):
    src = tmp_path / "in"
    src.mkdir()
    _write_image(src / "brand.png", (800, 200))
    out = tmp_path / "out"

    res = runner.invoke(cli, ["logo", "--input-path", str(src), "--output-dir", str(out), "--transparent"])
    assert res.exit_code == 0, res.output

    with Image.open(out / "brand_rectangular.png") as img:
        assert img.size == (800, 320)
        assert img.getpixel((0, 0))[3] == 0
    with Image.open(out / "brand_square.png") as img:
        assert img.size == (800, 800)
    with Image.open(out / "brand_favicon.png") as img:
        assert img.size == (64, 64)


def test_logo_command_no_square(tmp_path):
    src = tmp_path / "logo.png"
    _write_image(src, (10, 10))
    out = tmp_path / "out"

    res = runner.invoke(cli, ["logo", "--input-path", str(src), "--output-dir", str(out), "--no-square"])
    assert res.exit_code == 0, res.output
    assert sorted(p.name for p in out.iterdir()) == ["logo_rectangular.png"]


def test_headshot_command_with_crop(tmp_path):
    src = tmp_path / "face.png"
    _write_image(src, (500, 500))
    out = tmp_path / "out"

    res = runner.invoke(
        cli,
        ["headshot", "--input-path", str(src), "--output-dir", str(out), "--crop", "0,0,50,80"],
    )
    assert res.exit_code == 0, res.output
    with Image.open(out / "face_headshot.png") as img:
        assert img.size == (292, 400)
        assert img.getpixel((0, 0)) == (255, 255, 255, 255)


def test_remove_bg_command(tmp_path):
    src = tmp_path / "white.png"
    _write_image(src, (4, 3), (255, 255, 255, 255))
    out = tmp_path / "out"

    res = runner.invoke(cli, ["remove-bg", "--input-path", str(src), "--output-dir", str(out)])
    assert res.exit_code == 0, res.output
    with Image.open(out / "white_nobg.png") as img:
        assert img.size == (4, 3)
        assert img.getpixel((1, 1))[3] == 0


def test_batch_continues_past_bad_file(tmp_path):
    src = tmp_path / "in"
    src.mkdir()
    _write_image(src / "good.png", (30, 30))
    (src / "broken.png").write_bytes(b"not a png")
    out = tmp_path / "out"

    res = runner.invoke(cli, ["headshot", "--input-path", str(src), "--output-dir", str(out)])
    assert res.exit_code == 1
    assert "broken.png" in res.output
    assert (out / "good_headshot.png").exists()
    assert not (out / "broken_headshot.png").exists()


def test_existing_outputs_are_skipped(tmp_path):
    src = tmp_path / "face.png"
    _write_image(src, (30, 30))
    out = tmp_path / "out"
    out.mkdir()
    (out / "face_headshot.png").write_bytes(b"keep")

    res = runner.invoke(cli, ["headshot", "--input-path", str(src), "--output-dir", str(out)])
    assert res.exit_code == 0
    assert (out / "face_headshot.png").read_bytes() == b"keep"

    res = runner.invoke(cli, ["headshot", "--input-path", str(src), "--output-dir", str(out), "--overwrite"])
    assert res.exit_code == 0
    assert (out / "face_headshot.png").read_bytes() != b"keep"


def test_bad_crop_is_usage_error(tmp_path):
    src = tmp_path / "face.png"
    _write_image(src, (30, 30))
    res = runner.invoke(
        cli,
        ["headshot", "--input-path", str(src), "--output-dir", str(tmp_path / "out"), "--crop", "1,2"],
    )
    assert res.exit_code == 2


def test_logo_keeps_existing_output_without_overwrite(tmp_path):
    src = tmp_path / "brand.png"
    _write_image(src, (800, 200))
    out = tmp_path / "out"
    out.mkdir()
    (out / "brand_rectangular.png").write_bytes(b"keep")

    res = runner.invoke(cli, ["logo", "--input-path", str(src), "--output-dir", str(out), "--no-overwrite"])
    assert res.exit_code == 0, res.output
    assert (out / "brand_rectangular.png").read_bytes() == b"keep"
    assert (out / "brand_square.png").exists()
    assert (out / "brand_favicon.png").exists()


def test_unwritable_output_does_not_stop_other_images(tmp_path):
    src = tmp_path / "in"
    src.mkdir()
    _write_image(src / "a.png", (30, 30))
    _write_image(src / "b.png", (30, 30))
    out = tmp_path / "out"
    out.mkdir()
    (out / "a_headshot.png").mkdir()

    res = runner.invoke(cli, ["headshot", "--input-path", str(src), "--output-dir", str(out), "--overwrite"])
    assert res.exit_code == 1
    assert res.exception is None or isinstance(res.exception, SystemExit)
    assert "a.png" in res.output
    assert (out / "b_headshot.png").is_file()


def test_non_finite_crop_is_usage_error(tmp_path):
    src = tmp_path / "face.png"
    _write_image(src, (30, 30))
    res = runner.invoke(
        cli,
        ["headshot", "--input-path", str(src), "--output-dir", str(tmp_path / "out"), "--crop", "0,0,inf,2"],
    )
    assert res.exit_code == 2
    assert "finite" in res.output
