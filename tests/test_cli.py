from __future__ import annotations

from click.testing import CliRunner

from sigmem.cli import main


def _invoke(tmp_path, *args):
    runner = CliRunner()
    return runner.invoke(
        main,
        ["--data-dir", str(tmp_path / "data"), "--seed", "1", "--log-level", "WARNING", *args],
    )


def _corpus(tmp_path):
    texts = tmp_path / "texts"
    texts.mkdir()
    (texts / "one.txt").write_text(
        "the cat sat on the mat. the dog ran in the park.", encoding="utf-8"
    )
    (texts / "two.txt").write_text(
        "a bird flew over the old barn. the cat sat on the warm rug.", encoding="utf-8"
    )
    return texts


def test_create(tmp_path):
    result = _invoke(tmp_path, "create", "alpha")
    assert result.exit_code == 0, result.output
    assert "Created sigel 'alpha'" in result.output
    assert (tmp_path / "data" / "alpha.sig").exists()


def test_train_predict_consolidate_status(tmp_path):
    texts = _corpus(tmp_path)
    result = _invoke(tmp_path, "train", "beta", str(texts))
    assert result.exit_code == 0, result.output
    assert "Trained 'beta': 4 memories" in result.output

    snapshot = tmp_path / "data" / "beta.sig"
    assert snapshot.exists()

    result = _invoke(tmp_path, "predict", str(snapshot), "the", "cat", "sat")
    assert result.exit_code == 0, result.output
    assert result.output.strip()

    result = _invoke(tmp_path, "consolidate", str(snapshot))
    assert result.exit_code == 0, result.output
    assert "Memories analyzed:     4" in result.output

    result = _invoke(tmp_path, "status", str(snapshot))
    assert result.exit_code == 0, result.output
    assert "Sigel 'beta'" in result.output
    assert "Memories:            4" in result.output


def test_consolidate_dry_run_keeps_file(tmp_path):
    texts = _corpus(tmp_path)
    _invoke(tmp_path, "train", "gamma", str(texts))
    snapshot = tmp_path / "data" / "gamma.sig"
    before = snapshot.read_bytes()

    result = _invoke(tmp_path, "consolidate", "--dry-run", str(snapshot))
    assert result.exit_code == 0, result.output
    assert snapshot.read_bytes() == before


def test_ingest_appends_memories(tmp_path):
    _invoke(tmp_path, "create", "delta")
    snapshot = tmp_path / "data" / "delta.sig"
    text = tmp_path / "note.txt"
    text.write_text("the river flows past the quiet town.", encoding="utf-8")

    result = _invoke(tmp_path, "ingest", str(snapshot), str(text), "--source-id", "note")
    assert result.exit_code == 0, result.output
    assert "1 memories" in result.output

    result = _invoke(tmp_path, "status", str(snapshot))
    assert "Memories:            1" in result.output


def test_schedule(tmp_path):
    result = _invoke(tmp_path, "schedule")
    assert result.exit_code == 0, result.output
    assert "Interval:            6h" in result.output
    assert "Deep interval:       24h" in result.output


def test_corrupt_snapshot_is_reported(tmp_path):
    bad = tmp_path / "bad.sig"
    bad.write_text("{not json", encoding="utf-8")
    result = _invoke(tmp_path, "status", str(bad))
    assert result.exit_code == 1
    assert "Invalid sigel snapshot" in result.output
