import asyncio

from thumbd.core.errors import StorageError
from thumbd.core.service import ThumbnailService
from thumbd.scripts.warm_cache import main, warm_cache


def test_warms_every_supported_raw_file(make_settings, raw_dir, thumb_dir):
    (raw_dir / "README.txt").write_text("not an image")
    service = ThumbnailService.from_settings(make_settings())

    report = asyncio.run(warm_cache(service))
    assert sorted(report.generated) == sorted(
        ["accidentally_save_file.gif", "blocked_us.png", "carlton_pls.jpg", "lemur_pudding_cups.jpeg", "tiny.png"]
    )
    assert report.skipped == ["README.txt"]
    assert (thumb_dir / "blocked_us.png.png").exists()

    again = asyncio.run(warm_cache(service))
    assert again.generated == []
    assert len(again.cached) == 5


def test_named_files_and_failures(make_settings, raw_dir):
    (raw_dir / "broken.gif").write_bytes(b"nope")
    service = ThumbnailService.from_settings(make_settings())

    report = asyncio.run(warm_cache(service, ["tiny.png", "broken.gif", "missing.png", "../escape.png"]))
    assert report.generated == ["tiny.png"]
    assert report.failed == ["broken.gif", "missing.png"]
    assert report.skipped == ["../escape.png"]


def test_dry_run_writes_nothing(make_settings, thumb_dir, capsys):
    exit_code = main(["--dry-run"], settings=make_settings())
    assert exit_code == 0
    assert not thumb_dir.exists()
    assert "would generate blocked_us.png.png" in capsys.readouterr().out


def test_exit_code_reports_failures(make_settings, raw_dir):
    (raw_dir / "broken.png").write_bytes(b"nope")
    assert main([], settings=make_settings()) == 1


def test_dry_run_storage_errors_are_counted_not_fatal(make_settings, monkeypatch):
    service = ThumbnailService.from_settings(make_settings())
    real_exists = service.cache_store.exists

    def flaky_exists(path):
        if path.name == "blocked_us.png.png":
            raise StorageError(f"stat failed for {path}")
        return real_exists(path)

    monkeypatch.setattr(service.cache_store, "exists", flaky_exists)
    report = asyncio.run(warm_cache(service, ["blocked_us.png", "tiny.png", "missing.png"], dry_run=True))
    assert report.failed == ["blocked_us.png", "missing.png"]
    assert report.generated == ["tiny.png"]
