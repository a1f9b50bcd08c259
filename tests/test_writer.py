"""Tests for ArtifactWriter."""
import pytest

from pxb_diags.bundle import ArtifactWriter
from pxb_diags.errors import WriteError


class TestArtifactWriter:
    def test_writes_content(self, tmp_path):
        path = tmp_path / "cm.yaml"
        assert ArtifactWriter().write(path, "kind: ConfigMap\n") == path
        assert path.read_text() == "kind: ConfigMap\n"

    def test_overwrites_existing_file(self, tmp_path):
        path = tmp_path / "pod.log"
        path.write_text("old run with a much longer body\n")
        ArtifactWriter().write(path, "new\n")
        assert path.read_text() == "new\n"

    def test_empty_content_creates_empty_file(self, tmp_path):
        path = tmp_path / "empty.log"
        ArtifactWriter().write(path, "")
        assert path.exists()
        assert path.read_text() == ""

    def test_leaves_no_temporary_files(self, tmp_path):
        ArtifactWriter().write(tmp_path / "a.txt", "a")
        ArtifactWriter().write(tmp_path / "a.txt", "b")
        assert [p.name for p in tmp_path.iterdir()] == ["a.txt"]

    def test_missing_directory_raises_write_error(self, tmp_path):
        path = tmp_path / "missing" / "a.txt"
        with pytest.raises(WriteError) as exc:
            ArtifactWriter().write(path, "a")
        assert str(path) in str(exc.value)
        assert not path.exists()

    def test_destination_is_directory(self, tmp_path):
        target = tmp_path / "taken"
        target.mkdir()
        with pytest.raises(WriteError):
            ArtifactWriter().write(target, "a")
        assert [p.name for p in tmp_path.iterdir()] == ["taken"]
