"""Tests for ArtifactFetcher."""
import pytest
from conftest import FakeClusterReader

from pxb_diags.bundle import ContainerDescriptor, ContainerRole, ResourceKind
from pxb_diags.collection import ArtifactFetcher
from pxb_diags.collection.fetcher import FULL_LOG
from pxb_diags.errors import FetchError, LogFetchError

MAIN = ContainerDescriptor(pod_name="web-0", name="app", role=ContainerRole.MAIN)


class TestFetchSpecAndDescription:
    def test_spec(self):
        text = ArtifactFetcher(FakeClusterReader()).fetch_spec(ResourceKind.CONFIG_MAP, "cfg", "ns1")
        assert "name: cfg" in text

    def test_spec_failure(self):
        reader = FakeClusterReader(fail={("spec", ResourceKind.CONFIG_MAP, "cfg")})
        with pytest.raises(FetchError) as exc:
            ArtifactFetcher(reader).fetch_spec(ResourceKind.CONFIG_MAP, "cfg", "ns1")
        assert "configmap/cfg" in str(exc.value)
        assert "not found" in str(exc.value)

    def test_description_failure(self):
        reader = FakeClusterReader(fail={("describe", ResourceKind.JOB, "backup")})
        with pytest.raises(FetchError, match="description of job/backup"):
            ArtifactFetcher(reader).fetch_description(ResourceKind.JOB, "backup", "ns1")

    def test_resource_list(self):
        reader = FakeClusterReader()
        text = ArtifactFetcher(reader).fetch_resource_list(ResourceKind.ALERTMANAGER, "ns1")
        assert text.startswith("NAME")
        assert ("get_resource_list", "alertmanager", "ns1") in reader.calls


class TestFetchLogs:
    def test_drains_every_chunk(self):
        chunks = [b"line 1\n", b"line ", b"2\n", b"", b"line 3\n"]
        reader = FakeClusterReader(logs={("web-0", "app"): chunks})
        assert ArtifactFetcher(reader).fetch_logs("ns1", MAIN) == "line 1\nline 2\nline 3\n"

    def test_multibyte_split_across_chunks(self):
        data = "café\n".encode()
        reader = FakeClusterReader(logs={("web-0", "app"): [data[:4], data[4:]]})
        assert ArtifactFetcher(reader).fetch_logs("ns1", MAIN) == "café\n"

    def test_tail_lines_forwarded(self):
        reader = FakeClusterReader()
        ArtifactFetcher(reader).fetch_logs("ns1", MAIN, tail_lines=50)
        ArtifactFetcher(reader).fetch_logs("ns1", MAIN, tail_lines=FULL_LOG)
        assert ("stream_logs", "web-0", "app", 50, False) in reader.calls
        assert ("stream_logs", "web-0", "app", -1, False) in reader.calls

    def test_no_previous_container_is_empty_not_error(self):
        reader = FakeClusterReader()
        assert ArtifactFetcher(reader).fetch_logs("ns1", MAIN, previous=True) == ""

    def test_previous_log_returned_when_present(self):
        reader = FakeClusterReader(previous_logs={("web-0", "app"): [b"panic: boom\n"]})
        assert ArtifactFetcher(reader).fetch_logs("ns1", MAIN, previous=True) == "panic: boom\n"

    def test_other_errors_raise(self):
        reader = FakeClusterReader(fail={("logs", "web-0", "app", True)})
        with pytest.raises(LogFetchError) as exc:
            ArtifactFetcher(reader).fetch_logs("ns1", MAIN, previous=True)
        assert "web-0/app" in str(exc.value)
        assert "500" in str(exc.value)

    def test_no_previous_marker_on_current_log_is_an_error(self):
        reader = FakeClusterReader()

        def stream_logs(**kwargs):
            from pxb_diags.errors import ClusterAPIError

            raise ClusterAPIError("Bad Request", 400, "previous terminated container not found")
            yield b""

        reader.stream_logs = stream_logs
        with pytest.raises(LogFetchError):
            ArtifactFetcher(reader).fetch_logs("ns1", MAIN, previous=False)
