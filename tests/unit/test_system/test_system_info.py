"""
Unit tests for host information and command execution helpers.
"""

import os
import sys
from unittest.mock import patch

import pytest

from buildctl.system import collect_resource_info, collect_system_properties, format_bytes, run_command


@pytest.mark.unit
class TestSystemProperties:
    """Test cases for collect_system_properties."""

    def test_expected_keys(self, tmp_path):
        properties = collect_system_properties(tmp_path)
        for key in ("host.os", "os.name", "host.arch", "python.version", "file.separator"):
            assert properties[key]
        assert properties["application.startdir"] == str(tmp_path)
        assert properties["file.separator"] == os.sep
        assert properties["python.interpreter"] == sys.executable

    def test_values_are_strings(self, tmp_path):
        assert all(isinstance(value, str) for value in collect_system_properties(tmp_path).values())


@pytest.mark.unit
class TestResourceInfo:
    """Test cases for collect_resource_info."""

    def test_reports_memory_and_process(self, tmp_path):
        info = collect_resource_info(tmp_path)
        assert int(info["cpu.logical"]) >= 1
        assert info["process.pid"] == str(os.getpid())
        assert "memory.total" in info
        assert "disk.free" in info

    @pytest.mark.parametrize(
        "size, expected",
        [(0, "0 B"), (512, "512 B"), (2048, "2.0 KiB"), (5 * 1024 ** 3, "5.0 GiB")],
    )
    def test_format_bytes(self, size, expected):
        assert format_bytes(size) == expected


@pytest.mark.unit
class TestRunCommand:
    """Test cases for run_command."""

    def test_captures_output(self, tmp_path):
        rc, out, err = run_command("echo hello", tmp_path)
        assert rc == 0
        assert out.strip() == "hello"

    def test_non_zero_exit(self, tmp_path):
        rc, _, _ = run_command("exit 3", tmp_path)
        assert rc == 3

    def test_launch_failure(self, tmp_path):
        with patch("buildctl.system.commands.subprocess.run", side_effect=FileNotFoundError("missing")):
            rc, out, err = run_command("nosuchprogram --flag", tmp_path)
        assert rc == -1
        assert out == ""
        assert err == "Error: Command not found 'nosuchprogram'"
