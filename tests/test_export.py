"""Tests for envctl.export."""

import json
import logging
import os

import pytest

from envctl.errors import EnvFileWriteError, FormatConflictError
from envctl.export import (
    check_exclusive,
    clean_all,
    export_path,
    render,
    render_ini,
    render_json,
    render_plain,
    render_toml,
    render_xml,
    render_yaml,
    write_document,
)
from envctl.models import ExportFormat

RECORDS = {"FOO": "bar", "PORT": "8080"}


class TestRenderers:
    def test_json_is_indented_two_spaces(self):
        text = render_json(RECORDS)
        assert json.loads(text) == RECORDS
        assert '\n  "FOO": "bar"' in text

    def test_json_keeps_non_ascii(self):
        assert render_json({"GREETING": "héllo"}) == '{\n  "GREETING": "héllo"\n}'

    def test_ini(self):
        assert render_ini(RECORDS) == "[default]\nFOO = bar\nPORT = 8080\n"

    def test_yaml(self):
        assert render_yaml(RECORDS) == '---\nFOO: "bar"\nPORT: "8080"\n'

    def test_toml_keeps_colon_lines(self):
        assert render_toml(RECORDS) == 'FOO: "bar"\nPORT: "8080"\n'

    def test_xml(self):
        assert render_xml(RECORDS) == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<env>\n"
            "   <FOO>bar</FOO>\n"
            "   <PORT>8080</PORT>\n"
            "</env>\n"
        )

    def test_xml_does_not_escape(self):
        assert "<A>x&y</A>" in render_xml({"A": "x&y"})

    def test_plain(self):
        assert render_plain(RECORDS) == "FOO=bar\nPORT=8080\n"

    def test_plain_with_separator(self):
        assert render_plain(RECORDS, ":") == "FOO:bar\nPORT:8080\n"

    def test_empty_store(self):
        assert render_plain({}) == ""
        assert render_ini({}) == "[default]\n"
        assert json.loads(render_json({})) == {}

    def test_render_dispatches_by_format(self):
        assert render(ExportFormat.YAML, RECORDS) == render_yaml(RECORDS)


class TestExclusivity:
    def test_single_format_is_selected(self):
        assert check_exclusive([ExportFormat.JSON], ".env") is ExportFormat.JSON

    def test_no_format(self):
        assert check_exclusive([], ".env") is None

    def test_two_formats_conflict(self):
        with pytest.raises(FormatConflictError) as excinfo:
            check_exclusive([ExportFormat.JSON, ExportFormat.YAML], ".env")
        assert "CANNOT COMBINE" in excinfo.value.message

    def test_build_all_allows_every_format(self):
        assert check_exclusive(list(ExportFormat), ".env", build_all=True) is None

    def test_verbose_names_formats(self, caplog):
        caplog.set_level(logging.INFO, logger="envctl")
        check_exclusive([ExportFormat.XML], ".env")
        assert "Using XML environment file" in caplog.text


class TestFiles:
    def test_export_path_appends_extension(self):
        assert export_path("/tmp/.env", ExportFormat.TOML) == "/tmp/.env.toml"

    def test_write_document(self, tmp_path):
        target = tmp_path / "out.json"
        write_document(str(target), "{}")
        assert target.read_text() == "{}"

    def test_write_failure_is_wrapped(self, tmp_path):
        with pytest.raises(EnvFileWriteError):
            write_document(str(tmp_path), "x")


class TestCleanAll:
    def _make_exports(self, tmp_path, *formats):
        base = tmp_path / ".env"
        base.write_text("A=1\n")
        for fmt in formats:
            (tmp_path / f".env{fmt.extension}").write_text("x")
        return str(base)

    def test_removes_existing_exports(self, tmp_path):
        path = self._make_exports(tmp_path, ExportFormat.JSON, ExportFormat.INI)
        report = clean_all(path, never_delete=False)
        assert sorted(report.removed) == sorted([f"{path}.json", f"{path}.ini"])
        assert report.found == [f"{path}.json", f"{path}.ini"]
        assert not (tmp_path / ".env.json").exists()
        assert not (tmp_path / ".env.ini").exists()
        assert (tmp_path / ".env").exists()

    def test_never_delete_keeps_files(self, tmp_path):
        path = self._make_exports(tmp_path, ExportFormat.YAML)
        report = clean_all(path, never_delete=True)
        assert report.kept == [f"{path}.yaml"]
        assert report.removed == []
        assert (tmp_path / ".env.yaml").exists()

    def test_missing_exports_are_ignored(self, tmp_path):
        path = self._make_exports(tmp_path)
        report = clean_all(path, never_delete=False)
        assert report.removed == report.kept == report.skipped == []

    def test_permission_error_is_skipped(self, tmp_path, monkeypatch, caplog):
        path = self._make_exports(tmp_path, ExportFormat.JSON, ExportFormat.XML)
        real_remove = os.remove

        def fake_remove(target):
            if target.endswith(".json"):
                raise PermissionError("denied")
            real_remove(target)

        monkeypatch.setattr("envctl.export.os.remove", fake_remove)
        report = clean_all(path, never_delete=False)
        assert report.skipped == [f"{path}.json"]
        assert report.removed == [f"{path}.xml"]
        assert "is not writable" in caplog.text
