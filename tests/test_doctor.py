"""Tests for the doctor checks."""

from __future__ import annotations

import sys
from unittest.mock import patch

from uia_locators.doctor import (
    CheckResult,
    DoctorReport,
    check_config,
    check_page_documents,
    check_python_version,
    check_storage_root,
    run_doctor,
)
from uia_locators.storage.page_store import PageStore


def test_doctor_report_passed_when_all_checks_pass():
    report = DoctorReport()
    report.add(CheckResult("a", True, "ok"))
    report.add(CheckResult("b", True, "ok"))
    assert report.passed is True


def test_doctor_report_fails_when_any_check_fails():
    report = DoctorReport()
    report.add(CheckResult("a", True, "ok"))
    report.add(CheckResult("b", False, "bad"))
    assert report.passed is False


def test_check_python_version_passes_for_current():
    result = check_python_version()
    assert result.passed is True
    assert "✓" in result.message


def test_check_python_version_fails_for_old_version():
    with patch.object(sys, "version_info", (3, 8, 0, "final", 0)):
        result = check_python_version()
    assert result.passed is False
    assert "3.10" in result.hint


def test_check_config_skipped_without_path():
    assert check_config(None).passed is True


def test_check_config_missing_file_passes_with_hint(tmp_path):
    result = check_config(str(tmp_path / "uia-locators.yaml"))
    assert result.passed is True
    assert result.hint is not None


def test_check_config_invalid(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("storage_root: [oops\n", encoding="utf-8")
    result = check_config(str(path))
    assert result.passed is False
    assert result.hint is not None


def test_check_storage_root_creates_and_passes(tmp_path):
    target = tmp_path / "new" / "locators"
    result = check_storage_root(str(target))
    assert result.passed is True
    assert target.is_dir()


def test_check_storage_root_fails_when_blocked(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    result = check_storage_root(str(blocker / "sub"))
    assert result.passed is False
    assert result.hint is not None


def test_check_page_documents(tmp_path):
    store = PageStore(tmp_path)
    store.write("Login", "<locators><page name='Login'><locator name='a'/></page></locators>")
    results = check_page_documents(str(tmp_path))
    assert len(results) == 1
    assert results[0].passed is True
    assert "1 document" in results[0].message


def test_check_page_documents_reports_broken_files(tmp_path):
    (tmp_path / "Good.xml").write_text("<locators/>", encoding="utf-8")
    (tmp_path / "Bad.xml").write_text("<locators><page", encoding="utf-8")
    results = check_page_documents(str(tmp_path))
    assert [r.name for r in results] == ["Page document: Bad.xml"]
    assert results[0].passed is False


def test_check_page_documents_missing_root(tmp_path):
    assert check_page_documents(str(tmp_path / "absent")) == []


def test_run_doctor(tmp_path):
    report = run_doctor(str(tmp_path / "locators"))
    names = [c.name for c in report.checks]
    assert names[:3] == ["Python version", "Config", "Locator directory"]
    assert report.passed is True
