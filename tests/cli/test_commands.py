"""Tests for the command line interface."""

import json
import os
import subprocess
import sys

import pytest


def run_cli(repo_root, *args, stdin=None):
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        encoding="utf-8",
        input=stdin,
        cwd=repo_root,
        env={**os.environ, "PYTHONIOENCODING": "utf-8"},
    )


@pytest.mark.integration
def test_help(repo_root):
    result = run_cli(repo_root, "--help")
    assert result.returncode == 0
    assert "parse" in result.stdout


@pytest.mark.integration
def test_unknown_command(repo_root):
    result = run_cli(repo_root, "frobnicate")
    assert result.returncode == 1


@pytest.mark.integration
def test_parse_from_stdin(repo_root):
    result = run_cli(
        repo_root, "parse", "-", "--stage", "4a_BronnenSpecialist", stdin="1. Doe X\n\n2. Doe Y"
    )
    assert result.returncode == 0

    proposals = json.loads(result.stdout)
    assert [p["id"] for p in proposals] == [
        "4a_BronnenSpecialist-0",
        "4a_BronnenSpecialist-1",
    ]


@pytest.mark.integration
def test_parse_missing_file(repo_root, tmp_path):
    result = run_cli(repo_root, "parse", str(tmp_path / "missing.txt"))
    assert result.returncode == 1


@pytest.mark.integration
def test_parse_non_utf8_file(repo_root, tmp_path):
    feedback = tmp_path / "feedback.txt"
    feedback.write_bytes("1. Vermogen € 57.000".encode("cp1252"))

    result = run_cli(repo_root, "parse", str(feedback))
    assert result.returncode == 1
    assert "Traceback" not in result.stderr
    assert "Cannot read feedback" in result.stderr


@pytest.mark.integration
def test_parse_then_serialize(repo_root, tmp_path, reviewer_feedback):
    feedback = tmp_path / "feedback.txt"
    feedback.write_text(reviewer_feedback, encoding="utf-8")
    proposals_file = tmp_path / "proposals.json"

    result = run_cli(repo_root, "parse", str(feedback), "-o", str(proposals_file))
    assert result.returncode == 0

    proposals = json.loads(proposals_file.read_text(encoding="utf-8"))
    proposals[0]["userDecision"] = "accept"
    proposals[1]["userDecision"] = "reject"
    proposals_file.write_text(json.dumps(proposals), encoding="utf-8")

    result = run_cli(repo_root, "serialize", str(proposals_file))
    assert result.returncode == 0
    assert "GEACCEPTEERDE WIJZIGINGEN" in result.stdout
    assert "AFGEWEZEN WIJZIGINGEN" in result.stdout
    assert "AANGEPASTE WIJZIGINGEN" not in result.stdout


@pytest.mark.integration
def test_serialize_rejects_non_list(repo_root, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"proposals": []}', encoding="utf-8")
    result = run_cli(repo_root, "serialize", str(bad))
    assert result.returncode == 1


@pytest.mark.integration
def test_summarize(repo_root):
    result = run_cli(
        repo_root, "summarize", "-", "--stage", "4e_DeAdvocaat", stdin="KRITIEK: x"
    )
    assert result.returncode == 0
    summary = json.loads(result.stdout)
    assert summary["stageName"] == "Juridisch Review"
    assert summary["changesCount"] == 1


@pytest.mark.integration
def test_stages(repo_root):
    result = run_cli(repo_root, "stages")
    assert result.returncode == 0
    assert "4c_ScenarioGatenAnalist" in result.stdout
