from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from crewscreening.cli import app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


def build_dataset() -> dict:
    return {
        "candidates": [
            {"candidate_id": "C-001", "name": "Deniz Kaya", "position_code": "Captain", "fleet_type": "tanker"},
            {"candidate_id": "C-002", "name": "Ivan Petrov", "position_code": "AB"},
        ],
        "interviews": [
            {
                "interview_id": "INT-001",
                "candidate_id": "C-001",
                "status": "completed",
                "completed_at": "2025-01-10T08:00:00Z",
                "answers": [
                    {
                        "competency": "DISCIPLINE",
                        "answer_text": (
                            "For example, during a tanker discharge I ensured the permit to work "
                            "and the ISM checklist were complete before the pump room entry; as a "
                            "result we prevented a near miss."
                        ),
                    },
                    {
                        "competency": "LEADERSHIP",
                        "answer_text": "I decided to brief the officers and delegate watch duties by priority.",
                    },
                    {
                        "competency": "TEAMWORK",
                        "answer_text": "Our crew works together and we support each other as one team.",
                    },
                ],
            }
        ],
        "contracts": [
            {
                "contract_id": "K-1",
                "candidate_id": "C-001",
                "start_date": "2019-01-01",
                "end_date": "2019-09-01",
                "vessel_type": "tanker",
                "rank_code": "C/O",
                "company_name": "Blue Sea",
            },
            {
                "contract_id": "K-2",
                "candidate_id": "C-001",
                "start_date": "2020-01-01",
                "end_date": "2020-10-01",
                "vessel_type": "bulk",
                "rank_code": "Master",
                "company_name": "Blue Sea",
            },
            {
                "contract_id": "K-3",
                "candidate_id": "C-002",
                "start_date": "2023-03-01",
                "end_date": "2023-06-01",
                "vessel_type": "container",
                "rank_code": "AB",
                "company_name": "Harbor Line",
            },
        ],
    }


def test_cli_runs_pipeline_and_writes_output(tmp_path: Path, runner: CliRunner) -> None:
    dataset_path = tmp_path / "dataset.json"
    output_path = tmp_path / "out" / "results.json"
    audit_path = tmp_path / "audit.jsonl"
    write_json(dataset_path, build_dataset())

    result = runner.invoke(
        app,
        [
            "run",
            "--dataset",
            str(dataset_path),
            "--output",
            str(output_path),
            "--audit-log",
            str(audit_path),
            "--log-level",
            "WARNING",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Processed 2 candidates" in result.output

    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["metadata"]["candidate_count"] == 2
    assert payload["metadata"]["errors"] == []
    assert payload["metadata"]["engines"] == ["competency", "stability"]

    captain, seaman = payload["results"]
    assert captain["candidate_id"] == "C-001"
    assert captain["competency"]["status"] in {"strong", "moderate", "weak"}
    assert captain["competency"]["questions_evaluated"] > 0
    assert captain["stability"]["fleet_type"] == "tanker"
    assert captain["stability"]["risk_tier"] in {"low", "medium", "high", "critical"}
    assert captain["trust_profile"]["detail"].keys() == {"competency_engine", "stability_risk"}

    assert seaman["competency"] is None
    assert seaman["stability"]["stability_index"] is None

    audit_lines = audit_path.read_text(encoding="utf-8").splitlines()
    assert len(audit_lines) == 2
    assert json.loads(audit_lines[0])["candidate_id"] == "C-001"


def test_cli_single_engine_and_fleet_override(tmp_path: Path, runner: CliRunner) -> None:
    dataset_path = tmp_path / "dataset.json"
    output_path = tmp_path / "results.json"
    write_json(dataset_path, build_dataset())

    result = runner.invoke(
        app,
        [
            "run",
            "--dataset",
            str(dataset_path),
            "--output",
            str(output_path),
            "--engine",
            "stability",
            "--fleet",
            "river",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert payload["metadata"]["engines"] == ["stability"]
    for entry in payload["results"]:
        assert "competency" not in entry
        assert entry["stability"]["fleet_type"] == "river"


def test_cli_config_can_disable_engine(tmp_path: Path, runner: CliRunner) -> None:
    dataset_path = tmp_path / "dataset.json"
    output_path = tmp_path / "results.json"
    config_path = tmp_path / "config.yaml"
    write_json(dataset_path, build_dataset())
    config_path.write_text("competency:\n  enabled: false\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["run", "--dataset", str(dataset_path), "--output", str(output_path), "--config", str(config_path)],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert all(entry["competency"] is None for entry in payload["results"])
    assert payload["results"][0]["stability"] is not None


def test_cli_rejects_non_mapping_config(tmp_path: Path, runner: CliRunner) -> None:
    dataset_path = tmp_path / "dataset.json"
    config_path = tmp_path / "config.yaml"
    write_json(dataset_path, build_dataset())
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "run",
            "--dataset",
            str(dataset_path),
            "--output",
            str(tmp_path / "results.json"),
            "--config",
            str(config_path),
        ],
    )

    assert result.exit_code != 0
    assert not (tmp_path / "results.json").exists()
