"""
Unit tests for the ingestor and list_jobs command-line entry points.
"""

import json
import logging
import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from ats_ingest.ingestor import list_jobs, main
from ats_ingest.ingestor.db_operations import DatabaseError
from ats_ingest.ingestor.orchestrator import IngestionRunResult
from ats_ingest.source_extractor.adapters.mock_adapter import MockAdapter
from ats_ingest.source_extractor.source_config import ConfigurationError, IngestionConfig

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def make_config(**kwargs) -> IngestionConfig:
    kwargs.setdefault("companies", {"mock": ["acme", "globex"]})
    return IngestionConfig(**kwargs)


@pytest.fixture
def mock_adapters():
    """Route the ingestor's default adapters to a MockAdapter."""
    with patch(
        "ats_ingest.ingestor.orchestrator.build_adapters",
        return_value={"mock": MockAdapter(num_jobs=3)},
    ):
        yield


class TestExitCodeFor:
    def test_success(self):
        assert main.exit_code_for(IngestionRunResult(total_ingested=3)) == main.EXIT_SUCCESS

    def test_partial_failure(self):
        result = IngestionRunResult(failed=["lever/acme"])
        assert main.exit_code_for(result) == main.EXIT_PARTIAL_FAILURE

    def test_fatal(self):
        result = IngestionRunResult(success=False, error="boom")
        assert main.exit_code_for(result) == main.EXIT_FATAL


class TestIngestorMain:
    def test_parse_args_defaults(self):
        args = main.parse_args([])

        assert args.apply_date_filter is True
        assert args.dry_run is False
        assert args.config is None

    def test_no_date_filter_flag(self):
        assert main.parse_args(["--no-date-filter"]).apply_date_filter is False

    def test_dry_run(self, mock_adapters, capsys):
        with patch.object(main, "load_ingestion_config", return_value=make_config()):
            exit_code = main.main(["--dry-run"])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == main.EXIT_SUCCESS
        assert output["success"] is True
        assert output["totalIngested"] == 6

    def test_configuration_error_is_fatal(self, capsys):
        with patch.object(
            main, "load_ingestion_config", side_effect=ConfigurationError("bad yaml")
        ):
            exit_code = main.main([])

        assert exit_code == main.EXIT_FATAL
        assert json.loads(capsys.readouterr().out)["error"] == "bad yaml"

    def test_unauthorized(self, mock_adapters, capsys, monkeypatch):
        monkeypatch.delenv("INGEST_AUTHORIZATION", raising=False)
        config = make_config(cron_secret="s3cret")

        with patch.object(main, "load_ingestion_config", return_value=config):
            exit_code = main.main(["--dry-run", "--token", "Bearer nope"])

        output = json.loads(capsys.readouterr().out)
        assert exit_code == main.EXIT_UNAUTHORIZED
        assert output["success"] is False
        assert output["error"] == "Unauthorized"
        assert output["totalIngested"] == 0

    def test_token_from_environment(self, mock_adapters, capsys, monkeypatch):
        monkeypatch.setenv("INGEST_AUTHORIZATION", "Bearer s3cret")
        config = make_config(cron_secret="s3cret")

        with patch.object(main, "load_ingestion_config", return_value=config):
            exit_code = main.main(["--dry-run"])

        assert exit_code == main.EXIT_SUCCESS

    def test_missing_database_url_is_fatal(self, capsys):
        with patch.object(main, "load_ingestion_config", return_value=make_config()):
            exit_code = main.main([])

        assert exit_code == main.EXIT_FATAL
        assert "DATABASE_URL" in json.loads(capsys.readouterr().out)["error"]

    def test_database_connection_failure_is_fatal(self, capsys):
        config = make_config(database_url="postgresql://nowhere/jobs")

        with patch.object(main, "load_ingestion_config", return_value=config), \
             patch.object(main, "JobsDB", side_effect=DatabaseError("could not connect")):
            exit_code = main.main([])

        assert exit_code == main.EXIT_FATAL
        assert json.loads(capsys.readouterr().out)["error"] == "could not connect"

    def test_database_run_closes_pool(self, mock_adapters, capsys):
        config = make_config(database_url="postgresql://localhost/jobs")

        with patch.object(main, "load_ingestion_config", return_value=config), \
             patch.object(main, "JobsDB") as jobs_db_cls:
            jobs_db_cls.return_value.upsert_job.return_value = "row-id"
            exit_code = main.main([])

        assert exit_code == main.EXIT_SUCCESS
        jobs_db_cls.assert_called_once_with(
            "postgresql://localhost/jobs", max_connections=main.MAX_CONCURRENT_UNITS
        )
        assert jobs_db_cls.return_value.upsert_job.call_count == 6
        jobs_db_cls.return_value.close.assert_called_once()


class TestListJobsMain:
    def test_missing_database_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        assert list_jobs.main([]) == 2

    def test_prints_jobs(self, monkeypatch, capsys):
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/jobs")

        with patch.object(list_jobs, "JobsDB") as jobs_db_cls:
            db = jobs_db_cls.return_value.__enter__.return_value
            db.list_jobs.return_value = [{"id": "a", "title": "Data Engineer"}]
            exit_code = list_jobs.main(["--limit", "5"])

        assert exit_code == 0
        db.list_jobs.assert_called_once_with("5")
        assert json.loads(capsys.readouterr().out) == [{"id": "a", "title": "Data Engineer"}]

    def test_database_error(self, monkeypatch, capsys):
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/jobs")

        with patch.object(list_jobs, "JobsDB", side_effect=DatabaseError("refused")):
            exit_code = list_jobs.main([])

        assert exit_code == 2
        assert json.loads(capsys.readouterr().out)["details"] == "refused"



class TestCommandLineOutput:
    """Entry points run as real processes: stdout is exactly one JSON document."""

    def run_module(self, module, *args, **env_overrides):
        env = dict(os.environ)
        env.update(
            {
                "COMPANIES_GREENHOUSE": "",
                "COMPANIES_LEVER": "",
                "COMPANIES_ASHBY": "",
                "CRON_SECRET": "",
                "PYTHONPATH": str(PROJECT_ROOT),
            }
        )
        env.update(env_overrides)
        return subprocess.run(
            [sys.executable, "-m", module, *args],
            cwd=PROJECT_ROOT,
            env=env,
            capture_output=True,
            text=True,
            timeout=60,
        )

    def test_configure_logging_writes_to_stderr(self):
        with patch.object(logging, "basicConfig") as basic_config:
            main.configure_logging()

        handlers = basic_config.call_args[1]["handlers"]
        assert [handler.stream for handler in handlers] == [sys.stderr]

    @pytest.mark.slow
    def test_ingestor_stdout_is_json(self):
        proc = self.run_module("ats_ingest.ingestor.main", "--dry-run", "--verbose")

        assert proc.returncode == main.EXIT_SUCCESS
        assert json.loads(proc.stdout) == {
            "success": True,
            "totalIngested": 0,
            "failed": [],
            "message": "Ingested 0 jobs",
        }
        assert "DRY RUN" in proc.stderr

    @pytest.mark.slow
    def test_list_jobs_stdout_is_json_on_error(self):
        proc = self.run_module(
            "ats_ingest.ingestor.list_jobs",
            DATABASE_URL="postgresql://nobody@127.0.0.1:1/jobs?connect_timeout=2",
        )

        assert proc.returncode == 2
        assert json.loads(proc.stdout)["error"] == "Failed to fetch jobs"
        assert "Failed to fetch jobs" in proc.stderr


# ============================================================================
# Mark all tests as unit tests
# ============================================================================

pytestmark = pytest.mark.unit
