"""Tests for ebs_backup/cli.py, args_parser.py and reporting.py"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from ebs_backup.args_parser import build_run_config, parse_args
from ebs_backup.cli import main
from ebs_backup.config import RunConfig
from ebs_backup.exceptions import InventoryError
from ebs_backup.models import RunSummary
from ebs_backup.reporting import print_run_settings, print_run_summary
from tests.assertions import assert_equal
from tests.ebs_backup_test_utils import make_client_error


def _empty_ec2_client():
    client = MagicMock()
    client.get_paginator.return_value.paginate.return_value = [{}]
    return client


class TestParseArgs:
    """Tests for argument parsing."""

    def test_short_flags_map_to_run_config(self):
        """Every short flag is accepted."""
        args = parse_args(["eu-west-1", "-b", "-t", "-p", "-a", "-x", "-n", "-d", "-v"])

        assert_equal(
            build_run_config(args),
            RunConfig(
                region="eu-west-1",
                backup_enabled=True,
                tagged_only=True,
                purge_attached=True,
                purge_automated_only=True,
                purge_orphaned=True,
                purge_unattached=True,
                dry_run=True,
            ),
        )
        assert args.verbose is True

    def test_defaults_are_all_off(self):
        """No flags means no stage runs."""
        config = build_run_config(parse_args(["us-east-1"]))
        assert config.backup_enabled is False
        assert config.any_purge is False
        assert config.dry_run is False

    def test_region_from_environment(self, monkeypatch):
        """The region falls back to AWS_DEFAULT_REGION."""
        monkeypatch.setenv("AWS_DEFAULT_REGION", "ap-south-1")
        assert_equal(parse_args(["--backup"]).region, "ap-south-1")

    def test_missing_region_is_an_error(self, monkeypatch):
        """Without region argument or environment the parser exits."""
        monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)
        monkeypatch.delenv("AWS_REGION", raising=False)
        with pytest.raises(SystemExit):
            parse_args(["--backup"])

    def test_negative_api_delay_is_an_error(self):
        """Negative delays are rejected."""
        with pytest.raises(SystemExit):
            parse_args(["eu-west-1", "--api-delay", "-1"])

    def test_version(self, capsys):
        """--version prints the tool version."""
        with pytest.raises(SystemExit):
            parse_args(["--version"])
        assert "0.2.0" in capsys.readouterr().out


class TestReporting:
    """Tests for operator-facing output."""

    def test_print_run_settings(self, capsys):
        """The banner reflects enabled and disabled stages."""
        config = RunConfig(
            region="eu-west-1",
            backup_enabled=True,
            tagged_only=True,
            purge_attached=True,
            purge_automated_only=True,
            dry_run=True,
        )

        print_run_settings(config, datetime(2025, 3, 20, tzinfo=timezone.utc))

        out = capsys.readouterr().out
        assert "Selected region: eu-west-1" in out
        assert "Will perform backups" in out
        assert "Backup=true" in out
        assert "Purging old backups of attached volumes" in out
        assert "Purging automated backups only" in out
        assert "Won't purge backups of no longer existing volumes" in out
        assert "Dry run" in out
        assert "ignored" not in out

    def test_automated_only_without_purge_is_flagged(self, capsys):
        """-a alone has nothing to restrict and the banner says so."""
        config = build_run_config(parse_args(["eu-west-1", "-b", "-a"]))

        print_run_settings(config, datetime(2025, 3, 20, tzinfo=timezone.utc))

        out = capsys.readouterr().out
        assert "Automated-only purging ignored: no purge option selected" in out
        assert "Purging automated backups only" not in out

    def test_print_run_summary(self, capsys):
        """Both counters are printed."""
        print_run_summary(RunSummary(snapshots_deleted=4, volumes_snapshotted=2))

        out = capsys.readouterr().out
        assert "4 snapshots deleted." in out
        assert "2 volumes snapshots created." in out
        assert "SIMULATED" not in out


class TestMain:
    """Tests for the main entry point."""

    @patch("ebs_backup.cli.create_ec2_client")
    def test_main_success(self, mock_create_client, capsys):
        """A run against an empty account exits 0 and prints the summary."""
        mock_create_client.return_value = _empty_ec2_client()

        exit_code = main(["eu-west-1", "-b", "-p", "-x", "-n", "--api-delay", "0"])

        assert_equal(exit_code, 0)
        mock_create_client.assert_called_once_with("eu-west-1", env_path=None)
        assert "0 snapshots deleted." in capsys.readouterr().out

    @patch("ebs_backup.cli.create_ec2_client")
    def test_main_fatal_error_exits_non_zero(self, mock_create_client, capsys):
        """Unrecovered errors are logged and mapped to exit code 1."""
        client = MagicMock()
        client.get_paginator.return_value.paginate.side_effect = make_client_error(
            "RequestLimitExceeded", 503, "DescribeInstances"
        )
        mock_create_client.return_value = client

        exit_code = main(["eu-west-1", "-b", "--api-delay", "0"])

        assert_equal(exit_code, 1)
        assert "snapshots deleted." not in capsys.readouterr().out

    @patch("ebs_backup.cli.SnapshotLifecycle")
    @patch("ebs_backup.cli.create_ec2_client")
    def test_main_passes_env_file(self, mock_create_client, mock_lifecycle):
        """--env-file reaches the client factory."""
        mock_lifecycle.return_value.run.return_value = RunSummary()

        assert_equal(main(["eu-west-1", "--env-file", "/tmp/creds.env"]), 0)

        mock_create_client.assert_called_once_with("eu-west-1", env_path="/tmp/creds.env")

    @patch("ebs_backup.cli.SnapshotLifecycle")
    @patch("ebs_backup.cli.create_ec2_client")
    def test_main_inventory_error(self, _mock_create_client, mock_lifecycle, caplog):
        """The provider error text is surfaced to the operator."""
        mock_lifecycle.return_value.run.side_effect = InventoryError(
            "describe_volumes", Exception("Throttling")
        )

        assert_equal(main(["eu-west-1", "-p"]), 1)
        assert "Throttling" in caplog.text
