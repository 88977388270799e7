"""Unit tests for CLI argument parsing and command dispatch."""
from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from clm_capture.cli import _run, build_parser
from clm_capture.config import AppConfig, NotificationsConfig


def _no_telegram(config: AppConfig) -> AppConfig:
    return replace(config, notifications=NotificationsConfig())


class TestBuildParser:
    def test_capture_command(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["capture", "a.json", "b.json"])
        assert args.command == "capture"
        assert args.pages == ["a.json", "b.json"]

    def test_capture_needs_a_page(self) -> None:
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["capture"])

    def test_history_defaults(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["history"])
        assert args.protocol is None
        assert args.pair is None
        assert args.limit == 10

    def test_history_filters(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["history", "--protocol", "Orca", "--pair", "SOL/USDC", "--limit", "3"])
        assert args.protocol == "Orca"
        assert args.pair == "SOL/USDC"
        assert args.limit == 3

    def test_prune_days(self) -> None:
        parser = build_parser()
        assert parser.parse_args(["prune"]).days is None
        assert parser.parse_args(["prune", "--days", "7"]).days == 7

    def test_config_flag(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["--config", "/tmp/c.yaml", "stats"])
        assert args.config == "/tmp/c.yaml"

    def test_log_level_flag(self) -> None:
        parser = build_parser()
        args = parser.parse_args(["--log-level", "DEBUG", "stats"])
        assert args.log_level == "DEBUG"

    def test_no_command(self) -> None:
        parser = build_parser()
        args = parser.parse_args([])
        assert args.command is None


class TestRun:
    @pytest.mark.asyncio
    async def test_capture_then_history(
        self,
        sample_app_config: AppConfig,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        dump = tmp_path / "orca.json"
        dump.write_text(
            json.dumps(
                {
                    "url": "https://www.orca.so/portfolio",
                    "title": "Orca Portfolio",
                    "text": "Total Value $1,234.56",
                    "regions": {
                        "block": ["Total Value\n$1,234.56"],
                        "row": [
                            {
                                "text": "SOL/USDC 0.25% $1,234.56 $12.34 12.5% 10.0 20.0 15.0",
                                "cells": ["SOL/USDC\n0.25%", "$1,234.56", "$12.34", "12.5%", "10.0\n20.0", "15.0"],
                            }
                        ],
                    },
                }
            )
        )
        config = _no_telegram(sample_app_config)

        parser = build_parser()
        code = await _run(parser.parse_args(["capture", str(dump)]), config)
        assert code == 0
        captured = json.loads(capsys.readouterr().out)
        assert captured[0]["capture"]["protocol"] == "Orca"
        assert captured[0]["validation"]["passed"] is True

        code = await _run(parser.parse_args(["history", "--pair", "SOL/USDC"]), config)
        assert code == 0
        history = json.loads(capsys.readouterr().out)
        assert len(history) == 1
        assert history[0]["data"]["positions"][0]["pair"] == "SOL/USDC"

    @pytest.mark.asyncio
    async def test_unsupported_page_exit_code(
        self,
        sample_app_config: AppConfig,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        dump = tmp_path / "other.json"
        dump.write_text(json.dumps({"url": "https://example.com/", "text": "hello"}))
        parser = build_parser()
        code = await _run(parser.parse_args(["capture", str(dump)]), _no_telegram(sample_app_config))
        assert code == 2
        assert json.loads(capsys.readouterr().out) == [None]

    @pytest.mark.asyncio
    async def test_stats_on_empty_store(
        self, sample_app_config: AppConfig, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = await _run(build_parser().parse_args(["stats"]), _no_telegram(sample_app_config))
        assert code == 0
        stats = json.loads(capsys.readouterr().out)
        assert stats["totalPositions"] == 0
        assert stats["protocols"] == []
