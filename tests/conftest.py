"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

import pytest

from clm_capture.config import (
    AppConfig,
    CaptureConfig,
    FileStoreConfig,
    NotificationsConfig,
    ProtocolConfig,
    StorageConfig,
    SupabaseConfig,
    TelegramConfig,
)
from clm_capture.models import Position, Snapshot, Summary
from clm_capture.page import BLOCK, LINK, ROW, Region, StaticPage

CAPTURED_AT = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_supabase_config() -> SupabaseConfig:
    return SupabaseConfig(url="https://proj.supabase.co", anon_key="anon-key", timeout=10)


@pytest.fixture()
def sample_app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        capture=CaptureConfig(cache_ttl_seconds=30, max_captures=50, retention_days=7),
        storage=StorageConfig(
            backend="file", file=FileStoreConfig(path=str(tmp_path / "captures.json"))
        ),
        protocols={"aerodrome": ProtocolConfig(emission_price=1.25)},
        notifications=NotificationsConfig(
            telegram=TelegramConfig(
                enabled=True,
                alert_bot_token="fake-alert-token",
                log_bot_token="fake-log-token",
                chat_id="12345",
            ),
        ),
    )


SAMPLE_YAML = textwrap.dedent("""\
    capture:
      cache_ttl_seconds: 10
      max_captures: 200
      retention_days: 14
    storage:
      backend: file
      file:
        path: /tmp/captures.json
    protocols:
      aerodrome:
        emission_price: 1.5
        token_map:
          "0xABCDEF0000000000000000000000000000000001": FOO
      hyperion:
        token_map:
          "0x1::foo::Foo": FOO
    notifications:
      telegram:
        enabled: true
        alert_bot_token: "tok1"
        log_bot_token: "tok2"
        chat_id: "999"
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Page fixtures
# ---------------------------------------------------------------------------

PageFactory = Callable[..., StaticPage]


@pytest.fixture()
def make_page() -> PageFactory:
    """Build a StaticPage from block texts, table rows (cell lists) and links."""

    def _make(
        url: str,
        blocks: Sequence[str] = (),
        rows: Sequence[Sequence[str]] = (),
        links: Sequence[Region] = (),
        title: str = "",
    ) -> StaticPage:
        block_regions = [Region(text=b) for b in blocks]
        row_regions = [Region(text="\n".join(cells), cells=tuple(cells)) for cells in rows]
        text = "\n".join([*blocks, *(r.text for r in row_regions), *(l.text for l in links)])
        return StaticPage(
            url=url,
            text=text,
            regions={BLOCK: block_regions, ROW: row_regions, LINK: list(links)},
            title=title,
        )

    return _make


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_position() -> Position:
    return Position(
        pair="SOL/USDC",
        token0="SOL",
        token1="USDC",
        balance=1234.56,
        pending_yield=12.34,
        apy=12.5,
        range_min=10.0,
        range_max=20.0,
        current_price=15.0,
        in_range=True,
        range_status="in-range",
        distance_from_range="+0.00%",
        fee_tier="0.25",
        captured_at=CAPTURED_AT,
    )


@pytest.fixture()
def sample_snapshot(sample_position: Position) -> Snapshot:
    return Snapshot(
        summary=Summary(total_value=2500.0, pending_yield=12.34),
        positions=(sample_position,),
        captured_at=CAPTURED_AT,
    )
