"""Unit tests for the cws-publisher CLI glue (client replaced by a fake)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cws_publisher import cli
from cws_publisher.store_client.errors import HttpError
from cws_publisher.store_client.models import (
    ItemStatusSnapshot,
    PublishResponse,
    PublishType,
    UploadResponse,
)
from cws_publisher.utils import config as config_mod


class _FakeClient:
    def __init__(self, *, upload_state: str = "SUCCEEDED", poll_state: str = "SUCCEEDED") -> None:
        self.upload_state = upload_state
        self.poll_state = poll_state
        self.calls: list[tuple] = []

    def upload(self, item_id, path):  # noqa: ANN001
        self.calls.append(("upload", item_id, Path(path).name))
        return UploadResponse.from_api({"crxVersion": "2.0", "uploadState": self.upload_state})

    def fetch_status(self, item_id):  # noqa: ANN001
        self.calls.append(("fetch_status", item_id))
        return ItemStatusSnapshot.from_api(
            {
                "itemId": item_id,
                "lastAsyncUploadState": self.poll_state,
                "publishedItemRevisionStatus": {
                    "state": "PUBLISHED",
                    "distributionChannels": [{"crxVersion": "1.9", "deployPercentage": 40}],
                },
            }
        )

    def publish(self, item_id, request):  # noqa: ANN001
        self.calls.append(("publish", item_id, request))
        return PublishResponse.from_api({"state": "PENDING_REVIEW", "itemId": item_id})

    def cancel_submission(self, item_id):  # noqa: ANN001
        self.calls.append(("cancel_submission", item_id))

    def set_deploy_percentage(self, item_id, percentage):  # noqa: ANN001
        self.calls.append(("set_deploy_percentage", item_id, percentage))


@pytest.fixture()
def fake_client(monkeypatch: pytest.MonkeyPatch) -> _FakeClient:
    client = _FakeClient()
    monkeypatch.setattr(cli, "_build_client", lambda args: client)
    return client


@pytest.fixture()
def package(tmp_path: Path) -> Path:
    path = tmp_path / "ext.zip"
    path.write_bytes(b"PK\x03\x04" + b"\x00" * 2044)
    return path


# --------------------------------------------------------------------------- #
# upload                                                                      #
# --------------------------------------------------------------------------- #
def test_upload_dry_run_makes_no_calls(fake_client, package, capsys) -> None:
    assert cli.main(["--dry", "upload", "item1", str(package)]) == 0
    assert fake_client.calls == []
    out = capsys.readouterr().out
    assert "Dry run" in out and "2 KB" in out


def test_upload_waits_then_auto_publishes(fake_client, package, capsys) -> None:
    fake_client.upload_state = "IN_PROGRESS"
    rc = cli.main(["upload", "item1", str(package), "--auto-publish", "-d", "20", "-p", "staged"])

    assert rc == 0
    names = [c[0] for c in fake_client.calls]
    assert names == ["upload", "fetch_status", "publish"]
    request = fake_client.calls[2][2]
    assert request.publish_type is PublishType.STAGED_PUBLISH
    assert request.deploy_infos[0].deploy_percentage == 20
    out = capsys.readouterr().out
    assert "Package version: 2.0" in out
    assert "Status: PENDING_REVIEW" in out


def test_upload_failed_processing_exits_nonzero(fake_client, package, capsys) -> None:
    fake_client.upload_state = "IN_PROGRESS"
    fake_client.poll_state = "FAILED"
    assert cli.main(["upload", "item1", str(package), "--auto-publish"]) == 1
    assert "publish" not in [c[0] for c in fake_client.calls]
    assert "Upload processing failed: FAILED" in capsys.readouterr().err


def test_upload_missing_file(fake_client, capsys) -> None:
    assert cli.main(["upload", "item1", "/nonexistent.zip"]) == 1
    assert fake_client.calls == []
    assert "File not found" in capsys.readouterr().err


def test_upload_rejects_short_max_wait_before_network(fake_client, package, capsys) -> None:
    assert cli.main(["upload", "item1", str(package), "-w", "2"]) == 1
    assert fake_client.calls == []
    assert "at least 5 seconds" in capsys.readouterr().err


def test_upload_rejects_bad_percentage_before_network(fake_client, package) -> None:
    assert cli.main(["upload", "item1", str(package), "--auto-publish", "-d", "150"]) == 1
    assert fake_client.calls == []


# --------------------------------------------------------------------------- #
# publish / status / cancel / deploy                                          #
# --------------------------------------------------------------------------- #
def test_publish_full_rollout(fake_client) -> None:
    assert cli.main(["publish", "item1", "--skip-review"]) == 0
    request = fake_client.calls[0][2]
    assert request.deploy_infos is None
    assert request.skip_review is True


def test_status_renders_snapshot(fake_client, capsys) -> None:
    assert cli.main(["status", "item1"]) == 0
    out = capsys.readouterr().out
    assert "Published Version:" in out
    assert "State: PUBLISHED" in out
    assert "Deploy %: 40%" in out


def test_status_watch_interval_validated(fake_client, capsys) -> None:
    assert cli.main(["status", "item1", "--watch", "--interval", "1"]) == 1
    assert fake_client.calls == []


def test_cancel(fake_client) -> None:
    assert cli.main(["cancel", "item1"]) == 0
    assert fake_client.calls == [("cancel_submission", "item1")]


def test_deploy_out_of_range(fake_client, capsys) -> None:
    assert cli.main(["deploy", "item1", "150"]) == 1
    assert fake_client.calls == []
    assert "between 0 and 100" in capsys.readouterr().err


@pytest.mark.parametrize("raw", ["--5", "²"])
def test_deploy_malformed_percentage(fake_client, capsys, raw) -> None:
    assert cli.main(["--dry", "deploy", "item1", "--", raw]) == 1
    assert fake_client.calls == []
    assert "Deploy percentage update failed: Deploy percentage must be" in capsys.readouterr().err


def test_deploy(fake_client) -> None:
    assert cli.main(["deploy", "item1", "35"]) == 0
    assert fake_client.calls == [("set_deploy_percentage", "item1", 35)]


def test_http_error_reported(monkeypatch, capsys) -> None:
    class _Failing(_FakeClient):
        def cancel_submission(self, item_id):  # noqa: ANN001
            raise HttpError(400, "no active submission")

    monkeypatch.setattr(cli, "_build_client", lambda args: _Failing())
    assert cli.main(["cancel", "item1"]) == 1
    assert "Cancellation failed: HTTP 400: no active submission" in capsys.readouterr().err


# --------------------------------------------------------------------------- #
# configure / config errors                                                   #
# --------------------------------------------------------------------------- #
def test_configure_with_flags(tmp_path: Path, capsys) -> None:
    target = tmp_path / "config.json"
    rc = cli.main(
        [
            "--config",
            str(target),
            "configure",
            "--client-id",
            "cid",
            "--client-secret",
            "sec-d41d8cd9",
            "--refresh-token",
            "rt",
            "--publisher-id",
            "pub",
        ]
    )
    assert rc == 0
    assert json.loads(target.read_text(encoding="utf-8"))["publisherId"] == "pub"
    assert "sec-d41d8cd9" not in capsys.readouterr().out


def test_configure_prompts_for_missing(monkeypatch, tmp_path: Path) -> None:
    target = tmp_path / "config.json"
    monkeypatch.setattr("builtins.input", lambda prompt: "typed-" + prompt.split()[-2].lower())
    monkeypatch.setattr(cli.getpass, "getpass", lambda prompt: "hidden")
    assert cli.main(["--config", str(target), "configure", "--client-id", "cid"]) == 0
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["clientId"] == "cid"
    assert data["clientSecret"] == "hidden"
    assert data["refreshToken"] == "hidden"
    assert data["publisherId"] == "typed-publisher"


def test_missing_config_reported(monkeypatch, tmp_path: Path, capsys) -> None:
    monkeypatch.setattr(config_mod, "DEFAULT_CONFIG_PATH", tmp_path / "none.json")
    for name in ("CWS_CONFIG", "CWS_CLIENT_ID", "CWS_CLIENT_SECRET", "CWS_REFRESH_TOKEN", "CWS_PUBLISHER_ID"):
        monkeypatch.delenv(name, raising=False)
    assert cli.main(["cancel", "item1"]) == 1
    assert "Config file not found" in capsys.readouterr().err
