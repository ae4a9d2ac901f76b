"""Unit tests for configuration parsing and the command-line runner."""

import json
from pathlib import Path

import pytest
import requests

from evds_frame import cli
from evds_frame.config import Config
from evds_frame.cache.manager import ResultCache
from evds_frame.remote.client import CACHED_OPERATION, EvdsClient
from evds_frame.remote.index import Index
from evds_frame.remote.urls import UrlBuilder


def items_body(value):
    return json.dumps({"items": [{"Tarih": "2021-1", "VALUE": value}]})


class RoutingSession:
    """Answers per series code; unknown codes get HTTP 404."""

    def __init__(self, bodies):
        self.bodies = bodies
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(url)
        for code, body in self.bodies.items():
            if f"={code}&" in url:
                return _Response(body, 200)
        return _Response("not found", 404)


class _Response:
    def __init__(self, text, status_code):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class TestConfigFromArgs:
    """Test string option handling."""

    def test_defaults(self):
        config = Config.from_args({})
        assert config.start_date == "01-01-2000"
        assert config.end_date == "31-12-2100"
        assert config.cache is True
        assert config.cache_dir == Path(".caches")

    def test_boolean_strings(self):
        config = Config.from_args({"cache": "false", "verbose": "true", "test": "TRUE"})
        assert config.cache is False
        assert config.verbose is True
        assert config.test is True

    def test_text_and_paths(self, tmp_path):
        config = Config.from_args(
            {"start_date": "01-01-2021", "frequency": "monthly", "cache_dir": str(tmp_path), "timeout": "5"}
        )
        assert config.start_date == "01-01-2021"
        assert config.frequency == "monthly"
        assert config.cache_dir == tmp_path
        assert config.timeout == 5.0

    def test_unknown_and_none_ignored(self):
        config = Config.from_args({"color": "blue", "end_date": None})
        assert config.end_date == "31-12-2100"
        assert not hasattr(config, "color")


class TestRun:
    """Test per-index export with failure isolation."""

    @pytest.fixture
    def config(self, tmp_path):
        return Config(
            indexes=["TP.DK.USD.A", "TP.MISSING.X", "TP.DK.EUR.A"],
            cache=False,
            output_dir=tmp_path,
        )

    @pytest.fixture
    def client(self, config):
        session = RoutingSession({"TP.DK.USD.A": items_body("3.45"), "TP.DK.EUR.A": items_body("4.10")})
        return EvdsClient(config, session=session, api_key="secret")

    def test_failure_does_not_stop_other_indexes(self, config, client, tmp_path, caplog):
        failures = cli.run(config, client)

        assert failures == 1
        assert (tmp_path / "data_TpDkUsdA.csv").exists()
        assert (tmp_path / "data_TpDkEurA.csv").exists()
        assert not (tmp_path / "data_TpMissingX.csv").exists()
        assert any("TP.MISSING.X" in r.getMessage() for r in caplog.records)

    def test_bad_response_body_is_isolated(self, config, tmp_path):
        session = RoutingSession({"TP.DK.USD.A": "<html></html>", "TP.DK.EUR.A": items_body("4.10")})
        client = EvdsClient(config, session=session, api_key="secret")
        config.indexes = ["TP.DK.USD.A", "TP.DK.EUR.A"]

        assert cli.run(config, client) == 1
        assert (tmp_path / "data_TpDkEurA.csv").exists()

    def test_corrupt_cache_entry_is_isolated(self, config, tmp_path, monkeypatch):
        """A cache entry that cannot be decoded fails only its own index."""
        monkeypatch.delenv("HTTPS_PROXY", raising=False)
        monkeypatch.delenv("HTTP_PROXY", raising=False)
        config.cache = True
        config.cache_dir = tmp_path / "caches"
        config.indexes = ["TP.DK.USD.A", "TP.DK.EUR.A"]
        session = RoutingSession({"TP.DK.USD.A": items_body("3.45"), "TP.DK.EUR.A": items_body("4.10")})
        client = EvdsClient(config, session=session, api_key="secret")

        url = UrlBuilder(Index("TP.DK.USD.A"), config).get_url()
        fp = ResultCache.fingerprint(CACHED_OPERATION, url, "secret", "")
        client.cache.path_for(fp).write_bytes(b"\xff\xfe\x00bad")

        assert cli.run(config, client) == 1
        assert not (tmp_path / "data_TpDkUsdA.csv").exists()
        assert (tmp_path / "data_TpDkEurA.csv").exists()

    def test_unwritable_output_is_isolated(self, config, client, tmp_path):
        config.output_dir = tmp_path / "missing"
        config.indexes = ["TP.DK.USD.A"]

        assert cli.run(config, client) == 1


class TestMain:
    """Test argument parsing and exit codes."""

    def test_no_indexes(self, capsys):
        assert cli.main([]) == 2
        assert "No indexes provided." in capsys.readouterr().err

    def test_invalid_timeout_is_usage_error(self, capsys):
        """A non-numeric timeout is rejected by argument parsing."""
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["TP.DK.USD.A", "--timeout", "abc"])

        assert excinfo.value.code == 2
        assert "--timeout" in capsys.readouterr().err

    def test_timeout_parsed_as_float(self):
        args = cli.build_parser().parse_args(["A", "--timeout", "5"])
        assert args.timeout == 5.0

    def test_exports_and_exit_code(self, monkeypatch, tmp_path):
        session = RoutingSession({"TP.DK.USD.A": items_body("3.45")})
        monkeypatch.setenv("EVDS_APIKEY", "secret")
        monkeypatch.setattr(
            cli, "EvdsClient", lambda config: EvdsClient(config, session=session)
        )

        code = cli.main(
            [
                "TP.DK.USD.A",
                "--output_dir", str(tmp_path),
                "--cache", "false",
                "--test",
                "--delimiter", ";",
            ]
        )

        assert code == 0
        lines = (tmp_path / "data_TpDkUsdA.csv").read_text(encoding="utf-8").splitlines()
        assert lines == ["Tarih;VALUE", "01-01-2021;3.450000"]

    def test_any_failure_exits_one(self, monkeypatch, tmp_path):
        session = RoutingSession({})
        monkeypatch.setenv("EVDS_APIKEY", "secret")
        monkeypatch.setattr(
            cli, "EvdsClient", lambda config: EvdsClient(config, session=session)
        )

        code = cli.main(["TP.DK.USD.A", "--output_dir", str(tmp_path), "--cache", "false", "--test"])

        assert code == 1

    def test_cache_reused_between_runs(self, monkeypatch, tmp_path):
        session = RoutingSession({"TP.DK.USD.A": items_body("3.45")})
        monkeypatch.setenv("EVDS_APIKEY", "secret")
        monkeypatch.setattr(
            cli, "EvdsClient", lambda config: EvdsClient(config, session=session)
        )
        argv = [
            "TP.DK.USD.A",
            "--output_dir", str(tmp_path),
            "--cache_dir", str(tmp_path / "caches"),
            "--cache",
            "--test",
        ]

        assert cli.main(argv) == 0
        assert cli.main(argv) == 0
        assert len(session.calls) == 1
