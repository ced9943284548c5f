"""Tests for the console session driving the feed end to end."""

import asyncio
from unittest.mock import patch

import pytest
import yaml

from stocknews.config import FeedConfig
from stocknews.feed.controller import PagedFeedController
from stocknews.feed.intents import FeedScreen
from stocknews.models import FeedFailure, FeedSuccess
from stocknews.store.base import QueryError, QueryErrorKind
from stocknews.store.fixture import FixtureQueryService
from stocknews.__main__ import main, run_session


class TestRunSession:
    def _screen(self, documents, page_size=5):
        config = FeedConfig(page_size=page_size)
        controller = PagedFeedController(FixtureQueryService(documents=documents), config)
        return FeedScreen(controller, config)

    def test_pages_until_end(self, make_document, capsys):
        screen = self._screen([make_document(i) for i in range(1, 8)])
        result = asyncio.run(run_session(screen, "AAPL", max_pages=10, tz_name="America/New_York"))

        assert isinstance(result, FeedSuccess)
        assert len(result.state.articles) == 7
        assert result.state.end_reached is True
        out = capsys.readouterr().out
        assert "AAPL headline 7" in out
        assert "end of feed" in out

    def test_page_limit(self, make_document):
        screen = self._screen([make_document(i) for i in range(1, 20)], page_size=3)
        result = asyncio.run(run_session(screen, "AAPL", max_pages=2, tz_name="UTC"))
        assert len(result.state.articles) == 6
        assert result.state.end_reached is False

    def test_initial_failure(self, capsys):
        screen = self._screen([])

        async def fail(query):
            raise QueryError(QueryErrorKind.NETWORK_UNAVAILABLE)

        screen.controller._service.query = fail
        result = asyncio.run(run_session(screen, "AAPL", max_pages=3, tz_name="UTC"))

        assert isinstance(result, FeedFailure)
        assert "Network error" in capsys.readouterr().out


class TestMain:
    @pytest.fixture
    def run_main(self, tmp_path, monkeypatch, mock_secrets):
        def run(settings):
            path = tmp_path / "settings.yaml"
            path.write_text(yaml.safe_dump(settings))
            monkeypatch.setattr("sys.argv", ["stocknews", "--config", str(path)])
            with patch("stocknews.__main__.Secrets", return_value=mock_secrets), \
                 patch("stocknews.__main__.configure_logging"), \
                 patch("stocknews.__main__.asyncio.run") as mock_run:
                with pytest.raises(SystemExit) as exc_info:
                    main()
            return exc_info.value.code, mock_run

        return run

    def test_missing_fixture_file_exits(self, tmp_path, run_main, capsys):
        missing = tmp_path / "nowhere.yaml"
        code, mock_run = run_main(
            {"providers": {"store": "fixture"}, "fixture": {"path": str(missing)}}
        )

        assert code == 1
        mock_run.assert_not_called()
        assert "Failed to create 'fixture' store" in capsys.readouterr().out

    def test_unknown_store_exits(self, run_main, capsys):
        code, mock_run = run_main({"providers": {"store": "mongo"}})

        assert code == 1
        mock_run.assert_not_called()
        assert "Unknown store provider: 'mongo'" in capsys.readouterr().out

    def test_missing_config_exits(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("sys.argv", ["stocknews", "--config", str(tmp_path / "absent.yaml")])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "Failed to load config" in capsys.readouterr().out
