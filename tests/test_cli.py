"""Tests for cli.py -- Click CLI interface."""

import json
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from game_lookup.cli import choose_interactively, main
from game_lookup.credentials import CredentialStore
from game_lookup.models import CatalogRecord, Credential

HADES = {"id": 113112, "name": "Hades", "slug": "hades--1", "first_release_date": 1600300800,
         "genres": [{"name": "Role-playing (RPG)"}, {"name": "Indie"}], "rating": 92.6}
HADES_II = {"id": 2, "name": "Hades II"}


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Keep tokens, logs and .env lookups inside tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("TOKEN_PATH", str(tmp_path / "igdbToken.json"))
    monkeypatch.setenv("IGDB_CLIENT_ID", "test-id")
    monkeypatch.setenv("IGDB_CLIENT_SECRET", "test-secret")
    for var in ("AUTO_SELECT_THRESHOLD", "LOG_LEVEL", "API_URL", "AUTH_URL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def cached_token(tmp_path):
    CredentialStore(tmp_path / "igdbToken.json").save(Credential(token="cached"))


def _response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


class TestHelpOutput:
    def test_help_flag(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Look up a game on IGDB" in result.output
        assert "--first" in result.output
        assert "--format" in result.output
        assert "--token-path" in result.output


class TestLookupFlow:
    @patch("game_lookup.api.igdb.httpx.post")
    def test_slug_match_prints_display_fields(self, mock_post, cached_token):
        mock_post.return_value = _response([HADES])
        runner = CliRunner()
        result = runner.invoke(main, ["https://www.igdb.com/games/hades--1"], input="1\n")
        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert '"title_sanitized": "Hades"' in result.output
        assert '"genres": "Role-playing (RPG), Indie"' in result.output
        assert '"rating": "93"' in result.output
        assert "Hades (2020)" in result.output

    @patch("game_lookup.api.igdb.httpx.post")
    def test_variables_format(self, mock_post, cached_token):
        mock_post.return_value = _response([HADES])
        runner = CliRunner()
        result = runner.invoke(main, ["hades", "--format", "variables"], input="1\n")
        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert '"fileName": "Hades"' in result.output
        assert '"slug": "hades--1"' in result.output

    @patch("game_lookup.api.igdb.httpx.post")
    def test_prompts_for_query(self, mock_post, cached_token):
        mock_post.return_value = _response([HADES])
        runner = CliRunner()
        result = runner.invoke(main, [], input="Hades\n1\n")
        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert "Enter IGDB game name or URL" in result.output
        body = mock_post.call_args_list[0][1]["content"]
        assert body.endswith('where slug = "hades"; limit 1;')

    @patch("game_lookup.api.igdb.httpx.post")
    def test_first_auto_selects_best_match(self, mock_post, cached_token):
        mock_post.side_effect = [_response([]), _response([HADES_II, HADES])]
        runner = CliRunner()
        result = runner.invoke(main, ["Hades", "--first"])
        assert result.exit_code == 0, result.output + str(result.exception or "")
        assert "Select a game" not in result.output
        assert '"title_sanitized": "Hades"' in result.output

    @patch("game_lookup.session.fetch_token")
    @patch("game_lookup.api.igdb.httpx.post")
    def test_mints_token_when_none_cached(self, mock_post, mock_fetch, tmp_path):
        mock_fetch.return_value = Credential(token="minted")
        mock_post.return_value = _response([HADES])
        runner = CliRunner()
        result = runner.invoke(main, ["hades"], input="1\n")
        assert result.exit_code == 0, result.output + str(result.exception or "")
        stored = json.loads((tmp_path / "igdbToken.json").read_text())
        assert stored == {"igdbToken": "minted"}


class TestErrors:
    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("IGDB_CLIENT_SECRET")
        runner = CliRunner()
        result = runner.invoke(main, ["hades"])
        assert result.exit_code == 1
        assert "Missing IGDB credentials" in result.output

    def test_empty_input(self, cached_token):
        runner = CliRunner()
        result = runner.invoke(main, [], input="\n")
        assert result.exit_code == 1
        assert "No input entered." in result.output

    @patch("game_lookup.api.igdb.httpx.post")
    def test_cancelled_choice(self, mock_post, cached_token):
        mock_post.return_value = _response([HADES])
        runner = CliRunner()
        result = runner.invoke(main, ["hades"], input="0\n")
        assert result.exit_code == 1
        assert "No choice selected." in result.output

    @patch("game_lookup.api.igdb.httpx.post")
    def test_no_results(self, mock_post, cached_token):
        mock_post.return_value = _response([])
        runner = CliRunner()
        result = runner.invoke(main, ["zzzz"])
        assert result.exit_code == 1
        assert "No results found for 'zzzz'." in result.output
        assert mock_post.call_count == 2

    @patch("game_lookup.session.fetch_token")
    @patch("game_lookup.api.igdb.httpx.post")
    def test_api_failure_after_retry(self, mock_post, mock_fetch, cached_token):
        mock_post.return_value = _response({"message": "Authorization Failure"})
        mock_fetch.return_value = Credential(token="fresh")
        runner = CliRunner()
        result = runner.invoke(main, ["hades"])
        assert result.exit_code == 1
        assert "API request failed after retry." in result.output
        assert mock_post.call_count == 2
        mock_fetch.assert_called_once()

    def test_unreadable_token_file(self, tmp_path):
        (tmp_path / "igdbToken.json").write_bytes(b'{"igdbToken": "\xff\xfe"}')
        runner = CliRunner()
        result = runner.invoke(main, ["hades"])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error: Failed to read credential file" in result.output


class TestChooseInteractively:
    def test_ranked_best_first(self):
        records = [CatalogRecord(id=1, name="Hades II"), CatalogRecord(id=2, name="Hades")]
        with patch("game_lookup.cli.click.prompt", return_value=1) as mock_prompt:
            chosen = choose_interactively(records, "hades")
        assert chosen.id == 2
        mock_prompt.assert_called_once()

    def test_zero_cancels(self):
        with patch("game_lookup.cli.click.prompt", return_value=0):
            assert choose_interactively([CatalogRecord(id=1)], "x") is None

    def test_auto_select_below_threshold_falls_back_to_prompt(self):
        records = [CatalogRecord(id=1, name="Something Else")]
        with patch("game_lookup.cli.click.prompt", return_value=1) as mock_prompt:
            chosen = choose_interactively(records, "hades", auto_select=True, threshold=90)
        assert chosen.id == 1
        mock_prompt.assert_called_once()
