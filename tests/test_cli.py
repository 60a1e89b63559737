"""Tests for the command-line interface."""

import json

import pytest

from shortlinks.cli import build_parser, main


@pytest.fixture
def template(tmp_path, sample_html):
    path = tmp_path / "newsletter.html"
    path.write_text(sample_html, encoding="utf-8")
    return path


class TestCLI:
    """Test CLI commands against the in-memory store."""

    @pytest.mark.asyncio
    async def test_extract(self, template, capsys):
        code = await main(["--db-url", "memory://", "extract", str(template)])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["count"] == 6
        assert output["urls"] == sorted(output["urls"])

    @pytest.mark.asyncio
    async def test_shorten_to_stdout(self, template, capsys):
        code = await main([
            "--db-url", "memory://",
            "shorten", str(template),
            "--base-url", "https://sho.rt",
        ])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["success"] is True
        assert output["stats"]["locations_rewritten"] == 7
        assert all(r["short_url"].startswith("https://sho.rt/r/") for r in output["replacements"])
        assert "https://example.com/sale" not in output["modified_html"]

    @pytest.mark.asyncio
    async def test_shorten_to_file(self, template, tmp_path, capsys):
        out_path = tmp_path / "out.html"

        code = await main([
            "--db-url", "memory://",
            "--path-prefix", "/go",
            "shorten", str(template),
            "--base-url", "https://sho.rt",
            "--output", str(out_path),
        ])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert "modified_html" not in output
        assert output["output"] == str(out_path)
        assert "https://sho.rt/go/" in out_path.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_shorten_invalid_base_url(self, template, capsys):
        code = await main(["--db-url", "memory://", "shorten", str(template), "--base-url", "sho.rt"])

        assert code == 1
        assert "Invalid base URL" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path, capsys):
        code = await main(["--db-url", "memory://", "extract", str(tmp_path / "missing.html")])

        assert code == 1
        assert json.loads(capsys.readouterr().err)["success"] is False

    @pytest.mark.asyncio
    async def test_invalid_utf8_file(self, tmp_path, capsys):
        path = tmp_path / "bad.html"
        path.write_bytes(b"<p>\xff\xfe</p>")

        code = await main(["--db-url", "memory://", "extract", str(path)])

        assert code == 1
        assert "UTF-8" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_get_unknown_code(self, capsys):
        code = await main(["--db-url", "memory://", "get", "abc123"])

        assert code == 1
        assert "not found" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_health(self, capsys):
        code = await main(["--db-url", "memory://", "health"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["health"]["overall"] is True
        assert output["statistics"]["database"] == "memory"

    @pytest.mark.asyncio
    async def test_no_command(self, capsys):
        assert await main(["--db-url", "memory://"]) == 1

    @pytest.mark.asyncio
    async def test_shorten_uses_short_code_length(self, template, capsys):
        code = await main([
            "--db-url", "memory://",
            "--short-code-length", "9",
            "shorten", str(template),
            "--base-url", "https://sho.rt",
        ])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert all(len(r["short_code"]) == 9 for r in output["replacements"])

    def test_short_code_length_from_env(self, monkeypatch):
        monkeypatch.setenv("SHORT_CODE_LENGTH", "8")

        args = build_parser().parse_args(["list"])

        assert args.short_code_length == 8

    def test_parser_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("PATH_PREFIX", raising=False)
        monkeypatch.delenv("SHORT_CODE_LENGTH", raising=False)

        args = build_parser().parse_args(["list"])

        assert args.db_url.startswith("questdb://")
        assert args.path_prefix == "/r"
        assert args.short_code_length == 6
        assert args.limit == 100
