"""Tests for the ``python -m urlmd`` entry point."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from urlmd.__main__ import main
from urlmd.query import UpstreamError


@pytest.fixture
def fetcher_cls():
    with patch("urlmd.__main__.MarkdownFetcher") as cls:
        yield cls


class TestCli:
    def test_single_url_to_stdout(self, fetcher_cls, capsys):
        fetcher_cls.return_value.convert.return_value = "# Title\n\nBody"
        assert main(["--url", "https://example.com/"]) == 0
        assert capsys.readouterr().out == "# Title\n\nBody\n"
        fetcher_cls.return_value.convert.assert_called_once_with("https://example.com/")

    def test_options_forwarded(self, fetcher_cls, capsys):
        fetcher_cls.return_value.convert.return_value = "x\n"
        main(["--url", "https://example.com/", "--user-agent", "bot/1.0", "--timeout", "5"])
        fetcher_cls.assert_called_once_with(user_agent="bot/1.0", fetch_timeout=5.0)
        assert capsys.readouterr().out == "x\n"

    def test_multiple_urls_joined(self, fetcher_cls, capsys):
        fetcher_cls.return_value.convert_batch.return_value = ["one", "two"]
        assert main(["--url", "https://a.example/", "--url", "https://b.example/"]) == 0
        fetcher_cls.return_value.convert_batch.assert_called_once_with(
            ["https://a.example/", "https://b.example/"], on_error="raise",
        )
        assert capsys.readouterr().out == "one\n\n---\n\ntwo\n"

    def test_out_file(self, fetcher_cls, tmp_path, capsys):
        fetcher_cls.return_value.convert.return_value = "# Saved"
        target = tmp_path / "nested" / "page.md"
        assert main(["--url", "https://example.com/", "--out", str(target)]) == 0
        assert target.read_text(encoding="utf-8") == "# Saved"
        assert capsys.readouterr().out == ""

    def test_fetch_error_exit_code(self, fetcher_cls, capsys):
        fetcher_cls.return_value.convert.side_effect = UpstreamError(
            "Response status indicates an error: 404 when fetching https://example.com/",
            url="https://example.com/",
            status=404,
        )
        assert main(["--url", "https://example.com/"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "404" in captured.err

    def test_invalid_url_exit_code(self, fetcher_cls, capsys):
        fetcher_cls.return_value.convert.side_effect = ValueError("URL must be absolute: nope")
        assert main(["--url", "nope"]) == 1
        assert "URL must be absolute" in capsys.readouterr().err

    def test_url_required(self, capsys):
        with pytest.raises(SystemExit):
            main([])
