"""
Tests for the organize.py command line.
"""
import json
from unittest.mock import patch

import pytest

import organize
from bookmark_ai import UpstreamError
from bookmark_ai.config import AIConfig
from bookmark_ai.models import AnalysisResult, Bookmark

INPUT = """<!DOCTYPE NETSCAPE-Bookmark-file-1>
<DL><p>
    <DT><A HREF="https://docs.python.org" ADD_DATE="1700000000">Python docs</A>
    <DT><A HREF="https://docs.python.org/" ADD_DATE="1700000001">Python docs again</A>
    <DT><A HREF="https://cooking.example" ADD_DATE="1700000002">Recipes</A>
    <DT><A HREF="https://late.example" ADD_DATE="1700000003">Late</A>
</DL><p>
"""


@pytest.fixture(autouse=True)
def no_dotenv():
    with patch('bookmark_ai.config.load_dotenv'):
        yield


@pytest.fixture
def infile(tmp_path):
    path = tmp_path / "bookmarks.html"
    path.write_text(INPUT, encoding="utf-8")
    return path


def fake_analyze(bookmarks, config):
    working_set = bookmarks[: config.analyze_limit]
    return AnalysisResult(
        categories=["Docs", "Other"],
        bookmarks=[b.with_category("Docs" if "docs" in b.url else "Other") for b in working_set],
    )


class TestDedupe:
    def test_ignores_case_and_trailing_slash(self):
        first = Bookmark("a", "https://Example.com/", 1)
        result = organize.dedupe([first, Bookmark("b", "https://example.com", 2), Bookmark("c", "https://c", 3)])
        assert [b.title for b in result] == ["a", "c"]


class TestMain:
    @patch('organize.analyze', side_effect=fake_analyze)
    def test_categorize_writes_html_and_mapping(self, mock_analyze, infile, tmp_path, capsys):
        outfile = tmp_path / "organized.html"

        assert organize.main([str(infile), str(outfile), "--model", "m"]) == 0

        sent, = mock_analyze.call_args.args
        assert [b.title for b in sent] == ["Python docs", "Recipes", "Late"]
        assert mock_analyze.call_args.kwargs["config"].model == "m"
        html = outfile.read_text(encoding="utf-8")
        assert "<H3>Docs</H3>" in html and "https://late.example" in html
        mapping = json.loads((tmp_path / "organized_mapping.json").read_text(encoding="utf-8"))
        assert mapping["categories"] == ["Docs", "Other"]
        assert mapping["bookmarks"][0] == {
            "title": "Python docs", "url": "https://docs.python.org", "addDate": 1700000000000, "category": "Docs",
        }
        assert "All 3 bookmarks were preserved" in capsys.readouterr().out

    @patch('organize.analyze', side_effect=fake_analyze)
    def test_overflow_goes_to_not_analyzed_folder(self, mock_analyze, infile, tmp_path):
        outfile = tmp_path / "organized.html"

        with patch.object(organize.AIConfig, 'from_env', return_value=AIConfig(api_key="k", analyze_limit=2)):
            assert organize.main([str(infile), str(outfile)]) == 0

        html = outfile.read_text(encoding="utf-8")
        assert html.index("<H3>Not analyzed</H3>") < html.index("https://late.example")

    @patch('organize.analyze', side_effect=UpstreamError("The completion endpoint returned HTTP 500.", 500))
    def test_typed_error_exits_with_status_1(self, mock_analyze, infile, tmp_path, capsys):
        outfile = tmp_path / "organized.html"

        assert organize.main([str(infile), str(outfile)]) == 1
        assert "HTTP 500" in capsys.readouterr().out
        assert not outfile.exists()

    def test_empty_file_exits_with_status_1(self, tmp_path):
        infile = tmp_path / "empty.html"
        infile.write_text("<html></html>", encoding="utf-8")

        assert organize.main([str(infile), str(tmp_path / "out.html")]) == 1

    @patch('organize.ask')
    def test_ask_reads_mapping(self, mock_ask, tmp_path, capsys):
        mapping = tmp_path / "organized_mapping.json"
        mapping.write_text(json.dumps({
            "categories": ["Docs", "Other"],
            "bookmarks": [{"title": "Python docs", "url": "https://docs.python.org", "addDate": 1, "category": "Docs"}],
        }), encoding="utf-8")
        mock_ask.side_effect = lambda query, bookmarks, config: bookmarks

        assert organize.main([str(mapping), "--ask", "python"]) == 0

        query, categorized = mock_ask.call_args.args
        assert query == "python"
        assert categorized[0].category == "Docs"
        assert "1. [Docs] Python docs - https://docs.python.org" in capsys.readouterr().out

    @patch('organize.ask', return_value=[])
    @patch('organize.analyze', side_effect=fake_analyze)
    def test_ask_on_html_categorizes_first(self, mock_analyze, mock_ask, infile, capsys):
        assert organize.main([str(infile), "--ask", "cooking"]) == 0

        mock_analyze.assert_called_once()
        assert len(mock_ask.call_args.args[1]) == 3
        assert "0 bookmarks relevant to 'cooking'" in capsys.readouterr().out

    def test_corrupt_mapping_exits_with_status_1(self, tmp_path, capsys):
        mapping = tmp_path / "broken_mapping.json"
        mapping.write_text("{categories: oops", encoding="utf-8")

        assert organize.main([str(mapping), "--ask", "x"]) == 1
        assert "Error reading" in capsys.readouterr().out

    def test_missing_input_exits_with_status_1(self, tmp_path, capsys):
        outfile = tmp_path / "out.html"

        assert organize.main([str(tmp_path / "nope.html"), str(outfile)]) == 1
        assert "Error reading" in capsys.readouterr().out
        assert not outfile.exists()

    def test_outfile_required_without_ask(self, infile):
        with pytest.raises(SystemExit):
            organize.main([str(infile)])
