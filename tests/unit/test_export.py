import csv
import io

import pytest

from stock_metadata.core.types import MetadataResult
from stock_metadata.export import export_csv, render_csv


@pytest.fixture
def results():
    return (
        MetadataResult(
            "beach.jpg", 'A "great" shot', ("sand", "sea", "sky"), "Landscapes"
        ),
        MetadataResult("cat.png", "Sleeping cat", ("cat", "pet"), "Animals"),
    )


@pytest.mark.unit
def test_render_quotes_every_field_and_doubles_embedded_quotes(results):
    lines = render_csv(results).split("\n")

    assert lines[0] == "File Name,Title,Keywords,Category"
    assert lines[1] == '"beach.jpg","A ""great"" shot","sand;sea;sky","Landscapes"'
    assert lines[2] == '"cat.png","Sleeping cat","cat;pet","Animals"'


@pytest.mark.unit
def test_keywords_with_quotes_are_escaped_too():
    row = render_csv(
        [MetadataResult("a.jpg", "Title", ('12" vinyl', "record"), "Hobbies and Leisure")]
    ).split("\n")[1]
    assert '"12"" vinyl;record"' in row


@pytest.mark.unit
def test_commas_and_line_breaks_survive_a_csv_reader():
    result = MetadataResult(
        "a, b.jpg", 'Line one\nline "two"', ("x,y", "z"), "Landscapes"
    )

    rows = list(csv.reader(io.StringIO(render_csv([result]))))

    assert rows == [
        ["File Name", "Title", "Keywords", "Category"],
        ["a, b.jpg", 'Line one\nline "two"', "x,y;z", "Landscapes"],
    ]


@pytest.mark.unit
def test_export_writes_utf8_file(tmp_path, results):
    target = tmp_path / "out.csv"

    written = export_csv(results, target)

    assert written == target
    assert target.read_text(encoding="utf-8") == render_csv(results)


@pytest.mark.unit
def test_export_with_no_results_creates_nothing(tmp_path):
    target = tmp_path / "out.csv"

    assert export_csv((), target) is None
    assert not target.exists()
