import pytest

from stock_metadata.exceptions import FileError
from stock_metadata.files import collect_payloads


@pytest.mark.unit
def test_directory_expansion_is_sorted_and_filtered_by_content_type(image_dir):
    (image_dir / ".hidden.jpg").write_bytes(b"x")
    (image_dir / "Thumbs.db").write_bytes(b"x")

    payloads = collect_payloads([image_dir], content_type="image")

    assert [p.name for p in payloads] == [
        "beach_sunset.jpg",
        "city-night.png",
        "forest.jpg",
    ]


@pytest.mark.unit
def test_without_content_type_every_visible_file_is_kept(image_dir):
    names = [p.name for p in collect_payloads([image_dir])]
    assert "notes.txt" in names
    assert len(names) == 4


@pytest.mark.unit
def test_explicit_files_are_always_kept(image_dir):
    payloads = collect_payloads([image_dir / "notes.txt"], content_type="image")
    assert [p.name for p in payloads] == ["notes.txt"]


@pytest.mark.unit
def test_recursive_expansion(image_dir):
    nested = image_dir / "more"
    nested.mkdir()
    (nested / "deep.jpg").write_bytes(b"x")

    flat = collect_payloads([image_dir], content_type="image")
    deep = collect_payloads([image_dir], content_type="image", recursive=True)

    assert "deep.jpg" not in [p.name for p in flat]
    assert "deep.jpg" in [p.name for p in deep]


@pytest.mark.unit
def test_missing_path_is_a_file_error(tmp_path):
    with pytest.raises(FileError, match="does not exist"):
        collect_payloads([tmp_path / "nope"])
