from __future__ import annotations

import pytest

from drivecord.core.models import FileReference
from drivecord.logic.file_ids import (
    extract_embed_file_ids,
    extract_file_id,
    extract_file_ids,
    find_urls,
)


def test_duplicate_links_collapse_to_one_id() -> None:
    text = (
        "Check https://drive.google.com/file/d/ABC123/view and "
        "https://drive.google.com/file/d/ABC123/view"
    )

    assert extract_file_ids(text) == [FileReference("ABC123")]


def test_ids_keep_first_occurrence_order() -> None:
    text = (
        "https://docs.google.com/spreadsheets/d/sheet_2/edit then "
        "https://docs.google.com/document/d/doc-1/edit and again "
        "https://drive.google.com/file/d/sheet_2/view"
    )

    assert [ref.file_id for ref in extract_file_ids(text)] == ["sheet_2", "doc-1"]


def test_extraction_is_idempotent() -> None:
    text = (
        "a https://drive.google.com/drive/folders/F1 b "
        "https://docs.google.com/presentation/d/P2/edit#slide=id.p "
        "https://drive.google.com/drive/folders/F1"
    )

    assert extract_file_ids(text) == extract_file_ids(text)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://drive.google.com/file/d/ABC123/view", "ABC123"),
        ("https://drive.google.com/drive/folders/1a-B_c", "1a-B_c"),
        ("https://docs.google.com/document/d/XYZ/edit?usp=sharing", "XYZ"),
        ("https://DRIVE.google.com/file/d/ABC/view", "ABC"),
        ("http://docs.google.com/forms/d/e/FormId/viewform", "e"),
        ("https://drive.google.com/drive/u/0/folders/Nested9", "Nested9"),
    ],
)
def test_extract_file_id_from_drive_urls(url: str, expected: str) -> None:
    assert extract_file_id(url) == expected


@pytest.mark.parametrize(
    "url",
    [
        "https://drive.google.com/file/d/bad id!/view",
        "https://drive.google.com/file/d/bad!id/view",
        "https://drive.google.com/file/d/",
        "https://drive.google.com/file/d",
        "https://drive.google.com/open?id=ABC",
        "https://example.com/file/d/ABC123/view",
        "https://drive.google.com.evil.test/file/d/ABC123/view",
        "https://docs.google.com/document/d/%E2%9C%93/edit",
        "https://drive.google.com/file/d/ñandú/view",
    ],
)
def test_extract_file_id_rejects_non_matching_urls(url: str) -> None:
    assert extract_file_id(url) is None


def test_invalid_id_segment_yields_nothing_for_that_url() -> None:
    text = (
        "broken https://drive.google.com/file/d/bad!id/view "
        "ok https://drive.google.com/file/d/good/view"
    )

    assert extract_file_ids(text) == [FileReference("good")]


def test_text_without_links_yields_nothing() -> None:
    assert extract_file_ids("no links here, just drive.google.com text") == []


def test_find_urls_trims_trailing_punctuation_and_markup() -> None:
    text = (
        "see (https://drive.google.com/drive/folders/F1). Also "
        "<https://docs.google.com/document/d/D2/edit>, and "
        "https://en.wikipedia.org/wiki/Foo_(bar)!"
    )

    assert find_urls(text) == [
        "https://drive.google.com/drive/folders/F1",
        "https://docs.google.com/document/d/D2/edit",
        "https://en.wikipedia.org/wiki/Foo_(bar)",
    ]


def test_extract_embed_file_ids_skips_non_drive_and_missing_urls() -> None:
    urls = [
        "https://docs.google.com/document/d/A/edit",
        None,
        "https://github.com/",
        "https://drive.google.com/file/d/A/view",
    ]

    assert extract_embed_file_ids(urls) == ["A", "A"]
