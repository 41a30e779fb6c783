import json
from pathlib import Path

from media_exporter.content.resolve import (
    NO_FILE_REFERENCE,
    UNREADABLE_CROPPER_VALUE,
    parse_file_reference,
    resolve_media_item,
    to_source_path,
)
from media_exporter.models import FocalPoint, FolderItem, GenericFile, ImageFile

from conftest import folder, generic_file, image


def test_plain_path_is_trimmed():
    assert parse_file_reference("  /media/1/sun.jpg ") == ("/media/1/sun.jpg", None, None)


def test_cropper_blob_yields_src_and_focal_point():
    blob = json.dumps({
        "src": "/media/1/sun.jpg",
        "focalPoint": {"left": 0.25, "top": 0.75},
        "crops": [{"name": "thumb"}],
    })
    rel, fp, problem = parse_file_reference(blob)
    assert rel == "/media/1/sun.jpg"
    assert fp == FocalPoint(left=0.25, top=0.75)
    assert problem is None


def test_decoded_mapping_is_read_like_a_blob():
    rel, fp, _ = parse_file_reference({"src": "/media/2/doc.pdf"})
    assert rel == "/media/2/doc.pdf"
    assert fp is None


def test_malformed_blob_falls_back_to_raw_value():
    raw = '{"src": "/media/1/sun.jpg",'
    rel, fp, problem = parse_file_reference(raw, "broken")
    assert rel == raw
    assert fp is None
    assert problem == UNREADABLE_CROPPER_VALUE


def test_blob_without_src_keeps_raw_value():
    raw = '{"focalPoint": {"left": 0.5, "top": 0.5}}'
    rel, fp, problem = parse_file_reference(raw)
    assert rel == raw
    assert fp is None
    assert problem is None


def test_malformed_focal_point_keeps_src():
    rel, fp, problem = parse_file_reference('{"src": "/a.png", "focalPoint": {"left": "x"}}')
    assert rel == "/a.png"
    assert fp is None
    assert problem is None


def test_empty_values_have_no_reference():
    assert parse_file_reference(None) == (None, None, None)
    assert parse_file_reference("   ") == (None, None, None)


def test_to_source_path_normalizes_separators(tmp_path):
    expected = tmp_path / "media" / "1" / "sun.jpg"
    assert to_source_path("/media/1/sun.jpg", tmp_path) == expected
    assert to_source_path("\\media\\1\\sun.jpg\\", tmp_path) == expected
    assert to_source_path("media/1/sun.jpg", tmp_path) == expected
    assert to_source_path("//", tmp_path) is None


def test_folder_is_classified_without_file_lookup(tmp_path):
    assert isinstance(resolve_media_item(folder("Images"), tmp_path), FolderItem)


def test_image_resolves_to_image_file(tmp_path):
    node = image("Sun", json.dumps({"src": "/media/1/sun.jpg", "focalPoint": {"left": 0.1, "top": 0.2}}))
    item = resolve_media_item(node, tmp_path)
    assert isinstance(item, ImageFile)
    assert item.source_path == tmp_path / "media" / "1" / "sun.jpg"
    assert item.focal_point == FocalPoint(0.1, 0.2)
    assert item.problem is None


def test_generic_file_without_reference_reports_problem(tmp_path):
    item = resolve_media_item(generic_file("Doc", ""), tmp_path)
    assert isinstance(item, GenericFile)
    assert item.source_path is None
    assert item.problem == NO_FILE_REFERENCE


def test_generic_file_with_plain_path(tmp_path):
    item = resolve_media_item(generic_file("Doc", "/media/2/doc.pdf"), tmp_path)
    assert item.source_path == Path(tmp_path, "media", "2", "doc.pdf")
    assert item.source_path.suffix == ".pdf"


def test_mapping_with_non_json_values_does_not_raise():
    from datetime import datetime

    rel, fp, problem = parse_file_reference({"updated": datetime(2024, 1, 2)})
    assert "2024-01-02" in rel
    assert fp is None
    assert problem is None
