import itertools
import uuid

import pytest
from PIL import Image

from media_exporter.config import ExporterSettings
from media_exporter.models import ContentNode

_ids = itertools.count(1000)


def folder(name, *children):
    return ContentNode(id=next(_ids), name=name, key=str(uuid.uuid4()),
                       content_type="Folder", children=list(children))


def image(name, file_value):
    return ContentNode(id=next(_ids), name=name, key=str(uuid.uuid4()),
                       content_type="Image", properties={"umbracoFile": file_value})


def generic_file(name, file_value):
    return ContentNode(id=next(_ids), name=name, key=str(uuid.uuid4()),
                       content_type="File", properties={"umbracoFile": file_value})


@pytest.fixture
def media_root(tmp_path):
    """A CMS media folder holding /media/1/sun.jpg (real JPEG) and /media/2/doc.pdf."""
    root = tmp_path / "site"
    (root / "media" / "1").mkdir(parents=True)
    (root / "media" / "2").mkdir(parents=True)
    with Image.new("RGB", (10, 10), color="orange") as im:
        im.save(root / "media" / "1" / "sun.jpg")
    (root / "media" / "2" / "doc.pdf").write_bytes(b"%PDF-1.4 test")
    return root


@pytest.fixture
def export_root(tmp_path):
    return tmp_path / "export"


@pytest.fixture
def settings(media_root, export_root):
    return ExporterSettings(export_root=export_root, media_root=media_root)
