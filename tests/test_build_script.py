import importlib.util
import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "build-gallery-data.py"


def load_script():
    spec = importlib.util.spec_from_file_location("build_gallery_data", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestBuildGalleryData(unittest.TestCase):

    def setUp(self):
        self.root = Path(tempfile.mkdtemp(prefix="test_gallery_build_")).resolve()
        (self.root / "photos" / "nature").mkdir(parents=True)
        (self.root / "photos" / "city").mkdir()
        (self.root / "photos" / "a.jpg").write_bytes(b"a")
        (self.root / "photos" / "nature" / "b.png").write_bytes(b"b")
        (self.root / "photos" / "city" / "c.gif").write_bytes(b"c")
        (self.root / "_data").mkdir()
        (self.root / "_data" / "galleryMetadata.json").write_text(
            json.dumps({"city/c.gif": {"description": "Night tram"}}), encoding="utf-8"
        )
        self.script = load_script()

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def read(self, name):
        return json.loads((self.root / "_data" / name).read_text(encoding="utf-8"))

    def test_writes_data_files(self):
        with mock.patch.dict(os.environ, {"LOCAL_SOURCE": "photos"}):
            status = self.script.main(["--root", str(self.root)])

        self.assertEqual(status, 0)
        self.assertEqual(self.read("galleryTags.json"), ["city", "nature"])

        gallery = {img["key"]: img for img in self.read("gallery.json")}
        self.assertEqual(sorted(gallery), ["a.jpg", "city/c.gif", "nature/b.png"])
        self.assertEqual(gallery["city/c.gif"]["description"], "Night tram")
        self.assertIsNotNone(gallery["a.jpg"]["lastModified"])

        by_tag = self.read("galleryByTag.json")
        self.assertEqual([g["tagName"] for g in by_tag], ["city", "nature"])
        self.assertEqual(by_tag[1]["images"][0]["key"], "nature/b.png")

    def test_empty_gallery_still_builds(self):
        out_dir = self.root / "out"
        env = {k: v for k, v in os.environ.items() if not k.startswith("R2_") and k != "LOCAL_SOURCE"}
        with mock.patch.dict(os.environ, env, clear=True):
            status = self.script.main(["--root", str(self.root), "--out-dir", str(out_dir)])

        self.assertEqual(status, 0)
        self.assertEqual(json.loads((out_dir / "galleryTags.json").read_text(encoding="utf-8")), [])
        self.assertEqual(json.loads((out_dir / "gallery.json").read_text(encoding="utf-8")), [])


if __name__ == "__main__":
    unittest.main()
