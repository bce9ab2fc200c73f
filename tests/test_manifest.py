import io
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from batchcensor.core.manifest import build_manifest, render_manifest, write_manifest
from batchcensor.errors import ManifestError


class TestManifest(unittest.TestCase):
    def test_build_groups_by_archive(self):
        content = build_manifest({"sfx/voices", "sfx/alarms", "other/x"})

        self.assertEqual(
            [a.path for a in content.archives],
            ["x64/audio/sfx/other.rpf", "x64/audio/sfx/sfx.rpf"],
        )
        sfx = content.archives[1]
        self.assertEqual(sfx.type, "RPF7")
        self.assertEqual(sfx.create_if_not_exists, "True")
        self.assertEqual(
            [(a.source, a.value) for a in sfx.add],
            [("sfx/alarms.awc", "alarms.awc"), ("sfx/voices.awc", "voices.awc")],
        )

    def test_render(self):
        xml = render_manifest(build_manifest({"sfx/voices"}))
        self.assertEqual(
            xml,
            "<content>\n"
            '  <archive path="x64/audio/sfx/sfx.rpf" createIfNotExist="True" type="RPF7">\n'
            '    <add source="sfx/voices.awc">voices.awc</add>\n'
            "  </archive>\n"
            "</content>\n",
        )

    def test_render_empty(self):
        self.assertEqual(render_manifest(build_manifest([])), "<content>\n</content>\n")

    def test_render_escapes(self):
        xml = render_manifest(build_manifest({"a&b/c"}))
        self.assertIn("a&amp;b.rpf", xml)

    def test_single_component_rejected(self):
        with self.assertRaises(ManifestError):
            build_manifest({"voices"})

    def test_write_to_stdout(self):
        with patch("sys.stdout", new_callable=io.StringIO) as stdout:
            write_manifest({"sfx/voices"}, "-")
        self.assertTrue(stdout.getvalue().startswith("<content>"))

    def test_write_to_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            dest = Path(tmp) / "assembly.xml"
            write_manifest({"sfx/voices"}, str(dest))
            self.assertIn("voices.awc", dest.read_text())


if __name__ == "__main__":
    unittest.main()
