import io
import sys
import tempfile
import unittest
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

import yaml

from batchcensor.core.config import discover_configs, dump_configs, load_config, resolve_config_paths
from batchcensor.core.models import Config, FileList, FileMap, FileMapList, ReplaceDir
from batchcensor.core.transcript import Transcript
from batchcensor.errors import ConfigError

CONFIG_YAML = """\
file_extension: wav
dirs:
  - path: voices/list
    files:
      - path: one
        replace:
          - word: darn
            range: 0.100-0.200
      - path: two
        transcript: "oh [heck]{^-0.300}"
  - path: voices/map
    file_prefix: v_
    files:
      one: "clean line"
      two: "oh [slur]"
  - path: voices/legacy
    files:
      - one: "clean"
      - two: "[gosh]{1.000-$}"
  - path: voices/empty
"""


class TestFilesShapes(unittest.TestCase):
    def setUp(self):
        self.config = Config.model_validate(yaml.safe_load(CONFIG_YAML))

    def test_shapes(self):
        dirs = {d.path: d for d in self.config.dirs}
        self.assertIsInstance(dirs["voices/list"].files, FileList)
        self.assertIsInstance(dirs["voices/map"].files, FileMap)
        self.assertIsInstance(dirs["voices/legacy"].files, FileMapList)
        self.assertTrue(dirs["voices/empty"].files.is_empty())

    def test_iteration(self):
        list_dir, map_dir, legacy_dir, _ = self.config.dirs

        entries = list(list_dir.files.iter())
        self.assertEqual([e[0] for e in entries], ["one", "two"])
        self.assertEqual([r.word for r in entries[0][1]], ["darn"])
        self.assertEqual([r.word for r in entries[1][2].replace], ["heck"])

        entries = list(map_dir.files.iter())
        self.assertEqual([e[0] for e in entries], ["one", "two"])
        self.assertEqual(entries[1][2].missing, ["slur"])

        entries = list(legacy_dir.files.iter())
        self.assertEqual([e[0] for e in entries], ["one", "two"])

    def test_prefix_alias(self):
        self.assertEqual(self.config.dirs[1].prefix, "v_")
        self.assertEqual(self.config.dirs[1].expected_path("one", 0, "wav"), "v_one.wav")

    def test_dump_omits_empty(self):
        dumped = self.config.model_dump(mode="json", by_alias=True)
        empty = dumped["dirs"][3]
        self.assertEqual(empty, {"path": "voices/empty"})
        self.assertEqual(dumped["dirs"][1]["file_prefix"], "v_")
        self.assertEqual(dumped["dirs"][1]["files"]["two"], "oh [slur]")

    def test_null_files_same_as_absent(self):
        config = Config.model_validate(yaml.safe_load("dirs:\n  - path: a\n    files:\n  - path: b\n"))
        for replace_dir in config.dirs:
            self.assertIsInstance(replace_dir.files, FileMapList)
            self.assertTrue(replace_dir.files.is_empty())

        config.dirs[0].insert_file("wav", "x.wav", Transcript.parse("[missing]"))
        self.assertEqual(config.dirs[0].model_dump(mode="json")["files"], [{"x": "[missing]"}])

    def test_contains(self):
        d = ReplaceDir(path="x", prefix="v_", file_extension="wav")
        self.assertTrue(d.contains("v_line.wav"))
        self.assertFalse(d.contains("line.wav"))
        self.assertFalse(d.contains("v_line.ogg"))

    def test_insert_file(self):
        config = Config(file_extension="wav")
        missing = Transcript.parse("[missing]")

        config.insert_file("voices/new", "b.wav", missing)
        config.insert_file("voices/new", "a.wav", missing)
        config.insert_file("voices/alpha", "c.wav", missing)
        config.optimize()

        self.assertEqual([d.path for d in config.dirs], ["voices/alpha", "voices/new"])
        self.assertEqual([e[0] for e in config.dirs[1].files.iter()], ["b", "a"])


class TestLoading(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def test_load_config(self):
        path = self.root / "censor.yml"
        path.write_text(CONFIG_YAML)

        loaded = load_config(path)
        self.assertEqual(loaded.root, self.root)
        self.assertEqual(loaded.config.file_extension, "wav")
        self.assertEqual(len(loaded.config.dirs), 4)

    def test_load_config_root_override(self):
        path = self.root / "censor.yml"
        path.write_text("dirs: []\n")
        loaded = load_config(path, root=Path("/elsewhere"))
        self.assertEqual(loaded.root, Path("/elsewhere"))

    def test_bad_yaml(self):
        path = self.root / "broken.yml"
        path.write_text("dirs: [\n")
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_bad_transcript(self):
        path = self.root / "broken.yml"
        path.write_text("dirs:\n  - path: x\n    files:\n      a: \"[oops]{never}\"\n")
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_unknown_key(self):
        path = self.root / "broken.yml"
        path.write_text("dirs:\n  - path: x\n    files:\n      - path: a\n        bogus: 1\n")
        with self.assertRaises(ConfigError):
            load_config(path)

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_config(self.root / "nope.yml")

    def test_discover(self):
        (self.root / "b.yml").write_text("dirs: []\n")
        (self.root / "sub").mkdir()
        (self.root / "sub" / "a.yaml").write_text("dirs: []\n")
        (self.root / ".hidden.yml").write_text("dirs: []\n")
        (self.root / "notes.txt").write_text("hi\n")

        found = discover_configs(self.root)
        self.assertEqual(found, sorted([self.root / "b.yml", self.root / "sub" / "a.yaml"]))

    def test_resolve_requires_something(self):
        with self.assertRaises(ConfigError):
            resolve_config_paths([], str(self.root))

    def test_dump_configs(self):
        config = Config.model_validate(yaml.safe_load(CONFIG_YAML))
        stream = io.StringIO()
        dump_configs([config, Config()], stream)

        documents = list(yaml.safe_load_all(stream.getvalue()))
        self.assertEqual(len(documents), 2)
        reloaded = Config.model_validate(documents[0])
        self.assertEqual(reloaded.dirs[1].prefix, "v_")
        self.assertEqual(documents[1], {})


if __name__ == "__main__":
    unittest.main()
