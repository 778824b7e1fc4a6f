import asyncio
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from rankcard_renderer.errors import BuildPreconditionError, RankCardError
from rankcard_renderer.fonts import FontFace, FontRegistry, default_faces


class FontRegistryTests(unittest.TestCase):
    def test_not_ready_until_registered(self):
        registry = FontRegistry()
        self.assertFalse(registry.ready)
        asyncio.run(registry.register_fonts([]))
        self.assertTrue(registry.ready)

    def test_fallback_font_is_cached(self):
        registry = FontRegistry()
        asyncio.run(registry.register_fonts([]))
        first = registry.font("Manrope", 36)
        self.assertIs(first, registry.font("manrope", 36, "BOLD"))
        self.assertIsNot(first, registry.font("Manrope", 30))

    def test_broken_font_file_fails_registration(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "Broken.ttf"
            path.write_bytes(b"not a font")
            registry = FontRegistry()
            with self.assertRaises(BuildPreconditionError) as ctx:
                asyncio.run(registry.register_fonts([FontFace(path=path, family="Broken")]))
            self.assertIsInstance(ctx.exception, RankCardError)
            self.assertIn(str(path), str(ctx.exception))
            self.assertIsInstance(ctx.exception.__cause__, OSError)
            self.assertFalse(registry.ready)

    def test_reset(self):
        registry = FontRegistry()
        asyncio.run(registry.register_fonts([]))
        registry.reset()
        self.assertFalse(registry.ready)
        self.assertEqual(registry.faces, [])


class DefaultFacesTests(unittest.TestCase):
    def test_no_directory(self):
        self.assertEqual(default_faces(None), [])

    def test_missing_files_are_skipped(self):
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "Manrope-Bold.ttf").write_bytes(b"")
            faces = default_faces(Path(tmp))
            self.assertEqual([f.weight for f in faces], ["bold"])
            self.assertEqual(faces[0].family, "Manrope")


if __name__ == "__main__":
    unittest.main()
