import asyncio
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from rankcard_renderer.builder import RankCardBuilder
from rankcard_renderer.errors import BuildPreconditionError, ValidationError
from rankcard_renderer.models import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_OVERLAY_ALPHA,
    BackgroundType,
    FillType,
    Status,
)


class BuilderConstructionTests(unittest.TestCase):
    def test_defaults(self):
        cfg = RankCardBuilder().config
        self.assertEqual((cfg.width, cfg.height), (1000, 380))
        self.assertEqual(cfg.background.type, BackgroundType.COLOR)
        self.assertEqual(cfg.status.type, Status.ONLINE)
        self.assertEqual([b.source for b in cfg.badges], ["builtin:bronze", "builtin:silver", "builtin:gold"])

    def test_rejects_bad_dimensions(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder(width=0)
        with self.assertRaises(ValidationError):
            RankCardBuilder(height=12.5)

    def test_setters_chain(self):
        builder = RankCardBuilder()
        self.assertIs(builder.set_username("Tester").set_level(3).set_rank(9), builder)


class BuilderValidationTests(unittest.TestCase):
    def test_color_fill_requires_string(self):
        with self.assertRaises(ValidationError) as ctx:
            RankCardBuilder().set_progress_bar(["#fff", "#000"], "COLOR")
        self.assertEqual(ctx.exception.field, "progress_bar")

    def test_gradient_fill_requires_list(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder().set_progress_bar("red", "GRADIENT", True)

    def test_gradient_keeps_first_two_stops(self):
        builder = RankCardBuilder().set_progress_bar(["#111111", "#222222", "#333333"], FillType.GRADIENT)
        self.assertEqual(builder.config.progress_bar.bar_color, ("#111111", "#222222"))
        self.assertEqual(builder.config.progress_bar.fill_type, FillType.GRADIENT)

    def test_gradient_needs_two_stops(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder().set_progress_bar(["#111111"], "GRADIENT")

    def test_unknown_fill_type(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder().set_progress_bar("#fff", "PATTERN")

    def test_unknown_background_type(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder().set_background("VIDEO", "#fff")

    def test_missing_background_data(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder().set_background("COLOR", None)

    def test_unknown_status(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder().set_status("away")

    def test_missing_avatar_data(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder().set_avatar(b"")

    def test_numeric_setters_reject_non_numbers(self):
        builder = RankCardBuilder()
        for setter in (builder.set_rank, builder.set_level, builder.set_current_xp, builder.set_required_xp):
            with self.assertRaises(ValidationError):
                setter("10")
            with self.assertRaises(ValidationError):
                setter(True)

    def test_numeric_setters_reject_non_finite(self):
        builder = RankCardBuilder()
        for setter in (builder.set_rank, builder.set_level, builder.set_current_xp, builder.set_required_xp):
            for value in (float("nan"), float("inf"), float("-inf")):
                with self.assertRaises(ValidationError):
                    setter(value)

    def test_failed_setter_leaves_config_untouched(self):
        builder = RankCardBuilder().set_progress_bar("#123456")
        with self.assertRaises(ValidationError):
            builder.set_progress_bar("#654321", "GRADIENT")
        self.assertEqual(builder.config.progress_bar.bar_color, "#123456")


class BuilderFallbackTests(unittest.TestCase):
    def test_color_background_with_non_string_falls_back(self):
        builder = RankCardBuilder().set_background("COLOR", b"\x00\x01")
        self.assertEqual(builder.config.background.source, DEFAULT_BACKGROUND_COLOR)

    def test_image_background_keeps_source(self):
        builder = RankCardBuilder().set_background("image", b"png-bytes")
        self.assertEqual(builder.config.background.type, BackgroundType.IMAGE)
        self.assertEqual(builder.config.background.source, b"png-bytes")

    def test_overlay_alpha_fallback(self):
        builder = RankCardBuilder()
        self.assertEqual(builder.set_overlay("#000000", "half").config.overlay.alpha, DEFAULT_OVERLAY_ALPHA)
        self.assertEqual(builder.set_overlay("#000000", 3).config.overlay.alpha, DEFAULT_OVERLAY_ALPHA)
        self.assertEqual(builder.set_overlay("#000000", 0).config.overlay.alpha, 0)

    def test_label_and_color_fallbacks(self):
        builder = RankCardBuilder().set_rank(4, text=None).set_level(2, text=12)
        self.assertEqual(builder.config.rank.label, "RANK")
        self.assertEqual(builder.config.level.label, "LEVEL")
        builder.set_current_xp(10, color=None)
        self.assertEqual(builder.config.current_xp.color, "#FFFFFF")

    def test_status_width_false_disables_ring(self):
        builder = RankCardBuilder().set_status("dnd", circle=False, width=False)
        self.assertIs(builder.config.status.width, False)
        self.assertEqual(builder.config.status.color, Status.DND.color)

    def test_status_is_case_lenient(self):
        builder = RankCardBuilder().set_status("IDLE")
        self.assertEqual(builder.config.status.type, Status.IDLE)

    def test_custom_status_color(self):
        builder = RankCardBuilder().set_status("online").set_custom_status_color("#ABCDEF")
        self.assertEqual(builder.config.status.color, "#ABCDEF")
        builder.set_custom_status_color(None)
        self.assertEqual(builder.config.status.color, Status.ONLINE.color)

    def test_badge_counts(self):
        builder = RankCardBuilder().set_bronze(3).set_silver(-2).set_gold(1, icon=b"icon")
        self.assertEqual(builder.config.bronze.count, 3)
        self.assertEqual(builder.config.silver.count, 0)
        self.assertEqual(builder.config.gold.source, b"icon")

    def test_font_size(self):
        builder = RankCardBuilder().set_font_size(40)
        self.assertEqual(builder.config.font_size, 40)
        self.assertIsNone(builder.set_font_size(-1).config.font_size)


class BuildPreconditionTests(unittest.TestCase):
    def test_missing_avatar(self):
        builder = RankCardBuilder().set_username("Tester")
        with self.assertRaises(BuildPreconditionError):
            builder.validate_for_build()

    def test_missing_username(self):
        builder = RankCardBuilder().set_avatar(b"data")
        with self.assertRaises(BuildPreconditionError):
            builder.validate_for_build()

    def test_empty_username(self):
        builder = RankCardBuilder().set_avatar(b"data").set_username("")
        with self.assertRaises(BuildPreconditionError):
            builder.validate_for_build()

    def test_non_numeric_xp_assigned_directly(self):
        builder = RankCardBuilder().set_avatar(b"data").set_username("Tester")
        builder.config.current_xp.value = "50"
        with self.assertRaises(BuildPreconditionError):
            builder.validate_for_build()

    def test_non_finite_xp_assigned_directly(self):
        builder = RankCardBuilder().set_avatar(b"data").set_username("Tester")
        builder.config.required_xp.value = float("inf")
        with self.assertRaises(BuildPreconditionError):
            builder.validate_for_build()
        builder.config.required_xp.value = 360
        builder.config.current_xp.value = float("nan")
        with self.assertRaises(BuildPreconditionError):
            builder.validate_for_build()

    def test_build_raises_before_any_asset_work(self):
        builder = RankCardBuilder().set_username("Tester")
        with self.assertRaises(BuildPreconditionError):
            asyncio.run(builder.build())


class FromDictTests(unittest.TestCase):
    def test_applies_setters(self):
        builder = RankCardBuilder.from_dict(
            {
                "width": 800,
                "username": {"name": "Tester", "color": "#FF0000"},
                "avatar": b"avatar",
                "progress_bar": {"color": ["#000000", "#FFFFFF"], "fill_type": "GRADIENT", "rounded": False},
                "current_xp": 50,
                "required_xp": {"data": 360, "color": "#00FF00"},
                "status": {"status": "idle", "circle": True},
                "gold": 2,
            }
        )
        cfg = builder.config
        self.assertEqual(cfg.width, 800)
        self.assertEqual(cfg.username.color, "#FF0000")
        self.assertFalse(cfg.progress_bar.rounded)
        self.assertEqual(cfg.required_xp.value, 360)
        self.assertTrue(cfg.status.circle)
        self.assertEqual(cfg.gold.count, 2)

    def test_propagates_validation_errors(self):
        with self.assertRaises(ValidationError):
            RankCardBuilder.from_dict({"rank": "first"})

    def test_string_background_is_a_color(self):
        cfg = RankCardBuilder.from_dict({"background": "#112233"}).config
        self.assertEqual(cfg.background.type, BackgroundType.COLOR)
        self.assertEqual(cfg.background.source, "#112233")

    def test_bad_background_shape(self):
        with self.assertRaises(ValidationError) as ctx:
            RankCardBuilder.from_dict({"background": 42})
        self.assertEqual(ctx.exception.field, "background")

    def test_non_integer_dimensions(self):
        for data in ({"width": "wide"}, {"height": 380.5}, {"width": None}):
            with self.assertRaises(ValidationError):
                RankCardBuilder.from_dict(data)

    def test_unknown_object_fields(self):
        with self.assertRaises(ValidationError) as ctx:
            RankCardBuilder.from_dict({"overlay": {"colour": "#000000"}})
        self.assertEqual(ctx.exception.field, "color")


if __name__ == "__main__":
    unittest.main()
