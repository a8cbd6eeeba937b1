"""Unit tests for parsing storefront documents into typed image slots."""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from storefill.library.models import Alignment, Category
from storefill.resolver.document import MultiSlide, SingleSlide, parse_document


class TestHeroSections:
    """Test hero layouts are decided once at parse time."""

    def test_multi_slide(self) -> None:
        """Test explicit slides become a MultiSlide with per-slide alignment."""
        document = {
            "sections": [
                {
                    "type": "hero",
                    "slides": [
                        {"boxAlignment": "left", "image": {"url": "a"}},
                        {"boxAlignment": "Right", "image": "b"},
                        {"image": {"url": "c"}},
                    ],
                }
            ]
        }

        parsed = parse_document(document)

        assert len(parsed.heroes) == 1
        hero = parsed.heroes[0]
        assert isinstance(hero.layout, MultiSlide)
        assert [s.alignment for s in hero.slides] == [
            Alignment.LEFT,
            Alignment.RIGHT,
            Alignment.LEFT,
        ]
        assert [s.image.value for s in hero.slides] == ["a", "b", "c"]
        assert parsed.issues == []

    def test_single_slide(self) -> None:
        """Test a hero section without slides is its own single slide."""
        document = {
            "sections": [{"type": "hero", "boxAlignment": "right", "image": "x"}]
        }

        hero = parse_document(document).heroes[0]

        assert isinstance(hero.layout, SingleSlide)
        assert hero.slides[0].alignment is Alignment.RIGHT

    def test_slides_take_precedence_over_image(self) -> None:
        """Test a section with both shapes is parsed as MultiSlide."""
        document = {
            "sections": [
                {"type": "hero", "image": "ignored", "slides": [{"image": "used"}]}
            ]
        }

        hero = parse_document(document).heroes[0]

        assert isinstance(hero.layout, MultiSlide)
        assert [s.image.value for s in hero.slides] == ["used"]

    def test_non_hero_sections_ignored(self) -> None:
        """Test other section types are not image slots and not issues."""
        document = {
            "sections": [
                {"type": "text", "image": "placeholder://img?description=x"},
                {"type": "gallery", "slides": "whatever"},
            ]
        }

        parsed = parse_document(document)

        assert parsed.heroes == []
        assert parsed.issues == []


class TestImageReferences:
    """Test string and object image references."""

    def test_assign_writes_into_original_document(self) -> None:
        """Test ImageRef writes into the exact container of the raw document."""
        document = {
            "sections": [{"type": "hero", "slides": [{"image": {"url": "a", "alt": "x"}}]}],
            "products": [{"title": "Mug", "image": "b"}],
        }

        slots = parse_document(document).image_slots()
        for slot in slots:
            slot.ref.assign(f"resolved-{slot.category.value}")

        assert document["sections"][0]["slides"][0]["image"] == {
            "url": "resolved-hero",
            "alt": "x",
        }
        assert document["products"][0] == {"title": "Mug", "image": "resolved-product"}

    def test_slot_locations_and_categories(self) -> None:
        """Test slots carry partition, side and a readable location."""
        document = {
            "sections": [
                {"type": "hero", "image": "a"},
                {"type": "hero", "slides": [{"image": "b", "boxAlignment": "right"}]},
            ],
            "products": [{"image": "c"}, {"title": "no image"}],
        }

        slots = parse_document(document).image_slots()

        assert [(s.category, s.location, s.alignment) for s in slots] == [
            (Category.HERO, "/sections/0", Alignment.LEFT),
            (Category.HERO, "/sections/1/slides/0", Alignment.RIGHT),
            (Category.PRODUCT, "/products/0", None),
        ]


class TestSchemaMismatch:
    """Test unrecognized shapes become issues instead of errors."""

    def test_non_object_document(self) -> None:
        """Test a document that is not an object yields one issue."""
        parsed = parse_document(["not", "a", "document"])

        assert len(parsed.issues) == 1
        assert parsed.image_slots() == []

    def test_bad_shapes_are_reported(self) -> None:
        """Test every malformed node is reported with its location."""
        document = {
            "sections": [
                "not a section",
                {"type": "hero", "slides": {"image": "x"}},
                {"type": "hero", "slides": [42, {"image": 7}]},
                {"type": "hero", "title": "no slides or image"},
                {"type": "hero", "image": {"src": "x"}},
            ],
            "products": [None, {"image": ["x"]}, {"image": "ok"}],
        }

        parsed = parse_document(document)

        assert sorted(issue.location for issue in parsed.issues) == sorted(
            [
                "/sections/0",
                "/sections/1/slides",
                "/sections/2/slides/0",
                "/sections/2/slides/1/image",
                "/sections/3",
                "/sections/4/image",
                "/products/0",
                "/products/1/image",
            ]
        )
        assert [slot.location for slot in parsed.image_slots()] == ["/products/2"]

    def test_sections_and_products_must_be_lists(self) -> None:
        """Test top-level containers of the wrong type are reported."""
        parsed = parse_document({"sections": {}, "products": "none"})

        assert [issue.location for issue in parsed.issues] == ["/sections", "/products"]
