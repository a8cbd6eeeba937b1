"""Typed view over the image slots of a storefront document.

A storefront document is a JSON object. Two kinds of image slot are
recognized:

    {
      "sections": [
        {"type": "hero", "slides": [{"boxAlignment": "left", "image": {...}}]},
        {"type": "hero", "boxAlignment": "right", "image": "placeholder://..."}
      ],
      "products": [{"title": "...", "image": "placeholder://..."}]
    }

The document is parsed once into explicit variants; each variant holds an
ImageRef pointing at the exact container/key the resolver may rewrite. All
other content is left alone. Shapes that do not fit are reported as
SchemaMismatch issues instead of raising.
"""

from dataclasses import dataclass, field
from typing import Any

from ..errors import SchemaMismatch
from ..library.models import Alignment, Category

HERO_SECTION_TYPE = "hero"


@dataclass
class ImageRef:
    """Writable location of one image URL inside the raw document."""

    container: dict[str, Any]
    key: str

    @property
    def value(self) -> Any:
        return self.container.get(self.key)

    def assign(self, url: str) -> None:
        self.container[self.key] = url


@dataclass
class ProductRecord:
    """One product of the flat product list."""

    position: int
    image: ImageRef | None


@dataclass
class HeroSlide:
    """One slide of a hero section."""

    position: int
    alignment: Alignment
    image: ImageRef | None


@dataclass
class SingleSlide:
    """Hero section whose own fields describe its only slide."""

    slide: HeroSlide


@dataclass
class MultiSlide:
    """Hero section with an explicit ordered list of slides."""

    slides: list[HeroSlide]


@dataclass
class HeroSection:
    """A hero section with its slide layout decided at parse time."""

    position: int
    layout: SingleSlide | MultiSlide

    @property
    def slides(self) -> list[HeroSlide]:
        if isinstance(self.layout, SingleSlide):
            return [self.layout.slide]
        return list(self.layout.slides)


@dataclass
class ImageSlot:
    """An image reference together with the partition and side it resolves against."""

    category: Category
    ref: ImageRef
    location: str
    alignment: Alignment | None = None


@dataclass
class StorefrontDocument:
    """Parsed image slots of one document."""

    raw: Any
    heroes: list[HeroSection] = field(default_factory=list)
    products: list[ProductRecord] = field(default_factory=list)
    issues: list[SchemaMismatch] = field(default_factory=list)

    def image_slots(self) -> list[ImageSlot]:
        """All image references in document order: hero slides, then products."""
        slots = []
        for hero in self.heroes:
            for slide in hero.slides:
                if slide.image is not None:
                    slots.append(
                        ImageSlot(
                            category=Category.HERO,
                            ref=slide.image,
                            location=f"/sections/{hero.position}"
                            + (
                                f"/slides/{slide.position}"
                                if isinstance(hero.layout, MultiSlide)
                                else ""
                            ),
                            alignment=slide.alignment,
                        )
                    )
        for product in self.products:
            if product.image is not None:
                slots.append(
                    ImageSlot(
                        category=Category.PRODUCT,
                        ref=product.image,
                        location=f"/products/{product.position}",
                    )
                )
        return slots


class _Parser:
    def __init__(self, raw: Any):
        self.document = StorefrontDocument(raw=raw)

    def issue(self, location: str, message: str) -> None:
        self.document.issues.append(SchemaMismatch(f"{location}: {message}", location))

    def image_ref(self, record: dict[str, Any], location: str) -> ImageRef | None:
        if "image" not in record or record["image"] is None:
            return None

        image = record["image"]
        if isinstance(image, str):
            return ImageRef(record, "image")
        if isinstance(image, dict) and isinstance(image.get("url"), str):
            return ImageRef(image, "url")

        self.issue(f"{location}/image", "expected a string or an object with a string url")
        return None

    def slide(self, record: dict[str, Any], position: int, location: str) -> HeroSlide:
        return HeroSlide(
            position=position,
            alignment=Alignment.parse(record.get("boxAlignment")),
            image=self.image_ref(record, location),
        )

    def hero(self, section: dict[str, Any], position: int) -> HeroSection | None:
        location = f"/sections/{position}"

        if "slides" in section:
            slides = section["slides"]
            if not isinstance(slides, list):
                self.issue(f"{location}/slides", "expected a list of slides")
                return None

            parsed = []
            for index, slide in enumerate(slides):
                slide_location = f"{location}/slides/{index}"
                if not isinstance(slide, dict):
                    self.issue(slide_location, "expected a slide object")
                    continue
                parsed.append(self.slide(slide, index, slide_location))
            return HeroSection(position=position, layout=MultiSlide(parsed))

        if "image" in section:
            return HeroSection(
                position=position, layout=SingleSlide(self.slide(section, 0, location))
            )

        self.issue(location, "hero section has neither slides nor image")
        return None

    def sections(self, sections: Any) -> None:
        if not isinstance(sections, list):
            self.issue("/sections", "expected a list of sections")
            return

        for position, section in enumerate(sections):
            if not isinstance(section, dict):
                self.issue(f"/sections/{position}", "expected a section object")
                continue
            if section.get("type") != HERO_SECTION_TYPE:
                continue
            hero = self.hero(section, position)
            if hero is not None:
                self.document.heroes.append(hero)

    def products(self, products: Any) -> None:
        if not isinstance(products, list):
            self.issue("/products", "expected a list of products")
            return

        for position, product in enumerate(products):
            location = f"/products/{position}"
            if not isinstance(product, dict):
                self.issue(location, "expected a product object")
                continue
            self.document.products.append(
                ProductRecord(position=position, image=self.image_ref(product, location))
            )

    def parse(self) -> StorefrontDocument:
        raw = self.document.raw
        if not isinstance(raw, dict):
            self.issue("", "document must be a JSON object")
            return self.document

        if "sections" in raw:
            self.sections(raw["sections"])
        if "products" in raw:
            self.products(raw["products"])
        return self.document


def parse_document(raw: Any) -> StorefrontDocument:
    """Parse a raw storefront document into typed image slots. Never raises."""
    return _Parser(raw).parse()
