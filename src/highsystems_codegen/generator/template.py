"""Output template with named insertion slots.

The template is parsed once into an ordered list of static text and slot
segments. Rendering concatenates them, so generated text is never scanned
for markers.
"""

from pathlib import Path

from pydantic import BaseModel

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
DEFAULT_TEMPLATE = TEMPLATES_DIR / "base.ts"

REMOVE_LINE_TAG = "@remove-line"

METHODS_SLOT = "methods"
REQUEST_TYPES_SLOT = "request_types"
RESPONSE_TYPES_SLOT = "response_types"

MARKERS = {
    "//** API CALLS **//": METHODS_SLOT,
    "//** REQUEST TYPES **//": REQUEST_TYPES_SLOT,
    "//** RESPONSE TYPES **//": RESPONSE_TYPES_SLOT,
}


class TemplateError(ValueError):
    """Raised when a template is missing a marker or repeats one."""


class TextSegment(BaseModel):
    text: str


class SlotSegment(BaseModel):
    name: str


class Template(BaseModel):
    """A parsed template: static text interleaved with named slots."""

    segments: list[TextSegment | SlotSegment]

    @classmethod
    def parse(cls, text: str) -> "Template":
        """Strip `@remove-line` lines and split the text at each marker."""
        kept = "\n".join(line for line in text.split("\n") if REMOVE_LINE_TAG not in line)

        positions = []
        for marker, slot in MARKERS.items():
            count = kept.count(marker)
            if count != 1:
                raise TemplateError(f"Template must contain {marker!r} exactly once, found {count}")
            positions.append((kept.index(marker), marker, slot))

        segments: list[TextSegment | SlotSegment] = []
        cursor = 0
        for start, marker, slot in sorted(positions):
            segments.append(TextSegment(text=kept[cursor:start]))
            segments.append(SlotSegment(name=slot))
            cursor = start + len(marker)
        segments.append(TextSegment(text=kept[cursor:]))
        return cls(segments=segments)

    @property
    def slots(self) -> list[str]:
        return [s.name for s in self.segments if isinstance(s, SlotSegment)]

    def render(self, values: dict[str, str]) -> str:
        """Fill every slot; a slot without a value is an error."""
        missing = set(self.slots) - set(values)
        if missing:
            raise TemplateError(f"No value for template slots: {', '.join(sorted(missing))}")

        parts = []
        for segment in self.segments:
            if isinstance(segment, TextSegment):
                parts.append(segment.text)
            else:
                parts.append(values[segment.name])
        return "".join(parts)


def load_template(file_path: Path | None = None) -> Template:
    """Load and parse a template file (the packaged base.ts by default)."""
    path = file_path or DEFAULT_TEMPLATE
    return Template.parse(path.read_text(encoding="utf-8"))
