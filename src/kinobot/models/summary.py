"""Presentation model handed to the chat host."""

from dataclasses import dataclass, field
from typing import Optional

RGB = tuple[int, int, int]


@dataclass(frozen=True)
class EmbedField:
    """A single labelled fact on a summary card."""

    label: str
    value: str
    inline: bool = True


@dataclass
class MediaSummary:
    """Source-agnostic summary card for a movie or book."""

    title: Optional[str] = None
    link_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    description: Optional[str] = None
    fields: list[EmbedField] = field(default_factory=list)
    accent_color: Optional[RGB] = None
    footer: Optional[str] = None

    @property
    def color_value(self) -> Optional[int]:
        """Accent color packed as 0xRRGGBB."""
        if self.accent_color is None:
            return None
        r, g, b = self.accent_color
        return (r << 16) | (g << 8) | b

    def to_embed(self) -> dict:
        """Render the embed payload, leaving out absent parts.

        The description travels as the first field, not as top-level text.
        """
        embed = {}
        if self.title is not None:
            embed["title"] = self.title
        if self.link_url is not None:
            embed["url"] = self.link_url
        if self.thumbnail_url is not None:
            embed["thumbnail"] = {"url": self.thumbnail_url}
        if self.fields:
            embed["fields"] = [
                {"name": f.label, "value": f.value, "inline": f.inline} for f in self.fields
            ]
        if self.color_value is not None:
            embed["color"] = self.color_value
        if self.footer is not None:
            embed["footer"] = {"text": self.footer}
        return embed
