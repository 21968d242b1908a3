"""Build the result fragments of the event finder page with BeautifulSoup."""
from __future__ import annotations

from typing import Any, Iterable

from bs4 import BeautifulSoup, Tag

from upstream.schemas import IMAGE_ERROR_URL, EventRecord

HIDDEN_CLASSES = ["opacity-0", "translate-y-4"]
SHOWN_CLASSES = ["opacity-100", "translate-y-0"]

ITEM_CLASSES = (
    "event-item text-gray-800 flex items-start space-x-4 p-4 bg-white rounded-lg "
    "shadow-md transition-all duration-700 ease-out opacity-0 translate-y-4"
)


def get_classes(tag: Tag) -> list[str]:
    """Return ``tag``'s classes whether bs4 stored them as a list or a string."""
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def has_class(tag: Tag, name: str) -> bool:
    return name in get_classes(tag)


def add_class(tag: Tag, *names: str) -> None:
    classes = get_classes(tag)
    classes.extend(n for n in names if n not in classes)
    tag["class"] = classes


def remove_class(tag: Tag, *names: str) -> None:
    tag["class"] = [c for c in get_classes(tag) if c not in names]


def message(soup: BeautifulSoup, text: str, *, error: bool = False) -> Tag:
    """A centred status paragraph; red for errors."""
    p = soup.new_tag("p")
    p["class"] = ["text-center", "text-red-600" if error else "text-gray-600"]
    p.string = text
    return p


def event_item(soup: BeautifulSoup, raw: dict[str, Any]) -> Tag:
    """One ``<li>`` with image, title, date/venue line and detail link."""
    record = EventRecord.from_ticketmaster(raw if isinstance(raw, dict) else {})

    li = soup.new_tag("li")
    li["class"] = ITEM_CLASSES.split()

    frame = soup.new_tag("div")
    frame["class"] = "flex-shrink-0 w-24 h-24 rounded-lg overflow-hidden border border-gray-200".split()
    img = soup.new_tag("img", src=record.image_src, alt=record.name)
    img["class"] = ["w-full", "h-full", "object-cover"]
    img["onerror"] = f"this.onerror=null;this.src='{IMAGE_ERROR_URL}'"
    frame.append(img)

    details = soup.new_tag("div")
    details["class"] = ["flex-grow", "text-left"]
    title = soup.new_tag("h3")
    title["class"] = ["text-xl", "font-semibold", "mb-1"]
    title.string = record.name
    when = soup.new_tag("p")
    when["class"] = ["text-sm", "text-gray-600"]
    when.string = f"On {record.date_label} at {record.venue_label}"
    link = soup.new_tag("a", href=record.detail_url, target="_blank", rel="noopener")
    link["class"] = ["text-blue-600", "hover:underline", "text-sm"]
    link.string = "View Details"
    details.extend([title, when, link])

    li.extend([frame, details])
    return li


def event_list(soup: BeautifulSoup, events: Iterable[dict[str, Any]]) -> Tag:
    ul = soup.new_tag("ul")
    ul["class"] = ["list-none", "pl-0", "space-y-4"]
    for raw in events:
        ul.append(event_item(soup, raw))
    return ul


def recommendation(soup: BeautifulSoup, text: str) -> Tag:
    """The recommendation text with each newline rendered as ``<br>``."""
    p = soup.new_tag("p")
    for i, line in enumerate(text.split("\n")):
        if i:
            p.append(soup.new_tag("br"))
        if line:
            p.append(line)
    return p


def reveal(tag: Tag) -> None:
    """Swap the item's hidden animation classes for the shown ones."""
    remove_class(tag, *HIDDEN_CLASSES)
    add_class(tag, *SHOWN_CLASSES)
