"""RSS 2.0 feed assembly and serialization.

The feed lists documents in the order it receives them, which is the loader's
newest-first order; it does not sort on its own. Channel timestamps come from
the injected ``now`` so the assembler stays pure.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from email.utils import format_datetime
from html import escape
from pathlib import Path
from typing import TYPE_CHECKING

from lxml import etree
from pydantic import BaseModel, Field

from scriptorium.core.types import Document
from scriptorium.exceptions import OutputWriteError

if TYPE_CHECKING:
    from scriptorium.config import SiteSettings

logger = logging.getLogger(__name__)

ATOM_NS = "http://www.w3.org/2005/Atom"
RSS_NSMAP = {"atom": ATOM_NS}
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'


class RssGuid(BaseModel):
    value: str
    permalink: bool = True


class RssImage(BaseModel):
    url: str
    title: str
    link: str
    width: int
    height: int
    description: str | None = None


class RssItem(BaseModel):
    title: str
    link: str
    description: str
    author: str
    guid: RssGuid
    pub_date: datetime


class RssFeed(BaseModel):
    title: str
    link: str
    description: str
    language: str
    copyright: str
    managing_editor: str
    webmaster: str
    pub_date: datetime
    last_build_date: datetime
    generator: str
    ttl: int
    self_url: str
    image: RssImage | None = None
    items: list[RssItem] = Field(default_factory=list)


def build_feed(documents: Sequence[Document], site: SiteSettings, now: datetime) -> RssFeed:
    """Assemble the channel for ``documents``, one item each, order preserved."""
    image = None
    if site.image_url:
        image = RssImage(
            url=site.image_url,
            title=site.title,
            link=site.base_url,
            width=site.image_width,
            height=site.image_height,
            description=site.title,
        )

    return RssFeed(
        title=site.title,
        link=site.base_url,
        description=site.description,
        language=site.language,
        copyright=f"Copyright {now.year}, {site.author}",
        managing_editor=site.editor,
        webmaster=site.editor,
        pub_date=now,
        last_build_date=now,
        generator=site.generator,
        ttl=site.ttl,
        self_url=site.feed_url,
        image=image,
        items=[_item_for(doc, site) for doc in documents],
    )


def _item_for(document: Document, site: SiteSettings) -> RssItem:
    link = site.absolute_url(document.url)
    return RssItem(
        title=document.metadata.title,
        link=link,
        description=document.metadata.summary,
        author=site.editor,
        guid=RssGuid(value=link, permalink=True),
        pub_date=document.metadata.publish_timestamp,
    )


def feed_to_xml_string(feed: RssFeed) -> str:
    """Serialize ``feed`` as RSS 2.0 including the self-referencing atom link."""
    root = etree.Element("rss", attrib={"version": "2.0"}, nsmap=RSS_NSMAP)
    channel = etree.SubElement(root, "channel")

    _text(channel, "title", feed.title)
    _text(channel, "link", feed.link)
    _text(channel, "description", feed.description)
    _text(channel, "language", feed.language)
    _text(channel, "copyright", feed.copyright)
    _text(channel, "managingEditor", feed.managing_editor)
    _text(channel, "webMaster", feed.webmaster)
    _text(channel, "pubDate", format_datetime(feed.pub_date))
    _text(channel, "lastBuildDate", format_datetime(feed.last_build_date))
    _text(channel, "generator", feed.generator)
    _text(channel, "ttl", str(feed.ttl))

    if feed.image:
        image_el = etree.SubElement(channel, "image")
        _text(image_el, "url", feed.image.url)
        _text(image_el, "title", feed.image.title)
        _text(image_el, "link", feed.image.link)
        _text(image_el, "width", str(feed.image.width))
        _text(image_el, "height", str(feed.image.height))
        if feed.image.description:
            _text(image_el, "description", feed.image.description)

    for item in feed.items:
        item_el = etree.SubElement(channel, "item")
        _text(item_el, "title", item.title)
        _text(item_el, "link", item.link)
        _text(item_el, "description", item.description)
        _text(item_el, "author", item.author)
        guid_el = _text(item_el, "guid", item.guid.value)
        guid_el.set("isPermaLink", "true" if item.guid.permalink else "false")
        _text(item_el, "pubDate", format_datetime(item.pub_date))

    xml = XML_DECLARATION + etree.tostring(root, encoding="unicode")
    return inject_self_link(xml, feed.self_url)


def inject_self_link(xml: str, feed_url: str) -> str:
    """Insert ``<atom:link rel="self">`` as the first child of ``<channel>``.

    The ``atom`` prefix must already be declared on the root element.
    """
    link = f'<atom:link href="{escape(feed_url, quote=True)}" rel="self" type="application/rss+xml"/>'
    return xml.replace("<channel>", f"<channel>{link}", 1)


def write_feed(feed: RssFeed, output_path: Path) -> Path:
    """Serialize ``feed`` to ``output_path``.

    Raises:
        OutputWriteError: If the file cannot be written.

    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(feed_to_xml_string(feed), encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(output_path, str(exc)) from exc

    logger.info("Feed with %d item(s) written to %s", len(feed.items), output_path)
    return output_path


def _text(parent: etree._Element, tag: str, value: str) -> etree._Element:
    element = etree.SubElement(parent, tag)
    element.text = value
    return element
