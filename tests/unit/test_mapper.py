"""Unit tests for mapping raw feed entries."""

from datetime import datetime

import feedparser

from feed_aggregator.core.mapper import EntryMapper

RSS_DOCUMENT = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example Feed</title>
    <link>https://example.com</link>
    <description>Example</description>
    <item>
      <title>First post</title>
      <link>https://example.com/posts/1</link>
      <description>Summary one</description>
      <content:encoded><![CDATA[<p>Body one</p>]]></content:encoded>
      <pubDate>Tue, 02 Jan 2024 03:04:05 GMT</pubDate>
    </item>
    <item>
      <title>No link here</title>
      <description>Orphan</description>
    </item>
  </channel>
</rss>
"""


class TestEntryMapper:
    """Tests for EntryMapper."""

    def setup_method(self):
        self.mapper = EntryMapper()

    def test_entry_without_link_is_skipped(self):
        assert self.mapper.map_entry({"title": "x"}, 1) is None
        assert self.mapper.map_entry({"title": "x", "link": "   "}, 1) is None

    def test_basic_fields(self):
        entry = self.mapper.map_entry({"link": " https://a/1 ", "title": "Hello"}, 7)

        assert entry.link == "https://a/1"
        assert entry.channel_id == 7
        assert entry.title == "Hello"
        assert entry.id is None
        assert entry.fresh is False

    def test_title_is_cleaned(self):
        entry = self.mapper.map_entry({"link": "https://a/1", "title": "<b>Tom</b>  &amp;\n Jerry"}, 1)
        assert entry.title == "Tom & Jerry"

    def test_missing_title(self):
        assert self.mapper.map_entry({"link": "https://a/1"}, 1).title is None

    def test_published_date_preferred(self):
        entry = self.mapper.map_entry(
            {
                "link": "https://a/1",
                "published_parsed": datetime(2024, 1, 2, 3, 4, 5).timetuple(),
                "updated_parsed": datetime(2024, 2, 1, 0, 0, 0).timetuple(),
            },
            1,
        )
        assert entry.publication_date == datetime(2024, 1, 2, 3, 4, 5)

    def test_updated_date_fallback(self):
        entry = self.mapper.map_entry(
            {"link": "https://a/1", "updated_parsed": datetime(2024, 2, 1, 0, 0, 0).timetuple()},
            1,
        )
        assert entry.publication_date == datetime(2024, 2, 1, 0, 0, 0)

    def test_no_date(self):
        assert self.mapper.map_entry({"link": "https://a/1"}, 1).publication_date is None

    def test_authors_then_contributors(self):
        entry = self.mapper.map_entry(
            {
                "link": "https://a/1",
                "authors": [{"name": "Alice"}, {"email": "nobody@example.com"}],
                "contributors": [{"name": "Bob"}, {"name": "Alice"}],
            },
            1,
        )
        assert entry.authors == ["Alice", "Bob", "Alice"]

    def test_flat_author(self):
        entry = self.mapper.map_entry({"link": "https://a/1", "author": "Carol"}, 1)
        assert entry.authors == ["Carol"]

    def test_description_precedes_content(self):
        entry = self.mapper.map_entry(
            {
                "link": "https://a/1",
                "summary_detail": {"type": "text/plain", "value": "Short"},
                "content": [
                    {"type": "text/html", "value": "<p>Long</p>"},
                    {"type": "text/plain", "value": "Alt"},
                ],
            },
            1,
        )
        assert entry.contents == [
            {"type": "text/plain", "value": "Short"},
            {"type": "text/html", "value": "<p>Long</p>"},
            {"type": "text/plain", "value": "Alt"},
        ]

    def test_description_kept_when_equal_to_content(self):
        entry = self.mapper.map_entry(
            {
                "link": "https://a/1",
                "summary": "<p>Long</p>",
                "content": [{"type": "text/html", "value": "<p>Long</p>"}],
            },
            1,
        )
        assert entry.contents == [
            {"type": "text/html", "value": "<p>Long</p>"},
            {"type": "text/html", "value": "<p>Long</p>"},
        ]

    def test_no_contents(self):
        assert self.mapper.map_entry({"link": "https://a/1"}, 1).contents == []

    def test_map_entries_drops_linkless(self):
        entries = self.mapper.map_entries(
            [{"link": "https://a/1"}, {"title": "orphan"}, {"link": "https://a/2"}], 3
        )
        assert [e.link for e in entries] == ["https://a/1", "https://a/2"]
        assert {e.channel_id for e in entries} == {3}

    def test_parsed_rss_document(self):
        parsed = feedparser.parse(RSS_DOCUMENT)

        entries = self.mapper.map_entries(parsed.entries, 1)

        assert len(entries) == 1
        entry = entries[0]
        assert entry.link == "https://example.com/posts/1"
        assert entry.title == "First post"
        assert entry.publication_date == datetime(2024, 1, 2, 3, 4, 5)
        assert entry.contents[0]["value"] == "Summary one"
        assert entry.contents[-1]["value"] == "<p>Body one</p>"
