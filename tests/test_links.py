"""
Tests de la localisation des liens internes.
"""

import pytest
from bs4 import BeautifulSoup

from wiki_translator.htmlpage import localize_href, localize_links


class TestLocalizeHref:
    @pytest.mark.parametrize(
        "href, expected",
        [
            ("/wiki/Apple", "/wiki/Apple/es"),
            ("/wiki/Apple#Taste", "/wiki/Apple/es#Taste"),
            ("/wiki/Apple?oldid=3#Taste", "/wiki/Apple/es?oldid=3#Taste"),
            ("/wiki/Main_Page", "/wiki/Main_Page/es"),
        ],
    )
    def test_internal_article_links(self, href, expected):
        assert localize_href(href, "es") == expected

    @pytest.mark.parametrize(
        "href",
        [
            "",
            "#History",
            "https://example.org/wiki/Apple",
            "//example.org/wiki/Apple",
            "mailto:someone@example.org",
            "/w/index.php?title=Apple&action=edit",
            "/wiki/",
        ],
    )
    def test_ignored_links(self, href):
        assert localize_href(href, "es") is None

    @pytest.mark.parametrize(
        "href",
        [
            "/wiki/Special:Search",
            "/wiki/File:Apple.jpg",
            "/wiki/Category:Fruits",
            "/wiki/Template:Infobox",
            "/wiki/User:Alice",
            "/wiki/User_talk:Alice",
            "/wiki/Help:Contents",
        ],
    )
    def test_excluded_namespaces(self, href):
        assert localize_href(href, "es") is None

    def test_colon_in_article_title(self):
        assert localize_href("/wiki/Star_Wars:_Andor", "es") == "/wiki/Star_Wars:_Andor/es"

    def test_already_localized(self):
        assert localize_href("/wiki/Apple/es", "es") is None

    def test_custom_article_path(self):
        assert localize_href("/index/Apple", "de", article_path="/index/") == "/index/Apple/de"
        assert localize_href("/wiki/Apple", "de", article_path="/index/") is None


class TestLocalizeLinks:
    def test_rewrites_internal_links(self):
        soup = BeautifulSoup(
            '<p><a href="/wiki/Apple">Apple</a> and '
            '<a href="https://example.org">site</a></p>',
            "html.parser",
        )

        count = localize_links(soup, "es")

        links = soup.find_all("a")
        assert count == 1
        assert links[0]["href"] == "/wiki/Apple/es"
        assert links[1]["href"] == "https://example.org"

    def test_skips_missing_page_links(self):
        soup = BeautifulSoup(
            '<a class="new" href="/wiki/Nothing_here">Nothing</a>', "html.parser"
        )

        assert localize_links(soup, "es") == 0
        assert soup.a["href"] == "/wiki/Nothing_here"

    def test_link_text_untouched(self):
        soup = BeautifulSoup('<a href="/wiki/Apple">Apple pie</a>', "html.parser")
        localize_links(soup, "es")
        assert soup.a.get_text() == "Apple pie"

    def test_anchors_without_href_ignored(self):
        soup = BeautifulSoup('<a name="top">Top</a>', "html.parser")
        assert localize_links(soup, "es") == 0
