"""Tests for the eligibility filter and location rules."""

import pytest
from bs4 import BeautifulSoup

from shortlinks.locations import LOCATION_RULES, LocationRule, is_eligible, iter_locations


class TestIsEligible:
    """Test the shared eligibility filter."""

    @pytest.mark.parametrize("url", [
        "http://example.com",
        "https://example.com/path?q=1#frag",
        "https://a.com/x ",
    ])
    def test_http_urls_are_eligible(self, url):
        assert is_eligible(url)

    @pytest.mark.parametrize("url", [
        None,
        "",
        "   ",
        "data:image/png;base64,AAAA",
        "mailto:someone@example.com",
        "tel:+15551234567",
        "#section",
        "/relative/path",
        "ftp://example.com/file",
        "javascript:void(0)",
        "//cdn.example.com/lib.js",
        " https://example.com",
    ])
    def test_ineligible_values(self, url):
        assert not is_eligible(url)

    def test_prefix_match_is_case_sensitive(self):
        assert not is_eligible("HTTPS://EXAMPLE.COM")
        assert not is_eligible("Http://example.com")

    def test_non_string_is_ineligible(self):
        assert not is_eligible(42)


class TestLocationRules:
    """Test the declarative rule table and traversal."""

    def test_six_rules(self):
        assert LOCATION_RULES == (
            LocationRule("a", "href"),
            LocationRule("img", "src"),
            LocationRule("script", "src"),
            LocationRule("link", "href"),
            LocationRule("form", "action"),
            LocationRule(None, "data-url"),
        )

    def test_iter_locations_visits_every_rule(self):
        soup = BeautifulSoup(
            '<a href="1"></a><img src="2"><script src="3"></script>'
            '<link href="4"><form action="5"></form><span data-url="6"></span>',
            "html.parser",
        )

        values = sorted(value for _, _, value in iter_locations(soup))
        assert values == ["1", "2", "3", "4", "5", "6"]

    def test_iter_locations_ignores_other_attributes(self):
        soup = BeautifulSoup(
            '<a name="x"></a><img alt="https://a.com"><div href="https://b.com"></div>'
            '<iframe src="https://c.com"></iframe><area href="https://d.com">',
            "html.parser",
        )

        assert list(iter_locations(soup)) == []

    def test_data_url_on_any_element(self):
        soup = BeautifulSoup(
            '<td data-url="https://a.com"></td><a href="https://b.com" data-url="https://c.com"></a>',
            "html.parser",
        )

        found = {(element.name, attribute, value) for element, attribute, value in iter_locations(soup)}
        assert found == {
            ("td", "data-url", "https://a.com"),
            ("a", "href", "https://b.com"),
            ("a", "data-url", "https://c.com"),
        }

    def test_uppercase_markup_matches(self):
        soup = BeautifulSoup('<A HREF="https://a.com">x</A>', "html.parser")

        assert [value for _, _, value in iter_locations(soup)] == ["https://a.com"]
