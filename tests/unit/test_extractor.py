"""Tests for intents/extractor.py."""
from __future__ import annotations

from sitebuild.intents.extractor import InteractiveElement, extract_interactive_elements


def _texts(html: str) -> list[str]:
    return [e.text for e in extract_interactive_elements(html)]


def test_button_extracted() -> None:
    elements = list(extract_interactive_elements("<button class='x'>Book Now</button>"))
    assert elements == [InteractiveElement(text="Book Now", context="button", tag="button")]


def test_link_extracted() -> None:
    elements = list(extract_interactive_elements('<a href="/about">Learn More</a>'))
    assert elements == [InteractiveElement(text="Learn More", context="link", tag="a")]


def test_submit_input_extracted() -> None:
    html = '<form><input type="submit" value="Send Message"></form>'
    elements = list(extract_interactive_elements(html))
    assert elements == [InteractiveElement(text="Send Message", context="form-submit", tag="input")]


def test_passes_run_buttons_then_links_then_submits() -> None:
    html = (
        '<input type="submit" value="Go">'
        '<a href="/x">Link One</a>'
        "<button>Button One</button>"
        '<a href="/y">Link Two</a>'
        "<button>Button Two</button>"
    )
    assert _texts(html) == ["Button One", "Button Two", "Link One", "Link Two", "Go"]


def test_text_is_trimmed() -> None:
    assert _texts("<button>\n   Call Now  \n</button>") == ["Call Now"]


def test_empty_labels_skipped() -> None:
    assert _texts("<button>   </button><a href='/'> </a>") == []


def test_bare_url_link_text_skipped() -> None:
    assert _texts('<a href="/x">https://example.com</a>') == []


def test_off_site_links_kept() -> None:
    html = (
        '<a href="https://facebook.com/acme">Share on Facebook</a>'
        '<a href="https://maps.google.com/?q=x">Get Directions</a>'
        '<a href="//cdn.example.com">Assets</a>'
    )
    assert _texts(html) == ["Share on Facebook", "Get Directions", "Assets"]


def test_bare_url_label_skipped_regardless_of_href() -> None:
    html = '<a href="https://example.com">http://example.com</a><a href="/c">Contact</a>'
    assert _texts(html) == ["Contact"]


def test_non_navigational_schemes_kept() -> None:
    assert _texts('<a href="tel:+15551234">Call Us</a>') == ["Call Us"]


def test_nested_markup_not_extracted() -> None:
    assert _texts("<button><span>Icon</span></button>") == []


def test_case_insensitive_tags() -> None:
    assert _texts("<BUTTON>Buy Now</BUTTON>") == ["Buy Now"]


def test_no_elements() -> None:
    assert _texts("<h1>Welcome</h1><p>Hello</p>") == []
