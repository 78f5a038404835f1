from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from frontend.ui import PAGES, RENDERERS, category_badges, rating_label

from conftest import make_artist

APP_FILE = str(Path(__file__).resolve().parent.parent / "frontend" / "streamlit_app.py")


def _captions(at: AppTest) -> list[str]:
    return [c.value for c in at.caption]


def _subheaders(at: AppTest) -> list[str]:
    return [s.value for s in at.subheader]


def _click(at: AppTest, label: str) -> AppTest:
    button = next(b for b in at.button if b.label == label)
    return button.click().run()


@pytest.fixture
def app():
    """A fresh Streamlit session; set page/query params before calling run()."""
    return AppTest.from_file(APP_FILE, default_timeout=30)


class TestCardHelpers:
    """Test the text helpers used on artist cards."""

    def test_two_categories_no_overflow(self):
        """Test that two categories are shown without an overflow badge."""
        assert category_badges(["Singer", "DJ"]) == ["Singer", "DJ"]

    def test_overflow_badge(self):
        """Test that categories past the second collapse into a "+N" badge."""
        assert category_badges(["Singer", "DJ", "Band", "Speaker"]) == ["Singer", "DJ", "+2"]

    def test_rating_label(self):
        """Test the star rating and review count label."""
        artist = make_artist("1", "Asha", ["Singer"], "Goa", rating=4.8, reviewCount=127)
        assert rating_label(artist) == "★ 4.8 (127)"


class TestPages:
    """Test page routing."""

    def test_every_page_has_a_renderer(self):
        """Test that every sidebar page has a render function."""
        assert set(PAGES) == set(RENDERERS)

    def test_home_renders_category_cards(self, app):
        """Test that the landing page shows one browse button per category."""
        app.run()
        assert not app.exception
        labels = [b.label for b in app.button]
        assert "Browse Singer" in labels
        assert "Browse Band" in labels


class TestArtistsPage:
    """Test browsing, seeding and the empty result view."""

    def test_all_artists_without_filters(self, app):
        """Test that the artists page starts with the full dataset."""
        app.session_state["page"] = "Artists"
        app.run()
        assert not app.exception
        assert "Showing 12 artists" in _captions(app)

    def test_category_query_param_seeds_filter(self, app):
        """Test that ?category=DJ pre-selects DJ and lists the three DJs."""
        app.session_state["page"] = "Artists"
        app.query_params["category"] = "DJ"
        app.run()
        assert not app.exception
        assert "Showing 3 artists" in _captions(app)
        assert app.session_state["filters"].categories == ["DJ"]
        assert app.checkbox(key="facet-categories-DJ").value is True

    def test_home_card_opens_seeded_artists_page(self, app):
        """Test that clicking a category card switches page and pre-selects it."""
        app.run()
        app.button(key="home-3").click().run()
        assert not app.exception
        assert app.session_state["page"] == "Artists"
        assert "Showing 3 artists" in _captions(app)

    def test_zero_hit_search_shows_empty_view(self, app):
        """Test that a search with no matches shows "No artists found"."""
        app.session_state["page"] = "Artists"
        app.run()
        app.text_input(key="search_term").input("zzzz").run()
        assert not app.exception
        assert "Showing 0 artists" in _captions(app)
        assert "No artists found" in _subheaders(app)

    def test_clear_all_from_empty_view(self, app):
        """Test that "Clear all filters" empties the state and restores every artist."""
        app.session_state["page"] = "Artists"
        app.query_params["category"] = "DJ"
        app.run()
        app.text_input(key="search_term").input("zzzz").run()
        assert "No artists found" in _subheaders(app)

        app.button(key="empty-clear").click().run()
        assert not app.exception
        assert "Showing 12 artists" in _captions(app)
        assert "No artists found" not in _subheaders(app)
        assert app.session_state["filters"].as_dict() == {
            "search": "", "categories": [], "locations": [], "fee_ranges": [],
        }
        assert app.text_input(key="search_term").value == ""
        assert app.checkbox(key="facet-categories-DJ").value is False

    def test_facet_checkbox_filters(self, app):
        """Test that checking a location narrows the results."""
        app.session_state["page"] = "Artists"
        app.run()
        app.checkbox(key="facet-locations-Goa").check().run()
        assert not app.exception
        assert app.session_state["filters"].locations == ["Goa"]
        assert "Showing 12 artists" not in _captions(app)


class TestJoinPage:
    """Test the onboarding form through the page."""

    def _fill_step_one(self, app, bio):
        app.session_state["page"] = "Join"
        app.run()
        app.text_input(key="onboard_name").input("Asha Kapoor").run()
        app.text_area(key="onboard_bio").input(bio).run()
        return _click(app, "Next →")

    def test_short_bio_stays_on_step_one(self, app):
        """Test that a 49-character bio keeps the form on step 1."""
        self._fill_step_one(app, "b" * 49)
        assert not app.exception
        form = app.session_state["onboard_form"]
        assert form.step == 1
        assert "bio" in form.errors

    def test_fifty_character_bio_advances(self, app):
        """Test that a 50-character bio moves the form to step 2."""
        self._fill_step_one(app, "b" * 50)
        assert not app.exception
        form = app.session_state["onboard_form"]
        assert form.step == 2
        assert form.errors == {}
        assert "Skills & Categories" in _subheaders(app)
