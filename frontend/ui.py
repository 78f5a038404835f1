"""
Streamlit pages for the artist catalog.

    Home        category cards; a card opens Artists pre-filtered (?category=)
    Artists     search box, sidebar facets, grid/list cards, result count
    Join        four-step onboarding form, submitted to the API
    Dashboard   mock submissions with unfiltered stats

Every page keeps its state in st.session_state (FilterState, OnboardingForm)
and syncs widget keys from that state before drawing, so callbacks such as
"Clear all" only have to touch the state objects.
"""

import streamlit as st

from catalog.dashboard import (
    ALL,
    InvalidStatusTransition,
    build_submissions,
    compute_stats,
    filter_submissions,
    request_status_change,
)
from catalog.dataset import Dataset
from catalog.models import STATUSES, Artist, Submission
from catalog.search import (
    FACET_TITLES,
    SORT_KEYS,
    FilterState,
    facet_options,
    filter_artists,
    results_label,
    sort_artists,
)
from onboarding.form import BIO_MAX, LAST_STEP, STEPS, OnboardingForm
from onboarding.sinks import HttpSink

PAGES = ("Home", "Artists", "Join", "Dashboard")


@st.cache_resource
def load_dataset() -> Dataset:
    return Dataset.load()


@st.cache_resource
def load_submissions() -> list[Submission]:
    return build_submissions(load_dataset().artists)


def _init_state(dataset: Dataset) -> None:
    ss = st.session_state
    ss.setdefault("page", PAGES[0])
    ss.setdefault("filters", FilterState(dataset.vocabulary))
    ss.setdefault("view_mode", "grid")
    ss.setdefault("sort", "featured")
    ss.setdefault("onboard_form", OnboardingForm(dataset.vocabulary))


class ToastNotifier:
    def success(self, message: str) -> None:
        st.toast(message, icon="✅")

    def warning(self, message: str) -> None:
        st.toast(message, icon="⚠️")

    def error(self, message: str) -> None:
        st.toast(message, icon="🚨")


# ---------------------------------------------------------------------------
# Card helpers
# ---------------------------------------------------------------------------

def category_badges(categories: list[str], limit: int = 2) -> list[str]:
    """First `limit` categories, plus a "+N" badge for the rest."""
    badges = list(categories[:limit])
    if len(categories) > limit:
        badges.append(f"+{len(categories) - limit}")
    return badges


def rating_label(artist: Artist) -> str:
    return f"★ {artist.rating} ({artist.review_count})"


def _badge_line(values: list[str]) -> str:
    return " ".join(f"`{v}`" for v in values)


def _avatar(artist: Artist, width: int) -> None:
    if artist.image:
        st.image(artist.image, width=width)
    else:
        st.markdown(f"### {artist.name[:1]}")


def _artist_card(artist: Artist, variant: str) -> None:
    verified = " ✔" if artist.is_verified else ""
    with st.container(border=True):
        if variant == "list":
            left, right = st.columns([1, 5])
            with left:
                _avatar(artist, 64)
            with right:
                st.markdown(f"**{artist.name}**{verified}  \n"
                            f"{rating_label(artist)} · 📍 {artist.location} · {artist.fee_range}")
                st.markdown(_badge_line(category_badges(artist.categories)))
                st.caption(artist.bio)
        else:
            _avatar(artist, 240)
            st.markdown(f"**{artist.name}**{verified}")
            st.caption(f"{rating_label(artist)} · 📍 {artist.location}")
            st.markdown(_badge_line(category_badges(artist.categories)))
            st.caption(artist.bio[:120] + ("…" if len(artist.bio) > 120 else ""))
            st.markdown(f"**{artist.fee_range}**")


# ---------------------------------------------------------------------------
# Home
# ---------------------------------------------------------------------------

def _open_category(name: str, dataset: Dataset) -> None:
    # A fresh browsing session, seeded from the query parameter on the next run.
    st.session_state["filters"] = FilterState(dataset.vocabulary)
    st.query_params["category"] = name
    st.session_state["page"] = "Artists"


def render_home(dataset: Dataset) -> None:
    st.title("Book Amazing Artists")
    st.markdown("Find the perfect artist for your event from our diverse categories.")

    cols = st.columns(3)
    for i, category in enumerate(dataset.categories):
        with cols[i % 3], st.container(border=True):
            st.markdown(f"**{category.name}**")
            st.caption(category.description)
            st.button(
                f"Browse {category.name}",
                key=f"home-{category.id}",
                on_click=_open_category,
                args=(category.name, dataset),
            )


# ---------------------------------------------------------------------------
# Artists
# ---------------------------------------------------------------------------

def _facet_key(facet: str, value: str) -> str:
    return f"facet-{facet}-{value}"


def _on_search() -> None:
    st.session_state["filters"].search = st.session_state["search_term"]


def _on_facet(facet: str, value: str) -> None:
    ss = st.session_state
    ss["filters"].toggle(facet, value, ss[_facet_key(facet, value)])


def _on_remove(value: str) -> None:
    st.session_state["filters"].remove(value)


def _on_clear_all() -> None:
    st.session_state["filters"].clear_all()


def _sync_widgets(state: FilterState) -> None:
    """Push FilterState into widget keys before the widgets are drawn."""
    ss = st.session_state
    ss["search_term"] = state.search
    for facet, options in facet_options(state.vocabulary, state).items():
        for value, checked in options:
            ss[_facet_key(facet, value)] = checked


def _render_sidebar(state: FilterState) -> None:
    with st.sidebar:
        if state.active_count:
            st.subheader(f"Active Filters ({state.active_count})")
            st.button("Clear All", key="sidebar-clear", on_click=_on_clear_all)
            for value in state.active_values:
                st.button(f"✕ {value}", key=f"remove-{value}", on_click=_on_remove, args=(value,))

        for facet, options in facet_options(state.vocabulary, state).items():
            st.subheader(FACET_TITLES[facet])
            for value, _ in options:
                st.checkbox(value, key=_facet_key(facet, value), on_change=_on_facet, args=(facet, value))


def render_artists(dataset: Dataset) -> None:
    ss = st.session_state
    state: FilterState = ss["filters"]
    state.seed_category(st.query_params.get("category"))
    _sync_widgets(state)

    st.title("Discover Artists")
    st.markdown("Find the perfect artist for your event from our curated collection")

    search_col, sort_col, view_col = st.columns([4, 2, 1])
    search_col.text_input(
        "Search",
        key="search_term",
        placeholder="Search artists, categories, or locations...",
        on_change=_on_search,
    )
    sort_col.selectbox("Sort by", list(SORT_KEYS), key="sort")
    view_col.radio("View", ["grid", "list"], key="view_mode", horizontal=True)

    _render_sidebar(state)

    results = sort_artists(filter_artists(dataset.artists, state), ss["sort"])
    st.caption(results_label(len(results)))

    if not results:
        st.subheader("No artists found")
        st.markdown("Try adjusting your filters or search terms")
        st.button("Clear all filters", key="empty-clear", on_click=_on_clear_all)
        return

    if ss["view_mode"] == "grid":
        cols = st.columns(3)
        for i, artist in enumerate(results):
            with cols[i % 3]:
                _artist_card(artist, "grid")
    else:
        for artist in results:
            _artist_card(artist, "list")


# ---------------------------------------------------------------------------
# Join (onboarding)
# ---------------------------------------------------------------------------

_FORM_KEYS = {
    "onboard_name":     "name",
    "onboard_bio":      "bio",
    "onboard_fee":      "fee_range",
    "onboard_location": "location",
}


def _on_form_field(key: str) -> None:
    form: OnboardingForm = st.session_state["onboard_form"]
    setattr(form, _FORM_KEYS[key], st.session_state[key] or "")


def _on_toggle(kind: str, value: str) -> None:
    form: OnboardingForm = st.session_state["onboard_form"]
    if kind == "categories":
        form.toggle_category(value)
    else:
        form.toggle_language(value)


def _on_next() -> None:
    st.session_state["onboard_form"].next_step(ToastNotifier())


def _on_prev() -> None:
    st.session_state["onboard_form"].prev_step()


def _on_submit() -> None:
    st.session_state["onboard_form"].submit(HttpSink(), ToastNotifier())


def _field_error(form: OnboardingForm, field: str) -> None:
    if field in form.errors:
        st.caption(f":red[{form.errors[field]}]")


def _sync_form(form: OnboardingForm) -> None:
    ss = st.session_state
    for key, attr in _FORM_KEYS.items():
        ss[key] = getattr(form, attr)
    for value in form.vocabulary.categories:
        ss[f"onboard-cat-{value}"] = value in form.categories
    for value in form.vocabulary.languages:
        ss[f"onboard-lang-{value}"] = value in form.languages


def _choice_grid(kind: str, prefix: str, options: list[str]) -> None:
    cols = st.columns(3)
    for i, value in enumerate(options):
        cols[i % 3].checkbox(value, key=f"{prefix}-{value}", on_change=_on_toggle, args=(kind, value))


def render_join(dataset: Dataset) -> None:
    form: OnboardingForm = st.session_state["onboard_form"]
    vocab = dataset.vocabulary
    _sync_form(form)

    st.title("Join as an Artist")
    st.markdown("Share your talent with event planners across India")

    st.progress(form.step / LAST_STEP, text=f"Step {form.step} of {LAST_STEP}")
    st.subheader(form.current.title)
    st.caption(form.current.description)

    if form.step == 1:
        st.text_input("Full Name *", key="onboard_name", placeholder="Enter your full name",
                      on_change=_on_form_field, args=("onboard_name",))
        _field_error(form, "name")
        st.text_area(f"Professional Bio * ({form.bio_counter})", key="onboard_bio", max_chars=BIO_MAX,
                     placeholder="Tell us about your experience, achievements, and what makes you unique as an artist...",
                     on_change=_on_form_field, args=("onboard_bio",))
        _field_error(form, "bio")

    elif form.step == 2:
        st.markdown("**Categories *** (Select all that apply)")
        _choice_grid("categories", "onboard-cat", vocab.categories)
        if form.categories:
            st.markdown("Selected categories: " + _badge_line(form.categories))
        st.markdown("**Languages Spoken *** (Select all that apply)")
        _choice_grid("languages", "onboard-lang", vocab.languages)
        if form.languages:
            st.markdown("Selected languages: " + _badge_line(form.languages))
        _field_error(form, "selection")

    elif form.step == 3:
        st.selectbox("Fee Range *", ["", *vocab.fee_ranges], key="onboard_fee",
                     format_func=lambda v: v or "Select your fee range",
                     on_change=_on_form_field, args=("onboard_fee",))
        _field_error(form, "fee_range")
        st.selectbox("Location *", ["", *vocab.locations], key="onboard_location",
                     format_func=lambda v: v or "Select your city",
                     on_change=_on_form_field, args=("onboard_location",))
        _field_error(form, "location")
        upload = st.file_uploader("Profile Image (Optional)", type=["jpg", "jpeg", "png"])
        form.image = upload.name if upload is not None else form.image

    else:
        with st.container(border=True):
            st.markdown("#### Review Your Information")
            for label, value in form.review().items():
                shown = _badge_line(value) if isinstance(value, list) else value
                st.markdown(f"**{label}:** {shown}")
        st.info("After submission, our team will review your profile within 2-3 business days. "
                "You'll receive an email notification once your profile is approved and live on the platform.")

    prev_col, next_col = st.columns(2)
    prev_col.button("← Previous", on_click=_on_prev, disabled=form.step == STEPS[0].id)
    if form.step < LAST_STEP:
        next_col.button("Next →", on_click=_on_next, type="primary")
    else:
        next_col.button("Submit Application", on_click=_on_submit, type="primary")


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def _on_status(submission: Submission, status: str) -> None:
    try:
        change = request_status_change(submission, status)
    except InvalidStatusTransition as exc:
        st.toast(str(exc), icon="🚨")
        return
    st.toast(f"{submission.name}: {change.previous} → {change.requested} (not saved)", icon="ℹ️")


def render_dashboard(dataset: Dataset) -> None:
    submissions = load_submissions()
    stats = compute_stats(submissions)

    st.title("Manager Dashboard")
    st.markdown("Review and manage artist applications")

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Artists", stats.total)
    c2.metric("Pending Review", stats.pending)
    c3.metric("Approved", stats.approved)
    c4.metric("Approval Rate", f"{stats.approval_rate:.1f}%")

    search_col, status_col, cat_col = st.columns([3, 1, 1])
    search = search_col.text_input("Search", placeholder="Search by name or location...")
    status = status_col.selectbox("Status", [ALL, *STATUSES])
    category = cat_col.selectbox("Category", [ALL, *dataset.vocabulary.categories])

    shown = filter_submissions(submissions, search=search, status=status, category=category)
    st.subheader(f"Artist Submissions ({len(shown)})")

    rows = [
        {
            "Artist": s.name,
            "Rating": s.rating,
            "Categories": ", ".join(category_badges(s.categories)),
            "Location": s.location,
            "Fee Range": s.fee_range,
            "Status": s.status,
            "Submitted": s.submitted_at.date().isoformat(),
        }
        for s in shown
    ]
    st.dataframe(rows, use_container_width=True, hide_index=True)

    pending = [s for s in shown if s.status == "pending"]
    if pending:
        st.markdown("**Decide a pending application**")
        pick_col, approve_col, reject_col = st.columns([3, 1, 1])
        picked = pick_col.selectbox("Application", pending, format_func=lambda s: s.name,
                                    label_visibility="collapsed")
        approve_col.button("Approve", on_click=_on_status, args=(picked, "approved"))
        reject_col.button("Reject", on_click=_on_status, args=(picked, "rejected"))


RENDERERS = {
    "Home":      render_home,
    "Artists":   render_artists,
    "Join":      render_join,
    "Dashboard": render_dashboard,
}


def main() -> None:
    dataset = load_dataset()
    _init_state(dataset)

    st.sidebar.radio("Go to", PAGES, key="page")
    RENDERERS[st.session_state["page"]](dataset)
