"""
Message renderer tests.

Coverage:
  - Subject lines (prefix, fallback name, detail suffix)
  - Notice text/HTML: declared order, placeholders, omitted blank lines,
    fallback key annotation, raw dump, submitted-at line
  - HTML escaping of hostile values
  - Applicant confirmation content, and its absence for forms without one
"""

from datetime import datetime, timezone

from intake.forms import ARTIST, BACKOFFICE, BOOKING, FRONT_DESK
from intake.services.renderer import (
    PLACEHOLDER,
    escape,
    render_confirmation,
    render_notice,
    render_subject,
)
from intake.services.resolver import resolve


def _artist(**overrides):
    payload = {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "city": "Las Vegas",
        "ig_handle": "janedoe",
        "q_proud": "line one\nline two",
        "q_commitment": "commit text",
        "consent": "yes",
        "portfolio": "janedoe.example.com",
    }
    payload.update(overrides)
    return resolve(payload, ARTIST)


# ===========================================================================
# escape
# ===========================================================================

class TestEscape:

    def test_escapes_markup_and_quotes(self):
        assert escape("<a href=\"x\">'&'</a>") == "&lt;a href=&quot;x&quot;&gt;&#x27;&amp;&#x27;&lt;/a&gt;"

    def test_non_strings(self):
        assert escape(5) == "5"


# ===========================================================================
# Subject
# ===========================================================================

class TestSubject:

    def test_artist_subject_includes_position(self):
        assert render_subject(_artist(), ARTIST) == "Application: Jane Doe (Artist)"

    def test_fallback_name(self):
        assert render_subject(_artist(name=""), ARTIST) == "Application: Applicant (Artist)"

    def test_booking_subject_details(self):
        app = resolve({"name": "Morgan", "scale": "Medium", "placement": "Forearm"}, BOOKING)
        assert render_subject(app, BOOKING) == "Booking Intake — Morgan (Medium, Forearm)"

    def test_booking_subject_without_name_or_details(self):
        app = resolve({}, BOOKING)
        assert render_subject(app, BOOKING) == "Booking Intake — New Lead"

    def test_newlines_in_name_are_collapsed(self):
        assert render_subject(_artist(name="Jane\r\nBcc: x@y.com"), ARTIST).startswith(
            "Application: Jane Bcc: x@y.com"
        )


# ===========================================================================
# Studio notice
# ===========================================================================

class TestNotice:

    def test_text_lists_fields_in_declared_order(self):
        text = render_notice(_artist(), ARTIST).text

        assert text.startswith("New Seven Tattoo Artist Application\n")
        positions = [text.index(label) for label in ("Name:", "Email:", "City/Location:", "Instagram Handle:")]
        assert positions == sorted(positions)
        assert "Instagram Handle: @janedoe" in text
        assert "I agree to follow sanitation & compliance standards: Yes" in text

    def test_blank_field_renders_placeholder(self):
        text = render_notice(_artist(), ARTIST).text
        assert f"Phone: {PLACEHOLDER}" in text

    def test_omit_when_blank_drops_line(self):
        text = render_notice(_artist(), ARTIST).text
        assert "60s Video" not in text
        assert "Routed to" not in text

    def test_front_desk_omits_blank_optional_lines(self):
        app = resolve({"name": "Riley", "email": "r@x.com", "about": "hi", "video_url": "https://youtu.be/x"}, FRONT_DESK)
        text = render_notice(app, FRONT_DESK).text

        assert "Days:" not in text
        assert PLACEHOLDER not in text.split("About")[0]

    def test_long_text_keeps_line_breaks(self):
        rendered = render_notice(_artist(), ARTIST)
        assert "line one\nline two" in rendered.text
        assert "line one<br>line two" in rendered.html

    def test_url_renders_as_anchor(self):
        html = render_notice(_artist(), ARTIST).html
        assert '<a href="https://janedoe.example.com">janedoe.example.com</a>' in html

    def test_email_renders_as_mailto(self):
        html = render_notice(_artist(), ARTIST).html
        assert '<a href="mailto:jane@x.com">jane@x.com</a>' in html

    def test_script_is_escaped_in_html(self):
        hostile = '<script>alert("x")</script>'
        rendered = render_notice(_artist(name=hostile, q_commitment=hostile, city=hostile), ARTIST)

        assert "<script>" not in rendered.html
        assert "&lt;script&gt;" in rendered.html
        # Plain text is not HTML and keeps the value as typed
        assert hostile in rendered.text

    def test_javascript_url_is_not_linked(self):
        html = render_notice(_artist(portfolio="javascript:alert(1)"), ARTIST).html
        assert 'href="javascript' not in html

    def test_fallback_key_is_annotated(self):
        app = resolve(
            {"fullName": "Alex", "q_unknown": "A long story about the ledger that did not balance."},
            BACKOFFICE,
        )
        rendered = render_notice(app, BACKOFFICE)

        assert "[Ownership story (when something went wrong) key used: q_unknown]" in rendered.text
        assert "q_unknown" in rendered.html

    def test_backoffice_raw_dump_excludes_honeypot(self):
        app = resolve({"fullName": "Alex", "custom_q": "custom answer", "hp_extra_info": ""}, BACKOFFICE)
        rendered = render_notice(app, BACKOFFICE)

        assert "All submitted fields (raw)" in rendered.text
        assert "custom_q: custom answer" in rendered.text
        assert "hp_extra_info" not in rendered.text
        assert "custom_q: custom answer" in rendered.html

    def test_artist_notice_has_no_raw_dump(self):
        assert "All submitted fields" not in render_notice(_artist(), ARTIST).text

    def test_booking_notice_shows_submitted_at(self):
        ts = datetime(2026, 3, 1, 18, 30, tzinfo=timezone.utc)
        app = resolve({"name": "Morgan"}, BOOKING, submitted_at=ts)
        rendered = render_notice(app, BOOKING)

        assert "Submitted: 2026-03-01T18:30:00+00:00" in rendered.text
        assert "2026-03-01T18:30:00+00:00" in rendered.html

    def test_rendering_is_deterministic(self):
        assert render_notice(_artist(), ARTIST) == render_notice(_artist(), ARTIST)


# ===========================================================================
# Applicant confirmation
# ===========================================================================

class TestConfirmation:

    def test_artist_confirmation(self):
        rendered = render_confirmation(_artist(), ARTIST)

        assert rendered is not None
        assert rendered.subject == "We received your Artist application — Seven Tattoo"
        assert rendered.text.startswith("Hi Jane Doe,")
        assert "What we received:" in rendered.text
        assert "- Instagram Handle: @janedoe" in rendered.text
        assert rendered.text.endswith("— Seven Tattoo")
        assert "Thanks, Jane Doe — Artist application received" in rendered.html

    def test_confirmation_escapes_applicant_values(self):
        rendered = render_confirmation(_artist(name="<b>Jane</b>"), ARTIST)
        assert "<b>Jane</b>" not in rendered.html
        assert "&lt;b&gt;Jane&lt;/b&gt;" in rendered.html

    def test_forms_without_confirmation_return_none(self):
        assert render_confirmation(resolve({}, BOOKING), BOOKING) is None
        assert render_confirmation(resolve({}, FRONT_DESK), FRONT_DESK) is None
