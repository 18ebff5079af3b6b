"""
Field resolver tests.

Coverage:
  - coerce_truthy: checkbox / consent coercion table
  - stringify: list, dict, number, bool rendering
  - normalize_handle: @-prefixing, pasted profile URLs, idempotence
  - resolve: alias priority, case-insensitive keys, alias transparency,
    key_patterns, best-guess fallback, declared defaults
"""

from datetime import datetime, timezone

import pytest

from intake.forms import ARTIST, BACKOFFICE, BOOKING, FRONT_DESK
from intake.services.resolver import coerce_truthy, normalize_handle, resolve, stringify


# ---------------------------------------------------------------------------
# Payload builder helpers
# ---------------------------------------------------------------------------

def _artist_payload_legacy() -> dict:
    """Artist submission using the oldest storefront key names."""
    return {
        "name": "Jane Doe",
        "email": "jane@x.com",
        "phone": "555-1234",
        "city": "Las Vegas",
        "ig_handle": "instagram.com/janedoe",
        "q_proud": "pride text",
        "q_commitment": "commit text",
        "consent": "yes",
    }


def _artist_payload_canonical() -> dict:
    """The same submission posted under canonical field names."""
    return {
        "full_name": "Jane Doe",
        "email": "jane@x.com",
        "phone": "555-1234",
        "city": "Las Vegas",
        "ig_handle": "@janedoe",
        "proud": "pride text",
        "commitment": "commit text",
        "agree_sanitation": True,
    }


# ===========================================================================
# coerce_truthy
# ===========================================================================

class TestCoerceTruthy:
    """Checkbox values arrive as bools, numbers or assorted strings."""

    @pytest.mark.parametrize("value", ["true", "on", "yes", "1", "y", True, 1, " YES ", "On"])
    def test_truthy_values(self, value):
        assert coerce_truthy(value) is True

    @pytest.mark.parametrize("value", ["", "false", None, 0, "no", "off", False, "maybe", 2])
    def test_falsy_values(self, value):
        assert coerce_truthy(value) is False

    def test_list_is_truthy_when_any_item_is(self):
        assert coerce_truthy(["", "on"]) is True
        assert coerce_truthy(["", "off"]) is False


# ===========================================================================
# stringify
# ===========================================================================

class TestStringify:

    def test_trims_strings(self):
        assert stringify("  Jane  ") == "Jane"

    def test_none_is_empty(self):
        assert stringify(None) == ""

    def test_numbers(self):
        assert stringify(42) == "42"

    def test_bools(self):
        assert stringify(True) == "true"

    def test_lists_join_non_empty_items(self):
        assert stringify(["Mon", "", " Tue "]) == "Mon, Tue"

    def test_dicts_render_as_json(self):
        assert stringify({"b": 2, "a": 1}) == '{"a": 1, "b": 2}'


# ===========================================================================
# normalize_handle
# ===========================================================================

class TestNormalizeHandle:

    def test_bare_name_gets_at_prefix(self):
        assert normalize_handle("janedoe") == "@janedoe"

    def test_pasted_profile_url_without_scheme(self):
        assert normalize_handle("instagram.com/janedoe") == "@janedoe"

    def test_pasted_profile_url_with_scheme_and_trailing_slash(self):
        assert normalize_handle("https://www.instagram.com/jane.doe/") == "@jane.doe"

    def test_protocol_relative_url(self):
        assert normalize_handle("//instagram.com/janedoe?igsh=abc") == "@janedoe"

    def test_strips_invalid_characters_and_extra_ats(self):
        assert normalize_handle("@@jane doe!") == "@janedoe"

    def test_nothing_usable_returns_empty(self):
        assert normalize_handle("@@@") == ""
        assert normalize_handle("   ") == ""
        assert normalize_handle(None) == ""

    def test_bare_domain_carries_no_handle(self):
        assert normalize_handle("https://instagram.com/") == ""

    @pytest.mark.parametrize("value", ["@janedoe", "@jane.doe", "@jane_doe99"])
    def test_idempotent(self, value):
        once = normalize_handle(value)
        assert once == value
        assert normalize_handle(once) == once


# ===========================================================================
# resolve: aliases
# ===========================================================================

class TestResolveAliases:
    """One generic resolver applies each form's declared alias table."""

    def test_legacy_artist_payload(self):
        app = resolve(_artist_payload_legacy(), ARTIST)

        assert app.form == "artist"
        assert app.values["full_name"] == "Jane Doe"
        assert app.values["ig_handle"] == "@janedoe"
        assert app.values["proud"] == "pride text"
        assert app.values["commitment"] == "commit text"
        assert app.values["agree_sanitation"] is True
        assert app.sources["full_name"] == "name"
        assert app.sources["agree_sanitation"] == "consent"

    def test_alias_transparency(self):
        """Legacy keys and canonical keys resolve to the same values."""
        legacy = resolve(_artist_payload_legacy(), ARTIST)
        canonical = resolve(_artist_payload_canonical(), ARTIST)
        assert legacy.values == canonical.values

    def test_every_declared_field_is_present(self):
        app = resolve({}, ARTIST)
        assert set(app.values) == set(ARTIST.field_names)
        assert app.values["agree_sanitation"] is False
        assert app.values["city"] == ""

    def test_none_input_is_empty_submission(self):
        app = resolve(None, ARTIST)
        assert app.values["full_name"] == ""

    def test_first_alias_wins_in_declared_order(self):
        # "fullName" precedes "name" in the artist table
        app = resolve({"name": "Second", "fullName": "First"}, ARTIST)
        assert app.values["full_name"] == "First"

    def test_canonical_name_is_always_tried_first(self):
        app = resolve({"name": "Alias", "full_name": "Canonical"}, ARTIST)
        assert app.values["full_name"] == "Canonical"

    def test_blank_alias_falls_through_to_next(self):
        app = resolve({"city": "   ", "location": "Henderson"}, ARTIST)
        assert app.values["city"] == "Henderson"
        assert app.sources["city"] == "location"

    def test_keys_match_case_insensitively(self):
        app = resolve({"EMAIL": "jane@x.com", "FullName": "Jane"}, ARTIST)
        assert app.values["email"] == "jane@x.com"
        assert app.values["full_name"] == "Jane"

    def test_unchecked_consent_is_false(self):
        app = resolve({"consent": "false"}, ARTIST)
        assert app.values["agree_sanitation"] is False

    def test_later_truthy_alias_satisfies_boolean(self):
        app = resolve({"agree_sanitation": "", "agree": "on"}, ARTIST)
        assert app.values["agree_sanitation"] is True

    def test_repeated_form_key_joins_values(self):
        app = resolve({"days_available": ["Fri", "Sat"]}, FRONT_DESK)
        assert app.values["days_available"] == "Fri, Sat"

    def test_raw_input_is_preserved(self):
        payload = _artist_payload_legacy()
        app = resolve(payload, ARTIST)
        assert app.raw == payload

    def test_submitted_at_is_carried(self):
        ts = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        app = resolve({}, BOOKING, submitted_at=ts)
        assert app.submitted_at == ts


# ===========================================================================
# resolve: defaults
# ===========================================================================

class TestResolveDefaults:

    def test_position_defaults_to_artist(self):
        app = resolve({}, ARTIST)
        assert app.values["position"] == "Artist"

    def test_submitted_position_overrides_default(self):
        app = resolve({"role": "Guest Artist"}, ARTIST)
        assert app.values["position"] == "Guest Artist"

    def test_backoffice_role_default(self):
        app = resolve({}, BACKOFFICE)
        assert app.values["role"] == "Back Office (Staff)"


# ===========================================================================
# resolve: key patterns and best-guess fallback
# ===========================================================================

class TestResolveFallbacks:
    """Back Office field names were never stable; extra tolerance applies there."""

    def test_key_pattern_matches_unlisted_key(self):
        app = resolve({"whatWentWrongAndHowYouFixedIt": "I fixed the books."}, BACKOFFICE)
        assert app.values["ownership_story"] == "I fixed the books."
        assert app.sources["ownership_story"] == "whatWentWrongAndHowYouFixedIt"
        assert app.fallback_keys == {}

    def test_alias_beats_key_pattern(self):
        app = resolve(
            {"maintained_records": "pattern value", "story": "alias value"},
            BACKOFFICE,
        )
        assert app.values["ownership_story"] == "alias value"

    def test_best_guess_picks_longest_unclaimed_free_text(self):
        payload = {
            "fullName": "Alex Kim",
            "email": "alex@x.com",
            "about": "I need calm and structure.",
            "q_mystery": "short answer here",
            "q_unknown": "A much longer story about the quarter the ledger did not balance.",
        }
        app = resolve(payload, BACKOFFICE)

        assert app.values["ownership_story"] == payload["q_unknown"]
        assert app.fallback_keys == {"ownership_story": "q_unknown"}

    def test_best_guess_ignores_claimed_metadata_and_honeypot_keys(self):
        payload = {
            "about": "A long answer that the about field already claimed for itself.",
            "userAgent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit",
            "hp_extra_info": "spam spam spam spam spam spam",
            "__meta": "tracking payload with some spaces in it",
        }
        app = resolve(payload, BACKOFFICE)

        assert app.values["ownership_story"] == ""
        assert app.fallback_keys == {}

    def test_best_guess_skips_short_single_words(self):
        app = resolve({"q_unknown": "yes"}, BACKOFFICE)
        assert app.values["ownership_story"] == ""

    def test_best_guess_accepts_long_values_without_whitespace(self):
        token = "x" * 41
        app = resolve({"q_unknown": token}, BACKOFFICE)
        assert app.values["ownership_story"] == token
        assert app.fallback_keys["ownership_story"] == "q_unknown"

    def test_forms_without_best_guess_leave_field_empty(self):
        app = resolve({"q_unknown": "A long answer nobody asked for in this form."}, ARTIST)
        assert app.values["proud"] == ""
        assert app.fallback_keys == {}
