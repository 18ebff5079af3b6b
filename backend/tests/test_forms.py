"""
Form catalogue and FormDefinition model tests.
"""

import pytest
from pydantic import ValidationError

from intake.errors import UnknownFormError
from intake.forms import ARTIST, BOOKING, FORMS, get_form
from intake.models.forms import FieldKind, FieldSpec, FormDefinition


class TestCatalogue:

    def test_registered_slugs(self):
        assert list(FORMS) == ["artist", "staff", "backoffice", "front-desk", "booking"]

    @pytest.mark.parametrize("slug", ["artist", "ARTIST", " booking "])
    def test_get_form(self, slug):
        assert get_form(slug).slug == slug.strip().lower()

    def test_unknown_form(self):
        with pytest.raises(UnknownFormError, match="Supported forms"):
            get_form("piercing")

    @pytest.mark.parametrize("form", list(FORMS.values()), ids=list(FORMS))
    def test_required_fields_are_declared(self, form):
        assert set(form.required) <= set(form.field_names)

    def test_artist_required_order(self):
        assert ARTIST.required == (
            "full_name",
            "email",
            "city",
            "ig_handle",
            "proud",
            "commitment",
            "agree_sanitation",
        )

    def test_booking_honeypot(self):
        assert BOOKING.honeypot_keys == ("website",)
        assert BOOKING.confirmation is None


class TestFieldSpec:

    def test_canonical_name_leads_aliases(self):
        spec = FieldSpec(name="city", label="City", aliases=("location", "city", "city_location"))
        assert spec.aliases == ("city", "location", "city_location")

    def test_default_aliases_are_just_the_name(self):
        assert FieldSpec(name="ref1", label="Ref 1").aliases == ("ref1",)

    def test_specs_are_frozen(self):
        spec = FieldSpec(name="city", label="City")
        with pytest.raises(ValidationError):
            spec.label = "Town"


class TestFormDefinition:

    def _fields(self):
        return (
            FieldSpec(name="full_name", label="Name"),
            FieldSpec(name="email", label="Email", kind=FieldKind.EMAIL),
        )

    def test_rejects_undeclared_required_field(self):
        with pytest.raises(ValidationError, match="undeclared"):
            FormDefinition(slug="x", title="X", fields=self._fields(), required=("phone",))

    def test_rejects_duplicate_field(self):
        fields = self._fields() + (FieldSpec(name="email", label="Again"),)
        with pytest.raises(ValidationError, match="twice"):
            FormDefinition(slug="x", title="X", fields=fields, required=())

    def test_field_lookup(self):
        form = FormDefinition(slug="x", title="X", fields=self._fields(), required=("email",))
        assert form.field("email").kind == FieldKind.EMAIL
        with pytest.raises(KeyError):
            form.field("phone")

    def test_all_aliases_are_lower_cased(self):
        form = FormDefinition(
            slug="x",
            title="X",
            fields=(FieldSpec(name="full_name", label="Name", aliases=("fullName",)),),
            required=(),
        )
        assert form.all_aliases() == {"full_name", "fullname"}
