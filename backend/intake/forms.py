"""
Form catalogue: one declarative FormDefinition per web form.

Each table lists, per canonical field, the raw key names that field has been
submitted under across storefront versions (first alias = preferred key).
Adding a form means adding a definition here and nothing else.

Forms:
  artist      — Artist application (Instagram handle + two essay questions)
  staff       — Staff application (lenient: only name and email required)
  backoffice  — Back Office application (unstable field names, raw dump)
  front-desk  — Front Desk application (blank optional lines omitted)
  booking     — Tattoo booking intake (honeypot "website", no confirmation)
"""

from intake.errors import UnknownFormError
from intake.models.forms import ConfirmationTemplate, FieldKind, FieldSpec, FormDefinition

# Keys the legacy forms post for tracking only
_TRACKING_KEYS = ("page", "userAgent", "user_agent", "__meta", "form_version", "submitted_at")

# Per-submission inbox override (validated as an email before use)
_NOTIFY_OVERRIDE = FieldSpec(
    name="notify_email",
    label="Routed to",
    aliases=("recipient", "notify_email"),
    omit_when_blank=True,
)


# ---------------------------------------------------------------------------
# Artist application
# ---------------------------------------------------------------------------

ARTIST = FormDefinition(
    slug="artist",
    title="New Seven Tattoo Artist Application",
    fields=(
        FieldSpec(
            name="full_name",
            label="Name",
            aliases=("fullName", "name", "full_name", "applicant_name"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="email",
            label="Email",
            kind=FieldKind.EMAIL,
            aliases=("email", "applicant_email"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="phone",
            label="Phone",
            kind=FieldKind.PHONE,
            aliases=("phone", "phone_number", "tel"),
        ),
        FieldSpec(name="position", label="Position", aliases=("position", "role"), default="Artist"),
        FieldSpec(
            name="city",
            label="City/Location",
            aliases=("city", "location", "city_location"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="ig_handle",
            label="Instagram Handle",
            kind=FieldKind.HANDLE,
            aliases=("instagram_handle", "ig_handle", "igHandle", "instagram"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="portfolio",
            label="Portfolio Link",
            kind=FieldKind.URL,
            aliases=("portfolio", "portfolio_link", "portfolio_url"),
        ),
        FieldSpec(
            name="proud",
            label="What must your work represent in five years for you to feel proud?",
            kind=FieldKind.LONG_TEXT,
            aliases=("q_proud", "fiveYear", "five_year", "about"),
        ),
        FieldSpec(
            name="commitment",
            label="Tell us about a long-term commitment you kept and why it mattered.",
            kind=FieldKind.LONG_TEXT,
            aliases=("q_commitment", "longCommit", "long_commit", "ownership_story"),
        ),
        FieldSpec(
            name="agree_sanitation",
            label="I agree to follow sanitation & compliance standards",
            kind=FieldKind.BOOLEAN,
            aliases=("agree_sanitation", "agreeSanitation", "consent", "compliance", "agree"),
        ),
        FieldSpec(
            name="video_url",
            label="60s Video (Why Seven?)",
            kind=FieldKind.URL,
            aliases=("video_url", "videoLink", "video_link"),
            omit_when_blank=True,
        ),
        FieldSpec(name="source", label="Source", aliases=("source",), default="Landing Page"),
        _NOTIFY_OVERRIDE,
    ),
    required=(
        "full_name",
        "email",
        "city",
        "ig_handle",
        "proud",
        "commitment",
        "agree_sanitation",
    ),
    honeypot_keys=("hp_extra_info", "hp"),
    metadata_keys=_TRACKING_KEYS,
    subject_prefix="Application: ",
    subject_details=("position",),
    recipient_key="artist",
    notify_override_field="notify_email",
    confirmation=ConfirmationTemplate(
        subject="We received your Artist application — Seven Tattoo",
        heading="Thanks, {name} — Artist application received",
        body=(
            "Thanks for applying to join Seven Tattoo as an Artist. We review "
            "applications within 48 hours and will reach out if we're moving forward."
        ),
    ),
)


# ---------------------------------------------------------------------------
# Staff application
# ---------------------------------------------------------------------------

STAFF = FormDefinition(
    slug="staff",
    title="New Seven Tattoo Staff Application",
    fields=(
        FieldSpec(
            name="full_name",
            label="Name",
            aliases=("fullName", "name", "full_name", "applicant_name"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="email",
            label="Email",
            kind=FieldKind.EMAIL,
            aliases=("email", "staff_email", "applicant_email"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="phone",
            label="Phone",
            kind=FieldKind.PHONE,
            aliases=("phone", "phone_number", "tel"),
        ),
        FieldSpec(
            name="city",
            label="City/Location",
            aliases=("city", "location", "city_location"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="position",
            label="Position/Role",
            aliases=("position", "role", "job", "applying_for"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="availability",
            label="Availability",
            aliases=("availability", "start_date", "start", "when_available"),
        ),
        FieldSpec(
            name="portfolio",
            label="Portfolio",
            kind=FieldKind.URL,
            aliases=("portfolio", "portfolio_link", "website", "url", "link"),
        ),
        FieldSpec(
            name="resume_link",
            label="Resume/Video",
            kind=FieldKind.URL,
            aliases=("resume_link", "resumeLink", "video_url", "cv_link", "drive"),
        ),
        FieldSpec(
            name="about",
            label="About (What do you need from a workplace to feel secure and grow?)",
            kind=FieldKind.LONG_TEXT,
            aliases=("about", "q_about", "needFromWorkplace", "need_from_workplace", "experience", "notes"),
        ),
        FieldSpec(
            name="ownership_story",
            label="Ownership story (when something went wrong)",
            kind=FieldKind.LONG_TEXT,
            aliases=("ownership_story", "ownershipStory", "q_ownership", "ownership"),
        ),
        FieldSpec(
            name="agree_policies",
            label="Agrees to policies",
            kind=FieldKind.BOOLEAN,
            aliases=("agree_policies", "proceduresConsent", "consent", "agree", "agree_sanitation"),
        ),
        FieldSpec(name="source", label="Source", aliases=("source",), default="Landing Page"),
        _NOTIFY_OVERRIDE,
    ),
    # The storefront enforces the rest; the server stays lenient.
    required=("full_name", "email"),
    honeypot_keys=("hp_extra_info", "hp"),
    metadata_keys=_TRACKING_KEYS,
    subject_prefix="New STAFF application — ",
    subject_details=("position",),
    recipient_key="staff",
    notify_override_field="notify_email",
    confirmation=ConfirmationTemplate(
        subject="Seven Tattoo — We received your Staff application",
        heading="Thanks, {name} — we got your application",
        body=(
            "Thanks for applying to Seven Tattoo. We've received your submission "
            "and will review it within 48 hours. If you're a match, we'll email you next steps."
        ),
    ),
)


# ---------------------------------------------------------------------------
# Back Office application
# ---------------------------------------------------------------------------

BACKOFFICE = FormDefinition(
    slug="backoffice",
    title="Back Office Application",
    fields=(
        FieldSpec(name="role", label="ROLE", aliases=("role",), default="Back Office (Staff)"),
        FieldSpec(
            name="full_name",
            label="Full Name",
            aliases=("fullName", "name", "applicant_name", "full_name"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="email",
            label="Email",
            kind=FieldKind.EMAIL,
            aliases=("email", "applicant_email"),
        ),
        FieldSpec(
            name="phone",
            label="Phone",
            kind=FieldKind.PHONE,
            aliases=("phone", "tel", "phone_number"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="city",
            label="City / Location",
            aliases=("city", "location", "city_location"),
            in_confirmation=True,
        ),
        FieldSpec(
            name="about",
            label="About (What do you need from a workplace to feel secure and grow?)",
            kind=FieldKind.LONG_TEXT,
            aliases=("about", "answer1", "q1", "why_fit", "what_you_need", "what_do_you_need"),
            key_patterns=(r"about", r"(organized|secure|grow|need).*work(place)?"),
        ),
        FieldSpec(
            name="ownership_story",
            label="Ownership story (when something went wrong)",
            kind=FieldKind.LONG_TEXT,
            aliases=(
                "ownershipStory",
                "ownership_story",
                "ownershipstory",
                "ownership-story",
                "ownership",
                "answer2",
                "q2",
                "story",
                "when_something_went_wrong",
                "something_went_wrong",
                "what_went_wrong",
                "went_wrong",
                "documented",
                "maintained_order",
                "made_work_easier",
            ),
            key_patterns=(
                r"owner(ship)?[_ -]?story",
                r"(document|maintain(ed)?|order|went[_ -]?wrong|made[_ -]?work[_ -]?easier)",
            ),
            best_guess=True,
        ),
        FieldSpec(
            name="resume_link",
            label="Resume / Portfolio / Video URL",
            kind=FieldKind.URL,
            aliases=(
                "resumeUrl",
                "resume_link",
                "video_url",
                "cv_link",
                "portfolio",
                "portfolio_url",
                "link",
                "url",
            ),
            in_confirmation=True,
        ),
        FieldSpec(
            name="consent",
            label="Agrees to policies",
            kind=FieldKind.BOOLEAN,
            aliases=("consentProcedures", "consent", "agree", "agree_sanitation"),
        ),
        FieldSpec(name="source", label="Source", aliases=("source",)),
        FieldSpec(name="page", label="Page", aliases=("page",), omit_when_blank=True),
        FieldSpec(
            name="user_agent",
            label="User Agent",
            aliases=("userAgent", "user_agent"),
            omit_when_blank=True,
        ),
        _NOTIFY_OVERRIDE,
    ),
    required=(
        "full_name",
        "email",
        "phone",
        "city",
        "about",
        "ownership_story",
        "resume_link",
    ),
    honeypot_keys=("hp_extra_info", "hp"),
    metadata_keys=("__meta", "form_version", "submitted_at"),
    subject_prefix="New BACK OFFICE application — ",
    recipient_key="backoffice",
    notify_override_field="notify_email",
    confirmation=ConfirmationTemplate(
        subject="Seven Tattoo — We received your Back Office application",
        heading="Thanks, {name} — Back Office application received",
        body=(
            "Thanks for applying to Seven Tattoo. We've received your Back Office "
            "application and will review it shortly. If we move forward, we'll reach "
            "out via this email."
        ),
    ),
    include_raw_dump=True,
)


# ---------------------------------------------------------------------------
# Front Desk application
# ---------------------------------------------------------------------------

FRONT_DESK = FormDefinition(
    slug="front-desk",
    title="New Seven Tattoo Application",
    fields=(
        FieldSpec(name="full_name", label="Name", aliases=("name", "fullName", "full_name")),
        FieldSpec(name="email", label="Email", kind=FieldKind.EMAIL, aliases=("email",)),
        FieldSpec(name="phone", label="Phone", kind=FieldKind.PHONE, aliases=("phone", "tel"), omit_when_blank=True),
        FieldSpec(name="position", label="Position", aliases=("position", "role"), default="Front Desk"),
        FieldSpec(
            name="start_date",
            label="Earliest start",
            aliases=("start_date", "availability"),
            omit_when_blank=True,
        ),
        FieldSpec(name="preferred_hours", label="Hours/week", aliases=("preferred_hours",), omit_when_blank=True),
        FieldSpec(name="days_available", label="Days", aliases=("days_available",), omit_when_blank=True),
        FieldSpec(
            name="weekends_holidays",
            label="Weekends & holidays",
            aliases=("weekends_holidays",),
            omit_when_blank=True,
        ),
        FieldSpec(
            name="years_customer_service",
            label="Customer service years",
            aliases=("years_customer_service",),
            omit_when_blank=True,
        ),
        FieldSpec(
            name="pos_or_frontdesk_tools",
            label="POS / front desk tools",
            aliases=("pos_or_frontdesk_tools",),
            omit_when_blank=True,
        ),
        FieldSpec(name="software", label="Software", aliases=("software",), omit_when_blank=True),
        FieldSpec(name="about", label="About", kind=FieldKind.LONG_TEXT, aliases=("about", "q_about")),
        FieldSpec(
            name="resume_link",
            label="Resume link",
            kind=FieldKind.URL,
            aliases=("resume_link", "cv_link"),
            omit_when_blank=True,
        ),
        FieldSpec(name="video_url", label="Video URL", kind=FieldKind.URL, aliases=("video_url", "videoLink")),
        FieldSpec(name="ref1", label="Ref 1", aliases=("ref1",), omit_when_blank=True),
        FieldSpec(name="ref2", label="Ref 2", aliases=("ref2",), omit_when_blank=True),
        FieldSpec(name="consent", label="Consent", kind=FieldKind.BOOLEAN, aliases=("consent", "agree")),
    ),
    required=("full_name", "email", "about", "video_url", "consent"),
    honeypot_keys=("hp_extra_info",),
    metadata_keys=_TRACKING_KEYS,
    subject_prefix="Application: ",
    subject_details=("position",),
    recipient_key="front_desk",
)


# ---------------------------------------------------------------------------
# Booking intake
# ---------------------------------------------------------------------------

BOOKING = FormDefinition(
    slug="booking",
    title="Seven Tattoo — Booking Intake",
    fields=(
        FieldSpec(name="meaning", label="Meaning", kind=FieldKind.LONG_TEXT, aliases=("meaning",)),
        FieldSpec(
            name="vision",
            label="Vision",
            kind=FieldKind.LONG_TEXT,
            aliases=("vision",),
            max_length=4000,
        ),
        FieldSpec(name="full_name", label="Full Name", aliases=("fullName", "name", "full_name")),
        FieldSpec(name="email", label="Email", kind=FieldKind.EMAIL, aliases=("email",)),
        FieldSpec(name="phone", label="Phone", kind=FieldKind.PHONE, aliases=("phone", "tel")),
        FieldSpec(name="placement", label="Placement", aliases=("placement",)),
        FieldSpec(name="scale", label="Scale", aliases=("scale", "size")),
        FieldSpec(name="hear", label="Heard About Us", aliases=("hear", "heard_about", "referral")),
        FieldSpec(
            name="consent",
            label="Consent",
            kind=FieldKind.BOOLEAN,
            aliases=("consent", "review_consent"),
        ),
        FieldSpec(name="artist", label="Artist (param)", aliases=("artist",)),
        FieldSpec(
            name="source_link",
            label="Source Link",
            kind=FieldKind.URL,
            aliases=("source_link", "source"),
        ),
    ),
    required=(
        "meaning",
        "vision",
        "full_name",
        "email",
        "phone",
        "placement",
        "scale",
        "hear",
        "artist",
        "consent",
    ),
    honeypot_keys=("website",),
    metadata_keys=_TRACKING_KEYS,
    subject_prefix="Booking Intake — ",
    subject_details=("scale", "placement"),
    subject_fallback_name="New Lead",
    recipient_key="booking",
    show_submitted_at=True,
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

FORMS: dict[str, FormDefinition] = {
    form.slug: form for form in (ARTIST, STAFF, BACKOFFICE, FRONT_DESK, BOOKING)
}


def get_form(slug: str) -> FormDefinition:
    """
    Look up a form definition by slug (case-insensitive).

    Raises UnknownFormError for unregistered slugs.
    """
    form = FORMS.get((slug or "").strip().lower())
    if form is None:
        raise UnknownFormError(
            f"Unknown form {slug!r}. Supported forms: {sorted(FORMS)}"
        )
    return form
