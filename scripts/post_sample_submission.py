#!/usr/bin/env python3
"""
Dev helper: post a sample form submission to the local intake backend.

Builds a realistic payload for one of the registered forms (using the key
names the storefront forms actually send) and POST-s it to
/api/forms/<form>, either as JSON or as a URL-encoded body.

Usage
-----
# Artist application as JSON, targeting localhost:8000
python scripts/post_sample_submission.py

# Booking intake as a classic URL-encoded form post
python scripts/post_sample_submission.py --form booking --urlencoded

# Trip the honeypot (expect 200 with nothing sent)
python scripts/post_sample_submission.py --honeypot

# Drop a required field (expect 422)
python scripts/post_sample_submission.py --omit email

# Print the payload without sending it
python scripts/post_sample_submission.py --form backoffice --dry-run

Run the backend with MAIL_PROVIDER=log to see the rendered emails in the
server log instead of sending them.
"""

import argparse
import json
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Sample payloads (raw storefront keys, not canonical names)
# ---------------------------------------------------------------------------

_SAMPLES = {
    "artist": {
        "fullName": "Jane Doe",
        "email": "jane@example.com",
        "phone": "702-555-0100",
        "location": "Las Vegas, NV",
        "igHandle": "https://instagram.com/janedoe.ink",
        "portfolio": "https://janedoe.example.com",
        "fiveYear": "Work that clients still love a decade later.\nClean lines, healed well.",
        "longCommit": "Four years apprenticing under one mentor without missing a day.",
        "agreeSanitation": "on",
        "source": "Artist Landing Page",
    },
    "staff": {
        "name": "Sam Rivera",
        "staff_email": "sam@example.com",
        "role": "Shop Manager",
        "availability": "Immediately",
        "needFromWorkplace": "Clear expectations and room to grow.",
    },
    "backoffice": {
        "fullName": "Alex Kim",
        "email": "alex@example.com",
        "tel": "702-555-0142",
        "city_location": "Henderson, NV",
        "answer1": "A calm, organized workplace where systems are respected.",
        "tell_us_about_the_time_the_books_did_not_balance": (
            "Our quarter-end ledger was off by $312. I traced it to a duplicated "
            "vendor invoice, fixed the entry and wrote a checklist so it never recurred."
        ),
        "resumeUrl": "https://drive.google.com/file/d/abc123/view",
        "consentProcedures": "true",
        "page": "/pages/back-office",
        "userAgent": "post_sample_submission.py",
    },
    "front-desk": {
        "name": "Riley Chen",
        "email": "riley@example.com",
        "position": "Front Desk",
        "days_available": ["Fri", "Sat", "Sun"],
        "about": "Five years in hospitality; I love making people feel welcome.",
        "video_url": "https://youtu.be/example",
        "consent": "yes",
    },
    "booking": {
        "meaning": "A memorial piece for my grandmother.",
        "vision": "Fine-line peonies wrapping the forearm, soft black and grey.",
        "fullName": "Morgan Lee",
        "email": "morgan@example.com",
        "phone": "702-555-0199",
        "placement": "Forearm",
        "scale": "Medium",
        "hear": "Instagram",
        "consent": True,
        "artist": "Any",
        "source_link": "https://seventattoolv.com/pages/book",
    },
}

_HONEYPOT_KEYS = {
    "booking": "website",
}


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="post_sample_submission.py",
        description=textwrap.dedent("""\
            Post a sample form submission to the intake backend.
        """),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/post_sample_submission.py
              python scripts/post_sample_submission.py --form booking --urlencoded
              python scripts/post_sample_submission.py --honeypot
              python scripts/post_sample_submission.py --omit email
        """),
    )
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--form",
        default="artist",
        choices=list(_SAMPLES),
        help="Form to submit (default: artist)",
    )
    parser.add_argument(
        "--urlencoded",
        action="store_true",
        help="Send application/x-www-form-urlencoded instead of JSON.",
    )
    parser.add_argument(
        "--email",
        default=None,
        help="Override the applicant email in the sample payload.",
    )
    parser.add_argument(
        "--omit",
        action="append",
        default=[],
        metavar="KEY",
        help="Drop a raw key from the payload (repeatable).",
    )
    parser.add_argument(
        "--honeypot",
        action="store_true",
        help="Fill the form's hidden honeypot field.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload without sending it.",
    )

    args = parser.parse_args()

    payload = dict(_SAMPLES[args.form])
    if args.email:
        email_key = "staff_email" if args.form == "staff" else "email"
        payload[email_key] = args.email
    for key in args.omit:
        payload.pop(key, None)
    if args.honeypot:
        payload[_HONEYPOT_KEYS.get(args.form, "hp_extra_info")] = "http://spam.example"

    endpoint = f"{args.url.rstrip('/')}/api/forms/{args.form}"
    encoding = "urlencoded" if args.urlencoded else "json"

    print(f"Form      : {args.form}")
    print(f"Endpoint  : {endpoint}")
    print(f"Encoding  : {encoding}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2))
        return 0

    if args.urlencoded:
        # Booleans are posted the way a checked checkbox would be.
        form_data = {k: ("on" if v is True else v) for k, v in payload.items() if v is not False}
        request_kwargs = {"data": form_data}
    else:
        request_kwargs = {"json": payload}

    try:
        response = httpx.post(endpoint, timeout=30.0, **request_kwargs)
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {args.url}. Is the backend running?",
            file=sys.stderr,
        )
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
