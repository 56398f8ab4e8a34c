#!/usr/bin/env python3
"""
Dev helper: send local PDF resumes to the local Resume Screener backend.

Wraps each PDF as a data URL file part inside a one-message chat history,
then POST-s it to /api/resumes/parse (default) or /api/resumes/screen.

Usage
-----
# Parse one resume, targeting localhost:8000
python scripts/send_resume.py cv.pdf

# Parse several and select the second one
python scripts/send_resume.py a.pdf b.pdf --resume-name 2

# Ask for screening feedback against a job description
python scripts/send_resume.py cv.pdf --screen --job "Backend intern, Go/Python"

# Print the request body without sending it
python scripts/send_resume.py cv.pdf --dry-run
"""

import argparse
import base64
import json
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Payload builder
# ---------------------------------------------------------------------------

def _to_data_url(content: bytes) -> str:
    return "data:application/pdf;base64," + base64.b64encode(content).decode()


def _build_payload(paths, resume_name=None, max_chars=None, job_description=None) -> dict:
    """One user message carrying every PDF as a file part."""
    parts = [
        {
            "type": "file",
            "mediaType": "application/pdf",
            "filename": path.name,
            "url": _to_data_url(path.read_bytes()),
        }
        for path in paths
    ]
    payload = {"messages": [{"id": "local-1", "role": "user", "parts": parts}]}
    if resume_name:
        payload["resume_name"] = resume_name
    if max_chars:
        payload["max_chars"] = max_chars
    if job_description:
        payload["job_description"] = job_description
    return payload


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        body = response.json()
        print(json.dumps(body, indent=2, ensure_ascii=False))
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
        prog="send_resume.py",
        description="Send local PDF resumes to the Resume Screener backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_resume.py cv.pdf
              python scripts/send_resume.py a.pdf b.pdf --resume-name b
              python scripts/send_resume.py cv.pdf --screen --job "Frontend intern"
        """),
    )
    parser.add_argument("files", nargs="+", metavar="PDF", help="PDF resume file(s) to send")
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--resume-name",
        default=None,
        help="1-based index or filename substring selecting which PDF(s) to process",
    )
    parser.add_argument("--max-chars", type=int, default=None, help="Clip resume text to this many characters")
    parser.add_argument("--screen", action="store_true", help="Call /screen instead of /parse")
    parser.add_argument("--job", dest="job_description", default=None, help="Job description for --screen")
    parser.add_argument("--timeout", type=float, default=120.0, help="Request timeout in seconds")
    parser.add_argument("--dry-run", action="store_true", help="Print the request body without sending it.")

    args = parser.parse_args()

    paths = [Path(f) for f in args.files]
    for path in paths:
        if not path.exists():
            print(f"ERROR: File not found: {path}", file=sys.stderr)
            return 1
        print(f"Attaching file: {path} ({path.stat().st_size:,} bytes)")

    payload = _build_payload(
        paths,
        resume_name=args.resume_name,
        max_chars=args.max_chars,
        job_description=args.job_description if args.screen else None,
    )

    endpoint = f"{args.url.rstrip('/')}/api/resumes/{'screen' if args.screen else 'parse'}"
    print(f"\nEndpoint  : {endpoint}")

    if args.dry_run:
        # Hide the base64 blobs
        for part in payload["messages"][0]["parts"]:
            part["url"] = f"<data URL, {len(part['url'])} chars>"
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    try:
        response = httpx.post(endpoint, json=payload, timeout=args.timeout)
    except httpx.ConnectError as e:
        print(f"\nERROR: Could not connect to {endpoint}: {e}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
