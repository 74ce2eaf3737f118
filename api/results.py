"""Vercel serverless function for computing poll results."""

import json
import logging
import os
import sys
from pathlib import Path
from urllib.parse import urlparse

import httpx

# Add the project root to the path so we can import rankedpoll modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from rankedpoll.parsers.json_export import JsonExportParser  # noqa: E402
from rankedpoll.results import ResultsError, analyze_export, compute_results  # noqa: E402

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = float(os.environ.get("RESULTS_FETCH_TIMEOUT", "30"))
ALLOWED_ORIGIN = os.environ.get("RESULTS_ALLOWED_ORIGIN", "*")


def handler(request):
    """Handle incoming requests to compute poll results.

    Accepts:
    - POST with JSON body: {"url": "https://..."} pointing at a poll export
    - POST with JSON body: {"poll": {...}, "ballots": [...]} (inline export)
    - POST with multipart form: file upload with 'file' field and optional 'filename' field

    Returns JSON with the poll and its IRV results.
    """
    # Handle CORS preflight
    if request.method == "OPTIONS":
        return create_response(
            "",
            status=204,
            headers={
                "Access-Control-Allow-Methods": "POST, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type",
            },
        )

    if request.method != "POST":
        return create_response(
            {"error": "Method not allowed. Use POST."},
            status=405,
        )

    try:
        content_type = request.headers.get("content-type", "")

        if "application/json" in content_type:
            data = json.loads(request.body.decode("utf-8"))
            if not isinstance(data, dict):
                return create_response(
                    {"error": "Request body must be a JSON object"},
                    status=400,
                )

            url = data.get("url")
            if url:
                source, content = fetch_url(url)
                results = analyze_export(source, content)
            elif "poll" in data:
                try:
                    poll = JsonExportParser().parse_data(data)
                except (ValueError, TypeError, KeyError) as e:
                    raise ResultsError(f"Failed to parse poll export: {e}") from e
                results = compute_results(poll)
            else:
                return create_response(
                    {"error": "Missing 'url' or 'poll' in request body"},
                    status=400,
                )

        elif "multipart/form-data" in content_type:
            # Note: Vercel's request object handles multipart parsing
            file_data = request.files.get("file")
            if not file_data:
                return create_response(
                    {"error": "Missing 'file' in form data"},
                    status=400,
                )

            filename = request.form.get("filename", file_data.filename or "upload")
            results = analyze_export(filename, file_data.read())

        else:
            return create_response(
                {"error": f"Unsupported content type: {content_type}"},
                status=400,
            )

        return create_response(results.to_dict())

    except ResultsError as e:
        return create_response(
            {"error": str(e)},
            status=400,
        )
    except json.JSONDecodeError as e:
        return create_response(
            {"error": f"Invalid JSON: {e}"},
            status=400,
        )
    except Exception as e:
        logger.exception("Unhandled error computing results")
        return create_response(
            {"error": f"Internal error: {e}"},
            status=500,
        )


def fetch_url(url: str) -> tuple[str, bytes]:
    """Fetch a poll export from a URL.

    Returns (source_identifier, content_bytes).
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise ResultsError(f"Invalid URL scheme: {parsed.scheme}")

    try:
        with httpx.Client(follow_redirects=True, timeout=FETCH_TIMEOUT) as client:
            response = client.get(url)
            response.raise_for_status()
            return url, response.content
    except httpx.HTTPStatusError as e:
        raise ResultsError(f"HTTP error fetching URL: {e.response.status_code}")
    except httpx.RequestError as e:
        raise ResultsError(f"Error fetching URL: {e}")


def create_response(body, status: int = 200, headers: dict = None):
    """Create a response object for Vercel."""
    response_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": ALLOWED_ORIGIN,
    }
    if headers:
        response_headers.update(headers)

    if isinstance(body, dict):
        body = json.dumps(body)

    # Return in format expected by Vercel Python runtime
    return {
        "statusCode": status,
        "headers": response_headers,
        "body": body,
    }
