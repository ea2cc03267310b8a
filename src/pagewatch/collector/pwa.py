"""Default PWA checks: manifest, HTTPS, viewport, icons and theme color.

The linked manifest is fetched with the audit's shared ``httpx.AsyncClient``.
A fetch that fails or times out yields a single minor
``manifest-check-failed`` outcome instead of aborting the audit.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urljoin, urlparse

import httpx

from ..logging_config import get_logger
from ..models import FixSuggestion, Severity
from .checks import CheckContext, CheckOutcome

logger = get_logger(__name__)

LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1"})

_ICON_SIZES_CODE = (
    '{\n  "icons": [\n'
    '    {\n      "src": "/icon-192.png",\n      "sizes": "192x192",\n      "type": "image/png"\n    },\n'
    '    {\n      "src": "/icon-512.png",\n      "sizes": "512x512",\n      "type": "image/png"\n    }\n'
    "  ]\n}"
)

_LEARN_MORE: tuple[tuple[str, str], ...] = (
    ("manifest", "https://web.dev/add-manifest/"),
    ("https", "https://web.dev/why-https-matters/"),
    ("viewport", "https://web.dev/viewport/"),
    (
        "apple-touch-icon",
        "https://developer.apple.com/library/archive/documentation/AppleApplications/Reference/"
        "SafariWebContent/ConfiguringWebApplications/ConfiguringWebApplications.html",
    ),
    ("theme-color", "https://web.dev/add-manifest/#theme-color"),
)


def _fix(check_id: str, description: str, code: str) -> FixSuggestion:
    url = next(
        (url for fragment, url in _LEARN_MORE if fragment in check_id),
        "https://web.dev/progressive-web-apps/",
    )
    return FixSuggestion(description=description, code=code, learn_more_url=url)


def _failed(
    check_id: str,
    severity: Severity,
    message: str,
    description: str,
    fix_description: str,
    fix_code: str,
) -> CheckOutcome:
    return CheckOutcome(
        id=check_id,
        severity=severity,
        passed=False,
        message=message,
        description=description,
        fix=_fix(check_id, fix_description, fix_code),
    )


async def fetch_manifest(context: CheckContext) -> Optional[dict[str, Any]]:
    """Fetch and decode the linked manifest; None when absent or unreadable."""
    link = context.document.select_one('link[rel="manifest"]')
    href = link.get("href") if link is not None else None
    if not href:
        return None

    try:
        url = urljoin(context.document.url, href)
        response = await context.http.get(url)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.debug("Could not fetch manifest %s: %s", href, e)
        return None
    return data if isinstance(data, dict) else None


def manifest_content_outcomes(manifest: dict[str, Any]) -> list[CheckOutcome]:
    outcomes = []

    if not manifest.get("name"):
        outcomes.append(
            _failed(
                "manifest-name-missing",
                Severity.SERIOUS,
                'Manifest is missing "name" property',
                "The name property is required for users to identify your app.",
                "Add a name property to your manifest.",
                '{\n  "name": "My Progressive Web App",\n  ...\n}',
            )
        )
    if not manifest.get("short_name"):
        outcomes.append(
            _failed(
                "manifest-short-name-missing",
                Severity.MODERATE,
                'Manifest is missing "short_name" property',
                "The short_name is used when space is limited (e.g., home screen).",
                "Add a short_name property to your manifest.",
                '{\n  "short_name": "PWA",\n  ...\n}',
            )
        )
    if not manifest.get("start_url"):
        outcomes.append(
            _failed(
                "manifest-start-url-missing",
                Severity.SERIOUS,
                'Manifest is missing "start_url" property',
                "The start_url tells the browser where your app should start when launched.",
                "Add a start_url property to your manifest.",
                '{\n  "start_url": "/",\n  ...\n}',
            )
        )
    if not manifest.get("display"):
        outcomes.append(
            _failed(
                "manifest-display-missing",
                Severity.MODERATE,
                'Manifest is missing "display" property',
                "The display property controls how your app appears when launched.",
                "Add a display property to your manifest.",
                '{\n  "display": "standalone",\n  ...\n}',
            )
        )
    for key in ("theme_color", "background_color"):
        if not manifest.get(key):
            slug = key.replace("_", "-")
            outcomes.append(
                _failed(
                    f"manifest-{slug}-missing",
                    Severity.MODERATE,
                    f'Manifest is missing "{key}" property',
                    f"The {key} property styles the app shell and splash screen.",
                    f"Add a {key} property to your manifest.",
                    f'{{\n  "{key}": "#ffffff",\n  ...\n}}',
                )
            )

    icons = manifest.get("icons") or []
    if not icons:
        outcomes.append(
            _failed(
                "manifest-icons-missing",
                Severity.CRITICAL,
                "Manifest has no icons",
                "Icons are required for your app to be installable. Provide at least 192x192 "
                "and 512x512 icons.",
                "Add icons to your manifest with multiple sizes.",
                _ICON_SIZES_CODE,
            )
        )
    else:
        sizes = [str(icon.get("sizes")) for icon in icons if isinstance(icon, dict) and icon.get("sizes")]
        if not (any("192" in s for s in sizes) and any("512" in s for s in sizes)):
            outcomes.append(
                _failed(
                    "manifest-icons-sizes",
                    Severity.SERIOUS,
                    "Manifest is missing required icon sizes (192x192 and 512x512)",
                    "For optimal installability, provide icons in both 192x192 and 512x512 sizes.",
                    "Add icons in the required sizes.",
                    _ICON_SIZES_CODE,
                )
            )
    return outcomes


async def check_manifest(context: CheckContext) -> list[CheckOutcome]:
    if context.document.select_one('link[rel="manifest"]') is None:
        return [
            _failed(
                "manifest-missing",
                Severity.CRITICAL,
                "Page is missing a web app manifest",
                "A web app manifest is required for PWAs to be installable and provide app-like "
                "experiences.",
                "Add a manifest.json file and link to it from your HTML.",
                '<!-- In HTML <head> -->\n<link rel="manifest" href="/manifest.json">',
            )
        ]

    outcomes = [CheckOutcome("manifest-ok", Severity.MINOR, True, "Web app manifest is linked")]
    manifest = await fetch_manifest(context)
    if manifest is None:
        outcomes.append(
            _failed(
                "manifest-check-failed",
                Severity.MINOR,
                "Unable to verify web app manifest",
                "The linked manifest could not be fetched or parsed, so its contents were not "
                "checked.",
                "Make sure the manifest URL is reachable and serves valid JSON.",
                '<link rel="manifest" href="/manifest.json">',
            )
        )
        return outcomes

    return outcomes + manifest_content_outcomes(manifest)


def check_https(context: CheckContext) -> list[CheckOutcome]:
    parsed = urlparse(context.document.url)
    if parsed.scheme == "https" or parsed.hostname in LOCAL_HOSTS:
        return [CheckOutcome("pwa-https-ok", Severity.MINOR, True, "Site is served over HTTPS")]
    return [
        _failed(
            "pwa-https-required",
            Severity.CRITICAL,
            "PWAs require HTTPS (except on localhost)",
            "Service workers and many PWA features require a secure context (HTTPS).",
            "Enable HTTPS on your web server.",
            "# Redirect all HTTP to HTTPS\nRewriteEngine On\nRewriteCond %{HTTPS} off\n"
            "RewriteRule ^(.*)$ https://%{HTTP_HOST}%{REQUEST_URI} [L,R=301]",
        )
    ]


def check_viewport(context: CheckContext) -> list[CheckOutcome]:
    if context.document.select_one('meta[name="viewport"]') is not None:
        return [CheckOutcome("pwa-viewport-ok", Severity.MINOR, True, "Viewport meta tag is present")]
    return [
        _failed(
            "pwa-viewport-missing",
            Severity.SERIOUS,
            "Page is missing viewport meta tag",
            "A viewport meta tag is required for the app to render correctly on mobile devices.",
            "Add a viewport meta tag.",
            '<meta name="viewport" content="width=device-width, initial-scale=1">',
        )
    ]


def check_apple_touch_icon(context: CheckContext) -> list[CheckOutcome]:
    if context.document.select_one('link[rel="apple-touch-icon"]') is not None:
        return [
            CheckOutcome("apple-touch-icon-ok", Severity.MINOR, True, "Apple touch icon is present")
        ]
    return [
        _failed(
            "apple-touch-icon-missing",
            Severity.MODERATE,
            "Missing apple-touch-icon for iOS",
            "Apple touch icons improve the experience when users add your PWA to their iOS home "
            "screen.",
            "Add an apple-touch-icon link tag.",
            '<link rel="apple-touch-icon" href="/apple-touch-icon.png">',
        )
    ]


def check_theme_color(context: CheckContext) -> list[CheckOutcome]:
    if context.document.select_one('meta[name="theme-color"]') is not None:
        return [
            CheckOutcome("theme-color-meta-ok", Severity.MINOR, True, "Theme color meta tag is present")
        ]
    return [
        _failed(
            "theme-color-meta-missing",
            Severity.MODERATE,
            "Missing theme-color meta tag",
            "The theme-color meta tag colors the browser UI to match your app.",
            "Add a theme-color meta tag.",
            '<meta name="theme-color" content="#000000">',
        )
    ]


CHECKS = (check_manifest, check_https, check_viewport, check_apple_touch_icon, check_theme_color)
