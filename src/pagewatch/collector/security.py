"""Default security checks: HTTPS, response headers, mixed content and forms.

Response headers come from a ``HEAD`` request to the page URL.  When the
probe fails (network error, timeout, non-HTTP URL) the audit reports one
minor ``headers-check-failed`` outcome rather than a finding per header.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx

from ..logging_config import get_logger
from ..models import FixSuggestion, Severity
from .checks import CheckContext, CheckOutcome

logger = get_logger(__name__)

_HTTPS_REDIRECT = (
    "# Apache .htaccess\nRewriteEngine On\nRewriteCond %{HTTPS} off\n"
    "RewriteRule ^(.*)$ https://%{HTTP_HOST}%{REQUEST_URI} [L,R=301]"
)


@dataclass(frozen=True)
class SecurityHeader:
    name: str
    severity: Severity
    description: str
    example: str

    @property
    def check_id(self) -> str:
        return "header-" + re.sub(r"[^a-z0-9]", "-", self.name.lower())


SECURITY_HEADERS = (
    SecurityHeader(
        "Content-Security-Policy",
        Severity.SERIOUS,
        "CSP helps prevent XSS attacks by controlling which resources can be loaded.",
        "Content-Security-Policy: default-src 'self'; script-src 'self'; style-src 'self'",
    ),
    SecurityHeader(
        "Strict-Transport-Security",
        Severity.SERIOUS,
        "HSTS ensures browsers only connect to your site over HTTPS.",
        "Strict-Transport-Security: max-age=31536000; includeSubDomains",
    ),
    SecurityHeader(
        "X-Frame-Options",
        Severity.SERIOUS,
        "Prevents clickjacking attacks by controlling if your site can be embedded in frames.",
        "X-Frame-Options: DENY",
    ),
    SecurityHeader(
        "X-Content-Type-Options",
        Severity.MODERATE,
        "Prevents MIME type sniffing attacks.",
        "X-Content-Type-Options: nosniff",
    ),
    SecurityHeader(
        "Referrer-Policy",
        Severity.MODERATE,
        "Controls how much referrer information is shared with other sites.",
        "Referrer-Policy: strict-origin-when-cross-origin",
    ),
    SecurityHeader(
        "Permissions-Policy",
        Severity.MODERATE,
        "Controls which browser features and APIs can be used.",
        "Permissions-Policy: camera=(), microphone=(), geolocation=()",
    ),
)

_LEARN_MORE: tuple[tuple[str, str], ...] = (
    ("https", "https://developers.google.com/web/fundamentals/security/encrypt-in-transit/why-https"),
    ("header", "https://owasp.org/www-project-secure-headers/"),
    ("mixed-content", "https://developer.mozilla.org/en-US/docs/Web/Security/Mixed_content"),
    ("csrf", "https://owasp.org/www-community/attacks/csrf"),
    ("password", "https://owasp.org/www-project-web-security-testing-guide/"),
)


def _fix(check_id: str, description: str, code: str) -> FixSuggestion:
    url = next(
        (url for fragment, url in _LEARN_MORE if fragment in check_id),
        "https://owasp.org/www-project-top-ten/",
    )
    return FixSuggestion(description=description, code=code, learn_more_url=url)


def _is_https(context: CheckContext) -> bool:
    return urlparse(context.document.url).scheme == "https"


def check_https(context: CheckContext) -> list[CheckOutcome]:
    if _is_https(context):
        return [CheckOutcome("https-ok", Severity.MINOR, True, "HTTPS is enabled")]
    return [
        CheckOutcome(
            id="https-not-enabled",
            severity=Severity.CRITICAL,
            passed=False,
            message="Page is not served over HTTPS",
            description=(
                "HTTPS encrypts data between the browser and server, protecting against "
                "eavesdropping and tampering."
            ),
            fix=_fix(
                "https-not-enabled",
                "Enable HTTPS on your web server and redirect all HTTP traffic to HTTPS.",
                _HTTPS_REDIRECT,
            ),
        )
    ]


async def check_security_headers(context: CheckContext) -> list[CheckOutcome]:
    try:
        response = await context.http.head(context.document.url)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.debug("Header probe failed for %s: %s", context.document.url, e)
        return [
            CheckOutcome(
                id="headers-check-failed",
                severity=Severity.MINOR,
                passed=False,
                message="Unable to check security headers",
                description="Could not fetch response headers for this page.",
                fix=_fix(
                    "headers-check-failed",
                    "Security headers should be configured on your server.",
                    "# Configure security headers in your web server config",
                ),
            )
        ]

    return [
        CheckOutcome(
            id=header.check_id,
            severity=header.severity,
            passed=False,
            message=f"Missing {header.name} header",
            description=header.description,
            fix=_fix(
                header.check_id,
                f"Add the {header.name} header to your server configuration.",
                header.example,
            ),
        )
        for header in SECURITY_HEADERS
        if not response.headers.get(header.name)
    ]


def check_mixed_content(context: CheckContext) -> list[CheckOutcome]:
    document = context.document
    found = []
    for label, selector in (
        ("script(s)", 'script[src^="http://"]'),
        ("stylesheet(s)", 'link[href^="http://"]'),
        ("image(s)", 'img[src^="http://"]'),
        ("iframe(s)", 'iframe[src^="http://"]'),
    ):
        count = document.count(selector)
        if count:
            found.append(f"{count} {label}")
    if not found:
        return [CheckOutcome("mixed-content-ok", Severity.MINOR, True, "No mixed content detected")]

    return [
        CheckOutcome(
            id="mixed-content",
            severity=Severity.SERIOUS,
            passed=False,
            message=f"Found {', '.join(found)} loaded over HTTP",
            description=(
                "Mixed content (HTTP resources on HTTPS pages) weakens HTTPS security and may be "
                "blocked by browsers."
            ),
            fix=_fix(
                "mixed-content",
                "Update all resource URLs to use HTTPS or protocol-relative URLs.",
                '<!-- Change from -->\n<script src="http://example.com/script.js"></script>\n'
                '<!-- To -->\n<script src="https://example.com/script.js"></script>',
            ),
        )
    ]


def check_forms(context: CheckContext) -> list[CheckOutcome]:
    insecure = without_csrf = 0
    for form in context.document.select("form"):
        if (form.get("action") or "").startswith("http://"):
            insecure += 1
        if (form.get("method") or "get").lower() == "post":
            if form.select_one('input[name*="csrf"], input[name*="token"]') is None:
                without_csrf += 1

    outcomes = []
    if insecure:
        outcomes.append(
            CheckOutcome(
                id="forms-insecure",
                severity=Severity.CRITICAL,
                passed=False,
                message=f"{insecure} form(s) submit over HTTP",
                description=(
                    "Forms should always submit data over HTTPS to protect sensitive information."
                ),
                fix=_fix(
                    "forms-insecure",
                    "Update form action URLs to use HTTPS.",
                    '<form action="https://example.com/submit" method="post">\n'
                    "  <!-- form fields -->\n</form>",
                ),
            )
        )
    if without_csrf:
        outcomes.append(
            CheckOutcome(
                id="forms-no-csrf",
                severity=Severity.SERIOUS,
                passed=False,
                message=f"{without_csrf} POST form(s) missing CSRF tokens",
                description=(
                    "POST forms should include CSRF tokens to prevent Cross-Site Request "
                    "Forgery attacks."
                ),
                fix=_fix(
                    "forms-no-csrf",
                    "Add CSRF token to forms from your backend framework.",
                    '<form method="post">\n'
                    '  <input type="hidden" name="csrf_token" value="TOKEN_FROM_SERVER">\n</form>',
                ),
            )
        )
    return outcomes


def check_password_fields(context: CheckContext) -> list[CheckOutcome]:
    if urlparse(context.document.url).scheme != "http":
        return []
    if context.document.count('input[type="password"]') == 0:
        return []
    return [
        CheckOutcome(
            id="password-over-http",
            severity=Severity.CRITICAL,
            passed=False,
            message="Password fields on non-HTTPS page",
            description=(
                "Password fields should never be used on HTTP pages as credentials can be "
                "intercepted."
            ),
            fix=_fix(
                "password-over-http",
                "Enable HTTPS for all pages with password fields.",
                _HTTPS_REDIRECT,
            ),
        )
    ]


CHECKS = (
    check_https,
    check_security_headers,
    check_mixed_content,
    check_forms,
    check_password_fields,
)
