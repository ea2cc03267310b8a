"""Performance audit: windowed Web Vitals plus static load metrics → Issues.

Static metrics (navigation timing and resources) are read once from the
timeline.  Windowed metrics come from :mod:`.signals`.  Only metrics rated
worse than "good" produce issues.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable

from ..config import AuditConfig
from ..models import Category, ElementInfo, FixSuggestion, Issue, Severity, WcagCriteria
from . import thresholds
from .document import DocumentAccess
from .selectors import element_html, tag_from_selector
from .signals import (
    BlockingTimeResult,
    InteractionResult,
    LayoutShiftResult,
    SignalReport,
    measure_signals,
)
from .thresholds import Rating, Threshold
from .timeline import LargestContentfulPaintEntry, ResourceEntry

IdFactory = Callable[[], str]

VITALS_URL = "https://web.dev/vitals/"
BODY_HTML = "<body>...</body>"

_NON_ALNUM = re.compile(r"[^a-z0-9]")


@dataclass(frozen=True)
class Metric:
    """A single observer-free measurement."""

    name: str
    value: float
    unit: str  # "ms" | "KB" | "resources"
    threshold: Threshold

    @property
    def rating(self) -> Rating:
        return self.threshold.rate(self.value)

    @property
    def rule_id(self) -> str:
        return "performance-" + _NON_ALNUM.sub("-", self.name.lower())

    def format_value(self) -> str:
        if self.unit in ("ms", "KB", "resources"):
            return f"{self.value:.0f}"
        return f"{self.value:.2f}"

    def format_with_unit(self, value: object = None) -> str:
        text = self.format_value() if value is None else str(value)
        return f"{text} {self.unit}" if self.unit == "resources" else f"{text}{self.unit}"


def _criteria(name: str, description: str) -> WcagCriteria:
    return WcagCriteria(id="Performance", level="AA", name=name, description=description)


# ── observer-free metrics ─────────────────────────────────────────


def navigation_metrics(document: DocumentAccess) -> list[Metric]:
    """TTFB, FCP, LCP, DOM content loaded and page load, where recorded."""
    timeline = document.timeline
    metrics: list[Metric] = []
    nav = timeline.navigation

    if nav is not None:
        ttfb = nav.response_start - nav.request_start
        if ttfb > 0:
            metrics.append(Metric("TTFB (Time to First Byte)", ttfb, "ms", thresholds.TTFB))

    fcp_entries = timeline.get_entries_by_name("first-contentful-paint")
    if fcp_entries:
        metrics.append(
            Metric("FCP (First Contentful Paint)", fcp_entries[0].start_time, "ms", thresholds.FCP)
        )

    lcp_entries = timeline.get_entries_by_type(LargestContentfulPaintEntry.entry_type)
    if lcp_entries:
        # The last candidate reported is the final LCP.
        metrics.append(
            Metric("LCP (Largest Contentful Paint)", lcp_entries[-1].start_time, "ms", thresholds.LCP)
        )

    if nav is not None:
        dcl = nav.dom_content_loaded_event_end - nav.dom_content_loaded_event_start
        if dcl > 0:
            metrics.append(Metric("DOM Content Loaded", dcl, "ms", thresholds.DOM_CONTENT_LOADED))

        page_load = nav.load_event_end - nav.navigation_start
        if page_load > 0:
            metrics.append(Metric("Page Load Time", page_load, "ms", thresholds.PAGE_LOAD))

    return metrics


def resource_metrics(document: DocumentAccess) -> list[Metric]:
    """Resource count always; total, image and script weight when non-zero."""
    resources = document.timeline.get_entries_by_type(ResourceEntry.entry_type)

    total_size = image_size = script_size = 0
    for resource in resources:
        size = resource.transfer_size or 0
        total_size += size
        if resource.initiator_type == "img":
            image_size += size
        elif resource.initiator_type == "script":
            script_size += size

    metrics = [Metric("Total Resources", len(resources), "resources", thresholds.RESOURCE_COUNT)]
    if total_size > 0:
        metrics.append(
            Metric("Total Resource Size", total_size / 1024, "KB", thresholds.TOTAL_SIZE_KB)
        )
    if image_size > 0:
        metrics.append(Metric("Image Size", image_size / 1024, "KB", thresholds.IMAGE_SIZE_KB))
    if script_size > 0:
        metrics.append(
            Metric("JavaScript Size", script_size / 1024, "KB", thresholds.SCRIPT_SIZE_KB)
        )
    return metrics


# ── fix guidance for static metrics ───────────────────────────────

_LAYOUT_FIX_CODE = """<!-- Always include width and height on images -->
<img src="image.jpg" width="800" height="600" alt="...">

<!-- Reserve space for dynamic content -->
<div style="min-height: 200px;">
  <!-- Dynamic content loads here -->
</div>

<!-- Use CSS aspect-ratio for responsive images -->
<img src="image.jpg" style="aspect-ratio: 16/9; width: 100%;">"""

_LAYOUT_FIX_DESCRIPTION = (
    "Reduce Cumulative Layout Shift by adding explicit dimensions to images/videos, "
    "avoiding inserting content above existing content, and using transform animations "
    "instead of properties that trigger layout."
)

# (name fragment, description); first match wins
_FIX_DESCRIPTIONS: tuple[tuple[str, str], ...] = (
    ("lcp", "Optimize Largest Contentful Paint by reducing server response times, eliminating "
            "render-blocking resources, optimizing images, and using lazy loading."),
    ("fcp", "Improve First Contentful Paint by minimizing critical resources, removing unused "
            "CSS, and preloading key requests."),
    ("ttfb", "Reduce Time to First Byte by optimizing server response times, using CDN, and "
             "enabling caching."),
    ("resource size", "Reduce total resource size by compressing assets, using modern image "
                      "formats (WebP, AVIF), and code splitting."),
    ("image", "Optimize images by compressing them, using responsive images with srcset, and "
              "lazy loading off-screen images."),
    ("javascript", "Reduce JavaScript bundle size by code splitting, tree shaking, and removing "
                   "unused dependencies."),
    ("resources", "Reduce the number of resources by combining files, using HTTP/2, and "
                  "removing unused assets."),
)

_FIX_CODES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("image",), """<!-- Use modern image formats and lazy loading -->
<img
  src="image.webp"
  alt="Description"
  loading="lazy"
  width="800"
  height="600"
/>"""),
    (("javascript",), """// Use dynamic imports for code splitting
const module = await import('./module.js');

// Remove unused dependencies from package.json
// Use tree shaking with modern bundlers"""),
    (("lcp", "fcp"), """<!-- Preload critical resources -->
<link rel="preload" href="critical.css" as="style">
<link rel="preload" href="hero.webp" as="image">

<!-- Eliminate render-blocking CSS -->
<link rel="stylesheet" href="styles.css" media="print" onload="this.media='all'">"""),
)

_GENERIC_FIX_CODE = """<!-- Follow performance best practices -->
<!-- - Compress and optimize assets -->
<!-- - Use CDN for static resources -->
<!-- - Enable caching headers -->
<!-- - Minimize critical resources -->"""

_LEARN_MORE: tuple[tuple[str, str], ...] = (
    ("lcp", "https://web.dev/lcp/"),
    ("fcp", "https://web.dev/fcp/"),
    ("cls", "https://web.dev/cls/"),
    ("ttfb", "https://web.dev/ttfb/"),
)


def metric_fix(metric: Metric) -> FixSuggestion:
    name = metric.name.lower()

    description = next(
        (text for fragment, text in _FIX_DESCRIPTIONS if fragment in name),
        "Optimize this performance metric by following web performance best practices.",
    )
    code = next(
        (text for fragments, text in _FIX_CODES if any(f in name for f in fragments)),
        _GENERIC_FIX_CODE,
    )
    learn_more = next(
        (url for fragment, url in _LEARN_MORE if fragment in name),
        "https://web.dev/performance/",
    )
    return FixSuggestion(description=description, code=code, learn_more_url=learn_more)


# ── issue builders ────────────────────────────────────────────────


def metric_issues(metrics: list[Metric], ids: IdFactory) -> list[Issue]:
    issues = []
    for metric in metrics:
        rating = metric.rating
        if rating is Rating.GOOD:
            continue
        shown = metric.format_with_unit()
        verdict = "slower than recommended" if rating is Rating.NEEDS_IMPROVEMENT else "poor"
        issues.append(
            Issue(
                id=ids(),
                rule_id=metric.rule_id,
                severity=rating.severity,
                category=Category.TECHNICAL,
                message=f"{metric.name}: {shown}",
                description=(
                    f'This metric is rated as "{rating.value}". '
                    f"Good: ≤{metric.format_with_unit(_plain(metric.threshold.good))}, "
                    f"Needs improvement: ≤{metric.format_with_unit(_plain(metric.threshold.poor))}"
                ),
                help_url=VITALS_URL,
                element=ElementInfo(
                    selector="body",
                    html=BODY_HTML,
                    failure_summary=f"{metric.name} is {shown}, which is {verdict}",
                ),
                fix=metric_fix(metric),
                wcag=_criteria(
                    "Performance Optimization",
                    "Web performance optimization for better user experience",
                ),
            )
        )
    return issues


def _plain(value: float) -> str:
    return f"{value:g}"


def layout_shift_issues(
    result: LayoutShiftResult,
    document: DocumentAccess,
    ids: IdFactory,
    materiality: float = 0.01,
) -> list[Issue]:
    if result.rating is Rating.GOOD:
        return []

    shown = f"{result.value:.3f}"
    stability = "poor" if result.rating is Rating.POOR else "moderate"
    issues = [
        Issue(
            id=ids(),
            rule_id="performance-cls",
            severity=result.rating.severity,
            category=Category.TECHNICAL,
            message=f"CLS (Cumulative Layout Shift): {shown}",
            description=(
                f"Cumulative Layout Shift measures visual stability. Your score of {shown} "
                f'is rated as "{result.rating.value}". '
                "Good: ≤0.1, Needs improvement: ≤0.25, Poor: >0.25"
            ),
            help_url="https://web.dev/cls/",
            element=ElementInfo(
                selector="body",
                html=BODY_HTML,
                failure_summary=f"CLS is {shown}, which indicates {stability} visual stability",
            ),
            fix=FixSuggestion(
                description=_LAYOUT_FIX_DESCRIPTION,
                code=_LAYOUT_FIX_CODE,
                learn_more_url="https://web.dev/cls/",
            ),
            wcag=_criteria(
                "Visual Stability", "Cumulative Layout Shift - measures unexpected layout shifts"
            ),
        )
    ]

    for element in result.shifting_elements:
        if element.shift <= materiality:
            continue
        shift = f"{element.shift:.3f}"
        tag = tag_from_selector(element.selector)
        issues.append(
            Issue(
                id=ids(),
                rule_id="performance-cls-element",
                severity=Severity.SERIOUS if element.shift > 0.1 else Severity.MODERATE,
                category=Category.TECHNICAL,
                message=f"Layout shift detected: {shift}",
                description=(
                    f"This element contributed {shift} to the total CLS score. Consider adding "
                    "explicit dimensions or reserving space for this element."
                ),
                help_url="https://web.dev/cls/",
                element=ElementInfo(
                    selector=element.selector,
                    html=element_html(document, element.selector),
                    failure_summary=f"This element shifted by {shift}",
                ),
                fix=FixSuggestion(
                    description=(
                        "Add explicit width and height attributes, use CSS aspect-ratio, or "
                        "reserve space for this element to prevent layout shifts."
                    ),
                    code=(
                        f'<!-- Add explicit dimensions -->\n<{tag} width="..." height="...">\n\n'
                        "<!-- Or use CSS -->\n.element {\n  aspect-ratio: 16/9;\n  width: 100%;\n}"
                    ),
                    learn_more_url="https://web.dev/optimize-cls/",
                ),
                wcag=_criteria("Visual Stability", "Element causing layout shift"),
            )
        )
    return issues


def interaction_issues(
    result: InteractionResult,
    document: DocumentAccess,
    ids: IdFactory,
) -> list[Issue]:
    if result.rating is Rating.GOOD or result.value == 0:
        return []

    shown = round(result.value)
    worst = result.worst
    if worst is not None and worst.target:
        selector = worst.target
        html = element_html(document, selector)
        summary = (
            f"Slowest interaction: {worst.type} on {worst.target} "
            f"took {round(worst.duration)}ms"
        )
    else:
        selector = "body"
        html = BODY_HTML
        summary = f"INP is {shown}ms, indicating slow response to user interactions"

    return [
        Issue(
            id=ids(),
            rule_id="performance-inp",
            severity=result.rating.severity,
            category=Category.TECHNICAL,
            message=f"INP (Interaction to Next Paint): {shown}ms",
            description=(
                f"Interaction to Next Paint measures responsiveness. Your score of {shown}ms "
                f'is rated as "{result.rating.value}". '
                "Good: ≤200ms, Needs improvement: ≤500ms, Poor: >500ms"
            ),
            help_url="https://web.dev/inp/",
            element=ElementInfo(selector=selector, html=html, failure_summary=summary),
            fix=FixSuggestion(
                description=(
                    "Improve INP by breaking up long tasks, optimizing event handlers, reducing "
                    "JavaScript execution time, and using web workers for heavy computations."
                ),
                code=(
                    "// Break up long tasks with scheduler.yield()\n"
                    "async function handleClick() {\n"
                    "  doFirstPart();\n"
                    "  await scheduler.yield(); // Let browser update\n"
                    "  doSecondPart();\n"
                    "}\n\n"
                    "// Debounce rapid interactions\n"
                    "const debouncedHandler = debounce(handler, 100);"
                ),
                learn_more_url="https://web.dev/optimize-inp/",
            ),
            wcag=_criteria(
                "Responsiveness", "Interaction to Next Paint - measures input responsiveness"
            ),
        )
    ]


def blocking_time_issues(
    result: BlockingTimeResult,
    ids: IdFactory,
    materiality_ms: float = 100.0,
) -> list[Issue]:
    if result.rating is Rating.GOOD or result.value == 0:
        return []

    shown = round(result.value)
    issues = [
        Issue(
            id=ids(),
            rule_id="performance-tbt",
            severity=result.rating.severity,
            category=Category.TECHNICAL,
            message=f"TBT (Total Blocking Time): {shown}ms",
            description=(
                "Total Blocking Time measures how long the main thread was blocked. "
                f'Your score of {shown}ms is rated as "{result.rating.value}". '
                "Good: ≤200ms, Needs improvement: ≤600ms, Poor: >600ms"
            ),
            help_url="https://web.dev/tbt/",
            element=ElementInfo(
                selector="body",
                html=BODY_HTML,
                failure_summary=(
                    f"{len(result.long_tasks)} long task(s) blocked the main thread "
                    f"for a total of {shown}ms"
                ),
            ),
            fix=FixSuggestion(
                description=(
                    "Reduce TBT by breaking up long JavaScript tasks, removing unused "
                    "JavaScript, minimizing main thread work, and deferring non-critical scripts."
                ),
                code=(
                    "<!-- Defer non-critical scripts -->\n"
                    '<script src="analytics.js" defer></script>\n\n'
                    "<!-- Use async for independent scripts -->\n"
                    '<script src="widget.js" async></script>'
                ),
                learn_more_url="https://web.dev/optimize-tbt/",
            ),
            wcag=_criteria("Main Thread", "Total Blocking Time - measures main thread blocking"),
        )
    ]

    for task in result.long_tasks:
        if task.blocking_time <= materiality_ms:
            continue
        duration = round(task.duration)
        blocking = round(task.blocking_time)
        issues.append(
            Issue(
                id=ids(),
                rule_id="performance-long-task",
                severity=Severity.SERIOUS if task.blocking_time > 300 else Severity.MODERATE,
                category=Category.TECHNICAL,
                message=f"Long task detected: {duration}ms ({blocking}ms blocking)",
                description=(
                    f"A task running for {duration}ms blocked the main thread for {blocking}ms. "
                    "Tasks over 50ms are considered long tasks."
                ),
                help_url="https://web.dev/long-tasks-devtools/",
                element=ElementInfo(
                    selector="body",
                    html="<script>...</script>",
                    failure_summary=(
                        f"Long task at {round(task.start_time)}ms blocked for {blocking}ms"
                    ),
                ),
                fix=FixSuggestion(
                    description=(
                        "Break up this long task into smaller chunks using "
                        "requestIdleCallback, setTimeout, or scheduler.yield()."
                    ),
                    code=(
                        "// Use requestIdleCallback for non-urgent work\n"
                        "requestIdleCallback((deadline) => {\n"
                        "  while (deadline.timeRemaining() > 0 && tasks.length > 0) {\n"
                        "    performTask(tasks.shift());\n"
                        "  }\n"
                        "});"
                    ),
                    learn_more_url="https://web.dev/optimize-long-tasks/",
                ),
                wcag=_criteria("Long Task", "JavaScript task that blocked the main thread"),
            )
        )
    return issues


def report_issues(
    report: SignalReport,
    metrics: list[Metric],
    document: DocumentAccess,
    config: AuditConfig,
    ids: IdFactory,
) -> list[Issue]:
    """Assemble issues in a fixed order: static metrics, CLS, INP, TBT."""
    issues = metric_issues(metrics, ids)
    if report.layout_shift is not None:
        issues += layout_shift_issues(
            report.layout_shift, document, ids, config.layout_shift_materiality
        )
    if report.interaction is not None:
        issues += interaction_issues(report.interaction, document, ids)
    if report.blocking_time is not None:
        issues += blocking_time_issues(report.blocking_time, ids, config.long_task_materiality_ms)
    return issues


async def audit_performance(
    document: DocumentAccess,
    config: AuditConfig,
    ids: IdFactory,
) -> list[Issue]:
    """Measure windowed signals, read static metrics, and build issues."""
    report = await measure_signals(document, config)
    metrics = navigation_metrics(document) + resource_metrics(document)
    return report_issues(report, metrics, document, config, ids)
