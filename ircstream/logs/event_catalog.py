"""Event template catalog and its audit against the package source.

Templates live in ``event_templates.json`` next to this module, keyed by
domain then action. ``audit_templates`` scans the package for
``log_event("domain", "action", ...)`` calls so a missing or stale template
shows up in the test suite instead of as a fallback message in production.
"""

from __future__ import annotations

import ast
import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

TEMPLATES_JSON = Path(__file__).with_name("event_templates.json")
PACKAGE_ROOT = Path(__file__).resolve().parent.parent

EventKey = tuple[str, str]

EVENT_TEMPLATES: dict[EventKey, str] = {}


def _flatten(raw: object) -> dict[EventKey, str]:
    if not isinstance(raw, dict):
        raise ValueError("top level of the template file must be an object")
    return {
        (domain, action): template
        for domain, actions in raw.items()
        if isinstance(domain, str) and isinstance(actions, dict)
        for action, template in actions.items()
        if isinstance(action, str) and isinstance(template, str)
    }


def load_event_templates(path: Path | None = None) -> dict[EventKey, str]:
    """Read ``(domain, action) -> template`` pairs from a JSON file.

    A missing or unreadable file yields a single ``("app", "load_error")``
    entry instead of raising, so logging never breaks the caller.
    """
    path = path or TEMPLATES_JSON
    try:
        return _flatten(json.loads(path.read_text(encoding="utf-8")))
    except FileNotFoundError:
        return {("app", "load_error"): "Event templates file missing"}
    except (OSError, ValueError) as e:
        return {("app", "load_error"): f"Failed to load event templates: {e}"[:200]}


def reload_event_templates(path: Path | None = None) -> None:
    global EVENT_TEMPLATES  # noqa: PLW0603
    EVENT_TEMPLATES = load_event_templates(path)


# -- audit -----------------------------------------------------------------


def _literal(node: ast.expr | None) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _events_in(tree: ast.AST) -> Iterator[EventKey]:
    for node in ast.walk(tree):
        if not (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Attribute)
            and node.func.attr == "log_event"
        ):
            continue
        args: list[ast.expr | None] = [*node.args[:2], None, None][:2]
        for kw in node.keywords:
            if kw.arg == "domain":
                args[0] = kw.value
            elif kw.arg == "action":
                args[1] = kw.value
        domain, action = _literal(args[0]), _literal(args[1])
        # Computed names cannot be checked statically.
        if domain is not None and action is not None:
            yield domain, action


def emitted_events(paths: Iterable[Path] | None = None) -> set[EventKey]:
    """Every literal ``(domain, action)`` passed to ``log_event`` in ``paths``.

    Defaults to all modules of this package.
    """
    if paths is None:
        paths = PACKAGE_ROOT.rglob("*.py")
    events: set[EventKey] = set()
    for path in paths:
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        events.update(_events_in(tree))
    return events


@dataclass(frozen=True)
class AuditReport:
    missing: frozenset[EventKey]
    unused: frozenset[EventKey]

    @property
    def ok(self) -> bool:
        return not self.missing and not self.unused


def audit_templates(
    templates: dict[EventKey, str] | None = None,
    paths: Iterable[Path] | None = None,
) -> AuditReport:
    """Compare emitted events with the template catalog.

    ``missing`` events would log the derived ``"domain: action"`` text;
    ``unused`` templates are never referenced.
    """
    catalog = EVENT_TEMPLATES if templates is None else templates
    emitted = emitted_events(paths)
    return AuditReport(
        missing=frozenset(emitted - catalog.keys()),
        unused=frozenset(catalog.keys() - emitted),
    )


reload_event_templates()

__all__ = [
    "EVENT_TEMPLATES",
    "AuditReport",
    "audit_templates",
    "emitted_events",
    "load_event_templates",
    "reload_event_templates",
]
