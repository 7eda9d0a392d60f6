"""Roster CSV and certificate projections of the registry state."""
from __future__ import annotations
import html
import re
from datetime import date
from typing import Iterable, Optional

from .ledger import current_badge
from .state import LearnerProfile, Snapshot

DEFAULT_ZONE_COLUMNS = ("forest", "ocean", "city")
DEFAULT_CERT_CLASS = "Eco Quest Class"


def _quote(value: str) -> str:
    return '"' + str(value).replace('"', '""') + '"'


def export_csv(snapshot: Snapshot, zone_ids: Iterable[str] = DEFAULT_ZONE_COLUMNS) -> str:
    """Render the roster as CSV text.

    Text fields are quoted with inner quotes doubled; stars stay bare and
    completion flags are Yes/No.
    """
    zone_ids = list(zone_ids)
    lines = [",".join(["Class", "Name", "Stars", "Badge"] + [z.title() for z in zone_ids])]
    class_name = snapshot.settings.class_name
    for learner in snapshot.learners:
        row = [_quote(class_name), _quote(learner.name), str(learner.stars),
               _quote(current_badge(learner.stars))]
        row += ["Yes" if learner.is_zone_complete(z) else "No" for z in zone_ids]
        lines.append(",".join(row))
    return "\n".join(lines)


def csv_filename(class_name: str) -> str:
    return "ecoquest_class_" + re.sub(r"\s+", "_", class_name or "class") + ".csv"


def certificate_html(learner: LearnerProfile, class_name: str = "", on: Optional[date] = None) -> str:
    """Printable certificate for one learner; all user text is escaped."""
    on = on or date.today()
    cls = html.escape(class_name or DEFAULT_CERT_CLASS)
    name = html.escape(learner.name)
    badge = html.escape(current_badge(learner.stars))
    return (
        "<html><head><title>Certificate</title></head><body>"
        "<div class=\"cert\">"
        "<h1>Eco Hero Certificate</h1>"
        "<div class=\"sub\">Awarded for completing Eco Quest missions</div>"
        f"<div><b>Class:</b> {cls}</div>"
        f"<div class=\"name\">{name}</div>"
        f"<div class=\"stars\">Stars: <b>{learner.stars}</b></div>"
        f"<div class=\"badge\">Badge: <b>{badge}</b></div>"
        f"<div class=\"footer\">Date: {html.escape(on.isoformat())}<br/>"
        "Keep making planet-friendly choices!</div>"
        "</div></body></html>"
    )
