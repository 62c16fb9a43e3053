"""Email templates for the three alert kinds.

Every template renders an HTML and a plain-text body from the same input
fields. Output depends only on the inputs, timestamps included.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape

SYSTEM_FOOTER = "from the Rehabilitation Center Management System."
NO_REPLY = (
    "Please do not reply to this email. "
    "Contact the system administrator if you have questions."
)

ASSIGNMENT_COLOR = "#2196F3"
PROGRESS_COLOR = "#4CAF50"

SEVERITY_COLORS = {
    "critical": "#d32f2f",
    "high": "#f57c00",
}
DEFAULT_SEVERITY_COLOR = "#ff9800"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


@dataclass(frozen=True)
class AssignmentEmail:
    staff_name: str
    role_label: str
    patient_name: str
    patient_id: str
    assigned_at: datetime


@dataclass(frozen=True)
class EmergencyEmail:
    staff_name: str
    role_label: str
    patient_name: str
    severity: str
    description: str
    location: str
    reported_at: datetime


@dataclass(frozen=True)
class ProgressEmail:
    staff_name: str
    role_label: str
    patient_name: str
    update_type: str
    summary: str
    updated_at: datetime


def severity_color(severity: str) -> str:
    return SEVERITY_COLORS.get(severity.lower(), DEFAULT_SEVERITY_COLOR)


def format_date(value: datetime) -> str:
    return _as_utc(value).strftime("%Y-%m-%d")


def format_timestamp(value: datetime) -> str:
    return _as_utc(value).strftime("%Y-%m-%d %H:%M UTC")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _page(title: str, color: str, header: str, sections: str, footer: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{ font-family: Arial, sans-serif; margin: 0; padding: 20px; }}
    .header {{ background: {color}; color: white; padding: 20px; text-align: center; }}
    .content {{ padding: 20px; background: #f5f5f5; }}
    .info {{ background: white; padding: 15px; margin: 15px 0; border-radius: 5px; border-left: 4px solid {color}; }}
    .alert {{ background: #fff3cd; border: 1px solid #ffeaa7; padding: 15px; margin: 15px 0; border-radius: 5px; }}
    .footer {{ text-align: center; margin-top: 30px; color: #666; font-size: 12px; }}
  </style>
</head>
<body>
  <div class="header">{header}</div>
  <div class="content">{sections}</div>
  <div class="footer">
    <p>{footer}</p>
    <p>{NO_REPLY}</p>
  </div>
</body>
</html>"""


def _details(heading: str, rows) -> str:
    lines = "".join(
        f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in rows
    )
    return f'<div class="info"><h3>{heading}</h3>{lines}</div>'


def _checklist(heading: str, items) -> str:
    entries = "".join(f"<li>{item}</li>" for item in items)
    return f'<div class="info"><h3>{heading}</h3><ul>{entries}</ul></div>'


def _text_rows(rows) -> str:
    return "\n".join(f"- {label}: {value}" for label, value in rows)


def _text_steps(items) -> str:
    return "\n".join(f"{number}. {item}" for number, item in enumerate(items, 1))


ASSIGNMENT_STEPS = (
    "Review patient information and medical history",
    "Schedule initial consultation or session",
    "Coordinate with other assigned staff members",
    "Begin care plan development",
)

EMERGENCY_STEPS = (
    "Immediately review the emergency situation",
    "Coordinate with other assigned staff members",
    "Take appropriate medical action as needed",
    "Update patient status in the system",
)


def render_assignment(email: AssignmentEmail) -> RenderedEmail:
    """Render the new patient assignment email."""
    footer = f"This is an automated assignment notification {SYSTEM_FOOTER}"
    rows = [
        ("Patient", email.patient_name),
        ("Patient ID", email.patient_id),
        ("Your Role", email.role_label),
        ("Assigned Date", format_date(email.assigned_at)),
    ]
    greeting = f"Dear {email.staff_name} ({email.role_label}),"

    html = _page(
        "New Patient Assignment",
        ASSIGNMENT_COLOR,
        "<h1>📋 New Patient Assignment</h1>",
        f'<div class="info"><strong>{escape(greeting)}</strong><br>'
        "You have been assigned to a new patient.</div>"
        + _details("Assignment Details:", rows)
        + _checklist("Next Steps:", ASSIGNMENT_STEPS),
        footer,
    )
    text = "\n\n".join(
        [
            "NEW PATIENT ASSIGNMENT",
            greeting,
            "You have been assigned to a new patient.",
            "ASSIGNMENT DETAILS:\n" + _text_rows(rows),
            "NEXT STEPS:\n" + _text_steps(ASSIGNMENT_STEPS),
            f"{footer}\n{NO_REPLY}",
        ]
    )
    return RenderedEmail(
        subject=f"📋 New Patient Assignment - {email.patient_name}",
        html=html,
        text=text,
    )


def render_emergency(email: EmergencyEmail) -> RenderedEmail:
    """Render the emergency alert email, colored by severity."""
    severity = email.severity.upper()
    color = severity_color(email.severity)
    footer = f"This is an automated emergency alert {SYSTEM_FOOTER}"
    rows = [
        ("Patient", email.patient_name),
        ("Severity", severity),
        ("Description", email.description),
        ("Location", email.location),
        ("Time Reported", format_timestamp(email.reported_at)),
    ]
    greeting = f"Dear {email.staff_name} ({email.role_label}),"
    summary = (
        "An emergency situation has been reported that requires your "
        "immediate attention."
    )

    html = _page(
        "Emergency Alert",
        color,
        f"<h1>🚨 EMERGENCY ALERT 🚨</h1><h2>{escape(severity)} Priority</h2>",
        f'<div class="alert"><strong>{escape(greeting)}</strong><br>{summary}</div>'
        + _details("Emergency Details:", rows)
        + _checklist("Required Actions:", EMERGENCY_STEPS),
        footer,
    )
    text = "\n\n".join(
        [
            f"EMERGENCY ALERT - {severity}",
            greeting,
            summary,
            "EMERGENCY DETAILS:\n" + _text_rows(rows),
            "REQUIRED ACTIONS:\n" + _text_steps(EMERGENCY_STEPS),
            f"{footer}\n{NO_REPLY}",
        ]
    )
    return RenderedEmail(
        subject=f"🚨 EMERGENCY ALERT - {severity} - Patient: {email.patient_name}",
        html=html,
        text=text,
    )


def render_progress(email: ProgressEmail) -> RenderedEmail:
    """Render the patient progress update email."""
    footer = f"This is an automated progress update {SYSTEM_FOOTER}"
    rows = [
        ("Patient", email.patient_name),
        ("Update Type", email.update_type),
        ("Date", format_date(email.updated_at)),
        ("Summary", email.summary),
    ]
    greeting = f"Dear {email.staff_name} ({email.role_label}),"

    html = _page(
        "Patient Progress Update",
        PROGRESS_COLOR,
        "<h1>📊 Patient Progress Update</h1>",
        f'<div class="info"><strong>{escape(greeting)}</strong><br>'
        "A progress update is available for your assigned patient.</div>"
        + _details("Progress Details:", rows),
        footer,
    )
    text = "\n\n".join(
        [
            "PATIENT PROGRESS UPDATE",
            greeting,
            "A progress update is available for your assigned patient.",
            "PROGRESS DETAILS:\n" + _text_rows(rows),
            f"{footer}\n{NO_REPLY}",
        ]
    )
    return RenderedEmail(
        subject=f"📊 Progress Update - {email.patient_name}",
        html=html,
        text=text,
    )
