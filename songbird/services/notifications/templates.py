"""
Message templates for staff notifications.
Telegram renders these as HTML, so anything typed by a user is escaped.
"""

from html import escape
from typing import Optional

from songbird.core.config import settings
from songbird.services.hours import format_date, get_shift_def


def _link() -> str:
    url = escape(settings.APP_URL)
    return f'🔗 <a href="{url}">{url}</a>'


def _note(prefix: str, note: Optional[str]) -> str:
    return f"📝 {prefix}: {escape(note)}\n\n" if note else ""


def shift_label(shift_type) -> str:
    shift_def = get_shift_def(shift_type)
    return shift_def.label if shift_def else str(shift_type)


def shift_line(shift_date, shift_type) -> str:
    """e.g. 'Feb 15, 2026 · Morning (7:00 AM – 3:00 PM)'"""
    shift_def = get_shift_def(shift_type)
    if not shift_def:
        return f"{format_date(shift_date)} · {shift_type}"
    return f"{format_date(shift_date)} · {shift_def.label} ({shift_def.time_range})"


def shift_assigned(shift_date, shift_type) -> str:
    return (
        "✅ <b>New Shift Assigned</b>\n\n"
        "You have been assigned:\n"
        f"📅 {shift_line(shift_date, shift_type)}\n\n"
        "Check the schedule for details.\n\n"
        f"{_link()}"
    )


def shift_request_admin(requester_name: str, shift_date, shift_type) -> str:
    return (
        "📋 <b>New Open Shift Request</b>\n\n"
        f"<b>{escape(requester_name)}</b> has requested an open shift.\n\n"
        f"📅 {shift_line(shift_date, shift_type)}\n\n"
        "Log in to approve or deny this request.\n\n"
        f"{_link()}"
    )


def shift_request_approved(shift_date, shift_type, admin_note: Optional[str] = None) -> str:
    return (
        "🎉 <b>Shift Request Approved!</b>\n\n"
        "Your request has been approved:\n"
        f"📅 {shift_line(shift_date, shift_type)}\n\n"
        "The shift is now on your schedule.\n\n"
        f"{_note('Note', admin_note)}"
        f"{_link()}"
    )


def shift_request_denied(shift_date, shift_type, admin_note: Optional[str] = None) -> str:
    return (
        "❌ <b>Shift Request Denied</b>\n\n"
        f"Your request for {format_date(shift_date)} {shift_label(shift_type)} was not approved.\n\n"
        f"{_note('Note', admin_note)}"
        f"{_link()}"
    )


def trade_request_received(requester_name: str, their_shift: tuple, your_shift: tuple) -> str:
    return (
        "🔄 <b>Shift Swap Request Received</b>\n\n"
        f"<b>{escape(requester_name)}</b> has sent you a shift swap request.\n\n"
        "📤 <b>They give you:</b>\n"
        f"📅 {shift_line(*their_shift)}\n\n"
        "📥 <b>You give them:</b>\n"
        f"📅 {shift_line(*your_shift)}\n\n"
        "Log in to accept or decline.\n\n"
        f"{_link()}"
    )


def trade_request_sent(target_name: str, my_shift: tuple, their_shift: tuple) -> str:
    return (
        "📤 <b>Shift Swap Request Sent</b>\n\n"
        f"You have sent <b>{escape(target_name)}</b> a shift swap request.\n\n"
        "📥 <b>You give:</b>\n"
        f"📅 {shift_line(*my_shift)}\n\n"
        "📤 <b>You receive:</b>\n"
        f"📅 {shift_line(*their_shift)}\n\n"
        f"You will be notified once {escape(target_name)} responds.\n\n"
        f"{_link()}"
    )


def trade_request_admin(requester_name: str, target_name: str, requester_shift: tuple, target_shift: tuple) -> str:
    return (
        "🔄 <b>New Shift Swap Request</b>\n\n"
        f"A shift swap has been proposed between <b>{escape(requester_name)}</b> "
        f"and <b>{escape(target_name)}</b>.\n\n"
        f"• {escape(requester_name)}: {shift_line(*requester_shift)}\n"
        f"• {escape(target_name)}: {shift_line(*target_shift)}\n\n"
        "Admin action is needed once both staff have approved.\n\n"
        f"{_link()}"
    )


def trade_approved(partner_name: str, shift_date, shift_type) -> str:
    return (
        "✅ <b>Trade Approved by Partner</b>\n\n"
        f"<b>{escape(partner_name)}</b> approved your trade request.\n"
        "Waiting for admin final approval.\n\n"
        f"You'll get {shift_line(shift_date, shift_type)}\n\n"
        f"{_link()}"
    )


def trade_denied(partner_name: str, note: Optional[str] = None) -> str:
    return (
        "❌ <b>Trade Request Denied</b>\n\n"
        f"<b>{escape(partner_name)}</b> declined your trade request.\n\n"
        f"{_note('Reason', note)}"
        f"{_link()}"
    )


def trade_finalized(shift_date, shift_type, admin_note: Optional[str] = None) -> str:
    footer = _note("Admin note", admin_note) or "Check your updated schedule.\n\n"
    return (
        "🎉 <b>Trade Finalized!</b>\n\n"
        "Admin approved the trade.\n"
        "Your new shift:\n"
        f"📅 {shift_line(shift_date, shift_type)}\n\n"
        f"{footer}"
        f"{_link()}"
    )


def time_off_approved(start_date, end_date, kind: str) -> str:
    span = format_date(start_date)
    if end_date and end_date != start_date:
        span += f" - {format_date(end_date)}"
    return (
        "🌴 <b>Time Off Approved</b>\n\n"
        "Your time-off request has been approved:\n"
        f"📅 {span}\n"
        f"Type: {kind}\n\n"
        f"{_link()}"
    )


def time_off_denied(start_date, admin_note: Optional[str] = None) -> str:
    return (
        "❌ <b>Time Off Request Denied</b>\n\n"
        f"Your request for {format_date(start_date)} was not approved.\n\n"
        f"{_note('Reason', admin_note)}"
        f"{_link()}"
    )


def emergency_absence(staff_name: str, shift_date, shift_type) -> str:
    return (
        "🚨 <b>Emergency Absence Reported</b>\n\n"
        f"<b>{escape(staff_name)}</b> cannot make their shift:\n"
        f"📅 {shift_line(shift_date, shift_type)}\n\n"
        "URGENT: Coverage needed!\n\n"
        f"{_link()}"
    )
