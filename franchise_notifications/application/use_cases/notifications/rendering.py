"""Render notification emails (subject, HTML body and plain-text body)."""

from __future__ import annotations

from html import escape

from franchise_notifications.domain.entities import (
    Notification,
    NotificationPriority,
    TargetRole,
)

_PRIORITY_PREFIXES = {
    NotificationPriority.URGENT: "URGENT: ",
    NotificationPriority.HIGH: "IMPORTANT: ",
    NotificationPriority.MEDIUM: "",
    NotificationPriority.LOW: "",
}

_PRIORITY_LABELS = {
    NotificationPriority.URGENT: "Urgent",
    NotificationPriority.HIGH: "Important",
    NotificationPriority.MEDIUM: "Normal",
    NotificationPriority.LOW: "Information",
}

_PRIORITY_COLORS = {
    NotificationPriority.URGENT: "#dc2626",
    NotificationPriority.HIGH: "#ea580c",
    NotificationPriority.MEDIUM: "#2563eb",
    NotificationPriority.LOW: "#16a34a",
}

_CTA_LABELS = {
    TargetRole.FRANCHISEE: "Accéder à mon espace franchisé",
    TargetRole.ADMIN: "Accéder au tableau de bord admin",
}

_STYLES = (
    "body{margin:0;padding:0;background:#f8fafc;font-family:-apple-system,BlinkMacSystemFont,"
    "'Segoe UI',Roboto,Helvetica,Arial;color:#0f172a;}"
    ".container{max-width:680px;margin:0 auto;padding:24px;}"
    ".card{background:#ffffff;border-radius:16px;overflow:hidden;border:1px solid #e2e8f0;}"
    ".header{background:linear-gradient(135deg,#be123c 0%,#dc2626 50%,#ef4444 100%);"
    "padding:28px 24px;color:#ffffff;}"
    ".brand{font-weight:800;letter-spacing:0.5px;font-size:18px;}"
    ".headline{margin-top:6px;font-size:13px;opacity:0.9;}"
    ".content{padding:26px;}"
    ".title{font-size:20px;font-weight:800;margin:0 0 10px 0;}"
    ".paragraph{margin:12px 0;line-height:1.7;color:#475569;font-size:14px;white-space:pre-line;}"
    ".cta{display:inline-block;background:#dc2626;color:#ffffff;text-decoration:none;"
    "padding:12px 18px;border-radius:12px;font-weight:800;}"
    ".footer{padding:18px 24px;border-top:1px solid #e2e8f0;color:#94a3b8;font-size:12px;"
    "text-align:center;}"
    ".link{color:#dc2626;text-decoration:underline;}"
)


def priority_prefix(priority: NotificationPriority) -> str:
    """Return the attention marker prepended to subjects of severe notifications."""

    return _PRIORITY_PREFIXES[priority]


def priority_label(priority: NotificationPriority) -> str:
    return _PRIORITY_LABELS[priority]


def render_subject(notification: Notification, *, brand: str) -> str:
    """Return ``{prefix}{title} - {brand}``."""

    return f"{priority_prefix(notification.priority)}{notification.title} - {brand}"


def resolve_action_url(action_url: str | None, base_url: str | None) -> str | None:
    """Turn a relative ``action_url`` into an absolute link when ``base_url`` is known."""

    if not action_url:
        return None
    if base_url and action_url.startswith("/"):
        return base_url.rstrip("/") + action_url
    return action_url


def _greeting(recipient_name: str | None) -> str:
    if recipient_name:
        return f"Bonjour {recipient_name},"
    return "Bonjour,"


def render_html(
    notification: Notification,
    *,
    brand: str,
    year: int,
    recipient_name: str | None = None,
    action_url: str | None = None,
) -> str:
    """Return the branded HTML body for ``notification``."""

    color = _PRIORITY_COLORS[notification.priority]
    franchise_name = notification.data.get("franchiseName")
    parts: list[str] = [
        "<!DOCTYPE html>",
        '<html lang="fr"><head><meta charset="UTF-8" />',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0" />',
        f"<title>{escape(notification.title)}</title>",
        f"<style>{_STYLES}</style></head>",
        '<body><div class="container"><div class="card">',
        '<div class="header">',
        f'<div class="brand">{escape(brand)}</div>',
        '<div class="headline">Système de gestion de franchise</div>',
        "</div>",
        '<div class="content">',
        (
            f'<div style="display:inline-block;color:{color};border:1px solid {color};'
            'padding:6px 10px;border-radius:999px;font-weight:600;font-size:12px;">'
            f"{priority_label(notification.priority)}</div>"
        ),
        f'<p class="paragraph">{escape(_greeting(recipient_name))}</p>',
        f'<h1 class="title">{escape(notification.title)}</h1>',
        f'<p class="paragraph">{escape(notification.message)}</p>',
    ]
    if franchise_name:
        parts.append(
            f'<p class="paragraph"><strong>Franchise :</strong> {escape(str(franchise_name))}</p>'
        )
    if action_url:
        safe_url = escape(action_url, quote=True)
        cta_label = _CTA_LABELS[notification.target_role]
        parts.append(
            f'<p style="margin:18px 0;"><a href="{safe_url}" class="cta">{cta_label}</a></p>'
        )
        parts.append(
            '<p class="paragraph">Si le bouton ne fonctionne pas, copiez ce lien :<br/>'
            f'<span class="link">{safe_url}</span></p>'
        )
    parts.extend(
        (
            "</div>",
            '<div class="footer">',
            f"<div>Cet email a été envoyé automatiquement par le système {escape(brand)}.</div>",
            f"<div>© {year} {escape(brand)}. Tous droits réservés.</div>",
            "</div>",
            "</div></div></body></html>",
        )
    )
    return "".join(parts)


def render_text(
    notification: Notification,
    *,
    brand: str,
    recipient_name: str | None = None,
    action_url: str | None = None,
) -> str:
    """Return the plain-text equivalent of :func:`render_html`."""

    lines = [
        f"=== {brand} - Notification ===",
        "",
        _greeting(recipient_name),
        "",
        notification.title,
        "",
        notification.message,
    ]
    franchise_name = notification.data.get("franchiseName")
    if franchise_name:
        lines.extend(("", f"Franchise : {franchise_name}"))
    if action_url:
        lines.extend(("", f"Accédez à votre espace : {action_url}"))
    return "\n".join(lines)


__all__ = [
    "priority_label",
    "priority_prefix",
    "render_html",
    "render_subject",
    "render_text",
    "resolve_action_url",
]
