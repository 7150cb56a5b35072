"""
Mise en forme des emails de commande (HTML simple, pas de moteur de templates).
"""
from datetime import datetime, timezone
from html import escape
from typing import Any, Dict, Tuple


def format_amount(minor_units: Any, currency: str | None = "chf") -> str:
    try:
        value = int(minor_units or 0) / 100
    except (TypeError, ValueError):
        value = 0.0
    return f"{value:.2f} {(currency or 'chf').upper()}"


def _created_label(created: Any) -> str:
    try:
        return datetime.fromtimestamp(int(created), tz=timezone.utc).strftime("%d.%m.%Y %H:%M UTC")
    except (TypeError, ValueError, OverflowError, OSError):
        return "-"


def format_items(session: Dict[str, Any]) -> str:
    currency = session.get("currency")
    items = session.get("line_items") or []
    if not items:
        return "Aucun article"
    return "".join(
        f"<li>{int(item.get('quantity') or 1)}x {escape(str(item.get('description') or 'Article'))}"
        f" - {format_amount(item.get('amount_total'), currency)}</li>"
        for item in items
    )


def format_customer_confirmation(session: Dict[str, Any]) -> Tuple[str, str]:
    """Retourne (sujet, html) de la confirmation client."""
    total = format_amount(session.get("amount_total"), session.get("currency"))
    subject = "Commande confirmée"
    html = (
        "<h2>Merci pour votre commande !</h2>"
        f"<p><strong>Numéro de commande :</strong> {escape(str(session.get('id')))}</p>"
        f"<p><strong>Montant :</strong> {total}</p>"
        "<p><strong>Statut :</strong> Payée</p>"
        "<hr>"
        f"<ul>{format_items(session)}</ul>"
        "<p>Expédition sous 1 à 2 jours ouvrés. Le suivi vous sera envoyé par email.</p>"
    )
    return subject, html


def format_admin_alert(session: Dict[str, Any]) -> Tuple[str, str]:
    """Retourne (sujet, html) de l'alerte de vente envoyée à l'admin."""
    total = format_amount(session.get("amount_total"), session.get("currency"))
    subject = f"NOUVELLE VENTE : {total}"
    html = (
        "<h2>Nouvelle vente !</h2>"
        f"<p><strong>Session :</strong> {escape(str(session.get('id')))}</p>"
        f"<p><strong>Client :</strong> {escape(str(session.get('customer_email') or '-'))}</p>"
        f"<p><strong>Montant :</strong> {total}</p>"
        "<hr><h3>Commande :</h3>"
        f"<ul>{format_items(session)}</ul>"
        "<hr>"
        f"<p><small>Date : {_created_label(session.get('created'))}</small></p>"
    )
    return subject, html
