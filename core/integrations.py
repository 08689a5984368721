"""Placeholders for the external services the application hands off to.

Each function is the default collaborator used by :mod:`core.submission`;
deployments pass real implementations in.
"""

from __future__ import annotations

from typing import Dict, List, Optional


def store_application(record: Dict, documents: List[str], uid: str) -> Dict:
    """Stub for the document-store write of a submitted application.

    Returns ``{"success": bool, "id": str, "documents_uploaded": int}``.
    """
    raise NotImplementedError("Application store integration not implemented")


def create_checkout_session(amount_cents: int, line_items: List[Dict], customer_email: Optional[str]) -> str:
    """Stub for hosted payment checkout; returns the checkout URL."""
    raise NotImplementedError("Payment checkout integration not implemented")


def upload_document(name: str, data: bytes, uid: str) -> str:
    """Stub for ID-document upload; returns the stored file reference."""
    raise NotImplementedError("Document upload integration not implemented")
