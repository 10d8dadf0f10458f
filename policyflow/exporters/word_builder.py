# policyflow/exporters/word_builder.py

from __future__ import annotations

import re
from io import BytesIO
from typing import Any, Dict, List, Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH

_NUMBERED_HEADING = re.compile(r"^\d+\.\s+[A-Z0-9 &/,'-]+$")


def _is_heading(line: str) -> bool:
    return bool(_NUMBERED_HEADING.match(line.strip()))


def _render_content(doc: Document, content: str, title: str) -> None:
    for block in str(content or "").split("\n"):
        line = block.rstrip()
        if not line.strip():
            continue
        if line.strip().upper() == title.strip().upper():
            continue
        if _is_heading(line):
            doc.add_heading(line.strip(), level=1)
        elif line.lstrip().startswith("- "):
            doc.add_paragraph(line.lstrip()[2:].strip(), style="List Bullet")
        else:
            doc.add_paragraph(line.strip())


def _add_compliance_section(doc: Document, compliance: List[Dict[str, Any]]) -> None:
    if not compliance:
        return

    doc.add_heading("Compliance Validation", level=1)
    doc.add_paragraph("Regulatory requirements reported by the compliance research agent.")
    for item in compliance:
        status = item.get("status") or "needs-review"
        risk = item.get("risk_level") or "medium"
        regulation = item.get("regulation") or "Regulation"
        jurisdiction = item.get("jurisdiction") or ""
        title = f"[{status}] [{risk} risk] {regulation}"
        if jurisdiction:
            title += f" · {jurisdiction}"
        doc.add_paragraph(title, style="List Bullet")
        requirement = str(item.get("requirement") or "").strip()
        if requirement:
            doc.add_paragraph(requirement)


def build_docx_from_policy(
    draft: Dict[str, Any],
    document_id: Optional[str] = None,
    version: Optional[str] = None,
    generated_on: Optional[str] = None,
) -> bytes:
    """Renders a policy draft (as a dict) into a formatted .docx."""
    doc = Document()

    title_text = str(draft.get("title") or "Policy")
    title = doc.add_heading(title_text, level=0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    metadata = draft.get("metadata") if isinstance(draft.get("metadata"), dict) else {}
    meta_lines = [
        f"Policy Type: {draft.get('type')}" if draft.get("type") else None,
        f"Effective Date: {metadata.get('effective_date')}" if metadata.get("effective_date") else None,
        f"Departments: {metadata.get('departments')}" if metadata.get("departments") else None,
        f"Status: {metadata.get('status')}" if metadata.get("status") else None,
    ]
    for line in meta_lines:
        if line:
            p = doc.add_paragraph(line)
            p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    _render_content(doc, str(draft.get("content") or ""), title_text)
    _add_compliance_section(doc, list(draft.get("compliance") or []))

    footer_bits = [
        f"Document ID: {document_id}" if document_id else None,
        f"Version: {version}" if version else None,
        f"Generated: {generated_on}" if generated_on else None,
    ]
    footer_bits = [bit for bit in footer_bits if bit]
    if footer_bits:
        p = doc.add_paragraph(" | ".join(footer_bits))
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    bio = BytesIO()
    doc.save(bio)
    bio.seek(0)
    return bio.read()
