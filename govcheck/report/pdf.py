"""
PDF Report — Renders an assessment to a PDF document with reportlab.
"""

from __future__ import annotations

import io
from datetime import date
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from govcheck.core.frameworks import framework_references
from govcheck.core.risk_rules import compliance_label, risk_level
from govcheck.models.assessment_models import Assessment
from govcheck.models.risk_models import RISK_DESCRIPTIONS, RISK_SHORT_NAMES

HEADER_COLOR = colors.Color(102 / 255, 126 / 255, 234 / 255)
PANEL_COLOR = colors.Color(240 / 255, 242 / 255, 247 / 255)
TEXT_COLOR = colors.Color(51 / 255, 65 / 255, 85 / 255)


def _styles() -> dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle", parent=base["Title"], textColor=HEADER_COLOR, fontSize=24, spaceAfter=4
        ),
        "subtitle": ParagraphStyle(
            "ReportSubtitle", parent=base["Normal"], alignment=1, fontSize=12, spaceAfter=16
        ),
        "heading": ParagraphStyle(
            "SectionHeading", parent=base["Heading2"], textColor=TEXT_COLOR, spaceBefore=12
        ),
        "body": ParagraphStyle("Body", parent=base["Normal"], textColor=TEXT_COLOR, leading=14),
        "small": ParagraphStyle("Small", parent=base["Normal"], fontSize=9, leading=12),
    }


def _table(rows: list[list], col_widths: list[float], header: bool = True) -> Table:
    table = Table(rows, colWidths=col_widths)
    style = [
        ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("BACKGROUND", (0, 0), (-1, -1), PANEL_COLOR),
    ]
    if header:
        style += [
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ]
    table.setStyle(TableStyle(style))
    return table


def render_pdf(assessment: Assessment, generated_on: date | None = None) -> bytes:
    """
    Render an assessment report.

    Sections: product information, overall assessment, risk table,
    gap analysis (when present), analysis, mitigations, framework references.
    """
    generated_on = generated_on or date.today()
    styles = _styles()
    buffer = io.BytesIO()

    def footer(canvas, doc) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(colors.grey)
        canvas.drawString(20 * mm, 10 * mm, f"Page {doc.page}")
        canvas.drawRightString(
            A4[0] - 20 * mm,
            10 * mm,
            f"Generated on {generated_on.isoformat()} by FINOS AI Governance Tool",
        )
        canvas.restoreState()

    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
        topMargin=18 * mm,
        bottomMargin=20 * mm,
        title="AI Risk Assessment Report",
    )
    width = doc.width
    story = [
        Paragraph("AI Risk Assessment Report", styles["title"]),
        Paragraph("FINOS AI Governance Framework", styles["subtitle"]),
    ]

    info = assessment.product_info
    story.append(Paragraph("Product Information", styles["heading"]))
    story.append(
        _table(
            [
                ["Product Name:", info.product_name or "Not specified"],
                ["Product Manager:", info.product_manager_name or "Not specified"],
                ["Manager Email:", info.product_manager_email or "Not specified"],
            ],
            [width * 0.3, width * 0.7],
            header=False,
        )
    )

    story.append(Paragraph("Overall Assessment", styles["heading"]))
    story.append(
        Paragraph(f"<b>Compliance Score:</b> {assessment.overall_score}/100", styles["body"])
    )
    story.append(
        Paragraph(
            f"<b>Compliance Level:</b> "
            f"{compliance_label(assessment.overall_score, assessment.risk_scores)}",
            styles["body"],
        )
    )

    if assessment.risk_scores:
        story.append(Paragraph("Risk Assessment", styles["heading"]))
        rows = [["Risk", "Level", "Score", "Area"]]
        for risk, score in assessment.risk_scores.items():
            rows.append(
                [
                    f"{RISK_SHORT_NAMES[risk]} Risk",
                    risk_level(score),
                    f"{score}/100",
                    Paragraph(RISK_DESCRIPTIONS[risk], styles["small"]),
                ]
            )
        story.append(_table(rows, [width * 0.3, width * 0.2, width * 0.15, width * 0.35]))

    if assessment.gap_analysis is not None:
        gap = assessment.gap_analysis
        story.append(Paragraph("Implementation Gap Analysis", styles["heading"]))
        story.append(
            Paragraph(
                f"{gap.implemented_controls} of {gap.total_controls} controls implemented "
                f"({gap.gap_percentage:g}% gap). Risk reduction achieved: "
                f"{gap.risk_reduction} points.",
                styles["body"],
            )
        )
        for rec in assessment.recommendations:
            story.append(
                Paragraph(
                    f"&bull; [{RISK_SHORT_NAMES[rec.category]}, {rec.weight} pts] "
                    f"{escape(rec.question_purpose)}",
                    styles["small"],
                )
            )

    if assessment.analysis:
        story.append(Paragraph("Risk Analysis", styles["heading"]))
        story.append(Paragraph(escape(assessment.analysis), styles["body"]))

    if assessment.risk_mitigations:
        story.append(Paragraph("Risk Mitigations", styles["heading"]))
        for i, m in enumerate(assessment.risk_mitigations, 1):
            story.append(
                Paragraph(
                    f"<b>{i}. {escape(m.risk_id)} - {escape(m.risk_name)}</b>", styles["body"]
                )
            )
            story.append(
                Paragraph(
                    f"Mitigation: {escape(m.mitigation_name)} ({escape(m.mitigation_id)}) "
                    f"&middot; Priority: {escape(m.priority)}",
                    styles["small"],
                )
            )
            if m.summary:
                story.append(Paragraph(escape(m.summary), styles["small"]))
            story.append(Spacer(1, 4))

    story.append(Paragraph("Framework References", styles["heading"]))
    story.append(Paragraph("External Standards Referenced:", styles["body"]))
    for ref in framework_references().values():
        story.append(
            Paragraph(f"&bull; {escape(ref['name'])}: {escape(ref['description'])}", styles["small"])
        )

    doc.build(story, onFirstPage=footer, onLaterPages=footer)
    return buffer.getvalue()
