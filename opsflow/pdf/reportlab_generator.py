import io
import logging
import os
from decimal import Decimal
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Image, Table, TableStyle

from opsflow.pdf.config import PDFSettings
from opsflow.pdf.exceptions import PDFGenerationException
from opsflow.pdf.generator import AbstractPDFGenerator
from opsflow.pdf.models import PDFDocumentData

logger = logging.getLogger(__name__)


class ReportLabPDFGenerator(AbstractPDFGenerator):
    """Implémentation du générateur PDF utilisant ReportLab."""

    def __init__(self, settings: PDFSettings):
        """Initialise le générateur ReportLab avec sa configuration.

        Args:
            settings: L'objet de configuration PDFSettings.
        """
        self.settings = settings
        self.primary_color = colors.HexColor(settings.PRIMARY_COLOR_HEX)
        logger.info("[ReportLabPDFGenerator] Initialisé avec la configuration.")

    def _money(self, value: Decimal) -> str:
        return f"{value:.2f} {self.settings.CURRENCY_SYMBOL}"

    async def render_document(self, document: PDFDocumentData) -> bytes:
        """Construit le PDF: en-tête société, client, tableau des lignes, totaux, notes."""
        logger.info(f"[PDFGen] Génération PDF {document.kind} {document.number}")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, title=f"{document.title} {document.number}")
        elements = []
        styles = getSampleStyleSheet()

        title_style = ParagraphStyle(name="DocTitle", parent=styles["Heading1"], textColor=self.primary_color)
        normal_style = styles["Normal"]
        footer_style = ParagraphStyle(name="Footer", fontSize=9, textColor=colors.gray, alignment=1)
        bold_style = ParagraphStyle(name="Bold", parent=normal_style, fontName='Helvetica-Bold')
        company_info_style = ParagraphStyle(name='CompanyInfo', parent=normal_style, alignment=2)

        # 1. Logo ou nom de la société
        if os.path.exists(self.settings.LOGO_PATH):
            logo = Image(self.settings.LOGO_PATH, width=1.5*inch, height=0.75*inch)
            logo.hAlign = 'LEFT'
            elements.append(logo)
        else:
            elements.append(Paragraph(self.settings.COMPANY_NAME, title_style))
        elements.append(Paragraph(self.settings.COMPANY_INFO_HTML, company_info_style))
        elements.append(Spacer(1, 0.2*inch))

        # 2. Titre, numéro et dates
        elements.append(Paragraph(f"{document.title} {document.number}", styles["h2"]))
        elements.append(Paragraph(f"Date : {document.issue_date.strftime('%d/%m/%Y')}", normal_style))
        if document.secondary_date is not None:
            elements.append(Paragraph(
                f"{document.secondary_date_label} : {document.secondary_date.strftime('%d/%m/%Y')}",
                normal_style,
            ))
        elements.append(Paragraph(f"Statut : {escape(document.status)}", normal_style))
        elements.append(Spacer(1, 0.1*inch))

        # 3. Client
        if document.customer_name:
            client_text = f"<b>Client :</b> {escape(document.customer_name)}"
            if document.customer_email:
                client_text += f" ({escape(document.customer_email)})"
            elements.append(Paragraph(client_text, normal_style))
            elements.append(Spacer(1, 0.2*inch))

        # 4. Lignes
        table_data = [[
            Paragraph("<b>Description</b>", normal_style),
            Paragraph("<b>Quantité</b>", normal_style),
            Paragraph("<b>Prix unitaire</b>", normal_style),
            Paragraph("<b>Total</b>", normal_style),
        ]]
        for line in document.lines:
            table_data.append([
                Paragraph(escape(line.description), normal_style),
                f"{line.quantity:g}",
                self._money(line.unit_price),
                self._money(line.total),
            ])
        first_total_row = len(table_data)
        table_data.append(["", "", Paragraph("Sous-total", normal_style), self._money(document.subtotal)])
        table_data.append(["", "", Paragraph(f"Taxe ({document.tax:g} %)", normal_style),
                           self._money(document.subtotal * document.tax / Decimal("100"))])
        if document.discount:
            table_data.append(["", "", Paragraph("Remise", normal_style), f"-{self._money(document.discount)}"])
        table_data.append(["", "", Paragraph("<b>Total</b>", bold_style), Paragraph(f"<b>{self._money(document.total)}</b>", bold_style)])

        table = Table(table_data, colWidths=[3.2*inch, 0.9*inch, 1.3*inch, 1.3*inch])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), self.primary_color),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
            ('GRID', (0, 0), (-1, first_total_row - 1), 0.5, colors.darkgrey),
            ('LINEABOVE', (2, first_total_row), (-1, first_total_row), 1, colors.darkgrey),
            ('FONTSIZE', (0, 1), (-1, -1), 10),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 10),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 0.4*inch))

        # 5. Notes et conditions
        if document.notes:
            elements.append(Paragraph(f"<b>Notes :</b> {escape(document.notes)}", normal_style))
        if document.terms:
            elements.append(Paragraph(f"<b>Conditions :</b> {escape(document.terms)}", normal_style))

        def add_footer(canvas, doc):
            canvas.saveState()
            footer = Paragraph(self.settings.FOOTER_TEXT, footer_style)
            w, h = footer.wrap(doc.width, doc.bottomMargin)
            footer.drawOn(canvas, doc.leftMargin, h)
            canvas.restoreState()

        try:
            doc.build(elements, onFirstPage=add_footer, onLaterPages=add_footer)
        except Exception as e:
            logger.error(f"[PDFGen] Erreur ReportLab build() pour {document.kind} {document.number}: {e}", exc_info=True)
            raise PDFGenerationException(f"Failed to render {document.kind} PDF", original_exception=e)
        pdf_bytes = buffer.getvalue()
        buffer.close()
        logger.info(f"[PDFGen] PDF {document.kind} {document.number} généré en mémoire ({len(pdf_bytes)} bytes).")
        return pdf_bytes
