from django.conf import settings
from django.utils import timezone
from django.utils.html import escape
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer


class PDFReportGenerator:
    '''Base class for generating PDF reports'''

    def __init__(self, title, orientation='portrait'):
        self.title = title
        self.pagesize = A4 if orientation == 'portrait' else (A4[1], A4[0])
        self.styles = getSampleStyleSheet()
        self.elements = []

        self.title_style = ParagraphStyle(
            'CompanyTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            textColor=colors.HexColor('#2c5f2d'),
            spaceAfter=24,
            alignment=TA_CENTER,
        )

        self.heading_style = ParagraphStyle(
            'ReportHeading',
            parent=self.styles['Heading2'],
            fontSize=14,
            textColor=colors.HexColor('#2c5f2d'),
            spaceAfter=12,
        )

        self.cell_style = ParagraphStyle(
            'Cell',
            parent=self.styles['Normal'],
            fontSize=8,
            leading=10,
        )

    def add_header(self, company_name=None):
        company_name = company_name or settings.COMPANY_NAME
        self.elements.append(Paragraph(f'<b>{escape(company_name)}</b>', self.title_style))
        self.elements.append(Paragraph(escape(self.title), self.heading_style))

        date_style = ParagraphStyle(
            'GeneratedOn',
            parent=self.styles['Normal'],
            fontSize=9,
            textColor=colors.grey,
            alignment=TA_RIGHT,
        )
        generated = timezone.localtime().strftime('%d %B, %Y at %I:%M %p')
        self.elements.append(Paragraph(f'Generated: {generated}', date_style))
        self.elements.append(Spacer(1, 12))

    def add_table(self, headers, rows, col_widths=None):
        # Wrap body cells so long names do not overflow the page
        body = [[Paragraph(escape(str(value)), self.cell_style) for value in row] for row in rows]
        table = Table([headers] + body, colWidths=col_widths, repeatRows=1)

        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2c5f2d')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),

            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('PADDING', (0, 0), (-1, -1), 4),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f8f9fa')]),
        ]))

        self.elements.append(table)
        self.elements.append(Spacer(1, 20))

    def generate(self, buffer):
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.pagesize,
            rightMargin=36,
            leftMargin=36,
            topMargin=48,
            bottomMargin=48,
            title=self.title,
        )
        doc.build(self.elements)
        return buffer


class RecordListPDF(PDFReportGenerator):
    '''Landscape table of records'''

    def __init__(self, title, headers, rows):
        super().__init__(title, orientation='landscape')
        self.headers = headers
        self.rows = rows

    def build(self):
        self.add_header()
        if self.rows:
            self.add_table(self.headers, self.rows)
        else:
            self.elements.append(Paragraph('No records to show.', self.styles['Normal']))
        return self
