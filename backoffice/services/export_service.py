"""
Export services: RevenueExportService (CSV, Excel, PDF).
"""

import csv
import io
import logging
from io import BytesIO
from xml.sax.saxutils import escape

import pandas as pd
from django.core.exceptions import ValidationError
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

logger = logging.getLogger(__name__)


class RevenueExportService:
    """
    Render a revenue report (see RevenueReportService.build_report) as a file.

    Usage:
        service = RevenueExportService(report, company_name='Bridge Retreats')
        content, content_type, filename = service.export('csv')
    """

    FORMATS = {
        'csv': ('text/csv; charset=utf-8', 'csv'),
        'excel': ('application/vnd.openxmlformats-officedocument.spreadsheetml.sheet', 'xlsx'),
        'pdf': ('application/pdf', 'pdf'),
    }

    # (key, label) for the executive summary rows
    SUMMARY_ROWS = [
        ('totalRevenue', 'Total Revenue'),
        ('monthlyRevenue', 'Monthly Revenue'),
        ('revenueGrowth', 'Revenue Growth (%)'),
        ('averageDailyRate', 'Average Daily Rate'),
        ('revPAR', 'RevPAR'),
        ('occupancyRate', 'Occupancy Rate (%)'),
        ('grossProfit', 'Gross Profit'),
        ('totalCosts', 'Total Costs'),
        ('profitMargin', 'Profit Margin (%)'),
        ('forecastedRevenue', 'Forecasted Revenue'),
        ('yearOverYearGrowth', 'Year over Year Growth (%)'),
        ('totalBookings', 'Total Bookings'),
        ('averageBookingValue', 'Average Booking Value'),
    ]

    TYPE_COLUMNS = [
        ('retreatType', 'Retreat Type'),
        ('revenue', 'Revenue'),
        ('bookings', 'Bookings'),
        ('averageValue', 'Average Value'),
        ('costs', 'Costs'),
        ('netProfit', 'Net Profit'),
        ('profitMargin', 'Profit Margin (%)'),
        ('growthRate', 'Growth (%)'),
        ('marketShare', 'Market Share (%)'),
    ]

    MONTHLY_COLUMNS = [
        ('month', 'Month'),
        ('revenue', 'Revenue'),
        ('costs', 'Costs'),
        ('profit', 'Profit'),
        ('bookings', 'Bookings'),
        ('averageDailyRate', 'ADR'),
        ('occupancyRate', 'Occupancy (%)'),
        ('target', 'Target'),
        ('variance', 'Variance (%)'),
    ]

    COST_COLUMNS = [
        ('category', 'Category'),
        ('amount', 'Amount'),
        ('percentage', 'Share (%)'),
        ('trend', 'Trend (%)'),
        ('count', 'Entries'),
    ]

    FORECAST_COLUMNS = [
        ('month', 'Month'),
        ('forecast', 'Forecast'),
        ('confidence', 'Confidence (%)'),
        ('lowerBound', 'Lower Bound'),
        ('upperBound', 'Upper Bound'),
    ]

    def __init__(self, report, company_name=''):
        self.report = report
        self.data = report['data']
        self.meta = report['meta']
        self.company_name = company_name

    @classmethod
    def supported_formats(cls):
        return list(cls.FORMATS)

    def get_filename(self, extension, now=None):
        now = timezone.localtime(now or timezone.now())
        return "revenue-report-{period}-{type}-{stamp}.{ext}".format(
            period=self.meta['period'],
            type=self.meta['retreatType'],
            stamp=now.strftime('%Y-%m-%d-%H%M'),
            ext=extension,
        )

    def export(self, export_format):
        """
        Render the report.

        Returns:
            (content bytes, content type, filename)
        """
        if export_format not in self.FORMATS:
            raise ValidationError(
                f"Unsupported format. Supported formats: {', '.join(self.supported_formats())}"
            )

        content_type, extension = self.FORMATS[export_format]
        renderer = {
            'csv': self.to_csv,
            'excel': self.to_excel,
            'pdf': self.to_pdf,
        }[export_format]

        content = renderer()
        logger.info(
            "Exported revenue report (%s, %s) as %s, %d bytes",
            self.meta['period'], self.meta['retreatType'], export_format, len(content)
        )
        return content, content_type, self.get_filename(extension)

    # =========================================================================
    # TABLES
    # =========================================================================

    def _summary_rows(self):
        metrics = self.data['metrics']
        return [[label, metrics.get(key, 0)] for key, label in self.SUMMARY_ROWS]

    @staticmethod
    def _rows(items, columns):
        return [[item.get(key, '') for key, _ in columns] for item in items]

    def _sections(self):
        """(title, header, rows) for each tabular section."""
        return [
            ('Revenue by Retreat Type', [label for _, label in self.TYPE_COLUMNS],
             self._rows(self.data['retreatTypeRevenue'], self.TYPE_COLUMNS)),
            ('Monthly Performance', [label for _, label in self.MONTHLY_COLUMNS],
             self._rows(self.data['monthlyData'], self.MONTHLY_COLUMNS)),
            ('Cost Analysis', [label for _, label in self.COST_COLUMNS],
             self._rows(self.data['costAnalysis'], self.COST_COLUMNS)),
            ('Revenue Forecast', [label for _, label in self.FORECAST_COLUMNS],
             self._rows(self.data['forecastData'], self.FORECAST_COLUMNS)),
        ]

    # =========================================================================
    # RENDERERS
    # =========================================================================

    def to_csv(self):
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(['Revenue Report'])
        if self.company_name:
            writer.writerow(['Company', self.company_name])
        writer.writerow(['Period', self.meta['period']])
        writer.writerow(['Retreat Type', self.meta['retreatType']])
        writer.writerow(['Date Range', self.meta['dateRange']['start'], self.meta['dateRange']['end']])
        writer.writerow(['Currency', self.meta['currency']])
        writer.writerow(['Generated', timezone.localtime().isoformat()])
        writer.writerow([])

        writer.writerow(['Executive Summary'])
        writer.writerow(['Metric', 'Value'])
        writer.writerows(self._summary_rows())

        for title, header, rows in self._sections():
            writer.writerow([])
            writer.writerow([title])
            writer.writerow(header)
            writer.writerows(rows)

        return output.getvalue().encode('utf-8')

    def to_excel(self):
        buffer = BytesIO()
        sheets = [('Summary', ['Metric', 'Value'], self._summary_rows())]
        sheet_names = ['By Type', 'Monthly', 'Costs', 'Forecast']
        for name, (_, header, rows) in zip(sheet_names, self._sections()):
            sheets.append((name, header, rows))

        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            for name, header, rows in sheets:
                pd.DataFrame(rows, columns=header).to_excel(writer, sheet_name=name, index=False)

        return buffer.getvalue()

    def to_pdf(self):
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4),
            rightMargin=15*mm,
            leftMargin=15*mm,
            topMargin=15*mm,
            bottomMargin=15*mm
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'ReportTitle',
            parent=styles['Heading1'],
            fontSize=18,
            spaceAfter=6,
            textColor=colors.HexColor('#1e3a5f')
        )
        subtitle_style = ParagraphStyle(
            'ReportSubtitle',
            parent=styles['Normal'],
            fontSize=10,
            textColor=colors.grey,
            spaceAfter=12
        )
        section_style = ParagraphStyle(
            'SectionHeader',
            parent=styles['Heading2'],
            fontSize=12,
            spaceBefore=12,
            spaceAfter=6,
            textColor=colors.HexColor('#2563eb')
        )

        story = []
        title = "Revenue Report"
        if self.company_name:
            title = f"{title} - {self.company_name}"
        story.append(Paragraph(escape(title), title_style))
        story.append(Paragraph(escape(
            f"{self.meta['dateRange']['start']} to {self.meta['dateRange']['end']} | "
            f"{self.meta['retreatType']} | {self.meta['currency']} | "
            f"Generated: {timezone.localtime().strftime('%B %d, %Y at %H:%M')}"
        ), subtitle_style))
        story.append(Spacer(1, 6*mm))

        story.append(Paragraph("Executive Summary", section_style))
        story.append(self._build_table([['Metric', 'Value']] + self._summary_rows()))

        for title, header, rows in self._sections():
            if not rows:
                continue
            story.append(Spacer(1, 6*mm))
            story.append(Paragraph(title, section_style))
            story.append(self._build_table([header] + rows))

        doc.build(story)
        return buffer.getvalue()

    @staticmethod
    def _build_table(data):
        table = Table(data, repeatRows=1)
        table.setStyle(TableStyle([
            # Header
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#1e3a5f')),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 8),
            ('ALIGN', (0, 0), (-1, 0), 'CENTER'),

            # Body
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 1), (-1, -1), 8),
            ('ALIGN', (1, 1), (-1, -1), 'RIGHT'),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#f1f5f9')]),

            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        return table
