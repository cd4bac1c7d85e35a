from django.conf import settings
from django.http import HttpResponse
from django.utils import timezone

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def registration_pdf(registration):
    """Render a registration slip listing its active courses."""
    response = HttpResponse(content_type="application/pdf")
    response["Content-Disposition"] = f'attachment; filename="registration-{registration.id}.pdf"'

    p = canvas.Canvas(response, pagesize=A4)
    width, height = A4

    # ---------------------------------------------
    # HEADER
    # ---------------------------------------------
    header_top = height - 50

    p.setFont("Helvetica-Bold", 16)
    p.setFillColor(colors.HexColor("#1f2937"))
    p.drawCentredString(width / 2, header_top, settings.PORTAL_NAME.upper())

    p.setStrokeColor(colors.HexColor("#e5e7eb"))
    p.setLineWidth(0.6)
    p.line(50, header_top - 20, width - 50, header_top - 20)

    p.setFont("Helvetica-Bold", 14)
    p.setFillColor(colors.HexColor("#111827"))
    title_y = header_top - 55
    p.drawCentredString(width / 2, title_y, "COURSE REGISTRATION")

    # ---------------------------------------------
    # DETAILS TABLE
    # ---------------------------------------------
    y = title_y - 30
    row_height = 24
    label_x = 60
    value_x = 240
    vertical_line_x = 220

    data = [
        ("Registration ID", str(registration.id)),
        ("Student ID", str(registration.student_id)),
        ("Academic Year ID", str(registration.academic_year_id)),
        ("Submitted", "Yes" if registration.submitted else "No"),
    ]
    if registration.submitted_at:
        data.append(("Submitted at", registration.submitted_at.strftime("%Y-%m-%d %H:%M")))

    for label, value in data:
        row_bottom = y - row_height

        p.setStrokeColor(colors.HexColor("#e6e6e6"))
        p.setLineWidth(0.4)
        p.line(50, row_bottom, width - 50, row_bottom)
        p.line(vertical_line_x, y, vertical_line_x, row_bottom)

        text_y = row_bottom + (row_height / 2) - 3

        p.setFont("Helvetica-Bold", 10)
        p.setFillColor(colors.HexColor("#555555"))
        p.drawString(label_x, text_y, label)

        p.setFont("Helvetica", 11)
        p.setFillColor(colors.black)
        p.drawString(value_x, text_y, value)

        y -= row_height

    # ---------------------------------------------
    # COURSES
    # ---------------------------------------------
    y -= 30
    p.setFont("Helvetica-Bold", 12)
    p.setFillColor(colors.HexColor("#111827"))
    p.drawString(label_x, y, "Courses")
    y -= 20

    items = registration.items.filter(status="active")

    p.setFont("Helvetica", 11)
    p.setFillColor(colors.black)
    if not items:
        p.drawString(label_x, y, "No courses in this registration")

    for index, item in enumerate(items, start=1):
        if y < 60:
            p.showPage()
            y = height - 50
            p.setFont("Helvetica", 11)
            p.setFillColor(colors.black)
        p.drawString(label_x, y, f"{index}. {item.course_code_snapshot} - {item.course_name_snapshot}")
        y -= 18

    # ---------------------------------------------
    # FOOTER
    # ---------------------------------------------
    timestamp = timezone.now().strftime("%Y-%m-%d %H:%M")
    p.setFont("Helvetica-Oblique", 8)
    p.setFillColor(colors.HexColor("#999999"))
    p.drawRightString(width - 50, 40, f"Generated on {timestamp}")

    p.showPage()
    p.save()

    return response
