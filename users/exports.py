import csv
import io

from django.http import HttpResponse

STUDENT_EXPORT_HEADER = ["Matric No", "Full Name", "Faculty", "Department", "Academic Year", "Total Courses"]


def escape_csv_value(value):
    """Quote a value containing a comma, quote or newline; double inner quotes."""
    if value is None or value == "":
        return ""
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\r\n").writerow([value])
    return buffer.getvalue()[:-2]


def csv_line(values):
    return ",".join(escape_csv_value(value) for value in values) + "\r\n"


def students_csv_response(rows):
    response = HttpResponse(content_type="text/csv")
    response["Content-Disposition"] = 'attachment; filename="students.csv"'

    response.write(csv_line(STUDENT_EXPORT_HEADER))

    for row in rows:
        response.write(csv_line([
            row["matric_no"],
            row["full_name"],
            row["faculty"],
            row["department"],
            row["academic_year"],
            row["total_courses"],
        ]))

    return response
