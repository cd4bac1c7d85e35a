def map_faculty(faculty):
    return {
        "id": faculty.id,
        "name": faculty.name,
        "code": faculty.code,
        "created_at": faculty.created_at,
    }


def map_department(department):
    return {
        "id": department.id,
        "name": department.name,
        "code": department.code,
        "faculty_id": department.faculty_id,
        "created_at": department.created_at,
    }


def map_academic_year(academic_year):
    return {
        "id": academic_year.id,
        "name": academic_year.name,
        "is_current": bool(academic_year.is_current),
        "created_at": academic_year.created_at,
    }


def map_course(course):
    return {
        "id": course.id,
        "course_code": course.course_code,
        "course_name": course.course_name,
        "level": course.level,
        "faculty_id": course.faculty_id,
        "department_id": course.department_id,
        "created_by": course.created_by_id,
        "is_active": bool(course.is_active),
        "created_at": course.created_at,
        "updated_at": course.updated_at,
    }


def map_registration_item(item):
    return {
        "id": item.id,
        "registration_id": item.registration_id,
        "course_id": item.course_id,
        "course_code_snapshot": item.course_code_snapshot,
        "course_name_snapshot": item.course_name_snapshot,
        "status": item.status,
        "removed_at": item.removed_at,
        "created_at": item.created_at,
    }


def map_registration(registration, items=()):
    return {
        "id": registration.id,
        "student_id": registration.student_id,
        "academic_year_id": registration.academic_year_id,
        "submitted": bool(registration.submitted),
        "submitted_at": registration.submitted_at,
        "created_at": registration.created_at,
        "items": [map_registration_item(item) for item in items],
    }
