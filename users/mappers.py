def map_user(user):
    if user is None:
        return None
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role,
        "is_active": bool(user.is_active),
        "created_at": user.date_joined,
    }


def map_student_profile(profile):
    if profile is None:
        return None
    return {
        "id": profile.id,
        "user_id": profile.user_id,
        "matric_no": profile.matric_no,
        "year_of_entry": profile.year_of_entry,
        "faculty_id": profile.faculty_id,
        "department_id": profile.department_id,
        "level": profile.level,
        "created_at": profile.created_at,
    }


def map_user_summary(user):
    # the nested {id, full_name, email} block used on payments
    if user is None:
        return None
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
    }
