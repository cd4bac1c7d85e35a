from users.mappers import map_user_summary


def map_amount(amount):
    return float(amount) if amount is not None else None


def map_policy(policy):
    return {
        "id": policy.id,
        "academic_year_id": policy.academic_year_id,
        "amount": map_amount(policy.amount),
        "created_by": policy.created_by_id,
        "updated_by": policy.updated_by_id,
        "created_at": policy.created_at,
        "updated_at": policy.updated_at,
        "academic_year_name": policy.academic_year.name,
    }


def map_payment(payment):
    return {
        "id": payment.id,
        "student_id": payment.student_id,
        "academic_year_id": payment.academic_year_id,
        "amount": map_amount(payment.amount),
        "status": payment.status,
        "payment_reference": payment.payment_reference,
        "notes": payment.notes,
        "approved_by": payment.approved_by_id,
        "approved_at": payment.approved_at,
        "declined_by": payment.declined_by_id,
        "declined_at": payment.declined_at,
        "declined_reason": payment.declined_reason,
        "created_at": payment.created_at,
        "updated_at": payment.updated_at,
        "academic_year_name": payment.academic_year.name,
        "student": map_user_summary(payment.student),
        "approved_by_user": map_user_summary(payment.approved_by),
        "declined_by_user": map_user_summary(payment.declined_by),
    }
