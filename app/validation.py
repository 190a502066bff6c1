from app.errors import RegistrationRequired


def sanitize_username(name: str) -> str:
    return "".join(ch for ch in name.strip() if ch.isalnum() or ch in ("_", "-"))[:24]


def sanitize_student_name(name: str) -> str:
    # keep spaces, apostrophes and hyphens in real names; collapse runs of whitespace
    cleaned = "".join(ch for ch in (name or "") if ch.isalpha() or ch in " '-.")
    return " ".join(cleaned.split())[:48]


def validate_student(admission_number: str, student_name: str) -> tuple:
    admission = sanitize_username(admission_number or "")
    name = sanitize_student_name(student_name)
    if not admission or not name:
        raise RegistrationRequired("Please enter your Admission Number and Name first.")
    return admission, name
