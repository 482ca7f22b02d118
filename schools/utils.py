"""
Utility functions for schools app.
Handles student roster Excel parsing.
"""
import datetime

import openpyxl
from django.utils.translation import gettext as _


COLUMN_ALIASES = {
    'username': ['account number', 'account', 'username', 'id', 'número de cuenta', 'numero de cuenta', 'cuenta'],
    'name': ['name', 'first name', 'first_name', 'nombre'],
    'surname': ['surname', 'last name', 'last_name', 'apellido', 'apellidos'],
    'class': ['class', 'clase', 'grupo'],
    'grade': ['grade', 'level', 'grado', 'nivel'],
    'sex': ['sex', 'gender', 'sexo'],
    'birthday': ['birthday', 'birth date', 'date of birth', 'fecha de nacimiento', 'nacimiento'],
    'blood_type': ['blood type', 'blood_type', 'tipo de sangre', 'tipo sanguíneo', 'tipo sanguineo'],
    'address': ['address', 'dirección', 'direccion', 'domicilio'],
}

OPTIONAL_COLUMNS = {'grade', 'address'}

SEX_ALIASES = {
    'male': 'MALE', 'm': 'MALE', 'masculino': 'MALE', 'hombre': 'MALE', 'h': 'MALE',
    'female': 'FEMALE', 'f': 'FEMALE', 'femenino': 'FEMALE', 'mujer': 'FEMALE',
}


def normalize_account_number(raw):
    """
    Spreadsheets drop leading zeros from numeric cells, so pad back to six digits.

    Examples:
        1234 -> '001234'
        '012345' -> '012345'
    """
    if raw is None:
        return ''
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    value = str(raw).strip()
    if value.isdigit() and len(value) < 6:
        value = value.zfill(6)
    return value


def parse_birthday(raw):
    if isinstance(raw, datetime.datetime):
        return raw.date()
    if isinstance(raw, datetime.date):
        return raw
    if raw:
        for fmt in ('%Y-%m-%d', '%d/%m/%Y', '%d-%m-%Y'):
            try:
                return datetime.datetime.strptime(str(raw).strip(), fmt).date()
            except ValueError:
                continue
    return None


def _map_columns(headers):
    mapping = {}
    for field, aliases in COLUMN_ALIASES.items():
        for i, h in enumerate(headers):
            if h in aliases:
                mapping[field] = i
                break
    return mapping


def parse_roster_excel(file):
    """
    Parse a student roster Excel file.

    Header names are matched case-insensitively in English or Spanish.

    Returns:
        (rows, problems): rows are dicts ready for ``services.import_roster``,
        problems are messages for rows that could not be read.

    Raises:
        ValueError if the workbook cannot be read or required columns are missing
    """
    try:
        wb = openpyxl.load_workbook(file, read_only=True, data_only=True)
    except Exception as e:
        raise ValueError(_('Error reading Excel file: %(error)s') % {'error': str(e)})

    try:
        ws = wb.active
        header_row = next(ws.iter_rows(min_row=1, max_row=1, values_only=True), ())
        headers = [str(h).lower().strip() if h is not None else '' for h in header_row]
        mapping = _map_columns(headers)

        missing = [col for col in COLUMN_ALIASES if col not in mapping and col not in OPTIONAL_COLUMNS]
        if missing:
            raise ValueError(
                _('Missing required columns: %(columns)s. Found headers: %(headers)s') % {
                    'columns': ', '.join(missing),
                    'headers': ', '.join(h for h in headers if h),
                }
            )

        rows = []
        problems = []
        for row_idx, row in enumerate(ws.iter_rows(min_row=2, values_only=True), start=2):
            if not row or not any(row):
                continue

            def cell(field):
                index = mapping.get(field)
                if index is None or index >= len(row):
                    return None
                return row[index]

            username = normalize_account_number(cell('username'))
            if not username:
                continue
            if not (username.isdigit() and len(username) == 6):
                problems.append(_('Row %(row)d: invalid account number "%(value)s".') % {
                    'row': row_idx, 'value': username,
                })
                continue

            sex = SEX_ALIASES.get(str(cell('sex') or '').strip().lower())
            birthday = parse_birthday(cell('birthday'))
            if sex is None or birthday is None:
                problems.append(_('Row %(row)d: sex or birthday could not be read.') % {'row': row_idx})
                continue

            grade = cell('grade')
            try:
                grade = int(grade) if grade not in (None, '') else None
            except (TypeError, ValueError):
                grade = None

            rows.append({
                'row': row_idx,
                'username': username,
                'name': str(cell('name') or '').strip(),
                'surname': str(cell('surname') or '').strip(),
                'class': str(cell('class') or '').strip(),
                'grade': grade,
                'sex': sex,
                'birthday': birthday,
                'blood_type': str(cell('blood_type') or '').strip(),
                'address': str(cell('address') or '').strip(),
            })

        return rows, problems
    finally:
        wb.close()


def weekly_schedule(lessons):
    """
    Group lessons by weekday for the calendar view.

    Returns a list of (day label, lessons) for Monday to Friday, each day
    ordered by start time.
    """
    from .models import Lesson

    days = {value: [] for value, _label in Lesson.Day.choices}
    for lesson in lessons:
        days.setdefault(lesson.day, []).append(lesson)
    return [
        (label, sorted(days[value], key=lambda lesson: lesson.start_time))
        for value, label in Lesson.Day.choices
    ]
