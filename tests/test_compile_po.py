import gettext
import io

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from dashboard.management.commands.compile_po import build_mo, parse_po

CATALOG = r'''
msgid ""
msgstr ""
"Language: es\n"
"Content-Type: text/plain; charset=UTF-8\n"

msgid "Students"
msgstr "Alumnos"

#, python-format
msgid ""
"Cannot delete this class because it has %(count)d students. "
"Reassign them first."
msgstr ""
"No se puede eliminar el grupo: tiene %(count)d alumnos. "
"Reasígnalos primero."

msgid "Say \"hi\""
msgstr "Di \"hola\""

#, fuzzy
msgid "Teachers"
msgstr "Maestros"

msgid "Untranslated"
msgstr ""
'''


def test_parse_po_keeps_translated_entries_and_header():
    messages = parse_po(CATALOG)

    assert messages['Students'] == 'Alumnos'
    assert messages['Say "hi"'] == 'Di "hola"'
    assert messages[
        'Cannot delete this class because it has %(count)d students. Reassign them first.'
    ] == 'No se puede eliminar el grupo: tiene %(count)d alumnos. Reasígnalos primero.'
    assert 'Teachers' not in messages
    assert 'Untranslated' not in messages
    assert messages[''].startswith('Language: es\n')


def test_built_catalog_is_readable_by_gettext():
    catalog = gettext.GNUTranslations(io.BytesIO(build_mo(parse_po(CATALOG))))
    assert catalog.gettext('Students') == 'Alumnos'
    assert catalog.gettext('Teachers') == 'Teachers'


def test_command_writes_mo_next_to_po(tmp_path, settings):
    po = tmp_path / 'es' / 'LC_MESSAGES' / 'django.po'
    po.parent.mkdir(parents=True)
    po.write_text(CATALOG, encoding='utf-8')
    settings.LOCALE_PATHS = [tmp_path]

    out = io.StringIO()
    call_command('compile_po', stdout=out)

    assert po.with_suffix('.mo').exists()
    assert '(4 messages)' in out.getvalue()


def test_command_fails_without_catalogs(tmp_path, settings):
    settings.LOCALE_PATHS = [tmp_path]
    with pytest.raises(CommandError):
        call_command('compile_po', '--locale', 'fr')
