"""
Compile .po catalogs to .mo without GNU gettext.
"""
import struct
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

MO_MAGIC = 0x950412de
HEADER_SIZE = 28


def _unescape(s):
    return (
        s.replace('\\\\', '\0')
        .replace('\\n', '\n')
        .replace('\\t', '\t')
        .replace('\\"', '"')
        .replace('\0', '\\')
    )


def parse_po(text):
    """
    Return {msgid: msgstr} for the translated entries of a .po file.
    Fuzzy and untranslated entries are left out; the header (msgid "") is kept.
    """
    messages = {}
    msgid = msgstr = None
    state = None
    fuzzy = False

    def flush():
        if msgid is not None and msgstr is not None and not fuzzy:
            if msgstr or msgid == '':
                messages[msgid] = msgstr

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        if line.startswith('#,') and 'fuzzy' in line:
            flush()
            msgid = msgstr = None
            state = None
            fuzzy = True
            continue
        if line.startswith('#'):
            continue

        if line.startswith('msgid '):
            if state == 'msgstr':
                flush()
                fuzzy = False
            msgid = _unescape(line[6:].strip()[1:-1])
            msgstr = None
            state = 'msgid'
        elif line.startswith('msgstr '):
            msgstr = _unescape(line[7:].strip()[1:-1])
            state = 'msgstr'
        elif line.startswith('"') and line.endswith('"'):
            content = _unescape(line[1:-1])
            if state == 'msgid':
                msgid += content
            elif state == 'msgstr':
                msgstr += content
        else:
            # msgctxt / plural forms are not used by this project
            state = None

    flush()
    return messages


def build_mo(messages):
    """Serialize {msgid: msgstr} into the little-endian GNU .mo format."""
    keys = sorted(messages)
    count = len(keys)
    offset = HEADER_SIZE + count * 16

    originals = b''
    translations = b''
    strings = b''

    for key in keys:
        encoded = key.encode('utf-8')
        originals += struct.pack('<II', len(encoded), offset)
        strings += encoded + b'\0'
        offset += len(encoded) + 1

    for key in keys:
        encoded = messages[key].encode('utf-8')
        translations += struct.pack('<II', len(encoded), offset)
        strings += encoded + b'\0'
        offset += len(encoded) + 1

    header = struct.pack(
        '<7I',
        MO_MAGIC,
        0,                       # revision
        count,
        HEADER_SIZE,             # originals table
        HEADER_SIZE + count * 8,  # translations table
        0, 0,                    # no hash table
    )
    return header + originals + translations + strings


class Command(BaseCommand):
    help = 'Compiles the .po files under LOCALE_PATHS into .mo files'

    def add_arguments(self, parser):
        parser.add_argument('--locale', '-l', action='append', default=[],
                            help='Locale(s) to compile, e.g. -l es. Default: all.')

    def handle(self, *args, **options):
        locales = set(options['locale'])
        po_files = []
        for base in settings.LOCALE_PATHS:
            for po in sorted(Path(base).glob('*/LC_MESSAGES/*.po')):
                if not locales or po.parent.parent.name in locales:
                    po_files.append(po)

        if not po_files:
            raise CommandError('No .po files found.')

        for po in po_files:
            messages = parse_po(po.read_text(encoding='utf-8'))
            mo = po.with_suffix('.mo')
            mo.write_bytes(build_mo(messages))
            self.stdout.write(self.style.SUCCESS(f'Compiled {po} ({len(messages)} messages)'))
