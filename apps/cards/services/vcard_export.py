"""vCard 3.0 export of a card (the file offered by the public "Save contact" button)."""

import re


def _escape(value: str) -> str:
    """Escape text per RFC 2426 (backslash, comma, semicolon, newline)."""
    value = value.replace('\\', '\\\\')
    value = value.replace(',', '\\,').replace(';', '\\;')
    return value.replace('\r\n', '\\n').replace('\n', '\\n')


def build_vcard(card) -> str:
    """Serialize a card to vCard 3.0 text with CRLF line endings."""
    lines = [
        'BEGIN:VCARD',
        'VERSION:3.0',
        f'FN:{_escape(card.name)}',
        f'N:{_escape(card.name)};;;;',
        f'TEL:{_escape(card.phone)}',
        f'EMAIL:{_escape(card.email)}',
    ]
    if card.website:
        lines.append(f'URL:{card.website}')
    if card.company:
        lines.append(f'ORG:{_escape(card.company)}')
    if card.position:
        lines.append(f'TITLE:{_escape(card.position)}')
    if card.address:
        lines.append(f'ADR:;;{_escape(card.address)};;;;')
    if card.bio:
        lines.append(f'NOTE:{_escape(card.bio)}')
    for link in card.social_links.all():
        lines.append(f'X-SOCIALPROFILE;TYPE={link.platform}:{link.url}')
    lines.append('END:VCARD')

    return '\r\n'.join(lines) + '\r\n'


def vcard_filename(card) -> str:
    """Download filename derived from the card name, e.g. Ada_Lovelace.vcf"""
    stem = re.sub(r'\s+', '_', card.name.strip())
    stem = re.sub(r'[^\w\-]', '', stem) or 'contact'
    return f'{stem}.vcf'
