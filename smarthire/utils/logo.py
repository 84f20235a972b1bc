"""Deterministic placeholder logos for companies without one."""

import base64

COLORS = ['#0ea5e9', '#f59e0b', '#10b981', '#ef4444', '#8b5cf6']


def _name_hash(name: str) -> int:
    # 32-bit rolling hash so a name always maps to the same color and tilt
    value = 0
    for char in name:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def get_initials(company_name: str) -> str:
    name = company_name.strip() or 'C'
    return ''.join(word[0] for word in name.split()[:2]).upper()


def generate_company_logo(company_name: str) -> str:
    """Return an SVG logo with the company's initials as a base64 data URI."""
    name = company_name.strip() or 'C'
    initials = get_initials(name)

    hashed = _name_hash(name)
    color = COLORS[hashed % len(COLORS)]
    rotation = hashed % 30 - 15

    svg = (
        '<svg width="100%" height="100%" viewBox="0 0 40 40" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="40" height="40" rx="8" fill="{color}"></rect>'
        '<text x="50%" y="50%" dominant-baseline="central" text-anchor="middle" '
        'font-family="Arial, sans-serif" font-size="18" font-weight="bold" fill="white" '
        f'transform="rotate({rotation} 20 20)">{initials}</text>'
        '</svg>'
    )
    encoded = base64.b64encode(svg.encode('utf-8')).decode('ascii')
    return f"data:image/svg+xml;base64,{encoded}"
