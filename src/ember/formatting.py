## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


def format_item(it) -> str:
    """Render a value the way it would be written in source."""
    if it is None: return 'nil'
    if isinstance(it, bool): return str(it).lower()
    if isinstance(it, str): return '"' + it.replace('\\', '\\\\').replace('"', '\\"') + '"'
    if isinstance(it, list): return '[' + ', '.join(format_item(i) for i in it) + ']'
    if isinstance(it, tuple): return '{' + ', '.join(format_item(i) for i in it) + '}'
    if isinstance(it, dict): return '%{' + ', '.join(f"{format_item(k)} => {format_item(v)}" for k, v in it.items()) + '}'
    if isinstance(it, range): return f"range({it.start}, {it.stop - 1})"
    if isinstance(it, bytes): return str(it)[1:-1]
    return str(it)
