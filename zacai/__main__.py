"""``python -m zacai``"""

import logging
import sys

# Box drawing and arrows need a UTF-8 console (Windows defaults to a code page)
for _stream in (sys.stdout, sys.stderr):
    if (_stream.encoding or '').lower().replace('-', '') != 'utf8':
        try:
            _stream.reconfigure(encoding='utf-8', errors='replace')
        except (AttributeError, ValueError):
            pass

logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')

# Lookup failures are reported in the reasoning trace; keep them off the console
for _name in ('urllib3', 'requests', 'bs4', 'zacai'):
    logging.getLogger(_name).setLevel(logging.ERROR)

from zacai.cli import main  # noqa: E402

if __name__ == '__main__':
    main()
