"""note CLI entry point.

Allows running via `python -m note` and provides the console script
defined in `pyproject.toml`.
"""

import sys
from typing import Optional

from .version import get_version_string

USAGE = """usage: note [options] [FILE]

options:
  -V, --version        print version and exit
  --keytest            show decoded key events (quit with ESC)
  --log-level LEVEL    write a log at LEVEL (DEBUG, INFO, WARNING, ERROR)
  --log-file PATH      log file location (default: user log directory)
  --permissive         open files that are not CRLF/UTF-8 as degraded text
  -h, --help           show this help and exit
"""


def _escape_bytes(s: str) -> str:
    """Return a printable representation of a raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Print each decoded key event until ESC is pressed."""
    from .keyboard import KeyboardHandler
    from .terminal import TerminalInterface

    print("Keyboard test mode: press keys to see parsed events.")
    print("Quit with ESC.")
    term = TerminalInterface()
    term.setup()
    kb = KeyboardHandler(term)
    try:
        while True:
            ev = kb.get_key_event(timeout=None)
            if ev is None:
                break
            if ev.is_special('escape'):
                print("Exiting keyboard test.\r")
                break
            parts = [f"type={ev.key_type.value}", f"value={ev.value}", f"raw='{_escape_bytes(ev.raw)}'"]
            flags = [name for name, on in (('alt', ev.is_alt), ('ctrl', ev.is_ctrl), ('shift', ev.is_shift)) if on]
            if flags:
                parts.append(f"flags={'+'.join(flags)}")
            print(' '.join(parts) + '\r')
    finally:
        term.cleanup()


class UsageError(Exception):
    pass


def parse_args(args: list[str]) -> dict:
    """Parse the command line into an options dict."""
    options = {
        'version': False,
        'keytest': False,
        'help': False,
        'log_level': None,
        'log_file': None,
        'permissive': False,
        'filename': None,
    }
    it = iter(args)
    for arg in it:
        if arg in ('--version', '-V'):
            options['version'] = True
        elif arg in ('--keytest', '--keyboard-test'):
            options['keytest'] = True
        elif arg in ('--help', '-h'):
            options['help'] = True
        elif arg == '--permissive':
            options['permissive'] = True
        elif arg in ('--log-level', '--log-file'):
            value = next(it, None)
            if value is None:
                raise UsageError(f"{arg} needs a value")
            options[arg[2:].replace('-', '_')] = value
        elif arg.startswith('-') and arg != '-':
            raise UsageError(f"unknown option {arg}")
        elif options['filename'] is None:
            options['filename'] = arg
        else:
            raise UsageError("only one file can be edited at a time")
    return options


def main(argv: Optional[list[str]] = None) -> int:
    try:
        options = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        print(f"note: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr, end='')
        return 2
    if options['help']:
        print(USAGE, end='')
        return 0
    if options['version']:
        print(get_version_string())
        return 0

    if options['log_level'] or options['log_file']:
        from .logging_config import setup_logging
        setup_logging(options['log_level'] or "DEBUG", options['log_file'])

    if options['keytest']:
        run_keyboard_test()
        return 0

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    from .errors import EncodingError
    editor = Editor(permissive=options['permissive'])
    if options['filename']:
        try:
            editor.load_file(options['filename'])
        except EncodingError as e:
            print(f"note: {options['filename']}: {e} (use --permissive to open anyway)", file=sys.stderr)
            return 1
        except OSError as e:
            print(f"note: cannot open {options['filename']}: {e.strerror or e}", file=sys.stderr)
            return 1
    editor.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
