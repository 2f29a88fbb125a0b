"""Interactive terminal front end for ZacAI"""

import sys
import json
import time
import logging
import argparse
import textwrap
import threading
from colorama import init, Fore, Style

from . import config
from .agent import ZacAgent
from .errors import ImportFormatError
from .responses import format_stats_response, format_trace
from .router import FACTUAL
from . import __version__, __author__, __powered_by__

init(autoreset=True)

logger = logging.getLogger(__name__)

BOX_WIDTH = 62


# ── Terminal helpers ─────────────────────────────────────────────────────────

def _typewrite(text: str, color: str = Fore.WHITE, speed: float = 0.013, end: str = '\n'):
    """Write ``text`` one character at a time; long text is written faster."""
    delay = speed / (1 + len(text) // 200)
    sys.stdout.write(color)
    for ch in text:
        sys.stdout.write(ch)
        sys.stdout.flush()
        time.sleep(delay)
    sys.stdout.write(Style.RESET_ALL + end)
    sys.stdout.flush()


def _say(text: str, color: str = Fore.WHITE):
    print(f"{color}{text}{Style.RESET_ALL}")


def _box(rows, color: str = Fore.MAGENTA) -> list:
    """Frame ``(text, visible_width)`` rows in a double-line box; None is a rule."""
    lines = [f"{color}╔{'═' * BOX_WIDTH}╗{Style.RESET_ALL}"]
    for row in rows:
        if row is None:
            lines.append(f"{color}╟{'─' * BOX_WIDTH}╢{Style.RESET_ALL}")
            continue
        text, width = row
        pad = ' ' * max(BOX_WIDTH - width, 0)
        lines.append(f"{color}║{Style.RESET_ALL}{text}{pad}{color}║{Style.RESET_ALL}")
    lines.append(f"{color}╚{'═' * BOX_WIDTH}╝{Style.RESET_ALL}")
    return lines


class _Spinner:
    """Braille spinner drawn from a daemon thread while the agent works."""

    FRAMES = '⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏'

    def __init__(self, label: str, color: str = Fore.YELLOW):
        self.label = label
        self.color = color
        self._done = threading.Event()
        self._worker = threading.Thread(target=self._draw, daemon=True)

    def _draw(self):
        tick = 0
        while not self._done.is_set():
            frame = self.FRAMES[tick % len(self.FRAMES)]
            sys.stdout.write(f"\r{self.color}  {frame}  {self.label}{Style.RESET_ALL}   ")
            sys.stdout.flush()
            tick += 1
            time.sleep(0.09)

    def __enter__(self):
        self._worker.start()
        return self

    def __exit__(self, *_):
        self._done.set()
        self._worker.join()
        sys.stdout.write('\r' + ' ' * (len(self.label) + 14) + '\r')
        sys.stdout.flush()


class ZacCLI:
    """Read-eval-print loop around a ZacAgent"""

    EXAMPLES = (
        "3×3+3",
        "define curious",
        "synonyms for happy",
        "My name is Sam",
        "What do you remember about me?",
    )

    def __init__(self, data_dir=None, offline: bool = False):
        self.data_dir = data_dir
        self.offline = offline
        self.agent = None
        self.show_thinking = False
        self.feedback_interval = 5  # factual answers between feedback prompts
        self._factual_answers = 0

        # name -> (handler, takes an argument, help text)
        self._commands = {
            'help': (self._cmd_help, False, "Show this help message"),
            'stats': (self._cmd_stats, False, "Show knowledge and conversation statistics"),
            'thinking': (self._cmd_thinking, False, "Toggle showing the reasoning trace"),
            'export': (self._cmd_export, True, "Export the knowledge store to a JSON file"),
            'import': (self._cmd_import, True, "Merge a knowledge export into the store"),
            'clear': (self._cmd_clear, False, "Forget everything learned (seed knowledge stays)"),
            'version': (self._cmd_version, False, "Show version and credits"),
            'quit': (self._cmd_quit, False, "Exit the application"),
        }
        self._aliases = {'exit': 'quit', 'q': 'quit', 'statistics': 'stats'}

    # ── Output ──────────────────────────────────────────────────────────────

    def print_banner(self):
        title = '·  Z a c A I  ·'
        tagline = 'A conversational assistant that learns as you talk'
        credits = [
            ("Developed by  : ", __author__, Fore.GREEN),
            ("Powered by    : ", __powered_by__, Fore.CYAN),
            ("Version       : ", f"v{__version__}", Fore.WHITE),
        ]
        rows = [
            (f"{Fore.CYAN + Style.BRIGHT}{title:^{BOX_WIDTH}}{Style.RESET_ALL}", BOX_WIDTH),
            (f"{Fore.YELLOW}{tagline:^{BOX_WIDTH}}{Style.RESET_ALL}", BOX_WIDTH),
            None,
        ]
        for label, value, color in credits:
            rows.append((f"  {Fore.WHITE}{label}{color}{value}", 2 + len(label) + len(value)))

        print()
        for line in _box(rows):
            print(line)
            time.sleep(0.03)
        print()

    def print_help(self):
        rule = f"{Fore.CYAN}{'─' * 60}{Style.RESET_ALL}"
        print(f"\n{rule}")
        _typewrite("  Commands", Fore.CYAN + Style.BRIGHT, speed=0.035)
        print(rule)
        for name, (_, takes_arg, text) in self._commands.items():
            usage = f"{name} FILE" if takes_arg else name
            print(f"  {Fore.GREEN}{usage:<14}{Style.RESET_ALL}{text}")

        _say("\n  Try asking", Fore.CYAN + Style.BRIGHT)
        for example in self.EXAMPLES:
            print(f"  {Fore.YELLOW}›{Style.RESET_ALL} {example}")
            time.sleep(0.06)
        print(f"{rule}\n")

    def print_response(self, text: str, confidence: float = None, trace=None):
        rule = f"{Fore.GREEN}{'─' * BOX_WIDTH}{Style.RESET_ALL}"
        header = f"{Fore.GREEN + Style.BRIGHT}  {config.CLI_ASSISTANT}{Style.RESET_ALL}"
        if confidence is not None:
            header += f"  ({confidence:.0%} confident)"
        print(f"\n{rule}\n{header}\n{rule}")

        for paragraph in text.splitlines() or [""]:
            for line in textwrap.wrap(paragraph, width=config.CLI_WIDTH) or [""]:
                _typewrite(line)

        if trace and self.show_thinking:
            _say("\n  Reasoning", Fore.CYAN)
            _say(format_trace(trace), Fore.CYAN)
        print(f"{rule}\n")

    def print_error(self, message: str):
        _say(f"\n  ✗  {message}\n", Fore.RED)

    def _ok(self, message: str):
        _say(f"  ✓  {message}\n", Fore.GREEN)

    # ── Commands ────────────────────────────────────────────────────────────

    def _cmd_help(self, _arg):
        self.print_help()

    def _cmd_stats(self, _arg):
        print(f"\n{format_stats_response(self.agent.get_statistics())}\n")

    def _cmd_thinking(self, _arg):
        self.show_thinking = not self.show_thinking
        _say(f"  Reasoning trace {'on' if self.show_thinking else 'off'}.\n", Fore.CYAN)

    def _cmd_export(self, path):
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(self.agent.export(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            self.print_error(f"Export failed: {e}")
            return
        self._ok(f"Knowledge exported to {path}")

    def _cmd_import(self, path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                count = self.agent.import_document(json.load(f))
        except (OSError, ValueError, ImportFormatError) as e:
            self.print_error(f"Import failed: {e}")
            return
        self._ok(f"Imported {count} entries from {path}")

    def _cmd_clear(self, _arg):
        answer = input(f"{Fore.YELLOW}  Forget everything learned? (yes/no): {Style.RESET_ALL}")
        if answer.strip().lower() != 'yes':
            _say("  Cancelled.\n", Fore.CYAN)
            return
        self.agent.clear_memory()
        self._ok("Learned memory cleared")

    def _cmd_version(self, _arg):
        print()
        _typewrite(f"  ZacAI v{__version__}", Fore.CYAN + Style.BRIGHT, speed=0.02)
        _say(f"  Developer : {__author__}", Fore.GREEN)
        _say(f"  Powered by: {__powered_by__}\n", Fore.CYAN)

    def _cmd_quit(self, _arg):
        _typewrite("\n  Thanks for chatting with ZacAI! Goodbye!\n", Fore.MAGENTA, speed=0.022)
        return False

    def handle_command(self, line: str):
        """
        Run ``line`` if it is a command.

        Returns False to leave the loop, True after a command ran, and None
        when the line is a message for the agent.
        """
        name, _, arg = line.strip().partition(' ')
        name = self._aliases.get(name.lower(), name.lower())
        arg = arg.strip()
        if name not in self._commands:
            return None
        handler, takes_arg, _ = self._commands[name]
        if takes_arg != bool(arg):
            return None
        return handler(arg) is not False

    # ── Conversation ────────────────────────────────────────────────────────

    def read_line(self) -> str:
        prompt = (
            f"{Fore.LIGHTMAGENTA_EX}  ╰─ {Style.BRIGHT}{config.CLI_PROMPT}{Style.RESET_ALL}"
            f"{Fore.LIGHTMAGENTA_EX} ›{Style.RESET_ALL} "
        )
        try:
            return input(prompt).strip()
        except (KeyboardInterrupt, EOFError):
            return 'quit'

    def _prompt_feedback(self, response):
        """Every few looked-up answers, ask whether the answer helped"""
        if response is None or response.source != FACTUAL:
            return
        self._factual_answers += 1
        if self._factual_answers < self.feedback_interval:
            return
        self._factual_answers = 0

        try:
            reply = input(f"{Fore.CYAN}  Was this answer helpful? (y/n/skip): {Style.RESET_ALL}")
        except (KeyboardInterrupt, EOFError):
            print()
            return
        reply = reply.strip().lower()
        if reply in ('y', 'yes', 'n', 'no'):
            self.agent.record_feedback(response.turn_id, reply.startswith('y'))
            _say("  Thanks! Feedback recorded.\n", Fore.GREEN)

    def start_agent(self) -> bool:
        print()
        try:
            with _Spinner("Initializing ZacAI…"):
                self.agent = ZacAgent(data_dir=self.data_dir, offline=self.offline)
        except Exception as e:
            self.print_error(f"Failed to initialize: {e}")
            logger.exception("Agent initialization failed")
            return False
        self._ok("Ready!")
        self.print_response(self.agent.get_greeting())
        return True

    def run(self):
        self.print_banner()
        self.print_help()
        if not self.start_agent():
            return

        while True:
            try:
                line = self.read_line()
                if not line:
                    continue
                handled = self.handle_command(line)
                if handled is False:
                    break
                if handled:
                    continue

                with _Spinner("Thinking…", Fore.CYAN):
                    response = self.agent.submit(line)
                self.print_response(response.text, response.confidence, response.trace)
                self._prompt_feedback(response)

            except KeyboardInterrupt:
                _say("\n  Use 'quit' to exit.\n", Fore.YELLOW)
            except Exception as e:
                self.print_error(f"Unexpected error: {e}")
                logger.exception("Unexpected error while answering")


def _print_about():
    _say("ZacAI", Fore.CYAN)
    print("  Arithmetic · Vocabulary · Facts · Personal memory")
    _say(f"  Version   : {__version__}", Fore.GREEN)
    _say(f"  Developer : {__author__}", Fore.GREEN)
    _say(f"  Powered by: {__powered_by__}", Fore.BLUE)
    print(f"\n  Run {Fore.YELLOW}zacai{Style.RESET_ALL} to start the interactive assistant.")


def main(argv=None):
    """Console entry point"""
    parser = argparse.ArgumentParser(
        prog="zacai",
        description="ZacAI: a conversational assistant that learns as you talk",
        epilog=f"Version {__version__} · {__author__} · powered by {__powered_by__}",
    )
    parser.add_argument("-v", "--version", action="version", version=f"ZacAI v{__version__}")
    parser.add_argument("--about", action="store_true", help="show information about ZacAI and exit")
    parser.add_argument("--data-dir", default=None,
                        help=f"where learned knowledge is kept (default: {config.KNOWLEDGE_DIR})")
    parser.add_argument("--offline", action="store_true",
                        help="never call the dictionary or encyclopedia services")
    args = parser.parse_args(argv)

    if args.about:
        _print_about()
        return

    try:
        ZacCLI(data_dir=args.data_dir, offline=args.offline).run()
    except Exception as e:
        _say(f"Fatal error: {e}", Fore.RED)
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
