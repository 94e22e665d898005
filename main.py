"""
SwipeKeys - Ambiguous Swipe Keyboard with Word Prediction

Entry point for the interactive console session.
"""
import argparse
import logging
import sys
from pathlib import Path

from PyQt5.QtCore import QObject, pyqtSignal

HELP_TEXT = """Commands:
  s DX DY [VX VY]   swipe by translation (and velocity)
  t KEY             tap a key
  b                 backspace
  bb                clear the word
  p [WORD]          commit WORD, or the first prediction
  layout NAME       keys4, keys6, keys8, strokes2, msr
  engine NAME       custom, lexicon, hybrid
  stats             engine metrics
  q                 quit"""


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="SwipeKeys - Ambiguous Swipe Keyboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_TEXT,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--layout",
        choices=["keys4", "keys6", "keys8", "strokes2", "msr"],
        default=None,
        help="Keyboard layout (overrides config)",
    )

    parser.add_argument(
        "--engine",
        choices=["custom", "lexicon", "hybrid"],
        default=None,
        help="Prediction engine (overrides config)",
    )

    parser.add_argument(
        "--dictionary",
        type=Path,
        default=None,
        help="Word frequency CSV (overrides config)",
    )

    parser.add_argument(
        "--lexicon",
        type=Path,
        default=None,
        help="Word list for the lexicon engine (overrides config)",
    )

    parser.add_argument(
        "--save",
        action="store_true",
        help="Write user words and settings back to the config file on exit",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args()


class ConsoleReader(QObject):
    """Reads stdin lines in a worker thread."""
    line_read = pyqtSignal(str)
    finished = pyqtSignal()

    def start_process(self):
        """Main read loop. Runs in worker thread."""
        for line in sys.stdin:
            line = line.strip()
            if line in ("q", "quit", "exit"):
                break
            if line:
                self.line_read.emit(line)
        self.finished.emit()


def handle_command(session, line):
    """Apply one console command to the session."""
    parts = line.split()
    command, args = parts[0].lower(), parts[1:]

    try:
        if command in ("s", "swipe"):
            numbers = [float(a) for a in args]
            translation = tuple(numbers[:2])
            velocity = tuple(numbers[2:4]) if len(numbers) >= 4 else (0.0, 0.0)
            event = session.handle_drag(translation, velocity)
            print(f"  {event.kind.name.lower()}")
        elif command in ("t", "tap"):
            event = session.handle_tap(int(args[0]))
            print(f"  {event.kind.name.lower()}")
        elif command == "b":
            session.backspace()
        elif command == "bb":
            session.backspace_all()
        elif command in ("p", "pick"):
            word = session.commit_word(args[0] if args else None)
            if word is None:
                print("  nothing to commit")
        elif command == "layout" and args:
            layout = session.set_layout(args[0])
            print(f"  layout: {layout.name}")
        elif command == "engine" and args:
            if not session.switch_engine(args[0]):
                print(f"  engine {args[0]} is not available")
        elif command == "stats":
            metrics = session.manager.performance_metrics
            print(f"  engine: {session.manager.current_engine_type.display_name}")
            if metrics:
                print(f"  queries: {metrics.total_queries}")
                print(f"  avg response: {metrics.average_response_time * 1000:.2f} ms")
                print(f"  cache hit rate: {metrics.cache_hit_rate:.0%}")
                print(f"  memory: {metrics.memory_usage:,} bytes")
        else:
            print(HELP_TEXT)
    except (ValueError, IndexError):
        print(f"  bad command: {line}")


def run_console_mode(config, save_path=None):
    """Run SwipeKeys with console input and a background prediction thread."""
    import signal
    import atexit
    from PyQt5.QtCore import QCoreApplication, QThread, Qt
    from src.app import KeyboardSession, save_config
    from src.keyboard.layouts import direction_arrows

    app = QCoreApplication(sys.argv)
    session = KeyboardSession(config)

    thread = QThread()
    reader = ConsoleReader()
    reader.moveToThread(thread)

    def cleanup():
        """Stop worker threads and persist user words."""
        session.shutdown()
        thread.quit()
        thread.wait(2000)
        if save_path is not None:
            save_config(session.config, save_path)
            print(f"Saved settings to {save_path}")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def show_keys(keys):
        if session.layout.uses_letter_codes:
            print(f"  keys: {''.join(chr(k) for k in keys)}")
        elif session.layout.key_count == 4:
            print(f"  keys: {list(keys)} {direction_arrows(list(keys))}")
        else:
            print(f"  keys: {list(keys)}")

    def show_suggestions(completion):
        if completion.words:
            print(f"  word: {completion.display_word}   predictions: {', '.join(completion.words)}")

    session.keys_changed.connect(show_keys)
    session.suggestions_changed.connect(show_suggestions)
    session.control_action.connect(lambda action: print(f"  action: {action.value}"))
    session.sentence_changed.connect(lambda text: print(f"  sentence: {text}"))
    session.error.connect(lambda msg: print(f"ERROR: {msg}"))

    thread.started.connect(reader.start_process)
    reader.line_read.connect(lambda line: handle_command(session, line), Qt.QueuedConnection)
    reader.finished.connect(app.quit, Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)

    return result


def main():
    """Main entry point."""
    args = parse_args()

    from src.app import load_config
    from src.app.config import default_config_path
    config = load_config(args.config)

    # Apply CLI overrides
    if args.layout:
        config.keyboard.layout = args.layout
    if args.engine:
        config.prediction.engine = args.engine
    if args.dictionary:
        config.prediction.dictionary_path = str(args.dictionary)
    if args.lexicon:
        config.prediction.lexicon_path = str(args.lexicon)

    level = logging.DEBUG if args.debug else getattr(logging, config.logging.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    print("SwipeKeys starting...")
    print(f"  Layout: {config.keyboard.layout}")
    print(f"  Engine: {config.prediction.engine}")
    print(f"  Debug: {args.debug}")
    print()
    print(HELP_TEXT)

    save_path = (args.config or default_config_path()) if args.save else None
    return run_console_mode(config, save_path)


if __name__ == "__main__":
    sys.exit(main())
