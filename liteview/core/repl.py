"""
REPL - Interactive SQL shell for LiteView

Provides a command-line interface for opening a database file,
browsing its tables, running queries and saving the result.
"""

import logging
import sys
from typing import Optional

from ..storage.files import read_database_file, write_database_file
from .errors import LiteViewError
from .executor import Rows, Empty
from .session import Session, ErrorMessage

log = logging.getLogger(__name__)


class REPL:
    """
    Interactive SQL REPL (Read-Eval-Print Loop) for LiteView.

    Features:
    - Multi-line SQL input (statements ending with ;)
    - Special commands (.open, .tables, .save, etc.)
    - Pretty-printed results
    """

    BANNER = """
LiteView - SQLite database viewer

Type .help for commands, or enter SQL statements.
Statements must end with a semicolon (;).
"""

    HELP = """
Special Commands:
  .help             Show this help message
  .open <file>      Load a database file into memory
  .tables           List tables (as found when the file was loaded)
  .select <table>   Run SELECT * on a table
  .schema <table>   Show columns of a table
  .last             Show the last result or error again
  .save <file>      Write the in-memory database to a file
  .quit / .exit     Exit the REPL

Changes made with SQL only reach disk through .save.
The table list is refreshed by .open, not by CREATE/DROP TABLE.
"""

    def __init__(self, session: Optional[Session] = None, out=None):
        """Initialize REPL around a session (a new one by default)."""
        self.session = session if session is not None else Session()
        self.out = out if out is not None else sys.stdout
        self.running = False
        self.buffer = []

    def _print(self, text: str = "") -> None:
        print(text, file=self.out)

    def run(self) -> None:
        """Start the REPL loop."""
        self.running = True
        self._print(self.BANNER)

        while self.running:
            try:
                self._process_input()
            except KeyboardInterrupt:
                self.buffer = []
                self._print("\n(Use .quit to exit)")
            except EOFError:
                self._print()
                self._quit()

    def _get_prompt(self) -> str:
        """Get the appropriate prompt."""
        if self.buffer:
            return "    ...> "
        return "liteview> "

    def _process_input(self) -> None:
        """Read and process user input."""
        line = input(self._get_prompt())
        self.feed(line)

    def feed(self, line: str) -> None:
        """Handle one line of input, as typed at the prompt."""
        line = line.strip()

        if not line:
            return

        # Special commands (only when not in multi-line mode)
        if not self.buffer and line.startswith('.'):
            self.handle_command(line)
            return

        self.buffer.append(line)

        full_statement = '\n'.join(self.buffer)
        if full_statement.rstrip().endswith(';'):
            self.buffer = []
            self.execute_statement(full_statement)

    def handle_command(self, cmd: str) -> None:
        """Handle special dot commands."""
        parts = cmd.split(None, 1)
        command = parts[0].lower()
        log.debug("Dot command %s", command)
        args = parts[1].strip() if len(parts) > 1 else None

        if command in ('.quit', '.exit', '.q'):
            self._quit()
        elif command == '.help':
            self._print(self.HELP)
        elif command == '.open':
            self._open(args)
        elif command == '.tables':
            self._show_tables()
        elif command == '.select':
            self._select(args)
        elif command == '.schema':
            self._show_schema(args)
        elif command == '.last':
            self._show_display()
        elif command == '.save':
            self._save(args)
        else:
            self._print(f"Unknown command: {command}")
            self._print("Type .help for available commands.")

    def _quit(self) -> None:
        """Exit the REPL."""
        self._print("Goodbye!")
        self.running = False
        self.session.close()

    def _open(self, path: Optional[str]) -> None:
        """Load a database file."""
        if not path:
            self._print("Usage: .open <file>")
            return

        try:
            data = read_database_file(path)
        except OSError as e:
            self._print(f"Error: {e}")
            return

        try:
            snapshot = self.session.load_from_bytes(data)
        except LiteViewError as e:
            self._print(e.display_text())
            return
        self._print(f"Opened {path} ({snapshot.size} bytes, {len(snapshot.tables)} table(s))")

    def _show_tables(self) -> None:
        """List all tables."""
        if not self.session.is_loaded:
            self._print("No database loaded. Use .open <file>.")
            return

        tables = self.session.current_tables()
        if tables:
            self._print("\nTables:")
            for table in tables:
                self._print(f"  {table}")
            self._print()
        else:
            self._print("No tables found.")

    def _select(self, table: Optional[str]) -> None:
        """Prefill and run SELECT * for a table."""
        if not table:
            self._print("Usage: .select <table>")
            return
        sql = self.session.prefill_query(table)
        self._print(sql)
        self.execute_statement(sql)

    def _show_schema(self, table: Optional[str]) -> None:
        """Show columns for a table."""
        if not table:
            self._print("Usage: .schema <table>")
            return
        try:
            outcome = self.session.table_info(table)
        except LiteViewError as e:
            self._print(e.display_text())
            return
        if isinstance(outcome, Empty):
            self._print(f"No such table: {table}")
        else:
            self._print_outcome(outcome)

    def _show_display(self) -> None:
        """Re-show whatever the session currently displays."""
        item = self.session.display()
        if item is None:
            self._print("Nothing to show yet.")
        elif isinstance(item, ErrorMessage):
            self._print(item.text)
        else:
            self._print_outcome(item)

    def _save(self, path: Optional[str]) -> None:
        """Export the session and write it to a file."""
        if not path:
            self._print("Usage: .save <file>")
            return

        try:
            data = self.session.export_bytes()
        except LiteViewError as e:
            self._print(e.display_text())
            return

        try:
            write_database_file(path, data)
        except OSError as e:
            self._print(f"Error: {e}")
            return
        self._print(f"Saved {len(data)} bytes to {path}")

    def execute_statement(self, sql: str) -> None:
        """Execute a SQL statement and display results."""
        try:
            outcome = self.session.execute(sql)
        except LiteViewError as e:
            self._print(e.display_text())
            return

        if outcome is not None:
            self._print_outcome(outcome)

    def _print_outcome(self, outcome) -> None:
        if isinstance(outcome, Empty):
            self._print(outcome.message)
        elif isinstance(outcome, Rows):
            self._print(format_rows(outcome))
            self._print(f"\n({outcome.row_count} row(s))")


def format_rows(rows: Rows, max_width: int = 40) -> str:
    """Pretty-print a result set as an aligned table."""
    columns = list(rows.columns)
    cells = rows.rendered()

    widths = [len(col) for col in columns]
    for row in cells:
        for i, text in enumerate(row):
            widths[i] = max(widths[i], len(text))

    # Limit column width for readability
    widths = [min(w, max_width) for w in widths]

    def fmt(values) -> str:
        return " | ".join(v.ljust(widths[i])[:widths[i]] for i, v in enumerate(values))

    lines = [fmt(columns), "-+-".join("-" * w for w in widths)]
    lines.extend(fmt(row) for row in cells)
    return "\n".join(lines)


def main(argv=None):
    """Entry point for the REPL."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="liteview",
        description="LiteView - open, query and save SQLite database files"
    )
    parser.add_argument(
        '-f', '--file',
        help='Database file to open on startup'
    )
    parser.add_argument(
        '-e', '--execute',
        help='Execute one SQL statement against --file and exit'
    )
    parser.add_argument(
        '-o', '--output',
        help='With --execute: save the modified database to this file'
    )
    parser.add_argument(
        '--web', action='store_true',
        help='Serve the web viewer instead of the REPL'
    )
    parser.add_argument('--host', default='127.0.0.1', help='Web viewer host (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=5000, help='Web viewer port (default: 5000)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.web:
        from ..web.app import create_app
        app = create_app()
        if args.file:
            try:
                app.extensions["liteview.session"].load_from_bytes(read_database_file(args.file))
            except (LiteViewError, OSError) as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
        app.run(host=args.host, port=args.port)
        return 0

    session = Session()

    # Execute single statement
    if args.execute:
        if not args.file:
            parser.error("--execute requires --file")
        try:
            session.load_from_bytes(read_database_file(args.file))
            outcome = session.execute(args.execute)
            if isinstance(outcome, Rows):
                print(format_rows(outcome))
            elif isinstance(outcome, Empty):
                print(outcome.message)
            if args.output:
                write_database_file(args.output, session.export_bytes())
        except LiteViewError as e:
            print(e.display_text(), file=sys.stderr)
            return 1
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            session.close()
        return 0

    repl = REPL(session)
    if args.file:
        repl.handle_command(f".open {args.file}")
    repl.run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
