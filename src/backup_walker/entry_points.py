import argparse
import sys

from textual.app import App

from backup_walker.screens.views import ViewRegistry
from backup_walker.screens.walker_screen import WalkerScreen
from backup_walker.utils.config import Config, ConfigError, config
from backup_walker.utils.diff_engine import make_diff_engine
from backup_walker.utils.error_handling import log_error_with_context
from backup_walker.utils.logger import log
from backup_walker.utils.validation import ValidationError, validate_directory_path, validate_file_path
from backup_walker.walker.backups import make_numbered_backup
from backup_walker.walker.errors import BackupWalkerError, ConfigurationError
from backup_walker.walker.locator import locate


class BackupWalkerApp(App):
    """Terminal UI for walking the numbered backups of a single file."""

    TITLE = "Backup Walker"
    DEFAULT_CSS = """
    Screen {
        background: $surface-darken-1;
    }
    """

    def __init__(self, original_path: str, cfg: Config | None = None):
        """Initialize the application.

        Args:
            original_path: Absolute path of the file whose backups are walked
            cfg: Configuration; the environment-derived default when omitted
        """
        super().__init__()
        self.original_path = original_path
        self.cfg = cfg or config
        self.views = ViewRegistry(self)

    def on_mount(self) -> None:
        self.push_screen(WalkerScreen(self.original_path, cfg=self.cfg, diff_engine=make_diff_engine(self.cfg)))


def _create_argument_parser():
    parser = argparse.ArgumentParser(
        prog="backup-walker",
        description="Step through the numbered backups (name.~N~) of a file, one diff at a time.",
    )
    parser.add_argument("file", help="The original file whose backups to walk")
    parser.add_argument("--backup-dir", type=str, help="Directory holding relocated backups (env: BACKUP_WALKER_BACKUP_DIR)")
    parser.add_argument("--diff-program", type=str, help="External diff program to use instead of difflib")
    parser.add_argument("--context", type=int, help="Lines of context in diffs (default 3)")
    parser.add_argument(
        "--make-backup",
        action="store_true",
        help="Write the next numbered backup of FILE and exit",
    )
    return parser


def _fail(message: str) -> None:
    sys.stderr.write(f"backup-walker: {message}\n")
    sys.exit(1)


def _build_config(args) -> Config:
    """Apply command-line overrides on top of the environment configuration."""
    try:
        backup_dir = validate_directory_path(args.backup_dir, "Backup directory") if args.backup_dir else None
        return config.with_overrides(
            backup_dir=backup_dir,
            diff_program=args.diff_program,
            context_lines=args.context,
        )
    except (ValidationError, ConfigError) as e:
        log(f"Configuration validation failed: {e}")
        _fail(f"configuration error: {e}")


def _run(args, cfg: Config) -> None:
    if args.make_backup:
        version = make_numbered_backup(args.file, cfg)
        sys.stdout.write(f"{version.path}\n")
        return

    # Fail on the command line, not inside the TUI, when there is nothing to walk
    if not cfg.backups_enabled:
        raise ConfigurationError("backup files are disabled; set BACKUP_WALKER_MAKE_BACKUPS=1")
    locate(args.file, cfg)

    app = BackupWalkerApp(args.file, cfg)
    app.run()
    if app.return_code:
        sys.exit(app.return_code)


def main():
    """Entry point for the backup-walker command."""
    parser = _create_argument_parser()
    args = parser.parse_args()

    try:
        args.file = validate_file_path(args.file, "File")
    except ValidationError as e:
        _fail(str(e))

    cfg = _build_config(args)

    try:
        _run(args, cfg)
    except BackupWalkerError as e:
        _fail(str(e))
    except OSError as e:
        log_error_with_context("Backup walker failed", e, {"file": args.file})
        _fail(str(e))


if __name__ == "__main__":
    main()
