"""
Command-line interface for goodgit.

This module wires the settings, store, SSH registry, key discovery and
git runner into a ``BindingEngine`` and provides the user-facing
commands:
- add
- list / ls
- remove
- clone
- set user
- help
"""

from __future__ import annotations

import sys
import json
import argparse
from dataclasses import replace
from typing import Optional, Sequence

from .config import TOOL_VERSION, settings_path_from_env, expand_path
from .settings import Settings
from .errors import GoodgitError, NoChoicesError, SubprocessFailure
from .store import IdentityStore
from .ssh_config import HostAliasRegistry, host_alias
from .keys import KeyDiscovery
from .git import GitRunner
from .binding import BindingEngine
from .prompts import Prompter
from .utils import format_table


# ---------------------------------------------------------------------------
# Color output helpers
# ---------------------------------------------------------------------------


class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colored(text: str, color: str) -> str:
    """Return colored text for terminal output."""
    return f"{color}{text}{Colors.RESET}"


def print_error(msg: str) -> None:
    """Print error message to stderr."""
    print(colored(f"✗ Error: {msg}", Colors.RED), file=sys.stderr)


def print_success(msg: str) -> None:
    """Print success message."""
    print(colored(f"✓ {msg}", Colors.GREEN))


def print_warning(msg: str) -> None:
    """Print warning message."""
    print(colored(f"⚠ Warning: {msg}", Colors.YELLOW))


def print_info(msg: str) -> None:
    """Print info message."""
    print(colored(f"ℹ {msg}", Colors.CYAN))


# ---------------------------------------------------------------------------
# CLI context
# ---------------------------------------------------------------------------


class CLIContext:
    """Shared context for CLI commands."""

    def __init__(
        self,
        settings_path: Optional[str],
        verbose: bool,
        quiet: bool,
        dry_run: bool,
        strict: bool = False,
        prompter: Optional[Prompter] = None,
        git: Optional[GitRunner] = None,
    ):
        self.settings_path = expand_path(settings_path) if settings_path else settings_path_from_env()
        self.verbose = verbose
        self.quiet = quiet
        self.dry_run = dry_run
        self.strict = strict
        self.prompter = prompter or Prompter()

        # Lazy-loaded
        self._settings: Optional[Settings] = None
        self._engine: Optional[BindingEngine] = None
        self._git = git

    @property
    def settings(self) -> Settings:
        """Load settings lazily."""
        if self._settings is None:
            self._settings = Settings.load(self.settings_path)
            if self.strict:
                self._settings = replace(self._settings, strict_keys=True)
        return self._settings

    @property
    def engine(self) -> BindingEngine:
        """Create the binding engine lazily."""
        if self._engine is None:
            settings = self.settings
            self._engine = BindingEngine(
                store=IdentityStore(settings.store_path),
                registry=HostAliasRegistry(settings.ssh_config_path, settings.canonical_host),
                keys=KeyDiscovery(settings.ssh_dir),
                git=self._git or GitRunner(),
                canonical_host=settings.canonical_host,
                remote=settings.remote,
                strict_keys=settings.strict_keys,
            )
        return self._engine

    def log(self, msg: str) -> None:
        """Log message if not quiet."""
        if not self.quiet:
            print(msg)

    def log_verbose(self, msg: str) -> None:
        """Log message if verbose."""
        if self.verbose:
            print(colored(f"  → {msg}", Colors.BLUE))

    def choose_registered(self, message: str) -> str:
        aliases = self.engine.store.aliases()
        if not aliases:
            raise NoChoicesError(
                f"No identities registered in {self.settings.store_path}; run 'goodgit add' first"
            )
        return self.prompter.select(message, aliases)

    def warn_if_no_keys(self) -> None:
        scan = self.engine.keys.scan(strict=self.settings.strict_keys)
        if scan.advisory is not None:
            scan.advisory.raise_if_fatal()
            print_warning(scan.advisory.message)


# ---------------------------------------------------------------------------
# Command implementations
# ---------------------------------------------------------------------------


def cmd_add(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Register a new identity and its SSH host alias.
    """
    engine = ctx.engine

    username = args.username or ctx.prompter.text("Enter your username")
    email = args.email or ctx.prompter.text("Enter your email")

    alias = args.key
    if not alias:
        scan = engine.keys.scan(strict=ctx.settings.strict_keys)
        if scan.advisory is not None:
            scan.advisory.raise_if_fatal()
            print_warning(scan.advisory.message)
            alias = ctx.prompter.text("Enter the SSH key alias (the part after 'id_')")
        else:
            alias = ctx.prompter.select("Select the SSH key", scan.aliases)

    ctx.log_verbose(f"Store:      {ctx.settings.store_path}")
    ctx.log_verbose(f"SSH config: {ctx.settings.ssh_config_path}")

    outcome = engine.register(alias, username, email, dry_run=ctx.dry_run)

    for advisory in outcome.advisories:
        if args.key:
            print_warning(advisory.message)
        else:
            ctx.log_verbose(advisory.message)

    if ctx.dry_run:
        ctx.log(colored("[DRY RUN] Preview of changes:", Colors.YELLOW))
        ctx.log(f"  Store:      {alias} -> {username} <{email}>")
        if outcome.ssh_config_changed:
            ctx.log(f"  SSH config: append block for {host_alias(alias, engine.canonical_host)}")
            for line in engine.registry.block_for(alias).splitlines():
                ctx.log(f"    {line}")
        else:
            ctx.log("  SSH config: block already present")
        return 0

    if not outcome.ssh_config_changed:
        ctx.log_verbose(f"SSH config already routes {host_alias(alias, engine.canonical_host)}")

    print_success(f"Added '{alias}' ({username} <{email}>)")
    return 0


def cmd_list(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Print all registered identities.
    """
    records = ctx.engine.store.load()

    if args.json:
        document = {alias: record.to_dict() for alias, record in records.items()}
        print(json.dumps(document, indent=2))
        return 0

    rows = [
        {"alias": alias, **record.to_dict()}
        for alias, record in records.items()
    ]
    print(format_table(["alias", "username", "email", "ssh_key"], rows))
    return 0


def cmd_remove(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Unregister an identity and strip its SSH host alias.
    """
    alias = args.alias or ctx.choose_registered("Select the user to remove")

    outcome = ctx.engine.unregister(alias, dry_run=ctx.dry_run)

    if ctx.dry_run:
        ctx.log(colored("[DRY RUN] Preview of changes:", Colors.YELLOW))
        ctx.log(f"  Store:      remove {alias}")
        if outcome.ssh_config_changed:
            ctx.log(f"  SSH config: remove block for {host_alias(alias, ctx.engine.canonical_host)}")
        else:
            ctx.log("  SSH config: no block to remove")
        return 0

    if not outcome.ssh_config_changed:
        ctx.log_verbose(f"No SSH config block found for '{alias}'")

    print_success(f"Removed '{alias}'")
    return 0


def cmd_clone(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Clone a repository with a registered identity.
    """
    engine = ctx.engine
    ctx.warn_if_no_keys()

    alias = args.alias or ctx.choose_registered("Select the user")

    if ctx.dry_run:
        result = engine.resolve_for_clone(alias, args.repo, args.out, args.options or "", dry_run=True)
        command = engine.clone_command(result.record, result.url, args.out, args.options or "")
        ctx.log(colored("[DRY RUN] Would run:", Colors.YELLOW))
        ctx.log("  " + " ".join(engine.git.command(*command)))
        return 0

    ctx.log(colored(f"Cloning the repository with user {alias}", Colors.BOLD))

    try:
        result = engine.resolve_for_clone(alias, args.repo, args.out, args.options or "")
    except SubprocessFailure as e:
        print_error(f"Clone failed: {e}")
        return e.exit_code

    if not result.url_rewritten:
        print_warning(
            f"'{engine.canonical_host}' does not appear in {args.repo}; "
            f"cloned without routing through {host_alias(alias, engine.canonical_host)}"
        )

    ctx.log_verbose(f"URL: {result.url}")
    print_success("Repository cloned successfully")
    return 0


def cmd_set(ctx: CLIContext, args: argparse.Namespace) -> int:
    """
    Bind the current repository to a registered identity.
    """
    if args.target != "user":
        print_error("Usage: goodgit set user [--as ALIAS]")
        return 2

    engine = ctx.engine
    ctx.warn_if_no_keys()

    alias = args.alias or ctx.choose_registered("Select the user")

    def ask_url() -> str:
        return ctx.prompter.text("Enter the repository URL")

    try:
        result = engine.bind_existing_repository(alias, ask_url, dry_run=ctx.dry_run)
    except SubprocessFailure as e:
        print_error(f"Failed to update the repository: {e}")
        return e.exit_code

    if result.previous_alias:
        print_warning(
            f"Remote was already routed through '{result.previous_alias}'; "
            f"{result.url} matches no SSH host alias. Point it back at "
            f"{engine.canonical_host} and run 'goodgit set user' again"
        )

    if ctx.dry_run:
        ctx.log(colored("[DRY RUN] Preview of changes:", Colors.YELLOW))
        if result.remote_action:
            ctx.log(f"  git remote {result.remote_action} {engine.remote} {result.url}")
        ctx.log(f"  git config --local user.name {result.record.username}")
        ctx.log(f"  git config --local user.email {result.record.email}")
        return 0

    if result.remote_action:
        ctx.log_verbose(f"Remote '{engine.remote}' -> {result.url} ({result.remote_action})")
    else:
        ctx.log_verbose(f"Remote '{engine.remote}' already routes through {alias}")

    print_success(f"Repository now uses '{alias}' ({result.record.username} <{result.record.email}>)")
    return 0


def cmd_help(ctx: Optional[CLIContext], args: argparse.Namespace) -> int:
    """
    Show help message.
    """
    help_text = f"""
{colored('goodgit', Colors.BOLD)} — switch Git/SSH identities per repository

{colored('USAGE:', Colors.CYAN)}
  goodgit [options] <command> [args]

{colored('DESCRIPTION:', Colors.CYAN)}
  goodgit keeps several Git identities (username, email, SSH key) on one
  machine. Each identity is named after its SSH key ~/.ssh/id_<alias> and
  gets a host alias <alias>.github.com in ~/.ssh/config, so repository
  URLs rewritten to that host authenticate with the right key.

{colored('COMMANDS:', Colors.CYAN)}
  add                 Register a new identity
  list, ls            List registered identities
  remove [ALIAS]      Unregister an identity
  clone REPO [OUT]    Clone a repository as an identity
  set user            Bind the current repository to an identity
  help                Show this help message

{colored('GLOBAL OPTIONS:', Colors.CYAN)}
  -c, --config PATH         Settings file
                            (default: ~/.config/goodgit/config.yml)
  -n, --dry-run             Show what would happen without changing anything
  -v, --verbose             Enable verbose output
  -q, --quiet               Suppress non-error output
  --strict                  Fail when no SSH keys are found
  --version                 Show version and exit
  -h, --help                Show this help message and exit

{colored('ENVIRONMENT:', Colors.CYAN)}
  GOODGIT_CONFIG            Settings file location
  GOODGIT_STORE             Identity store (default: ~/.goodgit.json)
  GOODGIT_SSH_DIR           SSH directory (default: ~/.ssh)
  GOODGIT_HOST              Canonical host (default: github.com)

{colored('EXAMPLES:', Colors.CYAN)}
  goodgit add
  goodgit add --username jane --email jane@example.com --key work
  goodgit ls
  goodgit clone git@github.com:org/repo.git --as work
  goodgit clone https://github.com/org/repo.git repo -o "--depth 1"
  goodgit set user --as personal
  goodgit remove work

{colored('VERSION:', Colors.CYAN)}
  {TOOL_VERSION}
"""
    print(help_text)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="goodgit",
        description="Switch Git/SSH identities per repository",
        add_help=False,
    )

    # Global options
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to settings file",
    )
    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="Show what would happen without changing anything",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when no SSH keys are found",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {TOOL_VERSION}",
    )
    parser.add_argument(
        "-h", "--help",
        action="store_true",
        help="Show help message",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # add command
    add_parser = subparsers.add_parser("add", help="Register a new identity")
    add_parser.add_argument("--username", help="Git user.name for this identity")
    add_parser.add_argument("--email", help="Git user.email for this identity")
    add_parser.add_argument("--key", help="SSH key alias (the part after 'id_')")

    # list command
    list_parser = subparsers.add_parser("list", aliases=["ls"], help="List registered identities")
    list_parser.add_argument("--json", action="store_true", help="Output the store as JSON")

    # remove command
    remove_parser = subparsers.add_parser("remove", help="Unregister an identity")
    remove_parser.add_argument("alias", nargs="?", help="Alias to remove")

    # clone command
    clone_parser = subparsers.add_parser("clone", help="Clone a repository as an identity")
    clone_parser.add_argument("repo", help="Repository URL")
    clone_parser.add_argument("out", nargs="?", help="Destination directory")
    clone_parser.add_argument("-o", "--options", default="", help="Extra git clone options")
    clone_parser.add_argument("--as", dest="alias", help="Identity alias to clone with")

    # set command
    set_parser = subparsers.add_parser("set", help="Bind the current repository")
    set_subparsers = set_parser.add_subparsers(dest="target")
    user_parser = set_subparsers.add_parser("user", help="Set the identity for this repository")
    user_parser.add_argument("--as", dest="alias", help="Identity alias to use")

    # help command
    subparsers.add_parser("help", help="Show help message")

    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(
    argv: Optional[Sequence[str]] = None,
    prompter: Optional[Prompter] = None,
    git: Optional[GitRunner] = None,
) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Show help if requested or no command
    if args.help or not args.command:
        return cmd_help(None, args)

    # Build context
    ctx = CLIContext(
        settings_path=args.config,
        verbose=args.verbose,
        quiet=args.quiet,
        dry_run=args.dry_run,
        strict=args.strict,
        prompter=prompter,
        git=git,
    )

    # Dispatch to command
    commands = {
        "add": cmd_add,
        "list": cmd_list,
        "ls": cmd_list,
        "remove": cmd_remove,
        "clone": cmd_clone,
        "set": cmd_set,
        "help": cmd_help,
    }

    cmd_func = commands.get(args.command)
    if not cmd_func:
        print_error(f"Unknown command: {args.command}")
        return 1

    try:
        return cmd_func(ctx, args)
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 130
    except GoodgitError as e:
        print_error(str(e))
        if args.verbose:
            import traceback
            traceback.print_exc()
        return e.exit_code
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
