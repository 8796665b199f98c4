"""
goodgit test fixtures

Every test gets its own fake home directory, SSH directory, identity
store and a git runner that records commands instead of running them.

Run with: pytest tests/ -v
"""

import pytest

from goodgit.binding import BindingEngine
from goodgit.errors import SubprocessFailure
from goodgit.git import GitResult, GitRunner
from goodgit.keys import KeyDiscovery
from goodgit.prompts import Prompter
from goodgit.ssh_config import HostAliasRegistry
from goodgit.store import IdentityStore


class FakeGit(GitRunner):
    """Records git argument lists; answers from a table of canned results."""

    def __init__(self, responses=None):
        super().__init__()
        self.calls = []
        self.responses = dict(responses or {})

    def run_nothrow(self, *args, passthrough=False):
        self.calls.append(list(args))
        return self.responses.get(tuple(args), GitResult(returncode=0))

    def run(self, *args, passthrough=False):
        result = self.run_nothrow(*args, passthrough=passthrough)
        if not result.ok:
            raise SubprocessFailure(self.command(*args), result.returncode, result.stderr)
        return result.stdout


class ScriptedPrompter(Prompter):
    """Prompter fed from a list of answers; collects everything it prints."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.asked = []
        self.printed = []
        super().__init__(input_func=self._next, output_func=self.printed.append)

    def _next(self, message):
        self.asked.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        return self.answers.pop(0)


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Fake home with an empty ~/.ssh; GOODGIT_* variables cleared."""
    home_dir = tmp_path / "home"
    (home_dir / ".ssh").mkdir(parents=True)
    monkeypatch.setenv("HOME", str(home_dir))
    for name in ("GOODGIT_STORE", "GOODGIT_SSH_DIR", "GOODGIT_HOST", "GOODGIT_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("pathlib.Path.home", lambda: home_dir)
    return home_dir


@pytest.fixture
def ssh_dir(home):
    return home / ".ssh"


@pytest.fixture
def add_key(ssh_dir):
    """Create id_<alias> and id_<alias>.pub in the fake SSH directory."""

    def _add(alias):
        (ssh_dir / f"id_{alias}").write_text("PRIVATE\n")
        (ssh_dir / f"id_{alias}.pub").write_text("ssh-ed25519 AAAA test\n")

    return _add


@pytest.fixture
def store(home):
    return IdentityStore(home / ".goodgit.json")


@pytest.fixture
def registry(ssh_dir):
    return HostAliasRegistry(ssh_dir / "config")


@pytest.fixture
def git():
    return FakeGit()


@pytest.fixture
def engine(store, registry, ssh_dir, git):
    return BindingEngine(store=store, registry=registry, keys=KeyDiscovery(ssh_dir), git=git)


@pytest.fixture
def scripted():
    """Build a ScriptedPrompter from a list of answers."""
    return ScriptedPrompter
