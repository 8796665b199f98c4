"""Tests for goodgit.keys — private key discovery."""

import pytest

from goodgit.errors import DirectoryNotFoundError, NoKeysAvailableError
from goodgit.keys import KeyDiscovery, alias_from_filename


@pytest.mark.parametrize(
    "name, expected",
    [
        ("id_work", "work"),
        ("id_ed25519", "ed25519"),
        ("id_work.pub", None),
        ("known_hosts", None),
        ("config", None),
        ("id_", None),
        ("my_id_work", None),
    ],
)
def test_alias_from_filename(name, expected):
    assert alias_from_filename(name) == expected


class TestKeyDiscovery:

    def test_lists_private_keys_only(self, ssh_dir, add_key):
        add_key("work")
        add_key("personal")
        (ssh_dir / "known_hosts").write_text("")
        (ssh_dir / "config").write_text("")

        aliases = KeyDiscovery(ssh_dir).list_available_aliases()
        assert sorted(aliases) == ["personal", "work"]

    def test_public_key_without_private_key_ignored(self, ssh_dir):
        (ssh_dir / "id_orphan.pub").write_text("ssh-rsa AAAA\n")
        assert KeyDiscovery(ssh_dir).list_available_aliases() == []

    def test_directories_ignored(self, ssh_dir):
        (ssh_dir / "id_folder").mkdir()
        assert KeyDiscovery(ssh_dir).list_available_aliases() == []

    def test_iter_aliases_is_lazy(self, tmp_path):
        # Nothing is checked until the generator is consumed
        aliases = KeyDiscovery(tmp_path / "missing").iter_aliases()
        with pytest.raises(DirectoryNotFoundError):
            next(aliases)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DirectoryNotFoundError):
            KeyDiscovery(tmp_path / "missing").list_available_aliases()

    def test_scan_empty_is_advisory(self, ssh_dir):
        scan = KeyDiscovery(ssh_dir).scan()
        assert scan.aliases == []
        assert isinstance(scan.advisory.error, NoKeysAvailableError)
        assert scan.advisory.fatal is False
        scan.advisory.raise_if_fatal()

    def test_scan_empty_strict_is_fatal(self, ssh_dir):
        scan = KeyDiscovery(ssh_dir).scan(strict=True)
        with pytest.raises(NoKeysAvailableError):
            scan.advisory.raise_if_fatal()

    def test_scan_with_keys_has_no_advisory(self, ssh_dir, add_key):
        add_key("work")
        scan = KeyDiscovery(ssh_dir).scan(strict=True)
        assert "work" in scan
        assert scan.advisory is None
