"""Tests for the registered packages database"""

import plistlib

import pytest

from regpkg.core.errors import MalformedRecord, RegistryUnavailable
from regpkg.core.registry import PackageRegistry, PkgState, check_record


PACKAGES = [
    {'pkgname': 'glib', 'version': '2.26.1_1', 'state': 'installed',
     'automatic-install': True, 'requiredby': ['gtk+-2.22.1_1']},
    {'pkgname': 'gtk+', 'version': '2.22.1_1', 'state': 'installed',
     'automatic-install': False},
]

XML_HEADER = (
    '<?xml version="1.0" encoding="UTF-8"?>\n'
    '<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" '
    '"http://www.apple.com/DTDs/PropertyList-1.0.dtd">\n'
)


class TestLoading:
    """Tests for reading the registry file."""

    @pytest.mark.parametrize('compression', [None, 'gzip', 'xz', 'bzip2', 'zstd'])
    def test_load_compressed(self, write_registry, compression):
        """Test loading plain and compressed registry files."""
        registry = write_registry(PACKAGES, compression=compression)
        packages = registry.list_packages()
        assert [p['pkgname'] for p in packages] == ['glib', 'gtk+']
        assert packages[0]['requiredby'] == ['gtk+-2.22.1_1']

    def test_binary_plist(self, tmp_path):
        """Test loading a binary property list."""
        path = tmp_path / 'regpkgdb.plist'
        path.write_bytes(plistlib.dumps({'packages': PACKAGES}, fmt=plistlib.FMT_BINARY))
        assert len(PackageRegistry(path).list_packages()) == 2

    def test_missing_file(self, tmp_path):
        """Test that a missing file makes the registry unavailable."""
        registry = PackageRegistry(tmp_path / 'nope.plist')
        with pytest.raises(RegistryUnavailable) as exc:
            registry.acquire_snapshot()
        assert exc.value.path == tmp_path / 'nope.plist'
        assert registry.active_snapshots == 0

    def test_garbage_file(self, tmp_path):
        """Test that a file that is not a plist makes the registry unavailable."""
        path = tmp_path / 'regpkgdb.plist'
        path.write_text('this is not a plist')
        with pytest.raises(RegistryUnavailable):
            PackageRegistry(path).acquire_snapshot()

    def test_bad_date_value(self, tmp_path):
        """Test that a well-formed plist with an unparsable date is rejected cleanly."""
        path = tmp_path / 'regpkgdb.plist'
        path.write_text(
            XML_HEADER +
            '<plist version="1.0"><dict><key>packages</key><array>'
            '<dict><key>pkgname</key><string>glib</string>'
            '<key>install-date</key><date>garbage</date></dict>'
            '</array></dict></plist>\n'
        )
        registry = PackageRegistry(path)
        with pytest.raises(RegistryUnavailable) as exc:
            registry.acquire_snapshot()
        assert 'invalid property list' in str(exc.value)
        assert registry.active_snapshots == 0

    def test_corrupt_gzip(self, tmp_path):
        """Test that a truncated gzip file makes the registry unavailable."""
        path = tmp_path / 'regpkgdb.plist'
        path.write_bytes(b'\x1f\x8b' + b'\x00' * 16)
        with pytest.raises(RegistryUnavailable):
            PackageRegistry(path).acquire_snapshot()

    def test_root_not_a_dict(self, tmp_path):
        """Test that a plist whose root is an array is rejected."""
        path = tmp_path / 'regpkgdb.plist'
        path.write_bytes(plistlib.dumps(['glib']))
        with pytest.raises(RegistryUnavailable):
            PackageRegistry(path).acquire_snapshot()

    def test_missing_packages_array(self, tmp_path):
        """Test that a root without a packages array is rejected."""
        path = tmp_path / 'regpkgdb.plist'
        path.write_bytes(plistlib.dumps({'pkgs': []}))
        with pytest.raises(RegistryUnavailable):
            PackageRegistry(path).acquire_snapshot()

    def test_default_path_uses_rootdir(self, tmp_path, monkeypatch):
        """Test that the default path is placed below the root directory."""
        monkeypatch.setattr('regpkg.core.config._is_system_install', lambda: True)
        registry = PackageRegistry(rootdir=tmp_path)
        assert registry.path == tmp_path / 'var/db/regpkg/regpkgdb.plist'


class TestSnapshots:
    """Tests for snapshot acquisition and release."""

    def test_snapshot_order(self, write_registry):
        """Test that snapshots keep registration order, forward and reversed."""
        registry = write_registry(PACKAGES)
        with registry.snapshot() as snap:
            assert len(snap) == 2
            assert [p['pkgname'] for p in snap] == ['glib', 'gtk+']
            assert [p['pkgname'] for p in reversed(snap)] == ['gtk+', 'glib']

    def test_refcount(self, write_registry):
        """Test that concurrent snapshots share one load."""
        registry = write_registry(PACKAGES)
        first = registry.acquire_snapshot()
        second = registry.acquire_snapshot()
        assert registry.active_snapshots == 2
        assert first.packages is second.packages

        registry.release_snapshot(first)
        assert registry.active_snapshots == 1
        registry.release_snapshot(second)
        assert registry.active_snapshots == 0

    def test_reload_after_last_release(self, write_registry, tmp_path):
        """Test that the file is read again once every snapshot is released."""
        registry = write_registry(PACKAGES)
        with registry.snapshot() as snap:
            assert len(snap) == 2

        (tmp_path / 'regpkgdb.plist').write_bytes(plistlib.dumps({'packages': PACKAGES[:1]}))
        with registry.snapshot() as snap:
            assert len(snap) == 1

    def test_double_release(self, write_registry):
        """Test that a snapshot cannot be released twice."""
        registry = write_registry(PACKAGES)
        snap = registry.acquire_snapshot()
        registry.release_snapshot(snap)
        with pytest.raises(ValueError):
            registry.release_snapshot(snap)
        assert registry.active_snapshots == 0

    def test_release_foreign_snapshot(self, write_registry):
        """Test that a snapshot cannot be released to another registry."""
        registry = write_registry(PACKAGES)
        other = write_registry(PACKAGES, name='other.plist')
        snap = other.acquire_snapshot()
        with pytest.raises(ValueError):
            registry.release_snapshot(snap)
        other.release_snapshot(snap)

    def test_released_on_exception(self, write_registry):
        """Test that the context manager releases on error."""
        registry = write_registry(PACKAGES)
        with pytest.raises(RuntimeError):
            with registry.snapshot():
                raise RuntimeError("boom")
        assert registry.active_snapshots == 0


class TestRecordFields:
    """Tests for state and automatic-install resolution."""

    def test_known_states(self):
        """Test state strings map to PkgState members."""
        registry = PackageRegistry('/nonexistent')
        assert registry.get_state({'state': 'installed'}) == PkgState.INSTALLED
        assert registry.get_state({'state': 'config-files'}) == PkgState.CONFIG_FILES
        assert registry.get_state({'state': 'not-installed'}) == PkgState.NOT_INSTALLED

    def test_missing_state(self):
        """Test that a missing state names the package."""
        registry = PackageRegistry('/nonexistent')
        with pytest.raises(MalformedRecord) as exc:
            registry.get_state({'pkgname': 'glib'})
        assert exc.value.pkgname == 'glib'

    def test_unknown_state(self):
        """Test that an unknown state is malformed."""
        registry = PackageRegistry('/nonexistent')
        with pytest.raises(MalformedRecord):
            registry.get_state({'pkgname': 'glib', 'state': 'half-configured'})

    def test_is_automatic(self):
        """Test boolean and absent automatic-install values."""
        registry = PackageRegistry('/nonexistent')
        assert registry.is_automatic({'automatic-install': True}) is True
        assert registry.is_automatic({'automatic-install': False}) is False
        assert registry.is_automatic({}) is False

    @pytest.mark.parametrize('value', ['false', 'true', 1, 0])
    def test_non_bool_automatic(self, value):
        """Test that a non-boolean automatic-install is malformed."""
        registry = PackageRegistry('/nonexistent')
        with pytest.raises(MalformedRecord) as exc:
            registry.is_automatic({'pkgname': 'glib', 'automatic-install': value})
        assert exc.value.pkgname == 'glib'

    def test_check_record(self):
        """Test that only dictionaries pass as package records."""
        record = {'pkgname': 'glib'}
        assert check_record(record) is record
        with pytest.raises(MalformedRecord):
            check_record('glib-2.26.1_1')


class TestQueries:
    """Tests for package lookups."""

    def test_find_package(self, write_registry):
        """Test finding a registered package by name."""
        registry = write_registry(PACKAGES)
        pkg = registry.find_package('gtk+')
        assert pkg['version'] == '2.22.1_1'
        assert registry.active_snapshots == 0

    def test_find_unknown_package(self, write_registry):
        """Test that an unknown name gives None."""
        registry = write_registry(PACKAGES)
        assert registry.find_package('firefox') is None
        assert registry.active_snapshots == 0

    def test_find_package_non_dict_entry(self, write_registry):
        """Test that a non-dictionary entry is malformed during lookup."""
        registry = write_registry(['glib-2.26.1_1'])
        with pytest.raises(MalformedRecord):
            registry.find_package('glib')
        assert registry.active_snapshots == 0

    def test_list_packages_non_dict_entry(self, write_registry):
        """Test that a non-dictionary entry is malformed when listing."""
        registry = write_registry(PACKAGES + ['glib-2.26.1_1'])
        with pytest.raises(MalformedRecord):
            registry.list_packages()
        assert registry.active_snapshots == 0
