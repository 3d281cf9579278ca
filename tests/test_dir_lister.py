from __future__ import annotations

import os

import pytest

from pathkit.config import settings
from pathkit.errors import StatError, SymlinkReadError
from pathkit.services import dir_lister
from pathkit.services.filesystem import DirEntry, MemoryFileSystem, OsFileSystem


def _entries() -> list[DirEntry]:
    return [
        DirEntry('.git', is_dir=True),
        DirEntry('src', is_dir=True),
        DirEntry('readme.txt', is_dir=False),
        DirEntry('.env', is_dir=False),
    ]


def test_list_directory_names_skips_hidden_entries():
    assert dir_lister.list_directory_names(_entries()) == ['src']


def test_list_file_names_skips_hidden_entries():
    assert dir_lister.list_file_names(_entries()) == ['readme.txt']


def test_listing_preserves_input_order():
    entries = [DirEntry('zeta', True), DirEntry('b.txt', False), DirEntry('alpha', True), DirEntry('a.txt', False)]

    assert dir_lister.list_directory_names(entries) == ['zeta', 'alpha']
    assert dir_lister.list_file_names(entries) == ['b.txt', 'a.txt']


def test_listing_uses_configured_hidden_prefix(monkeypatch):
    monkeypatch.setattr(settings, 'hidden_prefix', '_')
    entries = [DirEntry('_build', True), DirEntry('.github', True), DirEntry('_draft.md', False)]

    assert dir_lister.list_directory_names(entries) == ['.github']
    assert dir_lister.list_file_names(entries) == []
    assert dir_lister.list_file_names(entries, hidden_prefix='.') == ['_draft.md']


def test_read_directory_and_file_names_from_memory_fs():
    fs = MemoryFileSystem()
    fs.add_dir('/site/content')
    fs.add_dir('/site/.cache')
    fs.add_file('/site/config.toml')
    fs.add_file('/site/.DS_Store')

    assert dir_lister.read_directory_names(fs, '/site') == ['content']
    assert dir_lister.read_file_names(fs, '/site') == ['config.toml']


def test_resolve_real_path_returns_plain_path_unchanged():
    fs = MemoryFileSystem()
    fs.add_file('/site/index.md')

    assert dir_lister.resolve_real_path(fs, '/site/index.md') == '/site/index.md'


def test_resolve_real_path_uses_stat_for_non_os_filesystem():
    fs = MemoryFileSystem()
    fs.add_file('/data/real.md')
    fs.add_symlink('/data/link.md', 'real.md')

    assert dir_lister.resolve_real_path(fs, '/data/link.md') == '/data/real.md'
    assert [c['op'] for c in fs.calls] == ['stat', 'eval_symlinks', 'stat']


def test_resolve_real_path_follows_chained_links():
    fs = MemoryFileSystem()
    fs.add_dir('/themes/base')
    fs.add_symlink('/site/theme', '/site/current')
    fs.add_symlink('/site/current', '../themes/base')

    info, real = dir_lister.real_file_info(fs, '/site/theme')

    assert real == '/themes/base'
    assert info.is_dir is True
    assert info.is_symlink is False


def test_resolve_real_path_wraps_stat_failure():
    fs = MemoryFileSystem()

    with pytest.raises(StatError) as exc:
        dir_lister.resolve_real_path(fs, '/missing')

    assert exc.value.path == '/missing'
    assert "Cannot stat '/missing'" in str(exc.value)
    assert isinstance(exc.value.__cause__, FileNotFoundError)


def test_resolve_real_path_wraps_dangling_link():
    fs = MemoryFileSystem()
    fs.add_symlink('/site/broken', '/nowhere')

    with pytest.raises(SymlinkReadError) as exc:
        dir_lister.resolve_real_path(fs, '/site/broken')

    assert exc.value.path == '/site/broken'
    assert str(exc.value).startswith("Cannot read symbolic link '/site/broken', error was:")


def test_resolve_real_path_wraps_failed_target_stat():
    class _FlakyFs(MemoryFileSystem):
        def stat(self, path):
            if path == '/data/real.md':
                raise PermissionError('denied')
            return super().stat(path)

    fs = _FlakyFs()
    fs.add_file('/data/real.md')
    fs.add_symlink('/data/link.md', 'real.md')

    with pytest.raises(StatError) as exc:
        dir_lister.resolve_real_path(fs, '/data/link.md')

    assert exc.value.path == '/data/real.md'
    assert exc.value.cause == 'denied'


@pytest.mark.skipif(not hasattr(os, 'symlink'), reason='symlinks unsupported')
def test_resolve_real_path_on_os_uses_lstat(tmp_path):
    target = tmp_path / 'real'
    target.mkdir()
    link = tmp_path / 'link'
    link.symlink_to(target)

    resolved = dir_lister.resolve_real_path(OsFileSystem(), str(link))

    assert resolved == os.path.realpath(target)


@pytest.mark.skipif(not hasattr(os, 'symlink'), reason='symlinks unsupported')
def test_resolve_real_path_on_os_reports_dangling_link(tmp_path):
    link = tmp_path / 'dangling'
    link.symlink_to(tmp_path / 'gone')

    with pytest.raises(SymlinkReadError):
        dir_lister.resolve_real_path(OsFileSystem(), str(link))


def test_resolve_real_path_on_os_reports_missing_path(tmp_path):
    with pytest.raises(StatError):
        dir_lister.resolve_real_path(OsFileSystem(), str(tmp_path / 'missing'))


def test_listing_with_empty_hidden_prefix_hides_nothing(monkeypatch):
    monkeypatch.setattr(settings, 'hidden_prefix', '.')

    assert dir_lister.list_directory_names(_entries(), hidden_prefix='') == ['.git', 'src']
    assert dir_lister.list_file_names(_entries(), hidden_prefix='') == ['readme.txt', '.env']


@pytest.mark.skipif(not hasattr(os, 'symlink'), reason='symlinks unsupported')
def test_read_directory_names_on_os_does_not_follow_links(tmp_path):
    (tmp_path / 'real').mkdir()
    (tmp_path / 'link').symlink_to(tmp_path / 'real')

    fs = OsFileSystem()

    assert dir_lister.read_directory_names(fs, str(tmp_path)) == ['real']
    assert dir_lister.read_file_names(fs, str(tmp_path)) == ['link']
