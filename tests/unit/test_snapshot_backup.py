"""
Unit tests for snapshot backups.
"""
import gzip
import json
import os
from datetime import datetime, timedelta

import pytest

from vret_wash.services.snapshot_backup import SnapshotBackup


@pytest.fixture
def snapshot(tmp_path):
    path = tmp_path / 'vret-wash.json'
    path.write_text(json.dumps({'users': [], 'washEntries': [], 'weeklyActions': []}), encoding='utf-8')
    return path


@pytest.fixture
def backup(snapshot, tmp_path):
    return SnapshotBackup(str(snapshot), str(tmp_path / 'backups'), retention_days=7)


class TestSnapshotBackup:

    @pytest.mark.unit
    def test_backup_is_compressed_copy(self, backup, snapshot):
        path = backup.backup(now=datetime(2026, 1, 5, 6, 30, 0))

        assert path.name == 'vret-wash_2026-01-05-063000.json.gz'
        with gzip.open(path, 'rt', encoding='utf-8') as f:
            assert f.read() == snapshot.read_text(encoding='utf-8')
        assert backup.verify(path) is True

    @pytest.mark.unit
    def test_missing_snapshot(self, tmp_path):
        backup = SnapshotBackup(str(tmp_path / 'absent.json'), str(tmp_path / 'backups'))

        with pytest.raises(FileNotFoundError):
            backup.backup()
        assert backup.run() is False

    @pytest.mark.unit
    def test_verify_rejects_non_snapshot(self, backup):
        path = backup.backup_dir / 'vret-wash_bad.json.gz'
        with gzip.open(path, 'wt', encoding='utf-8') as f:
            f.write('[1, 2, 3]')

        assert backup.verify(path) is False

    @pytest.mark.unit
    def test_verify_rejects_corrupt_archive(self, backup):
        path = backup.backup_dir / 'vret-wash_corrupt.json.gz'
        path.write_bytes(b'not gzip')

        assert backup.verify(path) is False

    @pytest.mark.unit
    def test_cleanup_removes_only_expired(self, backup):
        old = backup.backup(now=datetime(2025, 12, 1))
        recent = backup.backup(now=datetime(2026, 1, 5))
        ten_days_ago = (datetime.now() - timedelta(days=10)).timestamp()
        os.utime(old, (ten_days_ago, ten_days_ago))

        assert backup.cleanup_old_backups() == 1
        assert not old.exists()
        assert recent.exists()

    @pytest.mark.unit
    def test_run(self, backup):
        assert backup.run() is True
        assert len(list(backup.backup_dir.glob('vret-wash_*.json.gz'))) == 1
