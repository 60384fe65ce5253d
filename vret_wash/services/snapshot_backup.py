"""
Snapshot backups
Copies the JSON snapshot to a gzip archive, checks it parses, and prunes
archives past the retention period.
"""
import gzip
import json
import logging
import shutil
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class SnapshotBackup:
    """Handles snapshot backups with compression and retention"""

    def __init__(self, data_file: str, backup_dir: str, retention_days: int = 7):
        """
        Args:
            data_file: Path to the JSON snapshot
            backup_dir: Directory to store backups
            retention_days: Number of days to retain backups
        """
        self.data_file = Path(data_file)
        self.backup_dir = Path(backup_dir)
        self.retention_days = retention_days
        self.backup_dir.mkdir(parents=True, exist_ok=True)

    def backup(self, now: Optional[datetime] = None) -> Path:
        """
        Write a compressed copy of the snapshot.

        Raises:
            FileNotFoundError: The snapshot does not exist
        """
        if not self.data_file.exists():
            raise FileNotFoundError(f"Snapshot not found: {self.data_file}")

        timestamp = (now or datetime.now()).strftime('%Y-%m-%d-%H%M%S')
        backup_path = self.backup_dir / f"vret-wash_{timestamp}.json.gz"

        logger.info(f"Backing up snapshot {self.data_file} to {backup_path}")
        with open(self.data_file, 'rb') as f_in:
            with gzip.open(backup_path, 'wb', compresslevel=9) as f_out:
                shutil.copyfileobj(f_in, f_out)

        return backup_path

    def verify(self, backup_path: Path) -> bool:
        """True if the archive decompresses to a JSON object"""
        try:
            with gzip.open(backup_path, 'rt', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Backup verification failed for {backup_path}: {e}")
            return False

        if not isinstance(document, dict):
            logger.error(f"Backup {backup_path} does not hold a snapshot object")
            return False
        return True

    def cleanup_old_backups(self, now: Optional[datetime] = None) -> int:
        """Remove archives older than the retention period; returns how many"""
        cutoff = (now or datetime.now()) - timedelta(days=self.retention_days)
        removed = 0

        for backup_file in self.backup_dir.glob('vret-wash_*.json.gz'):
            if datetime.fromtimestamp(backup_file.stat().st_mtime) < cutoff:
                logger.info(f"Removing old backup: {backup_file.name}")
                backup_file.unlink()
                removed += 1

        return removed

    def run(self) -> bool:
        """
        Back up, verify and prune.

        Returns:
            True if a verified backup was written
        """
        try:
            backup_path = self.backup()
        except OSError as e:
            logger.error(f"Backup failed: {e}")
            return False

        if not self.verify(backup_path):
            return False

        removed = self.cleanup_old_backups()
        logger.info(f"Backup completed: {backup_path} ({removed} old backup(s) removed)")
        return True
