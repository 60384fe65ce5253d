#!/usr/bin/env python3
"""
VRET WASH board - Snapshot Backup Script
Backs up the JSON snapshot with compression and retention management

Usage:
    DATA_FILE=database/vret-wash.json BACKUP_DIR=backups python scripts/backup_snapshot.py
"""
import logging
import os
import sys
from pathlib import Path

from decouple import config

from vret_wash.services.snapshot_backup import SnapshotBackup


def main():
    """Main entry point"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    project_root = Path(__file__).resolve().parent.parent
    data_file = config('DATA_FILE', default='database/vret-wash.json')
    if not os.path.isabs(data_file):
        data_file = str(project_root / data_file)

    backup = SnapshotBackup(
        data_file,
        config('BACKUP_DIR', default=str(project_root / 'backups')),
        retention_days=config('BACKUP_RETENTION_DAYS', default=7, cast=int),
    )
    sys.exit(0 if backup.run() else 1)


if __name__ == '__main__':
    main()
