"""Move students from the single ``teacher_id`` field to ``teacher_ids``.

Usage: python tools/migrate_teachers.py [--db PATH]
"""
import argparse
import logging
import os
import sys
from pathlib import Path

# Ensure project src is on sys.path
repo_root = Path(__file__).resolve().parents[1]
src_dir = repo_root / 'src'
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--db', help='database file (defaults to TUITIONDESK_DB_PATH or the app data dir)')
    args = parser.parse_args(argv)

    if args.db:
        os.environ['TUITIONDESK_DB_PATH'] = args.db

    from dotenv import load_dotenv
    load_dotenv()

    from Tuitiondesk import paths
    from Tuitiondesk.data.migrations import migrate_student_teacher_ids

    paths.reload_from_env()
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    print(f'Starting teacher migration on {paths.DB_PATH}...')
    updated = migrate_student_teacher_ids()
    print(f'Migration complete! Updated {updated} students.')
    return 0


if __name__ == '__main__':
    sys.exit(main())
