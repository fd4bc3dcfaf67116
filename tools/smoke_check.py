import sys
from pathlib import Path

# Ensure project src is on sys.path
repo_root = Path(__file__).resolve().parents[1]
src_dir = repo_root / 'src'
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from Tuitiondesk import paths  # noqa: E402
from Tuitiondesk.data.schema import create_tables  # noqa: E402

if __name__ == '__main__':
    print(f'Running smoke check: create_tables() on {paths.DB_PATH}...')
    create_tables()
    print('Smoke check completed.')
