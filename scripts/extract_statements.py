import sys
import os
import glob

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from statement_import.common.logging_config import setup_logging
from statement_import.common.settings import EngineSettings
from statement_import.parsing.facade import ParserFacade


def main(paths):
    settings = EngineSettings.from_env()
    setup_logging(settings.log_level, settings.log_file)

    files = []
    for p in paths:
        if os.path.isdir(p):
            files.extend(sorted(glob.glob(os.path.join(p, "*.pdf")) + glob.glob(os.path.join(p, "*.txt"))))
        else:
            files.append(p)

    if not files:
        print("Usage: extract_statements.py <statement.pdf|statement.txt|directory> ...")
        return 1

    facade = ParserFacade(settings=settings)
    print("=" * 60)
    print(f"EXTRACTING {len(files)} STATEMENT(S)")
    print("=" * 60)

    for f in files:
        df, meta = facade.parse(f)
        if meta.get('error'):
            print(f"✗ {os.path.basename(f)}: {meta['error'].splitlines()[0]}")
            continue

        ok = (df['status'] == 'ok').sum() if not df.empty else 0
        print(f"✓ {os.path.basename(f)} [{meta['institution']}]: {ok} transactions, {meta['failed_blocks']} failed blocks")
        if not df.empty:
            print(df[['kind', 'date', 'amount', 'currency', 'ticker', 'note']].to_string(index=False))

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
