import pandas as pd

ITEM_COLUMNS = [
    'source_id', 'institution', 'status', 'kind', 'date', 'amount', 'currency',
    'shares', 'fee', 'gross', 'ticker', 'security_name', 'note', 'warnings',
    'reason', 'message', 'block_text', 'start_line',
]


class TransactionConsolidator:
    @staticmethod
    def to_frame(items) -> pd.DataFrame:
        """One row per item; transaction and failure columns side by side."""
        rows = []
        for item in items:
            row = item.to_dict()
            if 'warnings' in row:
                row['warnings'] = "; ".join(w['message'] for w in row['warnings'])
            rows.append(row)

        df = pd.DataFrame(rows, columns=ITEM_COLUMNS)
        if not df.empty:
            df['date'] = pd.to_datetime(df['date']).dt.date
            df['amount'] = df['amount'].astype('Int64')
        return df

    @staticmethod
    def consolidate(results) -> pd.DataFrame:
        """
        Combine the items of many documents.
        Documents that were rejected contribute no rows.
        """
        frames = [TransactionConsolidator.to_frame(r.items) for r in results if r.ok and r.items]
        if not frames:
            return pd.DataFrame(columns=ITEM_COLUMNS)

        combined_df = pd.concat(frames, ignore_index=True)

        # The same file processed twice yields identical rows; keep the first
        deduplicated_df = combined_df.drop_duplicates(keep='first')
        return deduplicated_df.reset_index(drop=True)
