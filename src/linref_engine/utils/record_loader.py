"""
Record loader utilities.

Loads RFI / daily-work records and jurisdiction tables from CSV or Excel
exports of the surrounding application.
"""

import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from ..jurisdiction.models import Jurisdiction

logger = logging.getLogger(__name__)


class RecordLoader:
    """Loads tabular records from CSV/Excel files."""

    SUPPORTED_EXTENSIONS = {'.csv', '.xlsx', '.xls'}

    # {standard_name: [possible_variants]}
    COLUMN_MAPPING = {
        'number': ['Number', 'number', 'RFI Number', 'RFI No', 'rfi_number'],
        'location': ['Location', 'location', 'Chainage', 'chainage', 'RFI Location'],
        'description': ['Description', 'description'],
        'date': ['Date', 'date', 'RFI Date'],
        'id': ['ID', 'Id', 'id'],
        'start_chainage': ['Start Chainage', 'start_chainage', 'From'],
        'end_chainage': ['End Chainage', 'end_chainage', 'To'],
        'incharge': ['Incharge', 'incharge', 'In Charge', 'In-Charge'],
    }

    def __init__(self, normalize_columns: bool = True):
        """Initialize record loader.

        Args:
            normalize_columns: Whether to normalize column names (default: True)
        """
        self.normalize_columns = normalize_columns

    def load(self, path: Union[str, Path]) -> pd.DataFrame:
        """Load records from a single file.

        Args:
            path: Path to a CSV or Excel file

        Returns:
            DataFrame with record data

        Raises:
            FileNotFoundError: If path doesn't exist
            ValueError: If file format not supported
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Record file not found: {path}")

        ext = path.suffix.lower()
        if ext == '.csv':
            # Chainages like "035" must stay strings
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        elif ext in {'.xlsx', '.xls'}:
            df = pd.read_excel(path, dtype=str, keep_default_na=False)
        else:
            raise ValueError(f"Unsupported file format: {ext}")

        logger.info(f"Loaded {len(df)} records from {path.name}")

        if self.normalize_columns:
            df = self._normalize_columns(df)

        return df

    def _normalize_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        rename_map = {}
        for standard_name, variants in self.COLUMN_MAPPING.items():
            for variant in variants:
                if variant in df.columns:
                    rename_map[variant] = standard_name
                    break

        if rename_map:
            df = df.rename(columns=rename_map)
            logger.debug(f"Normalized columns: {rename_map}")

        return df

    def load_jurisdictions(self, path: Union[str, Path]) -> List[Jurisdiction]:
        """Load jurisdiction records in file order.

        Rows without a start or end chainage are skipped.

        Raises:
            ValueError: If the chainage columns are missing
        """
        df = self.load(path)

        missing = {'start_chainage', 'end_chainage'} - set(df.columns)
        if missing:
            raise ValueError(f"Jurisdiction file missing columns: {sorted(missing)}")

        jurisdictions = []
        for _, row in df.iterrows():
            if not row['start_chainage'] or not row['end_chainage']:
                logger.warning(f"Skipping jurisdiction row without chainage range: {dict(row)}")
                continue
            jurisdictions.append(Jurisdiction.from_row(row))

        logger.info(f"Loaded {len(jurisdictions)} jurisdictions")
        return jurisdictions
