"""
Vocabulary Service - read-only access to the input CSV.

The input has no header. Column 0 is the Mandarin text, column 1 an optional
definition override; any further columns are ignored.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pandas as pd
from loguru import logger

from ..exceptions import MandarinDeckError
from ..utils.parsing import TextParser

COLUMNS = ["hanzi", "definition"]


def _clean(value) -> str:
    """Missing cells of short rows come back as NaN or None."""
    return TextParser.clean_field(value) if isinstance(value, str) else ""


@dataclass(frozen=True)
class VocabularyRow:
    index: int
    hanzi: str
    definition: Optional[str] = None


class VocabularyService:
    """
    Loads vocabulary rows from a CSV file.

    Usage:
        service = VocabularyService.load_from_csv("input.csv")
        for row in service.rows():
            ...
    """

    def __init__(self, csv_path: str) -> None:
        self.csv_path = Path(csv_path)
        self._df: Optional[pd.DataFrame] = None

    @property
    def is_loaded(self) -> bool:
        return self._df is not None

    @property
    def count(self) -> int:
        return 0 if self._df is None else len(self._df)

    def load(self) -> pd.DataFrame:
        """
        Read and normalize the CSV.

        Fields are trimmed and NFC-normalized; rows with empty text are dropped.

        Raises:
            MandarinDeckError: If the file does not exist or cannot be parsed
        """
        if not self.csv_path.exists():
            raise MandarinDeckError(f"Input file not found: {self.csv_path}")
        try:
            df = pd.read_csv(
                self.csv_path,
                header=None,
                names=COLUMNS,
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                skipinitialspace=True,
                encoding="utf-8-sig",
                engine="python",
            )
        except pd.errors.EmptyDataError:
            df = pd.DataFrame(columns=COLUMNS)
        except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
            raise MandarinDeckError(f"Could not read {self.csv_path}: {e}") from e

        for column in COLUMNS:
            df[column] = df[column].map(_clean)

        empty = df["hanzi"] == ""
        if empty.any():
            logger.warning(f"Skipping {int(empty.sum())} row(s) with no Mandarin text")
        self._df = df[~empty].reset_index(drop=True)
        logger.debug(f"Loaded {len(self._df)} rows from {self.csv_path}")
        return self._df

    def get_all(self) -> pd.DataFrame:
        if self._df is None:
            self.load()
        return self._df.copy()

    def rows(self) -> List[VocabularyRow]:
        """Rows in file order; an empty override becomes None."""
        df = self.get_all()
        return [
            VocabularyRow(index=index, hanzi=row.hanzi, definition=row.definition or None)
            for index, row in enumerate(df.itertuples(index=False))
        ]

    @classmethod
    def load_from_csv(cls, csv_path: str) -> "VocabularyService":
        service = cls(csv_path)
        service.load()
        return service
