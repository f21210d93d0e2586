import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd  # type: ignore

from ..constants import CSV_COLUMNS, KEYWORD_SEPARATOR
from ..exceptions import StorageError


class CSVHandler:
    """Writes one run's annotated questions as JSON and CSV under a shared base name."""

    def __init__(self, output_dir: str = "output", logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.output_dir = Path(output_dir)

    def _path(self, name: str, suffix: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / f"{name}.{suffix}"

    def save_json(self, name: str, data: Any) -> Path:
        """Serialize data with 2-space indentation; StorageError if it is not JSON-serializable."""
        try:
            payload = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            self.logger.error(f"save_json: value is not JSON-serializable: {e}")
            raise StorageError(f"save_json: value is not JSON-serializable: {e}")

        path = self._path(name, 'json')
        path.write_text(payload, encoding='utf-8')
        self.logger.info(f"Saved JSON: {path}")
        return path

    def to_frame(self, rows: List[Dict[str, Any]]) -> pd.DataFrame:
        """Rows as a DataFrame in CSV column order with keywords flattened."""
        flattened = []
        for row in rows:
            keywords = row.get('matched_keywords')
            if isinstance(keywords, (list, tuple)):
                keywords = KEYWORD_SEPARATOR.join(keywords)
            flattened.append({**row, 'matched_keywords': keywords if keywords is not None else ''})

        df = pd.DataFrame(flattened)
        for col in CSV_COLUMNS:
            if col not in df.columns:
                df[col] = ''
        return df[CSV_COLUMNS]

    def save_csv(self, name: str, rows: List[Dict[str, Any]]) -> Path:
        path = self._path(name, 'csv')
        self.to_frame(rows).to_csv(path, index=False)
        self.logger.info(f"Saved CSV: {path} ({len(rows)} rows)")
        return path
