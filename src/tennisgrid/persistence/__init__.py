"""SQLite cache for the precomputed category compatibility matrix."""

from __future__ import annotations

import json
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from tennisgrid.models import CategoryMetadata, CompatibilityRecord


@dataclass
class MatrixSummary:
    categories: int
    pairs: int
    valid_pairs: int
    built_at: Optional[datetime]


class CompatibilityStore:
    """SQLite-backed store, rebuilt wholesale by the offline job."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: Path | str = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                conn = sqlite3.connect(self.db_path)
            except sqlite3.OperationalError:
                fallback_dir = Path(tempfile.gettempdir()) / "tennisgrid-runtime"
                fallback_dir.mkdir(parents=True, exist_ok=True)
                fallback = fallback_dir / "tennisgrid.sqlite"
                conn = sqlite3.connect(fallback)
                self.db_path = fallback
                self._create_schema(conn)
        else:
            conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS category_compatibility (
                category_a TEXT NOT NULL,
                category_b TEXT NOT NULL,
                is_compatible INTEGER NOT NULL,
                player_count INTEGER NOT NULL,
                sample_players_json TEXT NOT NULL,
                PRIMARY KEY (category_a, category_b)
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS category_metadata (
                category_id TEXT PRIMARY KEY,
                category_type TEXT NOT NULL,
                category_label TEXT NOT NULL,
                compatible_count INTEGER NOT NULL,
                total_player_count INTEGER NOT NULL,
                avg_pair_player_count REAL NOT NULL,
                quality_score INTEGER NOT NULL,
                is_safe INTEGER NOT NULL,
                is_active INTEGER NOT NULL,
                built_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def replace_matrix(
        self,
        records: Iterable[CompatibilityRecord],
        metadata: Iterable[CategoryMetadata],
        *,
        built_at: Optional[datetime] = None,
    ) -> None:
        """Clear both tables and write the new matrix in one transaction."""

        built_at = built_at or datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute("DELETE FROM category_compatibility")
            conn.execute("DELETE FROM category_metadata")
            conn.executemany(
                """
                INSERT INTO category_compatibility (
                    category_a, category_b, is_compatible, player_count, sample_players_json
                ) VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (
                        record.category_a,
                        record.category_b,
                        int(record.is_compatible),
                        record.player_count,
                        json.dumps(record.sample_players),
                    )
                    for record in records
                ],
            )
            conn.executemany(
                """
                INSERT INTO category_metadata (
                    category_id, category_type, category_label, compatible_count,
                    total_player_count, avg_pair_player_count, quality_score,
                    is_safe, is_active, built_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        item.category_id,
                        item.category_type,
                        item.category_label,
                        item.compatible_count,
                        item.total_player_count,
                        item.avg_pair_player_count,
                        item.quality_score,
                        int(item.is_safe),
                        int(item.is_active),
                        built_at.isoformat(),
                    )
                    for item in metadata
                ],
            )
            conn.commit()

    def get_pair(self, category_a: str, category_b: str) -> Optional[CompatibilityRecord]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM category_compatibility WHERE category_a = ? AND category_b = ?",
                (category_a, category_b),
            ).fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    def load_matrix(self) -> Dict[Tuple[str, str], CompatibilityRecord]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM category_compatibility").fetchall()
        return {
            (row["category_a"], row["category_b"]): self._row_to_record(row) for row in rows
        }

    def load_metadata(self) -> List[CategoryMetadata]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM category_metadata ORDER BY quality_score DESC, category_id"
            ).fetchall()
        return [self._row_to_metadata(row) for row in rows]

    def summary(self) -> MatrixSummary:
        with self._connect() as conn:
            pair_row = conn.execute(
                "SELECT COUNT(*) AS pairs, COALESCE(SUM(is_compatible), 0) AS valid FROM category_compatibility"
            ).fetchone()
            meta_row = conn.execute(
                "SELECT COUNT(*) AS categories, MAX(built_at) AS built_at FROM category_metadata"
            ).fetchone()
        built_at = meta_row["built_at"]
        return MatrixSummary(
            categories=int(meta_row["categories"]),
            pairs=int(pair_row["pairs"]),
            valid_pairs=int(pair_row["valid"]),
            built_at=datetime.fromisoformat(built_at) if built_at else None,
        )

    def _row_to_record(self, row: sqlite3.Row) -> CompatibilityRecord:
        return CompatibilityRecord(
            category_a=row["category_a"],
            category_b=row["category_b"],
            is_compatible=bool(row["is_compatible"]),
            player_count=int(row["player_count"]),
            sample_players=json.loads(row["sample_players_json"]),
        )

    def _row_to_metadata(self, row: sqlite3.Row) -> CategoryMetadata:
        return CategoryMetadata(
            category_id=row["category_id"],
            category_type=row["category_type"],
            category_label=row["category_label"],
            compatible_count=int(row["compatible_count"]),
            total_player_count=int(row["total_player_count"]),
            avg_pair_player_count=float(row["avg_pair_player_count"]),
            quality_score=int(row["quality_score"]),
            is_safe=bool(row["is_safe"]),
            is_active=bool(row["is_active"]),
        )
