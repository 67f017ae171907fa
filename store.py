"""CSV-backed record store.

The whole file is the unit of durability: read it once, change records in
memory, then write every row back.
"""

import csv
import os
import tempfile
from typing import Callable, Iterable

from models import CSV_HEADER, Record


class RecordStore:
    """Ordered records of one data file."""

    def __init__(self, path: str, records: Iterable[Record] = ()):
        self.path = path
        self.header = list(CSV_HEADER)
        self.records: list[Record] = []
        for record in records:
            self.add(record)

    @classmethod
    def read(cls, path: str) -> "RecordStore":
        """Load all rows of a CSV data file. A missing or empty file gives an empty store."""
        store = cls(path)
        if not os.path.exists(path):
            return store

        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header and header != CSV_HEADER:
                raise ValueError(
                    f"Unexpected header in {path}: {','.join(header)} "
                    f"(expected {','.join(CSV_HEADER)})"
                )
            for row in reader:
                if not row:
                    continue
                store.records.append(Record.from_row(row, len(store.records)))
        return store

    def write(self) -> None:
        """Replace the data file with the current records."""
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(prefix=".worklog-", suffix=".csv", dir=directory)
        try:
            with os.fdopen(fd, "w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(self.header)
                writer.writerows(r.as_row() for r in self.records)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def add(self, record: Record) -> Record:
        """Append a record and give it the next row index."""
        record.index = len(self.records)
        self.records.append(record)
        return record

    def update(self, record: Record) -> None:
        """Replace the stored record that has the same row index."""
        if not 0 <= record.index < len(self.records):
            raise IndexError(f"No record at row {record.index} in {self.path}")
        self.records[record.index] = record

    def filter(self, predicate: Callable[[Record], bool]) -> list[Record]:
        return [r for r in self.records if predicate(r)]

    def unpushed(self) -> list[Record]:
        return self.filter(lambda r: not r.is_pushed)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)
