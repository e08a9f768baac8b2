"""Quote-aware tokenizer shared by the CSV dialects."""

import csv


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line, accepting quoted and unquoted fields.

    A line the csv module cannot tokenize yields no fields, so the parser
    records it as a skipped row.

    Example:
        >>> split_csv_line('"rs1","1","100","AA"')
        ['rs1', '1', '100', 'AA']
        >>> split_csv_line("rs1,1,100,AA")
        ['rs1', '1', '100', 'AA']
    """
    try:
        return next(csv.reader([line]), [])
    except csv.Error:
        return []
